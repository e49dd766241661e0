"""
Base class for distributions that draw real-valued vectors.
"""

from abc import ABC, abstractmethod
from typing import Optional, Tuple, Union

import torch


class BaseDistribution(ABC):
    """
    Abstract base class for samplers in this package.

    Requirements:
    - dim: dimensionality of samples produced
    - name: human-readable identifier for the distribution
    - sample(): produce samples as a tensor with trailing dimension dim
    """

    def __init__(self, dim: int, name: str):
        if not isinstance(dim, int) or dim < 1:
            raise ValueError("dim must be a positive integer")
        if not isinstance(name, str) or len(name.strip()) == 0:
            raise ValueError("name must be a non-empty string")
        self._dim = int(dim)
        self._name = name

    @staticmethod
    def _normalize_shape(sample_shape: Union[int, Tuple[int, ...]]) -> Tuple[int, ...]:
        if isinstance(sample_shape, int):
            sample_shape = (sample_shape,)
        sample_shape = tuple(int(s) for s in sample_shape)
        if any(s < 0 for s in sample_shape):
            raise ValueError(f"sample_shape must be non-negative, got {sample_shape}")
        return sample_shape

    @property
    def dim(self) -> int:
        return self._dim

    @property
    def name(self) -> str:
        return self._name

    @abstractmethod
    def sample(
        self,
        sample_shape: Union[int, Tuple[int, ...]] = (),
        generator: Optional[torch.Generator] = None,
    ) -> torch.Tensor:
        """
        Generate samples.

        Args:
            sample_shape: Optional leading shape for number of samples
                          (e.g., 10, (batch_size,), or (num_batches, batch_size)).
            generator: Optional random source overriding the distribution's default.
        Returns:
            Tensor of shape (*sample_shape, dim)
        """
        raise NotImplementedError

    def __call__(self, sample_shape: Union[int, Tuple[int, ...]] = ()) -> torch.Tensor:
        return self.sample(sample_shape)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, dim={self.dim})"
