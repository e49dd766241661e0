"""
Multivariate normal sampler built from a mean vector and a covariance matrix.
"""

import math
import warnings
from typing import Optional, Tuple, Union

import torch

from ..errors import DimensionMismatchError, FactorizationError
from ..utils.linalg import (
    as_matrix,
    as_vector,
    check_symmetric,
    cholesky_lower,
    default_tolerance,
    lower_factor_from_transform,
)
from ..utils.rng import make_generator, standard_normal
from .base import BaseDistribution


class MvNormalSampler(BaseDistribution):
    """
    Draws independent samples from N(mean, covariance_matrix).

    The covariance is factored once at construction as L L^T and every draw
    maps a standard normal vector Z to L Z + mean.

    Args:
        mean: Sequence or tensor of shape (dim,)
        covariance_matrix: Symmetric positive semi-definite matrix of shape (dim, dim)
        generator: Default torch.Generator used by draws. None falls back to
                   torch's global RNG. Each call can also pass its own generator,
                   which is how threads sharing one sampler should draw.
        tol: Pivot tolerance for the factorisation, see `cholesky_lower`.
        require_positive_definite: Reject singular covariance matrices.
        name: Optional name; defaults to "MvNormal{dim}D".

    Raises:
        DimensionMismatchError: mean is not 1D, covariance is not square, or
                                their sizes differ.
        FactorizationError: covariance is not symmetric positive semi-definite.
    """

    def __init__(
        self,
        mean,
        covariance_matrix,
        generator: Optional[torch.Generator] = None,
        tol: Optional[float] = None,
        require_positive_definite: bool = False,
        name: Optional[str] = None,
    ):
        if tol is not None and tol < 0:
            raise ValueError(f"tol must be non-negative, got {tol}")
        mean, covariance_matrix = self._validate_inputs(mean, covariance_matrix)

        check_symmetric(covariance_matrix, atol=tol)
        L, rank = cholesky_lower(
            covariance_matrix, tol=tol, require_positive_definite=require_positive_definite
        )
        self._setup(mean, covariance_matrix, L, rank, generator, name)

    @staticmethod
    def _validate_inputs(mean, covariance_matrix) -> Tuple[torch.Tensor, torch.Tensor]:
        mean = as_vector(mean)
        covariance_matrix = as_matrix(covariance_matrix, device=mean.device)

        dtype = torch.promote_types(mean.dtype, covariance_matrix.dtype)
        mean = mean.to(dtype)
        covariance_matrix = covariance_matrix.to(dtype)

        if covariance_matrix.shape[0] != mean.shape[0]:
            raise DimensionMismatchError(
                f"covariance has shape {tuple(covariance_matrix.shape)} "
                f"but mean has length {mean.shape[0]}"
            )
        return mean, covariance_matrix

    def _setup(self, mean, covariance_matrix, L, rank, generator, name):
        dim = mean.shape[0]
        super().__init__(dim=dim, name=name or f"MvNormal{dim}D")
        if rank < dim:
            warnings.warn(
                f"covariance is singular (rank {rank} of {dim}); samples lie on a {rank}-dimensional subspace",
                RuntimeWarning,
                stacklevel=3,
            )

        self._mean = mean.clone()
        self._covariance_matrix = covariance_matrix.clone()
        self._cholesky_factor = L
        self._rank = rank
        self.generator = generator

    @classmethod
    def from_transform(
        cls,
        transform,
        mean=None,
        generator: Optional[torch.Generator] = None,
        tol: Optional[float] = None,
        require_positive_definite: bool = False,
        name: Optional[str] = None,
    ) -> "MvNormalSampler":
        """
        Sampler for X = A Z + mean with Z standard normal, i.e. covariance A A^T.

        `transform` may be rectangular (dim, k); the result has dimension dim.
        The factor comes straight from A (QR of A^T), so A A^T is never
        factored and a rank-deficient A is always accepted. The rank counts
        diagonal entries of L whose square exceeds the pivot tolerance.
        """
        if tol is not None and tol < 0:
            raise ValueError(f"tol must be non-negative, got {tol}")
        A = torch.as_tensor(transform)
        if not A.is_floating_point():
            A = A.to(torch.float64)
        if A.dim() != 2:
            raise DimensionMismatchError(f"transform must be a 2D matrix, got shape {tuple(A.shape)}")
        if mean is None:
            mean = torch.zeros(A.shape[0], dtype=A.dtype, device=A.device)

        covariance_matrix = A @ A.T
        # A A^T is symmetric up to rounding
        covariance_matrix = 0.5 * (covariance_matrix + covariance_matrix.T)
        mean, covariance_matrix = cls._validate_inputs(mean, covariance_matrix)

        L = lower_factor_from_transform(A.to(covariance_matrix.dtype))
        threshold = default_tolerance(covariance_matrix) if tol is None else tol
        rank = int((L.diagonal().pow(2) > threshold).sum().item())
        if require_positive_definite and rank < L.shape[0]:
            raise FactorizationError(
                f"transform gives a singular covariance (rank {rank} of {L.shape[0]}); positive definite required"
            )

        sampler = cls.__new__(cls)
        sampler._setup(mean, covariance_matrix, L, rank, generator, name)
        return sampler

    @classmethod
    def from_config(cls, config) -> "MvNormalSampler":
        """Build a sampler (with a seeded generator) from a SamplerConfig."""
        dtype = getattr(torch, config.dtype)
        mean = torch.tensor(config.mean, dtype=dtype, device=config.device)
        covariance_matrix = torch.tensor(config.covariance, dtype=dtype, device=config.device)
        return cls(
            mean,
            covariance_matrix,
            generator=make_generator(config.seed, device=config.device),
            tol=config.tol,
            require_positive_definite=config.require_positive_definite,
        )

    @property
    def mean(self) -> torch.Tensor:
        return self._mean.clone()

    @property
    def covariance_matrix(self) -> torch.Tensor:
        return self._covariance_matrix.clone()

    @property
    def cholesky_factor(self) -> torch.Tensor:
        """Lower-triangular L with L L^T equal to the covariance."""
        return self._cholesky_factor.clone()

    @property
    def rank(self) -> int:
        return self._rank

    @property
    def is_singular(self) -> bool:
        return self._rank < self.dim

    @property
    def dtype(self) -> torch.dtype:
        return self._mean.dtype

    @property
    def device(self) -> torch.device:
        return self._mean.device

    def sample(
        self,
        sample_shape: Union[int, Tuple[int, ...]] = (),
        generator: Optional[torch.Generator] = None,
    ) -> torch.Tensor:
        sample_shape = self._normalize_shape(sample_shape)
        if generator is None:
            generator = self.generator
        z = standard_normal(
            self.dim, sample_shape, generator=generator, dtype=self.dtype, device=self.device
        )
        # row-vector form of L z + mean for every leading index
        return z @ self._cholesky_factor.T + self._mean

    def draw(self, generator: Optional[torch.Generator] = None) -> torch.Tensor:
        """Draw a single sample of shape (dim,)."""
        if generator is None:
            generator = self.generator
        z = standard_normal(self.dim, generator=generator, dtype=self.dtype, device=self.device)
        return self._cholesky_factor @ z + self._mean

    def draw_batch(self, n: int, generator: Optional[torch.Generator] = None) -> torch.Tensor:
        """
        Draw `n` independent samples, one per row.

        Returns:
            Tensor of shape (n, dim). n=0 gives an empty (0, dim) tensor.
        """
        if isinstance(n, bool) or not isinstance(n, int):
            raise ValueError(f"n must be an integer, got {n!r}")
        if n < 0:
            raise ValueError(f"n must be non-negative, got {n}")
        return self.sample((n,), generator=generator)

    def log_prob(self, value) -> torch.Tensor:
        """
        Log density at `value` of shape (..., dim).

        Only defined for a non-singular covariance.
        """
        if self.is_singular:
            raise FactorizationError("log_prob is undefined for a singular covariance")
        value = torch.as_tensor(value, dtype=self.dtype, device=self.device)
        if value.shape[-1:] != (self.dim,):
            raise DimensionMismatchError(
                f"value must have trailing dimension {self.dim}, got shape {tuple(value.shape)}"
            )
        diff = (value - self._mean).unsqueeze(-1)
        L = self._cholesky_factor.expand(*diff.shape[:-2], self.dim, self.dim)
        white = torch.linalg.solve_triangular(L, diff, upper=False).squeeze(-1)
        half_log_det = self._cholesky_factor.diagonal().log().sum()
        return -0.5 * (white.pow(2).sum(-1) + self.dim * math.log(2 * math.pi)) - half_log_det

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, dim={self.dim}, rank={self.rank})"
