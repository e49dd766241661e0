"""
Random number helpers.

Samplers never seed torch's global RNG; generators are created here and passed
around explicitly. A torch.Generator is not safe to share between threads, so
concurrent callers should each hold their own.
"""

from typing import Optional, Tuple, Union

import torch


def make_generator(seed: Optional[int] = None, device: Union[str, torch.device] = "cpu") -> torch.Generator:
    """
    Create a torch.Generator on `device`.

    Args:
        seed: Seed for reproducible draws. If None, the generator is seeded from
              fresh entropy.
        device: Device the generator produces numbers on.
    """
    generator = torch.Generator(device=device)
    if seed is None:
        generator.seed()
    else:
        if isinstance(seed, bool) or not isinstance(seed, int) or seed < 0:
            raise ValueError(f"seed must be a non-negative integer, got {seed!r}")
        generator.manual_seed(seed)
    return generator


def standard_normal(
    dim: int,
    sample_shape: Union[int, Tuple[int, ...]] = (),
    generator: Optional[torch.Generator] = None,
    dtype: torch.dtype = torch.float64,
    device: Union[str, torch.device, None] = None,
) -> torch.Tensor:
    """
    Draw independent N(0, 1) variates of shape (*sample_shape, dim).

    With generator=None torch's global RNG is used.
    """
    if isinstance(sample_shape, int):
        sample_shape = (sample_shape,)
    if any(s < 0 for s in sample_shape):
        raise ValueError(f"sample_shape must be non-negative, got {tuple(sample_shape)}")
    return torch.randn(*sample_shape, dim, generator=generator, dtype=dtype, device=device)
