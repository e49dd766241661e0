"""
Distributions that can be sampled.

The package's single concrete distribution is the multivariate normal sampler.
"""

from .base import BaseDistribution
from .gaussian import MvNormalSampler

__all__ = [
    "BaseDistribution",
    "MvNormalSampler",
]
