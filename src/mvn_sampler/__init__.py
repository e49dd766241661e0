"""
mvn_sampler

Sampling from the multivariate normal distribution by Cholesky factorisation.

Example usage:
    from mvn_sampler import MvNormalSampler, make_generator

    sampler = MvNormalSampler(
        mean=[5.0, -3.0],
        covariance_matrix=[[2.0, 1.0], [1.0, 2.0]],
        generator=make_generator(seed=0),
    )
    x = sampler.draw()               # shape (2,)
    xs = sampler.draw_batch(10_000)  # shape (10000, 2)
"""

__version__ = "0.1.0"

from .errors import DimensionMismatchError, FactorizationError, SamplerError
from .distributions import BaseDistribution, MvNormalSampler
from .config import SamplerConfig, load_config
from .utils import make_generator, standard_normal, empirical_mean, empirical_covariance

__all__ = [
    # Core
    "MvNormalSampler",
    "BaseDistribution",

    # Errors
    "SamplerError",
    "DimensionMismatchError",
    "FactorizationError",

    # Config
    "SamplerConfig",
    "load_config",

    # Utils
    "make_generator",
    "standard_normal",
    "empirical_mean",
    "empirical_covariance",
]
