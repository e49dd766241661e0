"""
Utility functions: covariance factorisation, random number helpers and
empirical moment estimators.
"""

from .linalg import (
    as_matrix,
    as_vector,
    check_symmetric,
    cholesky_lower,
    default_tolerance,
    lower_factor_from_transform,
)
from .rng import make_generator, standard_normal
from .stats import empirical_covariance, empirical_mean, standard_error, summarize

__all__ = [
    "as_matrix",
    "as_vector",
    "check_symmetric",
    "cholesky_lower",
    "default_tolerance",
    "lower_factor_from_transform",
    "make_generator",
    "standard_normal",
    "empirical_covariance",
    "empirical_mean",
    "standard_error",
    "summarize",
]
