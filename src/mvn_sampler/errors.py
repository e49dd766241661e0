"""
Exceptions raised while building a multivariate normal sampler.

Both kinds are caller-input errors surfaced at construction time; nothing in
the package retries or recovers from them.
"""


class SamplerError(ValueError):
    """Base class for invalid mean / covariance inputs."""


class DimensionMismatchError(SamplerError):
    """Mean and covariance shapes disagree, or the covariance is not square."""


class FactorizationError(SamplerError):
    """The covariance is not symmetric positive semi-definite."""
