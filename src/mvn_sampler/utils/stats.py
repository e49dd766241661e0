"""
Empirical moment estimators for checking samples against the target distribution.
"""

from typing import Any, Dict

import torch


def _as_samples(samples) -> torch.Tensor:
    samples = torch.as_tensor(samples)
    if not samples.is_floating_point():
        samples = samples.to(torch.float64)
    if samples.dim() != 2:
        raise ValueError(f"samples must be 2D (num_samples, dim), got shape {tuple(samples.shape)}")
    return samples


def empirical_mean(samples) -> torch.Tensor:
    """Mean over the sample axis; samples has shape (num_samples, dim)."""
    samples = _as_samples(samples)
    if samples.shape[0] == 0:
        raise ValueError("empirical_mean needs at least one sample")
    return samples.mean(dim=0)


def empirical_covariance(samples) -> torch.Tensor:
    """Unbiased sample covariance (divides by n - 1)."""
    samples = _as_samples(samples)
    if samples.shape[0] < 2:
        raise ValueError("empirical_covariance needs at least two samples")
    return torch.cov(samples.T, correction=1).reshape(samples.shape[1], samples.shape[1])


def standard_error(covariance, n: int) -> torch.Tensor:
    """Per-coordinate standard error of the mean, sqrt(Sigma_ii / n)."""
    if n < 1:
        raise ValueError("n must be at least 1")
    covariance = torch.as_tensor(covariance)
    if not covariance.is_floating_point():
        covariance = covariance.to(torch.float64)
    return torch.sqrt(covariance.diagonal() / n)


def summarize(samples) -> Dict[str, Any]:
    samples = _as_samples(samples)
    n = samples.shape[0]
    summary: Dict[str, Any] = {"n": n, "mean": None, "covariance": None}
    if n >= 1:
        summary["mean"] = empirical_mean(samples)
    if n >= 2:
        summary["covariance"] = empirical_covariance(samples)
    return summary
