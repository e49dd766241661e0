"""Plotting helpers for visualising samples and covariance contours."""

from .plots import (
    covariance_ellipse,
    plot_samples_2D,
    remove_frame,
)

__all__ = [
    'covariance_ellipse',
    'plot_samples_2D',
    'remove_frame',
]
