from __future__ import annotations

import os
import shutil
import warnings
from pathlib import Path
from typing import Optional, Sequence

import numpy as np
import torch
import matplotlib.pyplot as plt

# Disable LaTeX by default; enable with USE_TEX=1 if available
use_tex = os.environ.get("USE_TEX", "0") == "1"
if use_tex and shutil.which("latex") is None:
    warnings.warn("USE_TEX requested but LaTeX not found; falling back to Matplotlib text rendering.")
    use_tex = False
plt.rcParams['text.usetex'] = use_tex
plt.rcParams["font.family"] = "sans-serif"
plt.rcParams["mathtext.fontset"] = "dejavuserif"


def remove_frame(ax):
    ax.spines['top'].set_visible(False)
    ax.spines['right'].set_visible(False)


def covariance_ellipse(mean: torch.Tensor,
                       cholesky_factor: torch.Tensor,
                       num_sigma: float = 1.0,
                       resolution: int = 200) -> np.ndarray:
    """Points mean + k L [cos t, sin t]^T tracing the k-sigma contour, shape (resolution, 2)."""
    if cholesky_factor.shape != (2, 2):
        raise ValueError(f"covariance_ellipse needs a 2x2 factor, got shape {tuple(cholesky_factor.shape)}")
    t = torch.linspace(0, 2 * np.pi, resolution, dtype=cholesky_factor.dtype)
    circle = torch.stack([torch.cos(t), torch.sin(t)], dim=-1)
    ellipse = num_sigma * circle @ cholesky_factor.T + mean
    return ellipse.detach().cpu().numpy()


def plot_samples_2D(samples: torch.Tensor,
                    sampler=None,
                    ax=None,
                    num_sigmas: Sequence[float] = (1, 2, 3),
                    save_path: Optional[str] = None,
                    show: bool = False):
    """
    Scatter 2D samples and, if a sampler is given, its k-sigma ellipses and mean.

    Returns the axes that were drawn on.
    """
    samples = torch.as_tensor(samples)
    if samples.dim() != 2 or samples.shape[1] != 2:
        raise ValueError(f"plot_samples_2D needs samples of shape (n, 2), got {tuple(samples.shape)}")

    if ax is None:
        fig, ax = plt.subplots(figsize=(3.5, 3.5))
    else:
        fig = ax.figure

    xy = samples.detach().cpu().numpy()
    ax.scatter(xy[:, 0], xy[:, 1], s=2, alpha=0.3, color='tab:blue', rasterized=True)

    if sampler is not None:
        mean = sampler.mean
        L = sampler.cholesky_factor
        for k in num_sigmas:
            ellipse = covariance_ellipse(mean, L, num_sigma=k)
            ax.plot(ellipse[:, 0], ellipse[:, 1], 'k-', linewidth=0.8, alpha=0.8)
        mean_np = mean.detach().cpu().numpy()
        ax.plot(mean_np[0], mean_np[1], 'r+', markersize=8)

    ax.set_xlabel(r'$x_1$')
    ax.set_ylabel(r'$x_2$')
    ax.set_aspect('equal')
    remove_frame(ax)

    fig.tight_layout()
    if save_path is not None:
        Path(save_path).parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(save_path, dpi=200)
    if show:
        plt.show()
    return ax
