import pytest

torch = pytest.importorskip("torch")
matplotlib = pytest.importorskip("matplotlib")
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from mvn_sampler import MvNormalSampler, make_generator
from mvn_sampler.plotting import covariance_ellipse, plot_samples_2D


def test_unit_ellipse_is_circle():
    ellipse = covariance_ellipse(torch.zeros(2), torch.eye(2), num_sigma=1.0, resolution=50)
    assert ellipse.shape == (50, 2)
    assert np.allclose(np.linalg.norm(ellipse, axis=1), 1.0, atol=1e-6)


def test_ellipse_follows_factor():
    L = torch.tensor([[2.0, 0.0], [0.0, 0.5]], dtype=torch.float64)
    mean = torch.tensor([1.0, -1.0], dtype=torch.float64)
    ellipse = covariance_ellipse(mean, L, num_sigma=2.0)
    assert np.isclose(ellipse[:, 0].max(), 5.0, atol=1e-3)
    assert np.isclose(ellipse[:, 1].min(), -2.0, atol=1e-3)


def test_plot_samples_2D(tmp_path):
    sampler = MvNormalSampler([0.0, 0.0], [[2.0, 1.0], [1.0, 2.0]], generator=make_generator(0))
    samples = sampler.draw_batch(300)
    path = tmp_path / "plot.png"
    ax = plot_samples_2D(samples, sampler=sampler, save_path=str(path))
    assert path.exists()
    # one line per sigma level plus the mean marker
    assert len(ax.lines) == 4
    plt.close(ax.figure)


def test_plot_rejects_non_2D_samples():
    with pytest.raises(ValueError):
        plot_samples_2D(torch.zeros(10, 3))
