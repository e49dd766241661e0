import pytest

torch = pytest.importorskip("torch")
from mvn_sampler.utils.stats import (
    empirical_covariance,
    empirical_mean,
    standard_error,
    summarize,
)


def test_empirical_moments_of_small_dataset():
    samples = torch.tensor([[0.0, 0.0], [2.0, 2.0]], dtype=torch.float64)
    assert torch.allclose(empirical_mean(samples), torch.tensor([1.0, 1.0], dtype=torch.float64))
    assert torch.allclose(
        empirical_covariance(samples),
        torch.tensor([[2.0, 2.0], [2.0, 2.0]], dtype=torch.float64),
    )


def test_empirical_covariance_one_dimensional():
    samples = torch.tensor([[1.0], [3.0]], dtype=torch.float64)
    cov = empirical_covariance(samples)
    assert cov.shape == (1, 1)
    assert cov.item() == pytest.approx(2.0)


def test_standard_error():
    cov = torch.tensor([[4.0, 0.0], [0.0, 9.0]], dtype=torch.float64)
    se = standard_error(cov, 100)
    assert torch.allclose(se, torch.tensor([0.2, 0.3], dtype=torch.float64))


def test_errors_on_too_few_samples():
    with pytest.raises(ValueError):
        empirical_mean(torch.empty(0, 2))
    with pytest.raises(ValueError):
        empirical_covariance(torch.zeros(1, 2))
    with pytest.raises(ValueError):
        empirical_mean(torch.zeros(3))


def test_summarize_handles_empty_batch():
    summary = summarize(torch.empty(0, 3))
    assert summary == {"n": 0, "mean": None, "covariance": None}


def test_integer_samples_are_converted():
    samples = torch.tensor([[0, 0], [2, 2], [4, 4]])
    assert torch.allclose(empirical_mean(samples), torch.tensor([2.0, 2.0], dtype=torch.float64))
    assert empirical_covariance(samples).dtype == torch.float64
    assert torch.allclose(standard_error(torch.tensor([[4, 0], [0, 9]]), 1), torch.tensor([2.0, 3.0], dtype=torch.float64))
