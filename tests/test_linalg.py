import math

import pytest

torch = pytest.importorskip("torch")
from mvn_sampler.errors import DimensionMismatchError, FactorizationError
from mvn_sampler.utils.linalg import (
    as_matrix,
    as_vector,
    check_symmetric,
    cholesky_lower,
    default_tolerance,
    lower_factor_from_transform,
)


def test_cholesky_of_known_2x2():
    cov = torch.tensor([[2.0, 1.0], [1.0, 2.0]], dtype=torch.float64)
    L, rank = cholesky_lower(cov)
    expected = torch.tensor(
        [[math.sqrt(2.0), 0.0], [1.0 / math.sqrt(2.0), math.sqrt(1.5)]], dtype=torch.float64
    )
    assert rank == 2
    assert torch.allclose(L, expected, atol=1e-12)
    assert torch.allclose(L @ L.T, cov, atol=1e-12)
    assert torch.equal(L, torch.tril(L))


def test_cholesky_of_rank_deficient_psd_matrix():
    B = torch.tensor([[1.0, 0.0], [1.0, 1.0], [0.0, 1.0]], dtype=torch.float64)
    cov = B @ B.T
    L, rank = cholesky_lower(cov)
    assert rank == 2
    assert torch.allclose(L @ L.T, cov, atol=1e-12)
    assert L[2, 2].item() == 0.0


def test_negative_eigenvalue_is_rejected():
    cov = torch.tensor([[1.0, 2.0], [2.0, 1.0]], dtype=torch.float64)
    with pytest.raises(FactorizationError):
        cholesky_lower(cov)


def test_zero_pivot_with_nonzero_column_is_rejected():
    cov = torch.tensor([[0.0, 1.0], [1.0, 1.0]], dtype=torch.float64)
    with pytest.raises(FactorizationError):
        cholesky_lower(cov)


def test_tiny_negative_pivot_within_tolerance_is_accepted():
    cov = torch.tensor([[4.0, 2.0], [2.0, 1.0 - 1e-15]], dtype=torch.float64)
    L, rank = cholesky_lower(cov)
    assert rank == 1
    assert torch.allclose(L @ L.T, cov, atol=1e-12)


def test_tiny_negative_pivot_rejected_with_zero_tolerance():
    cov = torch.tensor([[4.0, 2.0], [2.0, 1.0 - 1e-15]], dtype=torch.float64)
    with pytest.raises(FactorizationError):
        cholesky_lower(cov, tol=0.0)


def test_require_positive_definite_rejects_singular():
    cov = torch.tensor([[1.0, 1.0], [1.0, 1.0]], dtype=torch.float64)
    with pytest.raises(FactorizationError):
        cholesky_lower(cov, require_positive_definite=True)


def test_negative_tolerance_is_invalid():
    with pytest.raises(ValueError):
        cholesky_lower(torch.eye(2, dtype=torch.float64), tol=-1.0)


def test_default_tolerance_scales_with_diagonal():
    small = default_tolerance(torch.eye(3, dtype=torch.float64))
    large = default_tolerance(100.0 * torch.eye(3, dtype=torch.float64))
    assert small == pytest.approx(3e3 * torch.finfo(torch.float64).eps)
    assert large == pytest.approx(100 * small)


def test_check_symmetric():
    check_symmetric(torch.tensor([[2.0, 1.0], [1.0, 2.0]], dtype=torch.float64))
    with pytest.raises(FactorizationError):
        check_symmetric(torch.tensor([[1.0, 0.5], [0.0, 1.0]], dtype=torch.float64))


def test_conversions_default_to_float64():
    assert as_vector([1, 2]).dtype == torch.float64
    assert as_matrix([[1, 0], [0, 1]]).dtype == torch.float64
    assert as_vector(torch.zeros(2, dtype=torch.float32)).dtype == torch.float32


def test_conversion_shape_errors():
    with pytest.raises(DimensionMismatchError):
        as_vector([[1.0, 2.0]])
    with pytest.raises(DimensionMismatchError):
        as_vector([])
    with pytest.raises(DimensionMismatchError):
        as_matrix([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])
    with pytest.raises(ValueError):
        as_vector([0.0, float("nan")])


def test_ragged_input_is_a_dimension_mismatch():
    with pytest.raises(DimensionMismatchError):
        as_matrix([[1.0, 0.0], [0.0]])
    with pytest.raises(DimensionMismatchError):
        as_vector([[1.0, 2.0], [3.0]])


def test_non_numeric_input_is_a_type_error():
    with pytest.raises(TypeError):
        as_matrix([["a", "b"], ["c", "d"]])
    with pytest.raises(TypeError):
        as_vector(["x", "y"])


@pytest.mark.parametrize("seed", range(10))
def test_rank_deficient_gram_matrix_is_factored(seed):
    generator = torch.Generator().manual_seed(seed)
    B = torch.randn(20, 5, generator=generator, dtype=torch.float64)
    cov = B @ B.T
    cov = 0.5 * (cov + cov.T)
    L, rank = cholesky_lower(cov)
    assert rank == 5
    assert torch.equal(L, torch.tril(L))
    assert torch.allclose(L @ L.T, cov, atol=1e-9)


def test_rank_one_gram_matrix_with_rounding():
    B = torch.tensor([[1.0], [1.0 / 3.0], [2.0 / 7.0]], dtype=torch.float64)
    cov = B @ B.T
    L, rank = cholesky_lower(cov)
    assert rank == 1
    assert torch.allclose(L @ L.T, cov, atol=1e-12)


@pytest.mark.parametrize("shape", [(6, 2), (20, 5), (3, 3), (2, 5)])
def test_lower_factor_from_transform(shape):
    generator = torch.Generator().manual_seed(0)
    A = torch.randn(*shape, generator=generator, dtype=torch.float64)
    L = lower_factor_from_transform(A)
    assert L.shape == (shape[0], shape[0])
    assert torch.equal(L, torch.tril(L))
    assert bool((L.diagonal() >= 0).all())
    assert torch.allclose(L @ L.T, A @ A.T, atol=1e-10)
