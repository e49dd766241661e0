"""
Linear algebra helpers for covariance matrices.

The factorisation here assumes a **lower** square root, i.e. A = L L^T, which is
what the sampler applies to standard normal vectors.
"""

import math
from typing import Optional, Tuple

import torch

from ..errors import DimensionMismatchError, FactorizationError


def _resolve_dtype(value, dtype: Optional[torch.dtype]) -> torch.dtype:
    if dtype is not None:
        return dtype
    if isinstance(value, torch.Tensor) and value.is_floating_point():
        return value.dtype
    return torch.float64


def _to_tensor(value, what: str, dtype: Optional[torch.dtype], device) -> torch.Tensor:
    try:
        return torch.as_tensor(value, dtype=_resolve_dtype(value, dtype), device=device)
    except ValueError as exc:
        # ragged nested sequences, e.g. [[1.0, 0.0], [0.0]]
        raise DimensionMismatchError(f"{what} has an inconsistent shape: {exc}") from exc
    except (TypeError, RuntimeError) as exc:
        raise TypeError(f"{what} must contain real numbers, got {type(value).__name__}") from exc


def as_vector(value, dtype: Optional[torch.dtype] = None, device=None) -> torch.Tensor:
    """
    Convert a mean-like input (list, numpy array or tensor) to a 1D tensor.

    Tensors that are already floating point keep their dtype unless `dtype` is given;
    everything else becomes float64.
    """
    vec = _to_tensor(value, "mean", dtype, device)
    if vec.dim() != 1:
        raise DimensionMismatchError(f"mean must be one-dimensional, got shape {tuple(vec.shape)}")
    if vec.numel() == 0:
        raise DimensionMismatchError("mean must have at least one coordinate")
    if not torch.isfinite(vec).all():
        raise ValueError("mean contains non-finite values")
    return vec


def as_matrix(value, dtype: Optional[torch.dtype] = None, device=None) -> torch.Tensor:
    """Convert a covariance-like input to a square 2D tensor."""
    mat = _to_tensor(value, "covariance", dtype, device)
    if mat.dim() != 2 or mat.shape[0] != mat.shape[1]:
        raise DimensionMismatchError(f"covariance must be a square matrix, got shape {tuple(mat.shape)}")
    if not torch.isfinite(mat).all():
        raise ValueError("covariance contains non-finite values")
    return mat


# Rounding in a pivot A_jj - |l_j|^2 accumulates through every earlier column,
# so the zero band is kept well above r * eps.
_PIVOT_EPS_FACTOR = 1e3


def default_tolerance(matrix: torch.Tensor) -> float:
    """
    Relative tolerance used to decide whether a pivot is numerically zero.

    Scales with the matrix size, the dtype's machine epsilon and the largest
    diagonal entry: 1e3 * r * eps * max|A_ii|.
    """
    n = matrix.shape[-1]
    if n == 0:
        return 0.0
    scale = matrix.diagonal().abs().max().item()
    return _PIVOT_EPS_FACTOR * n * torch.finfo(matrix.dtype).eps * scale


def check_symmetric(matrix: torch.Tensor, atol: Optional[float] = None) -> None:
    """Raise FactorizationError if `matrix` differs from its transpose by more than `atol`."""
    if atol is None:
        atol = default_tolerance(matrix)
    if matrix.numel() == 0:
        return
    asymmetry = (matrix - matrix.T).abs().max().item()
    if asymmetry > atol:
        raise FactorizationError(
            f"covariance must be symmetric; max |A - A^T| = {asymmetry:.3e} exceeds tolerance {atol:.3e}"
        )


def cholesky_lower(
    matrix: torch.Tensor,
    tol: Optional[float] = None,
    require_positive_definite: bool = False,
) -> Tuple[torch.Tensor, int]:
    """
    Compute a lower-triangular L with L L^T = matrix.

    Positive definite inputs go through torch.linalg.cholesky_ex. When that
    fails, or leaves a numerically zero pivot, the factor is built column by
    column so positive semi-definite matrices can still be factored:

    - a pivot below -tol raises FactorizationError;
    - a pivot within [-tol, tol] is taken as zero and its column of L stays zero,
      which is only consistent if the rest of that column of the Schur
      complement is at most sqrt(tol * max|A_ii|) in magnitude.

    With the default tolerance, the band for pivot j also grows with the
    update |l_j|^2 subtracted from A_jj, since that is where rounding builds up.

    Parameters:
    -----------
    matrix : torch.Tensor
        Symmetric matrix of shape (r, r)
    tol : float, optional
        Fixed pivot tolerance. Defaults to `default_tolerance(matrix)` plus the
        per-pivot update term.
    require_positive_definite : bool
        Reject zero pivots instead of accepting a singular factor.

    Returns:
    --------
    (torch.Tensor, int)
        The factor L and the number of strictly positive pivots (the rank).
    """
    n = matrix.shape[0]
    if tol is not None and tol < 0:
        raise ValueError("tol must be non-negative")
    adaptive = tol is None
    base_tol = default_tolerance(matrix) if adaptive else tol
    update_eps = _PIVOT_EPS_FACTOR * n * torch.finfo(matrix.dtype).eps if adaptive else 0.0

    L, info = torch.linalg.cholesky_ex(matrix)
    if info.item() == 0 and bool((L.diagonal().pow(2) > base_tol).all()):
        return L, n

    scale = matrix.diagonal().abs().max().item()

    L = torch.zeros_like(matrix)
    rank = 0
    for j in range(n):
        row = L[j, :j]
        update = (row @ row).item()
        pivot = matrix[j, j].item() - update
        below = matrix[j + 1:, j] - L[j + 1:, :j] @ row
        pivot_tol = base_tol + update_eps * update

        if pivot < -pivot_tol:
            raise FactorizationError(
                f"covariance is not positive semi-definite: pivot {j} is {pivot:.3e}"
            )
        if pivot <= pivot_tol:
            if require_positive_definite:
                raise FactorizationError(
                    f"covariance is singular: pivot {j} is {pivot:.3e} (positive definite required)"
                )
            column_tol = math.sqrt(pivot_tol * scale)
            if below.numel() > 0 and below.abs().max().item() > column_tol:
                raise FactorizationError(
                    f"covariance is not positive semi-definite: zero pivot {j} "
                    f"with off-diagonal residual {below.abs().max().item():.3e}"
                )
            continue

        d = math.sqrt(pivot)
        L[j, j] = d
        L[j + 1:, j] = below / d
        rank += 1

    return L, rank


def lower_factor_from_transform(transform: torch.Tensor) -> torch.Tensor:
    """
    Lower-triangular L with L L^T = A A^T, computed from A without forming A A^T.

    Uses the R factor of a QR decomposition of A^T (A^T = Q R, so A A^T = R^T R).
    Columns are sign-flipped so the diagonal is non-negative, and a rectangular
    (dim, k) transform with k < dim is padded with zero columns to (dim, dim).
    """
    if transform.dim() != 2:
        raise DimensionMismatchError(f"transform must be a 2D matrix, got shape {tuple(transform.shape)}")
    dim = transform.shape[0]
    _, R = torch.linalg.qr(transform.T, mode="r")
    L = R.T
    diag = L.diagonal()
    signs = torch.where(diag < 0, -torch.ones_like(diag), torch.ones_like(diag))
    L = L * signs
    if L.shape[1] < dim:
        L = torch.cat([L, L.new_zeros(dim, dim - L.shape[1])], dim=1)
    return L
