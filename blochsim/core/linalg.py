"""
Dense linear-algebra kernel for blochsim.

All matrices are 2-D ``complex128`` numpy arrays. Every operation checks
its operands and raises MatrixError on a contract violation instead of
substituting a placeholder.
"""

from __future__ import annotations

import numpy as np

from blochsim.core.errors import MatrixError
from blochsim.logging import get_logger

logger = get_logger(__name__)


def as_matrix(m, name: str = "matrix", allow_nonfinite: bool = False) -> np.ndarray:
    """
    Coerce ``m`` to a 2-D complex array.

    Args:
        m: Nested sequence or array
        name: Operand name used in error messages
        allow_nonfinite: Accept NaN and infinite entries

    Raises:
        MatrixError: if ``m`` is None, empty, ragged, non-numeric, not 2-D,
            or holds NaN or infinite entries
    """
    if m is None:
        logger.error("Missing %s operand", name)
        raise MatrixError(f"{name} is None")

    try:
        arr = np.asarray(m, dtype=np.complex128)
    except (TypeError, ValueError) as exc:
        logger.error("Malformed %s operand: %s", name, exc)
        raise MatrixError(f"{name} is ragged or non-numeric: {exc}") from exc

    if arr.ndim != 2:
        logger.error("%s has %d dimensions, expected 2", name, arr.ndim)
        raise MatrixError(f"{name} must be 2-D, got shape {arr.shape}")
    if arr.size == 0:
        logger.error("Empty %s operand", name)
        raise MatrixError(f"{name} is empty, got shape {arr.shape}")
    if not allow_nonfinite and not np.all(np.isfinite(arr)):
        logger.error("%s has NaN or infinite entries", name)
        raise MatrixError(f"{name} has NaN or infinite entries")
    return arr


def identity(dim: int) -> np.ndarray:
    """Return the ``dim`` x ``dim`` identity."""
    return np.eye(dim, dtype=np.complex128)


def multiply(a, b) -> np.ndarray:
    """Matrix product ``a @ b``. Requires ``a.cols == b.rows``."""
    a = as_matrix(a, "left operand")
    b = as_matrix(b, "right operand")
    if a.shape[1] != b.shape[0]:
        raise MatrixError(
            f"Cannot multiply {a.shape[0]}x{a.shape[1]} by {b.shape[0]}x{b.shape[1]}"
        )
    return a @ b


def tensor_product(a, b) -> np.ndarray:
    """
    Kronecker product of ``a`` and ``b``.

    The result has shape ``(rows_a*rows_b, cols_a*cols_b)`` and
    ``result[i*rows_b + k, j*cols_b + l] == a[i, j] * b[k, l]``.
    """
    a = as_matrix(a, "left tensor factor")
    b = as_matrix(b, "right tensor factor")
    return np.kron(a, b)


def _require_square(m: np.ndarray, op: str) -> None:
    if m.shape[0] != m.shape[1]:
        raise MatrixError(f"{op} requires a square matrix, got shape {m.shape}")


def trace(m) -> complex:
    """Sum of the diagonal of a square matrix."""
    m = as_matrix(m)
    _require_square(m, "trace")
    return complex(np.trace(m))


def transpose(m) -> np.ndarray:
    """Plain transpose. Equals the adjoint only for real matrices."""
    return as_matrix(m).T.copy()


def adjoint(m) -> np.ndarray:
    """Conjugate transpose."""
    return as_matrix(m).conj().T


def matrix_trace2(m) -> complex:
    """``Tr(M·M)``; for a density matrix this is its purity ``Tr(ρ²)``."""
    m = as_matrix(m)
    _require_square(m, "matrix_trace2")
    return trace(multiply(m, m))


def is_unitary(m, atol: float = 1e-10) -> bool:
    """Check ``M·M† == I`` within ``atol``."""
    m = as_matrix(m)
    if m.shape[0] != m.shape[1]:
        return False
    return bool(np.allclose(multiply(m, adjoint(m)), identity(m.shape[0]), atol=atol))


def conjugate_by(operator, state) -> np.ndarray:
    """Unitary evolution of a density matrix: ``U ρ U†``."""
    return multiply(multiply(operator, state), adjoint(operator))
