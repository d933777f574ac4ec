"""Reduced single-qubit states extracted from a composite density matrix."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, NamedTuple, Optional

import numpy as np

from blochsim.core.errors import MatrixError
from blochsim.core.gates import pauli_matrices
from blochsim.core.linalg import as_matrix, matrix_trace2


class BlochVector(NamedTuple):
    """Expectation values of the Pauli X, Y and Z operators."""
    x: float
    y: float
    z: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}


def partial_trace(full_state, qubit_to_keep: int, num_qubits: int) -> np.ndarray:
    """
    Trace out every qubit except ``qubit_to_keep``.

    Qubit 0 is the most significant bit of a basis index, so the kept
    qubit's bit has weight ``stride = 2**(num_qubits - qubit_to_keep - 1)``.
    For each assignment of the other qubits, entry ``(i, j)`` of the result
    accumulates the full-state entry whose kept bit is ``i`` in the row and
    ``j`` in the column.

    Args:
        full_state: 2**n x 2**n density matrix
        qubit_to_keep: Index of the qubit to keep
        num_qubits: Total number of qubits n

    Returns:
        2x2 reduced density matrix
    """
    rho = as_matrix(full_state, "full state")
    dim = 2 ** num_qubits
    if rho.shape != (dim, dim):
        raise MatrixError(
            f"State of shape {rho.shape} does not describe {num_qubits} qubits"
        )
    if not 0 <= qubit_to_keep < num_qubits:
        raise ValueError(f"Qubit {qubit_to_keep} out of range for {num_qubits} qubits")

    stride = 2 ** (num_qubits - qubit_to_keep - 1)
    high, low = np.divmod(np.arange(dim // 2), stride)
    base = high * (2 * stride) + low
    rows = (base, base + stride)

    reduced = np.zeros((2, 2), dtype=np.complex128)
    for i in range(2):
        for j in range(2):
            reduced[i, j] = rho[rows[i], rows[j]].sum()
    return reduced


def linear_purity(rho) -> float:
    """Textbook purity Tr(ρ²), in [1/d, 1] for a valid density matrix."""
    return float(np.real(matrix_trace2(rho)))


def purity(rho) -> float:
    """
    Purity as reported to renderers: ``min(sqrt(Tr(ρ²)), 1)``.

    This is not the textbook definition (see ``linear_purity``) but is kept
    so previously exported values stay comparable.
    """
    value = linear_purity(rho)
    return float(min(np.sqrt(max(value, 0.0)), 1.0))


def bloch_vector(rho, gate_set: str = "standard") -> BlochVector:
    """
    Bloch coordinates (Tr(ρX), Tr(ρY), Tr(ρZ)) using the gate set's Paulis.

    Undefined components are reported as 0.
    """
    rho = as_matrix(rho, "reduced state", allow_nonfinite=True)
    if rho.shape != (2, 2):
        raise MatrixError(f"reduced state must be 2x2, got shape {rho.shape}")
    components = [
        np.real(np.trace(rho @ pauli)) for pauli in pauli_matrices(gate_set)
    ]
    x, y, z = np.nan_to_num(components, nan=0.0, posinf=0.0, neginf=0.0)
    return BlochVector(float(x), float(y), float(z))


@dataclass
class ReducedState:
    """
    Reduced density matrix of one qubit.

    Attributes:
        qubit: Qubit index
        matrix: 2x2 reduced density matrix
        purity: min(sqrt(Tr(ρ²)), 1)
        linear_purity: Tr(ρ²)
        bloch_vector: (x, y, z) Pauli expectation values
    """
    qubit: int
    matrix: np.ndarray
    purity: float
    linear_purity: float
    bloch_vector: BlochVector

    @classmethod
    def from_density_matrix(
        cls,
        qubit: int,
        rho,
        gate_set: str = "standard"
    ) -> ReducedState:
        rho = as_matrix(rho, "reduced state")
        return cls(
            qubit=qubit,
            matrix=rho,
            purity=purity(rho),
            linear_purity=linear_purity(rho),
            bloch_vector=bloch_vector(rho, gate_set),
        )

    def probability_zero(self) -> float:
        return float(np.real(self.matrix[0, 0]))

    def probability_one(self) -> float:
        return float(np.real(self.matrix[1, 1]))

    @property
    def is_pure(self) -> bool:
        return bool(np.isclose(self.linear_purity, 1.0, atol=1e-10))

    def von_neumann_entropy(self) -> float:
        """Entropy in bits; 0 for pure states, 1 for the maximally mixed state."""
        eigenvalues = np.linalg.eigvalsh(self.matrix)
        eigenvalues = eigenvalues[eigenvalues > 1e-15]
        return float(max(-np.sum(eigenvalues * np.log2(eigenvalues)), 0.0))

    def to_dict(self, include_imag: Optional[bool] = None) -> Dict[str, Any]:
        """
        Wire record ``{qubit, matrix, purity, blochVector}``.

        ``matrix`` holds the real parts; ``matrixImag`` is added when any
        entry has an imaginary part (or when ``include_imag`` is True).
        """
        record: Dict[str, Any] = {
            "qubit": self.qubit,
            "matrix": np.real(self.matrix).tolist(),
            "purity": self.purity,
            "linearPurity": self.linear_purity,
            "blochVector": self.bloch_vector.to_dict(),
        }
        if include_imag is None:
            include_imag = bool(np.any(np.abs(np.imag(self.matrix)) > 0))
        if include_imag:
            record["matrixImag"] = np.imag(self.matrix).tolist()
        return record

    def __repr__(self) -> str:
        x, y, z = self.bloch_vector
        return (f"ReducedState(q{self.qubit}, purity={self.purity:.4f}, "
                f"bloch=({x:.4f}, {y:.4f}, {z:.4f}))")


def reduce_state(
    full_state,
    qubit: int,
    num_qubits: int,
    gate_set: str = "standard"
) -> ReducedState:
    """Partial trace down to ``qubit`` plus its purity and Bloch vector."""
    rho = partial_trace(full_state, qubit, num_qubits)
    return ReducedState.from_density_matrix(qubit, rho, gate_set)
