"""
Gate registry for blochsim.

Two read-only catalogs map gate names to operator matrices:

* ``STANDARD_GATES`` holds the exact (complex) unitaries and is the default.
* ``LEGACY_GATES`` holds the real-valued stand-ins used by earlier releases
  for Y, S, T and the rotation gates. It exists only so old outputs can be
  reproduced; several of its entries are not unitary.

Rotation gates are parametrized by ``theta`` in the standard set.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional, Tuple, Union

import numpy as np
from scipy.linalg import expm

from blochsim.core.errors import CircuitValidationError, UnknownGateError
from blochsim.core.linalg import as_matrix


# Common gate matrices
PAULI_I = np.array([[1, 0], [0, 1]], dtype=np.complex128)
PAULI_X = np.array([[0, 1], [1, 0]], dtype=np.complex128)
PAULI_Y = np.array([[0, -1j], [1j, 0]], dtype=np.complex128)
PAULI_Z = np.array([[1, 0], [0, -1]], dtype=np.complex128)
HADAMARD = np.array([[1, 1], [1, -1]], dtype=np.complex128) / np.sqrt(2)
S_GATE = np.array([[1, 0], [0, 1j]], dtype=np.complex128)
T_GATE = np.array([[1, 0], [0, np.exp(1j * np.pi / 4)]], dtype=np.complex128)

# Two-qubit gates, first listed qubit is the leftmost tensor factor
CNOT = np.array([
    [1, 0, 0, 0],
    [0, 1, 0, 0],
    [0, 0, 0, 1],
    [0, 0, 1, 0]
], dtype=np.complex128)

CZ = np.array([
    [1, 0, 0, 0],
    [0, 1, 0, 0],
    [0, 0, 1, 0],
    [0, 0, 0, -1]
], dtype=np.complex128)

SWAP = np.array([
    [1, 0, 0, 0],
    [0, 0, 1, 0],
    [0, 1, 0, 0],
    [0, 0, 0, 1]
], dtype=np.complex128)

# Real-valued approximations kept for output compatibility
LEGACY_PAULI_Y = np.array([[0, -1], [1, 0]], dtype=np.complex128)
LEGACY_S = np.array([[1, 0], [0, 1]], dtype=np.complex128)
LEGACY_T = np.array([[1, 0], [0, 0.707 + 0.707]], dtype=np.complex128)
LEGACY_RX = np.array([[0.707, -0.707], [-0.707, 0.707]], dtype=np.complex128)
LEGACY_RY = np.array([[0.707, -0.707], [0.707, 0.707]], dtype=np.complex128)
LEGACY_RZ = np.array([[0.707, 0], [0, 0.707]], dtype=np.complex128)

# Angle used when a rotation gate is given without a theta parameter
DEFAULT_ROTATION_ANGLE = np.pi / 2


def _rotation(pauli: np.ndarray, theta: float) -> np.ndarray:
    return expm(-0.5j * theta * pauli)


def rx_matrix(theta: float = DEFAULT_ROTATION_ANGLE) -> np.ndarray:
    """Rotation around X-axis: Rx(θ) = exp(-iθX/2)"""
    return _rotation(PAULI_X, theta)


def ry_matrix(theta: float = DEFAULT_ROTATION_ANGLE) -> np.ndarray:
    """Rotation around Y-axis: Ry(θ) = exp(-iθY/2)"""
    return _rotation(PAULI_Y, theta)


def rz_matrix(theta: float = DEFAULT_ROTATION_ANGLE) -> np.ndarray:
    """Rotation around Z-axis: Rz(θ) = exp(-iθZ/2)"""
    return _rotation(PAULI_Z, theta)


GateEntry = Union[np.ndarray, Callable[..., np.ndarray]]


def _frozen(matrix: np.ndarray) -> np.ndarray:
    matrix = matrix.copy()
    matrix.setflags(write=False)
    return matrix


STANDARD_GATES: Mapping[str, GateEntry] = MappingProxyType({
    "I": _frozen(PAULI_I),
    "X": _frozen(PAULI_X),
    "Y": _frozen(PAULI_Y),
    "Z": _frozen(PAULI_Z),
    "H": _frozen(HADAMARD),
    "S": _frozen(S_GATE),
    "T": _frozen(T_GATE),
    "RX": rx_matrix,
    "RY": ry_matrix,
    "RZ": rz_matrix,
    "CNOT": _frozen(CNOT),
    "CZ": _frozen(CZ),
    "SWAP": _frozen(SWAP),
})

LEGACY_GATES: Mapping[str, GateEntry] = MappingProxyType({
    "I": _frozen(PAULI_I),
    "X": _frozen(PAULI_X),
    "Y": _frozen(LEGACY_PAULI_Y),
    "Z": _frozen(PAULI_Z),
    "H": _frozen(HADAMARD),
    "S": _frozen(LEGACY_S),
    "T": _frozen(LEGACY_T),
    "RX": _frozen(LEGACY_RX),
    "RY": _frozen(LEGACY_RY),
    "RZ": _frozen(LEGACY_RZ),
    "CNOT": _frozen(CNOT),
    "CZ": _frozen(CZ),
    "SWAP": _frozen(SWAP),
})

GATE_SETS: Mapping[str, Mapping[str, GateEntry]] = MappingProxyType({
    "standard": STANDARD_GATES,
    "legacy": LEGACY_GATES,
})

ALIASES: Mapping[str, str] = MappingProxyType({"CX": "CNOT"})

SINGLE_QUBIT_GATES: Tuple[str, ...] = ("I", "X", "Y", "Z", "H", "S", "T", "RX", "RY", "RZ")
TWO_QUBIT_GATES: Tuple[str, ...] = ("CNOT", "CZ", "SWAP")
AVAILABLE_GATES: Tuple[str, ...] = SINGLE_QUBIT_GATES + TWO_QUBIT_GATES

PARAMETRIC_GATES: Tuple[str, ...] = ("RX", "RY", "RZ")


def gate_catalog() -> Dict[str, list]:
    """Gate names partitioned by arity, for circuit editors."""
    return {"single": list(SINGLE_QUBIT_GATES), "two": list(TWO_QUBIT_GATES)}


def canonical_name(name: str) -> str:
    """Normalize a gate name (case-insensitive, aliases resolved)."""
    upper = name.strip().upper()
    return ALIASES.get(upper, upper)


def is_known_gate(name: str) -> bool:
    return canonical_name(name) in STANDARD_GATES


def gate_arity(name: str) -> int:
    """Number of qubits the named registry gate acts on."""
    key = canonical_name(name)
    if key in TWO_QUBIT_GATES:
        return 2
    if key in SINGLE_QUBIT_GATES:
        return 1
    raise UnknownGateError(name)


def get_gate_set(gate_set: str) -> Mapping[str, GateEntry]:
    try:
        return GATE_SETS[gate_set]
    except KeyError:
        raise ValueError(f"Unknown gate set: {gate_set}") from None


def get_gate_matrix(
    name: str,
    params: Optional[Dict[str, float]] = None,
    gate_set: str = "standard"
) -> np.ndarray:
    """
    Look up a gate matrix by name.

    Args:
        name: Gate name (case-insensitive, "CX" is accepted for "CNOT")
        params: Parameters for rotation gates, e.g. {"theta": 0.5}
        gate_set: "standard" or "legacy"

    Returns:
        A fresh, writable copy of the gate matrix

    Raises:
        UnknownGateError: if the name is not registered
    """
    catalog = get_gate_set(gate_set)
    key = canonical_name(name)
    if key not in catalog:
        raise UnknownGateError(name)

    entry = catalog[key]
    if callable(entry):
        theta = (params or {}).get("theta", DEFAULT_ROTATION_ANGLE)
        return entry(float(theta))
    return np.array(entry, dtype=np.complex128)


def resolve_matrix(gate, gate_set: str = "standard") -> np.ndarray:
    """
    Matrix for a gate operation: an explicit matrix wins over registry lookup.

    Raises:
        UnknownGateError: unknown name and no explicit matrix
        CircuitValidationError: operator size does not match the qubit count
    """
    if gate.matrix is not None:
        matrix = as_matrix(gate.matrix, f"matrix of gate {gate.name!r}")
    else:
        matrix = get_gate_matrix(gate.name, gate.params, gate_set)

    expected = 2 ** len(gate.qubits)
    if matrix.shape != (expected, expected):
        raise CircuitValidationError([
            f"gate {gate.name!r} on qubits {list(gate.qubits)} needs a "
            f"{expected}x{expected} matrix, got {matrix.shape[0]}x{matrix.shape[1]}"
        ])
    return matrix


def pauli_matrices(gate_set: str = "standard") -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """The (X, Y, Z) Pauli matrices of a gate set, used for Bloch coordinates."""
    catalog = get_gate_set(gate_set)
    return (
        np.array(catalog["X"]),
        np.array(catalog["Y"]),
        np.array(catalog["Z"]),
    )
