"""Preset circuits offered by circuit editors."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, List, Mapping

from blochsim.compiler.parser import circuit_from_dict
from blochsim.core.io_spec import Circuit

EXAMPLE_CIRCUITS: Mapping[str, Dict[str, Any]] = MappingProxyType({
    "Bell State": {
        "numQubits": 2,
        "gates": [
            {"name": "H", "qubits": [0]},
            {"name": "CNOT", "qubits": [0, 1]},
        ],
    },
    "GHZ State (3-qubit)": {
        "numQubits": 3,
        "gates": [
            {"name": "H", "qubits": [0]},
            {"name": "CNOT", "qubits": [0, 1]},
            {"name": "CNOT", "qubits": [0, 2]},
        ],
    },
    "Superposition + Phase": {
        "numQubits": 2,
        "gates": [
            {"name": "H", "qubits": [0]},
            {"name": "S", "qubits": [0]},
            {"name": "H", "qubits": [1]},
        ],
    },
    "SWAP Test": {
        "numQubits": 2,
        "gates": [
            {"name": "H", "qubits": [0]},
            {"name": "X", "qubits": [1]},
            {"name": "SWAP", "qubits": [0, 1]},
        ],
    },
    "Mixed Rotations": {
        "numQubits": 2,
        "gates": [
            {"name": "RX", "qubits": [0]},
            {"name": "RY", "qubits": [1]},
            {"name": "CZ", "qubits": [0, 1]},
        ],
    },
    "All Pauli Gates": {
        "numQubits": 3,
        "gates": [
            {"name": "X", "qubits": [0]},
            {"name": "Y", "qubits": [1]},
            {"name": "Z", "qubits": [2]},
        ],
    },
})


def list_examples() -> List[str]:
    return list(EXAMPLE_CIRCUITS)


def get_example(name: str) -> Circuit:
    """Build a preset circuit by name (case-insensitive)."""
    for key, data in EXAMPLE_CIRCUITS.items():
        if key.lower() == name.strip().lower():
            return circuit_from_dict(data)
    raise KeyError(f"Unknown example circuit: {name}")
