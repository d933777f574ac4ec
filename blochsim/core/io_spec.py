"""Circuit descriptions and simulator configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from blochsim.core.gates import GATE_SETS

DEFAULT_MAX_QUBITS = 12
# A 14-qubit density matrix already takes 4 GiB
HARD_MAX_QUBITS = 14


@dataclass(frozen=True)
class GateOp:
    """
    A gate applied to specific qubits.

    Attributes:
        name: Gate name, looked up in the registry when ``matrix`` is None
        qubits: Qubit indices; the first index maps to the leftmost tensor
            factor of the operator (the control for CNOT/CZ)
        matrix: Optional explicit operator, takes precedence over the registry
        params: Parameters for rotation gates, e.g. {"theta": 0.5}
    """
    name: str
    qubits: Tuple[int, ...]
    matrix: Optional[Any] = field(default=None, repr=False, compare=False)
    params: Dict[str, float] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "qubits", tuple(self.qubits))

    @property
    def num_qubits(self) -> int:
        return len(self.qubits)

    def __repr__(self) -> str:
        if self.params:
            param_str = ", ".join(f"{k}={v:.4f}" for k, v in self.params.items())
            return f"{self.name}({param_str}) @ {self.qubits}"
        return f"{self.name} @ {self.qubits}"


@dataclass
class Circuit:
    """
    An ordered gate list over ``num_qubits`` qubits.

    Gates are applied in list order.
    """
    num_qubits: int
    gates: List[GateOp] = field(default_factory=list)

    def add(
        self,
        name: str,
        *qubits: int,
        matrix: Optional[Any] = None,
        **params: float
    ) -> Circuit:
        """Append a gate and return the circuit, so calls can be chained."""
        self.gates.append(GateOp(name=name, qubits=qubits, matrix=matrix, params=params))
        return self

    @property
    def num_gates(self) -> int:
        return len(self.gates)

    def __repr__(self) -> str:
        return f"Circuit(qubits={self.num_qubits}, gates={len(self.gates)})"


@dataclass(frozen=True)
class SimulatorConfig:
    """
    Simulator settings.

    Attributes:
        gate_set: "standard" for exact complex gates, "legacy" for the
            real-valued approximations of Y, S, T and the rotations
        max_qubits: Largest accepted qubit count; memory grows as 4**n
        atol: Tolerance for unitarity checks
    """
    gate_set: str = "standard"
    max_qubits: int = DEFAULT_MAX_QUBITS
    atol: float = 1e-10

    def __post_init__(self):
        if self.gate_set not in GATE_SETS:
            raise ValueError(
                f"gate_set must be one of {sorted(GATE_SETS)}, got {self.gate_set!r}"
            )
        if not 1 <= self.max_qubits <= HARD_MAX_QUBITS:
            raise ValueError(
                f"max_qubits must be between 1 and {HARD_MAX_QUBITS}, got {self.max_qubits}"
            )
        if self.atol <= 0:
            raise ValueError(f"atol must be positive, got {self.atol}")

    @classmethod
    def legacy(cls, **kwargs) -> SimulatorConfig:
        """Preset reproducing the real-valued gate approximations."""
        return cls(gate_set="legacy", **kwargs)
