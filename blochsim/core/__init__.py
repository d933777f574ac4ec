"""Core blochsim components: linear algebra, gates, reduced states, I/O specs."""

from blochsim.core.density_matrix import BlochVector, ReducedState, partial_trace, reduce_state
from blochsim.core.errors import (
    BlochSimError,
    CircuitValidationError,
    MatrixError,
    UnknownGateError,
)
from blochsim.core.gates import (
    AVAILABLE_GATES,
    LEGACY_GATES,
    SINGLE_QUBIT_GATES,
    STANDARD_GATES,
    TWO_QUBIT_GATES,
    get_gate_matrix,
)
from blochsim.core.io_spec import Circuit, GateOp, SimulatorConfig

__all__ = [
    # Reduced states
    "BlochVector",
    "ReducedState",
    "partial_trace",
    "reduce_state",
    # Errors
    "BlochSimError",
    "CircuitValidationError",
    "MatrixError",
    "UnknownGateError",
    # Gates
    "AVAILABLE_GATES",
    "LEGACY_GATES",
    "SINGLE_QUBIT_GATES",
    "STANDARD_GATES",
    "TWO_QUBIT_GATES",
    "get_gate_matrix",
    # Circuit and configuration
    "Circuit",
    "GateOp",
    "SimulatorConfig",
]
