"""
blochsim - density-matrix circuit simulator.

Builds the composite state of a small circuit, applies its gates, and
reduces the result to one Bloch vector per qubit.
"""

from blochsim.core.density_matrix import BlochVector, ReducedState, partial_trace
from blochsim.core.errors import (
    BlochSimError,
    CircuitValidationError,
    MatrixError,
    UnknownGateError,
)
from blochsim.core.gates import (
    AVAILABLE_GATES,
    SINGLE_QUBIT_GATES,
    TWO_QUBIT_GATES,
    gate_catalog,
)
from blochsim.core.io_spec import Circuit, GateOp, SimulatorConfig
from blochsim.runtime.engine import SimulationResult, Simulator, simulate

__version__ = "0.1.0"
__all__ = [
    "simulate",
    "Simulator",
    "SimulationResult",
    "SimulatorConfig",
    "Circuit",
    "GateOp",
    "ReducedState",
    "BlochVector",
    "partial_trace",
    "AVAILABLE_GATES",
    "SINGLE_QUBIT_GATES",
    "TWO_QUBIT_GATES",
    "gate_catalog",
    "BlochSimError",
    "CircuitValidationError",
    "MatrixError",
    "UnknownGateError",
]
