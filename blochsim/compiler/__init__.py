"""Circuit parsing, validation and analysis."""

from blochsim.compiler.analysis import InteractionGraph
from blochsim.compiler.examples import EXAMPLE_CIRCUITS, get_example
from blochsim.compiler.parser import (
    circuit_from_dict,
    circuit_to_dict,
    load_circuit,
    parse_qiskit_circuit,
    validate_circuit,
)

__all__ = [
    "InteractionGraph",
    "EXAMPLE_CIRCUITS",
    "get_example",
    "circuit_from_dict",
    "circuit_to_dict",
    "load_circuit",
    "parse_qiskit_circuit",
    "validate_circuit",
]
