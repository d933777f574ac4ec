"""
blochsim runtime engine.

Evolves the composite density matrix of a circuit gate by gate and reduces
the result to one ``ReducedState`` per qubit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

import numpy as np

from blochsim.compiler.analysis import InteractionGraph
from blochsim.compiler.parser import check_qubit_count, circuit_from_dict, validate_circuit
from blochsim.core.density_matrix import ReducedState, reduce_state
from blochsim.core.errors import CircuitValidationError
from blochsim.core.gates import PAULI_I, resolve_matrix
from blochsim.core.io_spec import DEFAULT_MAX_QUBITS, Circuit, GateOp, SimulatorConfig
from blochsim.core.linalg import conjugate_by, identity, is_unitary, tensor_product
from blochsim.logging import get_logger

logger = get_logger(__name__)

CircuitLike = Union[Circuit, Mapping[str, Any]]


def initial_state(num_qubits: int, max_qubits: int = DEFAULT_MAX_QUBITS) -> np.ndarray:
    """
    The |0…0⟩⟨0…0| density matrix.

    Args:
        num_qubits: Number of qubits n
        max_qubits: Largest n accepted before allocating

    Returns:
        2**n x 2**n matrix, zero except for entry (0, 0) = 1
    """
    check_qubit_count(num_qubits, max_qubits)
    dim = 2 ** num_qubits
    state = np.zeros((dim, dim), dtype=np.complex128)
    state[0, 0] = 1.0
    return state


def expand_single_qubit(gate_matrix, qubit: int, num_qubits: int) -> np.ndarray:
    """
    Full-dimension operator for a single-qubit gate.

    Folds the tensor product left to right from a 1x1 identity, placing the
    gate at position ``qubit`` and the 2x2 identity everywhere else.
    """
    full = identity(1)
    for q in range(num_qubits):
        full = tensor_product(full, gate_matrix if q == qubit else PAULI_I)
    return full


def basis_order(order, num_qubits: int) -> np.ndarray:
    """
    Index map ``sigma`` with sigma[|x_0 … x_{n-1}⟩] = |x_order[0] … x_order[n-1]⟩.

    ``order`` lists every qubit exactly once.
    """
    indices = np.arange(2 ** num_qubits)
    sigma = np.zeros_like(indices)
    for position, q in enumerate(order):
        bit = (indices >> (num_qubits - 1 - q)) & 1
        sigma |= bit << (num_qubits - 1 - position)
    return sigma


def expand_two_qubit(gate_matrix, qubit_a: int, qubit_b: int, num_qubits: int) -> np.ndarray:
    """
    Full-dimension operator for a two-qubit gate on any pair of qubits.

    The qubits are permuted so that ``qubit_a`` and ``qubit_b`` become the two
    leading tensor factors, ``U ⊗ I`` is applied there, and the permutation is
    undone: ``Pᵀ (U ⊗ I) P``. The conjugation by P is a reindexing of rows
    and columns.
    """
    rest = [q for q in range(num_qubits) if q not in (qubit_a, qubit_b)]
    local = tensor_product(gate_matrix, identity(2 ** len(rest)))
    if qubit_a == 0 and qubit_b == 1:
        return local

    sigma = basis_order([qubit_a, qubit_b] + rest, num_qubits)
    return local[np.ix_(sigma, sigma)]


def expand_operator(gate_matrix, qubits, num_qubits: int) -> np.ndarray:
    """Full-dimension operator for a gate acting on one or two qubits."""
    if len(qubits) == 1:
        return expand_single_qubit(gate_matrix, qubits[0], num_qubits)
    if len(qubits) == 2:
        return expand_two_qubit(gate_matrix, qubits[0], qubits[1], num_qubits)
    raise CircuitValidationError([
        f"gate acts on {len(qubits)} qubits, only 1 or 2 are supported"
    ])


def apply_gate(
    state,
    gate: GateOp,
    num_qubits: int,
    gate_set: str = "standard",
    atol: float = 1e-10
) -> np.ndarray:
    """
    Apply a gate to a composite density matrix.

    Args:
        state: 2**n x 2**n density matrix (not modified)
        gate: Gate operation
        num_qubits: Total number of qubits n
        gate_set: Registry used for gates without an explicit matrix
        atol: Tolerance of the unitarity check

    Returns:
        New density matrix ``U ρ U†``
    """
    if len(gate.qubits) not in (1, 2):
        raise CircuitValidationError([
            f"gate {gate.name!r} acts on {len(gate.qubits)} qubits, only 1 or 2 are supported"
        ])
    for q in gate.qubits:
        if not 0 <= q < num_qubits:
            raise CircuitValidationError([
                f"gate {gate.name!r}: qubit {q} out of range [0, {num_qubits})"
            ])
    if len(set(gate.qubits)) != len(gate.qubits):
        raise CircuitValidationError([
            f"gate {gate.name!r} repeats a qubit: {list(gate.qubits)}"
        ])

    matrix = resolve_matrix(gate, gate_set)
    if not is_unitary(matrix, atol=atol):
        logger.debug("Applying non-unitary operator for gate %s", gate.name)

    full = expand_operator(matrix, gate.qubits, num_qubits)
    logger.debug("Applied %r to %d-qubit state", gate, num_qubits)
    return conjugate_by(full, state)


@dataclass
class SimulationResult:
    """
    Result of simulating a circuit.

    Attributes:
        states: Reduced state of every qubit, ordered by qubit index
        final_state: Composite density matrix after the last gate
        metadata: Execution metadata
    """
    states: List[ReducedState]
    final_state: np.ndarray = field(repr=False)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.states)

    def __getitem__(self, qubit: int) -> ReducedState:
        return self.states[qubit]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "numQubits": len(self.states),
            "reducedStates": [state.to_dict() for state in self.states],
            "metadata": dict(self.metadata),
        }


@dataclass
class Simulator:
    """
    Density-matrix circuit simulator.

    Usage:
        sim = Simulator()
        result = sim.execute({"numQubits": 2, "gates": [
            {"name": "H", "qubits": [0]},
            {"name": "CNOT", "qubits": [0, 1]},
        ]})
        print(result.states[0].bloch_vector)
    """
    config: SimulatorConfig = field(default_factory=SimulatorConfig)

    def prepare(self, circuit: CircuitLike) -> Circuit:
        """Parse (if needed) and validate a circuit before any allocation."""
        if not isinstance(circuit, Circuit):
            circuit = circuit_from_dict(circuit)
        validate_circuit(circuit, max_qubits=self.config.max_qubits)
        return circuit

    def evolve(self, circuit: CircuitLike) -> Iterator[np.ndarray]:
        """Yield the initial composite state and the state after every gate."""
        return self._evolve(self.prepare(circuit))

    def _evolve(self, circuit: Circuit) -> Iterator[np.ndarray]:
        state = initial_state(circuit.num_qubits, self.config.max_qubits)
        yield state
        for gate in circuit.gates:
            state = apply_gate(
                state, gate, circuit.num_qubits,
                gate_set=self.config.gate_set, atol=self.config.atol
            )
            yield state

    def reduce(self, state, num_qubits: int) -> List[ReducedState]:
        """Reduced state of every qubit, in ascending qubit order."""
        return [
            reduce_state(state, q, num_qubits, self.config.gate_set)
            for q in range(num_qubits)
        ]

    def execute(self, circuit: CircuitLike) -> SimulationResult:
        """Run the whole circuit and reduce the final state."""
        circuit = self.prepare(circuit)

        state = None
        for state in self._evolve(circuit):
            pass

        states = self.reduce(state, circuit.num_qubits)
        graph = InteractionGraph.from_circuit(circuit)

        if self.config.gate_set == "legacy":
            logger.info("Simulated with legacy real-valued gates; Y, S, T and rotations are approximate")

        return SimulationResult(
            states=states,
            final_state=state,
            metadata={
                "num_qubits": circuit.num_qubits,
                "num_gates": circuit.num_gates,
                "depth": graph.depth,
                "entangled_groups": graph.entangled_groups(),
                "gate_set": self.config.gate_set,
            }
        )


def simulate(circuit: CircuitLike, config: Optional[SimulatorConfig] = None) -> List[ReducedState]:
    """
    Simulate a circuit and return the reduced state of every qubit.

    Args:
        circuit: A Circuit or a mapping ``{"numQubits": n, "gates": [...]}``
        config: Simulator settings (defaults to the exact complex gate set)

    Returns:
        One ReducedState per qubit, ordered by qubit index
    """
    return Simulator(config or SimulatorConfig()).execute(circuit).states
