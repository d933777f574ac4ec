"""
Validation utilities for blochsim.

Compares simulated reduced states against Qiskit's exact density-matrix
simulation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import numpy as np

from blochsim.core.density_matrix import BlochVector, bloch_vector
from blochsim.core.io_spec import Circuit, SimulatorConfig
from blochsim.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ValidationResult:
    """Result of validating blochsim against Qiskit."""
    num_qubits: int
    blochsim_vectors: List[BlochVector]
    exact_vectors: List[BlochVector]
    errors: List[float]
    max_error: float
    passed: bool
    threshold: float
    details: Dict[str, Any]


def to_qiskit_circuit(circuit: Circuit):
    """
    Build the equivalent Qiskit QuantumCircuit.

    Explicit matrices are attached as unitary gates, so they must be unitary.
    """
    from qiskit import QuantumCircuit
    from qiskit.circuit.library import UnitaryGate

    from blochsim.core.gates import canonical_name, DEFAULT_ROTATION_ANGLE

    qc = QuantumCircuit(circuit.num_qubits)
    for gate in circuit.gates:
        qubits = list(gate.qubits)
        if gate.matrix is not None:
            matrix = np.asarray(gate.matrix, dtype=np.complex128)
            if len(qubits) == 2:
                # blochsim puts the first qubit in the most significant bit
                matrix = matrix.reshape(2, 2, 2, 2).transpose(1, 0, 3, 2).reshape(4, 4)
            qc.append(UnitaryGate(matrix, label=gate.name), qubits)
            continue

        name = canonical_name(gate.name)
        theta = gate.params.get("theta", DEFAULT_ROTATION_ANGLE)
        if name == "I":
            qc.id(qubits[0])
        elif name in ("RX", "RY", "RZ"):
            getattr(qc, name.lower())(theta, qubits[0])
        elif name == "CNOT":
            qc.cx(*qubits)
        else:
            getattr(qc, name.lower())(*qubits)
    return qc


def exact_bloch_vectors(circuit: Circuit) -> List[BlochVector]:
    """Per-qubit Bloch vectors computed with qiskit.quantum_info."""
    try:
        from qiskit.quantum_info import DensityMatrix, partial_trace
    except ImportError:
        raise ImportError("Qiskit required for validation")

    rho = DensityMatrix.from_instruction(to_qiskit_circuit(circuit))
    n = circuit.num_qubits
    vectors = []
    for q in range(n):
        reduced = partial_trace(rho, [j for j in range(n) if j != q]) if n > 1 else rho
        vectors.append(bloch_vector(reduced.data))
    return vectors


def validate_against_qiskit(
    circuit: Circuit,
    threshold: float = 1e-8,
    verbose: bool = False
) -> ValidationResult:
    """
    Validate blochsim against exact Qiskit simulation.

    Only the exact (standard) gate set is comparable.

    Args:
        circuit: Circuit to check
        threshold: Maximum allowed Bloch-vector distance per qubit
        verbose: Log a per-qubit table at INFO level

    Returns:
        ValidationResult with comparison data
    """
    from blochsim.runtime.engine import Simulator

    result = Simulator(SimulatorConfig()).execute(circuit)
    ours = [state.bloch_vector for state in result.states]
    exact = exact_bloch_vectors(circuit)

    errors = [float(np.linalg.norm(np.subtract(a, b))) for a, b in zip(ours, exact)]
    max_error = max(errors) if errors else 0.0
    passed = max_error <= threshold

    if verbose:
        for q, (a, b, err) in enumerate(zip(ours, exact, errors)):
            logger.info("q%d blochsim=(%.6f, %.6f, %.6f) exact=(%.6f, %.6f, %.6f) error=%.2e",
                        q, a.x, a.y, a.z, b.x, b.y, b.z, err)
        logger.info("Max error: %.2e -> %s", max_error, "PASSED" if passed else "FAILED")

    return ValidationResult(
        num_qubits=circuit.num_qubits,
        blochsim_vectors=ours,
        exact_vectors=exact,
        errors=errors,
        max_error=max_error,
        passed=passed,
        threshold=threshold,
        details=dict(result.metadata),
    )


def random_circuit(
    num_qubits: int = 3,
    depth: int = 5,
    seed: Optional[int] = 42
) -> Circuit:
    """Random circuit over the standard catalog, for cross-checks."""
    rng = np.random.default_rng(seed)
    circuit = Circuit(num_qubits=num_qubits)

    for _ in range(depth):
        for q in range(num_qubits):
            gate = rng.choice(["H", "S", "T", "Y", "RX", "RY", "RZ"])
            if gate.startswith("R"):
                circuit.add(str(gate), q, theta=float(rng.uniform(0, 2 * np.pi)))
            else:
                circuit.add(str(gate), q)

        if num_qubits > 1:
            a, b = rng.choice(num_qubits, size=2, replace=False)
            circuit.add(str(rng.choice(["CNOT", "CZ", "SWAP"])), int(a), int(b))

    return circuit
