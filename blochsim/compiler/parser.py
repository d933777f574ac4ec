"""
Circuit parsing and validation for blochsim.

Turns the JSON circuit format used by editors, or a Qiskit circuit, into a
``Circuit`` and checks it before anything is allocated.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Mapping, Union

import numpy as np

from blochsim.core.errors import CircuitValidationError, MatrixError
from blochsim.core.gates import gate_arity, is_known_gate
from blochsim.core.io_spec import DEFAULT_MAX_QUBITS, HARD_MAX_QUBITS, Circuit, GateOp
from blochsim.core.linalg import as_matrix
from blochsim.logging import get_logger

logger = get_logger(__name__)


# Gate name mapping from Qiskit to blochsim
QISKIT_GATE_MAP = {
    "id": "I",
    "x": "X",
    "y": "Y",
    "z": "Z",
    "h": "H",
    "s": "S",
    "t": "T",
    "rx": "RX",
    "ry": "RY",
    "rz": "RZ",
    "cx": "CNOT",
    "cnot": "CNOT",
    "cz": "CZ",
    "swap": "SWAP",
}

QISKIT_SKIPPED = {"barrier", "measure"}


def check_qubit_count(num_qubits: Any, max_qubits: int = DEFAULT_MAX_QUBITS) -> None:
    """
    Reject non-integer, non-positive or oversized qubit counts.

    ``max_qubits`` never lifts the limit above ``HARD_MAX_QUBITS``.
    """
    max_qubits = min(max_qubits, HARD_MAX_QUBITS)
    if isinstance(num_qubits, bool) or not isinstance(num_qubits, (int, np.integer)):
        raise CircuitValidationError([f"numQubits must be an integer, got {num_qubits!r}"])
    if num_qubits <= 0:
        raise CircuitValidationError([f"numQubits must be positive, got {num_qubits}"])
    if num_qubits > max_qubits:
        raise CircuitValidationError([
            f"numQubits={num_qubits} exceeds the limit of {max_qubits} qubits"
        ])


def _gate_problems(index: int, gate: GateOp, num_qubits: int) -> List[str]:
    prefix = f"gate {index} ({gate.name})"
    problems = []

    if len(gate.qubits) not in (1, 2):
        problems.append(f"{prefix}: acts on {len(gate.qubits)} qubits, expected 1 or 2")

    for q in gate.qubits:
        if isinstance(q, bool) or not isinstance(q, (int, np.integer)):
            problems.append(f"{prefix}: qubit index {q!r} is not an integer")
        elif not 0 <= q < num_qubits:
            problems.append(f"{prefix}: qubit {q} out of range [0, {num_qubits})")

    if len(set(gate.qubits)) != len(gate.qubits):
        problems.append(f"{prefix}: repeated qubit in {list(gate.qubits)}")

    if gate.matrix is not None:
        try:
            matrix = as_matrix(gate.matrix, f"matrix of {prefix}")
        except MatrixError as exc:
            problems.append(f"{prefix}: {exc}")
        else:
            expected = 2 ** len(gate.qubits)
            if len(gate.qubits) in (1, 2) and matrix.shape != (expected, expected):
                problems.append(
                    f"{prefix}: matrix is {matrix.shape[0]}x{matrix.shape[1]}, "
                    f"expected {expected}x{expected}"
                )
    elif not is_known_gate(gate.name):
        problems.append(f"{prefix}: unknown gate name")
    elif len(gate.qubits) in (1, 2) and gate_arity(gate.name) != len(gate.qubits):
        problems.append(
            f"{prefix}: acts on {gate_arity(gate.name)} qubit(s), "
            f"got {len(gate.qubits)} qubit index(es)"
        )

    return problems


def validate_circuit(circuit: Circuit, max_qubits: int = DEFAULT_MAX_QUBITS) -> None:
    """
    Check a circuit before simulation.

    Every problem is collected and reported together.

    Raises:
        CircuitValidationError: with one entry per problem found
    """
    check_qubit_count(circuit.num_qubits, max_qubits)

    problems: List[str] = []
    for index, gate in enumerate(circuit.gates):
        problems.extend(_gate_problems(index, gate, circuit.num_qubits))

    if problems:
        for problem in problems:
            logger.warning("Invalid circuit: %s", problem)
        raise CircuitValidationError(problems)


def _parse_gate(index: int, record: Any) -> GateOp:
    if not isinstance(record, Mapping):
        raise CircuitValidationError([f"gate {index}: expected an object, got {type(record).__name__}"])

    name = record.get("name")
    if not isinstance(name, str) or not name:
        raise CircuitValidationError([f"gate {index}: missing gate name"])

    qubits = record.get("qubits")
    if isinstance(qubits, (int, np.integer)) and not isinstance(qubits, bool):
        qubits = [qubits]
    if not isinstance(qubits, (list, tuple)):
        raise CircuitValidationError([f"gate {index} ({name}): 'qubits' must be a list"])

    params = record.get("params") or {}
    if not isinstance(params, Mapping):
        raise CircuitValidationError([f"gate {index} ({name}): 'params' must be an object"])

    try:
        params = {str(k): float(v) for k, v in params.items()}
    except (TypeError, ValueError) as exc:
        raise CircuitValidationError([f"gate {index} ({name}): bad parameter value: {exc}"]) from exc

    return GateOp(
        name=name,
        qubits=tuple(qubits),
        matrix=record.get("matrix"),
        params=params,
    )


def circuit_from_dict(data: Mapping[str, Any]) -> Circuit:
    """
    Parse the wire format ``{"numQubits": n, "gates": [...]}``.

    Each gate is ``{"name": str, "qubits": [int, ...]}`` with optional
    ``"matrix"`` and ``"params"``. ``num_qubits`` is accepted as a synonym
    for ``numQubits``. Only the structure is checked here; see
    ``validate_circuit`` for the semantic checks.
    """
    if not isinstance(data, Mapping):
        raise CircuitValidationError([f"circuit must be an object, got {type(data).__name__}"])

    num_qubits = data.get("numQubits", data.get("num_qubits"))
    if num_qubits is None:
        raise CircuitValidationError(["circuit is missing 'numQubits'"])

    gate_list = data.get("gates", [])
    if not isinstance(gate_list, (list, tuple)):
        raise CircuitValidationError(["'gates' must be a list"])

    gates = [_parse_gate(i, record) for i, record in enumerate(gate_list)]
    return Circuit(num_qubits=num_qubits, gates=gates)


def load_circuit(source: Union[str, os.PathLike]) -> Circuit:
    """
    Load a circuit from JSON text or from a path to a JSON file.

    Raises:
        CircuitValidationError: if the text is not valid JSON
        FileNotFoundError: if ``source`` is neither JSON text nor an existing path
    """
    text = os.fspath(source)
    if not text.lstrip().startswith("{"):
        if not os.path.exists(text):
            raise FileNotFoundError(f"circuit file not found: {text}")
        with open(text, "r", encoding="utf-8") as fh:
            text = fh.read()

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CircuitValidationError([f"invalid circuit JSON: {exc}"]) from exc
    return circuit_from_dict(data)


def circuit_to_dict(circuit: Circuit, include_matrices: bool = False) -> Dict[str, Any]:
    """
    Convert a Circuit to the wire format.

    Explicit matrices are dropped unless ``include_matrices`` is set, in
    which case real-valued matrices are written as nested lists.
    """
    gates = []
    for gate in circuit.gates:
        record: Dict[str, Any] = {"name": gate.name, "qubits": [int(q) for q in gate.qubits]}
        if gate.params:
            record["params"] = dict(gate.params)
        if include_matrices and gate.matrix is not None:
            matrix = as_matrix(gate.matrix)
            if np.any(np.imag(matrix)):
                raise ValueError(f"Cannot serialise complex matrix of gate {gate.name!r}")
            record["matrix"] = np.real(matrix).tolist()
        gates.append(record)
    return {"numQubits": circuit.num_qubits, "gates": gates}


def parse_qiskit_circuit(circuit) -> Circuit:
    """
    Convert a Qiskit QuantumCircuit into a blochsim Circuit.

    Barriers and measurements are skipped. Gates outside the blochsim
    catalog are carried over as explicit matrices via ``Operator``; this
    needs Qiskit's little-endian matrix reordered to blochsim's qubit order.

    Args:
        circuit: A qiskit.QuantumCircuit with bound parameters
    """
    try:
        from qiskit.quantum_info import Operator
    except ImportError:
        raise ImportError("Qiskit is required for circuit parsing. "
                          "Install with: pip install qiskit")

    gates: List[GateOp] = []

    for instruction in circuit.data:
        op = instruction.operation
        qubits = tuple(circuit.find_bit(q).index for q in instruction.qubits)
        qiskit_name = op.name.lower()

        if qiskit_name in QISKIT_SKIPPED:
            continue

        params: Dict[str, float] = {}
        if qiskit_name in ("rx", "ry", "rz"):
            params["theta"] = float(op.params[0])

        if qiskit_name in QISKIT_GATE_MAP:
            gates.append(GateOp(name=QISKIT_GATE_MAP[qiskit_name], qubits=qubits, params=params))
            continue

        if len(qubits) not in (1, 2):
            raise CircuitValidationError([
                f"Qiskit gate {op.name!r} acts on {len(qubits)} qubits, only 1 or 2 are supported"
            ])

        matrix = Operator(op).data
        if len(qubits) == 2:
            # Qiskit orders the first qubit as the least significant bit
            matrix = matrix.reshape(2, 2, 2, 2).transpose(1, 0, 3, 2).reshape(4, 4)
        logger.debug("Importing Qiskit gate %s as an explicit matrix", op.name)
        gates.append(GateOp(name=op.name.upper(), qubits=qubits, matrix=matrix))

    return Circuit(num_qubits=circuit.num_qubits, gates=gates)
