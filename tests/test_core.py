"""
Tests for blochsim core components.
"""

import io

import pytest
import numpy as np

from blochsim.core import linalg
from blochsim.core.density_matrix import (
    BlochVector,
    ReducedState,
    bloch_vector,
    linear_purity,
    partial_trace,
    purity,
)
from blochsim.core.errors import CircuitValidationError, MatrixError, UnknownGateError
from blochsim.core.gates import (
    AVAILABLE_GATES,
    LEGACY_GATES,
    PAULI_X,
    SINGLE_QUBIT_GATES,
    STANDARD_GATES,
    TWO_QUBIT_GATES,
    gate_arity,
    gate_catalog,
    get_gate_matrix,
    resolve_matrix,
)
from blochsim.core.io_spec import HARD_MAX_QUBITS, Circuit, GateOp, SimulatorConfig
from blochsim.logging import configure_logging, get_logger


A = np.array([[1, 2], [3, 4]])
B = np.array([[0, 5], [6, 7]])
C = np.array([[1, -1, 2]])


class TestLinalg:
    """Tests for the linear-algebra kernel."""

    def test_multiply(self):
        assert np.allclose(linalg.multiply(A, B), A @ B)

    def test_multiply_rejects_mismatched_shapes(self):
        with pytest.raises(MatrixError):
            linalg.multiply(A, C)

    def test_tensor_product_elements(self):
        result = linalg.tensor_product(A, B)
        assert result.shape == (4, 4)
        for i in range(2):
            for j in range(2):
                for k in range(2):
                    for l in range(2):
                        assert result[i * 2 + k, j * 2 + l] == A[i, j] * B[k, l]

    def test_tensor_product_rectangular_shape(self):
        assert linalg.tensor_product(A, C).shape == (2, 6)
        assert linalg.tensor_product(C, A).shape == (2, 6)

    def test_tensor_product_associative(self):
        left = linalg.tensor_product(linalg.tensor_product(A, B), C)
        right = linalg.tensor_product(A, linalg.tensor_product(B, C))
        assert left.shape == right.shape == (4, 12)
        assert np.array_equal(left, right)

    @pytest.mark.parametrize("bad", [None, [], [[]], [[1, 2], [3]], [1, 2, 3]])
    def test_tensor_product_rejects_malformed(self, bad):
        with pytest.raises(MatrixError):
            linalg.tensor_product(bad, A)
        with pytest.raises(MatrixError):
            linalg.tensor_product(A, bad)

    def test_non_finite_operands_rejected(self):
        with pytest.raises(MatrixError):
            linalg.as_matrix([[np.nan, 0], [0, 1]])
        with pytest.raises(MatrixError):
            linalg.multiply(A, [[np.inf, 0], [0, 1]])
        assert np.isnan(linalg.as_matrix([[np.nan]], allow_nonfinite=True)[0, 0])

    def test_trace(self):
        assert linalg.trace(A) == 5
        with pytest.raises(MatrixError):
            linalg.trace(C)

    def test_transpose_and_adjoint(self):
        m = np.array([[1, 1j], [2, 3]])
        assert np.array_equal(linalg.transpose(m), np.array([[1, 2], [1j, 3]]))
        assert np.array_equal(linalg.adjoint(m), np.array([[1, 2], [-1j, 3]]))
        # Real matrices: transpose is the adjoint
        assert np.array_equal(linalg.transpose(A), linalg.adjoint(A))

    def test_matrix_trace2(self):
        assert linalg.matrix_trace2(A) == np.trace(A @ A)
        rho = np.diag([0.5, 0.5])
        assert np.isclose(linalg.matrix_trace2(rho), 0.5)

    def test_is_unitary(self):
        assert linalg.is_unitary(STANDARD_GATES["H"])
        assert not linalg.is_unitary(LEGACY_GATES["T"])
        assert not linalg.is_unitary(C)


class TestGates:
    """Tests for the gate registry."""

    def test_catalog_partition(self):
        assert set(SINGLE_QUBIT_GATES) | set(TWO_QUBIT_GATES) == set(AVAILABLE_GATES)
        assert not set(SINGLE_QUBIT_GATES) & set(TWO_QUBIT_GATES)
        assert gate_catalog() == {
            "single": ["I", "X", "Y", "Z", "H", "S", "T", "RX", "RY", "RZ"],
            "two": ["CNOT", "CZ", "SWAP"],
        }

    def test_registries_are_read_only(self):
        with pytest.raises(TypeError):
            STANDARD_GATES["X"] = np.eye(2)
        with pytest.raises(ValueError):
            STANDARD_GATES["X"][0, 0] = 5

    def test_lookup_returns_copy(self):
        m = get_gate_matrix("x")
        m[0, 0] = 9
        assert STANDARD_GATES["X"][0, 0] == 0

    def test_alias_and_case(self):
        assert np.array_equal(get_gate_matrix("cx"), get_gate_matrix("CNOT"))
        assert gate_arity("cnot") == 2
        assert gate_arity("h") == 1

    def test_unknown_gate(self):
        with pytest.raises(UnknownGateError):
            get_gate_matrix("FOO")
        with pytest.raises(ValueError):
            get_gate_matrix("X", gate_set="nonsense")

    @pytest.mark.parametrize("name", AVAILABLE_GATES)
    def test_standard_gates_unitary(self, name):
        assert linalg.is_unitary(get_gate_matrix(name, {"theta": 0.3}))

    def test_exact_phase_gates(self):
        assert np.allclose(get_gate_matrix("S"), np.diag([1, 1j]))
        assert np.allclose(get_gate_matrix("T"), np.diag([1, np.exp(1j * np.pi / 4)]))
        assert np.allclose(get_gate_matrix("Y"), [[0, -1j], [1j, 0]])

    def test_rotation_matrices(self):
        theta = 0.7
        c, s = np.cos(theta / 2), np.sin(theta / 2)
        assert np.allclose(get_gate_matrix("RX", {"theta": theta}), [[c, -1j * s], [-1j * s, c]])
        assert np.allclose(get_gate_matrix("RY", {"theta": theta}), [[c, -s], [s, c]])
        assert np.allclose(
            get_gate_matrix("RZ", {"theta": theta}),
            np.diag([np.exp(-1j * theta / 2), np.exp(1j * theta / 2)])
        )

    def test_rotation_default_angle(self):
        assert np.allclose(get_gate_matrix("RY"), get_gate_matrix("RY", {"theta": np.pi / 2}))

    def test_legacy_gates(self):
        assert np.allclose(get_gate_matrix("Y", gate_set="legacy"), [[0, -1], [1, 0]])
        assert np.allclose(get_gate_matrix("S", gate_set="legacy"), np.eye(2))
        assert np.allclose(get_gate_matrix("T", gate_set="legacy"), np.diag([1, 1.414]))
        # Fixed angle: parameters are ignored
        assert np.allclose(
            get_gate_matrix("RY", {"theta": 0.1}, gate_set="legacy"),
            [[0.707, -0.707], [0.707, 0.707]]
        )

    def test_explicit_matrix_precedence(self):
        gate = GateOp(name="X", qubits=(0,), matrix=[[1, 0], [0, 1]])
        assert np.allclose(resolve_matrix(gate), np.eye(2))

        unnamed = GateOp(name="MY_GATE", qubits=(0,), matrix=PAULI_X)
        assert np.allclose(resolve_matrix(unnamed), PAULI_X)

    def test_matrix_size_must_match_qubits(self):
        with pytest.raises(CircuitValidationError):
            resolve_matrix(GateOp(name="CNOT", qubits=(0,)))
        with pytest.raises(CircuitValidationError):
            resolve_matrix(GateOp(name="H", qubits=(0,), matrix=np.eye(4)))


class TestPartialTrace:
    """Tests for the reduction engine."""

    def test_single_qubit_is_identity_operation(self):
        rho = np.array([[0.25, 0.1], [0.1, 0.75]])
        assert np.allclose(partial_trace(rho, 0, 1), rho)

    def test_product_state_recovers_factors(self):
        rho_a = np.array([[0.5, 0.5], [0.5, 0.5]])
        rho_b = np.array([[0.0, 0.0], [0.0, 1.0]])
        rho_c = np.array([[0.5, -0.5j], [0.5j, 0.5]])
        full = np.kron(np.kron(rho_a, rho_b), rho_c)

        assert np.allclose(partial_trace(full, 0, 3), rho_a)
        assert np.allclose(partial_trace(full, 1, 3), rho_b)
        assert np.allclose(partial_trace(full, 2, 3), rho_c)

    def test_bell_state_marginals(self):
        psi = np.array([1, 0, 0, 1]) / np.sqrt(2)
        full = np.outer(psi, psi.conj())
        for q in range(2):
            assert np.allclose(partial_trace(full, q, 2), np.eye(2) / 2)

    def test_rejects_wrong_dimension(self):
        with pytest.raises(MatrixError):
            partial_trace(np.eye(4) / 4, 0, 3)
        with pytest.raises(ValueError):
            partial_trace(np.eye(4) / 4, 2, 2)


class TestReducedState:
    """Tests for purity and Bloch coordinates."""

    def test_zero_state(self):
        state = ReducedState.from_density_matrix(0, [[1, 0], [0, 0]])
        assert state.purity == 1.0
        assert state.linear_purity == 1.0
        assert state.bloch_vector == BlochVector(0.0, 0.0, 1.0)
        assert state.is_pure
        assert np.isclose(state.probability_zero(), 1.0)
        assert np.isclose(state.probability_one(), 0.0)
        assert np.isclose(state.von_neumann_entropy(), 0.0)

    def test_mixed_state_purity(self):
        rho = np.eye(2) / 2
        assert np.isclose(linear_purity(rho), 0.5)
        assert np.isclose(purity(rho), np.sqrt(0.5))
        state = ReducedState.from_density_matrix(0, rho)
        assert np.isclose(state.von_neumann_entropy(), 1.0)
        assert not state.is_pure

    def test_purity_is_clamped(self):
        # Non-physical operators from legacy gates can overshoot
        assert purity(np.diag([1.2, 0.0])) == 1.0

    def test_bloch_vector_y_component(self):
        plus_i = np.array([[0.5, -0.5j], [0.5j, 0.5]])
        assert np.allclose(bloch_vector(plus_i), [0, 1, 0])
        # The real stand-in for Y cannot see imaginary coherences
        assert np.allclose(bloch_vector(plus_i, gate_set="legacy"), [0, 0, 0])

    def test_bloch_vector_nan_coerced(self):
        rho = np.array([[np.nan, 0], [0, 0]])
        vec = bloch_vector(rho)
        assert vec.x == 0.0 and vec.y == 0.0 and vec.z == 0.0

    def test_to_dict(self):
        state = ReducedState.from_density_matrix(1, [[0.5, 0.5], [0.5, 0.5]])
        record = state.to_dict()
        assert record["qubit"] == 1
        assert record["matrix"] == [[0.5, 0.5], [0.5, 0.5]]
        assert record["blochVector"] == {"x": 1.0, "y": 0.0, "z": 0.0}
        assert "matrixImag" not in record
        assert np.isclose(record["purity"], 1.0)


class TestIOSpec:
    """Tests for circuit records and configuration."""

    def test_circuit_builder(self):
        circuit = Circuit(num_qubits=2).add("H", 0).add("RX", 1, theta=0.5).add("CNOT", 0, 1)
        assert circuit.num_gates == 3
        assert circuit.gates[1].params == {"theta": 0.5}
        assert circuit.gates[2].qubits == (0, 1)

    def test_config_validation(self):
        assert SimulatorConfig().gate_set == "standard"
        assert SimulatorConfig.legacy().gate_set == "legacy"
        with pytest.raises(ValueError):
            SimulatorConfig(gate_set="complex")
        with pytest.raises(ValueError):
            SimulatorConfig(max_qubits=0)
        with pytest.raises(ValueError):
            SimulatorConfig(max_qubits=HARD_MAX_QUBITS + 1)
        assert SimulatorConfig(max_qubits=HARD_MAX_QUBITS).max_qubits == HARD_MAX_QUBITS


class TestLogging:
    """Tests for the package loggers."""

    def test_namespace(self):
        assert get_logger("blochsim.core.linalg").name == "blochsim.core.linalg"
        assert get_logger("custom").name == "blochsim.custom"
        assert get_logger() is get_logger("blochsim")

    def test_configure_logging_redirects_output(self):
        stream = io.StringIO()
        configure_logging("ERROR", format_string="%(levelname)s|%(message)s", stream=stream)
        try:
            with pytest.raises(MatrixError):
                linalg.as_matrix(None, "operand")
            get_logger("blochsim.core.linalg").warning("below the level")
        finally:
            configure_logging()
        lines = stream.getvalue().splitlines()
        assert lines == ["ERROR|Missing operand operand"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
