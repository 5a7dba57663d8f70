"""
Test Suite: Gates, Circuits and the Instruction Loader
======================================================
"""

import numpy as np
import pytest

from qxsim.core import gates
from qxsim.core.circuit import Circuit, load_circuit, load_instruction
from qxsim.core.register import QuRegister
from qxsim.exceptions import InvalidQubitError, UnsupportedOperationError
from qxsim.program import Instruction, SubCircuit

SQRT1_2 = 1 / np.sqrt(2)


def apply_all(reg, *ops):
    for op in ops:
        op.apply(reg)
    return reg


# =============================================================================
# GATE KERNELS
# =============================================================================

class TestSingleQubitGates:

    def test_x_flips_the_addressed_bit(self):
        reg = apply_all(QuRegister(3), gates.PauliX(1))
        assert reg[0b010] == 1.0

    def test_hadamard_is_self_inverse(self):
        reg = apply_all(QuRegister(2), gates.Hadamard(1))
        assert reg[0] == pytest.approx(SQRT1_2)
        assert reg[2] == pytest.approx(SQRT1_2)
        gates.Hadamard(1).apply(reg)
        assert np.allclose(reg.get_data(), [1, 0, 0, 0])

    def test_y_and_z_phases(self):
        reg = apply_all(QuRegister(1), gates.PauliY(0))
        assert reg[1] == pytest.approx(1j)
        gates.PauliZ(0).apply(reg)
        assert reg[1] == pytest.approx(-1j)

    def test_rx_pi_is_x_up_to_phase(self):
        reg = apply_all(QuRegister(1), gates.RX(0, np.pi))
        assert abs(reg[0]) == pytest.approx(0.0, abs=1e-12)
        assert reg[1] == pytest.approx(-1j)

    def test_t_squared_is_s(self):
        a = apply_all(QuRegister(1), gates.Hadamard(0), gates.PhaseT(0), gates.PhaseT(0))
        b = apply_all(QuRegister(1), gates.Hadamard(0), gates.PhaseS(0))
        assert np.allclose(a.get_data(), b.get_data())

    def test_base_classes_are_abstract(self):
        with pytest.raises(TypeError):
            gates.Gate(0)
        with pytest.raises(TypeError):
            gates._Rotation(0, 0.5)

    def test_gate_on_missing_qubit(self):
        with pytest.raises(InvalidQubitError):
            gates.PauliX(4).apply(QuRegister(2))


class TestMultiQubitGates:

    def test_bell_state(self):
        reg = apply_all(QuRegister(2), gates.Hadamard(0), gates.CNOT(0, 1))
        assert np.allclose(reg.get_data(), [SQRT1_2, 0, 0, SQRT1_2])

    def test_cnot_respects_control_and_target_order(self):
        reg = apply_all(QuRegister(2), gates.PauliX(1), gates.CNOT(1, 0))
        assert reg[0b11] == 1.0

    def test_toffoli(self):
        reg = apply_all(QuRegister(3), gates.PauliX(0), gates.PauliX(1), gates.Toffoli(0, 1, 2))
        assert reg[0b111] == 1.0
        reg = apply_all(QuRegister(3), gates.PauliX(0), gates.Toffoli(0, 1, 2))
        assert reg[0b001] == 1.0

    def test_cz_phase(self):
        reg = apply_all(QuRegister(2), gates.PauliX(0), gates.PauliX(1), gates.CZ(0, 1))
        assert reg[3] == -1.0

    def test_swap(self):
        reg = apply_all(QuRegister(3), gates.PauliX(0), gates.Swap(0, 2))
        assert reg[0b100] == 1.0

    def test_duplicate_operands_rejected(self):
        with pytest.raises(ValueError):
            gates.CNOT(1, 1)


class TestPreparationAndMeasurement:

    def test_prep_z_resets_excited_qubit(self):
        reg = apply_all(QuRegister(2, seed=0), gates.PauliX(0), gates.PauliX(1), gates.PrepZ(0))
        assert reg[0b10] == pytest.approx(1.0)
        assert reg.get_measurement(0) is False

    def test_measure_all(self):
        reg = apply_all(QuRegister(2, seed=0), gates.PauliX(1), gates.MeasureAll())
        assert reg.get_measurement(1) is True
        assert reg.get_measurement(0) is False


# =============================================================================
# CIRCUITS
# =============================================================================

class TestCircuit:

    @pytest.mark.parametrize("iterations, excited", [(1, True), (2, False), (3, True)])
    def test_iterations_repeat_the_operation_list(self, iterations, excited):
        circuit = Circuit(1, iterations=iterations, operations=[gates.PauliX(0)])
        reg = QuRegister(1)
        result = circuit.apply(reg)
        assert result.success
        assert result.operations_applied == iterations
        assert (reg[1] == 1.0) is excited

    def test_failure_is_reported_not_raised(self):
        circuit = Circuit(2, name="broken", operations=[gates.PauliX(0), gates.PauliX(5)])
        result = circuit.apply(QuRegister(2))
        assert not result
        assert result.operations_applied == 1
        assert "5" in result.error

    def test_size_and_iteration_accessors(self):
        circuit = Circuit(2, iterations=4).add(gates.Hadamard(0)).add(gates.CNOT(0, 1))
        assert circuit.size() == 2
        assert circuit.get_iterations() == 4
        with pytest.raises(ValueError):
            circuit.set_iterations(0)


# =============================================================================
# LOADER
# =============================================================================

class TestLoader:

    def test_loads_known_instructions(self):
        sub = SubCircuit("prep", [
            Instruction("H", (0,)),
            Instruction("cnot", (0, 1)),
            Instruction("rz", (1,), (0.5,)),
            Instruction("measure_all"),
        ], iterations=2)
        circuit = load_circuit(2, sub)
        assert circuit.size() == 4
        assert circuit.get_iterations() == 2
        assert isinstance(circuit[0], gates.Hadamard)
        assert circuit[2].angle == 0.5

    def test_unknown_instruction(self):
        with pytest.raises(UnsupportedOperationError):
            load_instruction(2, Instruction("qft", (0, 1)))

    def test_wrong_arity(self):
        with pytest.raises(UnsupportedOperationError):
            load_instruction(2, Instruction("cnot", (0,)))
        with pytest.raises(UnsupportedOperationError):
            load_instruction(2, Instruction("rx", (0,)))

    def test_operand_out_of_range(self):
        with pytest.raises(InvalidQubitError):
            load_instruction(2, Instruction("x", (2,)))

    def test_repeated_operands_are_unsupported(self):
        with pytest.raises(UnsupportedOperationError):
            load_instruction(2, Instruction("swap", (1, 1)))
