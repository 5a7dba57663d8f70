"""
Test Suite: Quantum Register
============================

Verifies the register's state layout, lifecycle and reporting:

1. Initial state: all probability on |0...0> for every size
2. Reset: bit-exact restore, measurement state cleared, tallies kept
3. Averaging control: enable/reset/disable all clear the tallies
4. Normalization and the numerical drift probe
5. String views of the state
6. Allocation failure
"""

import logging

import numpy as np
import pytest

from qxsim.core.gates import Hadamard, PauliX
from qxsim.core.register import MeasurementState, QuRegister
from qxsim.exceptions import AllocationError, InvalidQubitError


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def bell_register() -> QuRegister:
    reg = QuRegister(2, seed=11)
    reg.set_data(np.array([1, 0, 0, 1]) / np.sqrt(2))
    return reg


# =============================================================================
# CATEGORY 1: INITIAL STATE
# =============================================================================

class TestInitialState:

    @pytest.mark.parametrize("n_qubits", range(1, 21))
    def test_fresh_register_is_all_zero(self, n_qubits):
        reg = QuRegister(n_qubits)
        assert reg.states() == 2 ** n_qubits
        assert reg[0] == 1.0
        assert np.count_nonzero(reg.get_data()) == 1
        assert reg.check(), f"Fresh {n_qubits}-qubit register failed the norm check"

    def test_initial_measurement_state(self):
        reg = QuRegister(3)
        assert all(s is MeasurementState.UNKNOWN for s in reg.measurement_prediction)
        assert reg.measurement_register == [False, False, False]
        assert all(c.total == 0 for c in reg.measurement_averaging)

    def test_negative_qubit_count_rejected(self):
        with pytest.raises(ValueError):
            QuRegister(-1)


# =============================================================================
# CATEGORY 2: RESET
# =============================================================================

class TestReset:

    def test_reset_restores_initial_amplitudes_exactly(self):
        reg = QuRegister(3, seed=1)
        initial = reg.get_state_vector()
        Hadamard(0).apply(reg)
        PauliX(2).apply(reg)
        reg.measure()

        reg.reset()

        assert np.array_equal(reg.get_data(), initial)
        assert reg.measurement_register == [False] * 3
        assert all(s is MeasurementState.UNKNOWN for s in reg.measurement_prediction)

    def test_reset_keeps_average_counters(self):
        reg = QuRegister(2)
        PauliX(0).apply(reg)
        reg.measure()
        reg.accumulate_measurement()

        reg.reset()

        assert reg.measurement_averaging[0].excited_states == 1
        assert reg.measurement_averaging[1].ground_states == 1
        assert reg.get_average_measurement(0) == 1.0


# =============================================================================
# CATEGORY 3: AVERAGING CONTROL
# =============================================================================

class TestAveragingControl:

    @pytest.fixture
    def tallied(self) -> QuRegister:
        reg = QuRegister(2)
        for bits in ([True, False], [True, True], [False, False]):
            reg.measurement_register = list(bits)
            reg.accumulate_measurement()
        return reg

    @pytest.mark.parametrize("call", [
        "enable_measurement_averaging",
        "reset_measurement_averaging",
        "disable_measurement_averaging",
    ])
    def test_every_control_call_clears_both_counters(self, tallied, call):
        getattr(tallied, call)()
        for counts in tallied.measurement_averaging:
            assert counts.ground_states == 0
            assert counts.excited_states == 0

    def test_disable_leaves_averaging_enabled(self, tallied):
        tallied.disable_measurement_averaging()
        assert tallied.measurement_averaging_enabled is True

    def test_average_is_excited_fraction(self, tallied):
        assert tallied.get_average_measurement(0) == pytest.approx(2 / 3)
        assert tallied.get_average_measurement(1) == pytest.approx(1 / 3)

    def test_missing_average_is_not_available(self, caplog):
        reg = QuRegister(2)
        with caplog.at_level(logging.ERROR, logger="qxsim"):
            assert reg.get_average_measurement(1) is None
        assert "not available" in caplog.text

    def test_invalid_qubit(self):
        reg = QuRegister(2)
        with pytest.raises(InvalidQubitError):
            reg.get_average_measurement(2)


# =============================================================================
# CATEGORY 4: NORMALIZATION AND COLLAPSE
# =============================================================================

class TestNormalization:

    def test_normalize_rescales_to_unit_mass(self):
        reg = QuRegister(2)
        reg.set_data([3, 4j, 0, 0])
        assert not reg.check()
        reg.normalize()
        assert reg.check()
        assert reg[0] == pytest.approx(0.6)
        assert reg[1] == pytest.approx(0.8j)

    def test_drift_is_reported_not_corrected(self, caplog):
        reg = QuRegister(1)
        reg.set_data([1.0, 1e-3])
        with caplog.at_level(logging.WARNING, logger="qxsim"):
            assert reg.check() is False
        assert "drifted" in caplog.text
        assert reg[1] == 1e-3

    def test_collapse(self, bell_register):
        assert bell_register.collapse(3) == 3
        assert np.array_equal(bell_register.get_data(), np.array([0, 0, 0, 1], dtype=complex))

    def test_collapse_out_of_range(self, bell_register):
        with pytest.raises(IndexError):
            bell_register.collapse(4)

    def test_state_vector_is_a_copy(self, bell_register):
        snapshot = bell_register.get_state_vector()
        bell_register.collapse(0)
        assert snapshot[3] == pytest.approx(1 / np.sqrt(2))


# =============================================================================
# CATEGORY 5: STRING VIEWS
# =============================================================================

class TestStateStrings:

    def test_full_state_of_fresh_register(self):
        reg = QuRegister(2)
        assert reg.get_state(only_binary=False) == "START\n   (1.000000,0.000000) |00> +\nEND\n"

    def test_full_state_lists_nonzero_amplitudes_msb_first(self):
        reg = QuRegister(3)
        reg.collapse(0b001)
        assert "|001>" in reg.get_state()
        assert "|100>" not in reg.get_state()

    def test_binary_view_is_msb_first(self):
        reg = QuRegister(3)
        reg.set_measurement_from_state(0b001)
        assert reg.get_state(only_binary=True) == "START\n | 0 | 0 | 1 | \nEND\n"

    def test_prediction_decoded_from_basis_index(self):
        reg = QuRegister(4)
        reg.set_measurement_prediction_from_state(0b1010)
        reg.set_measurement_from_state(0b1010)
        assert [s.symbol for s in reg.measurement_prediction] == ["0", "1", "0", "1"]
        assert reg.measurement_register == [False, True, False, True]

    def test_flip_helpers(self):
        reg = QuRegister(1)
        reg.set_measurement_prediction(0, MeasurementState.ZERO)
        reg.flip_binary(0)
        reg.flip_measurement(0)
        assert reg.get_measurement_prediction(0) is MeasurementState.ONE
        assert reg.test(0)
        assert reg.get_measurement(0) is True


# =============================================================================
# CATEGORY 6: ALLOCATION
# =============================================================================

class TestAllocation:

    def test_more_than_64_qubits_is_an_allocation_error(self):
        with pytest.raises(AllocationError) as excinfo:
            QuRegister(65)
        assert isinstance(excinfo.value, MemoryError)
        assert excinfo.value.n_qubits == 65
