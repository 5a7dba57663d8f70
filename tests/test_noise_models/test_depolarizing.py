"""
Test Suite: Depolarizing Channel
================================

Checks the Monte Carlo error injector:

1. p = 0 and p = 1 limits
2. The input circuit is never modified
3. Iterations are unrolled into independent noisy copies
4. The shared error counter under concurrent use
5. Probability validation
"""

import threading
import warnings

import numpy as np
import pytest

from qxsim.core import gates
from qxsim.core.circuit import Circuit
from qxsim.noise_models import ErrorCounter, build_noisy_circuits, noisy_dep_ch, unroll_noisy


@pytest.fixture
def ghz_circuit() -> Circuit:
    return Circuit(3, name="ghz", operations=[
        gates.Hadamard(0), gates.CNOT(0, 1), gates.CNOT(1, 2),
    ])


# =============================================================================
# CATEGORY 1: LIMITS
# =============================================================================

class TestProbabilityLimits:

    def test_p_zero_copies_the_circuit(self, ghz_circuit):
        counter = ErrorCounter()
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            noisy = noisy_dep_ch(ghz_circuit, 0.0, counter, np.random.default_rng(0))
        assert list(noisy) == list(ghz_circuit)
        assert counter.count == 0
        assert noisy.name == "ghz_noisy"

    def test_p_one_adds_an_error_after_every_operation(self, ghz_circuit):
        counter = ErrorCounter()
        with pytest.warns(UserWarning, match="exceeds 3/4"):
            noisy = noisy_dep_ch(ghz_circuit, 1.0, counter, np.random.default_rng(0))

        assert counter.count == ghz_circuit.size()
        assert noisy.size() == 2 * ghz_circuit.size()
        for i, op in enumerate(ghz_circuit):
            assert noisy[2 * i] is op
            injected = noisy[2 * i + 1]
            assert isinstance(injected, gates.PAULI_ERRORS)
            assert 0 <= injected.qubit < 3

    def test_injected_error_count_is_roughly_p_times_size(self):
        circuit = Circuit(4, operations=[gates.Identity(q % 4) for q in range(10000)])
        counter = ErrorCounter()
        noisy_dep_ch(circuit, 0.1, counter, np.random.default_rng(7))
        assert 850 < counter.count < 1150

    def test_zero_qubit_circuit_gets_no_errors(self):
        circuit = Circuit(0, operations=[gates.MeasureAll()])
        counter = ErrorCounter()
        with pytest.warns(UserWarning):
            noisy = noisy_dep_ch(circuit, 1.0, counter)
        assert noisy.size() == 1
        assert counter.count == 0


# =============================================================================
# CATEGORY 2: IMMUTABILITY AND REPRODUCIBILITY
# =============================================================================

class TestInputUntouched:

    def test_original_circuit_is_not_modified(self, ghz_circuit):
        before = list(ghz_circuit)
        with pytest.warns(UserWarning):
            noisy_dep_ch(ghz_circuit, 1.0, ErrorCounter(), np.random.default_rng(1))
        assert list(ghz_circuit) == before
        assert ghz_circuit.size() == 3

    def test_same_seed_same_noise(self, ghz_circuit):
        a = noisy_dep_ch(ghz_circuit, 0.5, ErrorCounter(), np.random.default_rng(42))
        b = noisy_dep_ch(ghz_circuit, 0.5, ErrorCounter(), np.random.default_rng(42))
        assert list(a) == list(b)


# =============================================================================
# CATEGORY 3: UNROLLING
# =============================================================================

class TestUnrolling:

    def test_one_noisy_copy_per_iteration(self, ghz_circuit):
        ghz_circuit.set_iterations(4)
        counter = ErrorCounter()
        with pytest.warns(UserWarning):
            copies = unroll_noisy(ghz_circuit, 1.0, counter, np.random.default_rng(3))
        assert len(copies) == 4
        assert all(c.get_iterations() == 1 for c in copies)
        assert counter.count == ghz_circuit.size() * 4

    def test_copies_are_sampled_independently(self):
        circuit = Circuit(8, iterations=20, operations=[gates.Identity(0)] * 20)
        copies = unroll_noisy(circuit, 0.5, ErrorCounter(), np.random.default_rng(5))
        patterns = {tuple(repr(op) for op in c) for c in copies}
        assert len(patterns) > 1

    def test_empty_circuits_are_skipped(self, ghz_circuit):
        empty = Circuit(3, name="empty", iterations=5)
        noisy = build_noisy_circuits([empty, ghz_circuit, empty], 0.0, ErrorCounter())
        assert len(noisy) == 1
        assert noisy[0].name == "ghz_noisy"


# =============================================================================
# CATEGORY 4: ERROR COUNTER
# =============================================================================

class TestErrorCounter:

    def test_concurrent_increments_are_not_lost(self):
        counter = ErrorCounter()

        def work():
            for _ in range(1000):
                counter.increment()

        threads = [threading.Thread(target=work) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert int(counter) == 8000

    def test_reset(self):
        counter = ErrorCounter(5)
        counter.reset()
        assert counter.count == 0


# =============================================================================
# CATEGORY 5: VALIDATION
# =============================================================================

class TestValidation:

    @pytest.mark.parametrize("p", [-0.1, 1.5])
    def test_probability_out_of_range(self, ghz_circuit, p):
        with pytest.raises(ValueError):
            noisy_dep_ch(ghz_circuit, p, ErrorCounter())
