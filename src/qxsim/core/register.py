"""
Quantum Register
================

Dense state-vector register with per-qubit measurement bookkeeping.

STATE LAYOUT
------------

An n-qubit register stores 2^n complex amplitudes in a numpy array. The
array index is the basis state written as an n-bit integer, and bit q of
that integer is the classical value of qubit q:

    index 5 = 0b101  ->  qubit 0 = 1, qubit 1 = 0, qubit 2 = 1

Qubit 0 is therefore the least-significant bit. When a basis state is
printed as a ket the most-significant qubit comes first, so index 5 of a
3-qubit register is written |101>.

MEASUREMENT BOOKKEEPING
-----------------------

Besides the amplitudes, every qubit carries:

- ``measurement_prediction[q]``: ZERO, ONE or UNKNOWN. Set when a
  measurement decodes a collapsed basis state.
- ``measurement_register[q]``: last measured classical bit.
- ``measurement_averaging[q]``: running ground/excited tallies, used to
  estimate the probability of measuring |1> over many trials.

``reset()`` restores |0...0> and clears prediction and measurement, but
leaves the averaging tallies alone. Only the three averaging-control calls
zero them.

OWNERSHIP
---------

The register owns its amplitude array and mutates it in place (gates,
``collapse``, ``reset``, binomial resampling). ``data`` exposes the live
array for gate kernels; anything that needs to keep a snapshot must use
``get_state_vector()``, which returns a copy.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

import numpy as np

from ..exceptions import AllocationError, InvalidQubitError
from .binary_counter import BinaryCounter

logger = logging.getLogger(__name__)

MAX_QUBITS = 64
QUBIT_ERROR_THRESHOLD = 1e-10


class MeasurementState(Enum):
    ZERO = 0
    ONE = 1
    UNKNOWN = 2

    @property
    def symbol(self) -> str:
        return {MeasurementState.ZERO: "0",
                MeasurementState.ONE: "1",
                MeasurementState.UNKNOWN: "X"}[self]


@dataclass
class Integration:
    """Ground/excited tally for one qubit."""
    ground_states: int = 0
    excited_states: int = 0

    @property
    def total(self) -> int:
        return self.ground_states + self.excited_states

    def clear(self):
        self.ground_states = 0
        self.excited_states = 0


def _format_float(x: float) -> float:
    # Denormals print as 0
    return 0.0 if abs(x) < np.finfo(float).tiny else x


def format_amplitude(a: complex) -> str:
    return f"({_format_float(a.real):.6f},{_format_float(a.imag):.6f})"


def qubit_view(data: np.ndarray, n_qubits: int, q: int) -> np.ndarray:
    """
    View of the amplitudes with qubit ``q`` on its own axis.

    Shape is (2^(n-q-1), 2, 2^q); ``view[:, b, :]`` holds every amplitude
    whose bit q equals b. Writing to the view writes to ``data``.
    """
    return data.reshape(1 << (n_qubits - q - 1), 2, 1 << q)


# =============================================================================
# QUANTUM REGISTER
# =============================================================================

class QuRegister:
    """
    n-qubit quantum register.

    Parameters
    ----------
    n_qubits : int
        Number of qubits (0-64). Memory use is 16 * 2^n bytes.
    rng : numpy.random.Generator, optional
        Generator used for measurement sampling. If None, one is created
        from ``seed``.
    seed : int, optional
        Seed for the generator created when ``rng`` is None.

    Raises
    ------
    AllocationError
        If the state vector cannot be allocated.

    Example
    -------
    >>> reg = QuRegister(2, seed=7)
    >>> reg.states()
    4
    >>> reg.get_state(only_binary=False)
    'START\\n   (1.000000,0.000000) |00> +\\nEND\\n'
    """

    def __init__(self, n_qubits: int,
                 rng: Optional[np.random.Generator] = None,
                 seed: Optional[int] = None):
        if n_qubits < 0:
            raise ValueError(f"n_qubits must be non-negative, got {n_qubits}")
        if n_qubits > MAX_QUBITS:
            logger.error("Not enough memory for %d qubits, aborting", n_qubits)
            raise AllocationError(n_qubits, f"at most {MAX_QUBITS} qubits are addressable")

        try:
            self.data = np.zeros(1 << n_qubits, dtype=np.complex128)
        except (MemoryError, ValueError) as exc:
            logger.error("Not enough memory for %d qubits, aborting", n_qubits)
            raise AllocationError(n_qubits, str(exc)) from exc

        self.n_qubits = n_qubits
        self.rng = rng if rng is not None else np.random.default_rng(seed)

        self.measurement_prediction: List[MeasurementState] = [MeasurementState.UNKNOWN] * n_qubits
        self.measurement_register: List[bool] = [False] * n_qubits
        self.measurement_averaging: List[Integration] = [Integration() for _ in range(n_qubits)]
        self.measurement_averaging_enabled = False

        self.data[0] = 1.0
        logger.debug("Created quantum register of %d qubits", n_qubits)

    # === Size ===

    def size(self) -> int:
        """Number of qubits."""
        return self.n_qubits

    def states(self) -> int:
        """Number of basis states (2^n)."""
        return self.data.size

    def _check_qubit(self, q: int):
        if not 0 <= q < self.n_qubits:
            raise InvalidQubitError(q, self.n_qubits)

    # === Lifecycle ===

    def reset(self):
        """Return to |0...0> and forget measurement results."""
        self.data[:] = 0.0
        self.data[0] = 1.0
        self.measurement_prediction = [MeasurementState.UNKNOWN] * self.n_qubits
        self.measurement_register = [False] * self.n_qubits

    # Note: all three averaging-control calls clear both tallies and leave
    # averaging enabled. disable_measurement_averaging() does not disable.

    def enable_measurement_averaging(self):
        self.measurement_averaging_enabled = True
        for counts in self.measurement_averaging:
            counts.clear()

    def reset_measurement_averaging(self):
        self.measurement_averaging_enabled = True
        for counts in self.measurement_averaging:
            counts.clear()

    def disable_measurement_averaging(self):
        self.measurement_averaging_enabled = True
        for counts in self.measurement_averaging:
            counts.clear()

    # === Amplitudes ===

    def get_data(self) -> np.ndarray:
        """Live amplitude array. Invalidated in content by reset/collapse."""
        return self.data

    def set_data(self, vector):
        vector = np.asarray(vector, dtype=np.complex128)
        if vector.shape != self.data.shape:
            raise ValueError(f"Expected {self.data.size} amplitudes, got {vector.size}")
        self.data[:] = vector

    def get_state_vector(self) -> np.ndarray:
        """Copy of the amplitudes."""
        return self.data.copy()

    def probabilities(self) -> np.ndarray:
        """Born-rule probability of every basis state."""
        return np.abs(self.data) ** 2

    def __getitem__(self, i: int) -> complex:
        return self.data[i]

    def __setitem__(self, i: int, value: complex):
        self.data[i] = value

    def __len__(self) -> int:
        return self.data.size

    def normalize(self):
        """Rescale the amplitudes to unit total probability."""
        length = np.sqrt(np.sum(np.abs(self.data) ** 2))
        if length == 0.0:
            logger.error("Cannot normalize a zero state vector")
            return
        self.data /= length

    def check(self) -> bool:
        """
        True if the total probability is within 1e-10 of one.

        Linear in the number of basis states; never called automatically.
        """
        total = float(np.sum(np.abs(self.data) ** 2))
        ok = abs(total - 1.0) < QUBIT_ERROR_THRESHOLD
        if not ok:
            logger.warning("State vector norm drifted: sum |a|^2 = %.15f", total)
        return ok

    def collapse(self, entry: int) -> int:
        """Force the register into basis state ``entry``."""
        if not 0 <= entry < self.data.size:
            raise IndexError(f"Basis state {entry} out of range for {self.data.size} states")
        self.data[:] = 0.0
        self.data[entry] = 1.0
        return entry

    def rand(self) -> float:
        """Uniform draw in [0, 1)."""
        return float(self.rng.random())

    # === Measurement ===

    def measure(self) -> int:
        """
        Measure the entire register.

        Returns
        -------
        int
            Collapsed basis state, or -1 for a zero-qubit register.
        """
        from .measurement import measure_register
        return measure_register(self)

    def set_measurement_prediction(self, q: int, state: MeasurementState):
        self._check_qubit(q)
        self.measurement_prediction[q] = state

    def set_measurement_prediction_from_state(self, state: int):
        """Predict every qubit from the bits of basis state ``state``."""
        bits = BinaryCounter(self.n_qubits, state)
        for q in range(self.n_qubits):
            self.measurement_prediction[q] = MeasurementState.ONE if bits.test(q) else MeasurementState.ZERO

    def get_measurement_prediction(self, q: int) -> MeasurementState:
        self._check_qubit(q)
        return self.measurement_prediction[q]

    def set_measurement(self, q: int, m: bool):
        self._check_qubit(q)
        self.measurement_register[q] = bool(m)

    def set_measurement_from_state(self, state: int):
        bits = BinaryCounter(self.n_qubits, state)
        for q in range(self.n_qubits):
            self.measurement_register[q] = bits.test(q)

    def get_measurement(self, q: int) -> bool:
        self._check_qubit(q)
        return self.measurement_register[q]

    def test(self, q: int) -> bool:
        """True if qubit ``q`` is predicted to be 1."""
        self._check_qubit(q)
        if self.measurement_prediction[q] is MeasurementState.UNKNOWN:
            logger.debug("Qubit %d has not been measured", q)
        return self.measurement_prediction[q] is MeasurementState.ONE

    def flip_binary(self, q: int):
        self._check_qubit(q)
        s = self.measurement_prediction[q]
        if s is MeasurementState.ZERO:
            self.measurement_prediction[q] = MeasurementState.ONE
        elif s is MeasurementState.ONE:
            self.measurement_prediction[q] = MeasurementState.ZERO

    def flip_measurement(self, q: int):
        self._check_qubit(q)
        self.measurement_register[q] = not self.measurement_register[q]

    # === Averaging ===

    def accumulate_measurement(self):
        """Add the current measured bits to the ground/excited tallies."""
        for q, bit in enumerate(self.measurement_register):
            if bit:
                self.measurement_averaging[q].excited_states += 1
            else:
                self.measurement_averaging[q].ground_states += 1

    def get_average_measurement(self, q: int) -> Optional[float]:
        """
        Fraction of recorded trials in which qubit ``q`` was measured as 1.

        Returns None (and logs an error) if no trial has been recorded.
        """
        self._check_qubit(q)
        counts = self.measurement_averaging[q]
        if counts.total == 0:
            logger.error("Average measurement of qubit %d not available", q)
            return None
        return counts.excited_states / counts.total

    # === Reporting ===

    def to_binary_string(self, state: int, nq: Optional[int] = None) -> str:
        nq = self.n_qubits if nq is None else nq
        if nq == 0:
            return ""
        return format(state, f"0{nq}b")

    def quantum_state(self) -> str:
        """Every non-zero amplitude as ``(re,im) |bits>``."""
        lines = ["START"]
        for i in np.flatnonzero(self.data):
            lines.append(f"   {format_amplitude(self.data[i])} |{self.to_binary_string(int(i))}> +")
        lines.append("END")
        return "\n".join(lines) + "\n"

    def binary_register(self) -> str:
        """Last measured bits, most-significant qubit first."""
        bits = "".join(f" | {'1' if self.measurement_register[q] else '0'}"
                       for q in range(self.n_qubits - 1, -1, -1))
        return f"START\n{bits} | \nEND\n"

    def get_state(self, only_binary: bool = False) -> str:
        if only_binary:
            return self.binary_register()
        return self.quantum_state()

    def dump(self, only_binary: bool = False):
        logger.debug("Quantum register state:\n%s", self.get_state(only_binary))
        if only_binary and self.measurement_averaging_enabled:
            for q in range(self.n_qubits - 1, -1, -1):
                avg = self.get_average_measurement(q) if self.measurement_averaging[q].total else None
                logger.debug("   qubit %d: average measurement = %s", q,
                             "n/a" if avg is None else f"{avg:.6f}")

    def __repr__(self) -> str:
        return f"QuRegister(n_qubits={self.n_qubits})"
