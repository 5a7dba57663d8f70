"""
Gate Set
========

Minimal gate library applied in place to a ``QuRegister``'s amplitudes.

Each gate exposes ``apply(register)``. The engine never inspects gate
matrices; circuits only need this one method, so any object providing it
can be placed in a circuit.

KERNELS
-------

Single-qubit gates reshape the state to (2^(n-q-1), 2, 2^q) and mix the two
slices of the middle axis. Controlled gates gather the basis indices whose
control bits are all 1, then act on the (target=0, target=1) pairs.

Available gates:

    Identity, PauliX, PauliY, PauliZ, Hadamard,
    PhaseS, PhaseSdag, PhaseT, PhaseTdag,
    RX(theta), RY(theta), RZ(theta),
    CNOT, CZ, Toffoli, Swap,
    PrepZ, Measure (single qubit), MeasureAll
"""

from abc import ABC, abstractmethod

import numpy as np
from typing import Sequence, Tuple

from .register import qubit_view
from .measurement import measure_qubit, measure_register


SQRT1_2 = 1.0 / np.sqrt(2.0)


def _pair_indices(n_qubits: int, controls: Sequence[int], target: int) -> Tuple[np.ndarray, np.ndarray]:
    """Indices with all controls set and target clear, and their target-set partners."""
    idx = np.arange(1 << n_qubits, dtype=np.int64)
    mask = ((idx >> target) & 1) == 0
    for c in controls:
        mask &= ((idx >> c) & 1) == 1
    i0 = idx[mask]
    return i0, i0 | (1 << target)


# =============================================================================
# BASE CLASSES
# =============================================================================

class Gate(ABC):
    """Operation acting on a fixed set of qubits."""

    name = "gate"

    def __init__(self, *qubits: int):
        if len(set(qubits)) != len(qubits):
            raise ValueError(f"{self.name}: qubit operands must be distinct, got {qubits}")
        self.qubits = tuple(int(q) for q in qubits)

    @abstractmethod
    def apply(self, register):
        """Act on ``register`` in place."""
        pass

    def _check(self, register):
        for q in self.qubits:
            register._check_qubit(q)

    def __eq__(self, other):
        return (type(self) is type(other) and self.qubits == other.qubits
                and getattr(self, "angle", None) == getattr(other, "angle", None))

    def __hash__(self):
        return hash((type(self), self.qubits, getattr(self, "angle", None)))

    def __repr__(self) -> str:
        return f"{type(self).__name__}{self.qubits}"


class SingleQubitGate(Gate):
    """Arbitrary 2x2 unitary on one qubit."""

    name = "u"
    matrix = np.eye(2, dtype=np.complex128)

    def __init__(self, qubit: int, matrix=None):
        super().__init__(qubit)
        if matrix is not None:
            self.matrix = np.asarray(matrix, dtype=np.complex128)

    @property
    def qubit(self) -> int:
        return self.qubits[0]

    def apply(self, register):
        self._check(register)
        view = qubit_view(register.data, register.n_qubits, self.qubit)
        a0 = view[:, 0, :].copy()
        a1 = view[:, 1, :].copy()
        m = self.matrix
        view[:, 0, :] = m[0, 0] * a0 + m[0, 1] * a1
        view[:, 1, :] = m[1, 0] * a0 + m[1, 1] * a1


class Identity(SingleQubitGate):
    name = "i"

    def apply(self, register):
        self._check(register)


class PauliX(SingleQubitGate):
    name = "x"
    matrix = np.array([[0, 1], [1, 0]], dtype=np.complex128)

    def apply(self, register):
        self._check(register)
        view = qubit_view(register.data, register.n_qubits, self.qubit)
        view[:, [0, 1], :] = view[:, [1, 0], :]


class PauliY(SingleQubitGate):
    name = "y"
    matrix = np.array([[0, -1j], [1j, 0]], dtype=np.complex128)


class PauliZ(SingleQubitGate):
    name = "z"
    matrix = np.array([[1, 0], [0, -1]], dtype=np.complex128)

    def apply(self, register):
        self._check(register)
        view = qubit_view(register.data, register.n_qubits, self.qubit)
        view[:, 1, :] *= -1.0


class Hadamard(SingleQubitGate):
    name = "h"
    matrix = SQRT1_2 * np.array([[1, 1], [1, -1]], dtype=np.complex128)


class PhaseS(SingleQubitGate):
    name = "s"
    matrix = np.array([[1, 0], [0, 1j]], dtype=np.complex128)


class PhaseSdag(SingleQubitGate):
    name = "sdag"
    matrix = np.array([[1, 0], [0, -1j]], dtype=np.complex128)


class PhaseT(SingleQubitGate):
    name = "t"
    matrix = np.array([[1, 0], [0, np.exp(1j * np.pi / 4)]], dtype=np.complex128)


class PhaseTdag(SingleQubitGate):
    name = "tdag"
    matrix = np.array([[1, 0], [0, np.exp(-1j * np.pi / 4)]], dtype=np.complex128)


class _Rotation(SingleQubitGate):

    def __init__(self, qubit: int, angle: float):
        self.angle = float(angle)
        super().__init__(qubit, self._matrix(self.angle))

    @staticmethod
    @abstractmethod
    def _matrix(theta: float) -> np.ndarray:
        """2x2 rotation matrix for angle ``theta``."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.qubit}, {self.angle})"


class RX(_Rotation):
    name = "rx"

    @staticmethod
    def _matrix(theta):
        c, s = np.cos(theta / 2), np.sin(theta / 2)
        return np.array([[c, -1j * s], [-1j * s, c]], dtype=np.complex128)


class RY(_Rotation):
    name = "ry"

    @staticmethod
    def _matrix(theta):
        c, s = np.cos(theta / 2), np.sin(theta / 2)
        return np.array([[c, -s], [s, c]], dtype=np.complex128)


class RZ(_Rotation):
    name = "rz"

    @staticmethod
    def _matrix(theta):
        return np.array([[np.exp(-0.5j * theta), 0], [0, np.exp(0.5j * theta)]], dtype=np.complex128)


# =============================================================================
# MULTI-QUBIT GATES
# =============================================================================

class _Controlled(Gate):
    """Target matrix applied when every control qubit is 1."""

    matrix = np.eye(2, dtype=np.complex128)

    @property
    def controls(self) -> Tuple[int, ...]:
        return self.qubits[:-1]

    @property
    def target(self) -> int:
        return self.qubits[-1]

    def apply(self, register):
        self._check(register)
        i0, i1 = _pair_indices(register.n_qubits, self.controls, self.target)
        data = register.data
        a0 = data[i0]
        a1 = data[i1]
        m = self.matrix
        data[i0] = m[0, 0] * a0 + m[0, 1] * a1
        data[i1] = m[1, 0] * a0 + m[1, 1] * a1


class CNOT(_Controlled):
    name = "cnot"
    matrix = PauliX.matrix

    def __init__(self, control: int, target: int):
        super().__init__(control, target)


class CZ(_Controlled):
    name = "cz"
    matrix = PauliZ.matrix

    def __init__(self, control: int, target: int):
        super().__init__(control, target)


class Toffoli(_Controlled):
    name = "toffoli"
    matrix = PauliX.matrix

    def __init__(self, control_1: int, control_2: int, target: int):
        super().__init__(control_1, control_2, target)


class Swap(Gate):
    name = "swap"

    def __init__(self, qubit_a: int, qubit_b: int):
        super().__init__(qubit_a, qubit_b)

    def apply(self, register):
        self._check(register)
        a, b = self.qubits
        idx = np.arange(register.states(), dtype=np.int64)
        sel = idx[(((idx >> a) & 1) == 1) & (((idx >> b) & 1) == 0)]
        partner = (sel & ~(1 << a)) | (1 << b)
        data = register.data
        data[sel], data[partner] = data[partner], data[sel].copy()


# =============================================================================
# MEASUREMENT AND PREPARATION
# =============================================================================

class PrepZ(Gate):
    """Reset one qubit to |0> (measure, then flip if 1)."""

    name = "prep_z"

    def __init__(self, qubit: int):
        super().__init__(qubit)

    def apply(self, register):
        self._check(register)
        q = self.qubits[0]
        if measure_qubit(register, q):
            PauliX(q).apply(register)
            register.flip_measurement(q)
            register.flip_binary(q)


class Measure(Gate):
    """Projective measurement of one qubit."""

    name = "measure"

    def __init__(self, qubit: int):
        super().__init__(qubit)

    def apply(self, register):
        self._check(register)
        measure_qubit(register, self.qubits[0])


class MeasureAll(Gate):
    """Joint measurement of every qubit."""

    name = "measure_all"

    def __init__(self):
        super().__init__()

    def apply(self, register):
        measure_register(register)

    def __repr__(self) -> str:
        return "MeasureAll()"


# Corrupting operations drawn by the depolarizing channel
PAULI_ERRORS = (PauliX, PauliY, PauliZ)
