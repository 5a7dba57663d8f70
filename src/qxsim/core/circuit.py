"""
Circuits
========

A circuit is an ordered list of operations plus a repeat count. The engine
only relies on three things from it:

    size()            number of operations
    get_iterations()  repeat count
    apply(register)   run every operation, ``iterations`` times

``apply`` reports failure through an ``ApplyResult`` rather than raising, so
a driver can skip a broken circuit and keep going with the rest.

``load_circuit`` maps a program ``SubCircuit`` (instruction names and
operands) onto gate objects, raising ``UnsupportedOperationError`` for
anything it cannot map.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from ..exceptions import InvalidQubitError, QxError, UnsupportedOperationError
from ..program import Instruction, SubCircuit
from . import gates

logger = logging.getLogger(__name__)


@dataclass
class ApplyResult:
    """Outcome of applying a circuit to a register."""
    success: bool
    error: Optional[str] = None
    operations_applied: int = 0

    def __bool__(self) -> bool:
        return self.success


class Circuit:
    """
    Ordered operation sequence with a repeat count.

    Parameters
    ----------
    n_qubits : int
        Width of the register the circuit is written for.
    name : str
        Label used in log messages.
    iterations : int
        Number of times ``apply`` runs the operation list (>= 1).
    operations : iterable, optional
        Initial operations. Anything with an ``apply(register)`` method.
    """

    def __init__(self, n_qubits: int, name: str = "circuit", iterations: int = 1,
                 operations: Optional[Iterable] = None):
        if iterations < 1:
            raise ValueError(f"iterations must be >= 1, got {iterations}")
        self.n_qubits = n_qubits
        self.name = name
        self.iterations = iterations
        self._operations: List = list(operations) if operations is not None else []

    def add(self, operation) -> "Circuit":
        self._operations.append(operation)
        return self

    def size(self) -> int:
        return len(self._operations)

    def get_iterations(self) -> int:
        return self.iterations

    def set_iterations(self, iterations: int):
        if iterations < 1:
            raise ValueError(f"iterations must be >= 1, got {iterations}")
        self.iterations = iterations

    @property
    def operations(self) -> Tuple:
        return tuple(self._operations)

    def __len__(self) -> int:
        return len(self._operations)

    def __iter__(self) -> Iterator:
        return iter(self._operations)

    def __getitem__(self, i):
        return self._operations[i]

    def apply(self, register) -> ApplyResult:
        """Run the operation list ``iterations`` times on ``register``."""
        applied = 0
        try:
            for _ in range(self.iterations):
                for op in self._operations:
                    op.apply(register)
                    applied += 1
        except (QxError, ValueError) as exc:
            logger.error("Circuit '%s' failed after %d operations: %s", self.name, applied, exc)
            return ApplyResult(False, str(exc), applied)
        return ApplyResult(True, None, applied)

    def __repr__(self) -> str:
        return f"Circuit(name={self.name!r}, size={self.size()}, iterations={self.iterations})"


# =============================================================================
# INSTRUCTION LOADER
# =============================================================================

# name -> (gate class, qubit operands, numeric parameters)
GATE_TABLE: Dict[str, Tuple[type, int, int]] = {
    "i": (gates.Identity, 1, 0),
    "x": (gates.PauliX, 1, 0),
    "y": (gates.PauliY, 1, 0),
    "z": (gates.PauliZ, 1, 0),
    "h": (gates.Hadamard, 1, 0),
    "s": (gates.PhaseS, 1, 0),
    "sdag": (gates.PhaseSdag, 1, 0),
    "t": (gates.PhaseT, 1, 0),
    "tdag": (gates.PhaseTdag, 1, 0),
    "rx": (gates.RX, 1, 1),
    "ry": (gates.RY, 1, 1),
    "rz": (gates.RZ, 1, 1),
    "cnot": (gates.CNOT, 2, 0),
    "cx": (gates.CNOT, 2, 0),
    "cz": (gates.CZ, 2, 0),
    "swap": (gates.Swap, 2, 0),
    "toffoli": (gates.Toffoli, 3, 0),
    "prep_z": (gates.PrepZ, 1, 0),
    "measure": (gates.Measure, 1, 0),
    "measure_z": (gates.Measure, 1, 0),
    "measure_all": (gates.MeasureAll, 0, 0),
}


def load_instruction(qubit_count: int, instruction: Instruction):
    """Build the gate for one instruction."""
    if instruction.name not in GATE_TABLE:
        raise UnsupportedOperationError(instruction.name)
    cls, n_operands, n_params = GATE_TABLE[instruction.name]

    if len(instruction.qubits) != n_operands:
        raise UnsupportedOperationError(
            instruction.name, f"expected {n_operands} qubit operands, got {len(instruction.qubits)}")
    if len(instruction.params) != n_params:
        raise UnsupportedOperationError(
            instruction.name, f"expected {n_params} parameters, got {len(instruction.params)}")
    for q in instruction.qubits:
        if not 0 <= q < qubit_count:
            raise InvalidQubitError(q, qubit_count)

    try:
        return cls(*instruction.qubits, *instruction.params)
    except ValueError as exc:
        raise UnsupportedOperationError(instruction.name, str(exc)) from exc


def load_circuit(qubit_count: int, subcircuit: SubCircuit) -> Circuit:
    """
    Convert a program sub-circuit into an executable ``Circuit``.

    Raises
    ------
    UnsupportedOperationError
        If any instruction has an unknown name or wrong arity.
    InvalidQubitError
        If any operand is outside the register.
    """
    circuit = Circuit(qubit_count, name=subcircuit.name,
                      iterations=subcircuit.iterations)
    for instruction in subcircuit.instructions:
        circuit.add(load_instruction(qubit_count, instruction))
    logger.debug("Loaded circuit '%s' (%d operations, %d iterations)",
                 circuit.name, circuit.size(), circuit.iterations)
    return circuit
