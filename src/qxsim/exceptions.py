# Exceptions
#
# Error kinds raised by the simulation engine.
#
#   - AllocationError: the 2^n amplitude array cannot be allocated (fatal)
#   - UnsupportedOperationError: an instruction name the loader cannot map
#   - InvalidQubitError: a qubit index outside the register
#
# Everything else (missing statistics, numerical drift) is reported through
# the logging channel rather than raised.


class QxError(Exception):
    """Base class for all simulator errors."""


class AllocationError(QxError, MemoryError):
    """Raised when a register's state vector cannot be allocated."""

    def __init__(self, n_qubits: int, reason: str = ""):
        self.n_qubits = n_qubits
        msg = f"Cannot allocate quantum register of {n_qubits} qubits"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class UnsupportedOperationError(QxError):
    """Raised when an instruction cannot be mapped onto a gate."""

    def __init__(self, name: str, detail: str = ""):
        self.name = name
        msg = f"Unsupported operation: {name!r}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


class InvalidQubitError(QxError, IndexError):
    """Raised when a qubit index does not exist in the register."""

    def __init__(self, qubit: int, n_qubits: int):
        self.qubit = qubit
        self.n_qubits = n_qubits
        super().__init__(f"Qubit {qubit} out of range for a {n_qubits}-qubit register")
