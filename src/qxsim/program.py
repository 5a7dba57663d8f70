"""
Program Model
=============

Already-resolved description of what to simulate: a qubit count, an ordered
list of named sub-circuits (each with an instruction list and a repeat
count), and an optional error model.

A front-end that parses a circuit description language produces one of
these; tests and scripts can also build them directly:

>>> program = Program(
...     qubit_count=2,
...     subcircuits=[
...         SubCircuit("bell", [Instruction("h", (0,)), Instruction("cnot", (0, 1))]),
...     ],
...     error_model="depolarizing_channel",
...     error_parameters=[0.01],
... )

Instructions are mapped onto gates by ``qxsim.core.circuit.load_circuit``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple


class ErrorModel(Enum):
    NONE = "none"
    DEPOLARIZING_CHANNEL = "depolarizing_channel"

    @classmethod
    def from_name(cls, name: Optional[str]) -> "ErrorModel":
        """Unrecognized or empty names give NONE."""
        if not name:
            return cls.NONE
        for model in cls:
            if model.value == name:
                return model
        return cls.NONE


@dataclass(frozen=True)
class Instruction:
    """One named operation with its qubit operands and numeric parameters."""
    name: str
    qubits: Tuple[int, ...] = ()
    params: Tuple[float, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "name", self.name.lower())
        object.__setattr__(self, "qubits", tuple(self.qubits))
        object.__setattr__(self, "params", tuple(self.params))


@dataclass
class SubCircuit:
    name: str
    instructions: List[Instruction] = field(default_factory=list)
    iterations: int = 1

    def __post_init__(self):
        if self.iterations < 1:
            raise ValueError(f"iterations must be >= 1, got {self.iterations}")


@dataclass
class Program:
    """
    A complete simulation input.

    Attributes
    ----------
    qubit_count : int
        Size of the register to allocate.
    subcircuits : list of SubCircuit
        Executed in order.
    error_model : str, optional
        Only "depolarizing_channel" is recognized; anything else means a
        noiseless run.
    error_parameters : list of float
        Model parameters. For the depolarizing channel, index 0 is the
        per-operation error probability.
    """
    qubit_count: int
    subcircuits: List[SubCircuit] = field(default_factory=list)
    error_model: Optional[str] = None
    error_parameters: Sequence[float] = field(default_factory=list)

    def __post_init__(self):
        if self.qubit_count < 0:
            raise ValueError(f"qubit_count must be non-negative, got {self.qubit_count}")

    @property
    def error_model_type(self) -> ErrorModel:
        return ErrorModel.from_name(self.error_model)

    @property
    def error_probability(self) -> float:
        if self.error_model_type is ErrorModel.DEPOLARIZING_CHANNEL:
            if not self.error_parameters:
                raise ValueError("depolarizing_channel requires an error probability parameter")
            return float(self.error_parameters[0])
        return 0.0
