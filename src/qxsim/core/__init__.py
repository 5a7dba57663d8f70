# Core Engine
#
# Dense state-vector simulation primitives.
#
#   - register: QuRegister, amplitudes + per-qubit measurement bookkeeping
#   - measurement: Born-rule joint sampling and collapse
#   - binary_counter: fixed-width bit-pattern cursor
#   - gates: minimal gate set acting on a register
#   - circuit: operation sequences and the instruction loader

from .binary_counter import BinaryCounter
from .register import QuRegister, MeasurementState, Integration
from .measurement import measure_register, measure_qubit, sample_outcome
from .circuit import Circuit, ApplyResult, load_circuit, load_instruction

__all__ = [
    "BinaryCounter",
    "QuRegister", "MeasurementState", "Integration",
    "measure_register", "measure_qubit", "sample_outcome",
    "Circuit", "ApplyResult", "load_circuit", "load_instruction",
]
