# qxsim: Dense State-Vector Quantum Circuit Simulator
#
# Executes already-resolved gate/measurement sequences on a full 2^n
# amplitude register and reports single-run or averaged measurement results.
#
# Layout:
#   core/          register, measurement engine, gates, circuits
#   noise_models/  depolarizing channel circuit transformer
#   statistics     repeated-trial averaging and binomial resampling
#   simulator      program-level driver
#   utils/         fidelity and plotting helpers

from .config import SimulatorConfig, configure_logging, get_default_config, get_debug_config
from .exceptions import QxError, AllocationError, UnsupportedOperationError, InvalidQubitError
from .program import Program, SubCircuit, Instruction, ErrorModel
from .core import (
    BinaryCounter,
    QuRegister,
    MeasurementState,
    Circuit,
    ApplyResult,
    load_circuit,
)
from .noise_models import ErrorCounter, noisy_dep_ch
from .statistics import run_averaged, average_measurement_binomial, qubit_probabilities
from .simulator import Simulator, SimulatorState

__version__ = "0.1.0"

__all__ = [
    "SimulatorConfig", "configure_logging", "get_default_config", "get_debug_config",
    "QxError", "AllocationError", "UnsupportedOperationError", "InvalidQubitError",
    "Program", "SubCircuit", "Instruction", "ErrorModel",
    "BinaryCounter", "QuRegister", "MeasurementState", "Circuit", "ApplyResult", "load_circuit",
    "ErrorCounter", "noisy_dep_ch",
    "run_averaged", "average_measurement_binomial", "qubit_probabilities",
    "Simulator", "SimulatorState",
]
