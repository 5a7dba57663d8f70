"""
Simulator Driver
================

Runs a ``Program`` against a fresh ``QuRegister`` and exposes the results.

RUN MODES
---------

``execute(navg=0)``
    Single exact run. Circuits are applied once (respecting iteration
    counts); with a depolarizing error model, noisy circuits are sampled
    once up front. Query the result with ``get_state()``,
    ``get_measurement_outcome(q)`` or ``get_state_vector()``.

``execute(navg > 0)``
    ``navg`` trials of reset → execute → measure, tallied per qubit. Query
    with ``get_average_measurement()``.

``execute_and_get_average_measurement(reps)``
    Single run followed by binomial resampling of the final amplitudes with
    ``reps`` virtual shots.

STATE MACHINE
-------------

    IDLE --set()--> PARSED --execute(0)--> EXECUTED --query--> REPORTED
                           --execute(n)--> LOOPED   --query--> REPORTED

There are no backward transitions: calling ``execute()`` again starts a new
run from PARSED with a newly allocated register.

ERRORS
------

- Register allocation failure is fatal: logged and re-raised, and no
  register is kept.
- A sub-circuit with an unsupported instruction is skipped; the rest of the
  program still runs. A circuit that fails while being applied in an exact
  run is abandoned the same way. ``skipped_circuits`` counts both.
- Querying a statistic that was never computed logs an error and returns
  None.
"""

import logging
from enum import Enum
from typing import List, Optional

import numpy as np

from .config import SimulatorConfig, get_default_config
from .core.circuit import Circuit, load_circuit
from .core.register import QuRegister
from .exceptions import AllocationError, QxError
from .noise_models.depolarizing import ErrorCounter, build_noisy_circuits
from .program import ErrorModel, Program
from .statistics import average_measurement_binomial, run_averaged

logger = logging.getLogger(__name__)


class SimulatorState(Enum):
    IDLE = "idle"
    PARSED = "parsed"
    EXECUTED = "executed"
    LOOPED = "looped"
    REPORTED = "reported"


class Simulator:
    """
    Program-level driver around a quantum register.

    Parameters
    ----------
    config : SimulatorConfig, optional
        Seed and summation settings. Read only; the simulator never touches
        the process-wide logger. Apply ``log_level`` once at startup with
        ``configure_logging(config)``.

    Example
    -------
    >>> config = SimulatorConfig(seed=42)
    >>> configure_logging(config)
    >>> sim = Simulator(config)
    >>> sim.set(program)
    >>> sim.execute(navg=1000)
    >>> sim.get_average_measurement()
    [0.497, 0.497]
    """

    def __init__(self, config: Optional[SimulatorConfig] = None):
        self.config = config if config is not None else get_default_config()
        self.rng = np.random.default_rng(self.config.seed)

        self.program: Optional[Program] = None
        self.register: Optional[QuRegister] = None
        self.state = SimulatorState.IDLE

        self.perfect_circuits: List[Circuit] = []
        self.circuits: List[Circuit] = []
        self.skipped_circuits = 0
        self.error_counter = ErrorCounter()
        self.measurement_averaging_enabled = False

    # === Setup ===

    def set(self, program: Program):
        """Attach the program to run."""
        self.program = program
        self._start_run()

    def _start_run(self):
        self.register = None
        self.perfect_circuits = []
        self.circuits = []
        self.skipped_circuits = 0
        self.error_counter = ErrorCounter()
        self.measurement_averaging_enabled = False
        self.state = SimulatorState.PARSED

    def _load_circuits(self):
        qubits = self.program.qubit_count
        for subcircuit in self.program.subcircuits:
            try:
                self.perfect_circuits.append(load_circuit(qubits, subcircuit))
            except QxError as exc:
                self.skipped_circuits += 1
                logger.error("Skipping circuit '%s': %s", subcircuit.name, exc)
        logger.debug("Loaded %d circuits (%d skipped)", len(self.perfect_circuits), self.skipped_circuits)

    def _error_probability(self) -> Optional[float]:
        if self.program.error_model_type is ErrorModel.DEPOLARIZING_CHANNEL:
            return self.program.error_probability
        return None

    # === Execution ===

    def execute(self, navg: int = 0) -> "Simulator":
        """
        Run the program.

        Parameters
        ----------
        navg : int
            0 for one exact run; > 0 for that many averaged trials.

        Raises
        ------
        AllocationError
            If the register cannot be allocated.
        """
        if self.program is None:
            raise RuntimeError("No program set; call set() before execute()")
        if navg < 0:
            raise ValueError(f"navg must be >= 0, got {navg}")
        self._start_run()

        qubits = self.program.qubit_count
        logger.debug("Creating quantum register of %d qubits...", qubits)
        try:
            register = QuRegister(qubits, rng=self.rng)
        except AllocationError:
            logger.error("Not enough memory, aborting")
            raise

        self._load_circuits()
        p = self._error_probability()
        self.register = register

        if navg:
            self.measurement_averaging_enabled = True
            register.enable_measurement_averaging()
            run_averaged(register, self.perfect_circuits, navg,
                         error_probability=p, error_counter=self.error_counter, rng=self.rng)
            self.state = SimulatorState.LOOPED
        else:
            if p is not None:
                self.circuits = build_noisy_circuits(self.perfect_circuits, p, self.error_counter, self.rng)
                logger.debug("Total errors injected in all circuits: %d", self.error_counter.count)
            else:
                self.circuits = list(self.perfect_circuits)
            for circuit in self.circuits:
                if not circuit.apply(register):
                    self.skipped_circuits += 1
            self.state = SimulatorState.EXECUTED

        return self

    # === Reporting ===

    def _require_register(self, what: str) -> bool:
        if self.register is None:
            logger.error("%s not available: program has not been executed", what)
            return False
        self.state = SimulatorState.REPORTED
        return True

    def get_average_measurement(self, reps: Optional[int] = None) -> Optional[List[Optional[float]]]:
        """
        Per-qubit probability of measuring |1>.

        Parameters
        ----------
        reps : int, optional
            If given, binomially resample the current amplitudes with this
            many virtual shots and sum per qubit (overwrites the register).
            Otherwise return the averages of the last ``execute(navg > 0)``.

        Returns
        -------
        list of float, or None
            None if the statistic was never computed.
        """
        if reps is not None:
            if not self._require_register("Average measurement"):
                return None
            return average_measurement_binomial(
                self.register, reps, rng=self.rng,
                batch_size=self.config.batch_size,
                max_workers=self.config.max_workers,
            )

        if self.measurement_averaging_enabled and self.register is not None:
            self.state = SimulatorState.REPORTED
            return [self.register.get_average_measurement(i) for i in range(self.register.size())]

        logger.error("Average measurement not available")
        return None

    def execute_and_get_average_measurement(self, reps: Optional[int] = None) -> Optional[List[Optional[float]]]:
        """Execute once, then estimate averages by binomial resampling."""
        reps = self.config.averaging_reps if reps is None else reps
        self.execute()
        return self.get_average_measurement(reps)

    def get_measurement_outcome(self, q: int) -> Optional[bool]:
        if not self._require_register("Measurement outcome"):
            return None
        return self.register.get_measurement(q)

    move = get_measurement_outcome

    def get_state(self, only_binary: bool = False) -> Optional[str]:
        if not self._require_register("State"):
            return None
        return self.register.get_state(only_binary)

    def get_state_vector(self) -> Optional[np.ndarray]:
        """Copy of the final amplitudes."""
        if not self._require_register("State vector"):
            return None
        return self.register.get_state_vector()

    @property
    def total_errors(self) -> int:
        return self.error_counter.count
