"""
Simulator Configuration
=======================

Run-wide settings for the simulator, held in one immutable object.

The configuration is built once and then only read. Nothing in the engine
mutates it, so the random seed is fixed for the lifetime of a ``Simulator``.

The ``qxsim`` logger is process-wide. Its level is applied once, by the
application, with ``configure_logging(config)``; constructing a
``Simulator`` never changes it.

LOG LEVELS
----------

Both standard ``logging`` level names and the legacy names used by older
front-ends are accepted:

    LOG_NOTHING  -> logging disabled
    LOG_CRITICAL -> CRITICAL
    LOG_ERROR    -> ERROR
    LOG_WARNING  -> WARNING
    LOG_INFO     -> INFO
    LOG_DEBUG    -> DEBUG

The default is ERROR: callers of the Python API already receive the results
directly, so only failures are printed.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union


PACKAGE_LOGGER = "qxsim"
LOG_FORMAT = "[QXSIM] %(levelname)s %(name)s: %(message)s"

# Above CRITICAL, so nothing passes the logger.
LOG_NOTHING = logging.CRITICAL + 10

LEGACY_LOG_LEVELS = {
    "LOG_NOTHING": LOG_NOTHING,
    "LOG_CRITICAL": logging.CRITICAL,
    "LOG_ERROR": logging.ERROR,
    "LOG_WARNING": logging.WARNING,
    "LOG_INFO": logging.INFO,
    "LOG_DEBUG": logging.DEBUG,
}


def log_level_from_string(level: Union[str, int]) -> int:
    """
    Convert a log level name to a ``logging`` level.

    Parameters
    ----------
    level : str or int
        "DEBUG", "LOG_DEBUG", ... or a numeric logging level.

    Returns
    -------
    int
        Numeric logging level.
    """
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name in LEGACY_LOG_LEVELS:
        return LEGACY_LOG_LEVELS[name]
    numeric = logging.getLevelName(name)
    if isinstance(numeric, int):
        return numeric
    raise ValueError(f"Unknown log level: {level}. "
                     f"Available: {list(LEGACY_LOG_LEVELS.keys())}")


def configure_logging(level: Union["SimulatorConfig", str, int] = "ERROR") -> logging.Logger:
    """
    Attach a single stream handler to the package logger and set its level.

    Parameters
    ----------
    level : SimulatorConfig, str or int
        A configuration (its ``log_level`` is used) or a level name/number.

    Calling this more than once only updates the level; no duplicate
    handlers are installed.
    """
    if isinstance(level, SimulatorConfig):
        level = level.log_level
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(log_level_from_string(level))
    if not any(getattr(h, "_qxsim_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._qxsim_handler = True
        logger.addHandler(handler)
    return logger


# =============================================================================
# SIMULATOR CONFIGURATION
# =============================================================================

@dataclass(frozen=True)
class SimulatorConfig:
    """
    Immutable settings for a simulation run.

    Attributes
    ----------
    log_level : str
        Level name for the package logger (see module docstring), applied
        by ``configure_logging(config)``.

    seed : int, optional
        Seed for every random generator the simulator creates (measurement
        sampling, noise injection, binomial resampling). None draws fresh
        entropy from the OS.

    batch_size : int
        Number of basis-state pairs summed per batch when computing per-qubit
        probabilities. Must be a positive power of two.

    max_workers : int, optional
        Thread pool size for the batched summation. 1 runs the batches
        serially; None lets ``concurrent.futures`` choose.

    averaging_reps : int
        Default virtual shot count for binomial resampling. 0 leaves the
        amplitudes untouched.

    Example
    -------
    >>> config = SimulatorConfig(log_level="DEBUG", seed=1234)
    >>> sim = Simulator(config)
    """
    log_level: str = "ERROR"
    seed: Optional[int] = None
    batch_size: int = 4096
    max_workers: Optional[int] = None
    averaging_reps: int = 0

    def __post_init__(self):
        log_level_from_string(self.log_level)
        if self.batch_size <= 0 or self.batch_size & (self.batch_size - 1):
            raise ValueError(f"batch_size must be a positive power of two, got {self.batch_size}")
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.averaging_reps < 0:
            raise ValueError(f"averaging_reps must be >= 0, got {self.averaging_reps}")

    @property
    def numeric_log_level(self) -> int:
        return log_level_from_string(self.log_level)


def get_default_config() -> SimulatorConfig:
    """Quiet, unseeded configuration."""
    return SimulatorConfig()


def get_debug_config(seed: int = 0) -> SimulatorConfig:
    """Verbose, reproducible configuration for debugging and tests."""
    return SimulatorConfig(log_level="DEBUG", seed=seed, max_workers=1)
