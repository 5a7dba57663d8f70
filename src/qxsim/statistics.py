"""
Measurement Statistics
======================

Two ways of estimating, for every qubit, the probability of measuring |1>.

REPEATED TRIALS
---------------

``run_averaged`` repeats reset → execute → measure ``navg`` times and tallies
each qubit's outcome in the register's ground/excited counters. With a
depolarizing error probability, fresh noisy circuits are sampled for every
trial, so the average also runs over noise realizations.

DIRECT BINOMIAL RESAMPLING
--------------------------

``average_measurement_binomial`` runs nothing. It takes the amplitudes of a
single noiseless execution and, for each basis state i, draws

    k_i ~ Binomial(reps, |a_i|^2)

then overwrites a_i with sqrt(k_i / reps). This mimics the shot noise of
``reps`` measurements without simulating them. Phases are lost and the
register no longer holds the physical state afterwards.

PER-QUBIT SUMMATION
-------------------

P(q = 1) is the sum of |a_i|^2 over the 2^(n-1) indices with bit q set.
Those indices are enumerated from a half-size counter k by inserting a 1 at
bit position q:

    i = ((k >> q) << (q + 1)) | (1 << q) | (k & ((1 << q) - 1))

The k range is cut into fixed-size batches. Each batch sums into a private
partial; partials are combined by plain addition in batch order, so the
result does not depend on how many worker threads ran the batches. The
probability array is computed once and never written during summation.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

import numpy as np
from scipy.stats import binom

from .core.circuit import Circuit
from .core.measurement import measure_register
from .noise_models.depolarizing import ErrorCounter, unroll_noisy

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 4096


# =============================================================================
# REPEATED-TRIAL AVERAGING
# =============================================================================

def _execute_trial(register, circuits: Sequence[Circuit],
                   error_probability: Optional[float],
                   error_counter: Optional[ErrorCounter],
                   rng: Optional[np.random.Generator]) -> bool:
    for circuit in circuits:
        if circuit.size() == 0:
            continue
        if error_probability is None:
            runs = [circuit]
        else:
            runs = unroll_noisy(circuit, error_probability, error_counter, rng)
        for run in runs:
            if not run.apply(register):
                return False
    return True


def run_averaged(register, circuits: Sequence[Circuit], navg: int,
                 error_probability: Optional[float] = None,
                 error_counter: Optional[ErrorCounter] = None,
                 rng: Optional[np.random.Generator] = None) -> List[Optional[float]]:
    """
    Estimate per-qubit excited-state probabilities over ``navg`` trials.

    Parameters
    ----------
    register : QuRegister
        Register to run on. Its averaging tallies are added to, not cleared.
    circuits : sequence of Circuit
        Ideal circuits, executed in order every trial. Empty ones are skipped.
    navg : int
        Number of trials (>= 1).
    error_probability : float, optional
        If given, each trial runs freshly sampled depolarizing-noise copies
        of the circuits instead of the circuits themselves.
    error_counter : ErrorCounter, optional
        Accumulates injected errors across all trials.
    rng : numpy.random.Generator, optional
        Randomness for noise sampling. Defaults to the register's
        generator, so a seeded register gives reproducible noise.

    Returns
    -------
    list of float
        ``excited / (ground + excited)`` per qubit, in qubit order. A trial
        whose circuit fails to apply is not tallied.
    """
    if navg < 1:
        raise ValueError(f"navg must be >= 1, got {navg}")
    if error_probability is not None and error_counter is None:
        error_counter = ErrorCounter()
    rng = rng if rng is not None else register.rng

    register.measurement_averaging_enabled = True
    recorded = 0
    for trial in range(navg):
        register.reset()
        if not _execute_trial(register, circuits, error_probability, error_counter, rng):
            logger.warning("Trial %d failed to execute; outcome not recorded", trial)
            continue
        measure_register(register)
        register.accumulate_measurement()
        recorded += 1

    logger.debug("Average measurement after %d shots (%d recorded)", navg, recorded)
    if error_probability is not None:
        logger.debug("Total errors injected: %d", error_counter.count)
    register.dump(only_binary=True)
    return [register.get_average_measurement(q) for q in range(register.n_qubits)]


# =============================================================================
# BATCHED PER-QUBIT SUMMATION
# =============================================================================

def set_bit_indices(q: int, start: int, stop: int) -> np.ndarray:
    """Basis indices with bit ``q`` set, for half-range counters in [start, stop)."""
    k = np.arange(start, stop, dtype=np.int64)
    low = k & ((1 << q) - 1)
    high = (k >> q) << (q + 1)
    return high | (1 << q) | low


def _batch_sum(probabilities: np.ndarray, q: int, start: int, stop: int) -> float:
    return float(np.sum(probabilities[set_bit_indices(q, start, stop)]))


def batch_bounds(n_qubits: int, batch_size: int = DEFAULT_BATCH_SIZE) -> List[tuple]:
    """[start, stop) ranges covering the half-size counter 0 .. 2^(n-1)."""
    if n_qubits == 0:
        return []
    half = 1 << (n_qubits - 1)
    return [(s, min(s + batch_size, half)) for s in range(0, half, batch_size)]


def qubit_probability(probabilities: np.ndarray, n_qubits: int, q: int,
                      batch_size: int = DEFAULT_BATCH_SIZE,
                      executor: Optional[ThreadPoolExecutor] = None) -> float:
    """Probability of measuring qubit ``q`` as 1."""
    bounds = batch_bounds(n_qubits, batch_size)
    if executor is None or len(bounds) == 1:
        partials = [_batch_sum(probabilities, q, start, stop) for start, stop in bounds]
    else:
        # map() yields in submission order
        partials = list(executor.map(lambda b: _batch_sum(probabilities, q, b[0], b[1]), bounds))

    total = 0.0
    for partial in partials:
        total += partial
    return total


def qubit_probabilities(register, batch_size: int = DEFAULT_BATCH_SIZE,
                        max_workers: Optional[int] = None) -> List[float]:
    """
    P(q = 1) for every qubit of ``register``, from its current amplitudes.

    Parameters
    ----------
    batch_size : int
        Half-range counters per batch.
    max_workers : int, optional
        Thread pool size. 1 sums serially.
    """
    n = register.n_qubits
    if n == 0:
        return []
    probabilities = register.probabilities()

    if max_workers == 1 or len(batch_bounds(n, batch_size)) == 1:
        return [qubit_probability(probabilities, n, q, batch_size) for q in range(n)]

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return [qubit_probability(probabilities, n, q, batch_size, executor) for q in range(n)]


# =============================================================================
# BINOMIAL RESAMPLING
# =============================================================================

def binomial_resample(register, reps: int,
                      rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """
    Replace every amplitude with sqrt(k/reps), k ~ Binomial(reps, |a|^2).

    ``reps == 0`` leaves the register untouched.

    Returns
    -------
    np.ndarray
        The per-basis-state probabilities now encoded in the register.
    """
    if reps < 0:
        raise ValueError(f"reps must be >= 0, got {reps}")
    if reps == 0:
        return register.probabilities()

    rng = rng if rng is not None else register.rng
    probabilities = np.clip(register.probabilities(), 0.0, 1.0)
    counts = binom.rvs(reps, probabilities, random_state=rng)
    empirical = np.asarray(counts, dtype=float) / reps
    register.data[:] = np.sqrt(empirical)
    return empirical


def average_measurement_binomial(register, reps: int,
                                 rng: Optional[np.random.Generator] = None,
                                 batch_size: int = DEFAULT_BATCH_SIZE,
                                 max_workers: Optional[int] = None) -> List[float]:
    """Binomially resample ``register`` then sum P(q = 1) per qubit."""
    binomial_resample(register, reps, rng)
    return qubit_probabilities(register, batch_size, max_workers)
