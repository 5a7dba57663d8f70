"""
Depolarizing Channel
====================

Monte Carlo rendition of single-qubit depolarizing noise on a circuit.

For a density matrix the channel is

    ρ → (1-p)ρ + (p/3)(XρX + YρY + ZρZ)

A state-vector simulator cannot hold the mixture, so it samples it instead:
after every operation, with probability p, one Pauli error drawn uniformly
from {X, Y, Z} is inserted on a uniformly random qubit. Averaging many
independently sampled noisy circuits reproduces the channel.

Every injection increments a shared ``ErrorCounter`` so the caller can
report how many errors a run received in total.

ITERATIONS
----------

A circuit with ``iterations > 1`` is not transformed once and repeated.
``unroll_noisy`` calls the transformer once per iteration, so every
repetition gets its own independent error pattern.
"""

import logging
import threading
import warnings
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

import numpy as np

from ..core.circuit import Circuit
from ..core.gates import PAULI_ERRORS

logger = logging.getLogger(__name__)


@dataclass
class ErrorCounter:
    """Running total of injected errors, safe to share between threads."""
    count: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def increment(self, n: int = 1) -> int:
        with self._lock:
            self.count += n
            return self.count

    def reset(self):
        with self._lock:
            self.count = 0

    def __int__(self) -> int:
        return self.count


def _check_probability(p: float):
    if not 0.0 <= p <= 1.0:
        raise ValueError(f"Error probability must be in [0, 1], got {p}")
    if p > 0.75:
        # Above 3/4 the channel is no longer a contraction towards I/2
        warnings.warn(
            f"Depolarizing probability p = {p:.3f} exceeds 3/4; the channel "
            f"over-rotates rather than mixing towards the maximally mixed state.",
            UserWarning
        )


def noisy_dep_ch(circuit: Circuit, p: float, error_counter: ErrorCounter,
                 rng: Optional[np.random.Generator] = None) -> Circuit:
    """
    Build a noisy copy of ``circuit`` under the depolarizing channel.

    Parameters
    ----------
    circuit : Circuit
        The ideal circuit. Not modified.
    p : float
        Probability of injecting an error after each operation.
    error_counter : ErrorCounter
        Incremented once per injected error.
    rng : numpy.random.Generator, optional
        Source of randomness. A fresh unseeded generator if None.

    Returns
    -------
    Circuit
        One pass of the operation list (``iterations == 1``) with errors
        interleaved.
    """
    _check_probability(p)
    rng = rng if rng is not None else np.random.default_rng()

    noisy = Circuit(circuit.n_qubits, name=f"{circuit.name}_noisy", iterations=1)
    injected = 0
    for op in circuit:
        noisy.add(op)
        if circuit.n_qubits == 0:
            continue
        if rng.random() < p:
            error_type = PAULI_ERRORS[int(rng.integers(len(PAULI_ERRORS)))]
            qubit = int(rng.integers(circuit.n_qubits))
            noisy.add(error_type(qubit))
            error_counter.increment()
            injected += 1

    logger.debug("Injected %d errors into circuit '%s' (p=%g)", injected, circuit.name, p)
    return noisy


def unroll_noisy(circuit: Circuit, p: float, error_counter: ErrorCounter,
                 rng: Optional[np.random.Generator] = None) -> List[Circuit]:
    """One independently sampled noisy circuit per iteration of ``circuit``."""
    iterations = circuit.get_iterations()
    return [noisy_dep_ch(circuit, p, error_counter, rng) for _ in range(max(iterations, 1))]


def build_noisy_circuits(circuits: Iterable[Circuit], p: float, error_counter: ErrorCounter,
                         rng: Optional[np.random.Generator] = None) -> List[Circuit]:
    """Unroll and corrupt every non-empty circuit, preserving order."""
    noisy = []
    for circuit in circuits:
        if circuit.size() == 0:
            continue
        noisy.extend(unroll_noisy(circuit, p, error_counter, rng))
    return noisy
