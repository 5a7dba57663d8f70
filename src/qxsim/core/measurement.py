"""
Measurement Engine
==================

Born-rule sampling of a register and state collapse.

JOINT MEASUREMENT
-----------------

The whole register is measured in one draw, not qubit by qubit. Sampling
each qubit independently from its marginal would be wrong for entangled
states: for a Bell state (|00> + |11>)/sqrt(2) it would produce |01> and
|10> half of the time.

Algorithm:

    1. draw u uniformly from [0, 1)
    2. walk the basis states in index order, accumulating |a_i|^2
    3. the first index whose running sum exceeds u is the outcome
    4. collapse onto that index and decode its bits into every qubit

If rounding leaves the total slightly short of one and no index exceeds u,
the last basis state is chosen. A measurement always has an outcome.

The walk is done with ``numpy.cumsum`` and ``numpy.searchsorted``, which
gives the same index as the sequential scan.
"""

import logging

import numpy as np

from .register import MeasurementState, qubit_view

logger = logging.getLogger(__name__)


def sample_outcome(probabilities: np.ndarray, u: float) -> int:
    """
    Index of the first basis state whose cumulative probability exceeds ``u``.

    Parameters
    ----------
    probabilities : np.ndarray
        Per-basis-state probabilities, in index order.
    u : float
        Uniform draw in [0, 1).

    Returns
    -------
    int
        Selected basis index; the last index if the cumulative sum never
        exceeds ``u``.
    """
    cumulative = np.cumsum(probabilities)
    index = int(np.searchsorted(cumulative, u, side="right"))
    if index >= cumulative.size:
        logger.debug("Cumulative probability %.17f did not exceed u=%.17f, "
                     "falling back to last basis state", cumulative[-1], u)
        index = cumulative.size - 1
    return index


def measure_register(register) -> int:
    """
    Measure every qubit of ``register`` jointly and collapse it.

    Returns
    -------
    int
        The collapsed basis index, or -1 if the register has no qubits.
    """
    if register.n_qubits == 0:
        logger.error("Cannot measure a register with no qubits")
        return -1

    u = register.rand()
    index = sample_outcome(register.probabilities(), u)
    register.collapse(index)
    register.set_measurement_prediction_from_state(index)
    register.set_measurement_from_state(index)
    return index


def measure_qubit(register, q: int) -> bool:
    """
    Projective Z measurement of a single qubit.

    The amplitudes inconsistent with the outcome are zeroed and the state
    renormalized. The outcome is written to the qubit's measurement and
    prediction.

    Returns
    -------
    bool
        True if the qubit was found in |1>.
    """
    register._check_qubit(q)
    view = qubit_view(register.data, register.n_qubits, q)
    p0 = float(np.sum(np.abs(view[:, 0, :]) ** 2))

    outcome = register.rand() >= p0
    view[:, 0 if outcome else 1, :] = 0.0
    register.normalize()

    register.measurement_register[q] = outcome
    register.measurement_prediction[q] = MeasurementState.ONE if outcome else MeasurementState.ZERO
    return outcome
