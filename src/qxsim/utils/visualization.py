"""
Measurement Visualization
=========================

Bar charts for the two reporting views of a simulation:

- plot_average_measurement(): per-qubit probability of measuring |1>
- plot_state_probabilities(): Born-rule probability of every basis state
"""

from __future__ import annotations

import numpy as np
import matplotlib.pyplot as plt
from typing import Optional, Sequence, Tuple

from .math_utils import basis_state_label


def plot_average_measurement(
    probabilities: Sequence[Optional[float]],
    ax: Optional[plt.Axes] = None,
    title: Optional[str] = None,
    figsize: Tuple[float, float] = (8, 4),
    color: str = "tab:blue",
) -> plt.Axes:
    """
    Bar chart of per-qubit excited-state probabilities.

    Parameters
    ----------
    probabilities : sequence of float
        One entry per qubit, qubit 0 first. None entries (no statistic
        available) are drawn as empty bars.
    ax : plt.Axes, optional
        Axes to plot on. If None, creates new figure.

    Returns
    -------
    plt.Axes
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)

    values = np.array([np.nan if p is None else p for p in probabilities], dtype=float)
    qubits = np.arange(values.size)
    ax.bar(qubits, np.nan_to_num(values), color=color, edgecolor="black")
    ax.axhline(0.5, color="gray", linestyle="--", linewidth=1)

    ax.set_xticks(qubits)
    ax.set_xticklabels([f"q{q}" for q in qubits])
    ax.set_ylim(0, 1)
    ax.set_xlabel("Qubit", fontsize=12)
    ax.set_ylabel("P(|1⟩)", fontsize=12)
    ax.set_title(title or "Average measurement", fontsize=14)
    return ax


def plot_state_probabilities(
    register,
    ax: Optional[plt.Axes] = None,
    threshold: float = 1e-12,
    title: Optional[str] = None,
    figsize: Tuple[float, float] = (10, 4),
    color: str = "tab:purple",
) -> plt.Axes:
    """
    Bar chart of |a_i|^2 for every basis state above ``threshold``.

    Labels put the most-significant qubit first, matching ``get_state()``.
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)

    probabilities = register.probabilities()
    indices = np.flatnonzero(probabilities > threshold)
    labels = [basis_state_label(int(i), register.n_qubits) for i in indices]

    ax.bar(np.arange(indices.size), probabilities[indices], color=color, edgecolor="black")
    ax.set_xticks(np.arange(indices.size))
    ax.set_xticklabels(labels, rotation=90 if indices.size > 16 else 0)
    ax.set_ylim(0, 1)
    ax.set_xlabel("Basis state", fontsize=12)
    ax.set_ylabel("Probability", fontsize=12)
    ax.set_title(title or f"{register.n_qubits}-qubit state", fontsize=14)
    return ax
