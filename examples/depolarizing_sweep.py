#!/usr/bin/env python3
"""
Depolarizing Noise Sweep on a GHZ Circuit
=========================================

Runs a 3-qubit GHZ preparation under increasing depolarizing error
probability and shows how the per-qubit averages and the single-run state
fidelity degrade.

Generates:
1. Per-qubit P(|1>) vs error probability (repeated-trial averaging)
2. Mean fidelity of single noisy runs against the ideal GHZ state
3. Shot-noise comparison: binomial resampling vs repeated trials
"""

import numpy as np
import matplotlib.pyplot as plt
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from qxsim import Instruction, Program, Simulator, SimulatorConfig, SubCircuit, configure_logging
from qxsim.utils import state_fidelity
from qxsim.utils.visualization import plot_average_measurement

N_QUBITS = 3


def ghz_program(p: float = 0.0) -> Program:
    instructions = [Instruction("h", (0,))]
    instructions += [Instruction("cnot", (q, q + 1)) for q in range(N_QUBITS - 1)]
    kwargs = {}
    if p > 0:
        kwargs = {"error_model": "depolarizing_channel", "error_parameters": [p]}
    return Program(N_QUBITS, [SubCircuit("ghz", instructions)], **kwargs)


def ideal_state() -> np.ndarray:
    sim = Simulator(SimulatorConfig(seed=0))
    sim.set(ghz_program())
    sim.execute()
    return sim.get_state_vector()


def mean_fidelity(p: float, runs: int, seed: int) -> float:
    """Average fidelity of ``runs`` independent noisy executions."""
    target = ideal_state()
    sim = Simulator(SimulatorConfig(seed=seed))
    sim.set(ghz_program(p))
    values = []
    for _ in range(runs):
        sim.execute()
        values.append(state_fidelity(target, sim.get_state_vector()))
    return float(np.mean(values))


def main():
    """Run the sweep and save figures"""

    configure_logging(SimulatorConfig(log_level="WARNING"))

    output_dir = Path(__file__).parent.parent / "figures" / "depolarizing_sweep"
    output_dir.mkdir(parents=True, exist_ok=True)

    print("=" * 60)
    print("Depolarizing Sweep: %d-qubit GHZ" % N_QUBITS)
    print("=" * 60)

    probabilities = np.array([0.0, 0.01, 0.05, 0.1, 0.2, 0.4])
    averages = []
    fidelities = []
    for p in probabilities:
        sim = Simulator(SimulatorConfig(seed=42))
        sim.set(ghz_program(p))
        sim.execute(navg=2000)
        averages.append(sim.get_average_measurement())
        fidelities.append(mean_fidelity(p, runs=200, seed=7))
        print(f"  p = {p:.2f}: P(|1>) = {np.round(averages[-1], 3)}, "
              f"F = {fidelities[-1]:.4f}, errors = {sim.total_errors}")

    # 1. Averages vs p
    averages = np.array(averages)
    fig, ax = plt.subplots(figsize=(8, 5))
    for q in range(N_QUBITS):
        ax.plot(probabilities, averages[:, q], "o-", label=f"q{q}")
    ax.axhline(0.5, color="gray", linestyle="--", linewidth=1)
    ax.set_xlabel("Error probability p", fontsize=12)
    ax.set_ylabel("P(|1⟩)", fontsize=12)
    ax.set_title("Per-qubit averages under depolarizing noise", fontsize=14)
    ax.legend()
    path = output_dir / "01_averages.png"
    fig.savefig(path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"  Saved: {path}")

    # 2. Fidelity vs p
    fig, ax = plt.subplots(figsize=(8, 5))
    ax.plot(probabilities, fidelities, "s-", color="tab:red")
    ax.set_ylim(0, 1.05)
    ax.set_xlabel("Error probability p", fontsize=12)
    ax.set_ylabel("Mean fidelity", fontsize=12)
    ax.set_title("GHZ fidelity of single noisy runs", fontsize=14)
    path = output_dir / "02_fidelity.png"
    fig.savefig(path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"  Saved: {path}")

    # 3. Binomial resampling vs repeated trials
    sim = Simulator(SimulatorConfig(seed=3))
    sim.set(ghz_program())
    binomial = sim.execute_and_get_average_measurement(2000)
    sim.execute(navg=2000)
    trials = sim.get_average_measurement()

    fig, axes = plt.subplots(1, 2, figsize=(12, 4))
    plot_average_measurement(binomial, ax=axes[0], title="Binomial resampling (2000 shots)")
    plot_average_measurement(trials, ax=axes[1], title="Repeated trials (2000 shots)", color="tab:green")
    path = output_dir / "03_shot_noise.png"
    fig.savefig(path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"  Saved: {path}")

    print("\n" + "=" * 60)
    print("All figures saved to:", output_dir)
    print("=" * 60)


if __name__ == "__main__":
    main()
