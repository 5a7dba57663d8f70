"""
Mathematical Utilities
======================

State comparison and basis-state helpers.

Fidelity between two pure states is delegated to QuTiP:

    F(ψ, φ) = |<ψ|φ>|^2

``qutip.fidelity`` returns the root fidelity |<ψ|φ>| for kets, so the value
is squared here.
"""

import numpy as np
from qutip import Qobj
from qutip import fidelity as qutip_fidelity


def to_ket(vector) -> Qobj:
    """Wrap a state vector as a QuTiP ket."""
    vector = np.asarray(vector, dtype=np.complex128).reshape(-1, 1)
    return Qobj(vector)


def state_fidelity(psi, phi) -> float:
    """
    Squared overlap of two state vectors.

    Parameters
    ----------
    psi, phi : array_like
        State vectors of equal length. Normalized internally.

    Returns
    -------
    float
        |<ψ|φ>|^2 in [0, 1]
    """
    psi = np.asarray(psi, dtype=np.complex128)
    phi = np.asarray(phi, dtype=np.complex128)
    if psi.shape != phi.shape:
        raise ValueError(f"State vectors differ in size: {psi.size} vs {phi.size}")
    norm_psi = np.linalg.norm(psi)
    norm_phi = np.linalg.norm(phi)
    if norm_psi == 0 or norm_phi == 0:
        raise ValueError("Cannot compute fidelity of a zero vector")
    root = qutip_fidelity(to_ket(psi / norm_psi), to_ket(phi / norm_phi))
    return float(min(1.0, root ** 2))


def fidelity(reg_1, reg_2) -> float:
    """Fidelity between the states held by two registers of equal size."""
    if reg_1.size() != reg_2.size():
        raise ValueError(f"Registers differ in size: {reg_1.size()} vs {reg_2.size()} qubits")
    return state_fidelity(reg_1.get_state_vector(), reg_2.get_state_vector())


def basis_state_label(index: int, n_qubits: int) -> str:
    """Ket label with the most-significant qubit first, e.g. '|101>'."""
    bits = format(index, f"0{n_qubits}b") if n_qubits else ""
    return f"|{bits}>"
