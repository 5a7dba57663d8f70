# Noise Models
#
# Circuit-level error channels.
#
# This module provides:
#   - Depolarizing channel: random Pauli corruption injected after operations
#   - Shared, thread-safe injection counter
#
# Channels rewrite an ideal circuit into a noisy one; they never mutate the
# input circuit. Each call samples independently, so a circuit with several
# iterations is unrolled into one freshly sampled noisy copy per iteration.

from .depolarizing import (
    ErrorCounter,
    noisy_dep_ch,
    unroll_noisy,
    build_noisy_circuits,
)

__all__ = [
    "ErrorCounter",
    "noisy_dep_ch",
    "unroll_noisy",
    "build_noisy_circuits",
]
