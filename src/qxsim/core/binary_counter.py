# Binary Counter
#
# Incrementable bit-pattern cursor over up to 64 bits.
#
# Bit q of the value is qubit q. QuRegister decodes a collapsed basis
# index into per-qubit results through it; it is also public for walking
# basis-state subsets. Increments wrap modulo 2^width.

import logging

logger = logging.getLogger(__name__)

MAX_BITS = 64


class BinaryCounter:
    """Fixed-width unsigned counter with per-bit access."""

    def __init__(self, bit_count: int, value: int = 0):
        if not 0 <= bit_count <= MAX_BITS:
            raise ValueError(f"bit_count must be in [0, {MAX_BITS}], got {bit_count}")
        self.bit_count = bit_count
        self.max_value = 1 << bit_count
        self._value = 0
        self.assign(value)

    def _check_bit(self, b: int):
        if not 0 <= b < self.bit_count:
            raise IndexError(f"bit {b} out of range for a {self.bit_count}-bit counter")

    def set(self, b: int):
        self._check_bit(b)
        self._value |= (1 << b)

    def unset(self, b: int):
        self._check_bit(b)
        self._value &= ~(1 << b)

    def test(self, b: int) -> bool:
        self._check_bit(b)
        return bool(self._value & (1 << b))

    def reset(self):
        self._value = 0

    def value(self) -> int:
        return self._value

    def assign(self, v: int) -> "BinaryCounter":
        if v < 0:
            raise ValueError(f"counter value must be non-negative, got {v}")
        self._value = v % self.max_value
        return self

    def increment(self) -> int:
        """Advance by one and return the previous value."""
        old = self._value
        self._value = (self._value + 1) % self.max_value
        return old

    def to_string(self) -> str:
        """Bits most-significant first, e.g. '0101'."""
        if self.bit_count == 0:
            return ""
        return format(self._value, f"0{self.bit_count}b")

    def dump(self):
        logger.debug("%s", self)

    def __int__(self) -> int:
        return self._value

    def __index__(self) -> int:
        return self._value

    def __eq__(self, other) -> bool:
        if isinstance(other, BinaryCounter):
            return self.bit_count == other.bit_count and self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __hash__(self):
        return hash((self.bit_count, self._value))

    def __str__(self) -> str:
        return f"[ {self.to_string()} : {self._value}]"

    def __repr__(self) -> str:
        return f"BinaryCounter(bit_count={self.bit_count}, value={self._value})"
