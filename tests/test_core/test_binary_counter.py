"""Tests for the fixed-width binary counter."""

import pytest

from qxsim.core.binary_counter import BinaryCounter


class TestBinaryCounter:

    def test_set_unset_test(self):
        c = BinaryCounter(4)
        c.set(0)
        c.set(3)
        assert c.value() == 0b1001
        assert c.test(3) and not c.test(1)
        c.unset(3)
        assert c.value() == 1

    def test_increment_returns_previous_value(self):
        c = BinaryCounter(3, value=5)
        assert c.increment() == 5
        assert c.value() == 6

    def test_increment_wraps_at_width(self):
        c = BinaryCounter(2, value=3)
        c.increment()
        assert c.value() == 0

    def test_64_bit_counter(self):
        c = BinaryCounter(64)
        c.set(63)
        assert c.value() == 1 << 63
        c.assign((1 << 64) - 1)
        c.increment()
        assert c.value() == 0

    def test_enumerates_every_subset(self):
        c = BinaryCounter(3)
        seen = []
        for _ in range(8):
            seen.append(c.increment())
        assert seen == list(range(8))
        assert c == 0

    def test_reset_and_string(self):
        c = BinaryCounter(4, value=5)
        assert c.to_string() == "0101"
        assert str(c) == "[ 0101 : 5]"
        c.reset()
        assert int(c) == 0

    @pytest.mark.parametrize("bits", [-1, 65])
    def test_width_limits(self, bits):
        with pytest.raises(ValueError):
            BinaryCounter(bits)

    def test_bit_out_of_range(self):
        with pytest.raises(IndexError):
            BinaryCounter(4).set(4)
