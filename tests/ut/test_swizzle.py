"""Tests for swizzle - single word and vectorised bit moves."""

from __future__ import annotations

import numpy as np
import pytest

from romswizzle.permutation import BitPermutation, parse_permutation
from romswizzle.swizzle import swizzle_word, swizzle_words
from romswizzle.types import PermutationError


def _random_permutation(rng, width: int) -> BitPermutation:
    return BitPermutation(tuple(int(x) for x in rng.permutation(width)))


class TestSwizzleWord:
    def test_reverse_byte(self):
        perm = parse_permutation("0,1,2,3,4,5,6,7", 8)
        assert swizzle_word(0b00000001, perm, 8) == 0b10000000
        assert swizzle_word(0b10110000, perm, 8) == 0b00001101

    @pytest.mark.parametrize("value", [0, 1, 0x5A, 0xA5, 0xFF])
    def test_identity_unchanged(self, value):
        assert swizzle_word(value, BitPermutation.identity(8)) == value

    def test_swap_two_low_bits(self):
        perm = parse_permutation("7,6,5,4,3,2,0,1", 8)
        assert swizzle_word(0b01, perm) == 0b10
        assert swizzle_word(0b10, perm) == 0b01
        assert swizzle_word(0xF0, perm) == 0xF0

    def test_bits_above_width_dropped(self):
        assert swizzle_word(0x1FF, BitPermutation.identity(8)) == 0xFF

    def test_repeated_source_copies_bit(self):
        perm = BitPermutation((0, 0))
        assert swizzle_word(0b01, perm) == 0b11
        assert swizzle_word(0b10, perm) == 0b00

    def test_top_bit_of_32(self):
        perm = BitPermutation.reversal(32)
        assert swizzle_word(1, perm) == 0x80000000
        assert swizzle_word(0x80000000, perm) == 1

    def test_width_mismatch(self):
        with pytest.raises(PermutationError, match="covers 8 bits, but 16"):
            swizzle_word(1, BitPermutation.identity(8), 16)

    @pytest.mark.parametrize("width", [1, 8, 13, 16, 24, 32])
    def test_inverse_round_trip(self, rng, width):
        perm = _random_permutation(rng, width)
        inv = perm.inverse()
        values = rng.integers(0, 2**width, size=32, dtype=np.uint64)
        for v in values:
            v = int(v)
            assert swizzle_word(swizzle_word(v, perm, width), inv, width) == v


class TestSwizzleWords:
    def test_matches_scalar(self, rng):
        perm = _random_permutation(rng, 16)
        values = rng.integers(0, 2**16, size=100, dtype=np.uint64)
        out = swizzle_words(values, perm)
        assert out.dtype == np.uint64
        assert out.shape == values.shape
        assert [int(x) for x in out] == [swizzle_word(int(v), perm) for v in values]

    def test_accepts_lists(self):
        out = swizzle_words([1, 2, 4], BitPermutation.reversal(3))
        assert out.tolist() == [4, 2, 1]

    def test_address_indices(self):
        perm = BitPermutation.reversal(2)
        out = swizzle_words(np.arange(4, dtype=np.uint64), perm)
        assert out.tolist() == [0, 2, 1, 3]
