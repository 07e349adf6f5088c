"""Move bits of a word according to a :class:`BitPermutation`."""

from __future__ import annotations

import numpy as np

from romswizzle.permutation import BitPermutation
from romswizzle.types import MAX_BUS_WIDTH, PermutationError


def _check_width(permutation: BitPermutation, width: int | None) -> int:
    if width is None:
        return permutation.width
    if width != permutation.width:
        raise PermutationError(
            f"permutation covers {permutation.width} bits, but {width} were requested"
        )
    if width > MAX_BUS_WIDTH:
        raise PermutationError(f"word width must be at most {MAX_BUS_WIDTH} bits")
    return width


def swizzle_word(value: int, permutation: BitPermutation, width: int | None = None) -> int:
    """Return *value* with bit ``permutation[i]`` moved to bit ``i``.

    Bits of *value* above *width* are ignored.

    Examples:
        >>> swizzle_word(0b00000001, BitPermutation.reversal(8))
        128
    """
    width = _check_width(permutation, width)
    out = 0
    for i in range(width):
        src = permutation[i]
        bit = value & (1 << src)
        if src >= i:
            out |= bit >> (src - i)
        else:
            out |= bit << (i - src)
    return out


def swizzle_words(values, permutation: BitPermutation) -> np.ndarray:
    """Vectorised :func:`swizzle_word` over an array of unsigned words.

    Args:
        values: Array-like of non-negative integers.
        permutation: Bit order applied to every element.

    Returns:
        ``uint64`` array of the same shape as *values*.
    """
    words = np.asarray(values, dtype=np.uint64)
    out = np.zeros_like(words)
    for i, src in enumerate(permutation):
        bit = words & np.uint64(1 << src)
        if src >= i:
            out |= bit >> np.uint64(src - i)
        else:
            out |= bit << np.uint64(i - src)
    return out
