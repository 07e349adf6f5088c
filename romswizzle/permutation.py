"""Bit order parsing.

A bit order is written most significant output bit first::

    "0,1,2,3,4,5,6,7"

means "output bit 7 comes from source bit 0, output bit 6 from source bit 1,
..." which reverses every byte.  :class:`BitPermutation` stores the same
information indexed by output bit, so ``perm[i]`` is the source bit that ends
up at output bit ``i``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterator

from romswizzle.types import MAX_BUS_WIDTH, PermutationError

logger = logging.getLogger(__name__)

# leading whitespace, optional sign, digits; anything after is ignored
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True)
class BitPermutation:
    """Source bit index for every output bit, least significant first."""

    sources: tuple[int, ...]

    def __post_init__(self) -> None:
        width = len(self.sources)
        if not 1 <= width <= MAX_BUS_WIDTH:
            raise PermutationError(
                f"permutation width must be between 1 and {MAX_BUS_WIDTH}, got {width}"
            )
        for src in self.sources:
            if not 0 <= src < width:
                raise PermutationError(
                    f"invalid bit index {src} (must be between 0 and {width - 1})"
                )

    # -- sequence protocol ---------------------------------------------------

    def __len__(self) -> int:
        return len(self.sources)

    def __getitem__(self, index: int) -> int:
        return self.sources[index]

    def __iter__(self) -> Iterator[int]:
        return iter(self.sources)

    # -- properties ----------------------------------------------------------

    @property
    def width(self) -> int:
        return len(self.sources)

    @property
    def is_identity(self) -> bool:
        return all(src == i for i, src in enumerate(self.sources))

    @property
    def is_bijective(self) -> bool:
        return len(set(self.sources)) == self.width

    def duplicates(self) -> list[int]:
        """Return source indices used more than once, in ascending order."""
        seen: set[int] = set()
        dups: set[int] = set()
        for src in self.sources:
            if src in seen:
                dups.add(src)
            seen.add(src)
        return sorted(dups)

    def inverse(self) -> BitPermutation:
        """Return the permutation that undoes this one.

        Raises:
            PermutationError: If a source bit is used more than once, since
                the discarded bits cannot be recovered.
        """
        if not self.is_bijective:
            raise PermutationError(
                f"cannot invert a permutation with repeated bits {self.duplicates()}"
            )
        inv = [0] * self.width
        for out_bit, src in enumerate(self.sources):
            inv[src] = out_bit
        return BitPermutation(tuple(inv))

    def to_spec(self) -> str:
        """Render back to the MSB-first comma separated form."""
        return ",".join(str(src) for src in reversed(self.sources))

    # -- constructors --------------------------------------------------------

    @classmethod
    def identity(cls, width: int) -> BitPermutation:
        return cls(tuple(range(width)))

    @classmethod
    def reversal(cls, width: int) -> BitPermutation:
        return cls(tuple(reversed(range(width))))


def parse_int(token: str) -> int:
    """Parse like C ``atoi``: leading integer or 0 if there is none."""
    match = _LEADING_INT.match(token)
    return int(match.group(1)) if match else 0


def parse_permutation(spec: str, width: int, kind: str = "data") -> BitPermutation:
    """Parse an MSB-first bit list into a :class:`BitPermutation`.

    Args:
        spec: Comma separated source bit indices, most significant output
            bit first.  Empty fields are skipped.
        width: Number of bits the permutation must cover.
        kind: ``"address"`` or ``"data"``, used in diagnostics only.

    Returns:
        The parsed permutation.

    Raises:
        PermutationError: If an index is out of range or the number of
            indices differs from *width*.
    """
    if not 1 <= width <= MAX_BUS_WIDTH:
        raise PermutationError(
            f"{kind} bus width must be between 1 and {MAX_BUS_WIDTH}, got {width}"
        )

    tokens = [tok for tok in spec.split(",") if tok]
    slots = [0] * width
    seen: set[int] = set()

    pos = width
    for token in tokens:
        index = parse_int(token)
        if pos > 0:
            slots[pos - 1] = index

        if not 0 <= index < width:
            raise PermutationError(
                f"invalid {kind} bit index {index} (must be between 0 and {width - 1})"
            )

        if index in seen:
            logger.warning("%s bit index %d specified multiple times", kind, index)
        seen.add(index)
        pos -= 1

    if pos != 0:
        raise PermutationError(
            f"expected {width} {kind} bits, but {width - pos} were specified"
        )

    return BitPermutation(tuple(slots))
