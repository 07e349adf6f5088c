"""Data classes and exceptions for the swizzle engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from romswizzle.permutation import BitPermutation

MIN_BYTES_PER_WORD = 1
MAX_BYTES_PER_WORD = 4
MAX_BUS_WIDTH = 32


# ---------------------------------------------------------------------------
# Configuration data classes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SwizzleConfig:
    """Everything a single swizzle run needs, validated once.

    ``addr_bits`` / ``data_bits`` are either MSB-first bit lists such as
    ``"0,1,2,3,4,5,6,7"`` or already parsed permutations.  Text is parsed
    by the transformer once the image size, and therefore the address bus
    width, is known.
    """

    addr_bits: str | BitPermutation | None = None
    data_bits: str | BitPermutation | None = None
    bytes_per_word: int = 1
    big_endian: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.bytes_per_word, bool) or not isinstance(self.bytes_per_word, int):
            raise ConfigError(
                f"bytes per word must be an integer, got {type(self.bytes_per_word).__name__}"
            )
        if not MIN_BYTES_PER_WORD <= self.bytes_per_word <= MAX_BYTES_PER_WORD:
            raise ConfigError(
                f"bytes per word must be between {MIN_BYTES_PER_WORD}-{MAX_BYTES_PER_WORD}"
            )

    @property
    def swizzles_address(self) -> bool:
        return self.addr_bits is not None

    @property
    def swizzles_data(self) -> bool:
        return self.data_bits is not None


# ---------------------------------------------------------------------------
# Result data classes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ImageLayout:
    """Sizing decisions for one image, resolved before any bytes move."""

    file_size: int
    working_size: int
    bytes_per_word: int
    num_addr_bits: int
    num_data_bits: int

    @property
    def num_words(self) -> int:
        return self.working_size // self.bytes_per_word

    @property
    def padded(self) -> bool:
        return self.working_size != self.file_size


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class SwizzleError(Exception):
    """Base exception for swizzle operations."""


class ConfigError(SwizzleError):
    """Raised when an option value or config file is invalid."""


class PermutationError(SwizzleError):
    """Raised when a bit order does not describe a usable permutation."""


class ImageSizeError(SwizzleError):
    """Raised when the image size gives an unsupported address bus width."""


class ImageIOError(SwizzleError, OSError):
    """Raised when an image cannot be read or written."""
