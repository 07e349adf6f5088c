"""Whole-image address and data swizzling.

The image is handled as an array of words of ``bytes_per_word`` bytes.  Each
word is decoded with the configured byte order, its data bits permuted, and
the result stored at the word index obtained by permuting the address bits.
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from romswizzle.permutation import BitPermutation, parse_permutation
from romswizzle.swizzle import swizzle_words
from romswizzle.types import (
    MAX_BUS_WIDTH,
    ImageIOError,
    ImageLayout,
    ImageSizeError,
    PermutationError,
    SwizzleConfig,
)

logger = logging.getLogger(__name__)

BytesLike = bytes | bytearray | memoryview | np.ndarray


# ---------------------------------------------------------------------------
# Sizing
# ---------------------------------------------------------------------------

def _is_power_of_two(n: int) -> bool:
    return n & (n - 1) == 0


def _next_power_of_two(n: int) -> int:
    return 1 << (n - 1).bit_length()


def plan_layout(file_size: int, config: SwizzleConfig) -> ImageLayout:
    """Work out the padded image size and bus widths for *file_size* bytes.

    Address swizzling needs a power-of-two number of bytes, and every word
    must be complete; both cases pad with zeros and log a warning.

    Raises:
        ImageSizeError: If the resulting address bus is not 1-32 bits wide.
    """
    bpw = config.bytes_per_word
    working = file_size

    if config.swizzles_address and not _is_power_of_two(working):
        logger.warning("non-power-of-two input size (%d bytes)", working)
        working = _next_power_of_two(working)

    if working % bpw:
        logger.warning("input size is not a multiple of %d bytes", bpw)
        working += bpw - working % bpw

    num_addr_bits = (working // bpw).bit_length() - 1
    if not 1 <= num_addr_bits <= MAX_BUS_WIDTH:
        raise ImageSizeError(f"address bus width must be between 1 and {MAX_BUS_WIDTH} bits")

    return ImageLayout(
        file_size=file_size,
        working_size=working,
        bytes_per_word=bpw,
        num_addr_bits=num_addr_bits,
        num_data_bits=8 * bpw,
    )


def _as_permutation(
    value: str | BitPermutation | None, width: int, kind: str
) -> BitPermutation | None:
    if value is None:
        return None
    if isinstance(value, BitPermutation):
        if value.width != width:
            raise PermutationError(
                f"expected {width} {kind} bits, but {value.width} were specified"
            )
        return value
    return parse_permutation(value, width, kind)


def resolve_permutations(
    config: SwizzleConfig, layout: ImageLayout
) -> tuple[BitPermutation | None, BitPermutation | None]:
    """Parse the configured bit orders against the widths in *layout*.

    Returns:
        ``(address_permutation, data_permutation)``; either may be ``None``.
    """
    addr = _as_permutation(config.addr_bits, layout.num_addr_bits, "address")
    data = _as_permutation(config.data_bits, layout.num_data_bits, "data")
    if addr is not None:
        logger.debug("address bit order: %s", addr.to_spec())
    if data is not None:
        logger.debug("data bit order: %s", data.to_spec())
    return addr, data


# ---------------------------------------------------------------------------
# Word codec
# ---------------------------------------------------------------------------

def _lane_shifts(bytes_per_word: int, big_endian: bool) -> np.ndarray:
    shifts = np.arange(bytes_per_word, dtype=np.uint64) * np.uint64(8)
    return shifts[::-1] if big_endian else shifts


def decode_words(buf: np.ndarray, bytes_per_word: int, big_endian: bool = False) -> np.ndarray:
    """Pack consecutive bytes of *buf* into ``uint64`` words."""
    lanes = np.asarray(buf, dtype=np.uint8).reshape(-1, bytes_per_word).astype(np.uint64)
    return np.bitwise_or.reduce(lanes << _lane_shifts(bytes_per_word, big_endian), axis=1)


def encode_words(words: np.ndarray, bytes_per_word: int, big_endian: bool = False) -> np.ndarray:
    """Inverse of :func:`decode_words`; returns a flat ``uint8`` array."""
    words = np.asarray(words, dtype=np.uint64)
    lanes = (words[:, None] >> _lane_shifts(bytes_per_word, big_endian)) & np.uint64(0xFF)
    return lanes.astype(np.uint8).ravel()


# ---------------------------------------------------------------------------
# Transform
# ---------------------------------------------------------------------------

def _as_byte_array(data: BytesLike) -> np.ndarray:
    if isinstance(data, np.ndarray):
        return data.astype(np.uint8, copy=False).ravel()
    return np.frombuffer(data, dtype=np.uint8)


def _transform(config: SwizzleConfig, data: BytesLike) -> tuple[ImageLayout, np.ndarray]:
    src = _as_byte_array(data)
    layout = plan_layout(src.size, config)
    addr_perm, data_perm = resolve_permutations(config, layout)

    logger.info(
        "swizzling %d bytes as %d words (%d address bits, %d data bits)",
        layout.working_size, layout.num_words, layout.num_addr_bits, layout.num_data_bits,
    )

    in_buf = np.zeros(layout.working_size, dtype=np.uint8)
    in_buf[:src.size] = src

    words = decode_words(in_buf, layout.bytes_per_word, config.big_endian)
    if data_perm is not None:
        words = swizzle_words(words, data_perm)

    index = np.arange(layout.num_words, dtype=np.uint64)
    if addr_perm is not None:
        index = swizzle_words(index, addr_perm)
    index = index.astype(np.intp)

    out_words = np.zeros(layout.num_words, dtype=np.uint64)
    if addr_perm is None:
        out_words[index] = words
    else:
        # repeated destinations keep the word written last, untouched slots stay 0
        dest, first_from_end = np.unique(index[::-1], return_index=True)
        out_words[dest] = words[index.size - 1 - first_from_end]

    out_buf = encode_words(out_words, layout.bytes_per_word, config.big_endian)
    return layout, out_buf


def transform(config: SwizzleConfig, data: BytesLike) -> bytes:
    """Swizzle a whole image held in memory.

    Args:
        config: Bit orders, word size and byte order.
        data: Raw image bytes.

    Returns:
        The swizzled image, padded to the working size from
        :func:`plan_layout`.

    Raises:
        PermutationError: If a bit order does not fit the image.
        ImageSizeError: If the image is too small or too large.
    """
    _layout, out_buf = _transform(config, data)
    return out_buf.tobytes()


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------

def load_image(path: str | Path) -> np.ndarray:
    """Read a raw image file into a ``uint8`` array."""
    p = Path(path)
    try:
        return np.fromfile(p, dtype=np.uint8)
    except OSError as exc:
        raise ImageIOError(f"unable to open {p} for reading") from exc


def save_image(path: str | Path, data: BytesLike) -> None:
    """Write *data* to *path* as a raw image file."""
    p = Path(path)
    buf = _as_byte_array(data)
    try:
        buf.tofile(p)
    except OSError as exc:
        raise ImageIOError(f"unable to write {buf.size} bytes to {p}") from exc


def swizzle_file(
    in_path: str | Path, out_path: str | Path, config: SwizzleConfig
) -> ImageLayout:
    """Swizzle *in_path* into *out_path*.

    The output file is only created once the transform has succeeded.

    Returns:
        The layout used, so callers can report padding.
    """
    src = load_image(in_path)
    layout, out_buf = _transform(config, src)
    save_image(out_path, out_buf)
    logger.info("wrote %d bytes to %s", layout.working_size, out_path)
    return layout
