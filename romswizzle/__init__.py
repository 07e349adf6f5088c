"""romswizzle - reorder address and data bits in a ROM image."""

__version__ = "1.0.0"

from romswizzle.image import (
    decode_words,
    encode_words,
    load_image,
    plan_layout,
    save_image,
    swizzle_file,
    transform,
)
from romswizzle.permutation import BitPermutation, parse_permutation
from romswizzle.swizzle import swizzle_word, swizzle_words
from romswizzle.types import (
    ConfigError,
    ImageIOError,
    ImageLayout,
    ImageSizeError,
    PermutationError,
    SwizzleConfig,
    SwizzleError,
)

__all__ = [
    "__version__",
    "BitPermutation",
    "ConfigError",
    "ImageIOError",
    "ImageLayout",
    "ImageSizeError",
    "PermutationError",
    "SwizzleConfig",
    "SwizzleError",
    "decode_words",
    "encode_words",
    "load_image",
    "parse_permutation",
    "plan_layout",
    "save_image",
    "swizzle_file",
    "swizzle_word",
    "swizzle_words",
    "transform",
]
