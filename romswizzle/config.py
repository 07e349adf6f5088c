"""Load swizzle settings from a YAML file.

A config file holds the same settings as the command line, e.g. for a board
whose ROM socket has two swapped data lines::

    data: "7,6,5,4,3,2,0,1"
    word: 1
    big: false
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from romswizzle.types import ConfigError, SwizzleConfig

logger = logging.getLogger(__name__)

CONFIG_KEYS = ("addr", "data", "word", "big")


def _bit_order(value: Any, key: str) -> str | None:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    if isinstance(value, (str, int)) and not isinstance(value, bool):
        return str(value)
    raise ConfigError(f"'{key}' must be a bit list, got {type(value).__name__}")


def load_config_file(path: str | Path) -> dict[str, Any]:
    """Load and check a swizzle config file.

    Bit orders may be given as a comma separated string or as a YAML list.

    Args:
        path: Path to the YAML file.

    Returns:
        Mapping with any of the keys ``addr``, ``data``, ``word``, ``big``.

    Raises:
        ConfigError: If the file is missing, malformed or has unknown keys.
    """
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Configuration file not found: {p}")

    try:
        with open(p, encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {p}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {p}, got {type(data).__name__}")

    unknown = sorted(set(data) - set(CONFIG_KEYS))
    if unknown:
        raise ConfigError(f"Unknown key(s) in {p}: {', '.join(map(str, unknown))}")

    values: dict[str, Any] = {}
    for key in ("addr", "data"):
        if key in data:
            values[key] = _bit_order(data[key], key)
    if "word" in data:
        word = data["word"]
        if isinstance(word, bool) or not isinstance(word, int):
            raise ConfigError(f"'word' must be an integer, got {type(word).__name__}")
        values["word"] = word
    if "big" in data:
        if not isinstance(data["big"], bool):
            raise ConfigError(f"'big' must be true or false, got {data['big']!r}")
        values["big"] = data["big"]

    logger.debug("loaded %s: %s", p, values)
    return values


def build_config(
    file_values: dict[str, Any] | None = None,
    *,
    addr: str | None = None,
    data: str | None = None,
    word: int | None = None,
    big: bool | None = None,
) -> SwizzleConfig:
    """Merge config-file values with command line overrides.

    Overrides that are ``None`` leave the file value (or the default) alone.
    """
    merged: dict[str, Any] = dict(file_values or {})
    overrides = {"addr": addr, "data": data, "word": word, "big": big}
    for key, value in overrides.items():
        if value is not None:
            merged[key] = value

    return SwizzleConfig(
        addr_bits=merged.get("addr"),
        data_bits=merged.get("data"),
        bytes_per_word=merged.get("word", 1),
        big_endian=bool(merged.get("big", False)),
    )
