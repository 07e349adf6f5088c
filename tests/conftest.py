"""Shared fixtures for romswizzle tests."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest


@pytest.fixture()
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture()
def rom_image(rng) -> bytes:
    """256 bytes of deterministic pseudo-random ROM content."""
    return rng.integers(0, 256, size=256, dtype=np.uint8).tobytes()


@pytest.fixture()
def write_image(tmp_path: Path):
    """Return a helper that writes raw bytes under tmp_path."""

    def _write(data: bytes, name: str = "in.bin") -> Path:
        path = tmp_path / name
        path.write_bytes(data)
        return path

    return _write
