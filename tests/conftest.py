import io
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from agv_rebrand.config import settings


@pytest.fixture
def public_dir(tmp_path: Path, monkeypatch) -> Path:
    root = tmp_path / "public"
    monkeypatch.setattr(settings, "public_dir", str(root))
    monkeypatch.setattr(settings, "background_path", str(root / "bg.png"))
    monkeypatch.setattr(settings, "logo_path", str(root / "logo.png"))
    return root


@pytest.fixture
def to_png():
    def _encode(pixels: np.ndarray) -> bytes:
        buffer = io.BytesIO()
        Image.fromarray(pixels.astype(np.uint8)).save(buffer, format="PNG")
        return buffer.getvalue()

    return _encode


@pytest.fixture
def noise_cell_image() -> np.ndarray:
    """700x500 flat gray image with one noisy 100x100 cell at column 5, row 1."""
    pixels = np.full((500, 700, 3), 128, dtype=np.uint8)
    rng = np.random.default_rng(1234)
    pixels[100:200, 500:600] = rng.integers(0, 256, size=(100, 100, 3), dtype=np.uint8)
    return pixels
