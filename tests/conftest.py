from pathlib import Path

import pytest
from PIL import Image


def gradient(width=90, height=80, descending=True, mode="L"):
    """Horizontal gray ramp. Descending ramps hash to all ones, ascending to zero."""
    img = Image.new("L", (width, height))
    ramp = [(x * 255) // (width - 1) for x in range(width)]
    if descending:
        ramp = [255 - v for v in ramp]
    img.putdata([ramp[x] for _ in range(height) for x in range(width)])
    return img if mode == "L" else img.convert(mode)


@pytest.fixture
def descending_png(tmp_path: Path) -> Path:
    p = tmp_path / "descending.png"
    gradient().save(p)
    return p


@pytest.fixture
def ascending_png(tmp_path: Path) -> Path:
    p = tmp_path / "ascending.png"
    gradient(descending=False).save(p)
    return p
