import random

import pytest
from PIL import Image

from diffhash import (
    InvalidGridShape,
    InvalidImage,
    PixelGrid,
    compare,
    compute_hash,
    extract,
    hamming_distance,
    is_similar,
)
from diffhash.signature import GrayscaleGrid

from conftest import gradient


def _random_image(rng, width, height, rgb=False):
    def px():
        if rgb:
            return tuple(rng.randrange(0, 200) for _ in range(3))
        return rng.randrange(0, 256)

    return PixelGrid([[px() for _ in range(width)] for _ in range(height)])


def _decreasing_rows(scale):
    return [[(scale - i) * 10 for i in range(scale + 1)] for _ in range(scale)]


def test_known_vector():
    rows = [[0] * 9 for _ in range(8)]
    rows[1][0] = 5  # column 0, row 1 beats column 1 -> bit 1
    rows[7][3] = 7  # column 3, row 7 beats column 4 -> bit 31
    # Equal neighbors in row 2 from column 5 on never set a bit.
    for x in range(5, 9):
        rows[2][x] = 4

    expected = (1 << 1) | (1 << 31)
    assert extract(GrayscaleGrid.from_rows(rows)) == expected
    assert compute_hash(PixelGrid(rows)) == expected


@pytest.mark.parametrize(
    "column, row, bit",
    [(0, 0, 0), (0, 1, 1), (1, 0, 8), (3, 5, 29), (7, 7, 63)],
)
def test_bit_order(column, row, bit):
    rows = [[0] * 9 for _ in range(8)]
    rows[row][column] = 1
    assert extract(GrayscaleGrid.from_rows(rows)) == 1 << bit


@pytest.mark.parametrize("scale", [1, 2, 4, 8, 16])
def test_decreasing_columns_set_every_bit(scale):
    rows = _decreasing_rows(scale)
    assert extract(GrayscaleGrid.from_rows(rows)) == 2 ** (scale * scale) - 1
    assert compute_hash(PixelGrid(rows), scale) == 2 ** (scale * scale) - 1


def test_uniform_image_hashes_to_zero():
    assert compute_hash(PixelGrid([[128] * 50 for _ in range(40)])) == 0
    assert compute_hash(Image.new("RGB", (100, 100), color="blue")) == 0


def test_increasing_columns_hash_to_zero():
    rows = [[i * 10 for i in range(9)] for _ in range(8)]
    assert compute_hash(PixelGrid(rows)) == 0


def test_upsampled_image():
    # 3x2 source: columns 0-2, 3-5 and 6-8 of the grid repeat source columns,
    # rows 0-3 and 4-7 repeat source rows.
    rows = [[30, 20, 10], [0, 5, 10]]
    expected = sum(1 << (i * 8 + j) for i in (2, 5) for j in range(4))
    assert compute_hash(PixelGrid(rows)) == expected


@pytest.mark.parametrize("scale", [1, 3, 8, 12])
def test_hash_range(scale):
    rng = random.Random(1234 + scale)
    for _ in range(10):
        img = _random_image(rng, rng.randrange(1, 60), rng.randrange(1, 60))
        h = compute_hash(img, scale)
        assert 0 <= h <= 2 ** (scale * scale) - 1


def test_hash_is_idempotent():
    img = _random_image(random.Random(7), 64, 48, rgb=True)
    assert compute_hash(img) == compute_hash(img)

    pil = gradient(mode="RGB")
    assert compute_hash(pil) == compute_hash(pil)


def _render(width, height):
    """Parabolic valley whose bottom sits on a different grid column in each band of rows."""
    rows = []
    for y in range(height):
        band = min(int((y + 0.5) / height * 8) // 2, 3)
        center = (band + 2.5) / 9
        rows.append([round(255 * ((x + 0.5) / width - center) ** 2) for x in range(width)])
    return PixelGrid(rows)


def test_robust_to_uniform_scaling():
    reference = compute_hash(_render(90, 80))
    assert reference not in (0, 2**64 - 1)
    for size in [(45, 40), (135, 120), (180, 160), (100, 77), (333, 250)]:
        assert hamming_distance(reference, compute_hash(_render(*size))) <= 5


def test_brightness_offset_keeps_hash():
    rng = random.Random(99)
    rows = [[tuple(rng.randrange(0, 200) for _ in range(3)) for _ in range(70)] for _ in range(50)]
    brighter = [[tuple(c + 40 for c in px) for px in row] for row in rows]
    assert compute_hash(PixelGrid(rows)) == compute_hash(PixelGrid(brighter))

    gray = [[rng.randrange(0, 100) for _ in range(30)] for _ in range(30)]
    assert compute_hash(PixelGrid(gray)) == compute_hash(PixelGrid([[v + 100 for v in r] for r in gray]))


def test_sixteen_bit_image():
    img = Image.new("I;16", (9, 8))
    for x in range(9):
        for y in range(8):
            img.putpixel((x, y), (8 - x) * 1000)
    assert compute_hash(img) == 2**64 - 1


def test_pil_gradients():
    assert compute_hash(gradient()) == 2**64 - 1
    assert compute_hash(gradient(descending=False)) == 0
    assert compute_hash(gradient(mode="RGB")) == 2**64 - 1


@pytest.mark.parametrize("rows", [[], [[]]])
def test_compute_hash_rejects_empty_images(rows):
    with pytest.raises(InvalidImage):
        compute_hash(PixelGrid(rows))


def test_compute_hash_rejects_unknown_objects():
    with pytest.raises(TypeError):
        compute_hash(object())


@pytest.mark.parametrize(
    "grid, scale",
    [
        (GrayscaleGrid.from_rows([[0] * 8 for _ in range(8)]), 8),
        (GrayscaleGrid.from_rows([[0] * 9 for _ in range(7)]), 8),
        (GrayscaleGrid(columns=((1, 2), (1,), (3, 4))), 2),
        (GrayscaleGrid(columns=()), None),
    ],
)
def test_malformed_grid(grid, scale):
    with pytest.raises(InvalidGridShape):
        extract(grid, scale)
    with pytest.raises(AssertionError):
        extract(grid, scale)


def test_hamming_distance_known_value():
    assert hamming_distance(4485936524854165493, 3337201687795727957) == 11


@pytest.mark.parametrize(
    "a, b, expected",
    [
        (0, 0, 0),
        (0, 1, 1),
        (0b1010, 0b0101, 4),
        (0, 2**64 - 1, 64),
        (2**63, 1, 2),
    ],
)
def test_hamming_distance(a, b, expected):
    assert hamming_distance(a, b) == expected
    assert hamming_distance(b, a) == expected


def test_distance_properties():
    rng = random.Random(42)
    for _ in range(200):
        a = rng.getrandbits(64)
        b = rng.getrandbits(64)
        assert hamming_distance(a, a) == 0
        assert hamming_distance(a, b) == hamming_distance(b, a)
        assert 0 <= hamming_distance(a, b) <= 64


def test_compare_and_is_similar():
    assert compare is hamming_distance
    assert is_similar(0b111, 0b100, max_distance=2)
    assert not is_similar(0b111, 0b000, max_distance=2)
