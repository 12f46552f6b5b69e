"""
Unit tests for the image preparation and I/O helpers.

Author: B.G.
"""

import numpy as np
import pytest
from PIL import Image

from pyfastfill.misc import load_rgba, premultiply, rgba_from_mask, save_rgb, to_uint8


@pytest.mark.unit
def test_premultiply():
    rgb = np.full((2, 3, 3), 0.5, dtype=np.float32)
    weight = np.array([[0.0, 1.0, 2.0], [1.0, 1.0, 0.5]], dtype=np.float32)
    out = premultiply(rgb, weight)
    assert out.shape == (2, 3, 4)
    assert out.dtype == np.float32
    np.testing.assert_array_equal(out[..., 3], weight)
    np.testing.assert_array_equal(out[0, 2, :3], [1.0, 1.0, 1.0])
    np.testing.assert_array_equal(out[0, 0, :3], [0.0, 0.0, 0.0])


@pytest.mark.unit
def test_premultiply_scalar_weight_and_rgba_input():
    rgba = np.ones((2, 2, 4), dtype=np.float32)
    rgba[..., 3] = 0.0
    out = premultiply(rgba, 2.0)
    np.testing.assert_array_equal(out, np.full((2, 2, 4), 2.0, dtype=np.float32))


@pytest.mark.unit
def test_premultiply_validation():
    with pytest.raises(ValueError):
        premultiply(np.ones((2, 2)), 1.0)
    with pytest.raises(ValueError):
        premultiply(np.ones((2, 2, 3)), -1.0)
    with pytest.raises(ValueError):
        premultiply(np.ones((2, 2, 3)), np.ones((3, 3)))


@pytest.mark.unit
def test_rgba_from_mask():
    rgb = np.full((2, 2, 3), 0.25, dtype=np.float32)
    mask = np.array([[0, 255], [3, 0]], dtype=np.uint8)
    out = rgba_from_mask(rgb, mask)
    np.testing.assert_array_equal(out[..., 3], [[0.0, 1.0], [1.0, 0.0]])
    np.testing.assert_array_equal(out[0, 1, :3], [0.25, 0.25, 0.25])
    with pytest.raises(ValueError):
        rgba_from_mask(rgb, np.ones((3, 2)))


@pytest.mark.unit
def test_to_uint8_clips():
    out = to_uint8(np.array([-1.0, 0.0, 0.5, 1.0, 2.0]))
    np.testing.assert_array_equal(out, [0, 0, 128, 255, 255])
    assert out.dtype == np.uint8


@pytest.mark.unit
def test_load_rgba_uses_alpha_as_weight(tmp_path):
    data = np.zeros((4, 5, 4), dtype=np.uint8)
    data[..., 0] = 255
    data[1, 2, 3] = 255
    data[0, 0, 3] = 51
    path = tmp_path / "holes.png"
    Image.fromarray(data).save(path)

    rgba = load_rgba(str(path))
    assert rgba.shape == (4, 5, 4)
    assert rgba[1, 2, 3] == pytest.approx(1.0)
    assert rgba[0, 0, 3] == pytest.approx(0.2)
    assert rgba[0, 0, 0] == pytest.approx(0.2)
    assert rgba[3, 3, 3] == 0.0


@pytest.mark.unit
def test_load_rgba_with_mask(tmp_path):
    img = np.full((4, 4, 3), 128, dtype=np.uint8)
    mask = np.zeros((4, 4), dtype=np.uint8)
    mask[:2] = 255
    Image.fromarray(img).save(tmp_path / "img.png")
    Image.fromarray(mask).save(tmp_path / "mask.png")

    rgba = load_rgba(str(tmp_path / "img.png"), str(tmp_path / "mask.png"))
    np.testing.assert_array_equal(rgba[:2, :, 3], 1.0)
    np.testing.assert_array_equal(rgba[2:, :, 3], 0.0)
    assert rgba[0, 0, 1] == pytest.approx(128 / 255.0)


@pytest.mark.unit
def test_save_rgb(tmp_path):
    image = np.zeros((3, 2, 4), dtype=np.float32)
    image[..., 1] = 1.0
    path = tmp_path / "out.png"
    save_rgb(str(path), image)
    with Image.open(path) as img:
        assert img.mode == "RGB"
        assert img.size == (2, 3)
        np.testing.assert_array_equal(np.asarray(img)[..., 1], 255)
