#!/usr/bin/env python3
"""
Tests for image loading, luma conversion and smoothing.
"""

import cv2
import numpy as np
import pytest

from conftest import make_rgba
from phenotyping.image_preprocessing import (
    ImageLoadError,
    as_pixel_buffer,
    convert_to_luma,
    load_image,
    smooth_luma,
)


def test_luma_uses_fixed_weights():
    pixels = make_rgba(1, 3)
    pixels[0, 0, :3] = (255, 0, 0)
    pixels[0, 1, :3] = (0, 255, 0)
    pixels[0, 2, :3] = (0, 0, 255)

    luma = convert_to_luma(pixels)

    assert luma.dtype == np.float32
    assert luma.shape == (1, 3)
    np.testing.assert_allclose(luma[0], [0.299 * 255, 0.587 * 255, 0.114 * 255], rtol=1e-6)


def test_luma_ignores_alpha():
    opaque = make_rgba(2, 2, (10, 20, 30), alpha=255)
    transparent = make_rgba(2, 2, (10, 20, 30), alpha=0)
    np.testing.assert_array_equal(convert_to_luma(opaque), convert_to_luma(transparent))


def test_smoothing_interior_weighted_average():
    luma = np.zeros((3, 3), dtype=np.float32)
    luma[1, 1] = 16.0
    luma[0, 1] = 8.0  # border pixel, contributes with weight 2

    smoothed = smooth_luma(luma)

    # (16 * 4 + 8 * 2) / 16
    assert smoothed[1, 1] == pytest.approx(5.0)
    assert smoothed[0, 1] == 8.0


def test_smoothing_border_passes_through():
    rng = np.random.default_rng(7)
    luma = rng.uniform(0, 255, size=(10, 12)).astype(np.float32)

    smoothed = smooth_luma(luma, passes=3)

    np.testing.assert_array_equal(smoothed[0, :], luma[0, :])
    np.testing.assert_array_equal(smoothed[-1, :], luma[-1, :])
    np.testing.assert_array_equal(smoothed[:, 0], luma[:, 0])
    np.testing.assert_array_equal(smoothed[:, -1], luma[:, -1])


@pytest.mark.parametrize("shape", [(1, 1), (1, 5), (2, 2), (5, 2)])
def test_smoothing_degenerate_sizes_are_identity(shape):
    luma = np.arange(np.prod(shape), dtype=np.float32).reshape(shape) * 7.5
    smoothed = smooth_luma(luma, passes=2)
    np.testing.assert_array_equal(smoothed, luma)


def test_smoothing_never_writes_input():
    rng = np.random.default_rng(3)
    luma = rng.uniform(0, 255, size=(8, 8)).astype(np.float32)
    original = luma.copy()

    for passes in (1, 2, 3):
        smoothed = smooth_luma(luma, passes=passes)
        assert smoothed is not luma
        np.testing.assert_array_equal(luma, original)


def test_multiple_passes_match_repeated_single_passes():
    rng = np.random.default_rng(11)
    luma = rng.uniform(0, 255, size=(9, 7)).astype(np.float32)

    twice = smooth_luma(smooth_luma(luma))
    np.testing.assert_allclose(smooth_luma(luma, passes=2), twice, rtol=1e-6)


def test_smoothing_rejects_zero_passes():
    with pytest.raises(ValueError):
        smooth_luma(np.zeros((3, 3), dtype=np.float32), passes=0)


def test_pixel_buffer_accepts_flat_sequence():
    flat = list(range(2 * 3 * 4))
    buffer = as_pixel_buffer(flat, width=3, height=2)
    assert buffer.shape == (2, 3, 4)
    assert buffer.dtype == np.uint8
    assert buffer[1, 2, 3] == 23


def test_pixel_buffer_rejects_wrong_length():
    with pytest.raises(ValueError):
        as_pixel_buffer(np.zeros(10, dtype=np.uint8), width=2, height=2)


def test_pixel_buffer_rejects_empty_dimensions():
    with pytest.raises(ValueError):
        as_pixel_buffer(np.zeros(0, dtype=np.uint8), width=0, height=3)


def test_pixel_buffer_rejects_transposed_shape():
    shaped = np.zeros((2, 6, 4), dtype=np.uint8)

    assert as_pixel_buffer(shaped, width=6, height=2).shape == (2, 6, 4)
    with pytest.raises(ValueError):
        as_pixel_buffer(shaped, width=2, height=6)


def test_pixel_buffer_rejects_float_samples():
    with pytest.raises(ValueError):
        as_pixel_buffer(np.full((2, 2, 4), 0.5), width=2, height=2)


def test_pixel_buffer_clips_wide_integers():
    buffer = as_pixel_buffer(np.array([-5, 0, 300, 255], dtype=np.int64), width=1, height=1)
    assert buffer.dtype == np.uint8
    assert buffer.tolist() == [[[0, 0, 255, 255]]]


def test_load_image_returns_rgba(tmp_path):
    bgr = np.zeros((6, 5, 3), dtype=np.uint8)
    bgr[..., 0] = 200  # blue in OpenCV order
    bgr[..., 2] = 10   # red
    path = tmp_path / "specimen.png"
    cv2.imwrite(str(path), bgr)

    rgba = load_image(str(path))

    assert rgba.shape == (6, 5, 4)
    assert tuple(rgba[0, 0]) == (10, 0, 200, 255)


def test_load_image_downscales_wide_images(tmp_path):
    path = tmp_path / "wide.png"
    cv2.imwrite(str(path), np.full((20, 1000, 3), 128, dtype=np.uint8))

    assert load_image(str(path)).shape[:2] == (16, 800)
    assert load_image(str(path), max_width=None).shape[:2] == (20, 1000)


def test_load_image_missing_file_raises(tmp_path):
    with pytest.raises(ImageLoadError):
        load_image(str(tmp_path / "missing.jpg"))


def test_load_image_undecodable_file_raises(tmp_path):
    path = tmp_path / "not_an_image.png"
    path.write_text("plain text, not pixels")
    with pytest.raises(ImageLoadError):
        load_image(str(path))
