#!/usr/bin/env python3
"""
Tests for Sobel gradient magnitude.
"""

import numpy as np
import pytest

from phenotyping.edge_detection import compute_gradient_magnitude


def test_uniform_buffer_has_no_gradient():
    smoothed = np.full((10, 10), 123.0, dtype=np.float32)
    gradient = compute_gradient_magnitude(smoothed)
    assert gradient.dtype == np.float32
    assert np.all(gradient == 0)


def test_vertical_step_edge_magnitude():
    smoothed = np.zeros((5, 6), dtype=np.float32)
    smoothed[:, 3:] = 100.0

    gradient = compute_gradient_magnitude(smoothed)

    # Columns 2 and 3 straddle the step: Gx = (1 + 2 + 1) * 100, Gy = 0
    assert gradient[2, 2] == pytest.approx(400.0)
    assert gradient[2, 3] == pytest.approx(400.0)
    assert gradient[2, 1] == 0
    assert gradient[2, 4] == 0


def test_diagonal_neighbourhood_combines_both_kernels():
    smoothed = np.zeros((3, 3), dtype=np.float32)
    smoothed[2, 2] = 10.0

    gradient = compute_gradient_magnitude(smoothed)

    # Bottom-right corner weighs +1 in both kernels
    assert gradient[1, 1] == pytest.approx(np.sqrt(200.0))


def test_border_ring_stays_zero():
    rng = np.random.default_rng(5)
    smoothed = rng.uniform(0, 255, size=(8, 9)).astype(np.float32)

    gradient = compute_gradient_magnitude(smoothed)

    assert np.all(gradient[0, :] == 0)
    assert np.all(gradient[-1, :] == 0)
    assert np.all(gradient[:, 0] == 0)
    assert np.all(gradient[:, -1] == 0)
    assert np.any(gradient[1:-1, 1:-1] > 0)


def test_magnitude_is_not_clamped():
    smoothed = np.zeros((3, 4), dtype=np.float32)
    smoothed[:, 2:] = 255.0
    gradient = compute_gradient_magnitude(smoothed)
    assert gradient.max() > 255.0


@pytest.mark.parametrize("shape", [(1, 1), (2, 5), (6, 2)])
def test_images_without_interior_are_all_zero(shape):
    gradient = compute_gradient_magnitude(np.ones(shape, dtype=np.float32) * 50)
    assert gradient.shape == shape
    assert np.all(gradient == 0)
