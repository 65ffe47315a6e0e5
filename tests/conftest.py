"""
Shared fixtures for the phenotyping test suite.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root so tests run without installing the package
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def make_rgba(height, width, rgb=(0, 0, 0), alpha=255):
    """Solid-color RGBA buffer."""
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[..., 0] = rgb[0]
    pixels[..., 1] = rgb[1]
    pixels[..., 2] = rgb[2]
    pixels[..., 3] = alpha
    return pixels


@pytest.fixture
def black_4x4():
    return make_rgba(4, 4)


@pytest.fixture
def light_gray_image():
    # Luma 230 gives a groove score of 25, below the threshold floor
    return make_rgba(32, 32, (230, 230, 230))


@pytest.fixture
def grooved_specimen():
    """Bright shell with dark vertical and horizontal grooves on a black margin."""
    pixels = make_rgba(96, 128, (0, 0, 0))
    pixels[8:88, 8:120, :3] = (190, 160, 120)
    for x in range(20, 118, 24):
        pixels[8:88, x:x + 2, :3] = (40, 30, 20)
    for y in range(20, 86, 24):
        pixels[y:y + 2, 8:120, :3] = (50, 40, 30)
    return pixels
