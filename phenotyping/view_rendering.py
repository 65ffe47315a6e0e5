"""
Shell Phenotyping System - View Rendering Module
Writes display colors for the overlay, sketch and mask view modes.

Every renderer is pixel-independent and forces alpha to 255. Float channel
values are stored the way an 8-bit clamped canvas stores them: clamped to
[0, 255] and rounded half to even.
"""

from enum import Enum

import numpy as np

from .groove_threshold import compute_groove_score

# Edge ink curve shared by sketch and overlay
INK_EDGE_FLOOR = 10.0
INK_EDGE_RANGE = 80.0
INK_GAMMA = 0.6

# Mask view brightness curve
MASK_MIN_BRIGHTNESS = 60
MASK_GAMMA = 1.2

# Overlay
OVERLAY_DIM_FACTOR = 0.3
OVERLAY_INK_CUTOFF = 10.0
WHITE_BOOST_START = 0.75


class ViewMode(str, Enum):
    ORIGINAL = 'original'
    OVERLAY = 'overlay'
    SKETCH = 'sketch'
    MASK = 'mask'

    @classmethod
    def parse(cls, mode) -> 'ViewMode':
        """Accept a ViewMode or its string value (case-insensitive)."""
        if isinstance(mode, cls):
            return mode
        try:
            return cls(str(mode).lower())
        except ValueError:
            valid = ', '.join(m.value for m in cls)
            raise ValueError(f"Unknown view mode: {mode!r} (expected one of {valid})")


def _store_channels(values: np.ndarray) -> np.ndarray:
    return np.rint(np.clip(values, 0, 255)).astype(np.uint8)


def compute_edge_ink(gradient: np.ndarray) -> np.ndarray:
    """
    Ink intensity (0-255, float64) for each gradient magnitude.

    Magnitudes below 10 give no ink; above that the normalized edge strength
    is raised to 0.6 so faint edges stay visible.
    """
    edge = np.asarray(gradient, dtype=np.float64)
    norm = np.clip((edge - INK_EDGE_FLOOR) / INK_EDGE_RANGE, 0.0, 1.0)
    ink = np.power(norm, INK_GAMMA) * 255.0
    return np.where(edge < INK_EDGE_FLOOR, 0.0, np.minimum(ink, 255.0))


def render_mask_view(output: np.ndarray, score: np.ndarray, threshold: float,
                     max_score_bucket: int) -> None:
    """Black below the threshold, gamma-curved gray above it."""
    score_range = max(max_score_bucket - threshold, 1)
    normalized = np.clip((score - threshold) / score_range, 0.0, 1.0)
    curved = np.power(normalized, MASK_GAMMA)
    brightness = np.floor(MASK_MIN_BRIGHTNESS + curved * (255 - MASK_MIN_BRIGHTNESS))
    brightness = np.where(score > threshold, brightness, 0.0)

    gray = _store_channels(brightness)
    output[..., 0] = gray
    output[..., 1] = gray
    output[..., 2] = gray
    output[..., 3] = 255


def render_sketch_view(output: np.ndarray, gradient: np.ndarray) -> None:
    """Dark ink on white paper along strong edges."""
    paper = _store_channels(255.0 - compute_edge_ink(gradient))
    output[..., 0] = paper
    output[..., 1] = paper
    output[..., 2] = paper
    output[..., 3] = 255


def render_overlay_view(output: np.ndarray, pixels: np.ndarray, gradient: np.ndarray) -> None:
    """Dimmed original with cyan-to-white edge highlights."""
    dimmed = _store_channels(pixels[..., :3].astype(np.float64) * OVERLAY_DIM_FACTOR)
    channels = dimmed.astype(np.float64)

    ink = compute_edge_ink(gradient)
    alpha = np.where(ink > OVERLAY_INK_CUTOFF, ink / 255.0, 0.0)
    white_boost = np.where(alpha > WHITE_BOOST_START,
                           (alpha - WHITE_BOOST_START) * 4 * 255, 0.0)
    tint = 255.0 * alpha

    channels[..., 0] = np.minimum(255.0, channels[..., 0] + white_boost)
    channels[..., 1] = np.minimum(255.0, channels[..., 1] + tint + white_boost)
    channels[..., 2] = np.minimum(255.0, channels[..., 2] + tint + white_boost)

    output[..., :3] = _store_channels(channels)
    output[..., 3] = 255


def render_view(output: np.ndarray, mode, pixels: np.ndarray, luma: np.ndarray,
                gradient: np.ndarray, threshold: float, max_score_bucket: int) -> np.ndarray:
    """
    Render the selected view mode into output in place.

    ORIGINAL leaves output untouched.

    Returns:
        The output buffer
    """
    mode = ViewMode.parse(mode)

    if mode is ViewMode.MASK:
        score = compute_groove_score(luma, gradient)
        render_mask_view(output, score, threshold, max_score_bucket)
    elif mode is ViewMode.SKETCH:
        render_sketch_view(output, gradient)
    elif mode is ViewMode.OVERLAY:
        render_overlay_view(output, pixels, gradient)

    return output
