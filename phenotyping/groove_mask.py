"""
Shell Phenotyping System - Groove Mask Module
Binary groove mask, coarse foreground estimate and groove density.
"""

import numpy as np

from .groove_threshold import compute_groove_score

# Pixels at or below this luma are treated as dark background
FOREGROUND_LUMA = 15


def build_groove_mask(luma: np.ndarray, gradient: np.ndarray, threshold: float) -> np.ndarray:
    """Return a uint8 0/1 mask, 1 where the groove score exceeds the threshold."""
    score = compute_groove_score(luma, gradient)
    return (score > threshold).astype(np.uint8)


def compute_foreground_mask(luma: np.ndarray) -> np.ndarray:
    """Object pixels: anything brighter than the dark-background cutoff."""
    return luma > FOREGROUND_LUMA


def compute_groove_density(groove_mask: np.ndarray, foreground_mask: np.ndarray) -> float:
    """
    Ratio of groove pixels to foreground pixels.

    Returns 0.0 when there is no foreground. The two masks come from
    independent criteria, so the ratio is not clamped and can exceed 1.0
    when many dark pixels also score as grooves.
    """
    foreground_count = int(np.count_nonzero(foreground_mask))
    if foreground_count == 0:
        return 0.0
    groove_count = int(np.count_nonzero(groove_mask))
    return groove_count / foreground_count
