"""
Shell Phenotyping System - Fractal Dimension Module
Box-counting dimension of the binary groove mask.

For each box size s the mask is tiled with s x s boxes anchored at (0, 0)
(edge boxes truncated) and the boxes holding at least one groove pixel are
counted. The dimension is the least-squares slope of log(count) against
log(1/s).
"""

from typing import Iterable, List, Sequence, Tuple

import numpy as np
from skimage.util import view_as_blocks

BOX_SCALES = (2, 4, 8, 16, 32, 64)
DEGENERATE_DIMENSION = 1.0


def count_occupied_boxes(mask: np.ndarray, scale: int) -> int:
    """Number of scale x scale boxes containing at least one active pixel."""
    height, width = mask.shape
    padded_h = -(-height // scale) * scale
    padded_w = -(-width // scale) * scale

    # Zero padding leaves truncated edge boxes with only their real pixels
    padded = np.zeros((padded_h, padded_w), dtype=bool)
    padded[:height, :width] = mask > 0

    blocks = view_as_blocks(padded, (scale, scale))
    return int(np.count_nonzero(blocks.any(axis=(2, 3))))


def box_count_pairs(mask: np.ndarray,
                    scales: Iterable[int] = BOX_SCALES) -> List[Tuple[int, int]]:
    """(scale, count) pairs for every scale with a non-zero count."""
    pairs = []
    for scale in scales:
        count = count_occupied_boxes(mask, scale)
        if count > 0:
            pairs.append((scale, count))
    return pairs


def fit_box_counting_slope(pairs: Sequence[Tuple[int, int]]) -> float:
    """
    Least-squares slope of log(count) vs log(1/scale).

    Fewer than two pairs, or identical x values (zero denominator), give 1.0.
    """
    if len(pairs) < 2:
        return DEGENERATE_DIMENSION

    scales = np.array([scale for scale, _ in pairs], dtype=np.float64)
    counts = np.array([count for _, count in pairs], dtype=np.float64)

    scales_log = np.log(1.0 / scales)
    counts_log = np.log(counts)

    if np.ptp(scales_log) == 0:
        return DEGENERATE_DIMENSION

    slope = np.polyfit(scales_log, counts_log, 1)[0]
    return float(slope)


def estimate_fractal_dimension(mask: np.ndarray,
                               scales: Iterable[int] = BOX_SCALES) -> float:
    """Box-counting fractal dimension of a binary mask (not clamped to [1, 2])."""
    return fit_box_counting_slope(box_count_pairs(mask, scales))
