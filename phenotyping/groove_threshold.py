"""
Shell Phenotyping System - Adaptive Groove Threshold Module
Picks one groove-score threshold per image from a fixed-width score histogram.

The groove score combines darkness and edge strength:

    score = (255 - luma) + 3.0 * gradient

The threshold isolates roughly the top quartile of groove-like pixels, walking
the histogram downward from the highest touched bucket.
"""

from typing import NamedTuple, Tuple

import numpy as np

EDGE_WEIGHT = 3.0
HISTOGRAM_BUCKETS = 1000
TOP_FRACTION = 0.25
DEFAULT_THRESHOLD = 50
MIN_THRESHOLD = 40


class ThresholdResult(NamedTuple):
    threshold: int
    max_score_bucket: int
    histogram: np.ndarray


def compute_groove_score(luma: np.ndarray, gradient: np.ndarray) -> np.ndarray:
    """Composite darkness + edge strength score per pixel (float64)."""
    darkness = 255.0 - luma.astype(np.float64)
    return darkness + gradient.astype(np.float64) * EDGE_WEIGHT


def score_buckets(score: np.ndarray) -> np.ndarray:
    """Histogram bucket index per pixel: floor(score) clamped to [0, 999]."""
    return np.clip(np.floor(score), 0, HISTOGRAM_BUCKETS - 1).astype(np.int64)


def build_score_histogram(score: np.ndarray) -> Tuple[np.ndarray, int]:
    """
    Count pixels per score bucket.

    Returns:
        Tuple of (histogram of length 1000, largest bucket index touched)
    """
    buckets = score_buckets(score).ravel()
    histogram = np.bincount(buckets, minlength=HISTOGRAM_BUCKETS)
    max_score_bucket = int(buckets.max()) if buckets.size else 0
    return histogram, max_score_bucket


def select_dynamic_threshold(histogram: np.ndarray, max_score_bucket: int,
                             total_pixels: int) -> int:
    """
    Walk buckets from max_score_bucket down to 0 and return the first bucket
    at which the running count exceeds the top-quartile target, floored at 40.
    """
    target_count = total_pixels * TOP_FRACTION
    threshold = DEFAULT_THRESHOLD

    running = np.cumsum(histogram[max_score_bucket::-1])
    exceeded = np.nonzero(running > target_count)[0]
    if exceeded.size:
        threshold = max_score_bucket - int(exceeded[0])

    return max(MIN_THRESHOLD, threshold)


def compute_dynamic_threshold(luma: np.ndarray, gradient: np.ndarray) -> ThresholdResult:
    """
    Derive the dynamic groove threshold for one image.

    A fresh histogram is built on every call.
    """
    score = compute_groove_score(luma, gradient)
    histogram, max_score_bucket = build_score_histogram(score)
    threshold = select_dynamic_threshold(histogram, max_score_bucket, score.size)
    return ThresholdResult(threshold, max_score_bucket, histogram)
