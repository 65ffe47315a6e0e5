"""
Shell Phenotyping System - Edge Detection Module
Sobel gradient magnitude over the smoothed luma buffer.
"""

import numpy as np
from scipy import ndimage

SOBEL_X = np.array([[-1, 0, 1],
                    [-2, 0, 2],
                    [-1, 0, 1]], dtype=np.float64)

SOBEL_Y = np.array([[-1, -2, -1],
                    [0, 0, 0],
                    [1, 2, 1]], dtype=np.float64)


def compute_gradient_magnitude(smoothed: np.ndarray) -> np.ndarray:
    """
    Compute per-pixel Sobel gradient magnitude.

    The kernels are applied as a correlation over the 3x3 neighbourhood of each
    interior pixel. The 1-pixel border ring has no full neighbourhood and is
    left at 0. Values are not normalized and can exceed 255.

    Args:
        smoothed: float32 smoothed luma buffer

    Returns:
        float32 gradient magnitude buffer, same shape as the input
    """
    height, width = smoothed.shape
    magnitude = np.zeros((height, width), dtype=np.float32)
    if height < 3 or width < 3:
        return magnitude

    source = smoothed.astype(np.float64)
    gx = ndimage.correlate(source, SOBEL_X, mode='nearest')
    gy = ndimage.correlate(source, SOBEL_Y, mode='nearest')

    interior = np.sqrt(gx[1:-1, 1:-1] ** 2 + gy[1:-1, 1:-1] ** 2)
    magnitude[1:-1, 1:-1] = interior
    return magnitude
