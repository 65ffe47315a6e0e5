"""
Shell Phenotyping System - Image Preprocessing Module
Handles image loading into RGBA pixel buffers, luma conversion and low-pass smoothing.
"""

import cv2
import numpy as np
from scipy import ndimage
from typing import Optional

# Fixed luma weighting (ITU-R BT.601)
LUMA_WEIGHTS = (0.299, 0.587, 0.114)

# 3x3 low-pass kernel: center 4, orthogonal 2, diagonal 1 (sum 16)
SMOOTHING_KERNEL = np.array([[1, 2, 1],
                             [2, 4, 2],
                             [1, 2, 1]], dtype=np.float64) / 16.0

DEFAULT_MAX_WIDTH = 800


class ImageLoadError(ValueError):
    """Raised when an image cannot be decoded into a pixel buffer."""


def load_image(image_path: str, max_width: Optional[int] = DEFAULT_MAX_WIDTH) -> np.ndarray:
    """
    Load a specimen image as an RGBA pixel buffer.

    Args:
        image_path: Path to the image file
        max_width: Images wider than this are downscaled proportionally
                   (None keeps the native size)

    Returns:
        uint8 array of shape (height, width, 4) in RGBA order

    Raises:
        ImageLoadError: If the file cannot be decoded by OpenCV or Pillow
    """
    img = cv2.imread(str(image_path), cv2.IMREAD_UNCHANGED)

    if img is not None:
        rgba = _to_rgba(img)
    else:
        # Fallback to Pillow for formats OpenCV refuses
        try:
            from PIL import Image
            with Image.open(image_path) as pil_img:
                rgba = np.array(pil_img.convert('RGBA'))
        except Exception as pil_e:
            raise ImageLoadError(
                f"Could not load image from {image_path}. "
                f"OpenCV error: Failed to load. PIL error: {pil_e}"
            ) from pil_e

    if max_width is not None and rgba.shape[1] > max_width:
        rgba = _downscale_to_width(rgba, max_width)

    return np.ascontiguousarray(rgba, dtype=np.uint8)


def _to_rgba(img: np.ndarray) -> np.ndarray:
    """Convert an OpenCV-decoded image (gray, BGR or BGRA) to 8-bit RGBA."""
    if img.dtype != np.uint8:
        if img.dtype == np.uint16:
            img = (img / 257).astype(np.uint8)
        elif img.max() <= 1.0:
            img = (img * 255).astype(np.uint8)
        else:
            img = np.clip(img, 0, 255).astype(np.uint8)

    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2RGBA)
    if img.shape[2] == 4:
        return cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)
    return cv2.cvtColor(img, cv2.COLOR_BGR2RGBA)


def _downscale_to_width(rgba: np.ndarray, max_width: int) -> np.ndarray:
    height, width = rgba.shape[:2]
    scale = max_width / width
    new_width = max(1, int(width * scale))
    new_height = max(1, int(height * scale))
    return cv2.resize(rgba, (new_width, new_height), interpolation=cv2.INTER_AREA)


def as_pixel_buffer(pixels, width: int, height: int) -> np.ndarray:
    """
    Validate and view raw pixel data as a (height, width, 4) uint8 buffer.

    Accepts either a flat row-major RGBA sequence of length width*height*4
    or an array already shaped (height, width, 4). Integer samples outside
    0-255 are clipped; float buffers are rejected rather than guessed at
    (a 0-1 float image would otherwise truncate to black).

    Raises:
        ValueError: On non-positive dimensions, wrong length or shape,
                    or a non-integer sample type
    """
    if width < 1 or height < 1:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")

    buffer = np.asarray(pixels)
    expected = width * height * 4
    if buffer.size != expected:
        raise ValueError(
            f"Pixel buffer has {buffer.size} samples, expected {expected} "
            f"for a {width}x{height} RGBA image"
        )
    if buffer.ndim != 1 and buffer.shape != (height, width, 4):
        raise ValueError(
            f"Pixel buffer shape {buffer.shape} does not match "
            f"({height}, {width}, 4) for a {width}x{height} RGBA image"
        )
    if buffer.dtype != np.uint8:
        if not np.issubdtype(buffer.dtype, np.integer):
            raise ValueError(
                f"Pixel samples must be 8-bit integers, got dtype {buffer.dtype}"
            )
        buffer = np.clip(buffer, 0, 255).astype(np.uint8)

    return buffer.reshape(height, width, 4)


def convert_to_luma(pixels: np.ndarray) -> np.ndarray:
    """
    Convert an RGBA pixel buffer to a float32 luma buffer.

    Args:
        pixels: uint8 array of shape (height, width, 4)

    Returns:
        float32 array of shape (height, width)
    """
    rgb = pixels[..., :3].astype(np.float64)
    r_w, g_w, b_w = LUMA_WEIGHTS
    luma = r_w * rgb[..., 0] + g_w * rgb[..., 1] + b_w * rgb[..., 2]
    return luma.astype(np.float32)


def smooth_luma(luma: np.ndarray, passes: int = 1) -> np.ndarray:
    """
    Apply the 3x3 weighted low-pass filter to a luma buffer.

    Border pixels (first/last row and column) are copied unchanged on every
    pass. Two slabs are owned here and alternate roles by pass parity, so a
    pass never writes the slab it is reading and the caller's luma buffer is
    left untouched.

    Args:
        luma: float32 luma buffer
        passes: Number of filter passes (>= 1)

    Returns:
        float32 smoothed buffer, same shape as luma
    """
    if passes < 1:
        raise ValueError(f"Smoothing passes must be >= 1, got {passes}")

    slabs = [luma.astype(np.float32, copy=True), np.empty_like(luma, dtype=np.float32)]
    height, width = luma.shape
    has_interior = height > 2 and width > 2

    for pass_index in range(passes):
        src = slabs[pass_index % 2]
        dst = slabs[(pass_index + 1) % 2]

        dst[...] = src
        if has_interior:
            filtered = ndimage.correlate(src.astype(np.float64), SMOOTHING_KERNEL, mode='nearest')
            dst[1:-1, 1:-1] = filtered[1:-1, 1:-1]

    return slabs[passes % 2]
