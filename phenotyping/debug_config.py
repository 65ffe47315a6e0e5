"""
Centralized debug configuration for the Shell Phenotyping System.
Controls console diagnostics and optional dumps of intermediate stage buffers.
"""

from pathlib import Path
from typing import Optional

import cv2
import numpy as np


class DebugConfig:
    """Debug switches shared by every pipeline stage."""

    def __init__(self):
        self.enabled = False
        self.save_stages = False
        self.verbose_output = False
        self.output_dir = None

    def enable_debug(self, save_stages=True, verbose=True, output_dir=None):
        """Enable debug mode with specified options."""
        self.enabled = True
        self.save_stages = save_stages
        self.verbose_output = verbose
        if output_dir:
            self.output_dir = Path(output_dir)
            self.output_dir.mkdir(parents=True, exist_ok=True)

        print(f"🔧 Phenotyping debug mode enabled:")
        print(f"   Save stage buffers: {save_stages}")
        print(f"   Verbose stage output: {verbose}")
        print(f"   Output directory: {self.output_dir}")

    def disable_debug(self):
        """Disable all debug output."""
        self.enabled = False
        self.save_stages = False
        self.verbose_output = False
        print("🔧 Phenotyping debug mode disabled")

    def get_debug_path(self, filename: str) -> Optional[Path]:
        """Path for a debug dump, or None when dumps are off."""
        if self.output_dir and self.save_stages:
            return self.output_dir / filename
        return None

    def save_stage_buffer(self, filename: str, buffer: np.ndarray) -> Optional[Path]:
        """
        Write a single-channel stage buffer (luma, gradient, mask) as an 8-bit PNG.

        Float buffers are min-max stretched to 0-255 so weak gradients stay visible.
        """
        path = self.get_debug_path(filename)
        if path is None:
            return None

        data = np.asarray(buffer, dtype=np.float64)
        lo, hi = float(data.min()), float(data.max())
        if hi > lo:
            data = (data - lo) / (hi - lo) * 255.0
        else:
            data = np.zeros_like(data)
        cv2.imwrite(str(path), data.astype(np.uint8))
        return path


# Global debug instance
DEBUG_CONFIG = DebugConfig()

def enable_global_debug(save_stages=True, verbose=True, output_dir=None):
    """Enable debug mode across all modules."""
    DEBUG_CONFIG.enable_debug(save_stages, verbose, output_dir)

def disable_global_debug():
    """Disable debug mode across all modules."""
    DEBUG_CONFIG.disable_debug()

def is_debug_enabled():
    """Check if debug mode is enabled."""
    return DEBUG_CONFIG.enabled
