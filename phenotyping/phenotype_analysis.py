"""
Shell Phenotyping System - Phenotype Analysis Module
Orchestrates the pixel pipeline for one specimen image:

    luma -> smoothing -> gradient -> {threshold -> mask/density -> fractal, view}

Every call allocates its own buffers; nothing is cached between images.
"""

import copy
import time
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import numpy as np

from .debug_config import DEBUG_CONFIG
from .image_preprocessing import (
    DEFAULT_MAX_WIDTH,
    ImageLoadError,
    as_pixel_buffer,
    convert_to_luma,
    load_image,
    smooth_luma,
)
from .edge_detection import compute_gradient_magnitude
from .groove_threshold import compute_dynamic_threshold
from .groove_mask import build_groove_mask, compute_foreground_mask, compute_groove_density
from .fractal_analysis import BOX_SCALES, box_count_pairs, fit_box_counting_slope
from .view_rendering import ViewMode, render_view


@dataclass
class PhenotypicData:
    """Computational phenotypes extracted from one image."""
    groove_density: float
    fractal_dimension: float
    fragmentation_count: int = 0  # blob counting is not performed
    processing_time_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def run_pipeline(pixels: np.ndarray, passes: int = 1,
                 luma: Optional[np.ndarray] = None) -> Dict[str, Any]:
    """
    Run stages 1-6 on an RGBA buffer and return every intermediate result.

    Args:
        pixels: uint8 RGBA buffer of shape (height, width, 4)
        passes: Smoothing passes
        luma: Precomputed luma buffer for pixels (converted here when None)

    Returns:
        Dictionary of stage buffers and scalar metrics
    """
    if luma is None:
        luma = convert_to_luma(pixels)
    smoothed = smooth_luma(luma, passes=passes)
    gradient = compute_gradient_magnitude(smoothed)

    threshold_result = compute_dynamic_threshold(luma, gradient)
    groove_mask = build_groove_mask(luma, gradient, threshold_result.threshold)
    foreground_mask = compute_foreground_mask(luma)
    groove_density = compute_groove_density(groove_mask, foreground_mask)

    box_counts = box_count_pairs(groove_mask, BOX_SCALES)
    fractal_dimension = fit_box_counting_slope(box_counts)

    return {
        'luma': luma,
        'smoothed': smoothed,
        'gradient': gradient,
        'threshold': threshold_result.threshold,
        'max_score_bucket': threshold_result.max_score_bucket,
        'histogram': threshold_result.histogram,
        'groove_mask': groove_mask,
        'foreground_mask': foreground_mask,
        'groove_density': groove_density,
        'fractal_dimension': fractal_dimension,
        'box_counts': box_counts,
    }


def analyze(pixels, width: int, height: int, mode='overlay',
            passes: int = 1, debug: Optional[bool] = None
            ) -> Tuple[np.ndarray, Optional[PhenotypicData]]:
    """
    Analyze one image and render the requested view.

    Args:
        pixels: RGBA pixel data, flat or shaped (height, width, 4); never modified
        width: Image width in pixels
        height: Image height in pixels
        mode: 'original', 'overlay', 'sketch' or 'mask'
        passes: Smoothing passes
        debug: Print stage diagnostics (uses global config if None)

    Returns:
        Tuple of (output RGBA buffer, PhenotypicData or None for 'original')

    Raises:
        ValueError: On malformed dimensions, buffer size or mode
    """
    if debug is None:
        debug = DEBUG_CONFIG.enabled

    mode = ViewMode.parse(mode)
    source = as_pixel_buffer(pixels, width, height)
    output = source.copy()

    if mode is ViewMode.ORIGINAL:
        return output, None

    luma = convert_to_luma(source)

    # Timed section covers smoothing through rendering
    start_time = time.perf_counter()
    stages = run_pipeline(source, passes=passes, luma=luma)
    render_view(output, mode, source, stages['luma'], stages['gradient'],
                stages['threshold'], stages['max_score_bucket'])
    elapsed_ms = (time.perf_counter() - start_time) * 1000.0

    phenotypes = PhenotypicData(
        groove_density=stages['groove_density'],
        fractal_dimension=stages['fractal_dimension'],
        fragmentation_count=0,
        processing_time_ms=round(elapsed_ms, 3),
    )

    if debug:
        print(f"🔬 Phenotype pipeline ({width}x{height}, mode={mode.value}, passes={passes})")
        print(f"   Dynamic threshold: {stages['threshold']} "
              f"(max score bucket {stages['max_score_bucket']})")
        print(f"   Groove density: {phenotypes.groove_density:.4f}")
        if DEBUG_CONFIG.verbose_output:
            occupied = np.flatnonzero(stages['histogram'])
            print(f"   Score histogram: {occupied.size} occupied buckets, "
                  f"range {occupied.min()}-{occupied.max()}")
            print(f"   Box counts: {stages['box_counts']}")
        print(f"   Fractal dimension: {phenotypes.fractal_dimension:.4f}")
        print(f"   Processing time: {phenotypes.processing_time_ms:.1f} ms")

        DEBUG_CONFIG.save_stage_buffer('stage_luma.png', stages['luma'])
        DEBUG_CONFIG.save_stage_buffer('stage_gradient.png', stages['gradient'])
        DEBUG_CONFIG.save_stage_buffer('stage_groove_mask.png', stages['groove_mask'])

    return output, phenotypes


class PhenotypeAnalyzer:
    """
    Main application class: loads a specimen image, runs the pixel pipeline
    and exports metrics and rendered views.
    """

    def __init__(self, config: Optional[Dict] = None, debug: bool = False):
        """
        Initialize the analyzer.

        Args:
            config: Nested configuration overriding the defaults
            debug: Enable console diagnostics
        """
        self.debug = debug
        self.config = self._get_default_config()

        if config:
            self._update_config(config)

        if self.debug:
            print(f"🌰 Phenotype Analyzer initialized")
            print(f"   Max width: {self.config['preprocessing']['max_width']}")
            print(f"   Smoothing passes: {self.config['smoothing']['passes']}")

    def _get_default_config(self) -> Dict:
        """Get default configuration for all stages."""
        return {
            'preprocessing': {
                'max_width': DEFAULT_MAX_WIDTH,
            },
            'smoothing': {
                'passes': 1,
            },
            'output': {
                'save_data': True,
                'save_views': False,
                'save_visualization': False,
                'dpi': 150,
            },
        }

    def _update_config(self, new_config: Dict):
        """Deep-merge new_config into the current configuration."""
        def merge(base: Dict, updates: Dict):
            for key, value in updates.items():
                if isinstance(value, dict) and isinstance(base.get(key), dict):
                    merge(base[key], value)
                else:
                    base[key] = copy.deepcopy(value)
        merge(self.config, new_config)

    def analyze(self, pixels, width: int, height: int, mode='overlay'
                ) -> Tuple[np.ndarray, Optional[PhenotypicData]]:
        """Run the pipeline on an in-memory pixel buffer with configured passes."""
        return analyze(pixels, width, height, mode,
                       passes=self.config['smoothing']['passes'],
                       debug=self.debug)

    def analyze_image(self, image_path: str, mode='overlay',
                      output_dir: Optional[str] = None) -> Dict[str, Any]:
        """
        Load an image file, analyze it and export the configured outputs.

        Args:
            image_path: Path to the specimen image
            mode: View mode to render
            output_dir: Directory for exported files (results/ when None)

        Returns:
            Dictionary with 'success', 'phenotypes', 'output_image' and
            'export_paths', or 'success': False with 'error' on load failure
        """
        from .results_export import export_analysis_outputs

        mode = ViewMode.parse(mode)
        result = {
            'image_path': str(image_path),
            'image_name': Path(image_path).name,
            'mode': mode.value,
            'success': False,
        }

        try:
            pixels = load_image(image_path, max_width=self.config['preprocessing']['max_width'])
        except ImageLoadError as e:
            if self.debug:
                print(f"❌ Failed to load image for processing: {e}")
            result['error'] = str(e)
            return result

        height, width = pixels.shape[:2]
        if self.debug:
            print(f"✓ Image loaded: {width}x{height}")

        output, phenotypes = self.analyze(pixels, width, height, mode)

        result.update({
            'success': True,
            'width': width,
            'height': height,
            'phenotypes': phenotypes,
            'output_image': output,
        })
        result['export_paths'] = export_analysis_outputs(
            result, pixels, self.config, output_dir=output_dir, debug=self.debug
        )
        return result
