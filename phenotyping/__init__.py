"""
Shell Phenotyping System - Unified Module Interface
This file exposes all public functions and classes from the phenotyping package.
"""

# ===== CORE IMPORTS =====
# Image loading, luma conversion and smoothing
from .image_preprocessing import (
    ImageLoadError,
    load_image,
    as_pixel_buffer,
    convert_to_luma,
    smooth_luma
)

# Gradient estimation
from .edge_detection import compute_gradient_magnitude

# Adaptive threshold
from .groove_threshold import (
    ThresholdResult,
    compute_groove_score,
    build_score_histogram,
    select_dynamic_threshold,
    compute_dynamic_threshold
)

# Groove mask and density
from .groove_mask import (
    build_groove_mask,
    compute_foreground_mask,
    compute_groove_density
)

# Fractal dimension
from .fractal_analysis import (
    BOX_SCALES,
    count_occupied_boxes,
    box_count_pairs,
    fit_box_counting_slope,
    estimate_fractal_dimension
)

# View rendering
from .view_rendering import (
    ViewMode,
    compute_edge_ink,
    render_view
)

# Pipeline orchestration
from .phenotype_analysis import (
    PhenotypicData,
    PhenotypeAnalyzer,
    analyze,
    run_pipeline
)
from .analysis_session import AnalysisSession, SessionResult

# Debug configuration
from .debug_config import (
    enable_global_debug,
    disable_global_debug,
    is_debug_enabled,
    DEBUG_CONFIG
)

__version__ = "1.0.0"

# ===== EXPORT LIST =====
__all__ = [
    # Preprocessing
    'ImageLoadError', 'load_image', 'as_pixel_buffer', 'convert_to_luma', 'smooth_luma',

    # Gradient
    'compute_gradient_magnitude',

    # Threshold
    'ThresholdResult', 'compute_groove_score', 'build_score_histogram',
    'select_dynamic_threshold', 'compute_dynamic_threshold',

    # Mask and density
    'build_groove_mask', 'compute_foreground_mask', 'compute_groove_density',

    # Fractal dimension
    'BOX_SCALES', 'count_occupied_boxes', 'box_count_pairs',
    'fit_box_counting_slope', 'estimate_fractal_dimension',

    # Rendering
    'ViewMode', 'compute_edge_ink', 'render_view',

    # Pipeline
    'PhenotypicData', 'PhenotypeAnalyzer', 'analyze', 'run_pipeline',
    'AnalysisSession', 'SessionResult',

    # Debug
    'enable_global_debug', 'disable_global_debug', 'is_debug_enabled',
    'DEBUG_CONFIG',
]
