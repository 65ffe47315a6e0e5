"""
Shell Phenotyping System - Results Export Module
Writes phenotype records (JSON/CSV), rendered view images and a four-view panel.

All outputs go to timestamped files under results/ unless another directory
is given. Nothing written here is read back by the pipeline.
"""

import json
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

import cv2
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from .phenotype_analysis import PhenotypicData, run_pipeline
from .view_rendering import ViewMode, render_view

# Base results directory - change this to relocate all outputs
RESULTS_BASE_DIR = Path("results")


def ensure_directory_exists(path: Union[str, Path]) -> Path:
    """Ensure a directory exists, create if necessary."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_timestamped_filename(base_name: str, extension: str,
                             subdir: Optional[Path] = None) -> Path:
    """
    Generate a timestamped filename in the results directory.

    Args:
        base_name: Base name for the file (without extension)
        extension: File extension (without dot)
        subdir: Directory to place the file in (results/ when None)
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    filename = f"{base_name}_{timestamp}.{extension}"
    return (subdir or RESULTS_BASE_DIR) / filename


def prepare_for_json(obj):
    """Prepare object for JSON serialization by converting numpy values."""
    if isinstance(obj, dict):
        return {key: prepare_for_json(value) for key, value in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [prepare_for_json(item) for item in obj]
    elif isinstance(obj, PhenotypicData):
        return prepare_for_json(obj.to_dict())
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return float(obj)
    elif isinstance(obj, np.bool_):
        return bool(obj)
    else:
        return obj


def build_phenotype_record(phenotypes: Optional[PhenotypicData],
                           semantic: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Build the exportable phenotype record.

    Args:
        phenotypes: Computed metrics, or None when only a view was rendered
        semantic: Externally produced visual phenotypes (morphology, texture
                  class, 1-10 indices), passed through unchanged

    Returns:
        Dictionary with timestamp, sample id, computational and visual phenotypes
    """
    epoch_ms = int(time.time() * 1000)
    computational = None
    if phenotypes is not None:
        computational = {
            'fractal_dimension': round(float(phenotypes.fractal_dimension), 4),
            'groove_density': round(float(phenotypes.groove_density), 4),
        }

    return {
        'timestamp': datetime.now().isoformat(),
        'sampleId': f"sample_{str(epoch_ms)[-6:]}",
        'computational_phenotypes': computational,
        'visual_phenotypes': semantic,
    }


def export_phenotypes_json(phenotypes: Optional[PhenotypicData], json_path: Union[str, Path],
                           semantic: Optional[Dict[str, Any]] = None) -> Path:
    """Write the phenotype record as indented JSON."""
    json_path = Path(json_path)
    ensure_directory_exists(json_path.parent)
    record = build_phenotype_record(phenotypes, semantic)
    with open(json_path, 'w', encoding='utf-8') as f:
        json.dump(prepare_for_json(record), f, indent=2, ensure_ascii=False)
    return json_path


def export_summary_csv(result: Dict[str, Any], csv_path: Union[str, Path]) -> Path:
    """Write a one-row metrics summary for the analyzed image."""
    csv_path = Path(csv_path)
    ensure_directory_exists(csv_path.parent)

    phenotypes = result.get('phenotypes')
    row = {
        'Image Name': result.get('image_name', ''),
        'Width': result.get('width', 0),
        'Height': result.get('height', 0),
        'View Mode': result.get('mode', ''),
    }
    if phenotypes is not None:
        row.update({
            'Groove Density': phenotypes.groove_density,
            'Fractal Dimension': phenotypes.fractal_dimension,
            'Fragmentation Count': phenotypes.fragmentation_count,
            'Processing Time (ms)': phenotypes.processing_time_ms,
        })

    pd.DataFrame([row]).to_csv(csv_path, index=False)
    return csv_path


def save_view_image(rgba: np.ndarray, image_path: Union[str, Path]) -> Path:
    """Save an RGBA buffer to disk (OpenCV expects BGRA)."""
    image_path = Path(image_path)
    ensure_directory_exists(image_path.parent)
    if not cv2.imwrite(str(image_path), cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGRA)):
        raise IOError(f"Could not write image to {image_path}")
    return image_path


def create_view_panel(pixels: np.ndarray, panel_path: Union[str, Path],
                      passes: int = 1, dpi: int = 150) -> Path:
    """
    Render all four view modes side by side with the computed metrics.

    The pipeline runs once; each view is rendered from the same stages.

    Args:
        pixels: Source RGBA buffer of shape (height, width, 4)
        panel_path: Output PNG path
        passes: Smoothing passes
        dpi: Figure resolution
    """
    panel_path = Path(panel_path)
    ensure_directory_exists(panel_path.parent)
    height, width = pixels.shape[:2]

    stages = run_pipeline(pixels, passes=passes)

    fig, axes = plt.subplots(2, 2, figsize=(12, 12 * height / max(width, 1) + 1))

    for ax, mode in zip(axes.flatten(), ViewMode):
        view = pixels.copy()
        render_view(view, mode, pixels, stages['luma'], stages['gradient'],
                    stages['threshold'], stages['max_score_bucket'])
        ax.imshow(view)
        ax.set_title(mode.value.title(), fontsize=12, fontweight='bold')
        ax.axis('off')

    fig.suptitle(
        f"Groove density: {stages['groove_density']:.4f}   "
        f"Fractal dimension: {stages['fractal_dimension']:.4f}",
        fontsize=12, fontfamily='monospace'
    )

    plt.tight_layout()
    fig.savefig(panel_path, dpi=dpi)
    plt.close(fig)
    return panel_path


def export_analysis_outputs(result: Dict[str, Any], pixels: np.ndarray, config: Dict,
                            output_dir: Optional[Union[str, Path]] = None,
                            debug: bool = False) -> Dict[str, str]:
    """Export analysis results to files according to config['output']."""
    output_config = config.get('output', {})
    output_dir = ensure_directory_exists(output_dir or RESULTS_BASE_DIR)
    base_name = Path(result['image_path']).stem
    export_paths = {}

    if output_config.get('save_data', True) and result.get('phenotypes') is not None:
        json_path = export_phenotypes_json(
            result['phenotypes'],
            get_timestamped_filename(f"{base_name}_phenotypes", "json", output_dir)
        )
        export_paths['json_results'] = str(json_path)

        csv_path = export_summary_csv(
            result, get_timestamped_filename(f"{base_name}_summary", "csv", output_dir)
        )
        export_paths['csv_summary'] = str(csv_path)

        if debug:
            print(f"   💾 Results saved: {json_path.name}, {csv_path.name}")

    if output_config.get('save_views', False):
        view_path = save_view_image(
            result['output_image'],
            get_timestamped_filename(f"{base_name}_{result['mode']}", "png", output_dir)
        )
        export_paths['view_image'] = str(view_path)

        if debug:
            print(f"   🎨 View image: {view_path.name}")

    if output_config.get('save_visualization', False):
        panel_path = create_view_panel(
            pixels,
            get_timestamped_filename(f"{base_name}_views", "png", output_dir),
            passes=config.get('smoothing', {}).get('passes', 1),
            dpi=output_config.get('dpi', 150)
        )
        export_paths['visualization'] = str(panel_path)

        if debug:
            print(f"   🖼️ View panel: {panel_path.name}")

    return export_paths
