#!/usr/bin/env python3
"""
Shell Phenotyping System - Command Line Interface

Examples:
  shell-phenotype --image walnut.jpg
  shell-phenotype --image walnut.jpg --research --save-views
  shell-phenotype --image walnut.jpg --mode sketch --output results/walnut/
"""

import argparse
import json
import sys
from pathlib import Path

from .phenotype_analysis import PhenotypeAnalyzer
from .view_rendering import ViewMode


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Quantitative surface-texture phenotyping of nut shell images',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split('Examples:', 1)[1] if __doc__ else None
    )

    parser.add_argument('--image', '-i', required=True, help='Specimen image file')
    parser.add_argument('--mode', '-m', choices=[m.value for m in ViewMode],
                        help='View mode to render (default: overlay, mask with --research)')
    parser.add_argument('--research', action='store_true',
                        help='Research mode: default to the groove mask view')
    parser.add_argument('--output', '-o', help='Output directory for results')
    parser.add_argument('--config', '-c', help='Configuration JSON file')
    parser.add_argument('--passes', type=int, help='Smoothing passes')
    parser.add_argument('--max-width', type=int,
                        help='Downscale images wider than this (0 keeps native size)')
    parser.add_argument('--save-views', action='store_true',
                        help='Save the rendered view and a four-view panel')
    parser.add_argument('--no-data', action='store_true', help='Disable JSON/CSV export')
    parser.add_argument('--quiet', '-q', action='store_true', help='Minimal output')
    return parser


def main(argv=None) -> int:
    """Main function with command line interface."""
    args = build_parser().parse_args(argv)

    # Load configuration
    config = {}
    if args.config:
        with open(args.config, 'r', encoding='utf-8') as f:
            config = json.load(f)

    # Override config with command line arguments
    if args.passes is not None:
        config.setdefault('smoothing', {})['passes'] = args.passes
    if args.max_width is not None:
        config.setdefault('preprocessing', {})['max_width'] = args.max_width or None
    if args.save_views:
        config.setdefault('output', {})['save_views'] = True
        config['output']['save_visualization'] = True
    if args.no_data:
        config.setdefault('output', {})['save_data'] = False

    mode = args.mode or (ViewMode.MASK.value if args.research else ViewMode.OVERLAY.value)

    image_path = Path(args.image)
    if not image_path.exists():
        print(f"❌ Image not found: {image_path}")
        return 1

    analyzer = PhenotypeAnalyzer(config=config, debug=not args.quiet)
    result = analyzer.analyze_image(str(image_path), mode=mode, output_dir=args.output)

    if not result['success']:
        print(f"❌ Analysis failed: {result.get('error', 'Unknown error')}")
        return 1

    phenotypes = result['phenotypes']
    if phenotypes is None:
        print(f"ℹ️ Original view selected, no phenotypes computed")
    else:
        print(f"\n🎯 Phenotypes for {result['image_name']}:")
        print(f"   Groove density:     {phenotypes.groove_density:.4f}")
        print(f"   Fractal dimension:  {phenotypes.fractal_dimension:.4f}")
        print(f"   Processing time:    {phenotypes.processing_time_ms:.1f} ms")

    for label, path in result.get('export_paths', {}).items():
        print(f"   {label}: {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
