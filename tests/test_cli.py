#!/usr/bin/env python3
"""
Tests for the shell-phenotype command line interface.
"""

import json

import cv2
import matplotlib
matplotlib.use("Agg")

from phenotyping.cli import build_parser, main


def _write_specimen(tmp_path, pixels):
    image_path = tmp_path / "walnut.png"
    cv2.imwrite(str(image_path), cv2.cvtColor(pixels, cv2.COLOR_RGBA2BGR))
    return image_path


def test_research_flag_defaults_to_mask():
    args = build_parser().parse_args(['--image', 'x.png', '--research'])
    assert args.research and args.mode is None


def test_cli_writes_results(tmp_path, grooved_specimen, capsys):
    image_path = _write_specimen(tmp_path, grooved_specimen)
    out_dir = tmp_path / "results"

    exit_code = main(['--image', str(image_path), '--research', '--output', str(out_dir),
                      '--save-views', '--quiet'])

    assert exit_code == 0
    assert "Fractal dimension" in capsys.readouterr().out
    json_files = list(out_dir.glob("walnut_phenotypes_*.json"))
    assert len(json_files) == 1
    assert list(out_dir.glob("walnut_mask_*.png"))
    assert list(out_dir.glob("walnut_views_*.png"))

    with open(json_files[0], encoding='utf-8') as f:
        record = json.load(f)
    assert record['computational_phenotypes'] is not None


def test_cli_config_file_and_no_data(tmp_path, grooved_specimen):
    image_path = _write_specimen(tmp_path, grooved_specimen)
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({'smoothing': {'passes': 2}}))
    out_dir = tmp_path / "results"

    exit_code = main(['--image', str(image_path), '--config', str(config_path),
                      '--mode', 'sketch', '--no-data', '--output', str(out_dir), '-q'])

    assert exit_code == 0
    assert not list(out_dir.glob("*.json"))


def test_cli_original_mode_computes_nothing(tmp_path, grooved_specimen, capsys):
    image_path = _write_specimen(tmp_path, grooved_specimen)

    exit_code = main(['--image', str(image_path), '--mode', 'original',
                      '--output', str(tmp_path / "results"), '-q'])

    assert exit_code == 0
    assert "no phenotypes computed" in capsys.readouterr().out


def test_cli_missing_image(tmp_path):
    assert main(['--image', str(tmp_path / "nope.png"), '-q']) == 1


def test_cli_undecodable_image(tmp_path):
    broken = tmp_path / "broken.png"
    broken.write_bytes(b"\x00\x01 not a png")
    assert main(['--image', str(broken), '--output', str(tmp_path), '-q']) == 1
