from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from gridcal.core.grid_config import (DEFAULT_GRID_CONFIG, FIND_GRID_SCALE,
                                      create_grid_config, from_fixed_point,
                                      load_grid_config, to_fixed_point)


def test_defaults() -> None:
    cfg = DEFAULT_GRID_CONFIG
    assert cfg.spacing_cos_min == pytest.approx(0.996)
    assert cfg.spacing_ratio_min == pytest.approx(0.7)
    assert cfg.spacing_ratio_max == pytest.approx(1.4)
    assert cfg.binfit_angle_deg == pytest.approx(40.0)
    assert cfg.spacing_length_max_scaled == pytest.approx(80.0 * FIND_GRID_SCALE)
    assert cfg.binfit_length_scaled == pytest.approx(120.0 * FIND_GRID_SCALE)
    assert cfg.strict_validation is False


def test_create_grid_config_overrides() -> None:
    cfg = create_grid_config(binfit_angle_deg=30.0, strict_validation=True)
    assert cfg.binfit_angle_deg == 30.0
    assert cfg.strict_validation is True
    assert cfg.spacing_cos_min == DEFAULT_GRID_CONFIG.spacing_cos_min
    assert cfg.to_dict()["binfit_angle_deg"] == 30.0


def test_create_grid_config_rejects_unknown() -> None:
    with pytest.raises(AttributeError):
        create_grid_config(spacing_cosine=0.9)


def test_load_grid_config(tmp_path: Path) -> None:
    path = tmp_path / "grid.yaml"
    path.write_text("spacing_ratio_max: 1.6\nstrict_validation: true\n")
    cfg = load_grid_config(path)
    assert cfg.spacing_ratio_max == pytest.approx(1.6)
    assert cfg.strict_validation is True

    empty = tmp_path / "empty.yaml"
    empty.write_text("")
    assert load_grid_config(empty) == DEFAULT_GRID_CONFIG

    bad = tmp_path / "list.yaml"
    bad.write_text("- 1\n- 2\n")
    with pytest.raises(ValueError):
        load_grid_config(bad)


def test_fixed_point_rounding() -> None:
    pts = to_fixed_point([[0.04, -0.06], [1.25, 2.0]])
    assert pts.dtype == np.int64
    assert pts.tolist() == [[0, -1], [13, 20]]
    assert np.allclose(from_fixed_point(pts), [[0.0, -0.1], [1.3, 2.0]])


def test_fixed_point_empty() -> None:
    assert to_fixed_point([]).shape == (0, 2)
