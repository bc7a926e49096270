# -*- coding: utf-8 -*-
"""Grid-finding thresholds and the fixed-point convention used by the core."""

from __future__ import annotations

from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict, Union

import numpy as np
import yaml

# Points per row and per column of the grid being searched for.
NWANT = 10

# Input coordinates are multiplied by this and rounded to integers.
FIND_GRID_SCALE = 10


@dataclass(frozen=True)
class GridConfig:
    """Tolerances for tracing, clustering and orientation.

    Lengths are in nominal (unscaled) pixels and angles in degrees.
    Direction bounds are tight and length bounds are loose: perspective
    changes the spacing of projected points but preserves their direction.
    """

    # Sequence tracing
    spacing_cos_min: float = 0.996          # ~5 degrees
    spacing_length_max: float = 80.0
    spacing_ratio_min: float = 0.7
    spacing_ratio_max: float = 1.4
    spacing_ratio_deviation: float = 0.15
    spacing_ratio_warmup: int = 3

    # Clustering
    binfit_length: float = 120.0
    binfit_angle_deg: float = 40.0

    # Orientation: a bin within this many degrees of 90 is vertical
    vertical_half_width_deg: float = 45.0

    # Row/column cross-check after the count check
    strict_validation: bool = False

    @property
    def spacing_length_max_scaled(self) -> float:
        return self.spacing_length_max * FIND_GRID_SCALE

    @property
    def binfit_length_scaled(self) -> float:
        return self.binfit_length * FIND_GRID_SCALE

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def create_grid_config(**overrides) -> GridConfig:
    """Create a GridConfig with selective overrides for convenient tuning."""
    known = {f.name for f in fields(GridConfig)}
    for key in overrides:
        if key not in known:
            raise AttributeError(f"Unknown grid config field: {key}")
    return GridConfig(**overrides)


def load_grid_config(path: Union[str, Path]) -> GridConfig:
    """Read overrides from a YAML mapping. An empty file gives the defaults."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return GridConfig()
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping of GridConfig fields")
    return create_grid_config(**data)


DEFAULT_GRID_CONFIG = GridConfig()


def to_fixed_point(xy) -> np.ndarray:
    """Scale real coordinates (M,2) to the integer representation of the core."""
    arr = np.asarray(xy, dtype=np.float64).reshape(-1, 2)
    return np.floor(arr * FIND_GRID_SCALE + 0.5).astype(np.int64)


def from_fixed_point(points) -> np.ndarray:
    arr = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    return arr / float(FIND_GRID_SCALE)


__all__ = [
    "NWANT",
    "FIND_GRID_SCALE",
    "GridConfig",
    "DEFAULT_GRID_CONFIG",
    "create_grid_config",
    "load_grid_config",
    "to_fixed_point",
    "from_fixed_point",
]
