"""Ordered calibration-grid extraction from unordered point detections."""

from .core import (
    NWANT,
    FIND_GRID_SCALE,
    GridConfig,
    DEFAULT_GRID_CONFIG,
    create_grid_config,
    load_grid_config,
    to_fixed_point,
    from_fixed_point,
    GridFinder,
    find_grid,
    find_grid_from_xy,
)

__version__ = "0.1.0"

__all__ = [
    "NWANT",
    "FIND_GRID_SCALE",
    "GridConfig",
    "DEFAULT_GRID_CONFIG",
    "create_grid_config",
    "load_grid_config",
    "to_fixed_point",
    "from_fixed_point",
    "GridFinder",
    "find_grid",
    "find_grid_from_xy",
]
