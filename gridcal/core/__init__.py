from .grid_config import (
	NWANT,
	FIND_GRID_SCALE,
	GridConfig,
	DEFAULT_GRID_CONFIG,
	create_grid_config,
	load_grid_config,
	to_fixed_point,
	from_fixed_point,
)
from .grid_finder import GridFinder, find_grid, find_grid_from_xy

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
