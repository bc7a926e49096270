# -*- coding: utf-8 -*-
"""Order a file of pre-detected points into the calibration grid.

The points can come from any corner or blob detector. On success the grid is
written to stdout, row-major, one ``x y`` per line; otherwise nothing is
written and the exit status is 1.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from ..core.grid_config import DEFAULT_GRID_CONFIG, load_grid_config, to_fixed_point
from ..core.grid_finder import GridFinder
from ..utils.points_io import read_points, write_points


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="gridcal-from-points",
        description="Find the ordered calibration grid in a set of pre-detected points",
    )
    ap.add_argument("points", help="text file with one 'x y' pair per line")
    ap.add_argument("--debug", action="store_true",
                    help="print diagnostics to stderr (does not change the result)")
    ap.add_argument("--config", default=None, help="YAML file with GridConfig overrides")
    ap.add_argument("--log", default="WARNING", help="Logging level (DEBUG/INFO/WARNING)")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.DEBUG if args.debug else getattr(logging, args.log.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", stream=sys.stderr)

    config = load_grid_config(args.config) if args.config else DEFAULT_GRID_CONFIG

    xy = read_points(args.points)
    if xy is None:
        return 1
    logging.info("read %d points from %s", len(xy), args.points)

    debug = {}
    grid = GridFinder(config).find(to_fixed_point(xy), debug=debug)
    if grid is None:
        logging.info("no grid found: %s", debug.get("fail_reason"))
        if args.debug:
            print(f"# no grid: {debug.get('fail_reason')}", file=sys.stderr)
        return 1

    sys.stdout.write("# x y\n")
    write_points(sys.stdout, grid)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
