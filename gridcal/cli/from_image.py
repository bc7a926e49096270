# -*- coding: utf-8 -*-
"""Batch grid detection over image globs.

Output is a table with columns ``filename x y``. Every matched file appears:
either as NWANT*NWANT records, or as a single ``filename - -`` record when no
grid was found.
"""

from __future__ import annotations

import argparse
import glob
import logging
import os
import sys
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import List, Optional, TextIO

import numpy as np
from tqdm import tqdm

from ..core.grid_config import GridConfig, DEFAULT_GRID_CONFIG, load_grid_config
from ..utils.detect import (DetectionConfig, DEFAULT_DETECTION_CONFIG,
                            find_grid_in_image, preprocess)
from ..utils.images import read_gray_image
from ..utils.points_io import write_missing, write_points
from ..viz.viz_grid import save_grid_overlay

logger = logging.getLogger(__name__)

IMAGE_PATTERNS_HELP = "one or more image globs, e.g. 'data/*.png'"


@dataclass(frozen=True)
class ImageTask:
    """Everything a worker needs for one image."""
    path: str
    blobs: bool
    clahe: bool = False
    blur_radius: int = 0
    level: int = -1
    viz_dir: Optional[str] = None
    detection: DetectionConfig = DEFAULT_DETECTION_CONFIG
    grid: GridConfig = DEFAULT_GRID_CONFIG


class RecordWriter:
    """Serializes output so each image's records stay contiguous."""

    def __init__(self, stream: TextIO):
        self._stream = stream
        self._lock = threading.Lock()

    def header(self) -> None:
        with self._lock:
            self._stream.write("# filename x y\n")

    def grid(self, filename: str, points: np.ndarray) -> None:
        with self._lock:
            write_points(self._stream, points, prefix=filename)
            self._stream.flush()

    def missing(self, filename: str, comment: Optional[str] = None) -> None:
        with self._lock:
            if comment:
                self._stream.write(f"## {comment}\n")
            write_missing(self._stream, filename)
            self._stream.flush()


def process_image(task: ImageTask, writer: RecordWriter) -> bool:
    gray = read_gray_image(task.path)
    if gray is None:
        logger.error("Couldn't open image '%s'", task.path)
        writer.missing(task.path, f"Couldn't open image '{task.path}'")
        return False

    img = preprocess(gray, clahe=task.clahe, blur_radius=task.blur_radius, cfg=task.detection)
    debug = {}
    grid = find_grid_in_image(img, task.blobs, level=task.level,
                              cfg=task.detection, grid_config=task.grid, debug=debug)

    if task.viz_dir:
        base = os.path.splitext(os.path.basename(task.path))[0]
        save_grid_overlay(task.viz_dir, base, img, grid, debug.get("candidates"))

    if grid is None:
        logger.info("no grid in %s (%d candidates)", task.path, debug.get("num_detections", 0))
        writer.missing(task.path)
        return False
    writer.grid(task.path, grid)
    return True


def expand_globs(patterns: List[str]) -> Optional[List[str]]:
    paths: List[str] = []
    for pattern in patterns:
        matched = sorted(glob.glob(os.path.expanduser(pattern)))
        if not matched:
            logger.error("'%s' matched no files!", pattern)
            return None
        paths.extend(matched)
    return paths


def run_batch(tasks: List[ImageTask], writer: RecordWriter, jobs: int = 1) -> int:
    """Process ``tasks`` on ``jobs`` threads; returns how many produced a grid."""
    found = 0
    with ThreadPoolExecutor(max_workers=jobs) as pool:
        futures = [pool.submit(process_image, t, writer) for t in tasks]
        for fut in tqdm(as_completed(futures), total=len(futures), desc="[Grid]",
                        file=sys.stderr, disable=len(futures) < 2):
            if fut.result():
                found += 1
    return found


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="gridcal-from-image",
        description="Find the ordered calibration grid in each image",
    )
    mode = ap.add_mutually_exclusive_group(required=True)
    mode.add_argument("--blobs", action="store_true", help="the board is a grid of circles")
    mode.add_argument("--chessboard", action="store_true", help="the board is a chessboard")
    ap.add_argument("--clahe", action="store_true",
                    help="adaptive histogram equalization first; helps with lighting gradients")
    ap.add_argument("--blur", type=int, default=0, metavar="RADIUS",
                    help="box blur of (1+2*RADIUS) pixels, after --clahe")
    ap.add_argument("--level", type=int, default=-1,
                    help="pyramid level for chessboards: 0 is full resolution, "
                         "L>0 downsamples by 2**L, <0 tries several (default)")
    ap.add_argument("-j", "--jobs", type=int, default=1, help="number of worker threads")
    ap.add_argument("--viz-dir", default=None, help="write a grid overlay PNG per image here")
    ap.add_argument("--config", default=None, help="YAML file with GridConfig overrides")
    ap.add_argument("--log", default="WARNING", help="Logging level (DEBUG/INFO/WARNING)")
    ap.add_argument("images", nargs="+", help=IMAGE_PATTERNS_HELP)
    return ap


def main(argv: Optional[List[str]] = None, stream: Optional[TextIO] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log.upper(), logging.WARNING),
                        format="%(levelname)s: %(message)s", stream=sys.stderr)

    if args.blur < 0:
        ap.print_usage(sys.stderr)
        logger.error("--blur needs a positive radius")
        return 1
    if args.jobs <= 0:
        ap.print_usage(sys.stderr)
        logger.error("The job count must be a positive integer")
        return 1
    if args.blobs and args.level >= 0:
        logger.warning("--level only applies to chessboards; ignored")

    paths = expand_globs(args.images)
    if paths is None:
        return 1

    grid_config = load_grid_config(args.config) if args.config else DEFAULT_GRID_CONFIG
    tasks = [
        ImageTask(path=p, blobs=args.blobs, clahe=args.clahe, blur_radius=args.blur,
                  level=args.level, viz_dir=args.viz_dir, grid=grid_config)
        for p in paths
    ]

    writer = RecordWriter(stream if stream is not None else sys.stdout)
    writer.header()
    found = run_batch(tasks, writer, jobs=args.jobs)
    logger.info("grid found in %d of %d images", found, len(tasks))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
