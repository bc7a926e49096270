# -*- coding: utf-8 -*-
"""
Candidate points from pixels: circle centres or chessboard corners.

Detection here is deliberately permissive; the grid finder is the part that
rejects clutter. Input is a uint8 grayscale image.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import cv2
import numpy as np

from ..core.grid_config import GridConfig, DEFAULT_GRID_CONFIG
from ..core.grid_finder import find_grid_from_xy

logger = logging.getLogger(__name__)

__all__ = [
    "DetectionConfig",
    "DEFAULT_DETECTION_CONFIG",
    "create_detection_config",
    "preprocess",
    "make_blob_detector",
    "detect_blob_centers",
    "is_saddle",
    "detect_corner_candidates",
    "find_grid_in_image",
]


@dataclass(frozen=True)
class DetectionConfig:
    # Preprocessing
    clahe_clip_limit: float = 8.0
    clahe_tile_grid: Tuple[int, int] = (8, 8)

    # Blob detector
    blob_min_area: float = 20.0
    blob_max_area: float = 20000.0
    blob_dark: bool = True
    blob_min_circularity: float = 0.6
    blob_min_convexity: float = 0.8
    blob_min_inertia: float = 0.3
    blob_min_threshold: float = 10.0
    blob_max_threshold: float = 220.0
    blob_threshold_step: float = 10.0
    blob_min_dist: float = 5.0

    # Corner detector
    corner_max_count: int = 1000
    corner_quality: float = 0.05
    corner_min_distance: float = 8.0
    corner_block_size: int = 5
    corner_saddle_radius: int = 4         # quadrant probe offset, pixels at the level
    corner_saddle_contrast: float = 20.0
    corner_subpix_win: Tuple[int, int] = (3, 3)

    # Pyramid levels tried in order when no level is forced
    pyramid_levels: Tuple[int, ...] = (2, 1, 0)


def create_detection_config(**overrides) -> DetectionConfig:
    """Create a DetectionConfig with selective overrides for convenient tuning."""
    known = DetectionConfig.__dataclass_fields__
    for key in overrides:
        if key not in known:
            raise AttributeError(f"Unknown detection config field: {key}")
    return DetectionConfig(**overrides)


DEFAULT_DETECTION_CONFIG = DetectionConfig()


def preprocess(gray: np.ndarray, clahe: bool = False, blur_radius: int = 0,
               cfg: DetectionConfig = DEFAULT_DETECTION_CONFIG) -> np.ndarray:
    """Optional adaptive equalization, then an optional box blur."""
    out = gray
    if clahe:
        tile_grid = tuple(max(1, int(round(v))) for v in cfg.clahe_tile_grid)
        out = cv2.createCLAHE(clipLimit=cfg.clahe_clip_limit, tileGridSize=tile_grid).apply(out)
    if blur_radius > 0:
        k = 1 + 2 * int(blur_radius)
        out = cv2.blur(out, (k, k))
    return out


def make_blob_detector(cfg: DetectionConfig = DEFAULT_DETECTION_CONFIG):
    p = cv2.SimpleBlobDetector_Params()
    p.minThreshold = float(cfg.blob_min_threshold)
    p.maxThreshold = float(cfg.blob_max_threshold)
    p.thresholdStep = float(cfg.blob_threshold_step)
    p.filterByArea = True; p.minArea = float(cfg.blob_min_area); p.maxArea = float(cfg.blob_max_area)
    p.filterByCircularity = True; p.minCircularity = float(cfg.blob_min_circularity)
    p.filterByInertia = True; p.minInertiaRatio = float(cfg.blob_min_inertia)
    p.filterByConvexity = True; p.minConvexity = float(cfg.blob_min_convexity)
    p.filterByColor = True; p.blobColor = 0 if cfg.blob_dark else 255
    p.minDistBetweenBlobs = float(cfg.blob_min_dist)
    return cv2.SimpleBlobDetector_create(p)


def detect_blob_centers(gray: np.ndarray,
                        cfg: DetectionConfig = DEFAULT_DETECTION_CONFIG) -> np.ndarray:
    kps = make_blob_detector(cfg).detect(gray)
    return np.array([kp.pt for kp in kps], np.float64).reshape(-1, 2)


def is_saddle(gray: np.ndarray, xy: np.ndarray, radius: int, contrast: float) -> np.ndarray:
    """True where the four diagonal quadrants around a point alternate dark/light.

    Chessboard X-junctions pass; the L-shaped corners of the board outline
    and T-junctions along its edge do not.
    """
    if len(xy) == 0:
        return np.zeros(0, bool)
    img = cv2.blur(gray, (3, 3)).astype(np.int32)
    h, w = img.shape
    r = int(radius)
    x = np.rint(xy[:, 0]).astype(np.int64)
    y = np.rint(xy[:, 1]).astype(np.int64)
    inside = (x - r >= 0) & (x + r < w) & (y - r >= 0) & (y + r < h)
    x = np.clip(x, r, w - 1 - r)
    y = np.clip(y, r, h - 1 - r)

    tl, br = img[y - r, x - r], img[y + r, x + r]
    tr, bl = img[y - r, x + r], img[y + r, x - r]
    main_lo, main_hi = np.minimum(tl, br), np.maximum(tl, br)
    anti_lo, anti_hi = np.minimum(tr, bl), np.maximum(tr, bl)
    alternating = (main_lo - anti_hi >= contrast) | (anti_lo - main_hi >= contrast)
    return inside & alternating


def detect_corner_candidates(gray: np.ndarray, level: int = 0,
                             cfg: DetectionConfig = DEFAULT_DETECTION_CONFIG) -> np.ndarray:
    """Chessboard X-junctions found at pyramid ``level``, in full-resolution pixels."""
    img = gray
    for _ in range(level):
        img = cv2.pyrDown(img)
    corners = cv2.goodFeaturesToTrack(
        img,
        maxCorners=int(cfg.corner_max_count),
        qualityLevel=float(cfg.corner_quality),
        minDistance=float(cfg.corner_min_distance),
        blockSize=int(cfg.corner_block_size),
    )
    if corners is None:
        return np.zeros((0, 2), np.float64)

    keep = is_saddle(img, corners.reshape(-1, 2), cfg.corner_saddle_radius, cfg.corner_saddle_contrast)
    logger.debug("level %d: %d of %d corners are saddles", level, int(keep.sum()), len(keep))
    corners = np.ascontiguousarray(corners[keep], dtype=np.float32)
    if len(corners) == 0:
        return np.zeros((0, 2), np.float64)

    term = (cv2.TERM_CRITERIA_EPS + cv2.TERM_CRITERIA_MAX_ITER, 30, 0.01)
    win = tuple(int(v) for v in cfg.corner_subpix_win)
    corners = cv2.cornerSubPix(img, corners, win, (-1, -1), term)

    xy = corners.reshape(-1, 2).astype(np.float64)
    if level > 0:
        s = float(2 ** level)
        xy = (xy + 0.5) * s - 0.5
    return xy


def find_grid_in_image(gray: np.ndarray, blobs: bool, level: int = -1,
                       cfg: DetectionConfig = DEFAULT_DETECTION_CONFIG,
                       grid_config: GridConfig = DEFAULT_GRID_CONFIG,
                       debug: Optional[Dict[str, Any]] = None) -> Optional[np.ndarray]:
    """Detect candidates in ``gray`` and order them into a grid.

    ``level`` only applies to corners; a negative level tries
    ``cfg.pyramid_levels`` in turn and keeps the first success.
    """
    assert gray.ndim == 2 and gray.dtype == np.uint8, "expect uint8 gray"

    if blobs:
        xy = detect_blob_centers(gray, cfg)
        if debug is not None:
            debug["candidates"] = xy
            debug["num_detections"] = int(len(xy))
        return find_grid_from_xy(xy, config=grid_config)

    levels = cfg.pyramid_levels if level < 0 else (level,)
    for lv in levels:
        xy = detect_corner_candidates(gray, lv, cfg)
        logger.debug("level %d: %d corner candidates", lv, len(xy))
        if debug is not None:
            debug["candidates"] = xy
            debug["num_detections"] = int(len(xy))
        grid = find_grid_from_xy(xy, config=grid_config)
        if grid is not None:
            if debug is not None:
                debug["level"] = lv
            return grid
    return None
