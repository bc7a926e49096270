# -*- coding: utf-8 -*-
"""I/O and candidate-detection helpers shared by the command-line tools."""

from .images import read_gray_image
from .points_io import parse_points, read_points, write_points, write_missing
from .detect import (
    DetectionConfig,
    DEFAULT_DETECTION_CONFIG,
    create_detection_config,
    detect_blob_centers,
    detect_corner_candidates,
    find_grid_in_image,
    preprocess,
)

__all__ = [
    "read_gray_image",
    "parse_points",
    "read_points",
    "write_points",
    "write_missing",
    "DetectionConfig",
    "DEFAULT_DETECTION_CONFIG",
    "create_detection_config",
    "detect_blob_centers",
    "detect_corner_candidates",
    "find_grid_in_image",
    "preprocess",
]
