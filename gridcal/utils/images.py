# -*- coding: utf-8 -*-
"""Image reading for the batch driver."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

import cv2
import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# OpenCV often cannot decode these; Pillow goes first for them.
_PILLOW_FIRST = {".dng", ".gif"}


def _read_with_pillow(fp: Path) -> Optional[np.ndarray]:
    try:
        with Image.open(fp) as im:
            return np.array(im.convert("L"))
    except Exception as exc:  # pylint: disable=broad-except
        logger.warning("Pillow failed to read %s: %s", fp, exc)
        return None


def _read_with_opencv(fp: Path) -> Optional[np.ndarray]:
    try:
        return cv2.imread(str(fp), cv2.IMREAD_GRAYSCALE)
    except cv2.error as exc:
        logger.warning("OpenCV failed to read %s: %s", fp, exc)
        return None


def read_gray_image(path: PathLike) -> Optional[np.ndarray]:
    """Read ``path`` as a uint8 grayscale image, or None if nothing can decode it."""
    fp = Path(path)
    if not fp.is_file():
        return None

    readers = [_read_with_opencv, _read_with_pillow]
    if fp.suffix.lower() in _PILLOW_FIRST:
        readers.reverse()

    for reader in readers:
        img = reader(fp)
        if img is not None:
            if img.dtype != np.uint8:
                img = cv2.convertScaleAbs(img)
            return img
    return None
