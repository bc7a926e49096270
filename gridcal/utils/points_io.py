# -*- coding: utf-8 -*-
"""Plain-text point files: one ``x y`` pair per line."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, TextIO, Union

import numpy as np

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

__all__ = ["parse_points", "read_points", "write_points", "write_missing"]


def parse_points(lines: Iterable[str]) -> np.ndarray:
    """Parse the first two numbers of each line; skip lines that have none.

    Comments, blank lines and anything non-numeric are ignored silently.
    Returns an (M,2) float64 array.
    """
    out = []
    for line in lines:
        parts = line.split()
        if len(parts) < 2:
            continue
        try:
            x = float(parts[0])
            y = float(parts[1])
        except ValueError:
            continue
        if not (np.isfinite(x) and np.isfinite(y)):
            continue
        out.append((x, y))
    return np.asarray(out, dtype=np.float64).reshape(-1, 2)


def read_points(path: PathLike) -> Optional[np.ndarray]:
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            return parse_points(f)
    except OSError as exc:
        logger.error("couldn't open '%s': %s", path, exc)
        return None


def write_points(stream: TextIO, xy, prefix: Optional[str] = None) -> None:
    """Write ``x y`` lines, each preceded by ``prefix`` when given."""
    for x, y in np.asarray(xy, dtype=np.float64).reshape(-1, 2):
        if prefix is None:
            stream.write(f"{x:f} {y:f}\n")
        else:
            stream.write(f"{prefix} {x:f} {y:f}\n")


def write_missing(stream: TextIO, prefix: str) -> None:
    """Placeholder record for an input that produced no grid."""
    stream.write(f"{prefix} - -\n")
