# -*- coding: utf-8 -*-
"""Ordering the surviving lines and checking that rows and columns agree."""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np

from .grid_config import NWANT, from_fixed_point
from .types import CandidateSequence, Classification

__all__ = [
    "sort_candidates",
    "first_of",
    "check_bounds",
    "count_orientations",
    "validate_classification",
    "validate_lattice",
    "emit_points",
]

_RANK = {Classification.HORIZONTAL: 0, Classification.VERTICAL: 1}


def sort_candidates(candidates: List[CandidateSequence], points: np.ndarray) -> None:
    """Horizontal lines by increasing start y, then vertical by increasing start x.

    Everything else goes last.
    """
    def key(cs: CandidateSequence):
        rank = _RANK.get(cs.tag, 2)
        p = points[cs.start]
        if rank == 0:
            return (rank, int(p[1]))
        if rank == 1:
            return (rank, int(p[0]))
        return (rank, 0)

    candidates.sort(key=key)


def first_of(candidates: Sequence[CandidateSequence], orientation: Classification) -> Optional[int]:
    for i, cs in enumerate(candidates):
        if cs.tag is orientation:
            return i
    return None


def check_bounds(candidates: Sequence[CandidateSequence], orientation: Classification) -> bool:
    """The first line of ``orientation`` must pass through the starts of the
    first NWANT lines of the other orientation, in order.

    Expects ``candidates`` already sorted.
    """
    other = (Classification.VERTICAL if orientation is Classification.HORIZONTAL
             else Classification.HORIZONTAL)
    i_ref = first_of(candidates, orientation)
    i_other = first_of(candidates, other)
    if i_ref is None or i_other is None:
        return False

    ref = candidates[i_ref].indices
    for k in range(NWANT):
        j = i_other + k
        if j >= len(candidates) or candidates[j].tag is not other:
            # ran out of lines to compare against
            return False
        if candidates[j].start != ref[k]:
            return False
    return True


def count_orientations(candidates: Sequence[CandidateSequence]):
    horizontal = sum(1 for cs in candidates if cs.tag is Classification.HORIZONTAL)
    vertical = sum(1 for cs in candidates if cs.tag is Classification.VERTICAL)
    return horizontal, vertical


def validate_classification(candidates: Sequence[CandidateSequence]) -> bool:
    """Exactly NWANT lines each way. Geometry is not re-checked here."""
    horizontal, vertical = count_orientations(candidates)
    return horizontal == NWANT and vertical == NWANT


def validate_lattice(candidates: Sequence[CandidateSequence]) -> bool:
    """Point j of row i must be point i of column j, for every i and j."""
    rows = [cs.indices for cs in candidates if cs.tag is Classification.HORIZONTAL]
    cols = [cs.indices for cs in candidates if cs.tag is Classification.VERTICAL]
    if len(rows) != NWANT or len(cols) != NWANT:
        return False
    return all(rows[i][j] == cols[j][i] for i in range(NWANT) for j in range(NWANT))


def emit_points(candidates: Sequence[CandidateSequence], points: np.ndarray) -> np.ndarray:
    """Row-major grid in nominal units, (NWANT*NWANT, 2) float64."""
    order = [idx for cs in candidates if cs.tag is Classification.HORIZONTAL
             for idx in cs.indices]
    return from_fixed_point(points[order])
