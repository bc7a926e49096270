# -*- coding: utf-8 -*-
"""Splitting sequence candidates into the two axes of the grid.

Candidates are gathered into bins of similar (length, angle). A real axis
produces at least ``2*NWANT`` candidates (every line, traced both ways);
smaller bins are outliers. Exactly two such bins must exist, and they must
resolve to different orientations.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Tuple

from .grid_config import NWANT, GridConfig, DEFAULT_GRID_CONFIG
from .types import (CandidateSequence, Classification, ClassificationBin,
                    PendingBin)

logger = logging.getLogger(__name__)

__all__ = [
    "fits_in_bin",
    "gather_unclassified",
    "mark_outliers",
    "orientation_of_angle",
    "resolve_orientations",
    "cluster_candidates",
]

MIN_BIN_SIZE = 2 * NWANT


def fits_in_bin(cs: CandidateSequence, bin_: ClassificationBin,
                cfg: GridConfig = DEFAULT_GRID_CONFIG) -> bool:
    if bin_.count == 0:
        return True

    dx, dy = bin_.mean()
    if abs(cs.spacing_length - math.hypot(dx, dy)) > cfg.binfit_length_scaled:
        return False

    # angles are mod 180; fold the difference into [-90, 90]
    angle_err = math.remainder(cs.spacing_angle - bin_.angle, 180.0)
    return abs(angle_err) <= cfg.binfit_angle_deg


def gather_unclassified(candidates: Sequence[CandidateSequence], bin_index: int,
                        cfg: GridConfig = DEFAULT_GRID_CONFIG
                        ) -> Tuple[ClassificationBin, int]:
    """Fill a fresh bin from the unclassified candidates.

    Returns the bin and the number of unclassified candidates left out.
    """
    bin_ = ClassificationBin()
    remaining = 0
    pending = PendingBin(bin_index)
    for cs in candidates:
        if cs.tag is not Classification.UNCLASSIFIED:
            continue
        if fits_in_bin(cs, bin_, cfg):
            bin_.add(*cs.delta_mean)
            cs.tag = pending
        else:
            remaining += 1
    return bin_, remaining


def mark_outliers(candidates: Sequence[CandidateSequence],
                  bin_index: Optional[int] = None) -> None:
    """Mark bin ``bin_index`` as outliers, or every unclassified one if None."""
    target = Classification.UNCLASSIFIED if bin_index is None else PendingBin(bin_index)
    for cs in candidates:
        if cs.tag == target:
            cs.tag = Classification.OUTLIER


def orientation_of_angle(angle: float, cfg: GridConfig = DEFAULT_GRID_CONFIG) -> Classification:
    """Vertical within ``vertical_half_width_deg`` of 90 degrees, else horizontal.

    Near 45 degrees either label is plausible and this call does not try to
    disambiguate; a board seen at that angle may come out transposed.
    """
    half = cfg.vertical_half_width_deg
    if 90.0 - half < angle < 90.0 + half:
        return Classification.VERTICAL
    return Classification.HORIZONTAL


def resolve_orientations(bins: Sequence[ClassificationBin],
                         cfg: GridConfig = DEFAULT_GRID_CONFIG
                         ) -> Optional[Tuple[Classification, Classification]]:
    first = orientation_of_angle(bins[0].angle, cfg)
    second = orientation_of_angle(bins[1].angle, cfg)
    if first == second:
        return None
    return first, second


def cluster_candidates(candidates: List[CandidateSequence],
                       cfg: GridConfig = DEFAULT_GRID_CONFIG,
                       debug: Optional[dict] = None) -> Optional[str]:
    """Label every candidate HORIZONTAL, VERTICAL or OUTLIER.

    Returns None on success, otherwise the failure reason. On failure the
    tags are left wherever the state machine stopped. Every pass classifies
    at least one candidate, so the loop terminates.
    """
    bins: List[ClassificationBin] = []
    while True:
        bin_index = len(bins)
        bin_, remaining = gather_unclassified(candidates, bin_index, cfg)

        if bin_.count < MIN_BIN_SIZE:
            mark_outliers(candidates, bin_index)
        elif bin_index >= 2:
            return "too_many_axis_bins"
        else:
            bins.append(bin_)
            logger.debug("bin %d: %d members, angle %.2f",
                         bin_index, bin_.count, bin_.angle)

        if len(bins) == 2 and remaining < MIN_BIN_SIZE:
            # only stragglers left
            mark_outliers(candidates, None)
            break
        if remaining == 0:
            return "no_axis_bins"

    if debug is not None:
        debug["bins"] = [dict(count=b.count, angle=b.angle) for b in bins]

    orientations = resolve_orientations(bins, cfg)
    if orientations is None:
        return "same_orientation"
    if debug is not None:
        debug["orientations"] = [o.value for o in orientations]

    labels = {PendingBin(i): o for i, o in enumerate(orientations)}
    for cs in candidates:
        if cs.tag in labels:
            cs.tag = labels[cs.tag]
    return None
