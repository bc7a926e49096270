# -*- coding: utf-8 -*-
"""Merging the two traces of each grid line.

Every real line is found once from each end. Of such a pair only the copy
running in the canonical direction (+x for horizontal, +y for vertical)
survives; a sequence with no reversed twin is spurious and is dropped.
"""

from __future__ import annotations

import logging
from typing import List

from .types import CandidateSequence, Classification

logger = logging.getLogger(__name__)

__all__ = ["matches_direction", "is_reverse_of", "filter_bidirectional"]


def matches_direction(cs: CandidateSequence, orientation: Classification) -> bool:
    if orientation is Classification.HORIZONTAL:
        return cs.delta_mean[0] > 0.0
    return cs.delta_mean[1] > 0.0


def is_reverse_of(a: CandidateSequence, b: CandidateSequence) -> bool:
    return a.indices == tuple(reversed(b.indices))


def filter_bidirectional(candidates: List[CandidateSequence],
                         orientation: Classification) -> int:
    """Collapse forward/backward pairs of ``orientation`` in place.

    The kept member of a pair takes the slot of the earlier one. Returns the
    number of candidates dropped for lacking a reversed twin.
    """
    unmatched = 0
    n = len(candidates)
    for i in range(n):
        cs0 = candidates[i]
        if cs0.tag is not orientation:
            continue

        found = False
        for j in range(i + 1, n):
            cs1 = candidates[j]
            if cs1.tag is not orientation or not is_reverse_of(cs0, cs1):
                continue
            if not matches_direction(cs0, orientation):
                candidates[i], candidates[j] = cs1, cs0
            candidates[j].tag = Classification.OUTLIER
            found = True
            break

        if not found:
            cs0.tag = Classification.OUTLIER
            unmatched += 1

    if unmatched:
        logger.debug("%s: dropped %d sequences with no reverse", orientation.value, unmatched)
    return unmatched
