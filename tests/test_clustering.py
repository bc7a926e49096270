from __future__ import annotations

import math
from typing import List

import pytest

from gridcal.core.clustering import (cluster_candidates, fits_in_bin,
                                     orientation_of_angle)
from gridcal.core.grid_config import NWANT
from gridcal.core.types import (CandidateSequence, Classification,
                                ClassificationBin, spacing_angle)


def _group(angle_deg: float, count: int, length: float = 100.0) -> List[CandidateSequence]:
    """``count`` fake candidates along ``angle_deg``, half of them reversed."""
    out = []
    for k in range(count):
        a = math.radians(angle_deg + (180.0 if k % 2 else 0.0))
        dx, dy = length * math.cos(a), length * math.sin(a)
        out.append(CandidateSequence(
            indices=tuple(range(k, k + NWANT)),
            delta_mean=(dx, dy),
            spacing_angle=spacing_angle(dy, dx),
            spacing_length=length,
        ))
    return out


def test_bin_add_normalizes_sign() -> None:
    b = ClassificationBin()
    b.add(10.0, 0.0)
    b.add(-10.0, 0.0)
    b.add(-10.0, 1.0)
    assert b.count == 3
    assert b.sum_x == pytest.approx(30.0)
    assert b.sum_y == pytest.approx(-1.0)
    assert b.mean() == pytest.approx((10.0, -1.0 / 3.0))


def test_fits_in_bin_angle_and_length() -> None:
    b = ClassificationBin()
    b.add(100.0, 0.0)
    near, = _group(175.0, 1)
    far, = _group(50.0, 1)
    long_, = _group(0.0, 1, length=1500.0)
    assert fits_in_bin(near, b)
    assert not fits_in_bin(far, b)
    assert not fits_in_bin(long_, b)
    assert fits_in_bin(far, ClassificationBin())


@pytest.mark.parametrize("angle, expected", [
    (0.0, Classification.HORIZONTAL),
    (44.9, Classification.HORIZONTAL),
    (45.0, Classification.HORIZONTAL),
    (45.1, Classification.VERTICAL),
    (90.0, Classification.VERTICAL),
    (134.9, Classification.VERTICAL),
    (135.0, Classification.HORIZONTAL),
    (179.0, Classification.HORIZONTAL),
])
def test_orientation_of_angle(angle: float, expected: Classification) -> None:
    assert orientation_of_angle(angle) is expected


def test_two_axes_and_stragglers() -> None:
    stragglers = _group(45.0, 5)
    horizontal = _group(0.0, 2 * NWANT)
    vertical = _group(90.0, 2 * NWANT)
    candidates = stragglers + horizontal + vertical

    debug = {}
    assert cluster_candidates(candidates, debug=debug) is None
    assert all(cs.tag is Classification.OUTLIER for cs in stragglers)
    assert all(cs.tag is Classification.HORIZONTAL for cs in horizontal)
    assert all(cs.tag is Classification.VERTICAL for cs in vertical)
    assert [b["count"] for b in debug["bins"]] == [2 * NWANT, 2 * NWANT]
    assert debug["orientations"] == ["horizontal", "vertical"]


def test_vertical_bin_first() -> None:
    candidates = _group(100.0, 2 * NWANT) + _group(12.0, 2 * NWANT)
    assert cluster_candidates(candidates) is None
    assert candidates[0].tag is Classification.VERTICAL
    assert candidates[-1].tag is Classification.HORIZONTAL


def test_small_bins_only() -> None:
    candidates = _group(0.0, 2 * NWANT - 2) + _group(90.0, 2 * NWANT - 2)
    assert cluster_candidates(candidates) == "no_axis_bins"
    assert all(cs.tag is Classification.OUTLIER for cs in candidates)


def test_third_large_bin() -> None:
    candidates = _group(0.0, 2 * NWANT) + _group(60.0, 2 * NWANT) + _group(120.0, 2 * NWANT)
    assert cluster_candidates(candidates) == "too_many_axis_bins"


def test_both_bins_same_orientation() -> None:
    candidates = _group(0.0, 2 * NWANT) + _group(44.0, 2 * NWANT)
    debug = {}
    assert cluster_candidates(candidates, debug=debug) == "same_orientation"
    assert len(debug["bins"]) == 2
