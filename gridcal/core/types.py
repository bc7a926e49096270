# gridcal/core/types.py
# -*- coding: utf-8 -*-

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import math
from typing import Tuple, Union

Pt = Tuple[float, float]


class Classification(Enum):
    UNCLASSIFIED = "unclassified"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    OUTLIER = "outlier"


@dataclass(frozen=True)
class PendingBin:
    """Candidate gathered into clustering bin ``index``, not yet labelled."""
    index: int


Tag = Union[Classification, PendingBin]


def spacing_angle(dy: float, dx: float) -> float:
    """Direction in degrees, folded into [0, 180)."""
    angle = math.degrees(math.atan2(dy, dx))
    if angle < 0:
        angle += 180.0
    return angle


@dataclass
class CandidateSequence:
    # point indices along the sequence; the first two are the seed
    indices: Tuple[int, ...]
    delta_mean: Pt
    spacing_angle: float
    spacing_length: float
    tag: Tag = Classification.UNCLASSIFIED

    @property
    def start(self) -> int:
        return self.indices[0]


@dataclass
class ClassificationBin:
    """Sign-normalized sum of member directions."""
    sum_x: float = 0.0
    sum_y: float = 0.0
    count: int = 0

    def mean(self) -> Pt:
        return (self.sum_x / self.count, self.sum_y / self.count)

    @property
    def angle(self) -> float:
        return spacing_angle(self.sum_y, self.sum_x)

    def add(self, dx: float, dy: float) -> None:
        # forward and backward traces of one line point opposite ways
        if self.sum_x * dx + self.sum_y * dy >= 0.0:
            self.sum_x += dx
            self.sum_y += dy
        else:
            self.sum_x -= dx
            self.sum_y -= dy
        self.count += 1
