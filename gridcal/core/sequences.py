# -*- coding: utf-8 -*-
"""Tracing runs of evenly progressing points through the proximity graph.

A grid line seen under perspective projects to points on a straight line
whose spacing changes roughly geometrically. Starting from a seed pair the
tracer repeatedly picks the graph neighbour that continues the run: same
direction (tight), similar length (loose), and a length ratio close to the
ratios seen so far.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import List, Optional, Tuple

from .adjacency import PlanarAdjacency
from .grid_config import NWANT, GridConfig, DEFAULT_GRID_CONFIG
from .types import CandidateSequence, spacing_angle

logger = logging.getLogger(__name__)

__all__ = [
    "TraceState",
    "step_along_sequence",
    "trace_sequence",
    "generate_candidates",
]


@dataclass
class TraceState:
    delta_last: Tuple[int, int]
    ratio_sum: float = 0.0
    ratio_count: int = 0

    @property
    def ratio_mean(self) -> float:
        return self.ratio_sum / self.ratio_count


def _delta(graph: PlanarAdjacency, a: int, b: int) -> Tuple[int, int]:
    pa = graph.points[a]
    pb = graph.points[b]
    return (int(pb[0] - pa[0]), int(pb[1] - pa[1]))


def step_along_sequence(state: TraceState, graph: PlanarAdjacency, node: int,
                        cfg: GridConfig = DEFAULT_GRID_CONFIG) -> Optional[int]:
    """Return the first neighbour of ``node`` that continues the run.

    ``state`` is updated only when a neighbour is accepted. Several
    neighbours could qualify on messy data; the first one in graph order wins.
    """
    lx, ly = state.delta_last
    last_length = math.hypot(lx, ly)
    if last_length == 0.0:
        return None
    length_tol = cfg.spacing_length_max_scaled

    for nb in graph.neighbors(node):
        dx, dy = _delta(graph, node, nb)
        length = math.hypot(dx, dy)
        if length == 0.0:
            continue

        cos_err = (lx * dx + ly * dy) / (last_length * length)
        if cos_err < cfg.spacing_cos_min:
            continue

        if abs(last_length - length) > length_tol:
            continue

        ratio = length / last_length
        if ratio < cfg.spacing_ratio_min or ratio > cfg.spacing_ratio_max:
            continue

        # the mean is unstable over the first few steps; the reverse trace
        # of the same line covers that end
        if state.ratio_count >= cfg.spacing_ratio_warmup:
            if abs(ratio - state.ratio_mean) > cfg.spacing_ratio_deviation:
                continue

        state.ratio_sum += ratio
        state.ratio_count += 1
        state.delta_last = (dx, dy)
        return nb

    return None


def trace_sequence(graph: PlanarAdjacency, start: int, second: int,
                   steps: int = NWANT - 2,
                   cfg: GridConfig = DEFAULT_GRID_CONFIG
                   ) -> Optional[Tuple[List[int], Tuple[float, float]]]:
    """Trace ``steps`` more points after the seed ``start -> second``.

    Returns the full index list and the mean step vector, or None as soon as
    a step finds no continuation.
    """
    state = TraceState(delta_last=_delta(graph, start, second))
    sx, sy = state.delta_last
    indices = [start, second]
    node = second
    for _ in range(steps):
        nxt = step_along_sequence(state, graph, node, cfg)
        if nxt is None:
            return None
        sx += state.delta_last[0]
        sy += state.delta_last[1]
        indices.append(nxt)
        node = nxt
    nsteps = float(steps + 1)
    return indices, (sx / nsteps, sy / nsteps)


def generate_candidates(graph: PlanarAdjacency,
                        cfg: GridConfig = DEFAULT_GRID_CONFIG) -> List[CandidateSequence]:
    """Trace from every (point, neighbour) seed; keep the complete runs.

    Each true grid line shows up twice, once from either end.
    """
    candidates: List[CandidateSequence] = []
    for i in range(len(graph)):
        for j in graph.neighbors(i):
            traced = trace_sequence(graph, i, j, NWANT - 2, cfg)
            if traced is None:
                continue
            indices, (mx, my) = traced
            candidates.append(CandidateSequence(
                indices=tuple(indices),
                delta_mean=(mx, my),
                spacing_angle=spacing_angle(my, mx),
                spacing_length=math.hypot(mx, my),
            ))
    logger.debug("traced %d sequence candidates from %d points", len(candidates), len(graph))
    return candidates
