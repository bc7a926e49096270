# -*- coding: utf-8 -*-
"""
GridFinder: unordered candidate points in, NWANT x NWANT grid out.

Input is fixed-point (see ``to_fixed_point``); output is row-major float64 in
the original units, or None when the points do not form a clean grid. No
drawing, no I/O: only the algorithm and its data.
"""
from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional

import numpy as np

from .adjacency import ProximityGraph, build_proximity_graph
from .assembly import (check_bounds, count_orientations, emit_points,
                       sort_candidates, validate_classification,
                       validate_lattice)
from .clustering import cluster_candidates
from .dedup import filter_bidirectional
from .sequences import generate_candidates
from .grid_config import (FIND_GRID_SCALE, GridConfig, DEFAULT_GRID_CONFIG,
                          to_fixed_point)
from .types import CandidateSequence, Classification

logger = logging.getLogger(__name__)

__all__ = ["GridFinder", "find_grid", "find_grid_from_xy"]


# --------------------- diagnostics ---------------------
def dump_graph(graph: ProximityGraph) -> None:
    s = float(FIND_GRID_SCALE)
    for i, j in graph.edges():
        pi, pj = graph.points[i], graph.points[j]
        logger.debug("edge %d-%d: %f %f -> %f %f",
                     i, j, pi[0] / s, pi[1] / s, pj[0] / s, pj[1] / s)


def dump_candidates(candidates: List[CandidateSequence], points: np.ndarray) -> None:
    s = float(FIND_GRID_SCALE)
    for i, cs in enumerate(candidates):
        p = points[cs.start]
        tag = cs.tag.value if isinstance(cs.tag, Classification) else f"bin{cs.tag.index}"
        logger.debug("candidate %d from %f %f delta_mean %f %f len %f angle %f type %s",
                     i, p[0] / s, p[1] / s,
                     cs.delta_mean[0] / s, cs.delta_mean[1] / s,
                     cs.spacing_length / s, cs.spacing_angle, tag)


def dump_intervals(i_candidate: int, cs: CandidateSequence, points: np.ndarray) -> None:
    s = float(FIND_GRID_SCALE)
    for k in range(len(cs.indices) - 1):
        p0 = points[cs.indices[k]] / s
        p1 = points[cs.indices[k + 1]] / s
        dx, dy = float(p1[0] - p0[0]), float(p1[1] - p0[1])
        logger.debug("candidate %d point %d, from %f %f to %f %f delta %f %f length %f angle %f",
                     i_candidate, k, p0[0], p0[1], p1[0], p1[1], dx, dy,
                     math.hypot(dx, dy), math.degrees(math.atan2(dy, dx)))


# --------------------- GridFinder API ---------------------
class GridFinder:
    def __init__(self, config: GridConfig = DEFAULT_GRID_CONFIG):
        self.config = config

    def _fail(self, debug: Optional[Dict[str, Any]], stage: str, reason: str):
        logger.debug("no grid: %s (stage %s)", reason, stage)
        if debug is not None:
            debug["stage"] = stage
            debug["fail_reason"] = reason
        return None

    def find(self, points, debug: Optional[Dict[str, Any]] = None) -> Optional[np.ndarray]:
        """Find the grid in fixed-point ``points`` (M,2 integers).

        ``debug``, when given, is cleared and filled with per-stage counts and
        ``fail_reason``; it never affects the result.
        """
        pts = np.asarray(points)
        if pts.size and (pts.ndim != 2 or pts.shape[1] != 2):
            raise ValueError(f"expected an (M, 2) point array, got shape {pts.shape}")
        pts = pts.reshape(-1, 2).astype(np.int64)
        cfg = self.config
        verbose = logger.isEnabledFor(logging.DEBUG)

        if debug is not None:
            debug.clear()
            debug["stage"] = "init"
            debug["fail_reason"] = None
            debug["num_points"] = int(len(pts))

        graph = build_proximity_graph(pts)
        if debug is not None:
            debug["stage"] = "graph"
            debug["num_edges"] = graph.num_edges
        if verbose:
            dump_graph(graph)
        if graph.is_degenerate:
            return self._fail(debug, "graph", "degenerate_input")

        candidates = generate_candidates(graph, cfg)
        if debug is not None:
            debug["stage"] = "candidates"
            debug["num_candidates"] = len(candidates)

        reason = cluster_candidates(candidates, cfg, debug)
        if verbose:
            dump_candidates(candidates, pts)
        if reason is not None:
            return self._fail(debug, "clustering", reason)

        unmatched = filter_bidirectional(candidates, Classification.HORIZONTAL)
        unmatched += filter_bidirectional(candidates, Classification.VERTICAL)
        n_h, n_v = count_orientations(candidates)
        if debug is not None:
            debug["stage"] = "bidirectional"
            debug["unmatched"] = unmatched
            debug["num_horizontal"] = n_h
            debug["num_vertical"] = n_v
        if n_h == 0 or n_v == 0:
            return self._fail(debug, "bidirectional", "bidirectional_unmatched")

        sort_candidates(candidates, pts)
        if not check_bounds(candidates, Classification.HORIZONTAL):
            return self._fail(debug, "bounds", "bounds_mismatch")
        if not check_bounds(candidates, Classification.VERTICAL):
            return self._fail(debug, "bounds", "bounds_mismatch")

        if not validate_classification(candidates):
            return self._fail(debug, "validate", "count_mismatch")
        if cfg.strict_validation and not validate_lattice(candidates):
            return self._fail(debug, "validate", "lattice_mismatch")

        if verbose:
            for i, cs in enumerate(candidates):
                if cs.tag is Classification.HORIZONTAL:
                    dump_intervals(i, cs, pts)

        if debug is not None:
            debug["stage"] = "done"
        return emit_points(candidates, pts)


# --------------------- convenience ---------------------
def find_grid(points, config: GridConfig = DEFAULT_GRID_CONFIG,
              debug: Optional[Dict[str, Any]] = None) -> Optional[np.ndarray]:
    return GridFinder(config).find(points, debug=debug)


def find_grid_from_xy(xy, config: GridConfig = DEFAULT_GRID_CONFIG,
                      debug: Optional[Dict[str, Any]] = None) -> Optional[np.ndarray]:
    """Same as ``find_grid`` for real-valued coordinates."""
    return find_grid(to_fixed_point(xy), config=config, debug=debug)
