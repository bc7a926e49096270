# -*- coding: utf-8 -*-
"""Planar proximity graph over the candidate points.

Two points are neighbours when their Voronoi cells share a boundary, which
is the same as sharing an edge of the Delaunay triangulation. The
triangulation comes from Qhull through ``scipy.spatial.Delaunay`` and is
flattened once into plain neighbour lists. Exactly collinear input, which
Qhull cannot triangulate, is chained in order along its line.
"""

from __future__ import annotations

import logging
from typing import List, Protocol, Sequence, Tuple

import numpy as np
from scipy.spatial import Delaunay, QhullError

logger = logging.getLogger(__name__)

__all__ = ["PlanarAdjacency", "ProximityGraph", "build_proximity_graph"]


class PlanarAdjacency(Protocol):
    """Anything that can list the geometric neighbours of point ``i``."""

    points: np.ndarray

    def neighbors(self, index: int) -> Sequence[int]:
        ...

    def __len__(self) -> int:
        ...


class ProximityGraph:
    """Read-only adjacency over an (M,2) int64 point array."""

    def __init__(self, points: np.ndarray, neighbors: List[List[int]]):
        self.points = points
        self._neighbors = [tuple(n) for n in neighbors]

    def __len__(self) -> int:
        return len(self._neighbors)

    def neighbors(self, index: int) -> Tuple[int, ...]:
        return self._neighbors[index]

    @property
    def num_edges(self) -> int:
        return sum(len(n) for n in self._neighbors) // 2

    @property
    def is_degenerate(self) -> bool:
        return self.num_edges == 0

    def edges(self):
        for i, ns in enumerate(self._neighbors):
            for j in ns:
                if i < j:
                    yield i, j


def _chain_collinear(pts: np.ndarray, reps: np.ndarray, neighbors: List[List[int]]) -> None:
    """Voronoi cells of collinear seeds are parallel strips: link consecutive points."""
    d = pts[reps[-1]] - pts[reps[0]]
    order = reps[np.argsort((pts[reps] - pts[reps[0]]) @ d, kind="stable")]
    for a, b in zip(order[:-1], order[1:]):
        neighbors[a].append(int(b))
        neighbors[b].append(int(a))


def _is_collinear(pts: np.ndarray) -> bool:
    d = pts - pts[0]
    far = d[np.argmax(np.abs(d).sum(axis=1))]
    cross = d[:, 0] * far[1] - d[:, 1] * far[0]
    return not cross.any()


def build_proximity_graph(points) -> ProximityGraph:
    """Build the Voronoi-adjacency graph of ``points`` (M,2 integer array).

    Duplicate points map onto the first occurrence; the later copies get no
    neighbours. Fewer than two distinct points give a graph with no edges.
    """
    pts = np.asarray(points, dtype=np.int64).reshape(-1, 2)
    n = len(pts)
    neighbors: List[List[int]] = [[] for _ in range(n)]
    if n < 2:
        return ProximityGraph(pts, neighbors)

    _, first = np.unique(pts, axis=0, return_index=True)
    reps = np.sort(first)
    if len(reps) < n:
        logger.debug("%d duplicate points ignored", n - len(reps))
    if len(reps) < 2:
        return ProximityGraph(pts, neighbors)

    if _is_collinear(pts[reps]):
        _chain_collinear(pts, reps, neighbors)
        return ProximityGraph(pts, neighbors)

    try:
        tri = Delaunay(pts[reps].astype(np.float64))
    except QhullError as exc:
        logger.warning("triangulation of %d points failed: %s", len(reps), exc)
        return ProximityGraph(pts, neighbors)

    indptr, indices = tri.vertex_neighbor_vertices
    for a, i in enumerate(reps):
        neighbors[i] = [int(reps[b]) for b in indices[indptr[a]:indptr[a + 1]]]

    return ProximityGraph(pts, neighbors)
