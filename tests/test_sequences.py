from __future__ import annotations

import math

import numpy as np

from gridcal.core.adjacency import build_proximity_graph
from gridcal.core.grid_config import NWANT, create_grid_config, to_fixed_point
from gridcal.core.sequences import (TraceState, generate_candidates,
                                    step_along_sequence, trace_sequence)

from grids import lattice


def _line(xs) -> np.ndarray:
    xs = np.asarray(xs, np.float64)
    return np.column_stack([xs, np.zeros_like(xs)])


def test_trace_geometric_run() -> None:
    xs = np.concatenate([[0.0], np.cumsum(10.0 * 1.1 ** np.arange(NWANT - 1))])
    graph = build_proximity_graph(to_fixed_point(_line(xs)))

    traced = trace_sequence(graph, 0, 1)
    assert traced is not None
    indices, (mx, my) = traced
    assert indices == list(range(NWANT))
    assert mx > 0.0
    assert abs(my) < 1e-9


def test_trace_stops_at_a_bend() -> None:
    xy = [(10.0 * k, 0.0) for k in range(6)]
    a = math.radians(10.0)
    xy += [(50.0 + 10.0 * k * math.cos(a), 10.0 * k * math.sin(a)) for k in range(1, 5)]
    graph = build_proximity_graph(to_fixed_point(xy))

    assert trace_sequence(graph, 0, 1) is None


def test_ratio_jump_rejected_after_warmup() -> None:
    xs = [0, 10, 20, 30, 40, 50, 60, 72.5, 85, 97.5]
    graph = build_proximity_graph(to_fixed_point(_line(xs)))

    # the jump comes after five steady steps
    assert trace_sequence(graph, 0, 1) is None

    # from the other end it comes during warmup and is accepted
    traced = trace_sequence(graph, 9, 8)
    assert traced is not None
    assert traced[0] == list(range(9, -1, -1))


def test_step_warmup_and_deviation() -> None:
    graph = build_proximity_graph(to_fixed_point(_line([0.0, 10.0, 22.5])))

    fresh = TraceState(delta_last=(100, 0))
    assert step_along_sequence(fresh, graph, 1) == 2
    assert fresh.ratio_count == 1
    assert fresh.delta_last == (125, 0)

    settled = TraceState(delta_last=(100, 0), ratio_sum=3.0, ratio_count=3)
    assert step_along_sequence(settled, graph, 1) is None
    # unchanged on rejection
    assert settled.delta_last == (100, 0)
    assert settled.ratio_count == 3


def test_step_absolute_length_tolerance() -> None:
    graph = build_proximity_graph(to_fixed_point(_line([0.0, 500.0, 1100.0])))

    state = TraceState(delta_last=(5000, 0))
    assert step_along_sequence(state, graph, 1) is None

    loose = create_grid_config(spacing_length_max=200.0)
    state = TraceState(delta_last=(5000, 0))
    assert step_along_sequence(state, graph, 1, loose) == 2


def test_generate_candidates_finds_every_line_both_ways() -> None:
    graph = build_proximity_graph(to_fixed_point(lattice(spacing=4.0)))
    candidates = generate_candidates(graph)
    found = {cs.indices for cs in candidates}

    assert all(len(cs.indices) == NWANT for cs in candidates)
    for i in range(NWANT):
        row = tuple(i * NWANT + j for j in range(NWANT))
        col = tuple(j * NWANT + i for j in range(NWANT))
        for line in (row, col):
            assert line in found
            assert tuple(reversed(line)) in found

    rows = [cs for cs in candidates if cs.indices[1] - cs.indices[0] == 1]
    assert all(abs(cs.spacing_angle) < 1e-6 for cs in rows)
    assert all(cs.spacing_length == 40.0 for cs in rows)
