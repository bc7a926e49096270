# gridcal/viz/viz_grid.py
# -*- coding: utf-8 -*-

from __future__ import annotations
import os
from typing import Optional, Sequence, Tuple

import numpy as np
import cv2

from ..core.grid_config import NWANT

__all__ = ["draw_grid", "save_grid_overlay"]

# row palette (BGR)
PALETTE = [
    (64,  64, 255),
    (72, 180, 255),
    (64, 240, 240),
    (64, 220,  64),
    (220, 220, 64),
    (255,  96, 64),
    (255,  64, 255),
]


def to_bgr(g: np.ndarray) -> np.ndarray:
    return cv2.cvtColor(g, cv2.COLOR_GRAY2BGR) if g.ndim == 2 else g.copy()


def annotate_text(img, text, xy, color=(0, 0, 255), font_scale=0.4, thick=1):
    x, y = int(round(xy[0])), int(round(xy[1]))
    cv2.putText(img, str(text), (x + 1, y + 1),
                cv2.FONT_HERSHEY_SIMPLEX, font_scale, (0, 0, 0), thick + 2, cv2.LINE_AA)
    cv2.putText(img, str(text), (x, y),
                cv2.FONT_HERSHEY_SIMPLEX, font_scale, color, thick, cv2.LINE_AA)


def draw_polyline(img, pts, color, width=2, alpha=0.85):
    if len(pts) < 2:
        return
    overlay = img.copy()
    poly = np.round(np.asarray(pts, np.float64)).astype(np.int32).reshape(-1, 1, 2)
    cv2.polylines(overlay, [poly], False, (0, 0, 0), width + 3, cv2.LINE_AA)
    cv2.polylines(overlay, [poly], False, color, width, cv2.LINE_AA)
    cv2.addWeighted(overlay, alpha, img, 1 - alpha, 0, img)


def draw_dashed(img, p, q, color=(200, 200, 200), width=1, dash=9, gap=8, alpha=0.5):
    p = np.array(p, np.float64); q = np.array(q, np.float64)
    v = q - p; L = np.linalg.norm(v) + 1e-9; d = v / L
    nseg = int(L // (dash + gap)) + 1
    overlay = img.copy()
    for i in range(nseg):
        a = p + d * min(i * (dash + gap), L)
        b = p + d * min(i * (dash + gap) + dash, L)
        cv2.line(overlay, (int(a[0]), int(a[1])), (int(b[0]), int(b[1])),
                 color, width, cv2.LINE_AA)
    cv2.addWeighted(overlay, alpha, img, 1 - alpha, 0, img)


def draw_grid(gray: np.ndarray, grid: Optional[np.ndarray],
              candidates: Optional[Sequence[Tuple[float, float]]] = None,
              label: bool = True) -> np.ndarray:
    """Candidates as grey dots, the ordered grid as one coloured line per row."""
    canvas = to_bgr(gray)
    if candidates is not None:
        for x, y in np.asarray(candidates, np.float64).reshape(-1, 2):
            cv2.circle(canvas, (int(round(x)), int(round(y))), 2, (160, 160, 160), -1, cv2.LINE_AA)
    if grid is None:
        return canvas

    rows = np.asarray(grid, np.float64).reshape(NWANT, NWANT, 2)
    for r, pts in enumerate(rows):
        draw_polyline(canvas, pts, PALETTE[r % len(PALETTE)])
        if r < NWANT - 1:
            draw_dashed(canvas, pts[-1], rows[r + 1][0], (220, 220, 220), alpha=0.45)
        for c, (x, y) in enumerate(pts):
            cv2.circle(canvas, (int(round(x)), int(round(y))), 2, (0, 255, 0), -1, cv2.LINE_AA)
            if label:
                annotate_text(canvas, r * NWANT + c, (x + 4, y - 4))
    return canvas


def save_grid_overlay(out_dir: str, base: str, gray: np.ndarray,
                      grid: Optional[np.ndarray], candidates=None) -> str:
    os.makedirs(out_dir, exist_ok=True)
    path = os.path.join(out_dir, f"{base}_grid.png")
    cv2.imwrite(path, draw_grid(gray, grid, candidates))
    return path
