from __future__ import annotations

from pathlib import Path

import cv2
import numpy as np

PROJECT_ROOT = Path(__file__).resolve().parents[1]
import sys

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from gridcal.utils.detect import create_detection_config, preprocess
from gridcal.utils.images import read_gray_image
from gridcal.viz.viz_grid import draw_grid, save_grid_overlay

from grids import lattice


def test_read_gray_image_roundtrip(tmp_path: Path) -> None:
    img = np.random.randint(0, 255, size=(32, 24), dtype=np.uint8)
    target = tmp_path / "sample.png"
    assert cv2.imwrite(str(target), img)

    loaded = read_gray_image(target)
    assert loaded is not None
    assert loaded.shape == img.shape
    assert loaded.dtype == np.uint8
    assert np.mean(np.abs(loaded.astype(np.int16) - img.astype(np.int16))) < 1


def test_read_gray_image_converts_colour(tmp_path: Path) -> None:
    img = np.zeros((16, 20, 3), np.uint8)
    img[:, :, 2] = 200
    target = tmp_path / "red.png"
    assert cv2.imwrite(str(target), img)

    loaded = read_gray_image(target)
    assert loaded is not None
    assert loaded.shape == (16, 20)


def test_read_gray_image_missing_or_corrupt(tmp_path: Path) -> None:
    assert read_gray_image(tmp_path / "nope.png") is None

    junk = tmp_path / "junk.png"
    junk.write_text("this is not an image")
    assert read_gray_image(junk) is None


def test_preprocess_keeps_shape_and_dtype() -> None:
    img = np.random.randint(0, 255, size=(64, 48), dtype=np.uint8)
    out = preprocess(img, clahe=True, blur_radius=2,
                     cfg=create_detection_config(clahe_tile_grid=(4, 4)))
    assert out.shape == img.shape
    assert out.dtype == np.uint8
    assert preprocess(img) is img


def test_draw_grid_and_overlay(tmp_path: Path) -> None:
    gray = np.full((200, 200), 255, np.uint8)
    grid = lattice(spacing=15.0, origin=(20.0, 20.0))

    canvas = draw_grid(gray, grid, candidates=grid)
    assert canvas.shape == (200, 200, 3)
    assert (canvas != 255).any()

    # no grid: candidates only
    plain = draw_grid(gray, None)
    assert plain.shape == (200, 200, 3)
    assert (plain == 255).all()

    path = save_grid_overlay(str(tmp_path / "viz"), "board", gray, grid)
    assert Path(path).name == "board_grid.png"
    assert Path(path).is_file()
