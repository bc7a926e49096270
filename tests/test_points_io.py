from __future__ import annotations

import io
from pathlib import Path

import numpy as np

from gridcal.utils.points_io import (parse_points, read_points, write_missing,
                                     write_points)


def test_parse_points_skips_noise() -> None:
    lines = [
        "# x y\n",
        "1.5 2.5\n",
        "\n",
        "3 4 extra columns\n",
        "only_one\n",
        "a b\n",
        "nan 1\n",
        "-7.25   8e1\n",
    ]
    xy = parse_points(lines)
    assert xy.shape == (3, 2)
    assert np.allclose(xy, [[1.5, 2.5], [3.0, 4.0], [-7.25, 80.0]])


def test_parse_points_empty() -> None:
    assert parse_points([]).shape == (0, 2)


def test_read_points(tmp_path: Path) -> None:
    path = tmp_path / "pts.vnl"
    path.write_text("# x y\n10 20\n30 40\n")
    xy = read_points(path)
    assert xy is not None
    assert xy.tolist() == [[10.0, 20.0], [30.0, 40.0]]

    assert read_points(tmp_path / "missing.vnl") is None


def test_write_points_and_missing() -> None:
    buf = io.StringIO()
    write_points(buf, np.array([[1.0, 2.5]]))
    write_points(buf, [[3, 4]], prefix="img.png")
    write_missing(buf, "other.png")
    assert buf.getvalue().splitlines() == [
        "1.000000 2.500000",
        "img.png 3.000000 4.000000",
        "other.png - -",
    ]
