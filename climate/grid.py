from __future__ import annotations

from .engines.types import Coordinate


def _half_width(size: int) -> int:
    if size < 1 or size % 2 == 0:
        raise ValueError(f"Grid size must be a positive odd number: {size}")
    return (size - 1) // 2


def build_grid(center: Coordinate, size: int, step: float) -> list[Coordinate]:
    """Return a ``size x size`` lattice of coordinates around ``center``.

    Rows follow the latitude offset, columns the longitude offset, both
    ascending, so the ``(0, 0)`` offset sits at `center_index(size)`.
    """
    half = _half_width(size)
    offsets = range(-half, half + 1)
    return [
        Coordinate.rounded(center.lat + i * step, center.lon + j * step)
        for i in offsets
        for j in offsets
    ]


def center_index(size: int) -> int:
    _half_width(size)
    return (size * size) // 2
