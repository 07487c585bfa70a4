"""Axis-aligned box helpers shared by the physics and interaction passes."""

from __future__ import annotations

import math
from typing import Protocol


class BoxLike(Protocol):
    x: float
    y: float
    w: float
    h: float


def overlaps(a: BoxLike, b: BoxLike) -> bool:
    """Return ``True`` when the two boxes intersect.

    Boxes that merely share an edge do not overlap, so a box spanning
    ``0..10`` and one spanning ``10..20`` are considered apart.
    """

    return (
        a.x < b.x + b.w
        and a.x + a.w > b.x
        and a.y < b.y + b.h
        and a.y + a.h > b.y
    )


def center(box: BoxLike) -> tuple[float, float]:
    return box.x + box.w / 2, box.y + box.h / 2


def center_distance(a: BoxLike, b: BoxLike) -> float:
    ax, ay = center(a)
    bx, by = center(b)
    return math.hypot(bx - ax, by - ay)
