from __future__ import annotations

import math

from domain.models import Point

SQRT1_2 = math.sqrt(0.5)


class DegenerateDirectionError(ValueError):
    """Raised when a direction is requested between two coincident points."""


def distance(a: Point, b: Point) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


def unit_direction(origin: Point, target: Point) -> Point:
    length = distance(origin, target)
    if length == 0:
        msg = f"Direction is undefined between coincident points ({origin.x}, {origin.y})"
        raise DegenerateDirectionError(msg)
    return Point((target.x - origin.x) / length, (target.y - origin.y) / length)


def perpendicular(vector: Point) -> Point:
    # Quarter turn; y axis points down on the canvas.
    return Point(-vector.y, vector.x)


def lerp(a: Point, b: Point, t: float) -> Point:
    return Point(a.x * (1 - t) + b.x * t, a.y * (1 - t) + b.y * t)


def midpoint(a: Point, b: Point) -> Point:
    return Point((a.x + b.x) / 2, (a.y + b.y) / 2)
