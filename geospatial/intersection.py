"""
Exact Segment Crossing Test.
"""

from common.types import Position


def _cross(ux: float, uy: float, vx: float, vy: float) -> float:
    return ux * vy - uy * vx


def _on_opposite_sides(p1: Position, p2: Position, q1: Position, q2: Position) -> bool:
    """Whether ``p1`` and ``p2`` lie strictly on opposite sides of line ``q1``-``q2``."""
    qx = q2[0] - q1[0]
    qy = q2[1] - q1[1]
    side1 = _cross(p1[0] - q1[0], p1[1] - q1[1], qx, qy)
    side2 = _cross(p2[0] - q1[0], p2[1] - q1[1], qx, qy)
    return (side1 > 0 and side2 < 0) or (side1 < 0 and side2 > 0)


def segments_intersect(a: Position, b: Position, c: Position, d: Position) -> bool:
    """Test whether segment ``a``-``b`` properly crosses segment ``c``-``d``.

    Parameters
    ----------
    a, b : Position
        Endpoints of the first segment.
    c, d : Position
        Endpoints of the second segment.

    Returns
    -------
    bool
        True only for a proper crossing.

    Notes
    -----
    Parallel and collinear segments never cross. An endpoint lying exactly
    on the other segment is not a crossing either; the point-to-segment
    distance already evaluates to 0 in that case.
    """
    if _cross(d[0] - c[0], d[1] - c[1], b[0] - a[0], b[1] - a[1]) == 0:
        return False

    return _on_opposite_sides(a, b, c, d) and _on_opposite_sides(c, d, a, b)
