"""Heuristic for A* on a 4-connected grid."""

from .types import Coord


def manhattan_distance(start: Coord, target: Coord) -> int:
    """
    Manhattan (L1) distance heuristic.
    Admissible and consistent for 4-directional movement with weights >= 1.
    """
    return abs(start[0] - target[0]) + abs(start[1] - target[1])
