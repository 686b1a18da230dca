"""Path reconstruction and validation."""

from typing import Dict, List, Optional
from .types import Coord, GridSnapshot, WeightsConfig
from .neighbors import edge_weight, is_adjacent


def reconstruct_path(predecessors: Dict[Coord, Optional[Coord]], end: Coord) -> List[Coord]:
    """
    Walk predecessor links back from end until a cell without one (the start).
    Returns the path from start to end, or [] when end was never reached.
    """
    if end not in predecessors:
        return []

    path = []
    current: Optional[Coord] = end
    # A well-formed chain can't be longer than the map itself
    limit = len(predecessors) + 1

    while current is not None:
        path.append(current)
        if len(path) > limit:
            raise ValueError(f"Predecessor chain from {end} contains a cycle")
        current = predecessors.get(current)

    path.reverse()
    return path


def calculate_path_cost(path: List[Coord], grid: GridSnapshot, weights: WeightsConfig) -> int:
    """Sum of edge weights along a path."""
    total_cost = 0
    for from_coord, to_coord in zip(path, path[1:]):
        total_cost += edge_weight(from_coord, to_coord, grid, weights)
    return total_cost


def validate_path(path: List[Coord], grid: GridSnapshot,
                  start: Optional[Coord] = None, end: Optional[Coord] = None) -> bool:
    """
    Validate that a path is walkable and connected.
    Every cell must be passable, every step axis-aligned, and no cell repeated.
    """
    if not path:
        return False
    if start is not None and path[0] != start:
        return False
    if end is not None and path[-1] != end:
        return False
    if len(set(path)) != len(path):
        return False

    for coord in path:
        if not grid.is_passable(coord):
            return False

    return all(is_adjacent(a, b) for a, b in zip(path, path[1:]))
