"""Neighbor generation and edge costs on a 4-connected grid."""

from typing import List, Tuple
from .types import Coord, GridSnapshot, WeightsConfig

# Enumeration order is up, down, left, right. DFS traces depend on it.
DIRECTIONS: Tuple[Tuple[int, int], ...] = (
    (-1, 0),  # up
    (1, 0),   # down
    (0, -1),  # left
    (0, 1),   # right
)


def get_neighbors(coord: Coord, grid: GridSnapshot) -> List[Coord]:
    """
    Get passable axis-aligned neighbors of a coordinate.
    Out-of-bounds cells and walls are skipped; order follows DIRECTIONS.
    """
    row, col = coord
    neighbors = []

    for d_row, d_col in DIRECTIONS:
        new_coord = (row + d_row, col + d_col)
        if grid.is_passable(new_coord):
            neighbors.append(new_coord)

    return neighbors


def edge_weight(from_coord: Coord, to_coord: Coord, grid: GridSnapshot,
                weights: WeightsConfig) -> int:
    """
    Cost of moving between two adjacent coordinates.
    The destination's weight is charged when weights are enabled, 1 otherwise.
    """
    if not is_adjacent(from_coord, to_coord):
        raise ValueError(f"Invalid movement from {from_coord} to {to_coord}")
    return weights.weight(grid, to_coord)


def is_adjacent(a: Coord, b: Coord) -> bool:
    """True when a and b share an edge (no diagonals)."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1
