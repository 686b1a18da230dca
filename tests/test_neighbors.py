# tests/test_neighbors.py

import pytest

from maze_pathfinder.domain.types import GridSnapshot, WeightsConfig
from maze_pathfinder.domain.neighbors import get_neighbors, edge_weight, is_adjacent
from maze_pathfinder.domain.heuristics import manhattan_distance
from maze_pathfinder.utils.grid_factory import snapshot_of


def test_neighbors_follow_up_down_left_right_order() -> None:
    grid = GridSnapshot(size=5)
    assert get_neighbors((2, 2), grid) == [(1, 2), (3, 2), (2, 1), (2, 3)]


def test_neighbors_are_clipped_to_bounds() -> None:
    grid = GridSnapshot(size=5)
    assert get_neighbors((0, 0), grid) == [(1, 0), (0, 1)]
    assert get_neighbors((4, 4), grid) == [(3, 4), (4, 3)]


def test_neighbors_skip_walls() -> None:
    grid = snapshot_of([
        ".....",
        "..#..",
        ".#.#.",
        ".....",
        ".....",
    ])
    assert get_neighbors((2, 2), grid) == [(3, 2)]


def test_edge_weight_uses_destination_weight_only_when_enabled() -> None:
    grid = snapshot_of([
        ".7...",
        ".....",
        ".....",
        ".....",
        ".....",
    ])
    assert edge_weight((0, 0), (0, 1), grid, WeightsConfig(enabled=False)) == 1
    assert edge_weight((0, 0), (0, 1), grid, WeightsConfig(enabled=True)) == 7
    assert edge_weight((0, 1), (0, 0), grid, WeightsConfig(enabled=True)) == 1


def test_edge_weight_rejects_diagonal_moves() -> None:
    grid = GridSnapshot(size=5)
    with pytest.raises(ValueError):
        edge_weight((0, 0), (1, 1), grid, WeightsConfig())


def test_adjacency_and_manhattan() -> None:
    assert is_adjacent((1, 1), (1, 2))
    assert not is_adjacent((1, 1), (2, 2))
    assert not is_adjacent((1, 1), (1, 1))
    assert manhattan_distance((0, 0), (4, 4)) == 8
    assert manhattan_distance((3, 1), (1, 4)) == 5
