# tests/test_path.py

import pytest

from maze_pathfinder.domain.types import GridSnapshot, WeightsConfig
from maze_pathfinder.domain.path import reconstruct_path, calculate_path_cost, validate_path
from maze_pathfinder.utils.grid_factory import snapshot_of


def test_reconstruct_walks_predecessors_back_to_start() -> None:
    predecessors = {(0, 0): None, (0, 1): (0, 0), (1, 1): (0, 1), (1, 2): (1, 1)}
    assert reconstruct_path(predecessors, (1, 2)) == [(0, 0), (0, 1), (1, 1), (1, 2)]


def test_reconstruct_unreached_end_is_empty() -> None:
    assert reconstruct_path({(0, 0): None}, (3, 3)) == []


def test_reconstruct_single_cell() -> None:
    assert reconstruct_path({(2, 2): None}, (2, 2)) == [(2, 2)]


def test_reconstruct_detects_cycles() -> None:
    predecessors = {(0, 0): (0, 1), (0, 1): (0, 0)}
    with pytest.raises(ValueError):
        reconstruct_path(predecessors, (0, 0))


def test_path_cost_sums_destination_weights() -> None:
    grid = snapshot_of([
        "S3...",
        ".....",
        ".....",
        ".....",
        ".....",
    ])
    path = [(0, 0), (0, 1), (0, 2), (1, 2)]
    assert calculate_path_cost(path, grid, WeightsConfig(enabled=True)) == 5
    assert calculate_path_cost(path, grid, WeightsConfig(enabled=False)) == 3
    assert calculate_path_cost([(0, 0)], grid, WeightsConfig(enabled=True)) == 0


def test_validate_path() -> None:
    grid = snapshot_of([
        ".....",
        ".#...",
        ".....",
        ".....",
        ".....",
    ])
    good = [(0, 0), (0, 1), (0, 2), (1, 2)]
    assert validate_path(good, grid, start=(0, 0), end=(1, 2))

    assert not validate_path([], grid)
    assert not validate_path(good, grid, start=(0, 1))
    assert not validate_path(good, grid, end=(2, 2))
    # through a wall
    assert not validate_path([(0, 1), (1, 1), (2, 1)], grid)
    # diagonal step
    assert not validate_path([(0, 0), (1, 1)], GridSnapshot(size=5))
    # repeated cell
    assert not validate_path([(0, 0), (0, 1), (0, 0)], grid)
