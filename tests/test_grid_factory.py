# tests/test_grid_factory.py

import random

import pytest

from maze_pathfinder.errors import InvalidConfiguration
from maze_pathfinder.domain.types import WeightsConfig
from maze_pathfinder.domain.engine import solve
from maze_pathfinder.domain.path import validate_path, calculate_path_cost
from maze_pathfinder.utils.grid_factory import (
    create_empty_grid, reset_grid, grid_from_rows, render_ascii, add_random_walls,
    add_random_weights, place_start_and_end, ensure_path_exists, generate_maze_grid,
    generate_random_grid, set_wall,
)

LAYOUT = [
    "S.#..",
    ".3#..",
    ".....",
    "##.#.",
    "....E",
]


def test_create_empty_grid() -> None:
    grid = create_empty_grid(7)
    assert grid.size == 7
    assert len(grid.nodes) == 49
    assert all(node.walkable and node.weight == 1 for node in grid.nodes.values())


def test_grid_from_rows_and_render_ascii() -> None:
    grid, start, end = grid_from_rows(LAYOUT)

    assert start == (0, 0)
    assert end == (4, 4)
    assert grid.wall_coords() == [(0, 2), (1, 2), (3, 0), (3, 1), (3, 3)]
    assert grid.nodes[(1, 1)].weight == 3
    assert render_ascii(grid, start, end) == "\n".join(LAYOUT)


def test_render_ascii_draws_trace() -> None:
    grid, start, end = grid_from_rows(LAYOUT)
    picture = render_ascii(grid, start, end, visited=[(1, 0), (2, 0)], path=[(2, 0)])
    assert picture.splitlines()[1] == "o3#.."
    assert picture.splitlines()[2] == "*...."


def test_grid_from_rows_rejects_bad_layouts() -> None:
    with pytest.raises(InvalidConfiguration):
        grid_from_rows(["....", "....", "....", "...."])
    with pytest.raises(InvalidConfiguration):
        grid_from_rows([".....", "....", ".....", ".....", "....."])
    with pytest.raises(InvalidConfiguration):
        grid_from_rows([".....", "..x..", ".....", ".....", "....."])


def test_reset_grid_can_preserve_walls() -> None:
    grid, _, _ = grid_from_rows(LAYOUT)
    reset_grid(grid, preserve_walls=True)
    assert len(grid.wall_coords()) == 5
    assert grid.nodes[(1, 1)].weight == 1

    reset_grid(grid)
    assert grid.wall_coords() == []


def test_add_random_walls_respects_density_and_protected_cells() -> None:
    grid = create_empty_grid(10)
    add_random_walls(grid, 0.3, random.Random(1), protected=[(0, 0), (9, 9)])

    assert len(grid.wall_coords()) == 30
    assert grid.nodes[(0, 0)].walkable
    assert grid.nodes[(9, 9)].walkable

    with pytest.raises(InvalidConfiguration):
        add_random_walls(grid, 1.5)


def test_add_random_weights_only_touches_open_cells() -> None:
    grid = create_empty_grid(10)
    set_wall(grid, (5, 5))
    add_random_weights(grid, random.Random(3), max_weight=4)

    weights = [node.weight for node in grid.nodes.values()]
    assert all(1 <= w <= 4 for w in weights)
    assert sum(1 for w in weights if w > 1) == int(99 * 0.3)
    assert grid.nodes[(5, 5)].weight == 1


def test_place_start_and_end() -> None:
    grid = create_empty_grid(5)
    start, end = place_start_and_end(grid, rng=random.Random(0))
    assert start != end
    assert grid.nodes[start].state == "start"
    assert grid.nodes[end].state == "end"

    grid = create_empty_grid(5)
    set_wall(grid, (1, 1))
    with pytest.raises(InvalidConfiguration):
        place_start_and_end(grid, start=(1, 1))
    with pytest.raises(InvalidConfiguration):
        place_start_and_end(grid, start=(0, 0), end=(0, 0))
    with pytest.raises(InvalidConfiguration):
        place_start_and_end(grid, start=(0, 0), end=(5, 0))


def test_ensure_path_exists() -> None:
    grid, start, end = grid_from_rows(LAYOUT)
    assert ensure_path_exists(grid, start, end)

    set_wall(grid, (4, 3))
    set_wall(grid, (3, 4))
    assert not ensure_path_exists(grid, start, end)


@pytest.mark.parametrize("size", [5, 8, 15, 30])
def test_generated_mazes_are_solvable_and_reproducible(size) -> None:
    grid, start, end = generate_maze_grid(size, seed=42)
    again, start_again, end_again = generate_maze_grid(size, seed=42)

    assert grid.wall_coords() == again.wall_coords()
    assert (start, end) == (start_again, end_again)
    assert start != end
    assert ensure_path_exists(grid, start, end)
    # The border is solid
    assert all(not grid.nodes[(0, col)].walkable for col in range(size))


@pytest.mark.parametrize("seed", range(12))
def test_random_grids_agree_across_algorithms(seed) -> None:
    grid, start, end = generate_random_grid(12, 0.3, seed=seed, weighted=True)
    snapshot = grid.snapshot()

    unweighted = [solve(snapshot, start, end, a).cost for a in ("bfs", "dijkstra", "astar")]
    assert unweighted[0] is not None
    assert len(set(unweighted)) == 1

    weights = WeightsConfig(enabled=True)
    dijkstra = solve(snapshot, start, end, "dijkstra", weights)
    astar = solve(snapshot, start, end, "astar", weights)
    bfs = solve(snapshot, start, end, "bfs", weights)
    dfs = solve(snapshot, start, end, "dfs", weights)

    assert dijkstra.cost == astar.cost
    assert dijkstra.cost <= calculate_path_cost(bfs.path, snapshot, weights)
    assert dijkstra.cost <= calculate_path_cost(dfs.path, snapshot, weights)
    assert validate_path(dfs.path, snapshot, start, end)
