# tests/test_maze_serialization.py

import json

import pytest

from maze_pathfinder.errors import InvalidConfiguration
from maze_pathfinder.utils.grid_factory import grid_from_rows, create_empty_grid
from maze_pathfinder.utils.maze_serialization import (
    MazeData, extract_maze_from_grid, apply_maze_to_grid, grid_from_maze,
    save_maze, load_maze, generate_maze_filename,
)

LAYOUT = [
    "S.#..",
    ".4#..",
    ".....",
    ".#.#.",
    "....E",
]


def test_extract_reads_endpoints_from_node_states() -> None:
    grid, _, _ = grid_from_rows(LAYOUT)

    maze = extract_maze_from_grid(grid, name="demo")

    assert maze.size == 5
    assert maze.start == (0, 0)
    assert maze.end == (4, 4)
    assert maze.walls == [(0, 2), (1, 2), (3, 1), (3, 3)]
    assert maze.weights == {(1, 1): 4}


def test_save_and_load(tmp_path) -> None:
    grid, start, end = grid_from_rows(LAYOUT)
    maze = extract_maze_from_grid(grid, start, end, name="demo")

    path = save_maze(maze, tmp_path / "nested" / "demo.json")
    loaded = load_maze(path)

    assert loaded == maze
    rebuilt = grid_from_maze(loaded)
    assert rebuilt.snapshot() == grid.snapshot()
    assert rebuilt.nodes[(0, 0)].state == "start"


def test_file_format(tmp_path) -> None:
    maze = MazeData(size=5, walls=[(1, 2)], start=(0, 0), end=(4, 4), weights={(2, 3): 6})
    path = save_maze(maze, tmp_path / "m.json")

    data = json.loads(path.read_text())
    assert data["walls"] == [[1, 2]]
    assert data["weights"] == [[2, 3, 6]]
    assert data["start"] == [0, 0]
    assert data["version"] == "1.0"


@pytest.mark.parametrize("payload", [
    "not json",
    "[1, 2, 3]",
    '{"walls": []}',
    '{"size": 50, "start": [0, 0], "end": [1, 1]}',
    '{"size": 5, "walls": [[9, 9]], "start": [0, 0], "end": [1, 1]}',
    '{"size": 5, "weights": [[0, 0, 12]], "start": [0, 0], "end": [1, 1]}',
    '{"size": 5, "walls": [[1]], "start": [0, 0], "end": [1, 1]}',
])
def test_malformed_files_raise_invalid_configuration(tmp_path, payload) -> None:
    path = tmp_path / "bad.json"
    path.write_text(payload)
    with pytest.raises(InvalidConfiguration):
        load_maze(path)


def test_non_utf8_file_raises_invalid_configuration(tmp_path) -> None:
    path = tmp_path / "latin1.json"
    path.write_bytes('{"size": 5, "name": "café"}'.encode("latin-1"))
    with pytest.raises(InvalidConfiguration):
        load_maze(path)


def test_apply_requires_matching_size() -> None:
    maze = MazeData(size=6, walls=[], start=(0, 0), end=(5, 5))
    with pytest.raises(InvalidConfiguration):
        apply_maze_to_grid(maze, create_empty_grid(5))


def test_endpoints_are_never_walls() -> None:
    maze = MazeData(size=5, walls=[(0, 0), (2, 2)], start=(0, 0), end=(4, 4))
    grid = grid_from_maze(maze)
    assert grid.nodes[(0, 0)].walkable
    assert not grid.nodes[(2, 2)].walkable


def test_generate_maze_filename(tmp_path) -> None:
    maze = MazeData(size=5, walls=[], start=None, end=None, name="my maze!")
    name = generate_maze_filename(maze, tmp_path)
    assert name.parent == tmp_path
    assert name.name.startswith("my maze_")
    assert name.suffix == ".json"

    unnamed = generate_maze_filename(MazeData(size=7, walls=[], start=None, end=None), tmp_path)
    assert unnamed.name.startswith("maze_7x7_")
