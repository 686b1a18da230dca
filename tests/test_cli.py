# tests/test_cli.py

import json

from maze_pathfinder.__main__ import main, format_comparison
from maze_pathfinder.domain.engine import compare
from maze_pathfinder.utils.grid_factory import grid_from_rows
from maze_pathfinder.utils.maze_serialization import extract_maze_from_grid, save_maze

LAYOUT = [
    "S....",
    ".##..",
    ".....",
    "..#..",
    "....E",
]


def write_layout(tmp_path, rows=LAYOUT):
    grid, start, end = grid_from_rows(rows)
    return save_maze(extract_maze_from_grid(grid, start, end, "cli"), tmp_path / "maze.json")


def test_compares_all_algorithms_on_a_saved_maze(tmp_path, capsys) -> None:
    path = write_layout(tmp_path)

    assert main(["--maze", str(path)]) == 0

    out = capsys.readouterr().out
    assert out.startswith("\n".join(LAYOUT))
    for name in ("DFS", "BFS", "Dijkstra", "A*"):
        assert name in out


def test_single_algorithm(tmp_path, capsys) -> None:
    path = write_layout(tmp_path)

    assert main(["--maze", str(path), "--algorithm", "astar"]) == 0

    table = capsys.readouterr().out.split("\n\n")[-1]
    assert "A*" in table
    assert "Dijkstra" not in table


def test_generated_maze_can_be_saved(tmp_path) -> None:
    target = tmp_path / "out" / "generated.json"

    assert main(["--size", "9", "--seed", "3", "--save", str(target)]) == 0

    data = json.loads(target.read_text())
    assert data["size"] == 9
    assert data["start"] is not None and data["end"] is not None


def test_random_walls_with_weights(capsys) -> None:
    assert main(["--size", "10", "--density", "0.2", "--seed", "1", "--weights"]) == 0
    assert "Cost" in capsys.readouterr().out


def test_invalid_size_exits_with_2() -> None:
    assert main(["--size", "4"]) == 2


def test_malformed_maze_file_exits_with_2(tmp_path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json")

    assert main(["--maze", str(path)]) == 2


def test_non_utf8_maze_file_exits_with_2(tmp_path) -> None:
    path = tmp_path / "latin1.json"
    path.write_bytes(b'{"size": 5, "name": "caf\xe9"}')

    assert main(["--maze", str(path)]) == 2


def test_missing_end_exits_with_2(tmp_path) -> None:
    rows = ["S" + "." * 4] + ["." * 5] * 4
    path = write_layout(tmp_path, rows)

    assert main(["--maze", str(path)]) == 2


def test_missing_maze_file_exits_with_1(tmp_path) -> None:
    assert main(["--maze", str(tmp_path / "nope.json")]) == 1


def test_format_comparison_marks_unreachable() -> None:
    grid, start, end = grid_from_rows([
        "S....",
        ".....",
        ".....",
        "....#",
        "...#E",
    ])

    table = format_comparison(compare(grid, start, end))

    rows = table.splitlines()[2:]
    assert len(rows) == 4
    assert all(" no " in row for row in rows)


def test_animated_run_prints_each_frame(qapp, tmp_path, capsys) -> None:
    path = write_layout(tmp_path)

    assert main(["--maze", str(path), "--algorithm", "bfs", "--animate"]) == 0

    out = capsys.readouterr().out
    assert "BFS: Path found! Length: 9 steps." in out
    assert "*" in out
