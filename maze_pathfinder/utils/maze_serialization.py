"""
Maze serialization utilities for saving and loading mazes.
A maze file is JSON holding the grid size, walls, weights and endpoints.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..errors import InvalidConfiguration
from ..domain.types import Coord, Grid, check_grid_size, check_weight
from .grid_factory import create_empty_grid, reset_grid

log = logging.getLogger(__name__)

FORMAT_VERSION = "1.0"


@dataclass
class MazeData:
    """Container for maze data with metadata."""
    size: int
    walls: List[Coord]
    start: Optional[Coord]
    end: Optional[Coord]
    weights: Dict[Coord, int] = field(default_factory=dict)  # only cells with weight > 1
    name: str = ""
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> Dict[str, Any]:
        """Convert maze data to dictionary for serialization."""
        return {
            "size": self.size,
            "walls": [list(coord) for coord in self.walls],
            "weights": [[row, col, weight] for (row, col), weight in sorted(self.weights.items())],
            "start": list(self.start) if self.start is not None else None,
            "end": list(self.end) if self.end is not None else None,
            "name": self.name,
            "created_at": self.created_at,
            "version": FORMAT_VERSION,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MazeData":
        """Create maze data from dictionary."""
        try:
            size = data["size"]
            check_grid_size(size)
            walls = [_coord(item, size) for item in data.get("walls", [])]
            weights = {}
            for row, col, weight in data.get("weights", []):
                check_weight(weight)
                weights[_coord((row, col), size)] = weight
            start = _coord(data["start"], size) if data.get("start") is not None else None
            end = _coord(data["end"], size) if data.get("end") is not None else None
        except InvalidConfiguration:
            raise
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidConfiguration(f"Malformed maze data: {e}") from e

        return cls(
            size=size,
            walls=walls,
            start=start,
            end=end,
            weights=weights,
            name=data.get("name", ""),
            created_at=data.get("created_at", datetime.now().isoformat()),
        )


def _coord(value, size: int) -> Coord:
    row, col = value
    if not (isinstance(row, int) and isinstance(col, int)):
        raise InvalidConfiguration(f"Coordinate {value!r} must be two integers")
    if not (0 <= row < size and 0 <= col < size):
        raise InvalidConfiguration(f"Coordinate {value!r} is outside a {size}x{size} grid")
    return (row, col)


def extract_maze_from_grid(grid: Grid, start: Optional[Coord] = None,
                           end: Optional[Coord] = None, name: str = "") -> MazeData:
    """Extract maze data from an editable grid."""
    if start is None or end is None:
        for node in grid.nodes.values():
            if node.state == "start" and start is None:
                start = node.coord
            elif node.state == "end" and end is None:
                end = node.coord

    weights = {coord: node.weight for coord, node in grid.nodes.items() if node.weight > 1}
    return MazeData(
        size=grid.size,
        walls=grid.wall_coords(),
        start=start,
        end=end,
        weights=weights,
        name=name,
    )


def apply_maze_to_grid(maze_data: MazeData, grid: Grid) -> None:
    """Overwrite an existing grid of the same size with maze data."""
    if grid.size != maze_data.size:
        raise InvalidConfiguration(
            f"Maze is {maze_data.size}x{maze_data.size} but grid is {grid.size}x{grid.size}"
        )

    reset_grid(grid)
    for coord in maze_data.walls:
        node = grid.nodes[coord]
        node.walkable = False
        node.state = "wall"
    for coord, weight in maze_data.weights.items():
        grid.nodes[coord].weight = weight

    # Endpoints are never walls
    for coord, state in ((maze_data.start, "start"), (maze_data.end, "end")):
        if coord is not None:
            node = grid.nodes[coord]
            node.walkable = True
            node.state = state


def grid_from_maze(maze_data: MazeData) -> Grid:
    """Build a fresh grid from maze data."""
    grid = create_empty_grid(maze_data.size)
    apply_maze_to_grid(maze_data, grid)
    return grid


def save_maze(maze_data: MazeData, filepath: Union[str, Path]) -> Path:
    """Save maze data to a JSON file, creating parent directories."""
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(maze_data.to_dict(), f, indent=2)
    log.info("Saved %dx%d maze to %s", maze_data.size, maze_data.size, path)
    return path


def load_maze(filepath: Union[str, Path]) -> MazeData:
    """Load maze data from a JSON file."""
    path = Path(filepath)
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidConfiguration(f"{path} is not valid JSON: {e}") from e
        except UnicodeDecodeError as e:
            raise InvalidConfiguration(f"{path} is not UTF-8 text: {e}") from e
    if not isinstance(data, dict):
        raise InvalidConfiguration(f"{path} does not contain a maze object")
    maze = MazeData.from_dict(data)
    log.debug("Loaded maze %r (%dx%d) from %s", maze.name, maze.size, maze.size, path)
    return maze


def generate_maze_filename(maze_data: MazeData, directory: Union[str, Path]) -> Path:
    """Generate a filename for a maze based on its metadata."""
    safe_name = "".join(c for c in maze_data.name if c.isalnum() or c in (" ", "-", "_")).strip()
    if not safe_name:
        safe_name = f"maze_{maze_data.size}x{maze_data.size}"

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return Path(directory) / f"{safe_name}_{timestamp}.json"
