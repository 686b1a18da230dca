"""Grid factory for creating, resetting, and randomizing grids."""

import logging
import random
from typing import Iterable, List, Optional, Sequence, Tuple

from ..errors import InvalidConfiguration
from ..domain.types import (
    Grid, GridNode, Coord, GridSnapshot, check_grid_size, check_weight, MAX_WEIGHT,
)
from ..domain.bfs import BreadthFirstSearch

log = logging.getLogger(__name__)

WALL_CHAR = "#"
OPEN_CHAR = "."
START_CHAR = "S"
END_CHAR = "E"
VISITED_CHAR = "o"
PATH_CHAR = "*"


def create_empty_grid(size: int) -> Grid:
    """
    Create a new empty square grid.

    Args:
        size: Side length, between MIN_GRID_SIZE and MAX_GRID_SIZE

    Returns:
        New Grid instance with all open, weight-1 nodes

    Raises:
        InvalidConfiguration: If size is out of range
    """
    check_grid_size(size)

    nodes = {}
    for row in range(size):
        for col in range(size):
            coord = (row, col)
            nodes[coord] = GridNode(coord=coord)

    return Grid(size=size, nodes=nodes)


def reset_grid(grid: Grid, preserve_walls: bool = False) -> None:
    """
    Reset a grid to empty state.

    Args:
        grid: Grid to reset
        preserve_walls: If True, keep wall positions
    """
    for node in grid.nodes.values():
        if preserve_walls and not node.walkable:
            continue
        node.state = "empty"
        node.walkable = True
        node.weight = 1


def set_wall(grid: Grid, coord: Coord, is_wall: bool = True) -> None:
    node = grid.get_node(coord)
    if node is None:
        raise InvalidConfiguration(f"Coordinate {coord} is out of bounds")
    node.walkable = not is_wall
    node.state = "wall" if is_wall else "empty"


def grid_from_rows(rows: Sequence[str]) -> Tuple[Grid, Optional[Coord], Optional[Coord]]:
    """
    Build a grid from a text layout, one string per row.

    '#' is a wall, '.' an open cell, 'S' the start, 'E' the end, and a digit
    1-9 an open cell with that weight.

    Returns:
        Tuple of (grid, start_coord, end_coord); endpoints are None if absent
    """
    size = len(rows)
    if any(len(line) != size for line in rows):
        raise InvalidConfiguration("Grid layout must be square")

    grid = create_empty_grid(size)
    start = end = None

    for row, line in enumerate(rows):
        for col, char in enumerate(line):
            coord = (row, col)
            node = grid.nodes[coord]
            if char == WALL_CHAR:
                set_wall(grid, coord)
            elif char == START_CHAR:
                start = coord
                node.state = "start"
            elif char == END_CHAR:
                end = coord
                node.state = "end"
            elif char.isdigit():
                weight = int(char)
                check_weight(weight)
                node.weight = weight
            elif char != OPEN_CHAR:
                raise InvalidConfiguration(f"Unknown layout character {char!r} at {coord}")

    return grid, start, end


def render_ascii(grid: Grid, start: Optional[Coord] = None, end: Optional[Coord] = None,
                 visited: Iterable[Coord] = (), path: Iterable[Coord] = ()) -> str:
    """Text picture of a grid with an optional trace drawn over it."""
    visited = set(visited)
    path = set(path)
    lines = []

    for row in range(grid.size):
        chars = []
        for col in range(grid.size):
            coord = (row, col)
            node = grid.nodes[coord]
            if coord == start:
                chars.append(START_CHAR)
            elif coord == end:
                chars.append(END_CHAR)
            elif not node.walkable:
                chars.append(WALL_CHAR)
            elif coord in path:
                chars.append(PATH_CHAR)
            elif coord in visited:
                chars.append(VISITED_CHAR)
            elif node.weight > 1:
                chars.append(str(node.weight))
            else:
                chars.append(OPEN_CHAR)
        lines.append("".join(chars))

    return "\n".join(lines)


def add_random_walls(grid: Grid, density: float, rng: Optional[random.Random] = None,
                     protected: Iterable[Coord] = ()) -> None:
    """
    Add random walls to the grid.

    Args:
        grid: Grid to modify
        density: Wall density (0.0 to 1.0, where 1.0 = all walls)
        rng: Random number generator to use
        protected: Coordinates that must stay open
    """
    if not (0.0 <= density <= 1.0):
        raise InvalidConfiguration(f"Density must be between 0.0 and 1.0, got {density}")

    if rng is None:
        rng = random.Random()

    protected = set(protected)
    candidates = sorted(
        coord for coord, node in grid.nodes.items()
        if node.walkable and node.state == "empty" and coord not in protected
    )
    num_walls = min(int(len(grid.nodes) * density), len(candidates))

    for coord in rng.sample(candidates, num_walls):
        set_wall(grid, coord)


def add_random_weights(grid: Grid, rng: Optional[random.Random] = None,
                       max_weight: int = MAX_WEIGHT, fraction: float = 0.3) -> None:
    """Give a fraction of open cells a random weight in [2, max_weight]."""
    check_weight(max_weight)
    if not (0.0 <= fraction <= 1.0):
        raise InvalidConfiguration(f"Fraction must be between 0.0 and 1.0, got {fraction}")
    if max_weight < 2:
        return

    if rng is None:
        rng = random.Random()

    open_coords = sorted(coord for coord, node in grid.nodes.items() if node.walkable)
    for coord in rng.sample(open_coords, int(len(open_coords) * fraction)):
        grid.nodes[coord].weight = rng.randint(2, max_weight)


def place_start_and_end(grid: Grid, start: Optional[Coord] = None,
                        end: Optional[Coord] = None,
                        rng: Optional[random.Random] = None) -> Tuple[Coord, Coord]:
    """
    Place start and end positions on the grid.

    Args:
        grid: Grid to modify
        start: Specific start coordinate (random if None)
        end: Specific end coordinate (random if None)
        rng: Random number generator to use

    Returns:
        Tuple of (start_coord, end_coord)

    Raises:
        InvalidConfiguration: If no valid positions available or positions overlap
    """
    if rng is None:
        rng = random.Random()

    passable_coords = sorted(
        coord for coord, node in grid.nodes.items()
        if node.is_passable() and node.state == "empty"
    )

    if start is None:
        if not passable_coords:
            raise InvalidConfiguration("Not enough passable positions for start and end")
        start = rng.choice(passable_coords)
    else:
        _check_placeable(grid, start, "Start")

    if end is None:
        available = [coord for coord in passable_coords if coord != start]
        if not available:
            raise InvalidConfiguration("No valid end positions available")
        end = rng.choice(available)
    else:
        _check_placeable(grid, end, "End")
        if end == start:
            raise InvalidConfiguration("Start and end positions cannot be the same")

    grid.set_node_state(start, "start")
    grid.set_node_state(end, "end")
    return start, end


def _check_placeable(grid: Grid, coord: Coord, label: str):
    if not grid.is_valid_coord(coord):
        raise InvalidConfiguration(f"{label} position {coord} is out of bounds")
    if not grid.nodes[coord].is_passable():
        raise InvalidConfiguration(f"{label} position {coord} is a wall")


def ensure_path_exists(grid: Grid, start: Coord, end: Coord) -> bool:
    """Check if end is reachable from start with 4-directional moves."""
    search = BreadthFirstSearch()
    search.initialize(grid.snapshot(), start, end)
    return search.run_complete().found


def generate_random_grid(size: int, density: float, seed: Optional[int] = None,
                         weighted: bool = False,
                         max_attempts: int = 10) -> Tuple[Grid, Coord, Coord]:
    """
    Generate a grid with scattered walls that has a path from start to end.

    Falls back to a wall-free grid if no attempt is solvable.

    Returns:
        Tuple of (grid, start_coord, end_coord)
    """
    rng = random.Random(seed)

    for attempt in range(max_attempts):
        grid = create_empty_grid(size)
        add_random_walls(grid, density, rng)
        start, end = place_start_and_end(grid, rng=rng)
        if ensure_path_exists(grid, start, end):
            break
        log.debug("Random grid attempt %d was unsolvable", attempt + 1)
    else:
        log.warning("No solvable layout after %d attempts; using an open grid", max_attempts)
        grid = create_empty_grid(size)
        start, end = place_start_and_end(grid, rng=rng)

    if weighted:
        add_random_weights(grid, rng)
    return grid, start, end


def generate_maze_grid(size: int, seed: Optional[int] = None,
                       weighted: bool = False) -> Tuple[Grid, Coord, Coord]:
    """
    Generate a maze using recursive backtracking.

    Passages are carved on the odd rows and columns, so an even-sized grid
    keeps a solid last row and column.

    Returns:
        Tuple of (grid, start_coord, end_coord)
    """
    check_grid_size(size)
    rng = random.Random(seed)

    grid = create_empty_grid(size)
    for coord in grid.nodes:
        set_wall(grid, coord)

    _carve_passages(grid, rng)
    start, end = _place_far_apart(grid, rng)

    if weighted:
        add_random_weights(grid, rng)
    return grid, start, end


def _carve_passages(grid: Grid, rng: random.Random) -> None:
    """Depth-first carving from (1, 1), moving two cells at a time."""
    limit = grid.size - 1
    start = (1, 1)
    set_wall(grid, start, False)

    stack = [start]
    visited = {start}
    directions = [(0, 2), (2, 0), (0, -2), (-2, 0)]

    while stack:
        row, col = stack[-1]

        options = []
        for d_row, d_col in directions:
            next_coord = (row + d_row, col + d_col)
            if (0 < next_coord[0] < limit and 0 < next_coord[1] < limit
                    and next_coord not in visited):
                options.append((next_coord, (row + d_row // 2, col + d_col // 2)))

        if options:
            next_coord, wall_between = rng.choice(options)
            set_wall(grid, next_coord, False)
            set_wall(grid, wall_between, False)
            visited.add(next_coord)
            stack.append(next_coord)
        else:
            stack.pop()


def _place_far_apart(grid: Grid, rng: random.Random) -> Tuple[Coord, Coord]:
    """Start in the top-left third, end as far from it as the maze allows."""
    open_cells = sorted(coord for coord, node in grid.nodes.items() if node.walkable)
    if len(open_cells) < 2:
        raise InvalidConfiguration("Not enough open cells for start and end")

    third = max(grid.size // 3, 2)
    corner_cells = [c for c in open_cells if c[0] < third and c[1] < third]
    start = rng.choice(corner_cells or open_cells)

    far_cells = [c for c in open_cells
                 if abs(c[0] - start[0]) + abs(c[1] - start[1]) > grid.size // 2]
    if far_cells:
        end = rng.choice(far_cells)
    else:
        others = [c for c in open_cells if c != start]
        end = max(others, key=lambda c: abs(c[0] - start[0]) + abs(c[1] - start[1]))

    return place_start_and_end(grid, start, end, rng)


def snapshot_of(rows: List[str]) -> GridSnapshot:
    """Snapshot of a text layout (see grid_from_rows)."""
    grid, _, _ = grid_from_rows(rows)
    return grid.snapshot()
