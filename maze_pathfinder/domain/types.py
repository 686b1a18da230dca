"""Core type definitions for the grid pathfinding engine."""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Literal, Dict, FrozenSet, List

from ..errors import InvalidConfiguration

# Grid positions are (row, col); row 0 is the top row
Coord = Tuple[int, int]

# Algorithm identifiers
AlgorithmId = Literal["dfs", "bfs", "dijkstra", "astar"]
ALGORITHM_IDS: Tuple[str, ...] = ("dfs", "bfs", "dijkstra", "astar")

ALGORITHM_NAMES: Dict[str, str] = {
    "dfs": "DFS",
    "bfs": "BFS",
    "dijkstra": "Dijkstra",
    "astar": "A*",
}

# Kinds of trace events handed to the rendering layer
TraceKind = Literal["visited", "path"]

# Node states for visualization
NodeState = Literal["empty", "wall", "start", "end", "visited", "path"]

MIN_GRID_SIZE = 5
MAX_GRID_SIZE = 30
DEFAULT_GRID_SIZE = 15

MIN_WEIGHT = 1
MAX_WEIGHT = 9


def check_grid_size(size: int) -> None:
    """Raise InvalidConfiguration unless size is within the supported range."""
    if not isinstance(size, int) or isinstance(size, bool):
        raise InvalidConfiguration(f"Grid size must be an integer, got {size!r}")
    if not (MIN_GRID_SIZE <= size <= MAX_GRID_SIZE):
        raise InvalidConfiguration(
            f"Grid size must be between {MIN_GRID_SIZE} and {MAX_GRID_SIZE}, got {size}"
        )


def check_weight(weight: int) -> None:
    """Raise InvalidConfiguration unless weight is a valid cell weight."""
    if not isinstance(weight, int) or isinstance(weight, bool):
        raise InvalidConfiguration(f"Cell weight must be an integer, got {weight!r}")
    if not (MIN_WEIGHT <= weight <= MAX_WEIGHT):
        raise InvalidConfiguration(
            f"Cell weight must be between {MIN_WEIGHT} and {MAX_WEIGHT}, got {weight}"
        )


@dataclass
class GridNode:
    """A single editable cell of the grid."""
    coord: Coord
    walkable: bool = True
    weight: int = 1
    state: NodeState = "empty"

    def is_passable(self) -> bool:
        """Check if this node can be traversed."""
        return self.walkable

    def reset_search_state(self):
        """Drop visited/path marks left over from a previous run."""
        if self.state in ("visited", "path"):
            self.state = "empty"


@dataclass(frozen=True)
class GridSnapshot:
    """
    Read-only view of the grid handed to a search algorithm.

    Walls are stored as a frozenset of coordinates and weights as a
    row-major tuple of tuples, so nothing an algorithm does can leak back
    into the editable grid.
    """
    size: int
    walls: FrozenSet[Coord] = frozenset()
    weights: Optional[Tuple[Tuple[int, ...], ...]] = None

    def __post_init__(self):
        check_grid_size(self.size)
        if self.weights is not None:
            if len(self.weights) != self.size or any(len(row) != self.size for row in self.weights):
                raise InvalidConfiguration(
                    f"Weight matrix must be {self.size}x{self.size}"
                )
            for row in self.weights:
                for weight in row:
                    check_weight(weight)

    def is_valid_coord(self, coord: Coord) -> bool:
        """Check if coordinate is within grid bounds."""
        row, col = coord
        return 0 <= row < self.size and 0 <= col < self.size

    def is_wall(self, coord: Coord) -> bool:
        return coord in self.walls

    def is_passable(self, coord: Coord) -> bool:
        """In bounds and not a wall."""
        return self.is_valid_coord(coord) and coord not in self.walls

    def weight(self, coord: Coord) -> int:
        """Stored traversal weight of a cell (1 when no weights were captured)."""
        if self.weights is None:
            return 1
        row, col = coord
        return self.weights[row][col]

    @property
    def cell_count(self) -> int:
        return self.size * self.size


@dataclass
class Grid:
    """Editable grid the controller mutates between runs."""
    size: int
    nodes: Dict[Coord, GridNode]

    def get_node(self, coord: Coord) -> Optional[GridNode]:
        """Get node at coordinate, returns None if out of bounds."""
        return self.nodes.get(coord)

    def set_node_state(self, coord: Coord, state: NodeState):
        """Set the display state of a node at given coordinate."""
        node = self.get_node(coord)
        if node:
            node.state = state

    def is_valid_coord(self, coord: Coord) -> bool:
        """Check if coordinate is within grid bounds."""
        row, col = coord
        return 0 <= row < self.size and 0 <= col < self.size

    def reset_pathfinding_states(self):
        """Clear visited and path marks, keeping walls, weights and endpoints."""
        for node in self.nodes.values():
            node.reset_search_state()

    def wall_coords(self) -> List[Coord]:
        return sorted(coord for coord, node in self.nodes.items() if not node.walkable)

    def snapshot(self) -> GridSnapshot:
        """Freeze the current walls and weights for one search run."""
        walls = frozenset(coord for coord, node in self.nodes.items() if not node.walkable)
        weights = tuple(
            tuple(self.nodes[(row, col)].weight for col in range(self.size))
            for row in range(self.size)
        )
        return GridSnapshot(size=self.size, walls=walls, weights=weights)


@dataclass(frozen=True)
class WeightsConfig:
    """Whether per-cell weights count as edge costs."""
    enabled: bool = False

    def weight(self, grid: GridSnapshot, coord: Coord) -> int:
        """Cost of stepping onto coord: the cell weight, or 1 when disabled."""
        if not self.enabled:
            return 1
        return grid.weight(coord)


@dataclass(frozen=True)
class TraceEvent:
    """One visitation or path notification for the rendering layer."""
    coord: Coord
    kind: TraceKind


@dataclass
class RunConfig:
    """Configuration for a pathfinding run."""
    algorithm: AlgorithmId = "dfs"
    weights_enabled: bool = False
    step_mode: bool = False

    @property
    def weights(self) -> WeightsConfig:
        return WeightsConfig(enabled=self.weights_enabled)


@dataclass
class PathfindingResult:
    """Result of a pathfinding run."""
    algorithm: str = ""
    found: bool = False
    path: List[Coord] = field(default_factory=list)
    cost: Optional[int] = None  # None for DFS and for unfound results
    nodes_explored: int = 0
    elapsed_ms: float = 0.0

    @property
    def success(self) -> bool:
        """Whether pathfinding was successful."""
        return self.found and len(self.path) > 0

    @property
    def path_length(self) -> int:
        """Number of cells on the path, start and end included."""
        return len(self.path)
