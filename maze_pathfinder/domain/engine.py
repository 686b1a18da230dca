"""Entry points for running a search over a grid snapshot."""

import logging
from typing import Callable, Dict, Generator, Iterable, Optional, Type, Union

from ..errors import InvalidConfiguration
from .types import (
    Coord, Grid, GridSnapshot, WeightsConfig, TraceEvent, PathfindingResult,
    ALGORITHM_IDS, check_grid_size,
)
from .base import SearchAlgorithm, validate_endpoints
from .trace import TraceReporter
from .dfs import DepthFirstSearch
from .bfs import BreadthFirstSearch
from .dijkstra import DijkstraSearch
from .astar import AStarSearch

log = logging.getLogger(__name__)

# Mapping from algorithm IDs to implementations
ALGORITHMS: Dict[str, Type[SearchAlgorithm]] = {
    "dfs": DepthFirstSearch,
    "bfs": BreadthFirstSearch,
    "dijkstra": DijkstraSearch,
    "astar": AStarSearch,
}

GridLike = Union[Grid, GridSnapshot]


def create_algorithm(algorithm_id: str, reporter: Optional[TraceReporter] = None) -> SearchAlgorithm:
    """Get a fresh search instance by ID."""
    try:
        algorithm_cls = ALGORITHMS[algorithm_id]
    except KeyError:
        raise InvalidConfiguration(
            f"Unknown algorithm {algorithm_id!r}; expected one of {', '.join(ALGORITHM_IDS)}"
        ) from None
    return algorithm_cls(reporter)


def as_snapshot(grid: GridLike) -> GridSnapshot:
    """Freeze an editable grid; snapshots pass through unchanged."""
    if isinstance(grid, Grid):
        check_grid_size(grid.size)
        return grid.snapshot()
    return grid


def validate_configuration(grid: GridLike, start: Optional[Coord], end: Optional[Coord],
                           algorithm: Optional[str] = None) -> GridSnapshot:
    """
    Check everything a run needs before it starts.

    Returns the snapshot to search. Raises InvalidConfiguration for an
    out-of-range grid size, unset or blocked endpoints, or an unknown
    algorithm.
    """
    snapshot = as_snapshot(grid)
    check_grid_size(snapshot.size)
    validate_endpoints(snapshot, start, end)
    if algorithm is not None and algorithm not in ALGORITHMS:
        raise InvalidConfiguration(
            f"Unknown algorithm {algorithm!r}; expected one of {', '.join(ALGORITHM_IDS)}"
        )
    return snapshot


def iter_solve(grid: GridLike, start: Coord, end: Coord, algorithm: str,
               weights: Optional[WeightsConfig] = None
               ) -> Generator[TraceEvent, None, PathfindingResult]:
    """
    Run a search one step at a time.

    Configuration is validated immediately. The returned generator yields
    each "visited" event as the search expands a cell, then one "path" event
    per path cell from start to end, and finally returns the
    PathfindingResult (available as StopIteration.value).
    """
    snapshot = validate_configuration(grid, start, end, algorithm)
    search = create_algorithm(algorithm)
    search.initialize(snapshot, start, end, weights)
    return _drive(search)


def _drive(search: SearchAlgorithm) -> Generator[TraceEvent, None, PathfindingResult]:
    reporter = search.reporter
    cursor = 0

    result = None
    while result is None:
        result = search.step()
        while cursor < len(reporter.events):
            yield reporter.events[cursor]
            cursor += 1

    if result.found:
        reporter.record_path(result.path)
        while cursor < len(reporter.events):
            yield reporter.events[cursor]
            cursor += 1

    return result


def solve(grid: GridLike, start: Coord, end: Coord, algorithm: str,
          weights: Optional[WeightsConfig] = None,
          on_event: Optional[Callable[[TraceEvent], None]] = None) -> PathfindingResult:
    """
    Run a search to completion.

    Args:
        grid: Grid or snapshot to search in (never modified)
        start: Starting coordinate
        end: Target coordinate
        algorithm: One of "dfs", "bfs", "dijkstra", "astar"
        weights: Whether cell weights count as edge costs
        on_event: Optional callback receiving every trace event in order

    Returns:
        PathfindingResult with path and statistics
    """
    steps = iter_solve(grid, start, end, algorithm, weights)
    while True:
        try:
            event = next(steps)
        except StopIteration as stop:
            result = stop.value
            break
        if on_event is not None:
            on_event(event)

    log.info("%s: found=%s path_length=%d cost=%s explored=%d (%.2f ms)",
             algorithm, result.found, result.path_length, result.cost,
             result.nodes_explored, result.elapsed_ms)
    return result


def compare(grid: GridLike, start: Coord, end: Coord,
            algorithms: Iterable[str] = ALGORITHM_IDS,
            weights: Optional[WeightsConfig] = None) -> Dict[str, PathfindingResult]:
    """Run several algorithms on the same snapshot, keyed by algorithm ID."""
    algorithms = list(algorithms)
    snapshot = validate_configuration(grid, start, end)
    for algorithm in algorithms:
        validate_configuration(snapshot, start, end, algorithm)

    results = {}
    for algorithm in algorithms:
        results[algorithm] = solve(snapshot, start, end, algorithm, weights)
    return results
