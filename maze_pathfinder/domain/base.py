"""Shared step protocol for the grid search algorithms."""

import logging
from typing import Dict, List, Optional, Set

from ..errors import InvalidConfiguration, PathfindingError
from .types import Coord, GridSnapshot, WeightsConfig, PathfindingResult
from .path import reconstruct_path
from .trace import TraceReporter

log = logging.getLogger(__name__)


def validate_endpoints(grid: GridSnapshot, start: Optional[Coord], end: Optional[Coord]):
    """Raise InvalidConfiguration unless start and end are distinct open cells."""
    if start is None:
        raise InvalidConfiguration("Start point is not set")
    if end is None:
        raise InvalidConfiguration("End point is not set")
    if not grid.is_valid_coord(start):
        raise InvalidConfiguration(f"Start coordinate {start} is out of bounds")
    if not grid.is_valid_coord(end):
        raise InvalidConfiguration(f"End coordinate {end} is out of bounds")
    if grid.is_wall(start):
        raise InvalidConfiguration(f"Start position {start} is a wall")
    if grid.is_wall(end):
        raise InvalidConfiguration(f"End position {end} is a wall")
    if start == end:
        raise InvalidConfiguration("Start and end positions are the same")


class SearchAlgorithm:
    """
    Base class for step-driven grid searches.

    A run is initialize() followed by repeated step() calls. Each step expands
    at most one cell and records it on the reporter; step() returns None while
    the search continues and the final PathfindingResult once it is done.
    Subclasses implement _setup() and _step().
    """

    algorithm_id = ""
    display_name = ""

    def __init__(self, reporter: Optional[TraceReporter] = None):
        self.reporter = reporter if reporter is not None else TraceReporter()
        self.reset()

    def reset(self):
        """Reset the algorithm state."""
        self.grid: Optional[GridSnapshot] = None
        self.start: Optional[Coord] = None
        self.end: Optional[Coord] = None
        self.weights = WeightsConfig()
        self.predecessors: Dict[Coord, Optional[Coord]] = {}
        self.explored: Set[Coord] = set()
        self.current: Optional[Coord] = None
        self.result: Optional[PathfindingResult] = None
        self.reporter.reset()

    def initialize(self, grid: GridSnapshot, start: Coord, end: Coord,
                   weights: Optional[WeightsConfig] = None):
        """Validate endpoints and allocate fresh per-run state."""
        validate_endpoints(grid, start, end)

        self.reset()
        self.grid = grid
        self.start = start
        self.end = end
        self.weights = weights if weights is not None else WeightsConfig()
        self.predecessors[start] = None

        self._setup()
        self.reporter.start_timer()
        log.debug("%s initialized: start=%s end=%s size=%d weights=%s",
                  self.display_name, start, end, grid.size, self.weights.enabled)

    def step(self) -> Optional[PathfindingResult]:
        """
        Execute one step of the search.
        Returns PathfindingResult if the search is complete, None otherwise.
        """
        if self.grid is None:
            raise PathfindingError("Algorithm not initialized")
        if self.result is not None:
            return self.result

        result = self._step()
        if result is not None:
            result.elapsed_ms = self.reporter.stop_timer()
            self.result = result
            log.debug("%s finished: found=%s explored=%d cost=%s",
                      self.display_name, result.found, result.nodes_explored, result.cost)
        return result

    def run_complete(self) -> PathfindingResult:
        """
        Run the search until completion.
        Returns the final PathfindingResult.
        """
        if self.grid is None:
            raise PathfindingError("Algorithm not initialized")

        max_iterations = self.grid.cell_count * 4 + 1
        for _ in range(max_iterations):
            result = self.step()
            if result is not None:
                return result

        raise PathfindingError(
            f"{self.display_name} did not finish within {max_iterations} steps"
        )

    def is_complete(self) -> bool:
        """Check if the search has produced a result."""
        return self.result is not None

    @property
    def nodes_explored(self) -> int:
        return len(self.explored)

    def get_explored_coords(self) -> List[Coord]:
        return self.reporter.coords_of("visited")

    def _setup(self):
        raise NotImplementedError

    def _step(self) -> Optional[PathfindingResult]:
        raise NotImplementedError

    def _expand(self, coord: Coord):
        """Mark a cell as expanded and emit its visitation event."""
        self.explored.add(coord)
        self.current = coord
        self.reporter.record_visit(coord)

    def _finish(self, found: bool, cost: Optional[int] = None) -> PathfindingResult:
        path = reconstruct_path(self.predecessors, self.end) if found else []
        return PathfindingResult(
            algorithm=self.algorithm_id,
            found=found,
            path=path,
            cost=cost if found else None,
            nodes_explored=self.nodes_explored,
        )
