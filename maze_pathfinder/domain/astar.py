"""A* search with the Manhattan heuristic."""

import math
from typing import Dict, List, Optional

from .types import Coord, PathfindingResult
from .neighbors import get_neighbors, edge_weight
from .heuristics import manhattan_distance
from .priority_queue import PriorityQueue
from .base import SearchAlgorithm


class AStarSearch(SearchAlgorithm):
    """
    A* pathfinding.

    Orders the open set by f = g + h, breaking f ties on lower h (closer to
    the end) and then on insertion order. Manhattan distance is consistent on
    a 4-connected grid with weights >= 1, so a settled cell is never reopened
    and the reported g-score of the end is optimal.
    """

    algorithm_id = "astar"
    display_name = "A*"

    def _setup(self):
        self.g_score: Dict[Coord, int] = {self.start: 0}
        self.f_score: Dict[Coord, int] = {}
        self.open_set = PriorityQueue()

        h_cost = self._heuristic(self.start)
        self.f_score[self.start] = h_cost
        self.open_set.put(self.start, (h_cost, h_cost))

    def _heuristic(self, coord: Coord) -> int:
        return manhattan_distance(coord, self.end)

    def _step(self) -> Optional[PathfindingResult]:
        # Get the node with lowest f-cost
        entry = self.open_set.get()
        if entry is None:
            return self._finish(False)

        current, _ = entry
        if current == self.end:
            return self._finish(True, cost=self.g_score[current])

        self._expand(current)
        for neighbor in get_neighbors(current, self.grid):
            # Skip if already evaluated
            if neighbor in self.explored:
                continue

            tentative_g = self.g_score[current] + edge_weight(current, neighbor, self.grid, self.weights)
            if tentative_g < self.g_score.get(neighbor, math.inf):
                h_cost = self._heuristic(neighbor)
                f_cost = tentative_g + h_cost

                self.g_score[neighbor] = tentative_g
                self.f_score[neighbor] = f_cost
                self.predecessors[neighbor] = current
                self.open_set.put(neighbor, (f_cost, h_cost))

        return None

    def get_open_set_coords(self) -> List[Coord]:
        """Get all coordinates currently in the open set."""
        return self.open_set.coords()
