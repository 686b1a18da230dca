"""Dijkstra's algorithm."""

import math
from typing import Dict, List, Optional

from .types import Coord, PathfindingResult
from .neighbors import get_neighbors, edge_weight
from .priority_queue import PriorityQueue
from .base import SearchAlgorithm


class DijkstraSearch(SearchAlgorithm):
    """
    Uniform-cost search.

    Settles the unsettled cell with the smallest tentative distance each step
    (earliest insertion breaks ties) and stops as soon as the end cell is
    selected. With weights disabled every edge costs 1.
    """

    algorithm_id = "dijkstra"
    display_name = "Dijkstra"

    def _setup(self):
        self.dist: Dict[Coord, int] = {self.start: 0}
        self.open_set = PriorityQueue()
        self.open_set.put(self.start, (0,))

    def distance(self, coord: Coord) -> float:
        """Tentative distance from start; infinity when not yet reached."""
        return self.dist.get(coord, math.inf)

    def _step(self) -> Optional[PathfindingResult]:
        entry = self.open_set.get()
        if entry is None:
            # Nothing left with a finite distance
            return self._finish(False)

        current, _ = entry
        if current == self.end:
            return self._finish(True, cost=self.dist[current])

        self._expand(current)
        for neighbor in get_neighbors(current, self.grid):
            if neighbor in self.explored:
                continue

            new_dist = self.dist[current] + edge_weight(current, neighbor, self.grid, self.weights)
            if new_dist < self.distance(neighbor):
                self.dist[neighbor] = new_dist
                self.predecessors[neighbor] = current
                self.open_set.put(neighbor, (new_dist,))

        return None

    def get_open_set_coords(self) -> List[Coord]:
        return self.open_set.coords()
