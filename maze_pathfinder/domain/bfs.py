"""Breadth-first search."""

from collections import deque
from typing import Deque, Dict, List, Optional, Set

from .types import Coord, PathfindingResult
from .neighbors import get_neighbors
from .base import SearchAlgorithm


class BreadthFirstSearch(SearchAlgorithm):
    """
    FIFO level-order search.

    Cells are marked seen when enqueued and the goal test happens when a cell
    is dequeued, so the end cell is reached only after every closer cell has
    been expanded. Weights are ignored; the reported cost is the number of
    moves on the path.
    """

    algorithm_id = "bfs"
    display_name = "BFS"

    def _setup(self):
        self.queue: Deque[Coord] = deque([self.start])
        self.seen: Set[Coord] = {self.start}
        self.depth: Dict[Coord, int] = {self.start: 0}

    def _step(self) -> Optional[PathfindingResult]:
        if not self.queue:
            return self._finish(False)

        current = self.queue.popleft()
        if current == self.end:
            return self._finish(True, cost=self.depth[current])

        self._expand(current)
        for neighbor in get_neighbors(current, self.grid):
            if neighbor in self.seen:
                continue
            self.seen.add(neighbor)
            self.predecessors[neighbor] = current
            self.depth[neighbor] = self.depth[current] + 1
            self.queue.append(neighbor)

        return None

    def get_frontier_coords(self) -> List[Coord]:
        return list(self.queue)
