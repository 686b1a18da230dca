"""Depth-first search with an explicit frame stack."""

from dataclasses import dataclass
from typing import List, Optional

from .types import Coord, PathfindingResult
from .neighbors import get_neighbors
from .base import SearchAlgorithm


@dataclass
class Frame:
    """One level of the depth-first descent: a cell and the next neighbor to try."""
    coord: Coord
    next_index: int = 0


class DepthFirstSearch(SearchAlgorithm):
    """
    Depth-first search.

    Equivalent to the recursive formulation that tries up, down, left, right
    at every cell and prepends the cell to the path when a neighbor succeeds,
    but keeps its frames on a list so large grids can't exhaust the call
    stack. Finds a path if one exists, not necessarily the shortest; no cost
    is reported.
    """

    algorithm_id = "dfs"
    display_name = "DFS"

    def _setup(self):
        self.stack: List[Frame] = []
        self.candidate: Optional[Coord] = self.start

    def _step(self) -> Optional[PathfindingResult]:
        while True:
            if self.candidate is not None:
                coord = self.candidate
                self.candidate = None

                if coord == self.end:
                    return self._finish(True)

                self._expand(coord)
                self.stack.append(Frame(coord))
                return None

            if not self.stack:
                return self._finish(False)

            frame = self.stack[-1]
            neighbors = get_neighbors(frame.coord, self.grid)
            while frame.next_index < len(neighbors):
                neighbor = neighbors[frame.next_index]
                frame.next_index += 1
                if neighbor not in self.explored:
                    self.predecessors[neighbor] = frame.coord
                    self.candidate = neighbor
                    break
            else:
                # Dead end: unwind to the caller's frame
                self.stack.pop()

    def get_stack_coords(self) -> List[Coord]:
        """Cells on the current descent, start first."""
        return [frame.coord for frame in self.stack]
