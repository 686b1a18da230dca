"""Priority queue for Dijkstra and A* with deterministic tie-breaking."""

import heapq
from itertools import count
from typing import Dict, List, Tuple, Optional
from dataclasses import dataclass

from .types import Coord

Priority = Tuple[int, ...]


@dataclass
class PriorityItem:
    """
    Item in the priority queue.

    Comparison order:
    1. priority tuple, element by element (lower is better)
    2. sequence number (earlier insertion wins, for determinism)
    """
    priority: Priority
    sequence: int
    coord: Coord
    removed: bool = False

    def __lt__(self, other: 'PriorityItem') -> bool:
        """Define comparison for heap ordering."""
        if self.priority != other.priority:
            return self.priority < other.priority
        return self.sequence < other.sequence


class PriorityQueue:
    """
    Binary heap keyed by coordinate.
    Updating a coordinate marks its old entry removed and pushes a new one.
    """

    def __init__(self):
        self._heap: List[PriorityItem] = []
        self._entry_finder: Dict[Coord, PriorityItem] = {}
        self._counter = count()

    def is_empty(self) -> bool:
        """Check if the queue is empty."""
        return len(self._entry_finder) == 0

    def size(self) -> int:
        """Get the number of live items in the queue."""
        return len(self._entry_finder)

    def put(self, coord: Coord, priority: Priority):
        """
        Add a coordinate or lower its priority.
        An existing entry with better or equal priority is kept as is.
        """
        existing = self._entry_finder.get(coord)
        if existing is not None:
            if existing.priority <= priority:
                return
            existing.removed = True

        entry = PriorityItem(priority, next(self._counter), coord)
        self._entry_finder[coord] = entry
        heapq.heappush(self._heap, entry)

    def get(self) -> Optional[Tuple[Coord, Priority]]:
        """
        Remove and return the coordinate with the lowest priority.
        Returns None if queue is empty.
        """
        while self._heap:
            entry = heapq.heappop(self._heap)
            if not entry.removed:
                del self._entry_finder[entry.coord]
                return (entry.coord, entry.priority)
        return None

    def peek(self) -> Optional[Tuple[Coord, Priority]]:
        """Look at the next item without removing it."""
        while self._heap:
            entry = self._heap[0]
            if not entry.removed:
                return (entry.coord, entry.priority)
            heapq.heappop(self._heap)
        return None

    def contains(self, coord: Coord) -> bool:
        """Check if a coordinate is waiting in the queue."""
        return coord in self._entry_finder

    def get_priority(self, coord: Coord) -> Optional[Priority]:
        entry = self._entry_finder.get(coord)
        return entry.priority if entry is not None else None

    def clear(self):
        """Remove all items from the queue."""
        self._heap.clear()
        self._entry_finder.clear()

    def coords(self) -> List[Coord]:
        """Coordinates currently queued, in no particular order."""
        return list(self._entry_finder)
