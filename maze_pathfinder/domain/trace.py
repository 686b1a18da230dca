"""Trace recording for incremental rendering of a search run."""

import logging
import time
from typing import Callable, List, Optional

from .types import Coord, TraceEvent, TraceKind

log = logging.getLogger(__name__)

TraceListener = Callable[[TraceEvent], None]


class TraceReporter:
    """
    Accumulates visitation order and path events for one run.

    Listeners are called synchronously as each event is recorded; they
    survive reset() so a renderer can stay subscribed across runs.
    """

    def __init__(self):
        self._listeners: List[TraceListener] = []
        self.reset()

    def reset(self):
        """Discard the previous run's trace."""
        self.events: List[TraceEvent] = []
        self._started_at: Optional[float] = None
        self.elapsed_ms = 0.0

    def subscribe(self, listener: TraceListener):
        """Register a callback for every recorded event."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: TraceListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def start_timer(self):
        self._started_at = time.perf_counter()
        self.elapsed_ms = 0.0

    def stop_timer(self) -> float:
        """Freeze and return wall-clock time since start_timer, in milliseconds."""
        if self._started_at is not None:
            self.elapsed_ms = (time.perf_counter() - self._started_at) * 1000.0
            self._started_at = None
        return self.elapsed_ms

    def record_visit(self, coord: Coord):
        self._record(TraceEvent(coord, "visited"))

    def record_path_cell(self, coord: Coord):
        self._record(TraceEvent(coord, "path"))

    def record_path(self, path: List[Coord]):
        """Record the final route, start first."""
        for coord in path:
            self.record_path_cell(coord)

    def _record(self, event: TraceEvent):
        self.events.append(event)
        for listener in list(self._listeners):
            listener(event)

    def coords_of(self, kind: TraceKind) -> List[Coord]:
        return [event.coord for event in self.events if event.kind == kind]

    @property
    def visited_count(self) -> int:
        return sum(1 for event in self.events if event.kind == "visited")

    def metrics(self) -> dict:
        """Counts and timing for a comparison table or status line."""
        return {
            "visited": self.visited_count,
            "path_cells": len(self.events) - self.visited_count,
            "events": len(self.events),
            "elapsed_ms": self.elapsed_ms,
        }
