"""Exceptions raised by the pathfinding engine and run controller."""


class PathfindingError(Exception):
    """Base class for all engine errors."""


class InvalidConfiguration(PathfindingError, ValueError):
    """Start/end unset or misplaced, grid size out of range, or bad weights.

    Raised before any run starts; nothing has been mutated when it is raised.
    """


class ConcurrentRunRejected(PathfindingError, RuntimeError):
    """A request arrived while another run is still active."""
