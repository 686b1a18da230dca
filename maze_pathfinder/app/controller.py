"""Run controller connecting a rendering layer to the search engine."""

import logging
from typing import List, Optional

from PySide6.QtCore import QObject, QTimer, Signal

from ..errors import ConcurrentRunRejected, InvalidConfiguration
from ..domain.types import (
    Grid, Coord, RunConfig, PathfindingResult, TraceEvent,
    ALGORITHM_IDS, ALGORITHM_NAMES, DEFAULT_GRID_SIZE, check_grid_size, check_weight,
)
from ..domain.base import SearchAlgorithm
from ..domain.engine import create_algorithm, validate_configuration
from ..domain.trace import TraceReporter
from ..utils.grid_factory import create_empty_grid, generate_maze_grid, generate_random_grid
from ..utils.maze_serialization import MazeData, extract_maze_from_grid, grid_from_maze
from .fsm import RunStateMachine, RunState

log = logging.getLogger(__name__)

MIN_INTERVAL_MS = 10
MAX_INTERVAL_MS = 1000
DEFAULT_INTERVAL_MS = 50


class PathfinderController(QObject):
    """
    Controller that owns the editable grid and drives one search at a time.

    The controller, not the algorithm, owns the driving loop: a QTimer calls
    step_run() once per tick, and every visited or path cell is announced
    through trace_event so a view can paint it before the next step runs.

    Signals:
        state_changed: Emitted when the run state changes
        trace_event: Emitted for every visited/path cell, in order
        run_completed: Emitted with the PathfindingResult when a run finishes
        grid_updated: Emitted when the grid needs to be redrawn
        error_occurred: Emitted when an error occurs
    """

    state_changed = Signal(object)  # RunState
    trace_event = Signal(object)  # TraceEvent
    run_completed = Signal(object)  # PathfindingResult
    grid_updated = Signal()
    error_occurred = Signal(str)

    def __init__(self, size: int = DEFAULT_GRID_SIZE, parent: Optional[QObject] = None):
        super().__init__(parent)

        self._reporter = TraceReporter()
        self._reporter.subscribe(self._on_trace_event)
        self._algorithm: Optional[SearchAlgorithm] = None
        self._state_machine = RunStateMachine()
        self._grid: Optional[Grid] = None
        self._start_coord: Optional[Coord] = None
        self._end_coord: Optional[Coord] = None
        self._config = RunConfig()

        self._result: Optional[PathfindingResult] = None
        self._found_result: Optional[PathfindingResult] = None
        self._pending_path: List[Coord] = []
        self._in_step = False
        self._cancel_requested = False

        # Timer for run mode
        self._timer = QTimer(self)
        self._timer.timeout.connect(self._on_timer_tick)
        self._timer_interval = DEFAULT_INTERVAL_MS

        self._setup_state_callbacks()
        self.create_new_grid(size)

    def _setup_state_callbacks(self):
        """Setup callbacks for state machine transitions."""
        self._state_machine.on_state_enter(RunState.RUNNING, self._on_running_entered)
        self._state_machine.on_state_enter(RunState.PAUSED, self._on_stopped_entered)
        self._state_machine.on_state_enter(RunState.IDLE, self._on_stopped_entered)
        self._state_machine.on_state_enter(RunState.COMPLETE, self._on_finished_entered)
        self._state_machine.on_state_enter(RunState.NO_PATH, self._on_finished_entered)
        self._state_machine.on_state_enter(RunState.CANCELLED, self._on_stopped_entered)
        self._state_machine.on_state_enter(RunState.ERROR, self._on_stopped_entered)

    # Properties

    @property
    def grid(self) -> Optional[Grid]:
        return self._grid

    @property
    def start_coord(self) -> Optional[Coord]:
        return self._start_coord

    @property
    def end_coord(self) -> Optional[Coord]:
        return self._end_coord

    @property
    def config(self) -> RunConfig:
        return self._config

    @property
    def current_state(self) -> RunState:
        return self._state_machine.current_state

    @property
    def result(self) -> Optional[PathfindingResult]:
        """Result of the last finished run; None while running or after a cancel."""
        return self._result

    @property
    def trace(self) -> List[TraceEvent]:
        """Events recorded so far in the current or last run."""
        return list(self._reporter.events)

    @property
    def speed(self) -> int:
        """Get the current speed (timer interval in ms)."""
        return self._timer_interval

    @speed.setter
    def speed(self, interval_ms: int):
        """Set the speed (timer interval in ms)."""
        self._timer_interval = max(MIN_INTERVAL_MS, min(MAX_INTERVAL_MS, interval_ms))
        if self._timer.isActive():
            self._timer.setInterval(self._timer_interval)

    def is_run_active(self) -> bool:
        return self._state_machine.is_active()

    # Grid Management

    def _reject_if_active(self, action: str):
        if self._state_machine.is_active():
            log.warning("Rejected %s: a search is in progress", action)
            raise ConcurrentRunRejected(f"Cannot {action} while a search is in progress")

    def _install_grid(self, grid: Grid, start: Optional[Coord], end: Optional[Coord]):
        self._grid = grid
        self._start_coord = start
        self._end_coord = end
        self._algorithm = None
        self._result = None
        self._reporter.reset()
        if self._state_machine.is_finished():
            self._state_machine.reset_to_idle()
        self.grid_updated.emit()

    def create_new_grid(self, size: int):
        """Replace the grid with an empty one of the given size."""
        self._reject_if_active("resize the grid")
        check_grid_size(size)
        self._install_grid(create_empty_grid(size), None, None)

    def resize_grid(self, size: int):
        """Change the grid size; walls and endpoints are cleared."""
        self.create_new_grid(size)

    def clear_maze(self):
        """Remove walls, weights, endpoints and the last trace."""
        self._reject_if_active("clear the maze")
        size = self._grid.size if self._grid else DEFAULT_GRID_SIZE
        self._install_grid(create_empty_grid(size), None, None)

    def generate_maze(self, seed: Optional[int] = None, weighted: bool = False) -> bool:
        """Fill the grid with a recursive-backtracking maze."""
        self._reject_if_active("generate a maze")
        try:
            grid, start, end = generate_maze_grid(self._grid.size, seed=seed, weighted=weighted)
        except InvalidConfiguration as e:
            self.error_occurred.emit(f"Failed to generate maze: {e}")
            return False
        self._install_grid(grid, start, end)
        return True

    def generate_random_walls(self, density: float, seed: Optional[int] = None,
                              weighted: bool = False) -> bool:
        """Scatter walls at the given density, keeping start and end connected."""
        self._reject_if_active("generate walls")
        try:
            grid, start, end = generate_random_grid(
                self._grid.size, density, seed=seed, weighted=weighted
            )
        except InvalidConfiguration as e:
            self.error_occurred.emit(f"Failed to generate walls: {e}")
            return False
        self._install_grid(grid, start, end)
        return True

    def load_maze_data(self, maze_data: MazeData):
        """Replace the grid with a loaded maze."""
        self._reject_if_active("load a maze")
        self._install_grid(grid_from_maze(maze_data), maze_data.start, maze_data.end)

    def export_maze_data(self, name: str = "") -> MazeData:
        return extract_maze_from_grid(self._grid, self._start_coord, self._end_coord, name)

    def set_start(self, coord: Coord) -> bool:
        """Move the start marker; a wall or the end marker under it is cleared."""
        return self._place_endpoint(coord, "start")

    def set_end(self, coord: Coord) -> bool:
        """Move the end marker; a wall or the start marker under it is cleared."""
        return self._place_endpoint(coord, "end")

    def _place_endpoint(self, coord: Coord, which: str) -> bool:
        if not self._can_edit(coord):
            return False

        old = self._start_coord if which == "start" else self._end_coord
        if old is not None:
            self._grid.set_node_state(old, "empty")

        # Taking over the other marker's cell unsets it
        if which == "start":
            if coord == self._end_coord:
                self._end_coord = None
            self._start_coord = coord
        else:
            if coord == self._start_coord:
                self._start_coord = None
            self._end_coord = coord

        node = self._grid.get_node(coord)
        node.walkable = True
        node.state = which
        self.grid_updated.emit()
        return True

    def toggle_wall(self, coord: Coord) -> bool:
        """Add or remove a wall; start and end cells can't become walls."""
        if not self._can_edit(coord):
            return False
        if coord in (self._start_coord, self._end_coord):
            return False

        node = self._grid.get_node(coord)
        node.walkable = not node.walkable
        node.state = "empty" if node.walkable else "wall"
        self.grid_updated.emit()
        return True

    def set_weight(self, coord: Coord, weight: int) -> bool:
        """Set a cell's traversal weight (used when weights are enabled)."""
        check_weight(weight)
        if not self._can_edit(coord):
            return False
        self._grid.get_node(coord).weight = weight
        self.grid_updated.emit()
        return True

    def _can_edit(self, coord: Coord) -> bool:
        if not self._grid or not self._grid.is_valid_coord(coord):
            return False
        if self._state_machine.is_active():
            # Don't allow modifications while running
            log.debug("Ignored edit at %s during an active run", coord)
            return False
        return True

    # Run Control

    def can_start(self) -> bool:
        """Check if a run could be started right now."""
        return (not self._state_machine.is_active() and
                self._grid is not None and
                self._start_coord is not None and
                self._end_coord is not None)

    def start_run(self) -> bool:
        """
        Start the configured algorithm on a snapshot of the current grid.

        Raises:
            ConcurrentRunRejected: If a run is already running or paused
            InvalidConfiguration: If start/end are unset or the grid is invalid
        """
        if self._state_machine.is_active():
            log.warning("Rejected start: %s is already in progress",
                        ALGORITHM_NAMES.get(self._algorithm.algorithm_id, "search"))
            raise ConcurrentRunRejected("A search is already in progress")

        snapshot = validate_configuration(
            self._grid, self._start_coord, self._end_coord, self._config.algorithm
        )

        # Discard the previous run's trace and result
        if self._state_machine.is_finished():
            self._state_machine.reset_to_idle()
        self._grid.reset_pathfinding_states()
        self._result = None
        self._found_result = None
        self._pending_path = []
        self._cancel_requested = False

        self._algorithm = create_algorithm(self._config.algorithm, self._reporter)
        self._algorithm.initialize(snapshot, self._start_coord, self._end_coord,
                                   self._config.weights)
        log.info("Starting %s on %dx%d grid from %s to %s (weights %s)",
                 self._algorithm.display_name, snapshot.size, snapshot.size,
                 self._start_coord, self._end_coord,
                 "on" if self._config.weights_enabled else "off")
        self.grid_updated.emit()
        return self._state_machine.start()

    def step_run(self) -> bool:
        """
        Execute one step: expand one cell, or show one more path cell.
        Starts a run first when none is active.
        """
        if not self._state_machine.is_active():
            self.start_run()

        self._in_step = True
        try:
            if self._pending_path:
                self._advance_path_animation()
            else:
                result = self._algorithm.step()
                if result is not None:
                    self._on_search_finished(result)
        except Exception as e:
            log.exception("Search step failed")
            self._state_machine.fail_error({"error": str(e)})
            self.error_occurred.emit(f"Algorithm error: {e}")
            return False
        finally:
            self._in_step = False

        if self._cancel_requested:
            if self._state_machine.is_active():
                self._apply_cancel()
            else:
                # The step finished the run; its result stands
                self._cancel_requested = False
        self.grid_updated.emit()
        return True

    def run_to_completion(self) -> Optional[PathfindingResult]:
        """Step until the run finishes, without the timer. Returns the result."""
        if not self._state_machine.is_active():
            self.start_run()
        self._timer.stop()
        while self._state_machine.is_active():
            if not self.step_run():
                break
        return self._result

    def _on_search_finished(self, result: PathfindingResult):
        if result.found:
            # Show the route one cell per step before completing
            self._found_result = result
            self._pending_path = list(result.path)
        else:
            self._result = result
            self._state_machine.fail_no_path({"result": result})

    def _advance_path_animation(self):
        coord = self._pending_path.pop(0)
        self._reporter.record_path_cell(coord)
        if not self._pending_path:
            self._result = self._found_result
            self._found_result = None
            self._state_machine.complete({"result": self._result})

    def pause_run(self) -> bool:
        return self._state_machine.pause()

    def resume_run(self) -> bool:
        return self._state_machine.resume()

    def cancel_run(self) -> bool:
        """
        Stop the active run after its current step.
        A cancelled run produces no result.
        """
        if not self._state_machine.is_active():
            return False
        if self._in_step:
            self._cancel_requested = True
            return True
        self._apply_cancel()
        return True

    def _apply_cancel(self):
        self._cancel_requested = False
        self._pending_path = []
        self._found_result = None
        self._result = None
        log.info("Search cancelled after %d explored cells",
                 self._algorithm.nodes_explored if self._algorithm else 0)
        self._state_machine.cancel()

    def reset_run(self) -> bool:
        """Drop the current or last run and clear its marks from the grid."""
        if self._state_machine.is_running():
            self._apply_cancel()
        self._algorithm = None
        self._result = None
        self._pending_path = []
        self._reporter.reset()
        if self._grid:
            self._grid.reset_pathfinding_states()
        self.grid_updated.emit()
        return self._state_machine.reset_to_idle()

    # Configuration

    def update_config(self, **kwargs):
        """Update run configuration; takes effect on the next run."""
        if "algorithm" in kwargs and kwargs["algorithm"] not in ALGORITHM_IDS:
            raise InvalidConfiguration(f"Unknown algorithm {kwargs['algorithm']!r}")
        for key, value in kwargs.items():
            if hasattr(self._config, key) and key != "weights":
                setattr(self._config, key, value)
            else:
                log.warning("Ignoring unknown config option %r", key)

    # State Machine Callbacks

    def _on_running_entered(self, context):
        if not self._config.step_mode:
            self._timer.start(self._timer_interval)
        self.state_changed.emit(RunState.RUNNING)

    def _on_stopped_entered(self, context):
        self._timer.stop()
        self.state_changed.emit(self._state_machine.current_state)

    def _on_finished_entered(self, context):
        self._timer.stop()
        result = context.get("result") if context else None
        if result:
            log.info("%s", self.status_message())
            self.run_completed.emit(result)
        self.state_changed.emit(self._state_machine.current_state)

    def _on_timer_tick(self):
        """Called on each timer tick during run mode."""
        if self._state_machine.is_running():
            self.step_run()

    def _on_trace_event(self, event: TraceEvent):
        coord = event.coord
        if self._grid and coord != self._start_coord and coord != self._end_coord:
            self._grid.set_node_state(coord, event.kind)
        self.trace_event.emit(event)

    # Utility methods

    def get_statistics(self) -> dict:
        """Get current run statistics."""
        stats = {
            "algorithm": self._config.algorithm,
            "nodes_explored": self._algorithm.nodes_explored if self._algorithm else 0,
            "current_state": self._state_machine.current_state.value,
            "state_description": self._state_machine.get_state_description(),
        }
        stats.update(self._reporter.metrics())
        return stats

    def status_message(self) -> str:
        """One-line status text for the current state."""
        state = self._state_machine.current_state
        name = ALGORITHM_NAMES[self._config.algorithm]
        if self._algorithm is not None:
            name = self._algorithm.display_name

        if state == RunState.RUNNING:
            return f"Searching for path using {name} algorithm..."
        if state == RunState.COMPLETE and self._result:
            message = (f"Path found! Length: {self._result.path_length} steps. "
                       f"{name} explored {self._result.nodes_explored} cells.")
            if self._result.cost is not None:
                message += f" Cost: {self._result.cost}."
            return message
        if state == RunState.NO_PATH:
            return "No path exists between start and end points!"
        if state == RunState.IDLE and (self._start_coord is None or self._end_coord is None):
            return "Please set both start and end points first!"
        return self._state_machine.get_state_description()
