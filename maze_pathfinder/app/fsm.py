"""Finite State Machine for search run phases."""

import logging
from enum import Enum
from typing import Callable, Dict, Optional, Set, Tuple

log = logging.getLogger(__name__)


class RunState(Enum):
    """States of a pathfinding run."""
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETE = "complete"
    NO_PATH = "no_path"
    CANCELLED = "cancelled"
    ERROR = "error"


StateCallback = Callable[[Optional[dict]], None]
TransitionCallback = Callable[[RunState, RunState, Optional[dict]], None]


class RunStateMachine:
    """
    Finite State Machine for managing search run states.

    State Transitions:
    IDLE -> RUNNING (run started)
    RUNNING -> PAUSED (pause requested)
    RUNNING -> COMPLETE (path found and shown)
    RUNNING -> NO_PATH (search space exhausted)
    RUNNING -> CANCELLED (cancel requested; stops after the current step)
    RUNNING -> ERROR (algorithm raised)
    PAUSED -> RUNNING (resumed)
    PAUSED -> CANCELLED (cancel requested while paused)
    PAUSED -> IDLE (reset)
    COMPLETE, NO_PATH, CANCELLED, ERROR -> IDLE (reset or new run)
    """

    def __init__(self):
        self._current_state = RunState.IDLE
        self._state_callbacks: Dict[RunState, StateCallback] = {}
        self._transition_callbacks: Dict[Tuple[RunState, RunState], TransitionCallback] = {}
        self._valid_transitions = self._build_transition_map()

    def _build_transition_map(self) -> Dict[RunState, Set[RunState]]:
        """Build the valid state transition map."""
        return {
            RunState.IDLE: {RunState.RUNNING},
            RunState.RUNNING: {RunState.PAUSED, RunState.COMPLETE, RunState.NO_PATH,
                               RunState.CANCELLED, RunState.ERROR},
            RunState.PAUSED: {RunState.RUNNING, RunState.COMPLETE, RunState.NO_PATH,
                              RunState.CANCELLED, RunState.ERROR, RunState.IDLE},
            RunState.COMPLETE: {RunState.IDLE},
            RunState.NO_PATH: {RunState.IDLE},
            RunState.CANCELLED: {RunState.IDLE},
            RunState.ERROR: {RunState.IDLE},
        }

    @property
    def current_state(self) -> RunState:
        """Get the current state."""
        return self._current_state

    def can_transition_to(self, target_state: RunState) -> bool:
        """Check if transition to target state is valid."""
        return target_state in self._valid_transitions.get(self._current_state, set())

    def transition_to(self, target_state: RunState, context: Optional[dict] = None) -> bool:
        """
        Attempt to transition to the target state.

        Args:
            target_state: The state to transition to
            context: Optional context data for the transition

        Returns:
            True if transition was successful, False otherwise
        """
        if not self.can_transition_to(target_state):
            log.debug("Rejected transition %s -> %s",
                      self._current_state.value, target_state.value)
            return False

        old_state = self._current_state
        self._current_state = target_state
        log.debug("Run state %s -> %s", old_state.value, target_state.value)

        transition_key = (old_state, target_state)
        if transition_key in self._transition_callbacks:
            self._transition_callbacks[transition_key](old_state, target_state, context)

        if target_state in self._state_callbacks:
            self._state_callbacks[target_state](context)

        return True

    def on_state_enter(self, state: RunState, callback: StateCallback):
        """Register a callback for when entering a specific state."""
        self._state_callbacks[state] = callback

    def on_transition(self, from_state: RunState, to_state: RunState,
                      callback: TransitionCallback):
        """Register a callback for a specific state transition."""
        self._transition_callbacks[(from_state, to_state)] = callback

    def reset(self):
        """Force the state machine back to IDLE without callbacks."""
        self._current_state = RunState.IDLE

    def can_start(self) -> bool:
        return self.can_transition_to(RunState.RUNNING) and not self.is_paused()

    def can_pause(self) -> bool:
        return self.is_running()

    def can_resume(self) -> bool:
        return self.is_paused()

    def is_running(self) -> bool:
        return self._current_state == RunState.RUNNING

    def is_paused(self) -> bool:
        return self._current_state == RunState.PAUSED

    def is_active(self) -> bool:
        """A run is in flight (running or paused)."""
        return self._current_state in (RunState.RUNNING, RunState.PAUSED)

    def is_idle(self) -> bool:
        return self._current_state == RunState.IDLE

    def is_finished(self) -> bool:
        """Check if the run has ended (found, no path, cancelled, or error)."""
        return self._current_state in (RunState.COMPLETE, RunState.NO_PATH,
                                       RunState.CANCELLED, RunState.ERROR)

    def start(self, context: Optional[dict] = None) -> bool:
        return self.transition_to(RunState.RUNNING, context)

    def pause(self, context: Optional[dict] = None) -> bool:
        return self.transition_to(RunState.PAUSED, context)

    def resume(self, context: Optional[dict] = None) -> bool:
        if not self.is_paused():
            return False
        return self.transition_to(RunState.RUNNING, context)

    def complete(self, context: Optional[dict] = None) -> bool:
        return self.transition_to(RunState.COMPLETE, context)

    def fail_no_path(self, context: Optional[dict] = None) -> bool:
        return self.transition_to(RunState.NO_PATH, context)

    def cancel(self, context: Optional[dict] = None) -> bool:
        return self.transition_to(RunState.CANCELLED, context)

    def fail_error(self, context: Optional[dict] = None) -> bool:
        return self.transition_to(RunState.ERROR, context)

    def reset_to_idle(self, context: Optional[dict] = None) -> bool:
        return self.transition_to(RunState.IDLE, context)

    def get_state_description(self) -> str:
        """Get a human-readable description of the current state."""
        descriptions = {
            RunState.IDLE: "Ready to start",
            RunState.RUNNING: "Searching",
            RunState.PAUSED: "Search paused",
            RunState.COMPLETE: "Path found",
            RunState.NO_PATH: "No path exists",
            RunState.CANCELLED: "Search cancelled",
            RunState.ERROR: "Error occurred",
        }
        return descriptions.get(self._current_state, "Unknown state")
