# tests/test_fsm.py

from maze_pathfinder.app.fsm import RunStateMachine, RunState


def test_happy_path_transitions() -> None:
    fsm = RunStateMachine()
    assert fsm.is_idle()
    assert fsm.start()
    assert fsm.is_running() and fsm.is_active()
    assert fsm.pause()
    assert fsm.is_paused() and fsm.is_active()
    assert fsm.resume()
    assert fsm.complete()
    assert fsm.is_finished()
    assert fsm.reset_to_idle()


def test_invalid_transitions_are_refused() -> None:
    fsm = RunStateMachine()
    assert not fsm.complete()
    assert not fsm.pause()
    assert not fsm.resume()
    assert not fsm.cancel()
    assert fsm.current_state == RunState.IDLE

    fsm.start()
    assert not fsm.start()
    assert not fsm.reset_to_idle()


def test_cancel_from_running_and_paused() -> None:
    fsm = RunStateMachine()
    fsm.start()
    assert fsm.cancel()
    assert fsm.current_state == RunState.CANCELLED
    assert fsm.is_finished()

    fsm.reset_to_idle()
    fsm.start()
    fsm.pause()
    assert fsm.cancel()


def test_callbacks_fire_with_context() -> None:
    fsm = RunStateMachine()
    entered = []
    transitions = []
    fsm.on_state_enter(RunState.NO_PATH, entered.append)
    fsm.on_transition(RunState.RUNNING, RunState.NO_PATH,
                      lambda old, new, ctx: transitions.append((old, new)))

    fsm.start()
    fsm.fail_no_path({"result": "none"})

    assert entered == [{"result": "none"}]
    assert transitions == [(RunState.RUNNING, RunState.NO_PATH)]
    assert fsm.get_state_description() == "No path exists"
