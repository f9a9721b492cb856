import logging

from raffle.core.state import DrawState, StateMachine


def test_valid_cycle():
    machine = StateMachine()

    assert machine.transition(DrawState.SPINNING)
    assert machine.transition(DrawState.SETTLING, last_winner=4)
    assert machine.transition(DrawState.AWAITING_REFILL)
    assert machine.transition(DrawState.COMPLETE)

    assert machine.state == DrawState.COMPLETE
    assert machine.context.last_winner == 4


def test_invalid_transition_is_rejected(caplog):
    machine = StateMachine()

    with caplog.at_level(logging.WARNING):
        assert not machine.transition(DrawState.SETTLING)

    assert machine.state == DrawState.IDLE
    assert "Invalid transition: IDLE -> SETTLING" in caplog.text


def test_cannot_spin_twice():
    machine = StateMachine()
    machine.transition(DrawState.SPINNING)

    assert not machine.can_transition(DrawState.SPINNING)


def test_complete_is_terminal():
    machine = StateMachine(DrawState.COMPLETE)
    for state in DrawState:
        assert not machine.can_transition(state)


def test_listeners_receive_transitions():
    machine = StateMachine()
    seen = []
    listener = lambda old, new, ctx: seen.append((old, new))
    machine.add_listener(listener)

    machine.transition(DrawState.SPINNING)
    machine.remove_listener(listener)
    machine.transition(DrawState.SETTLING)

    assert seen == [(DrawState.IDLE, DrawState.SPINNING)]


def test_failing_listener_does_not_block_transition(caplog):
    machine = StateMachine()
    seen = []

    def broken(old, new, ctx):
        raise RuntimeError("boom")

    machine.add_listener(broken)
    machine.add_listener(lambda old, new, ctx: seen.append(new))

    with caplog.at_level(logging.ERROR):
        assert machine.transition(DrawState.SPINNING)

    assert seen == [DrawState.SPINNING]
    assert "boom" in caplog.text


def test_reset_from_any_state():
    machine = StateMachine()
    machine.transition(DrawState.SPINNING)
    machine.context.data["x"] = 1

    machine.reset(generation=3)

    assert machine.state == DrawState.IDLE
    assert machine.context.generation == 3
    assert machine.context.data == {}
