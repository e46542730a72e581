"""
Call Registry Tests

Dedup across pending and in-service calls, removal on dispatch, and the
hall button ON/OFF messages.
"""

import pytest

from simulator.core.call import Call, UP, DOWN


def test_call_rejects_invalid_values():
    with pytest.raises(ValueError):
        Call(0, UP)
    with pytest.raises(ValueError):
        Call(3, "SIDEWAYS")
    with pytest.raises(ValueError):
        Call("3", UP)


def test_calls_with_same_floor_and_direction_are_equal():
    assert Call(4, UP) == Call(4, UP)
    assert Call(4, UP) != Call(4, DOWN)
    assert len({Call(4, UP), Call(4, UP), Call(4, DOWN)}) == 2


def test_submit_same_call_twice_while_pending(registry):
    assert registry.submit(Call(5, UP)) is True
    assert registry.submit(Call(5, UP)) is False
    assert registry.pending == [Call(5, UP)]


def test_opposite_direction_is_a_different_call(registry):
    registry.submit(Call(5, UP))
    assert registry.submit(Call(5, DOWN)) is True
    assert registry.pending == [Call(5, UP), Call(5, DOWN)]


def test_submit_same_call_while_active(registry):
    call = Call(7, DOWN)
    registry.submit(call)
    registry.remove_pending(call)
    registry.activate(2, call)

    assert registry.submit(Call(7, DOWN)) is False
    assert registry.pending == []
    assert registry.active_call(2) == call


def test_submit_same_call_while_merged(registry):
    registry.activate(1, Call(10, UP))
    registry.merge(1, Call(6, UP))

    assert registry.submit(Call(6, UP)) is False
    assert registry.is_registered(Call(6, UP))


def test_primary_call_rejected_until_trip_released(registry):
    call = Call(3, UP)
    registry.activate(1, call)
    registry.serve(1, call)

    assert registry.submit(call) is False
    assert registry.pending == []

    registry.release(1)
    assert registry.submit(call) is True
    assert registry.pending == [call]


def test_merged_stop_accepted_again_after_served(registry):
    registry.activate(1, Call(10, UP))
    registry.merge(1, Call(6, UP))
    registry.serve(1, Call(6, UP))

    assert registry.submit(Call(6, UP)) is True


def test_remove_pending_keeps_arrival_order(registry):
    for floor in (2, 8, 4):
        registry.submit(Call(floor, UP))
    registry.remove_pending(Call(8, UP))
    assert registry.pending == [Call(2, UP), Call(4, UP)]


def test_release_clears_active_slot(registry):
    registry.activate(3, Call(9, DOWN))
    registry.release(3)
    assert registry.active_call(3) is None
    assert registry.active_calls == [None, None, None]


def test_activate_outside_fleet_fails_loudly(registry):
    with pytest.raises(AssertionError):
        registry.activate(4, Call(2, UP))


def test_hall_button_messages(env, broker, registry):
    on_pipe = broker.get_pipe("hall_button/floor_6/new_hall_call")
    off_pipe = broker.get_pipe("hall_button/floor_6/call_off")

    call = Call(6, DOWN)
    registry.submit(call)
    registry.submit(call)
    registry.activate(2, call)
    registry.serve(2, call)

    assert on_pipe.items == [{"timestamp": 0, "floor": 6, "direction": DOWN}]
    assert len(off_pipe.items) == 1
    assert off_pipe.items[0]["serviced_by"] == "Elevator_2"
    assert off_pipe.items[0]["action"] == "OFF"
