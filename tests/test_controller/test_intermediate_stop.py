"""
Intermediate Stop Strategy Tests

The strategy is a pure function of the call and the elevator statuses,
so these tests feed it plain status dicts.
"""

from simulator.core.call import Call, UP, DOWN
from controller.algorithms.intermediate_stop import IntermediateStopStrategy


def idle(elevator_id, floor):
    return {'elevator_id': elevator_id, 'state': 'IDLE', 'current_floor': floor,
            'active_call': None, 'stops': []}


def busy(elevator_id, floor, active_call):
    return {'elevator_id': elevator_id, 'state': 'BUSY', 'current_floor': floor,
            'active_call': active_call, 'stops': []}


def fleet(*statuses):
    return {status['elevator_id']: status for status in statuses}


strategy = IntermediateStopStrategy()


def test_nearest_idle_elevator_selected():
    statuses = fleet(idle(1, 1), idle(2, 5), idle(3, 9))
    assert strategy.select_elevator(Call(6, UP), statuses) == 2


def test_distance_tie_goes_to_lowest_id():
    statuses = fleet(idle(1, 4), idle(2, 8))
    assert strategy.select_elevator(Call(6, DOWN), statuses) == 1


def test_merge_preferred_over_nearer_idle_elevator():
    statuses = fleet(busy(1, 2, Call(10, UP)), idle(2, 6))
    assert strategy.select_elevator(Call(6, UP), statuses) == 1


def test_first_mergeable_elevator_wins_even_if_farther():
    statuses = fleet(busy(1, 2, Call(12, UP)), busy(2, 5, Call(12, UP)))
    assert strategy.select_elevator(Call(7, UP), statuses) == 1


def test_down_trip_absorbs_floor_below_car():
    statuses = fleet(idle(1, 3), busy(2, 9, Call(2, DOWN)))
    assert strategy.select_elevator(Call(4, DOWN), statuses) == 2


def test_opposite_direction_is_not_merged():
    statuses = fleet(busy(1, 2, Call(10, UP)), idle(2, 9))
    assert strategy.select_elevator(Call(6, DOWN), statuses) == 2


def test_floor_must_lie_strictly_between():
    statuses = fleet(busy(1, 2, Call(10, UP)), idle(2, 1))
    assert strategy.select_elevator(Call(10, UP), statuses) == 2
    assert strategy.select_elevator(Call(2, UP), statuses) == 2


def test_floor_behind_the_car_is_not_merged():
    statuses = fleet(busy(1, 6, Call(10, UP)))
    assert strategy.select_elevator(Call(4, UP), statuses) is None


def test_no_candidate_leaves_call_unassigned():
    statuses = fleet(busy(1, 2, Call(10, UP)), busy(2, 8, Call(1, DOWN)))
    assert strategy.select_elevator(Call(9, DOWN), statuses) is None
    assert strategy.select_elevator(Call(3, UP), statuses) == 1


def test_can_add_intermediate_stop_without_active_call():
    assert not IntermediateStopStrategy.can_add_intermediate_stop(idle(1, 2), Call(5, UP))
