import pytest

from autodialer.model.pickup import will_pick_up_disk
from conftest import CCW, CW, place


class TestPickupAtTarget:
    @pytest.mark.parametrize("direction", [CW, CCW])
    @pytest.mark.parametrize("dial", [10, 70])
    def test_disk_resting_on_target_is_always_picked_up(self, state, direction, dial):
        place(state, dial, [(40, CW), (85, CCW), (40, CW)])

        assert will_pick_up_disk(state, 0, 40, direction)
        assert will_pick_up_disk(state, 2, 40, direction)

    @pytest.mark.parametrize("direction", [CW, CCW])
    def test_disk_on_target_regardless_of_driving_disk(self, state, direction):
        place(state, 10, [(85, CW), (40, CCW), (None, None)])

        assert will_pick_up_disk(state, 1, 40, direction)


class TestIntervalWithoutWrap:
    def test_counter_clockwise_picks_up_disk_inside_interval(self, state):
        place(state, 10, [(20, CW), (None, None), (None, None)])

        assert will_pick_up_disk(state, 0, 30, CCW)
        assert not will_pick_up_disk(state, 0, 30, CW)

    def test_clockwise_picks_up_disk_outside_interval(self, state):
        place(state, 10, [(50, CCW), (None, None), (None, None)])

        assert will_pick_up_disk(state, 0, 30, CW)
        assert not will_pick_up_disk(state, 0, 30, CCW)

    def test_disk_at_start_is_picked_up_only_when_riding(self, state):
        place(state, 10, [(10, CCW), (None, None), (None, None)])

        assert will_pick_up_disk(state, 0, 30, CCW)
        assert not will_pick_up_disk(state, 0, 30, CW)


class TestIntervalWithWrap:
    def test_clockwise_picks_up_disk_inside_interval(self, state):
        place(state, 80, [(50, CCW), (None, None), (None, None)])

        assert will_pick_up_disk(state, 0, 20, CW)
        assert not will_pick_up_disk(state, 0, 20, CCW)

    def test_counter_clockwise_picks_up_disk_outside_interval(self, state):
        place(state, 80, [(90, CW), (None, None), (None, None)])

        assert will_pick_up_disk(state, 0, 20, CCW)
        assert not will_pick_up_disk(state, 0, 20, CW)

    def test_outer_disk_uses_inner_disk_as_driver(self, state):
        # Disk 1 is driven from disk 0 at 80, not from the dial at 10
        place(state, 10, [(80, CW), (5, CCW), (None, None)])

        assert will_pick_up_disk(state, 1, 20, CCW)
        assert not will_pick_up_disk(state, 1, 20, CW)


class TestNoNetMovement:
    def test_without_full_rotation_only_riding_disk_moves(self, state):
        place(state, 30, [(50, CW), (None, None), (None, None)])

        assert will_pick_up_disk(state, 0, 30, CW)
        assert not will_pick_up_disk(state, 0, 30, CCW)

    def test_disk_on_target_stays_when_driver_does_not_move(self, state):
        place(state, 30, [(30, CCW), (None, None), (None, None)])

        assert not will_pick_up_disk(state, 0, 30, CW)
        assert will_pick_up_disk(state, 0, 30, CCW)

    def test_outer_disk_on_target_stays_when_driver_does_not_move(self, state):
        place(state, 10, [(30, CW), (30, CCW), (None, None)])

        assert not will_pick_up_disk(state, 1, 30, CW)
        assert will_pick_up_disk(state, 1, 30, CCW)

    @pytest.mark.parametrize("direction", [CW, CCW])
    def test_full_rotation_always_drags_first_disk(self, state, direction):
        place(state, 30, [(50, CW), (None, None), (None, None)])

        assert will_pick_up_disk(state, 0, 30, direction, full_rotation=True)

    def test_full_rotation_drags_outer_disk_when_driver_rides_along(self, state):
        place(state, 30, [(30, CW), (60, CCW), (None, None)])

        assert will_pick_up_disk(state, 1, 30, CW, full_rotation=True)
        assert not will_pick_up_disk(state, 1, 30, CCW, full_rotation=True)


class TestUnknownPositions:
    def test_unknown_disk_is_not_inside_counter_clockwise_sweep(self, calibrated_state):
        assert not will_pick_up_disk(calibrated_state, 0, 98, CCW)

    def test_unknown_disk_lies_beyond_last_graduation(self, state):
        place(state, 10, [(None, None), (None, None), (None, None)])

        assert will_pick_up_disk(state, 0, 30, CW)

    def test_unknown_driver_does_not_drag_unknown_disk(self, calibrated_state):
        assert not will_pick_up_disk(calibrated_state, 1, 0, CCW, full_rotation=True)


def test_prediction_does_not_modify_state(state):
    place(state, 80, [(90, CW), (20, CCW), (None, None)])
    before = state.to_dict()

    for disk in range(3):
        for direction in (CW, CCW):
            will_pick_up_disk(state, disk, 20, direction)
            will_pick_up_disk(state, disk, 80, direction, full_rotation=True)

    assert state.to_dict() == before
