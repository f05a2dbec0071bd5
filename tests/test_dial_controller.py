import logging

import pytest

from autodialer.control.dial_controller import DialController, dial_steps, full_rotation_steps
from autodialer.control.stepper_driver import SimulatedStepperDriver
from autodialer.errors import DialNotCalibratedError, MotorCommandError
from conftest import CCW, CW, place


class TestStepCalculation:
    @pytest.mark.parametrize("current,target,direction,expected", [
        (10, 95, CW, 240),      # clockwise through 0
        (10, 95, CCW, -1360),
        (95, 10, CW, 1360),
        (95, 10, CCW, -240),    # counter-clockwise through 0
        (5, 95, CW, 160),
        (0, 99, CW, 16),
        (99, 0, CCW, -16),
        (50, 0, CW, 800),
        (0, 50, CCW, -800),
        (42, 42, CW, 0),
        (42, 42, CCW, 0),
    ])
    def test_dial_steps(self, current, target, direction, expected):
        assert dial_steps(current, target, direction, micro_steps_factor=8) == expected

    def test_micro_steps_factor_scales_steps(self):
        assert dial_steps(10, 95, CW, micro_steps_factor=1) == 30
        assert dial_steps(10, 95, CW, micro_steps_factor=16) == 480

    def test_full_rotation_steps(self):
        assert full_rotation_steps(CW, 8) == 1600
        assert full_rotation_steps(CCW, 8) == -1600


class TestRotateDial:
    @pytest.mark.asyncio
    async def test_requires_calibration(self, controller, driver):
        with pytest.raises(DialNotCalibratedError):
            await controller.rotate_dial(10, CW)

        assert driver.moves == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("position", [-1, 100])
    async def test_rejects_positions_off_the_dial(self, controller, calibrated_state, position):
        with pytest.raises(ValueError):
            await controller.rotate_dial(position, CW)

    @pytest.mark.asyncio
    async def test_moves_motor_and_records_dial(self, controller, calibrated_state, driver):
        await controller.rotate_dial(95, CW)

        assert driver.steps == [80]
        assert calibrated_state.dial_position == 95

    @pytest.mark.asyncio
    @pytest.mark.parametrize("start,target", [(10, 95), (95, 10), (0, 50), (33, 33)])
    async def test_round_trip_returns_dial(self, controller, state, driver, start, target):
        state.calibrate(start)

        await controller.rotate_dial(target, CW)
        await controller.rotate_dial(start, CCW)

        assert state.dial_position == start
        assert sum(driver.steps) == 0

    @pytest.mark.asyncio
    async def test_disk_chain_stops_at_first_disk_left_behind(self, controller, state):
        # Disk 2 would be swept from disk 1's position, but disk 1 stays put
        place(state, 10, [(20, CW), (50, CCW), (20, CCW)])

        assert controller.moving_disks(30, CCW) == [0]

        await controller.rotate_dial(30, CCW)

        assert (state.disks[0].position, state.disks[0].direction) == (30, CCW)
        assert (state.disks[1].position, state.disks[1].direction) == (50, CCW)
        assert (state.disks[2].position, state.disks[2].direction) == (20, CCW)

    @pytest.mark.asyncio
    async def test_failed_move_leaves_state_untouched(self, state):
        class StalledDriver(SimulatedStepperDriver):
            async def run_to_position(self):
                raise MotorCommandError("RUN failed")

        controller = DialController(state, StalledDriver())
        state.calibrate(10)
        before = state.to_dict()

        with pytest.raises(MotorCommandError):
            await controller.rotate_dial(60, CCW)

        assert state.to_dict() == before


class TestRotateFull:
    @pytest.mark.asyncio
    async def test_keeps_dial_position(self, controller, state, driver):
        state.calibrate(37)

        await controller.rotate_full(CW)

        assert state.dial_position == 37
        assert driver.steps == [1600]
        assert (state.disks[0].position, state.disks[0].direction) == (37, CW)
        assert state.disks[1].position is None

    @pytest.mark.asyncio
    async def test_requires_calibration(self, controller, driver):
        with pytest.raises(DialNotCalibratedError):
            await controller.rotate_full(CCW)

        assert driver.moves == []

    @pytest.mark.asyncio
    async def test_pick_up_all_engages_every_disk(self, controller, calibrated_state, driver):
        await controller.pick_up_all()

        assert driver.steps == [-1600, -1600, -1600]
        for disk in calibrated_state.disks:
            assert (disk.position, disk.direction) == (0, CCW)


class TestRelativeMoves:
    @pytest.mark.asyncio
    async def test_quarter_and_single_steps(self, controller, calibrated_state, driver):
        await controller.rotate_by(25, CCW)
        assert calibrated_state.dial_position == 25

        await controller.rotate_by(25, CW)
        assert calibrated_state.dial_position == 0

        await controller.rotate_by(1, CW)
        assert calibrated_state.dial_position == 99

        await controller.rotate_by(1, CCW)
        assert calibrated_state.dial_position == 0

        assert driver.steps == [-400, 400, 16, -16]

    @pytest.mark.asyncio
    async def test_zero_calibrates_dial_and_motor(self, controller, state, driver):
        driver.position = 1234

        await controller.zero()

        assert state.dial_position == 0
        assert driver.position == 0


def test_disk_state_is_logged_outermost_first(controller, caplog):
    caplog.set_level(logging.INFO, logger="autodialer.control.dial_controller")

    controller.log_disk_state()

    messages = [record.getMessage() for record in caplog.records]
    assert messages == [
        "Disk 2 currently at position <unknown> with rotation mode <unknown>.",
        "Disk 1 currently at position <unknown> with rotation mode <unknown>.",
        "Disk 0 currently at position <unknown> with rotation mode <unknown>.",
    ]
