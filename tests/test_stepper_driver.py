import pytest

from autodialer.communication.serial_manager import SerialResponse
from autodialer.control.dial_controller import DialController
from autodialer.control.stepper_driver import SerialStepperDriver, SimulatedStepperDriver
from autodialer.errors import MotorCommandError
from conftest import CW


class FakeSerialManager:
    def __init__(self, failing=()):
        self.failing = set(failing)
        self.sent = []

    async def send_command(self, command, data=None, timeout=5.0):
        self.sent.append((command, data, timeout))
        if command in self.failing:
            return SerialResponse(False, error=f"{command} rejected")
        return SerialResponse(True, raw_response="OK")


class TestSerialStepperDriver:
    @pytest.mark.asyncio
    async def test_configuration_commands(self):
        manager = FakeSerialManager()
        driver = SerialStepperDriver(manager, command_timeout=2.0)

        await driver.set_max_speed(4000.0)
        await driver.set_acceleration(40000.0)
        await driver.set_current_position(0)

        assert manager.sent == [
            ("SPEED", {"speed": 4000}, 2.0),
            ("ACCEL", {"acceleration": 40000}, 2.0),
            ("SETPOS", {"position": 0}, 2.0),
        ]

    @pytest.mark.asyncio
    async def test_move_waits_with_run_timeout(self):
        manager = FakeSerialManager()
        driver = SerialStepperDriver(manager, command_timeout=2.0, run_timeout=30.0)

        await driver.move(-1600)
        await driver.run_to_position()

        assert manager.sent == [("MOVE", {"steps": -1600}, 2.0), ("RUN", {}, 30.0)]

    @pytest.mark.asyncio
    async def test_rejected_command_raises(self):
        driver = SerialStepperDriver(FakeSerialManager(failing={"MOVE"}))

        with pytest.raises(MotorCommandError):
            await driver.move(16)

    @pytest.mark.asyncio
    async def test_dial_controller_over_serial(self, state):
        manager = FakeSerialManager()
        controller = DialController(state, SerialStepperDriver(manager))
        state.calibrate(0)

        await controller.rotate_full(CW)

        assert [command for command, _, _ in manager.sent] == ["MOVE", "RUN"]
        assert manager.sent[0][1] == {"steps": 1600}

    @pytest.mark.asyncio
    async def test_failed_run_keeps_model(self, state):
        controller = DialController(state, SerialStepperDriver(FakeSerialManager(failing={"RUN"})))
        state.calibrate(20)

        with pytest.raises(MotorCommandError):
            await controller.rotate_dial(70, CW)

        assert state.dial_position == 20
        assert all(disk.position is None for disk in state.disks)


class TestSimulatedStepperDriver:
    @pytest.mark.asyncio
    async def test_records_completed_moves(self):
        driver = SimulatedStepperDriver()

        await driver.move(80)
        await driver.run_to_position()
        await driver.move(-1600)
        await driver.run_to_position()

        assert driver.steps == [80, -1600]
        assert driver.position == -1520

    @pytest.mark.asyncio
    async def test_move_without_run_does_not_move(self):
        driver = SimulatedStepperDriver()

        await driver.move(80)

        assert driver.position == 0
        assert driver.moves == []
