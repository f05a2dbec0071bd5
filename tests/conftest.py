import pytest

from autodialer.control.combination import CombinationDialer
from autodialer.control.dial_controller import DialController
from autodialer.control.opening_probe import OpeningProbe
from autodialer.control.stepper_driver import SimulatedStepperDriver
from autodialer.model.lock_state import Direction, LockState

CW = Direction.CLOCKWISE
CCW = Direction.COUNTER_CLOCKWISE


def place(state, dial, disks):
    """Set the dial and ``disks`` as [(position, direction), ...] innermost first."""
    state.dial_position = dial
    for disk, (position, direction) in zip(state.disks, disks):
        disk.position = position
        disk.direction = direction
    return state


@pytest.fixture
def state():
    return LockState()


@pytest.fixture
def calibrated_state(state):
    state.calibrate(0)
    return state


@pytest.fixture
def driver():
    return SimulatedStepperDriver()


@pytest.fixture
def controller(state, driver):
    return DialController(state, driver, micro_steps_factor=8, half_steps_per_unit=2)


@pytest.fixture
def dialer(controller):
    return CombinationDialer(controller, max_alignment_rotations=100)


@pytest.fixture
def probe(controller):
    return OpeningProbe(controller, sweep=5, pause_seconds=0)
