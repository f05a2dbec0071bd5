"""
Dial Rotation Controller

Turns the dial to a graduation in a given direction, predicts which fence
disks are dragged along, and records the resulting lock state once the motor
has finished moving.
"""

import logging
from typing import List

from ..errors import DialNotCalibratedError
from ..model.lock_state import DIAL_POSITIONS, DISK_COUNT, Direction, LockState, validate_position
from ..model.pickup import will_pick_up_disk
from .stepper_driver import StepperDriver


QUARTER_TURN = DIAL_POSITIONS // 4
PICK_UP_ROTATIONS = 3


def dial_steps(current: int, target: int, direction: Direction,
               micro_steps_factor: int, half_steps_per_unit: int = 2) -> int:
    """
    Signed motor steps to turn the dial from ``current`` to ``target``.

    Clockwise moves are positive and count graduations downwards, wrapping
    through 0. Counter-clockwise moves are negative and count upwards.
    A target equal to the current position needs no steps.
    """
    scale = half_steps_per_unit * micro_steps_factor
    if direction is Direction.CLOCKWISE:
        return ((current - target) % DIAL_POSITIONS) * scale
    return -((target - current) % DIAL_POSITIONS) * scale


def full_rotation_steps(direction: Direction, micro_steps_factor: int,
                        half_steps_per_unit: int = 2) -> int:
    """Signed motor steps for one complete revolution of the dial."""
    steps = DIAL_POSITIONS * half_steps_per_unit * micro_steps_factor
    return steps if direction is Direction.CLOCKWISE else -steps


class DialController:
    """
    Rotation executor for the combination lock dial.

    All rotations are sequential: the lock state is only updated after the
    stepper reports that the move has completed.
    """

    def __init__(self, state: LockState, driver: StepperDriver,
                 micro_steps_factor: int = 8, half_steps_per_unit: int = 2):
        """
        Initialize dial controller.

        Args:
            state: Lock state model, shared with the other components
            driver: Stepper driver turning the dial
            micro_steps_factor: Driver micro-stepping setting
            half_steps_per_unit: Motor half-steps per dial graduation
        """
        self.state = state
        self.driver = driver
        self.micro_steps_factor = micro_steps_factor
        self.half_steps_per_unit = half_steps_per_unit
        self.logger = logging.getLogger(__name__)

    def moving_disks(self, target_position: int, direction: Direction,
                     full_rotation: bool = False) -> List[int]:
        """
        Disks dragged by a rotation, innermost first.

        Disk i can only move if disk i-1 moves, so evaluation stops at the
        first disk that stays put.
        """
        moving = []
        for disk in range(DISK_COUNT):
            if not will_pick_up_disk(self.state, disk, target_position, direction, full_rotation):
                break
            self.logger.debug(f"    - Disk {disk} will be moved")
            moving.append(disk)
        return moving

    async def rotate_dial(self, position: int, direction: Direction):
        """
        Rotate the dial to ``position`` turning in ``direction``.

        Args:
            position: Target graduation (0-99)
            direction: Rotation sense
        """
        validate_position(position)
        current = self.require_calibrated()

        self.logger.info(f"  - {direction.value.capitalize()} rotation of dial "
                         f"from position {current} to position {position}")

        moving = self.moving_disks(position, direction)
        steps = dial_steps(current, position, direction,
                           self.micro_steps_factor, self.half_steps_per_unit)

        await self._run(steps)

        self.state.commit_rotation(position, direction, moving)
        self.log_disk_state()

    async def rotate_full(self, direction: Direction):
        """Rotate the dial one complete revolution in ``direction``."""
        current = self.require_calibrated()

        self.logger.info(f"  - Full {direction.value} rotation of dial at position {current}")

        moving = self.moving_disks(current, direction, full_rotation=True)
        steps = full_rotation_steps(direction, self.micro_steps_factor, self.half_steps_per_unit)

        await self._run(steps)

        self.state.commit_rotation(current, direction, moving)
        self.log_disk_state()

    async def rotate_by(self, units: int, direction: Direction):
        """Rotate the dial by ``units`` graduations in ``direction``."""
        current = self.require_calibrated()
        if direction is Direction.CLOCKWISE:
            target = (current - units) % DIAL_POSITIONS
        else:
            target = (current + units) % DIAL_POSITIONS
        await self.rotate_dial(target, direction)

    async def pick_up_all(self):
        """Turn counter-clockwise until every disk rides with the dial."""
        for _ in range(PICK_UP_ROTATIONS):
            await self.rotate_full(Direction.COUNTER_CLOCKWISE)

    async def zero(self):
        """Declare the current dial angle to be graduation 0."""
        await self.driver.set_current_position(0)
        self.state.calibrate(0)
        self.logger.info("Current dial position stored as 0.")

    def log_disk_state(self):
        """Log the last known state of all disks."""
        for line in self.state.describe():
            self.logger.info(line)

    def require_calibrated(self) -> int:
        """Current dial position; raises DialNotCalibratedError if unknown."""
        if not self.state.is_calibrated():
            raise DialNotCalibratedError("Dial position unknown, zero the dial first")
        return self.state.dial_position

    async def _run(self, steps: int):
        await self.driver.move(steps)
        await self.driver.run_to_position()
