"""
Combination Dialer

Sets each fence disk to a combination number. Before a disk can be placed,
the dial is spun full revolutions until a direct rotation to the target
drags every disk from the dial up to the one being set.
"""

import logging

from ..errors import AlignmentError
from ..model.lock_state import Direction, validate_position
from ..model.pickup import will_pick_up_disk
from .dial_controller import DialController


SETTING_DIRECTIONS = {
    0: Direction.COUNTER_CLOCKWISE,
    1: Direction.CLOCKWISE,
    2: Direction.COUNTER_CLOCKWISE,
}


class CombinationDialer:
    """Disk setters composed into a full combination dial sequence."""

    def __init__(self, controller: DialController, max_alignment_rotations: int = 100):
        """
        Initialize combination dialer.

        Args:
            controller: Dial rotation controller
            max_alignment_rotations: Full rotations allowed per disk before
                the lock state is considered inconsistent
        """
        self.controller = controller
        self.state = controller.state
        self.max_alignment_rotations = max_alignment_rotations
        self.logger = logging.getLogger(__name__)

    async def dial_combination(self, disk2: int, disk1: int, disk0: int):
        """Dial a combination, outermost disk first."""
        await self.set_disk2(disk2)
        await self.set_disk1(disk1)
        await self.set_disk0(disk0)

    async def set_disk0(self, position: int):
        await self.set_disk(0, position)

    async def set_disk1(self, position: int):
        await self.set_disk(1, position)

    async def set_disk2(self, position: int):
        await self.set_disk(2, position)

    async def set_disk(self, disk: int, position: int):
        """
        Move ``disk`` to ``position`` in its setting direction.

        Nothing moves if the disk already rests there in that direction.

        Raises:
            AlignmentError: if the coupling chain cannot be brought into phase
        """
        validate_position(position)
        direction = SETTING_DIRECTIONS[disk]
        disk_state = self.state.disk(disk)

        if disk_state.position == position and disk_state.direction is direction:
            return

        self.logger.info(f"  Repositioning disk {disk} to {position} ({direction.value})")

        rotations = 0
        while not self.chain_engaged(disk, position, direction):
            if rotations >= self.max_alignment_rotations:
                self.logger.critical(f"Disk {disk} still not engaged after {rotations} full rotations")
                raise AlignmentError(disk, position, rotations)
            self.logger.info("    Full rotation needed")
            await self.controller.rotate_full(direction)
            rotations += 1

        await self.controller.rotate_dial(position, direction)

    def chain_engaged(self, disk: int, position: int, direction: Direction) -> bool:
        """Check a direct rotation to ``position`` drags disks 0 through ``disk``."""
        return all(
            will_pick_up_disk(self.state, index, position, direction)
            for index in range(disk + 1)
        )
