"""
Lock State Model

Holds everything the controller knows about the lock: the dial position,
the last known position and rotation sense of each of the three fence
disks, and the brute-force start offset.
"""

from typing import Dict, Any, Iterable, List, Optional
from dataclasses import dataclass
from enum import Enum


DIAL_POSITIONS = 100
DISK_COUNT = 3


class Direction(Enum):
    """Rotation sense of the dial or a disk."""
    CLOCKWISE = "clockwise"
    COUNTER_CLOCKWISE = "counter-clockwise"

    @property
    def inverse(self) -> 'Direction':
        if self is Direction.CLOCKWISE:
            return Direction.COUNTER_CLOCKWISE
        return Direction.CLOCKWISE


@dataclass
class DiskState:
    """Last known state of a single fence disk."""
    index: int
    position: Optional[int] = None
    direction: Optional[Direction] = None

    @property
    def is_known(self) -> bool:
        return self.position is not None

    def update(self, position: int, direction: Direction):
        self.position = position
        self.direction = direction

    def __str__(self) -> str:
        position = "<unknown>" if self.position is None else str(self.position)
        direction = "<unknown>" if self.direction is None else self.direction.value
        return f"Disk {self.index} currently at position {position} with rotation mode {direction}."


class LockState:
    """
    Volatile model of the lock mechanics.

    Disk 0 is driven directly by the dial, disk i is driven through disk i-1.
    Nothing here is persisted: after a restart every field is unknown again
    and the dial must be zeroed before it can be moved.
    """

    def __init__(self):
        self.dial_position: Optional[int] = None
        self.disks: List[DiskState] = [DiskState(index) for index in range(DISK_COUNT)]
        self.start_offset = 0

    def is_calibrated(self) -> bool:
        """Check whether the dial position is known."""
        return self.dial_position is not None

    def calibrate(self, position: int = 0):
        """Declare the current physical dial angle to be ``position``."""
        validate_position(position)
        self.dial_position = position

    def disk(self, index: int) -> DiskState:
        """Get the state of disk ``index`` (0-2)."""
        if not (0 <= index < DISK_COUNT):
            raise IndexError(f"Invalid disk index: {index}. Must be 0-{DISK_COUNT - 1}.")
        return self.disks[index]

    def commit_rotation(self, position: int, direction: Direction, moving_disks: Iterable[int]):
        """Record a completed rotation ending at ``position``."""
        self.dial_position = position
        for index in moving_disks:
            self.disks[index].update(position, direction)

    def increment_start_offset(self) -> int:
        self.start_offset += 1
        return self.start_offset

    def describe(self) -> List[str]:
        """Diagnostic dump of all disks, outermost first."""
        return [str(disk) for disk in reversed(self.disks)]

    def reset(self):
        """Forget everything, as after a power cycle."""
        self.dial_position = None
        for disk in self.disks:
            disk.position = None
            disk.direction = None
        self.start_offset = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging and inspection."""
        return {
            'dial_position': self.dial_position,
            'disks': [
                {
                    'position': disk.position,
                    'direction': disk.direction.value if disk.direction else None
                }
                for disk in self.disks
            ],
            'start_offset': self.start_offset
        }


def validate_position(position: int):
    """Raise ValueError unless ``position`` is a dial graduation."""
    if not isinstance(position, int) or not (0 <= position < DIAL_POSITIONS):
        raise ValueError(f"Invalid dial position: {position}. Must be 0-{DIAL_POSITIONS - 1}.")
