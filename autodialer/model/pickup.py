"""
Disk Pickup Predictor

Decides whether turning the dial to a target graduation drags a given fence
disk along. A disk is dragged when its driving element (the dial for disk 0,
the next inner disk otherwise) sweeps across the disk's resting notch in the
direction that engages its pin.
"""

from typing import Optional

from .lock_state import DIAL_POSITIONS, Direction, LockState


def _rank(position: Optional[int]) -> int:
    """Ordering key for positions; unknown sorts after every graduation."""
    return DIAL_POSITIONS if position is None else position


def will_pick_up_disk(state: LockState,
                      disk: int,
                      target_position: int,
                      direction: Direction,
                      full_rotation: bool = False) -> bool:
    """
    Predict whether moving the dial to ``target_position`` moves ``disk``.

    Args:
        state: Lock state snapshot, read but never modified
        disk: Disk index (0-2)
        target_position: Dial graduation the rotation ends on
        direction: Rotation sense of the dial
        full_rotation: Treat a rotation onto the current position as a full
            revolution instead of no movement

    Returns:
        bool: True if the disk will be picked up
    """
    if disk == 0:
        start = _rank(state.dial_position)
        driving_direction = direction
    else:
        driving_disk = state.disk(disk - 1)
        start = _rank(driving_disk.position)
        driving_direction = driving_disk.direction

    own = state.disk(disk)
    position = _rank(own.position)
    riding = own.direction is direction

    if start < target_position:
        if direction is Direction.COUNTER_CLOCKWISE:
            swept = start < position < target_position
        else:
            swept = position < start or position > target_position
    elif start > target_position:
        if direction is Direction.COUNTER_CLOCKWISE:
            swept = position > start or position < target_position
        else:
            swept = target_position < position < start
    elif full_rotation:
        # A full revolution still drags whatever the driver engages
        return driving_direction is direction
    else:
        return riding

    return (swept
            or position == target_position
            or (position == start and riding))
