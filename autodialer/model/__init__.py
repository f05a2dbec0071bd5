"""
Model package for the lock state and disk pickup prediction.
"""

from .lock_state import LockState, DiskState, Direction, DIAL_POSITIONS, DISK_COUNT
from .pickup import will_pick_up_disk

__all__ = ['LockState', 'DiskState', 'Direction', 'DIAL_POSITIONS', 'DISK_COUNT', 'will_pick_up_disk']
