"""
AutoDialer - Python Host

Drives a stepper motor mounted on the dial of a three-disk combination lock.
The host tracks the dial and the fence disks, predicts which disks a
rotation picks up, dials combinations and brute-forces the combination
space, talking to the stepper firmware over serial.
"""

__version__ = "0.1.0"
__author__ = "AutoDialer Project"

# Core system imports
from .model.lock_state import LockState, Direction
from .model.pickup import will_pick_up_disk
from .communication.serial_manager import SerialManager
from .control.stepper_driver import SerialStepperDriver, SimulatedStepperDriver
from .control.dial_controller import DialController
from .control.combination import CombinationDialer
from .control.opening_probe import OpeningProbe
from .search.search_driver import SearchDriver
from .console.dial_console import DialConsole

# Configuration and utilities
from .config.settings import Settings
from .errors import AutoDialerError, AlignmentError, DialNotCalibratedError, MotorCommandError

__all__ = [
    'LockState',
    'Direction',
    'will_pick_up_disk',
    'SerialManager',
    'SerialStepperDriver',
    'SimulatedStepperDriver',
    'DialController',
    'CombinationDialer',
    'OpeningProbe',
    'SearchDriver',
    'DialConsole',
    'Settings',
    'AutoDialerError',
    'AlignmentError',
    'DialNotCalibratedError',
    'MotorCommandError'
]
