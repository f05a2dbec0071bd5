"""
Control package for dial rotation, disk setting and opening attempts.
"""

from .stepper_driver import StepperDriver, SerialStepperDriver, SimulatedStepperDriver
from .dial_controller import DialController
from .combination import CombinationDialer
from .opening_probe import OpeningProbe

__all__ = [
    'StepperDriver',
    'SerialStepperDriver',
    'SimulatedStepperDriver',
    'DialController',
    'CombinationDialer',
    'OpeningProbe'
]
