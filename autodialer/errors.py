"""
Exception hierarchy for the AutoDialer core.
"""


class AutoDialerError(Exception):
    """Base class for all AutoDialer errors."""


class DialNotCalibratedError(AutoDialerError):
    """Raised when a rotation is requested before the dial was zeroed."""


class AlignmentError(AutoDialerError):
    """Raised when a disk setter cannot bring the coupling chain into phase.

    The predictor and the recorded disk state disagree with the mechanics;
    retrying will not help until the lock is recalibrated.
    """

    def __init__(self, disk: int, position: int, rotations: int):
        super().__init__(
            f"Disk {disk} could not be aligned for position {position} "
            f"after {rotations} full rotations"
        )
        self.disk = disk
        self.position = position
        self.rotations = rotations


class MotorCommandError(AutoDialerError):
    """Raised when the stepper firmware rejects or drops a command."""
