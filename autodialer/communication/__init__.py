"""
Communication package for the serial link to the stepper firmware.
"""

from .serial_manager import SerialManager, SerialResponse

__all__ = ['SerialManager', 'SerialResponse']
