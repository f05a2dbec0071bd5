"""
Opening Probe

Blind open attempt: swing the dial almost a full turn clockwise, pause, and
swing it back. There is no sensor, so the outcome is not observable here.
"""

import asyncio
import logging

from ..model.lock_state import DIAL_POSITIONS, Direction
from .dial_controller import DialController


class OpeningProbe:
    """Performs the open-attempt gesture on the dial."""

    def __init__(self, controller: DialController, sweep: int = 5, pause_seconds: float = 0.1):
        """
        Initialize opening probe.

        Args:
            controller: Dial rotation controller
            sweep: Graduations short of a full turn for each swing
            pause_seconds: Pause before reversing
        """
        self.controller = controller
        self.state = controller.state
        self.sweep = sweep
        self.pause_seconds = pause_seconds
        self.logger = logging.getLogger(__name__)

    async def try_open(self):
        """Swing clockwise, pause, then swing back to the starting graduation."""
        start = self.controller.require_calibrated()
        self.logger.debug(f"Trying to open from position {start}")

        await self.controller.rotate_dial(
            (start + self.sweep) % DIAL_POSITIONS,
            Direction.CLOCKWISE
        )
        await asyncio.sleep(self.pause_seconds)
        await self.controller.rotate_dial(
            (self.state.dial_position + DIAL_POSITIONS - self.sweep) % DIAL_POSITIONS,
            Direction.COUNTER_CLOCKWISE
        )
