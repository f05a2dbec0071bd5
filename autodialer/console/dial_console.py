"""
Operator Console

Maps single-character commands to dial operations. Each input line may
carry several command characters; they are executed in order.
"""

import asyncio
import logging
import sys
from collections import OrderedDict
from typing import Awaitable, Callable, Optional, Tuple

from ..control.dial_controller import DialController, QUARTER_TURN
from ..control.opening_probe import OpeningProbe
from ..errors import AutoDialerError, DialNotCalibratedError
from ..model.lock_state import Direction
from ..search.search_driver import SearchDriver


Handler = Callable[[], Awaitable[None]]


class DialConsole:
    """Single-character command console for the AutoDialer."""

    def __init__(self, controller: DialController, probe: OpeningProbe, search: SearchDriver):
        self.controller = controller
        self.probe = probe
        self.search = search
        self.state = controller.state
        self.logger = logging.getLogger(__name__)

        ccw = Direction.COUNTER_CLOCKWISE
        cw = Direction.CLOCKWISE
        self.commands: "OrderedDict[str, Tuple[str, Handler]]" = OrderedDict([
            ('1', ("One full rotation counter-clockwise", lambda: controller.rotate_full(ccw))),
            ('2', ("One full rotation clockwise", lambda: controller.rotate_full(cw))),
            ('3', ("Quarter rotation counter-clockwise", lambda: controller.rotate_by(QUARTER_TURN, ccw))),
            ('4', ("Quarter rotation clockwise", lambda: controller.rotate_by(QUARTER_TURN, cw))),
            ('5', ("Rotate one number counter-clockwise", lambda: controller.rotate_by(1, ccw))),
            ('6', ("Rotate one number clockwise", lambda: controller.rotate_by(1, cw))),
            ('p', ("Rotate counter-clockwise three times to pick up all disks", controller.pick_up_all)),
            ('0', ("Set current dial position as 0", controller.zero)),
            ('+', ("Increment start number for first disk", self._increment_start_offset)),
            ('o', ("Try opening by rotating clockwise almost one turn", probe.try_open)),
            ('s', ("Start autodialing numbers", self._start_search)),
            ('?', ("Show this help", self._show_usage)),
        ])

    def usage(self) -> str:
        lines = ["Usage:", "=================="]
        lines.extend(f"{key} - {description}" for key, (description, _) in self.commands.items())
        return "\n".join(lines)

    async def handle_command(self, key: str) -> bool:
        """
        Execute the command bound to ``key``.

        Returns:
            bool: True if the key is a known command
        """
        if key not in self.commands:
            self.logger.warning(f"Unknown command: {key!r}")
            return False

        description, handler = self.commands[key]
        self.logger.info(description)

        try:
            await handler()
        except DialNotCalibratedError as e:
            self.logger.warning(f"{e}")
        except AutoDialerError as e:
            self.logger.error(f"Command {key!r} aborted: {e}")
        return True

    async def run(self, read_line: Optional[Callable[[], str]] = None):
        """Read commands until end of input."""
        read_line = read_line or sys.stdin.readline
        print(self.usage())

        while True:
            line = await asyncio.to_thread(read_line)
            if not line:
                self.logger.info("End of input, leaving console")
                break
            for key in line.strip():
                await self.handle_command(key)

    async def _increment_start_offset(self):
        offset = self.state.increment_start_offset()
        self.logger.info(f"Start offset incremented to {offset}")

    async def _start_search(self):
        await self.search.run()

    async def _show_usage(self):
        print(self.usage())
