"""
Stepper Driver Interface

The dial is turned by a single stepper motor. The host only ever commands a
relative move and waits for it to finish; it never reads motor feedback.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from ..communication.serial_manager import SerialManager, SerialResponse
from ..errors import MotorCommandError


class StepperDriver(ABC):
    """Opaque actuator turning the dial."""

    @abstractmethod
    async def set_max_speed(self, steps_per_second: float):
        """Set the maximum speed in steps/second."""

    @abstractmethod
    async def set_acceleration(self, steps_per_second_squared: float):
        """Set the acceleration in steps/second²."""

    @abstractmethod
    async def move(self, relative_steps: int):
        """Command a signed relative move. Motion starts on run_to_position()."""

    @abstractmethod
    async def run_to_position(self):
        """Run the commanded move and return once it has completed."""

    @abstractmethod
    async def set_current_position(self, position: int):
        """Redefine the current motor position without moving."""


class SerialStepperDriver(StepperDriver):
    """
    Stepper driver backed by the microcontroller firmware.

    Every command is acknowledged with one line; RUN is acknowledged only
    once the motor has stopped.
    """

    def __init__(self, serial_manager: SerialManager,
                 command_timeout: float = 5.0,
                 run_timeout: float = 30.0):
        """
        Initialize serial stepper driver.

        Args:
            serial_manager: Connected serial manager
            command_timeout: Timeout for configuration commands in seconds
            run_timeout: Timeout for a complete move in seconds
        """
        self.serial_manager = serial_manager
        self.command_timeout = command_timeout
        self.run_timeout = run_timeout
        self.logger = logging.getLogger(__name__)

    async def set_max_speed(self, steps_per_second: float):
        await self._send("SPEED", {"speed": int(steps_per_second)})

    async def set_acceleration(self, steps_per_second_squared: float):
        await self._send("ACCEL", {"acceleration": int(steps_per_second_squared)})

    async def move(self, relative_steps: int):
        await self._send("MOVE", {"steps": int(relative_steps)})

    async def run_to_position(self):
        await self._send("RUN", {}, timeout=self.run_timeout)

    async def set_current_position(self, position: int):
        await self._send("SETPOS", {"position": int(position)})

    async def _send(self, command: str, data: dict, timeout: float = None) -> SerialResponse:
        response = await self.serial_manager.send_command(
            command,
            data,
            timeout=timeout or self.command_timeout
        )
        if not response.success:
            self.logger.error(f"Stepper command {command} failed: {response.error}")
            raise MotorCommandError(f"{command} failed: {response.error}")
        return response


@dataclass
class CompletedMove:
    """A relative move the simulated motor has carried out."""
    steps: int
    position: int


class SimulatedStepperDriver(StepperDriver):
    """In-memory stepper for dry runs and tests. Moves complete instantly."""

    def __init__(self):
        self.max_speed = 0.0
        self.acceleration = 0.0
        self.position = 0
        self.target_position = 0
        self.moves: List[CompletedMove] = []
        self.logger = logging.getLogger(__name__)

    async def set_max_speed(self, steps_per_second: float):
        self.max_speed = steps_per_second

    async def set_acceleration(self, steps_per_second_squared: float):
        self.acceleration = steps_per_second_squared

    async def move(self, relative_steps: int):
        self.target_position = self.position + relative_steps

    async def run_to_position(self):
        steps = self.target_position - self.position
        self.position = self.target_position
        self.moves.append(CompletedMove(steps=steps, position=self.position))
        self.logger.debug(f"Simulated stepper moved {steps} steps to {self.position}")

    async def set_current_position(self, position: int):
        self.position = position
        self.target_position = position

    @property
    def steps(self) -> List[int]:
        """Relative step counts of all completed moves, in order."""
        return [move.steps for move in self.moves]
