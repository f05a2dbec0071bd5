"""
AutoDialer - Main Application

Wires the lock model, the dial controller and the search driver to the
stepper firmware (or to a simulated stepper) and hands control to the
operator console.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add the current directory to Python path for imports
sys.path.insert(0, str(Path(__file__).parent))

from autodialer import (
    LockState, SerialManager, SerialStepperDriver, SimulatedStepperDriver,
    DialController, CombinationDialer, OpeningProbe, SearchDriver, DialConsole, Settings
)
from autodialer.errors import MotorCommandError
from autodialer.utils.logging_config import setup_logging


class AutoDialerSystem:
    """Main system coordinator for the AutoDialer."""

    def __init__(self, config_file: str = "config/default_config.yaml", simulate: bool = None):
        """Initialize the AutoDialer system."""
        self.config_file = config_file
        self.simulate = simulate
        self.logger = None

        # Core components
        self.settings = None
        self.serial_manager = None
        self.driver = None
        self.state = None
        self.controller = None
        self.dialer = None
        self.probe = None
        self.search = None
        self.console = None

    async def initialize(self) -> bool:
        """Initialize all system components."""
        print("🚀 Initializing AutoDialer...")

        # 1. Load configuration
        print("📋 Loading configuration...")
        self.settings = Settings(self.config_file)
        if not self.settings.load_config():
            print("❌ Failed to load configuration")
            return False

        self.settings.load_environment_overrides()
        if self.simulate is not None:
            self.settings.motor.simulate = self.simulate

        # 2. Setup logging
        print("📝 Setting up logging...")
        if not setup_logging(
            level=self.settings.logging.level,
            log_file=self.settings.logging.log_file,
            max_file_size_mb=self.settings.logging.max_file_size_mb,
            backup_count=self.settings.logging.backup_count,
            console_output=self.settings.logging.console_output,
            detailed_format=self.settings.logging.detailed_format
        ):
            print("❌ Failed to setup logging")
            return False

        self.logger = logging.getLogger(__name__)
        self.logger.info("System initialization started")

        # 3. Stepper driver
        if self.settings.motor.simulate:
            self.logger.info("Using simulated stepper")
            self.driver = SimulatedStepperDriver()
        else:
            self.logger.info("Initializing serial communication...")
            self.serial_manager = SerialManager(
                port=self.settings.serial.port,
                baudrate=self.settings.serial.baudrate,
                timeout=self.settings.serial.timeout,
                startup_delay=self.settings.serial.startup_delay
            )
            if not await self.serial_manager.start():
                self.logger.error("Failed to start serial communication")
                return False

            self.driver = SerialStepperDriver(
                self.serial_manager,
                command_timeout=self.settings.serial.command_timeout,
                run_timeout=self.settings.serial.run_timeout
            )

        try:
            await self.driver.set_max_speed(self.settings.motor.max_speed)
            await self.driver.set_acceleration(self.settings.motor.acceleration)
        except MotorCommandError as e:
            self.logger.error(f"Failed to configure stepper: {e}")
            return False

        # 4. Lock model and dial control
        self.logger.info("Initializing dial controller...")
        self.state = LockState()
        self.controller = DialController(
            self.state,
            self.driver,
            micro_steps_factor=self.settings.motor.micro_steps_factor,
            half_steps_per_unit=self.settings.motor.half_steps_per_unit
        )
        self.dialer = CombinationDialer(
            self.controller,
            max_alignment_rotations=self.settings.dialer.max_alignment_rotations
        )
        self.probe = OpeningProbe(
            self.controller,
            sweep=self.settings.probe.sweep,
            pause_seconds=self.settings.probe.pause_seconds
        )
        self.search = SearchDriver(self.state, self.dialer, self.probe, step=self.settings.search.step)

        # 5. Console
        self.console = DialConsole(self.controller, self.probe, self.search)

        self.logger.info("✅ System initialization completed successfully")
        return True

    async def shutdown(self):
        """Close the serial link."""
        if self.logger:
            self.logger.info("🛑 Shutting down system...")

        if self.serial_manager:
            await self.serial_manager.stop()

        if self.logger:
            stats = self.serial_manager.get_stats() if self.serial_manager else None
            if stats:
                self.logger.info(f"📡 Serial: {stats['commands_sent']} commands sent, "
                                 f"{stats['responses_received']} responses received")
            self.logger.info("✅ System shutdown completed")

    async def run(self) -> bool:
        """Run the console until end of input or Ctrl+C."""
        try:
            if not await self.initialize():
                return False

            self.logger.info("📡 System ready for operation (Ctrl+C to stop)")
            await self.console.run()
            return True

        except (KeyboardInterrupt, asyncio.CancelledError):
            if self.logger:
                self.logger.info("👋 Received Ctrl+C, shutting down")
            return True
        finally:
            await self.shutdown()


async def main(argv=None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Combination lock auto dialer")
    parser.add_argument("--config", default="config/default_config.yaml",
                        help="Configuration file (YAML or JSON)")
    parser.add_argument("--simulate", action="store_true", default=None,
                        help="Use a simulated stepper instead of the serial firmware")
    args = parser.parse_args(argv)

    print("=" * 60)
    print("   AutoDialer - Combination Lock Dialer")
    print("=" * 60)

    system = AutoDialerSystem(config_file=args.config, simulate=args.simulate)
    success = await system.run()
    return 0 if success else 1


def cli():
    """Console script entry point."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    cli()
