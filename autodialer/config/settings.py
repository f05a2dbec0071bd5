"""
Configuration Management System

Handles AutoDialer settings: loading from YAML or JSON, validation and
environment variable overrides.
"""

import os
import yaml
import json
import logging
from typing import Dict, Any, Optional
from dataclasses import dataclass, asdict


ENV_PREFIX = "AUTODIALER_"


@dataclass
class SerialConfig:
    """Serial communication configuration."""
    port: Optional[str] = None
    baudrate: int = 115200
    timeout: float = 1.0
    command_timeout: float = 5.0
    run_timeout: float = 30.0  # seconds allowed for one dial move
    startup_delay: float = 2.0


@dataclass
class MotorConfig:
    """Dial stepper configuration."""
    micro_steps_factor: int = 8
    half_steps_per_unit: int = 2  # half-steps per dial graduation
    max_speed: float = 4000.0  # steps/second
    acceleration: float = 40000.0  # steps/second²
    simulate: bool = False


@dataclass
class DialerConfig:
    """Disk setter configuration."""
    max_alignment_rotations: int = 100


@dataclass
class ProbeConfig:
    """Opening probe configuration."""
    sweep: int = 5  # graduations short of a full turn
    pause_seconds: float = 0.1


@dataclass
class SearchConfig:
    """Brute-force search configuration."""
    step: int = 2


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    log_file: str = "autodialer.log"
    max_file_size_mb: float = 10.0
    backup_count: int = 5
    console_output: bool = True
    detailed_format: bool = False


class Settings:
    """
    Configuration management for the AutoDialer.

    Every section is a dataclass with working defaults, so a missing
    config file only means the defaults get written out.
    """

    SECTIONS = ('serial', 'motor', 'dialer', 'probe', 'search', 'logging')

    def __init__(self, config_file: str = "config/default_config.yaml"):
        """
        Initialize settings manager.

        Args:
            config_file: Path to configuration file
        """
        self.config_file = config_file
        self.logger = logging.getLogger(__name__)

        self.serial = SerialConfig()
        self.motor = MotorConfig()
        self.dialer = DialerConfig()
        self.probe = ProbeConfig()
        self.search = SearchConfig()
        self.logging = LoggingConfig()

    def load_config(self, config_file: str = None) -> bool:
        """
        Load configuration from file.

        Args:
            config_file: Configuration file path (optional)

        Returns:
            bool: True if loaded successfully
        """
        if config_file:
            self.config_file = config_file

        if not os.path.exists(self.config_file):
            self.logger.warning(f"Config file {self.config_file} not found, using defaults")
            return self.save_config()

        try:
            with open(self.config_file, 'r') as f:
                if self._is_yaml():
                    config_data = yaml.safe_load(f) or {}
                elif self.config_file.endswith('.json'):
                    config_data = json.load(f)
                else:
                    self.logger.error(f"Unsupported config file format: {self.config_file}")
                    return False
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            self.logger.error(f"Failed to load configuration: {e}")
            return False

        self.update_from_dict(config_data)

        if not self._validate_config():
            return False

        self.logger.info(f"Configuration loaded from {self.config_file}")
        return True

    def save_config(self, config_file: str = None) -> bool:
        """
        Save current configuration to file.

        Args:
            config_file: Configuration file path (optional)

        Returns:
            bool: True if saved successfully
        """
        if config_file:
            self.config_file = config_file

        try:
            config_dir = os.path.dirname(self.config_file)
            if config_dir:
                os.makedirs(config_dir, exist_ok=True)

            if self._is_yaml():
                with open(self.config_file, 'w') as f:
                    yaml.safe_dump(self.to_dict(), f, default_flow_style=False, indent=2)
            elif self.config_file.endswith('.json'):
                with open(self.config_file, 'w') as f:
                    json.dump(self.to_dict(), f, indent=2)
            else:
                self.logger.error(f"Unsupported config file format: {self.config_file}")
                return False

        except OSError as e:
            self.logger.error(f"Failed to save configuration: {e}")
            return False

        self.logger.info(f"Configuration saved to {self.config_file}")
        return True

    def update_from_dict(self, config_dict: Dict[str, Any]):
        """Update configuration sections from a dictionary."""
        for section_name in self.SECTIONS:
            section_data = config_dict.get(section_name) or {}
            section = getattr(self, section_name)
            for key, value in section_data.items():
                if hasattr(section, key):
                    setattr(section, key, value)
                else:
                    self.logger.warning(f"Unknown setting {section_name}.{key} ignored")

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {name: asdict(getattr(self, name)) for name in self.SECTIONS}

    def load_environment_overrides(self):
        """Load configuration overrides from environment variables."""
        env = os.environ

        if ENV_PREFIX + 'SERIAL_PORT' in env:
            self.serial.port = env[ENV_PREFIX + 'SERIAL_PORT']
        if ENV_PREFIX + 'SERIAL_BAUDRATE' in env:
            self.serial.baudrate = int(env[ENV_PREFIX + 'SERIAL_BAUDRATE'])

        if ENV_PREFIX + 'LOG_LEVEL' in env:
            self.logging.level = env[ENV_PREFIX + 'LOG_LEVEL'].upper()
        if ENV_PREFIX + 'LOG_FILE' in env:
            self.logging.log_file = env[ENV_PREFIX + 'LOG_FILE']

        if ENV_PREFIX + 'SIMULATE' in env:
            self.motor.simulate = env[ENV_PREFIX + 'SIMULATE'].lower() in ('true', '1', 'yes', 'on')

        self.logger.info("Environment variable overrides applied")

    def _is_yaml(self) -> bool:
        return self.config_file.endswith('.yaml') or self.config_file.endswith('.yml')

    def _validate_config(self) -> bool:
        """Validate configuration values."""
        try:
            if self.serial.baudrate <= 0:
                raise ValueError("Serial baudrate must be positive")
            if self.serial.timeout <= 0 or self.serial.run_timeout <= 0:
                raise ValueError("Serial timeouts must be positive")

            if self.motor.micro_steps_factor <= 0:
                raise ValueError("Micro steps factor must be positive")
            if self.motor.half_steps_per_unit <= 0:
                raise ValueError("Half steps per unit must be positive")
            if self.motor.max_speed <= 0 or self.motor.acceleration <= 0:
                raise ValueError("Motor speed and acceleration must be positive")

            if self.dialer.max_alignment_rotations < 1:
                raise ValueError("Max alignment rotations must be at least 1")

            if not (0 < self.probe.sweep < 100):
                raise ValueError("Probe sweep must be between 1 and 99")
            if self.probe.pause_seconds < 0:
                raise ValueError("Probe pause cannot be negative")

            if self.search.step <= 0 or 100 % self.search.step != 0:
                raise ValueError("Search step must divide the dial evenly")

            return True

        except ValueError as e:
            self.logger.error(f"Configuration validation failed: {e}")
            return False
