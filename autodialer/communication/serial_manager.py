"""
Serial Communication Manager for the Stepper Firmware

Talks to the microcontroller that pulses the dial stepper. Commands are
plain text lines; every command is answered by exactly one line, in order.
"""

import asyncio
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from queue import Queue, Empty
from typing import Optional, Dict, Any, Callable, List, Tuple

import serial
import serial.tools.list_ports


# USB-serial bridges found on ESP8266/Arduino boards: Arduino, CH340, FTDI, CP210x
USB_SERIAL_VENDORS = ['2341', '1a86', '0403', '10c4']


@dataclass
class SerialCommand:
    """Represents a command to send to the stepper firmware."""
    command: str
    data: Dict[str, Any] = field(default_factory=dict)
    timeout: float = 5.0
    command_id: str = ""
    timestamp: float = field(default_factory=time.time)

    def to_string(self) -> str:
        """Convert command to the plain text line understood by the firmware."""
        cmd_upper = self.command.upper()

        if cmd_upper in ('PING', 'RUN', 'STOP'):
            return cmd_upper
        elif cmd_upper == 'MOVE':
            return f"MOVE {int(self.data.get('steps', 0))}"
        elif cmd_upper == 'SPEED':
            return f"SPEED {int(self.data.get('speed', 0))}"
        elif cmd_upper == 'ACCEL':
            return f"ACCEL {int(self.data.get('acceleration', 0))}"
        elif cmd_upper == 'SETPOS':
            return f"SETPOS {int(self.data.get('position', 0))}"
        else:
            params = ' '.join(str(v) for v in self.data.values())
            if params:
                return f'{cmd_upper} {params}'
            return cmd_upper


class SerialResponse:
    """Represents a response from the stepper firmware."""
    ERROR_WORDS = ('error', 'failed', 'invalid')

    def __init__(self, success: bool, data: Dict[str, Any] = None, error: str = None, raw_response: str = None):
        self.success = success
        self.data = data or {}
        self.error = error
        self.raw_response = raw_response
        self.timestamp = time.time()

    @classmethod
    def from_line(cls, line: str) -> 'SerialResponse':
        """Parse a single firmware reply line."""
        lowered = line.lower()
        success = not any(word in lowered for word in cls.ERROR_WORDS)
        return cls(
            success=success,
            data={'message': line},
            error=None if success else line,
            raw_response=line
        )

    def __repr__(self) -> str:
        return f"SerialResponse(success={self.success}, raw={self.raw_response!r})"


class SerialManager:
    """
    Thread-backed serial communication manager.

    Features:
    - Auto-detection of USB-serial adapters
    - FIFO command queue drained by a writer thread
    - Reader thread matching reply lines to pending commands in order
    - Connection statistics and status callbacks
    """

    def __init__(self, port: str = None, baudrate: int = 115200, timeout: float = 1.0,
                 startup_delay: float = 2.0):
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout
        self.startup_delay = startup_delay

        # Connection state
        self._serial: Optional[serial.Serial] = None
        self._connected = False
        self._connection_lock = threading.RLock()

        # Outgoing commands and replies still owed to callers
        self._command_queue: Queue = Queue()
        self._pending: "OrderedDict[str, asyncio.Future]" = OrderedDict()
        self._pending_lock = threading.Lock()
        self._sequence = 0

        # Worker threads
        self._command_thread: Optional[threading.Thread] = None
        self._read_thread: Optional[threading.Thread] = None
        self._running = False

        self._stats = {
            'commands_sent': 0,
            'responses_received': 0,
            'connection_attempts': 0,
            'errors': 0
        }

        self._status_callbacks: List[Callable[[bool], None]] = []

        self.logger = logging.getLogger(__name__)

    async def start(self) -> bool:
        """
        Start the serial manager and establish connection.

        Returns:
            bool: True if successfully connected, False otherwise
        """
        if self._running:
            self.logger.warning("Serial manager already running")
            return self._connected

        connected = await self._connect()
        if not connected:
            self.logger.error("Failed to establish initial connection")
            return False

        self._running = True
        self._command_thread = threading.Thread(target=self._command_worker, daemon=True)
        self._read_thread = threading.Thread(target=self._read_worker, daemon=True)
        self._command_thread.start()
        self._read_thread.start()

        self.logger.info("Serial manager started successfully")
        return True

    async def stop(self):
        """Stop the serial manager and close the port."""
        self.logger.info("Stopping serial manager")
        self._running = False

        with self._connection_lock:
            if self._serial and self._serial.is_open:
                self._serial.close()
            self._connected = False

        for thread in (self._command_thread, self._read_thread):
            if thread and thread.is_alive():
                thread.join(timeout=2.0)

        with self._pending_lock:
            pending = list(self._pending.values())
            self._pending.clear()
        for future in pending:
            self._resolve(future, SerialResponse(False, error="Serial manager stopped"))

    async def send_command(self, command: str, data: Dict[str, Any] = None,
                           timeout: float = 5.0) -> SerialResponse:
        """
        Send a command and wait for its reply line.

        Args:
            command: Command name
            data: Command parameters
            timeout: Response timeout in seconds

        Returns:
            SerialResponse: Response from firmware or error
        """
        if not self._running:
            return SerialResponse(False, error="Serial manager not running")

        command_id, future = self._register_pending(command)
        cmd = SerialCommand(command=command, data=data or {}, timeout=timeout, command_id=command_id)
        self._command_queue.put(cmd)

        try:
            return await asyncio.wait_for(future, timeout=timeout)
        except asyncio.TimeoutError:
            # The cancelled future keeps its place in the queue so the late
            # reply is consumed by it and not by the next command
            self.logger.error(f"Command {command} timed out after {timeout}s, late reply will be discarded")
            return SerialResponse(False, error=f"Command timeout ({timeout}s)")

    def add_status_callback(self, callback: Callable[[bool], None]):
        """Add callback for connection status changes."""
        self._status_callbacks.append(callback)

    def get_stats(self) -> Dict[str, Any]:
        """Get communication statistics."""
        return self._stats.copy()

    def is_connected(self) -> bool:
        """Check if currently connected to the firmware."""
        return self._connected

    def _register_pending(self, command: str) -> Tuple[str, asyncio.Future]:
        future = asyncio.get_running_loop().create_future()
        with self._pending_lock:
            self._sequence += 1
            command_id = f"{command}_{self._sequence}"
            self._pending[command_id] = future
        return command_id, future

    def _drop_pending(self, command_id: str) -> Optional[asyncio.Future]:
        with self._pending_lock:
            return self._pending.pop(command_id, None)

    async def _connect(self) -> bool:
        """Open the serial port and check the firmware answers."""
        self._stats['connection_attempts'] += 1

        if self.port is None:
            self.port = self._auto_detect_port()
            if self.port is None:
                self.logger.error("No suitable serial port found")
                return False

        try:
            with self._connection_lock:
                if self._serial and self._serial.is_open:
                    self._serial.close()

                self.logger.info(f"Connecting to {self.port} at {self.baudrate} baud...")
                self._serial = serial.Serial(
                    port=self.port,
                    baudrate=self.baudrate,
                    timeout=self.timeout,
                    write_timeout=self.timeout
                )

            # Boards reset when the port opens
            self.logger.info("Waiting for firmware to boot...")
            await asyncio.sleep(self.startup_delay)

            with self._connection_lock:
                if self._serial.in_waiting > 0:
                    boot_output = self._serial.read_all().decode('utf-8', errors='ignore')
                    self.logger.debug(f"Firmware boot output: {boot_output}")

            if await self._test_connection():
                self._connected = True
                self._notify_status_change(True)
                self.logger.info(f"Connected to stepper firmware on {self.port}")
                return True

            self._serial.close()
            return False

        except serial.SerialException as e:
            self.logger.error(f"Failed to connect to {self.port}: {e}")
            self._stats['errors'] += 1
            return False

    def _auto_detect_port(self) -> Optional[str]:
        """Auto-detect the controller board by scanning available ports."""
        ports = list(serial.tools.list_ports.comports())

        for port in ports:
            if port.vid and f"{port.vid:04x}" in USB_SERIAL_VENDORS:
                self.logger.info(f"Found potential controller on {port.device}")
                return port.device

            description = (port.description or "").lower()
            if any(keyword in description for keyword in ['arduino', 'ch340', 'ft232', 'cp210']):
                self.logger.info(f"Found potential controller on {port.device}")
                return port.device

        if ports:
            self.logger.warning(f"No controller detected, trying first port: {ports[0].device}")
            return ports[0].device

        return None

    async def _test_connection(self) -> bool:
        """Test connection by sending a PING command."""
        self.logger.info("Testing connection with PING command...")

        with self._connection_lock:
            if not self._serial or not self._serial.is_open:
                return False
            self._serial.write(b'PING\n')
            self._serial.flush()

        start_time = time.time()
        while time.time() - start_time < 3.0:
            with self._connection_lock:
                line = ""
                if self._serial.in_waiting > 0:
                    line = self._serial.readline().decode('utf-8', errors='ignore').strip()
            if line:
                self.logger.info(f"Received response: '{line}'")
                return True
            await asyncio.sleep(0.1)

        self.logger.warning("No response to PING command")
        return False

    def _command_worker(self):
        """Worker thread for draining the command queue."""
        while self._running:
            try:
                cmd = self._command_queue.get(timeout=0.1)
            except Empty:
                continue

            if not self._send_raw_command(cmd):
                self._handle_command_error(cmd, "Failed to send command")

    def _read_worker(self):
        """Worker thread for reading reply lines."""
        while self._running:
            if not self._connected or not self._serial:
                time.sleep(0.1)
                continue

            line = self._read_line()
            if line:
                self._handle_response_line(line)

    def _send_raw_command(self, cmd: SerialCommand) -> bool:
        """Write a command line to the serial port."""
        try:
            with self._connection_lock:
                if not self._serial or not self._serial.is_open:
                    return False

                command_str = cmd.to_string() + '\n'
                self.logger.debug(f"Sending command: {command_str.strip()}")
                self._serial.write(command_str.encode('utf-8'))
                self._serial.flush()
                self._stats['commands_sent'] += 1
                return True

        except serial.SerialException as e:
            self.logger.error(f"Failed to send command: {e}")
            self._stats['errors'] += 1
            self._connected = False
            self._notify_status_change(False)
            return False

    def _read_line(self) -> Optional[str]:
        """Read a line from the serial port."""
        try:
            with self._connection_lock:
                if not self._serial or not self._serial.is_open or self._serial.in_waiting == 0:
                    line = None
                else:
                    line = self._serial.readline().decode('utf-8', errors='ignore').strip()

        except serial.SerialException as e:
            self.logger.error(f"Failed to read line: {e}")
            self._stats['errors'] += 1
            self._connected = False
            self._notify_status_change(False)
            return None

        if line is None:
            time.sleep(0.01)
            return None
        if line:
            self._stats['responses_received'] += 1
        return line or None

    def _handle_response_line(self, line: str):
        """Complete the oldest pending command with ``line``."""
        self.logger.debug(f"Received: {line}")

        with self._pending_lock:
            if not self._pending:
                self.logger.debug(f"Unsolicited firmware output: {line}")
                return
            command_id, future = self._pending.popitem(last=False)

        if future.cancelled():
            self.logger.warning(f"Discarding late reply to {command_id}: {line}")
            return
        self._resolve(future, SerialResponse.from_line(line))

    def _handle_command_error(self, cmd: SerialCommand, error: str):
        """Fail the pending future of a command that never left the host."""
        future = self._drop_pending(cmd.command_id)
        if future is not None:
            self._resolve(future, SerialResponse(False, error=error))

    @staticmethod
    def _resolve(future: asyncio.Future, response: SerialResponse):
        def _set():
            if not future.done():
                future.set_result(response)

        future.get_loop().call_soon_threadsafe(_set)

    def _notify_status_change(self, connected: bool):
        """Notify registered callbacks of connection status change."""
        for callback in self._status_callbacks:
            try:
                callback(connected)
            except Exception as e:
                self.logger.error(f"Status callback error: {e}")
