"""
Serial Port Client Module

This module implements the serial port client used to receive NMEA-0183 text
from a GPS receiver.

Key Features:
- Serial port connection management (baud rate, data bits, stop bits, parity)
- Port enumeration for the viewer's port selector
- Connection timeout and error handling
- Chunked reads for the ingestion thread

The receiver is expected to talk 9600 8N1, the NMEA-0183 default.
"""

import logging

import serial
import serial.tools.list_ports

logger = logging.getLogger(__name__)


class SerialClient:
    """
    Serial port client for receiving NMEA sentences.

    Attributes:
        port (str): Serial port name (e.g., 'COM3', '/dev/ttyUSB0')
        baudrate (int): Baud rate for serial communication (e.g., 9600)
        timeout (float): Read timeout in seconds
        ser (serial.Serial): Active serial port connection
    """

    def __init__(self, port: str, baudrate: int = 9600, timeout: float = 1.0):
        """
        Initialize serial client with port parameters.

        Args:
            port (str): Serial port name (e.g., 'COM3' on Windows, '/dev/ttyUSB0' on Linux)
            baudrate (int): Baud rate (default: 9600)
            timeout (float): Read timeout in seconds (default: 1.0)
        """
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout
        self.ser = None

    @classmethod
    def from_config(cls, port: str = None):
        """
        Create a SerialClient instance from global configuration settings.

        Args:
            port: Overrides the configured port name when given

        Returns:
            SerialClient instance initialized with configuration values
        """
        from .global_config import get_serial_settings

        settings = get_serial_settings()
        port = port or settings.port
        if not port:
            raise ValueError("Cannot create SerialClient: no serial port configured")

        return cls(port, settings.baudrate, settings.timeout)

    @property
    def is_open(self) -> bool:
        return self.ser is not None and self.ser.is_open

    def connect(self) -> serial.Serial:
        """
        Establish serial port connection.

        Returns:
            serial.Serial: Connected serial port object ready for data reception

        Raises:
            serial.SerialException: When port cannot be opened or is invalid
        """
        try:
            self.ser = serial.Serial(
                port=self.port,
                baudrate=self.baudrate,
                bytesize=serial.EIGHTBITS,
                stopbits=serial.STOPBITS_ONE,
                parity=serial.PARITY_NONE,
                timeout=self.timeout
            )

            if not self.ser.is_open:
                raise serial.SerialException(f"Failed to open port {self.port}")

            logger.info("Opened %s at %d baud", self.port, self.baudrate)
            return self.ser

        except (serial.SerialException, ValueError) as e:
            self.ser = None
            raise serial.SerialException(f"Serial connection error: {e}") from e

    def close(self):
        """
        Close the serial port connection.

        Safe to call even if port is already closed.
        """
        if self.ser and self.ser.is_open:
            try:
                self.ser.close()
            except serial.SerialException as e:
                logger.warning("Error closing %s: %s", self.port, e)
        self.ser = None

    def read(self, size: int = 1024) -> bytes:
        """
        Read up to `size` bytes from the serial port.

        Args:
            size (int): Maximum number of bytes to read (default: 1024)

        Returns:
            bytes: Data read from serial port. Fewer than `size` bytes, or none,
            if the read timeout expires first.

        Raises:
            serial.SerialException: If the port is not open or the device fails
        """
        if not self.is_open:
            raise serial.SerialException("Serial port is not open")

        # Block for the first byte (up to the timeout), then take whatever is buffered.
        data = self.ser.read(1)
        if data:
            waiting = min(self.ser.in_waiting, size - 1)
            if waiting > 0:
                data += self.ser.read(waiting)
        return data

    @staticmethod
    def list_available_ports():
        """
        List all available serial ports on the system.

        Returns:
            list: List of available serial port names
        """
        try:
            return sorted(port.device for port in serial.tools.list_ports.comports())
        except OSError as e:
            logger.warning("Serial port enumeration failed: %s", e)
            return []
