"""
Global Configuration Module

This module provides a centralized configuration storage for the serial link and
the ingestion loop timing that can be accessed by all functions throughout the
application.
"""

from typing import Dict, Any, Optional
from dataclasses import dataclass, field


@dataclass
class SerialSettings:
    """
    Data class representing the serial connection to the GPS receiver.
    """
    port: Optional[str] = None
    baudrate: int = 9600
    timeout: float = 1.0        # Read timeout in seconds
    read_size: int = 1024       # Bytes requested per read


@dataclass
class ViewerConfig:
    """
    Global configuration container for the entire application.
    """
    serial_settings: SerialSettings = field(default_factory=SerialSettings)

    # Pause between read cycles (seconds)
    cycle_pause: float = 0.2

    # Number of NMEA lines kept in the rolling log
    log_capacity: int = 500

    # Viewer polling interval (milliseconds)
    gui_refresh_ms: int = 200

    def update_serial_settings(self, settings: Dict[str, Any]) -> None:
        """
        Update serial settings. Keys that are not SerialSettings fields are ignored.

        Args:
            settings: Dictionary containing the settings to update
        """
        for key, value in settings.items():
            if hasattr(self.serial_settings, key):
                setattr(self.serial_settings, key, value)


# Create a singleton instance of ViewerConfig that can be imported and used globally
global_config = ViewerConfig()


def get_global_config() -> ViewerConfig:
    """
    Get the global configuration instance.

    Returns:
        ViewerConfig instance
    """
    return global_config


def get_serial_settings() -> SerialSettings:
    """Convenience function to get the serial settings."""
    return global_config.serial_settings


def update_serial_settings(settings: Dict[str, Any]) -> None:
    """Convenience function to update the serial settings."""
    global_config.update_serial_settings(settings)

