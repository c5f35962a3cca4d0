"""Utility functions for the servo tools."""

import logging
import os
import platform
from pathlib import Path
from typing import List, Optional, Union


def setup_logging(
    level: Optional[Union[int, str]] = None, log_file: Optional[Union[str, Path]] = None
) -> None:
    """
    Set up basic logging configuration.

    Args:
        level: Log level; defaults to the LOG_LEVEL environment variable, then INFO
        log_file: Write log records to this file instead of stderr
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        filename=str(log_file) if log_file else None,
    )


def find_available_ports() -> List[str]:
    """
    Find serial ports that look like USB serial adapters.

    Returns:
        Sorted list of port paths (e.g., ["/dev/ttyUSB0", ...])
    """
    try:
        from serial.tools import list_ports  # Part of pyserial library
    except ImportError as err:
        raise ImportError(
            "pyserial is required for port detection. Install it with: pip install pyserial"
        ) from err

    ports = [port.device for port in list_ports.comports()]
    if platform.system() != "Windows":
        # Skip legacy on-board UARTs that are listed without a USB descriptor
        ports = [port for port in ports if not Path(port).name.startswith("ttyS")]
    return sorted(ports)


def resolve_port(port: Optional[str]) -> str:
    """
    Return ``port`` or the single serial port present on the system.

    Raises:
        OSError: If no port was given and zero or several ports are available
    """
    if port:
        return port
    available_ports = find_available_ports()
    if len(available_ports) == 1:
        return available_ports[0]
    if not available_ports:
        raise OSError("No serial ports found. Please specify --port.")
    raise OSError(
        "Multiple ports available. Please specify --port: " + ", ".join(available_ports)
    )
