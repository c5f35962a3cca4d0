"""Support modules for the servo command-line tools."""

from utils.config import BusConfig, load_bus_config, parse_servo_ids
from utils.keyboard import keyboard_input_thread, parse_key
from utils.utils import find_available_ports, resolve_port, setup_logging

__all__ = [
    "BusConfig",
    "load_bus_config",
    "parse_servo_ids",
    "keyboard_input_thread",
    "parse_key",
    "find_available_ports",
    "resolve_port",
    "setup_logging",
]
