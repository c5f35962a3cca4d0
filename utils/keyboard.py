"""Keyboard input utilities for interactive scripts."""

import logging
import os
import queue
import select
import sys
import threading
from typing import List, Optional

logger = logging.getLogger(__name__)

KEY_SEQUENCES = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[1;2C": "shift-right",
    "\x1b[1;2D": "shift-left",
    "\x1b": "quit",
    "q": "quit",
    "Q": "quit",
}


def parse_key(sequence: str) -> Optional[str]:
    """Map a raw terminal key sequence to a key name, or None if unbound."""
    return KEY_SEQUENCES.get(sequence)


def split_sequences(data: str) -> List[str]:
    """Split raw terminal input into single key presses (CSI escapes kept whole)."""
    sequences = []
    i = 0
    while i < len(data):
        if data.startswith("\x1b[", i):
            end = i + 2
            # Parameter bytes run until the first final byte (0x40-0x7E).
            while end < len(data) and not "\x40" <= data[end] <= "\x7e":
                end += 1
            sequences.append(data[i : end + 1])
            i = end + 1
        else:
            sequences.append(data[i])
            i += 1
    return sequences


def _read_sequence() -> str:
    """Read whatever input is pending; may hold several key presses."""
    return os.read(sys.stdin.fileno(), 16).decode(errors="ignore")


def keyboard_input_thread(stop_event: threading.Event, keys: "queue.Queue[str]") -> None:
    """
    Thread to read key presses and hand them to the main loop.

    Args:
        stop_event: Event that ends the thread when set; also set on 'q'/Esc
        keys: Queue receiving key names (see KEY_SEQUENCES)
    """
    if not sys.stdin.isatty():
        logger.debug("stdin is not a terminal, keyboard input disabled")
        return

    try:
        import termios
        import tty
    except ImportError:
        logger.debug("Termios not available, keyboard input disabled")
        return

    old_settings = termios.tcgetattr(sys.stdin)
    tty.setcbreak(sys.stdin.fileno())
    try:
        while not stop_event.is_set():
            if select.select([sys.stdin], [], [], 0.1)[0]:
                for sequence in split_sequences(_read_sequence()):
                    key = parse_key(sequence)
                    if key is None:
                        continue
                    keys.put(key)
                    if key == "quit":
                        logger.info("Quit key pressed - stopping...")
                        stop_event.set()
                        break
    finally:
        termios.tcsetattr(sys.stdin, termios.TCSADRAIN, old_settings)
