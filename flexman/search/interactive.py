from __future__ import annotations

from enum import Enum
import sys
from typing import Callable

from loguru import logger

__all__ = ["InteractiveCommand", "prompt_interactive_command", "wait_for_keypress"]


class InteractiveCommand(Enum):
    """Answers accepted while the search is paused between resolution levels."""

    CONTINUE = "c"  # Go on with the next level, pause again after it
    RESUME = "r"  # Go on and never pause again
    QUIT = "q"  # Stop the search now


def wait_for_keypress() -> str:
    """Read a single character from the terminal without waiting for Enter.

    Falls back to line-buffered reading when stdin is not a terminal.
    Returns an empty string at end of input.
    """
    if not sys.stdin.isatty():
        line = sys.stdin.readline()
        return line[:1]

    if sys.platform == "win32":
        import msvcrt

        return msvcrt.getwch()

    import termios
    import tty

    fd = sys.stdin.fileno()
    old_settings = termios.tcgetattr(fd)
    try:
        tty.setcbreak(fd)
        return sys.stdin.read(1)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)


def prompt_interactive_command(read_key: Callable[[], str] = wait_for_keypress) -> InteractiveCommand:
    """Block until the user picks one of the `InteractiveCommand` keys.

    Unknown keys are ignored. End of input resumes the search without
    further pauses.
    """
    logger.warning(
        "[search] Press 'c' to continue the search, 'r' resume and disable interactive, 'q' to stop it now."
    )
    while True:
        key = read_key()
        if key == "":
            logger.warning("[search] No more input, resuming without further pauses")
            return InteractiveCommand.RESUME
        try:
            return InteractiveCommand(key)
        except ValueError:
            continue
