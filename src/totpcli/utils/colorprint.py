"""
Color Print Utilities

Provides functions for printing colorful text to the console.
This is used for user-facing messages and does not affect logging.
"""

import os
import sys
import platform

_ansi_enabled = False


# ANSI color codes
class Colors:
    RESET = '\033[0m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    CYAN = '\033[36m'
    BRIGHT_RED = '\033[91m'
    BRIGHT_GREEN = '\033[92m'
    BRIGHT_YELLOW = '\033[93m'
    BOLD = '\033[1m'
    DIM = '\033[2m'


def enable_ansi():
    """Enable ANSI escape sequences on Windows consoles (no-op elsewhere)."""
    global _ansi_enabled
    if not _ansi_enabled and platform.system() == "Windows":
        os.system("")  # This enables ANSI escape sequences in Windows terminal
    _ansi_enabled = True


def colorize(text, color=Colors.RESET, bold=False):
    """Wrap text in ANSI color codes."""
    prefix = f"{Colors.BOLD}{color}" if bold else color
    return f"{prefix}{text}{Colors.RESET}"


def print_color(text, color=Colors.RESET, bold=False, stream=None):
    """
    Print text in the specified color.

    Args:
        text: The text to print
        color: The color to use (from Colors class)
        bold: Whether to make the text bold
        stream: File object to write to, defaults to stdout
    """
    enable_ansi()
    print(colorize(text, color, bold), file=stream or sys.stdout)


def print_info(text):
    """Print an informational message in cyan."""
    print_color(text, Colors.CYAN)


def print_success(text):
    """Print a success message in green."""
    print_color(text, Colors.GREEN)


def print_warning(text):
    """Print a warning message in yellow."""
    print_color(text, Colors.YELLOW, stream=sys.stderr)


def print_error(text):
    """Print an error message in red."""
    print_color(text, Colors.RED, stream=sys.stderr)
