"""
Terminal Display Utilities for totpcli

Provides platform-independent utilities for controlling the terminal
display: cursor visibility and in-place redraws.
"""

import sys

HIDE_CURSOR = '\033[?25l'
SHOW_CURSOR = '\033[?25h'
CLEAR_LINE = '\033[2K'


def cursor_up(lines):
    """Escape sequence moving the cursor up and back to column 0."""
    if lines <= 0:
        return '\r'
    return f'\033[{lines}F'


def hide_cursor(stream=None):
    stream = stream or sys.stdout
    stream.write(HIDE_CURSOR)
    stream.flush()


def show_cursor(stream=None):
    stream = stream or sys.stdout
    stream.write(SHOW_CURSOR)
    stream.flush()
