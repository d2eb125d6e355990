"""
Terminal renderers for refresh loop frames

TerminalRenderer redraws the same block of lines in place: after the first
frame it moves the cursor back up over the previous block and overwrites
each line, so there is no full-screen clear (and no flicker) per tick.
The cursor is hidden while running and always restored by close().

PlainRenderer prints frames one after another without escape sequences,
for `list --once` and for output that is not a terminal.
"""

import sys

from ..utils.colorprint import Colors, colorize, enable_ansi
from ..utils.screen import CLEAR_LINE, cursor_up, hide_cursor, show_cursor

BAR_WIDTH = 20
WARN_SECONDS = 10
CRITICAL_SECONDS = 5


def remaining_color(seconds):
    """Red when close to expiring, yellow as a warning, green otherwise."""
    if seconds <= CRITICAL_SECONDS:
        return Colors.BRIGHT_RED
    if seconds <= WARN_SECONDS:
        return Colors.BRIGHT_YELLOW
    return Colors.BRIGHT_GREEN


def progress_bar(fraction, width=BAR_WIDTH):
    filled = min(width, max(0, int(round(fraction * width))))
    return '#' * filled + '-' * (width - filled)


def format_row(row, name_width, color=True):
    """
    Render one CodeRow as a single line.

    Args:
        row (CodeRow): Row to render
        name_width (int): Column width for account names
        color (bool): Emit ANSI colors
    """
    name = row.name.ljust(name_width)
    if not row.ok:
        message = f"ERROR: {row.error}"
        return f"{name}  {colorize(message, Colors.RED) if color else message}"

    # Remaining time stays visible as a gauge of the elapsed period
    remaining = f"{row.seconds_remaining:>3}s"
    bar = f"[{progress_bar(row.progress)}]"
    if color:
        shade = remaining_color(row.seconds_remaining)
        code = colorize(row.code, shade, bold=True)
        bar = colorize(bar, shade)
    else:
        code = row.code
    return f"{name}  {code}  {bar} {remaining}"


def format_frame(frame, color=True):
    """Render all rows of a frame; an empty frame renders a hint line."""
    if not frame.rows:
        return ["No accounts yet. Add one with: totpcli add <name>"]
    name_width = max(len(row.name) for row in frame.rows)
    return [format_row(row, name_width, color) for row in frame.rows]


class PlainRenderer:
    def __init__(self, stream=None, color=False):
        self.stream = stream or sys.stdout
        self.color = color

    def start(self):
        if self.color:
            enable_ansi()

    def draw(self, frame):
        for line in format_frame(frame, self.color):
            self.stream.write(line + '\n')
        self.stream.flush()

    def close(self):
        self.stream.flush()


class TerminalRenderer:
    """In-place live display for an interactive terminal."""

    def __init__(self, stream=None, color=True, title=None):
        self.stream = stream or sys.stdout
        self.color = color
        self.title = title
        self._lines_drawn = 0
        self._started = False

    def start(self):
        enable_ansi()
        hide_cursor(self.stream)
        self._started = True
        if self.title:
            self.stream.write(colorize(self.title, Colors.CYAN, bold=True) + '\n')
            self.stream.write(colorize("Press Ctrl+C to quit", Colors.DIM) + '\n\n')
        self.stream.flush()

    def draw(self, frame):
        lines = format_frame(frame, self.color)
        buffer = []
        if self._lines_drawn:
            buffer.append(cursor_up(self._lines_drawn))
        for line in lines:
            buffer.append(CLEAR_LINE + line + '\n')
        # Blank out lines left over from a longer previous frame
        for _ in range(self._lines_drawn - len(lines)):
            buffer.append(CLEAR_LINE + '\n')

        # Single write per frame so a partial frame is never visible
        self.stream.write(''.join(buffer))
        self.stream.flush()
        self._lines_drawn = max(len(lines), self._lines_drawn)

    def close(self):
        if self._started:
            show_cursor(self.stream)
            self._started = False
        self.stream.flush()
