"""
Live display of TOTP codes: the refresh loop and its terminal renderers.
"""

from .refresh import RefreshLoop, Frame, CodeRow, LoopState
from .renderer import TerminalRenderer, PlainRenderer

__all__ = ['RefreshLoop', 'Frame', 'CodeRow', 'LoopState', 'TerminalRenderer', 'PlainRenderer']
