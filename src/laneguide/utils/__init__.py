"""Utility helpers (terminal output)."""

from .terminal import TerminalDisplay, create_progress_bar, format_tick_stats

__all__ = ['TerminalDisplay', 'create_progress_bar', 'format_tick_stats']
