"""
Terminal utilities for status output with a persistent footer.

- Main log area (scrolling content)
- Persistent footer (live guidance state, updated in place)
"""

import threading
from rich.console import Console
from rich.live import Live
from rich.table import Table

from laneguide.detection.core.models import DetectionResult, GuidanceStatus


STATUS_STYLES = {
    GuidanceStatus.NO_LANE: "bold dim",
    GuidanceStatus.CENTERED: "bold green",
    GuidanceStatus.MOVE_LEFT: "bold yellow",
    GuidanceStatus.MOVE_RIGHT: "bold yellow",
}


class TerminalDisplay:
    """
    Terminal display with a persistent footer line.

    1. Main content area (scrolls normally)
    2. Footer (stays at bottom, shows the latest guidance result)
    """

    def __init__(self, enable_footer: bool = True, console: Console | None = None):
        """
        Args:
            enable_footer: Whether to enable the persistent footer
            console: Rich console to render to (a new one if None)
        """
        self.enable_footer = enable_footer
        self.lock = threading.Lock()

        self.console = console or Console()
        self.live_display: Live | None = None

        self.last_result: DetectionResult | None = None
        self.stats_text = ""

    def print(self, message: str, prefix: str = ""):
        """Print a message to the main content area."""
        if prefix:
            self.console.print(f"{prefix} {message}", highlight=False)
        else:
            self.console.print(message, highlight=False)

    def init_footer(self):
        """Initialize Rich live footer display."""
        if not self.enable_footer or self.live_display is not None:
            return

        with self.lock:
            self.live_display = Live(
                self._generate_footer_table(),
                console=self.console,
                refresh_per_second=4,
                vertical_overflow="visible"
            )
            self.live_display.start()

    def _generate_footer_table(self) -> Table:
        """Generate footer table showing the latest guidance state."""
        table = Table.grid(padding=(0, 2))
        table.add_column(no_wrap=True)
        table.add_column(style="cyan", no_wrap=True)
        table.add_column(style="magenta", no_wrap=True)

        result = self.last_result
        if result is None:
            table.add_row("[dim]Waiting for first frame[/dim]")
            return table

        status = result.status
        style = STATUS_STYLES[status]
        table.add_row(
            f"[{style}]{status.value}[/{style}]",
            f"deviation {result.deviation:+.2f} | confidence {result.confidence:.2f}",
            self.stats_text,
        )
        return table

    def update_footer(self, result: DetectionResult | None = None, stats_text: str | None = None):
        """
        Update the footer with a new result and/or stats line.
        """
        if not self.enable_footer:
            return

        with self.lock:
            if result is not None:
                self.last_result = result
            if stats_text is not None:
                self.stats_text = stats_text

            if self.live_display is not None:
                self.live_display.update(self._generate_footer_table())

    def clear_footer(self):
        """Stop the live footer."""
        if not self.enable_footer:
            return

        with self.lock:
            if self.live_display is not None:
                try:
                    self.live_display.stop()
                finally:
                    self.live_display = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.clear_footer()


def create_progress_bar(current: int, total: int, width: int = 30) -> str:
    """
    Replay progress as text, e.g. "[=====>    ]  50%".

    Args:
        current: Frames ticked so far
        total: Frames in the source (0 if unknown)
        width: Bar width in characters
    """
    done = min(1.0, current / total) if total > 0 else 0.0
    filled = int(width * done)
    bar = ("=" * filled + ">")[:width].ljust(width)
    return f"[{bar}] {int(done * 100):3d}%"


def format_tick_stats(
    fps: float,
    tick_count: int,
    processing_time_ms: float,
    dropped: int = 0,
    extra_info: str = ""
) -> str:
    """
    Format tick statistics for footer display.

    Returns:
        Formatted stats string
    """
    base = f"FPS: {fps:5.1f} | Tick: {tick_count:6d} | Time: {processing_time_ms:6.2f}ms | Dropped: {dropped}"
    if extra_info:
        base += f" | {extra_info}"
    return base
