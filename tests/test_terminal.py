from io import StringIO

from rich.console import Console

from laneguide.detection.core.models import DetectionResult
from laneguide.utils.terminal import TerminalDisplay, create_progress_bar, format_tick_stats


def test_progress_bar():
    assert create_progress_bar(0, 0, width=10) == "[>         ]   0%"
    assert create_progress_bar(5, 10, width=10) == "[=====>    ]  50%"
    assert create_progress_bar(10, 10, width=10) == "[==========] 100%"


def test_tick_stats():
    text = format_tick_stats(9.5, 12, 3.25, dropped=2, extra_info="x")
    assert "Tick:     12" in text
    assert "Dropped: 2" in text
    assert text.endswith("| x")


def test_footer_shows_status():
    console = Console(file=StringIO(), force_terminal=False, width=120)
    display = TerminalDisplay(console=console)

    display.update_footer(DetectionResult(-0.4, True, b""), "stats")
    table = display._generate_footer_table()
    console.print(table)

    output = console.file.getvalue()
    assert "Move Right" in output
    assert "stats" in output


def test_disabled_footer_is_noop():
    display = TerminalDisplay(enable_footer=False, console=Console(file=StringIO()))
    display.init_footer()
    display.update_footer(DetectionResult(0.0, False, b""))

    assert display.live_display is None
    assert display.last_result is None


def test_print_goes_through_console_with_prefix():
    console = Console(file=StringIO(), force_terminal=False, width=120)
    display = TerminalDisplay(console=console)

    display.print("Received interrupt signal", prefix="⚠")
    display.print("Press Ctrl+C to stop")

    lines = console.file.getvalue().splitlines()
    assert lines[0] == "⚠ Received interrupt signal"
    assert lines[1] == "Press Ctrl+C to stop"
