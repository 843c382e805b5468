from typing import Iterable, Optional
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from switch_tracker.models.session import SessionSnapshot, SessionSummary

def format_duration(ms: int) -> str:
    """Render milliseconds as HH:MM:SS; hours are not wrapped at 24"""
    total_seconds = max(int(ms), 0) // 1000
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"

class TerminalDisplay:
    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def render(self, snapshot: SessionSnapshot) -> Group:
        """Build the live view for the current session state"""
        header = Text()
        header.append("⏱  Context Switch Tracker", style="bold cyan")
        header.append("\nMonitor your focus. Measure the cost of distraction.", style="dim")

        timer = Text(justify="center")
        timer.append("Session Duration\n", style="dim")
        timer.append(
            format_duration(snapshot.elapsed_ms),
            style="bold white" if snapshot.is_active else "white"
        )
        timer.append("\nContext Switches: ", style="dim")
        timer.append(str(snapshot.switch_count), style="bold yellow")

        parts = [
            Panel(header, expand=False),
            Panel(timer, border_style="green" if snapshot.is_active else "white")
        ]

        if snapshot.last_summary and not snapshot.is_active:
            parts.append(self.summary_panel(snapshot.last_summary))

        help_text = Text()
        help_text.append("[s] ", style="bold")
        help_text.append("stop session" if snapshot.is_active else "start session")
        help_text.append("   [q] ", style="bold")
        help_text.append("quit")
        parts.append(help_text)

        return Group(*parts)

    def summary_panel(self, summary: SessionSummary) -> Panel:
        """Card shown after a session ends"""
        body = Text()
        body.append("Total Time: ", style="dim")
        body.append(format_duration(summary.duration), style="bold white")
        body.append("\nSwitches:   ", style="dim")
        body.append(str(summary.switches), style="bold yellow")
        body.append(f"\n\n{summary.verdict}", style="green" if summary.switches == 0 else "yellow")
        return Panel(body, title="Session Summary", expand=False)

    def history_table(self, summaries: Iterable[SessionSummary]) -> Table:
        table = Table(title="Session History")
        table.add_column("Stopped", style="cyan")
        table.add_column("Duration", justify="right", style="green")
        table.add_column("Switches", justify="right", style="yellow")

        for summary in summaries:
            table.add_row(
                summary.timestamp.astimezone().strftime('%Y-%m-%d %H:%M:%S'),
                format_duration(summary.duration),
                str(summary.switches)
            )
        return table

    def show_history(self, summaries: Iterable[SessionSummary]):
        """Print the history table, or a note when there is none"""
        summaries = list(summaries)
        if not summaries:
            self.console.print("[yellow]No sessions recorded[/yellow]")
            return
        self.console.print(self.history_table(summaries))
