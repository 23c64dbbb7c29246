"""Terminal session screen rendering published session snapshots."""

import logging
from typing import Optional

from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from ..models.session import SessionSnapshot, SessionStatus
from ..transcription.publisher import StatePublisher

logger = logging.getLogger(__name__)

STATUS_STYLES = {
    SessionStatus.LISTENING: "bold white on green",
    SessionStatus.ANALYZING: "bold white on dark_orange",
    SessionStatus.ERROR: "bold white on red",
}
DEFAULT_STATUS_STYLE = "bold white on grey50"


class SessionScreen:
    """Live terminal view of the current session, fed by the state publisher."""

    def __init__(self, publisher: StatePublisher, console: Optional[Console] = None):
        """Initialize session screen.

        Args:
            publisher: Publisher whose snapshots drive the display
            console: Rich console to render to
        """
        self.publisher = publisher
        self.console = console or Console()
        self.last_snapshot = SessionSnapshot(status=SessionStatus.IDLE)
        self.live: Optional[Live] = None

    def __enter__(self):
        self.publisher.subscribe(self.on_snapshot)
        self.live = Live(self.render(self.last_snapshot), console=self.console, auto_refresh=False)
        self.live.start()
        return self

    def __exit__(self, _exc_type, _exc_val, _exc_tb):
        self.publisher.unsubscribe(self.on_snapshot)
        if self.live:
            self.live.update(self.render(self.last_snapshot), refresh=True)
            self.live.stop()
            self.live = None

    def on_snapshot(self, snapshot: SessionSnapshot) -> None:
        self.last_snapshot = snapshot
        if self.live:
            self.live.update(self.render(snapshot), refresh=True)

    def render(self, snapshot: SessionSnapshot) -> Panel:
        """Build the renderable for a snapshot."""
        header = Table.grid(expand=True)
        header.add_column()
        header.add_column(justify="right")
        header.add_row(
            Text("English Detector", style="bold blue"),
            Text(f" {snapshot.status.value.upper()} ",
                 style=STATUS_STYLES.get(snapshot.status, DEFAULT_STATUS_STYLE)),
        )

        partial = (Text(snapshot.partial_text, style="italic grey50") if snapshot.partial_text
                   else Text("Listening...", style="grey70"))
        final = (Text(snapshot.final_text) if snapshot.final_text
                 else Text("No transcript yet.", style="grey70"))

        if snapshot.percent is not None:
            percent_text = Text(f"{snapshot.percent}%", style="bold")
            percent_label = "Estimated English"
        else:
            percent_text = Text("—", style="bold")
            percent_label = "Awaiting analysis"

        details = Table(show_header=False, box=None)
        details.add_column("Metric", style="cyan")
        details.add_column("Value")
        details.add_row("Live (Partial)", partial)
        details.add_row("Final Transcript", final)
        details.add_row(percent_label, percent_text)
        details.add_row("", ProgressBar(total=100, completed=max(0, min(snapshot.display_percent, 100)), width=40))
        details.add_row("Status", snapshot.status.value)
        details.add_row("Words", str(snapshot.word_count))
        if snapshot.last_error is not None:
            details.add_row("Error", Text(str(snapshot.last_error), style="red"))

        return Panel(Group(header, details), border_style="bright_blue")
