# ui/rich_display.py
"""Console presentation of generation results."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from models import ParsedOutput


class RichDisplayManager:
    """Renders results and errors with Rich panels."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def show_result(self, result: ParsedOutput) -> None:
        if result.spoken:
            self.console.print(
                Panel(Text(result.spoken), title="Spoken", border_style="green")
            )
        if result.formal:
            self.console.print(
                Panel(Text(result.formal), title="Formal", border_style="blue")
            )
        if result.notes:
            bullets = Text("\n".join(f"• {note}" for note in result.notes))
            self.console.print(Panel(bullets, title="Notes", border_style="yellow"))
        if not (result.spoken or result.formal or result.notes):
            self.console.print(Text("The provider returned no usable content.", style="dim"))

    def show_error(self, message: str, suggestion: str | None = None) -> None:
        body = Text(message, style="bold red")
        if suggestion:
            body.append("\n" + suggestion, style="default")
        self.console.print(Panel(body, title="Error", border_style="red"))

    def show_message(self, message: str) -> None:
        self.console.print(Text(message))
