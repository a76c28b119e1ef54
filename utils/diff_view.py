from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm
from rich.syntax import Syntax

from autolog.proposal import Proposal


class DiffView:
    """Console presenter for a logging proposal."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def show(self, proposal: Proposal):
        diff_text = proposal.diff()
        if not diff_text:
            self.console.print("[yellow]The AI proposed no changes.[/yellow]")
            return
        self.console.print(
            Panel(
                Syntax(diff_text, "diff", theme="monokai", line_numbers=False),
                title=proposal.title,
            )
        )

    def ask_apply(self) -> bool:
        return Confirm.ask("Do you want to apply these changes?", default=False)

    def info(self, message: str):
        self.console.print(f"[green]{message}[/green]")

    def error(self, message: str):
        self.console.print(f"[bold red]Error: {message}[/bold red]")
