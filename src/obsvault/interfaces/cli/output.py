"""Colored console output for obsvault commands."""

from rich.console import Console
from rich.markup import escape

console = Console(highlight=False, soft_wrap=True)


def print_header(title: str) -> None:
    """Print the banner shown at the start of every command."""
    separator = "=" * 50
    console.print(f"[blue]{separator}[/blue]")
    console.print(f"[blue]🕯️ {escape(title)}[/blue]")
    console.print(f"[blue]{separator}[/blue]")
    console.print()


class ConsoleReporter:
    """ProgressReporter that prints tagged, colored lines."""

    def __init__(self, out: Console | None = None):
        self.console = out or console

    def info(self, message: str) -> None:
        self.console.print(f"[blue]\\[INFO] {escape(message)}[/blue]")

    def success(self, message: str) -> None:
        self.console.print(f"[green]\\[SUCCESS] {escape(message)}[/green]")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]\\[WARNING] {escape(message)}[/yellow]")

    def error(self, message: str) -> None:
        self.console.print(f"[red]\\[ERROR] {escape(message)}[/red]")
