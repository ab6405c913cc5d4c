"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output.
Uses Rich library for spinners, colored output, and formatted summaries.
Supports verbosity levels and --no-color flag.
"""

from contextlib import contextmanager
from typing import Iterator

from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.spinner import Spinner

from src.models.document import Document
from src.models.sync_result import SyncResult
from src.models.transcode_result import TranscodeResult


class OutputHandler:
    """Handles all terminal output using Rich library.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Published")
        >>> with handler.spinner("Publishing..."):
        ...     pass
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False):
        """Initialize output handler.

        Args:
            verbosity: Verbosity level (0=summary, 1=info, 2=debug)
            no_color: Disable color output if True
        """
        self.verbosity = verbosity
        self.console = Console(
            force_terminal=not no_color,
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        """Display success message in green."""
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def error(self, message: str) -> None:
        """Display error message in red."""
        self.console.print(f"[red]✗[/red] {escape(message)}", style="red")

    def warning(self, message: str) -> None:
        """Display warning message in yellow."""
        self.console.print(f"[yellow]⚠[/yellow] {escape(message)}", style="yellow")

    def notice(self, message: str) -> None:
        """Display a progress notice (always shown)."""
        self.console.print(f"[blue]→[/blue] {escape(message)}")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(escape(message))

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{escape(message)}[/dim]")

    def print(self, message: str) -> None:
        """Display message without formatting."""
        self.console.print(message, markup=False)

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display spinner while a single operation runs.

        Example:
            >>> with handler.spinner("Publishing Roadmap..."):
            ...     synchronizer.sync(document)
        """
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10):
            yield

    def print_publish_summary(self, result: SyncResult, url: str) -> None:
        """Display what a publish run changed.

        Args:
            result: Outcome of the run
            url: Browser URL of the published page
        """
        self.console.print("\n[bold]Publish Summary:[/bold]")

        action = "Created" if result.created else "Updated"
        self.console.print(
            f"  [green]↑[/green] {action}: {escape(result.page.title)} "
            f"(version {result.page.version})"
        )

        for title in result.created_folders:
            self.console.print(f"  [green]+[/green] Folder page created: {escape(title)}")

        for title in result.moved_folders:
            self.console.print(f"  [blue]↔[/blue] Folder page moved: {escape(title)}")

        if result.resolved_placeholders:
            self.console.print(
                f"  [green]✓[/green] Attachments embedded: {len(result.resolved_placeholders)}"
            )

        if result.warnings:
            self.console.print(f"  [yellow]⚠[/yellow] Warnings: {len(result.warnings)}")

        self.console.print(f"\n{escape(url)}")
        if result.warnings:
            self.console.print("\n[yellow]Published with warnings[/yellow]")
        else:
            self.console.print("\n[green]Published successfully[/green]")

    def print_dryrun_summary(self, document: Document, result: TranscodeResult) -> None:
        """Display the transcoded page without publishing it."""
        self.console.print("\n[bold]Dry Run - Publish Preview:[/bold]")

        path = " / ".join(document.folder_path + (document.title,))
        self.console.print(f"\n[green]Would publish:[/green] {escape(path)}")

        if result.diagrams:
            self.console.print(f"\n[blue]Diagrams ({len(result.diagrams)}):[/blue]")
            for diagram in result.diagrams:
                self.console.print(f"  • {diagram.filename}")

        if result.images:
            self.console.print(f"\n[blue]Images ({len(result.images)}):[/blue]")
            for image in result.images:
                self.console.print(f"  • {escape(image.filename)}")

        self.console.print("\n[bold]Storage format:[/bold]")
        self.console.print(result.storage, markup=False)
