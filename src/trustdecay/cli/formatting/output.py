#!/usr/bin/env python
"""
Output formatting with Rich console.
"""

from __future__ import annotations

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeElapsedColumn
from rich.table import Table
from rich.theme import Theme

from trustdecay.analysis.metrics import RunSummary


custom_theme = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "red",
    "success": "green",
})


class ConsoleOutput:
    """Console output with Rich formatting."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console(theme=custom_theme)

    def print(self, text: str = "", **kwargs):
        """Print text to console."""
        self.console.print(text, **kwargs)

    def print_error(self, text: str):
        self.console.print(f"[red]Error:[/red] {text}")

    def print_success(self, text: str):
        self.console.print(f"[green]Success:[/green] {text}")

    def print_warning(self, text: str):
        self.console.print(f"[yellow]Warning:[/yellow] {text}")

    def print_info(self, text: str):
        self.console.print(f"[cyan]Info:[/cyan] {text}")

    def print_dim(self, text: str):
        self.console.print(f"[dim]{text}[/dim]")

    def print_mapping(self, title: str, data: dict):
        """Render a flat mapping as a two-column table."""
        table = Table(title=title, show_header=True, header_style="bold")
        table.add_column("Key")
        table.add_column("Value", justify="right")
        for key, value in data.items():
            table.add_row(str(key), str(value))
        self.console.print(table)

    def print_summary(self, summary: RunSummary):
        """Render the end-of-run metrics."""
        table = Table(title="Simulation Metrics Summary", show_header=True, header_style="bold")
        table.add_column("Metric")
        table.add_column("Value", justify="right")
        table.add_row("Duration (ticks)", str(summary.duration))
        table.add_row("Storage cost reduction", f"{100.0 * summary.storage_cost_reduction:.2f}%")
        table.add_row("Privacy risk exposure (sum)", f"{summary.privacy_risk_exposure:.2f}")
        table.add_row("Compliance violation incidents", str(summary.compliance_violation_incidents))
        table.add_row("Trust convergence (avg tick)", f"{summary.avg_trust_convergence_time:.2f}")
        table.add_row("Trust converged objects", str(summary.converged_objects))
        table.add_row("False deletion rate", f"{summary.false_deletion_rate:.4f}")
        table.add_row("Retention efficiency", f"{summary.retention_efficiency:.4f}")
        self.console.print(table)

    def progress(self) -> Progress:
        """Progress bar for tick evaluation."""
        return Progress(
            TextColumn("[bold cyan]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        )
