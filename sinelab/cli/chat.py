"""Conversation-style helpers powered by Rich for the sinelab CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from rich import traceback
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..interfaces.dataset import Dataset, DatasetStats
from ..interfaces.launch_options import LaunchOptions

traceback.install()


def stats_table(stats: DatasetStats) -> Table:
    table = Table(title="Dataset statistics", show_header=True, header_style="bold cyan")
    table.add_column("metric")
    table.add_column("value", justify="right")
    table.add_row("samples", str(stats.samples_count))
    table.add_row("sequence length", str(stats.sequence_length))
    table.add_row("min", f"{stats.min:.4f}")
    table.add_row("max", f"{stats.max:.4f}")
    table.add_row("mean", f"{stats.mean:.4f}")
    table.add_row("std", f"{stats.std:.4f}")
    table.add_row("generated at", stats.generated_at)
    return table


@dataclass
class SineChat:
    console: Console = field(default_factory=Console)
    last_dataset: Dataset | None = None
    _last_paths: dict[str, Path] = field(default_factory=dict)

    def default_path(self, key: str) -> Path | None:
        return self._last_paths.get(key)

    def remember_path(self, key: str, path: Path | None) -> None:
        if path is not None:
            self._last_paths[key] = path

    def greet(self) -> None:
        self.console.print(
            Panel(
                "[bold cyan]Hi! Generate noisy sine waves, then teach an LSTM to predict the next value.[/]",
                title="sinelab CLI",
                subtitle="(generate | train | export | architecture | exit)",
            )
        )

    def say(self, message: str, style: str = "cyan") -> None:
        self.console.print(f"[bold {style}]→[/] {message}")

    def success(self, message: str) -> None:
        self.console.print(Panel(message, title="✨ Success", style="green"))

    def hint(self, option: LaunchOptions) -> None:
        self.console.print(
            Panel(
                f"[bold yellow]Try this command[/]: {option.command_hint()}",
                title="Command Clue",
                style="bright_yellow",
            )
        )

    def show_stats(self, stats: DatasetStats) -> None:
        self.console.print(stats_table(stats))

    def wrap_error(self, error: Exception, option: LaunchOptions | None = None) -> None:
        self.console.print(
            Panel(
                f"[bold red]{error.__class__.__name__} happened:[/]\n{error}",
                title="Oops",
                style="bright_red",
            )
        )
        if option:
            self.hint(option)
