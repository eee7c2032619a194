"""Unified sinelab entry point that greets users then launches the CLI or GUI."""

from __future__ import annotations

import argparse
import subprocess
import sys
from typing import Sequence

import questionary
from rich.console import Console
from rich.style import Style
from rich.text import Text

from . import __version__
from .utils.config import load_config
from .utils.paths import project_root, streamlit_script

console = Console()


def welcome_message(version: str) -> Text:
    banner_lines = [
        "███████╗██╗███╗   ██╗███████╗██╗      █████╗ ██████╗ ",
        "██╔════╝██║████╗  ██║██╔════╝██║     ██╔══██╗██╔══██╗",
        "███████╗██║██╔██╗ ██║█████╗  ██║     ███████║██████╔╝",
        "╚════██║██║██║╚██╗██║██╔══╝  ██║     ██╔══██║██╔══██╗",
        "███████║██║██║ ╚████║███████╗███████╗██║  ██║██████╔╝",
        "╚══════╝╚═╝╚═╝  ╚═══╝╚══════╝╚══════╝╚═╝  ╚═╝╚═════╝ ",
    ]
    gradient = [
        "#7FDBFF",
        "#6CC5F5",
        "#5AAFEB",
        "#4899E1",
        "#3683D7",
        "#4899E1",
        "#5AAFEB",
        "#6CC5F5",
    ]

    text = Text()
    for line in banner_lines:
        for idx, char in enumerate(line):
            color = gradient[idx % len(gradient)]
            text.append(char, Style(color=color, bold=True))
        text.append("\n")
    text.append(
        "Synthetic sine-wave datasets and LSTM next-value prediction\n",
        Style(color="cyan", bold=True),
    )
    text.append(f"Version: {version}\n\n", Style(color="bright_cyan"))
    text.append(
        "Generate reproducible noisy sine waves, export them, and watch an LSTM learn to predict what comes next.\n",
        Style(color="white"),
    )
    return text


def _launch_streamlit_app() -> None:
    script = streamlit_script()
    print("Starting the Streamlit UI...")
    try:
        subprocess.run(
            ["streamlit", "run", str(script)], cwd=project_root(), check=False
        )
    except FileNotFoundError as error:  # pragma: no cover - streaming UI dependency
        raise RuntimeError(
            "Streamlit is not installed in the current environment."
        ) from error


def _parse_args(argv: Sequence[str]) -> tuple[argparse.Namespace, list[str]]:
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument(
        "--gui", action="store_true", help="Launch the Streamlit UI and exit."
    )
    parser.add_argument(
        "--cli", action="store_true", help="Launch the CLI (default)."
    )
    parser.add_argument(
        "--no-banner", action="store_true", help="Suppress the ASCII welcome message."
    )
    return parser.parse_known_args(argv)


def _run_cli(extra_args: Sequence[str]) -> int:
    from .cli import main as cli_entry  # local import to avoid circular dependency

    return cli_entry.main(["--skip-banner", *extra_args])


def main(argv: Sequence[str] | None = None) -> int:
    raw_args = list(argv) if argv is not None else sys.argv[1:]
    parsed, passthrough = _parse_args(raw_args)
    try:
        version = load_config().version
    except FileNotFoundError:
        version = __version__
    if not parsed.no_banner:
        console.print(welcome_message(version))
    if parsed.gui:
        _launch_streamlit_app()
        return 0

    if parsed.cli or passthrough:
        return _run_cli(passthrough)

    try:
        choice = questionary.select(
            "Select interface:",
            choices=[
                questionary.Choice(title="[CLI] Command-Line", value="cli"),
                questionary.Choice(title="[GUI] Streamlit in the browser", value="gui"),
            ],
        ).ask()
    except KeyboardInterrupt:
        console.print("\n[red]Aborted by user.[/red]")
        return 0

    if choice == "gui":
        _launch_streamlit_app()
        return 0
    if choice is None:
        return 0
    return _run_cli(passthrough)


if __name__ == "__main__":  # pragma: no cover - CLI entry
    sys.exit(main())
