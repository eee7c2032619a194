"""Argument-driven and conversational entry point for the sinelab CLI."""

from __future__ import annotations

import argparse
import logging
import signal
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from typing import Iterator, Sequence

import questionary
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeElapsedColumn

from .. import __version__
from ..interfaces.config import AppConfig, GenerationConfig, TrainingConfig
from ..interfaces.launch_options import LaunchOptions
from ..interfaces.training import EpochResult
from ..modeling import TrainingLoopController
from ..networks import TorchLSTMFit
from ..utils.config import load_config
from ..utils.logging import configure_logging
from ..utils.paths import data_root
from .chat import SineChat
from .commands import run_architecture, run_export, run_generate, run_train

logger = logging.getLogger(__name__)


def _build_parser(config: AppConfig) -> argparse.ArgumentParser:
    gen = config.generation
    train = config.training
    parser = argparse.ArgumentParser(
        prog="sinelab-cli",
        description="Generate sine-wave datasets and train an LSTM next-value predictor.",
    )
    parser.add_argument("--config", default=None, help="Path to an alternative config.yml.")
    parser.add_argument("--log-level", default=None, help="Override the logging level (DEBUG, INFO, ...).")
    parser.add_argument("--skip-banner", action="store_true", help="Suppress the startup banner.")
    sub = parser.add_subparsers(dest="command")

    generate = sub.add_parser("generate", help="Generate a dataset and export it as JSON.")
    generate.add_argument("--samples", type=int, default=gen.samples)
    generate.add_argument("--sequence-length", type=int, default=gen.sequence_length)
    generate.add_argument("--seed", type=int, default=gen.seed)
    generate.add_argument("--noise-std", type=float, default=gen.noise_std)
    generate.add_argument("--amp-min", type=float, default=gen.amp_min)
    generate.add_argument("--amp-max", type=float, default=gen.amp_max)
    generate.add_argument("--freq-min", type=float, default=gen.freq_min)
    generate.add_argument("--freq-max", type=float, default=gen.freq_max)
    generate.add_argument("--output", type=Path, default=None, help="JSON output path.")
    generate.add_argument("--csv", action="store_true", help="Also write a CSV next to the JSON.")
    generate.add_argument("--prefix", default=config.export.prefix, help="Export filename prefix.")
    generate.add_argument("--plot", type=Path, default=None, help="Save a dataset preview PNG.")

    trainer = sub.add_parser("train", help="Train the LSTM on a dataset JSON export.")
    trainer.add_argument("--input", type=Path, required=True, help="Dataset JSON produced by `generate`.")
    trainer.add_argument("--units", type=int, default=train.units)
    trainer.add_argument("--batch-size", type=int, default=train.batch_size)
    trainer.add_argument("--epochs", type=int, default=train.epochs)
    trainer.add_argument("--lr", type=float, default=train.learning_rate)
    trainer.add_argument("--validation-split", type=float, default=train.validation_split)
    trainer.add_argument("--low-cpu", action="store_true", default=train.low_cpu)
    trainer.add_argument("--subset-percent", type=int, default=train.subset_percent)
    trainer.add_argument("--plot", type=Path, default=None, help="Save training curves to this PNG.")
    trainer.add_argument("--device", default="auto", help="auto | cpu | cuda | mps")
    trainer.add_argument("--seed", type=int, default=None, help="Seed for weight init and shuffling.")

    arch = sub.add_parser("architecture", help="Print the network diagram.")
    arch.add_argument("--sequence-length", type=int, default=gen.sequence_length)
    arch.add_argument("--units", type=int, default=train.units)
    arch.add_argument("--lr", type=float, default=train.learning_rate)
    return parser


def _load_app_config(path: str | None) -> AppConfig:
    if path:
        return load_config(path)
    try:
        return load_config()
    except FileNotFoundError:
        logger.warning("config.yml not found; using built-in defaults")
        return AppConfig(version=__version__, data_root=data_root())


def _options_from_args(args: argparse.Namespace) -> LaunchOptions:
    if args.command == "generate":
        return LaunchOptions(
            command="generate",
            generation=GenerationConfig(
                samples=args.samples,
                sequence_length=args.sequence_length,
                seed=args.seed,
                noise_std=args.noise_std,
                amp_min=args.amp_min,
                amp_max=args.amp_max,
                freq_min=args.freq_min,
                freq_max=args.freq_max,
            ),
            output_path=args.output,
            export_csv=args.csv,
            prefix=args.prefix,
            plot_path=args.plot,
        )
    if args.command == "train":
        return LaunchOptions(
            command="train",
            training=TrainingConfig(
                units=args.units,
                batch_size=args.batch_size,
                epochs=args.epochs,
                learning_rate=args.lr,
                validation_split=args.validation_split,
                low_cpu=args.low_cpu,
                subset_percent=args.subset_percent,
            ),
            input_path=args.input,
            plot_path=args.plot,
        )
    return LaunchOptions(
        command="architecture",
        generation=GenerationConfig(sequence_length=args.sequence_length),
        training=TrainingConfig(units=args.units, learning_rate=args.lr),
    )


@contextmanager
def _stop_on_interrupt(controller: TrainingLoopController, chat: SineChat) -> Iterator[None]:
    """Map Ctrl-C to a cooperative stop while a training run is active."""

    def _handler(signum, frame) -> None:
        chat.say("Stop requested; finishing the current epoch.", style="yellow")
        controller.request_stop()

    previous = signal.signal(signal.SIGINT, _handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def _epoch_progress(chat: SineChat) -> Progress:
    return Progress(
        TextColumn("[bold cyan]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TextColumn("{task.fields[metrics]}"),
        TimeElapsedColumn(),
        console=chat.console,
    )


def _generate(options: LaunchOptions, chat: SineChat, config: AppConfig) -> None:
    with Progress(console=chat.console, transient=True) as progress:
        task = progress.add_task("generating", total=options.generation.samples)
        outcome = run_generate(
            options,
            chat,
            export_dir=config.export_dir,
            progress_cb=lambda done, total: progress.update(task, completed=done, total=total),
        )
    chat.show_stats(outcome.dataset.stats)
    chat.last_dataset = outcome.dataset


def _train(
    options: LaunchOptions,
    chat: SineChat,
    config: AppConfig,
    *,
    device: str = "auto",
    seed: int | None = None,
    use_last: bool = False,
) -> None:
    controller = TrainingLoopController(progress_interval=config.progress_interval)
    with _epoch_progress(chat) as progress, _stop_on_interrupt(controller, chat):
        task = progress.add_task("training", total=options.training.epochs, metrics="")

        def _on_epoch(result: EpochResult) -> None:
            progress.update(
                task,
                completed=result.epoch,
                metrics=f"loss={result.train_loss:.4f} val_loss={result.val_loss:.4f}",
            )

        run_train(
            options,
            chat,
            dataset=chat.last_dataset if use_last else None,
            controller=controller,
            fit_factory=lambda cfg: TorchLSTMFit(cfg, device=device, seed=seed),
            progress_cb=_on_epoch,
        )


def _dispatch(args: argparse.Namespace, chat: SineChat, config: AppConfig) -> int:
    options = _options_from_args(args)
    try:
        if args.command == "generate":
            _generate(options, chat, config)
        elif args.command == "train":
            _train(options, chat, config, device=args.device, seed=args.seed)
        else:
            run_architecture(options, chat)
    except Exception as error:
        chat.wrap_error(error, options)
        return 1
    return 0


def run_conversational_cli(config: AppConfig, chat: SineChat | None = None) -> None:
    """Launch the sinelab CLI in a question-and-answer style."""

    chat = chat or SineChat()
    chat.greet()

    while True:
        command = _choose_command()
        if not command or command == "exit":
            chat.say("All right, come back anytime for more sine waves!")
            break

        try:
            options = _collect_options(command, chat, config)
        except KeyboardInterrupt:
            chat.say("Command canceled. Returning to the main menu.")
            continue

        try:
            if command == "generate":
                _generate(options, chat, config)
            elif command == "train":
                _train(options, chat, config, use_last=options.input_path is None)
            elif command == "export":
                if chat.last_dataset is None:
                    chat.say("Generate a dataset first; there is nothing to export yet.")
                    continue
                run_export(chat.last_dataset, options, chat, export_dir=config.export_dir)
            elif command == "architecture":
                run_architecture(options, chat)
        except Exception as error:  # pragma: no cover - interactive shell
            chat.wrap_error(error, options)


def _choose_command() -> str | None:
    choices = [*LaunchOptions.conversational_commands(), "exit"]
    return questionary.select("What would you like to do?", choices=choices).ask()


def _collect_options(command: str, chat: SineChat, config: AppConfig) -> LaunchOptions:
    if command == "generate":
        return _generate_options(chat, config)
    if command == "train":
        return _train_options(chat, config)
    if command == "export":
        return _export_options(chat, config)
    if command == "architecture":
        return _architecture_options(chat, config)
    raise ValueError(f"Unsupported command: {command}")


def _generate_options(chat: SineChat, config: AppConfig) -> LaunchOptions:
    gen = config.generation
    generation = GenerationConfig(
        samples=_ask_int(chat, "Number of samples", default=gen.samples),
        sequence_length=_ask_int(chat, "Sequence length", default=gen.sequence_length),
        seed=_ask_int(chat, "Random seed", default=gen.seed),
        noise_std=_ask_float(chat, "Noise standard deviation", default=gen.noise_std),
        amp_min=_ask_float(chat, "Minimum amplitude", default=gen.amp_min),
        amp_max=_ask_float(chat, "Maximum amplitude", default=gen.amp_max),
        freq_min=_ask_float(chat, "Minimum frequency", default=gen.freq_min),
        freq_max=_ask_float(chat, "Maximum frequency", default=gen.freq_max),
    )
    export_csv = questionary.confirm("Also write a CSV export?", default=False).ask()
    return LaunchOptions(
        command="generate",
        generation=generation,
        export_csv=bool(export_csv),
        prefix=config.export.prefix,
    )


def _train_options(chat: SineChat, config: AppConfig) -> LaunchOptions:
    input_path: Path | None = None
    if chat.last_dataset is None or not questionary.confirm(
        "Train on the dataset generated in this session?", default=True
    ).ask():
        input_path = _ask_path(chat, "Path to a dataset JSON export", required=True, default_key="dataset")

    train = config.training
    low_cpu = bool(questionary.confirm("Low-CPU mode (train on a random subset)?", default=train.low_cpu).ask())
    subset_percent = train.subset_percent
    if low_cpu:
        subset_percent = _ask_int(chat, "Subset percent (1-100)", default=train.subset_percent)
    training = TrainingConfig(
        units=_ask_int(chat, "LSTM units", default=train.units),
        batch_size=_ask_int(chat, "Batch size", default=train.batch_size),
        epochs=_ask_int(chat, "Epochs", default=train.epochs),
        learning_rate=_ask_float(chat, "Learning rate", default=train.learning_rate),
        validation_split=_ask_float(chat, "Validation split", default=train.validation_split),
        low_cpu=low_cpu,
        subset_percent=subset_percent,
    )
    plot_path = _ask_path(chat, "Optional path to save the training curves")
    return LaunchOptions(command="train", training=training, input_path=input_path, plot_path=plot_path)


def _export_options(chat: SineChat, config: AppConfig) -> LaunchOptions:
    output_path = _ask_path(chat, "Optional JSON output path (blank = export directory)")
    export_csv = questionary.confirm("Also write a CSV export?", default=True).ask()
    return LaunchOptions(
        command="export",
        output_path=output_path,
        export_csv=bool(export_csv),
        prefix=config.export.prefix,
    )


def _architecture_options(chat: SineChat, config: AppConfig) -> LaunchOptions:
    generation = replace(
        config.generation,
        sequence_length=_ask_int(chat, "Sequence length", default=config.generation.sequence_length),
    )
    training = replace(config.training, units=_ask_int(chat, "LSTM units", default=config.training.units))
    return LaunchOptions(command="architecture", generation=generation, training=training)


def _ask_int(chat: SineChat, prompt: str, *, default: int) -> int:
    while True:
        response = questionary.text(prompt, default=str(default)).ask()
        if response is None:
            raise KeyboardInterrupt
        candidate = response.strip()
        if not candidate:
            return default
        try:
            return int(candidate)
        except ValueError:
            chat.say("That wasn't a whole number. Please try again.")


def _ask_float(chat: SineChat, prompt: str, *, default: float) -> float:
    while True:
        response = questionary.text(prompt, default=str(default)).ask()
        if response is None:
            raise KeyboardInterrupt
        candidate = response.strip()
        if not candidate:
            return default
        try:
            return float(candidate)
        except ValueError:
            chat.say("Please enter a valid number (decimal allowed).")


def _ask_path(
    chat: SineChat,
    prompt: str,
    *,
    required: bool = False,
    default_key: str | None = None,
) -> Path | None:
    default_value = chat.default_path(default_key) if default_key else None
    default_text = default_value.as_posix() if default_value else ""
    while True:
        response = questionary.text(prompt, default=default_text).ask()
        if response is None:
            raise KeyboardInterrupt
        candidate = response.strip()
        if not candidate:
            if default_value:
                return default_value
            if required:
                chat.say("This path is required. Please try again.")
                continue
            return None
        resolved = Path(candidate).expanduser()
        if default_key:
            chat.remember_path(default_key, resolved)
        return resolved


def main(argv: Sequence[str] | None = None) -> int:
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config", default=None)
    pre.add_argument("--log-level", default=None)
    known, _ = pre.parse_known_args(argv)
    chat = SineChat()
    # Handler first, so warnings raised while loading the config are rendered too
    configure_logging(known.log_level or "INFO", console=chat.console)
    config = _load_app_config(known.config)

    args = _build_parser(config).parse_args(argv)
    configure_logging(args.log_level or config.log_level, console=chat.console)

    if args.command is None:
        if not args.skip_banner:
            from ..main import welcome_message  # local import to avoid circular dependency

            chat.console.print(welcome_message(config.version))
        run_conversational_cli(config, chat)
        return 0
    return _dispatch(args, chat, config)


if __name__ == "__main__":  # pragma: no cover - CLI entry
    raise SystemExit(main())
