"""Command handlers shared by the CLI and the Streamlit app."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Protocol

from ..generation import generate_dataset
from ..interfaces.config import ExportSettings, TrainingConfig
from ..interfaces.dataset import Dataset
from ..interfaces.launch_options import LaunchOptions
from ..interfaces.training import EpochResult, FitPrimitive, TrainingArtifacts
from ..modeling import TrainingLoopController
from ..networks import TorchLSTMFit, describe_architecture
from ..utils.config import load_config
from ..utils.export import dataset_filename, export_csv, export_json, load_dataset_json
from ..utils.paths import export_dir as default_export_dir
from ..visualization import plot_dataset_preview, plot_training_curves

FitFactory = Callable[[TrainingConfig], FitPrimitive]

DEFAULT_PREFIX = "sine_dataset"


class InteractionChannel(Protocol):
    def say(self, message: str) -> None:  # pragma: no cover - simple logging interface
        ...

    def success(
        self, message: str
    ) -> None:  # pragma: no cover - simple logging interface
        ...

    def hint(
        self, option: LaunchOptions
    ) -> None:  # pragma: no cover - simple logging interface
        ...

    def default_path(
        self, key: str
    ) -> Path | None:  # pragma: no cover - persistence helper
        ...

    def remember_path(
        self, key: str, path: Path | None
    ) -> None:  # pragma: no cover - persistence helper
        ...


@dataclass(frozen=True)
class ExportOutcome:
    json_path: Path
    csv_path: Path | None = None


@dataclass(frozen=True)
class GenerationOutcome:
    dataset: Dataset
    export: ExportOutcome


def _resolve_export_dir(export_dir: Path | None) -> Path:
    if export_dir is not None:
        return Path(export_dir)
    try:
        return load_config().export_dir
    except FileNotFoundError:
        return default_export_dir(ExportSettings())


def _default_export_path(prefix: str, export_dir: Path | None) -> Path:
    return _resolve_export_dir(export_dir) / dataset_filename(prefix)


def run_export(
    dataset: Dataset,
    options: LaunchOptions,
    channel: InteractionChannel,
    *,
    export_dir: Path | None = None,
) -> ExportOutcome:
    """Write ``dataset`` as JSON (and CSV when requested) and report where."""

    prefix = options.prefix or DEFAULT_PREFIX
    json_path = Path(options.output_path) if options.output_path else _default_export_path(prefix, export_dir)
    json_path = export_json(dataset, json_path)
    csv_path = None
    if options.export_csv:
        csv_path = export_csv(dataset, json_path.with_suffix(".csv"))
    written = f"[bold green]{json_path}[/]"
    if csv_path is not None:
        written += f" and [bold green]{csv_path}[/]"
    channel.success(f"Exported {dataset.num_samples} samples to {written}.")
    channel.remember_path("dataset", json_path)
    return ExportOutcome(json_path=json_path, csv_path=csv_path)


def run_generate(
    options: LaunchOptions,
    channel: InteractionChannel,
    *,
    export_dir: Path | None = None,
    progress_cb: Optional[Callable[[int, int], None]] = None,
) -> GenerationOutcome:
    gen = options.generation
    channel.say(
        f"Generating {gen.samples} sine waves of {gen.sequence_length} steps (seed {gen.seed})."
    )
    dataset = generate_dataset(gen, progress_cb=progress_cb)
    stats = dataset.stats
    channel.say(
        f"Stats: min={stats.min:.4f} max={stats.max:.4f} mean={stats.mean:.4f} std={stats.std:.4f}"
    )
    export = run_export(dataset, options, channel, export_dir=export_dir)
    if options.plot_path:
        artifact = plot_dataset_preview(dataset, options.plot_path)
        channel.success(f"Dataset preview saved to [bold green]{artifact.path}[/].")
    channel.hint(options)
    return GenerationOutcome(dataset=dataset, export=export)


def format_summary(artifacts: TrainingArtifacts) -> str:
    summary = artifacts.summary
    return (
        f"Training {artifacts.state.value} after {len(artifacts.history)} epochs "
        f"on {artifacts.samples_used}/{artifacts.samples_total} samples "
        f"({artifacts.duration_s:.1f}s). "
        f"final loss={summary.final_train_loss:.6f}, "
        f"val loss={summary.final_val_loss:.6f}, "
        f"best val loss={summary.best_val_loss:.6f} (epoch {summary.best_epoch}), "
        f"val/train ratio={summary.train_val_ratio:.3f}"
        + (" [bold yellow](possible overfitting)[/]" if summary.overfitting else "")
    )


def run_train(
    options: LaunchOptions,
    channel: InteractionChannel,
    *,
    dataset: Dataset | None = None,
    controller: TrainingLoopController | None = None,
    fit_factory: FitFactory | None = None,
    progress_cb: Optional[Callable[[EpochResult], None]] = None,
) -> TrainingArtifacts:
    """Train the forecaster on ``dataset`` or on the JSON export at ``options.input_path``."""

    if dataset is None:
        assert options.input_path, "Training requires a dataset JSON path."
        dataset = load_dataset_json(options.input_path)
        channel.remember_path("dataset", Path(options.input_path))
    config = options.training
    controller = controller or TrainingLoopController()
    factory = fit_factory or TorchLSTMFit
    channel.say(
        f"Training LSTM({config.units}) for {config.epochs} epochs "
        f"(batch {config.batch_size}, lr {config.learning_rate:g}, split {config.validation_split:g})."
    )
    artifacts = controller.run(dataset, config, factory(config), progress_cb=progress_cb)
    channel.success(format_summary(artifacts))
    if options.plot_path:
        artifact = plot_training_curves(artifacts.history, options.plot_path)
        channel.success(f"Training curves saved to [bold green]{artifact.path}[/].")
    channel.hint(options)
    return artifacts


def run_architecture(options: LaunchOptions, channel: InteractionChannel) -> str:
    diagram = describe_architecture(
        options.generation.sequence_length,
        options.training.units,
        options.training.learning_rate,
    )
    channel.say(diagram)
    return diagram
