"""Configuration loading utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml

from ..interfaces.config import AppConfig, ExportSettings, GenerationConfig, TrainingConfig
from .paths import data_root, project_root


def _generation(raw: Mapping[str, Any]) -> GenerationConfig:
    defaults = GenerationConfig()
    return GenerationConfig(
        samples=int(raw.get("samples", defaults.samples)),
        sequence_length=int(raw.get("sequence_length", defaults.sequence_length)),
        seed=int(raw.get("seed", defaults.seed)),
        noise_std=float(raw.get("noise_std", defaults.noise_std)),
        amp_min=float(raw.get("amp_min", defaults.amp_min)),
        amp_max=float(raw.get("amp_max", defaults.amp_max)),
        freq_min=float(raw.get("freq_min", defaults.freq_min)),
        freq_max=float(raw.get("freq_max", defaults.freq_max)),
    )


def _training(raw: Mapping[str, Any]) -> TrainingConfig:
    defaults = TrainingConfig()
    return TrainingConfig(
        units=int(raw.get("units", defaults.units)),
        batch_size=int(raw.get("batch_size", defaults.batch_size)),
        epochs=int(raw.get("epochs", defaults.epochs)),
        learning_rate=float(raw.get("learning_rate", defaults.learning_rate)),
        validation_split=float(raw.get("validation_split", defaults.validation_split)),
        low_cpu=bool(raw.get("low_cpu", defaults.low_cpu)),
        subset_percent=int(raw.get("subset_percent", defaults.subset_percent)),
    )


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load application configuration from ``config.yml``.

    Args:
        path: Optional path override. Defaults to ``<project_root>/config.yml``.

    Returns:
        A :class:`~sinelab.interfaces.config.AppConfig` populated from YAML.
        Missing sections or keys fall back to the dataclass defaults.
    """

    config_path = Path(path) if path else project_root() / "config.yml"
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found at {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        raw: Mapping[str, Any] = yaml.safe_load(handle) or {}

    export = raw.get("export", {}) or {}
    logging_section = raw.get("logging", {}) or {}
    export_defaults = ExportSettings()

    return AppConfig(
        version=str(raw.get("version", "0.0.0")),
        data_root=data_root(),
        generation=_generation(raw.get("generation", {}) or {}),
        training=_training(raw.get("training", {}) or {}),
        export=ExportSettings(
            prefix=str(export.get("prefix", export_defaults.prefix)),
            subdir=str(export.get("subdir", export_defaults.subdir)),
        ),
        log_level=str(logging_section.get("level", "INFO")).upper(),
        progress_interval=float(raw.get("progress_interval", 0.2)),
    )
