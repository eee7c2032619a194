"""Tests for config.yml loading and training-config validation."""

from __future__ import annotations

import pytest

from sinelab.interfaces import GenerationConfig, InvalidTrainingConfig, TrainingConfig
from sinelab.utils.config import load_config


def test_project_config_loads() -> None:
    config = load_config()
    assert config.version
    assert config.generation == GenerationConfig()
    assert config.training == TrainingConfig()
    assert config.export_dir.name == "exports"


def test_overrides_and_defaults(tmp_path) -> None:
    path = tmp_path / "config.yml"
    path.write_text(
        "version: '9.9'\n"
        "generation:\n  samples: 7\n  noise_std: 0.0\n"
        "training:\n  epochs: 3\n  low_cpu: true\n"
        "logging:\n  level: debug\n",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.version == "9.9"
    assert config.generation.samples == 7
    assert config.generation.noise_std == 0.0
    assert config.generation.sequence_length == 50
    assert config.training.epochs == 3
    assert config.training.low_cpu is True
    assert config.training.units == 32
    assert config.log_level == "DEBUG"
    assert config.progress_interval == 0.2


def test_empty_file_uses_defaults(tmp_path) -> None:
    path = tmp_path / "config.yml"
    path.write_text("", encoding="utf-8")
    config = load_config(path)
    assert config.generation == GenerationConfig()


def test_missing_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yml")


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"units": 0}, "units"),
        ({"batch_size": 1.5}, "batch_size"),
        ({"learning_rate": 0.0}, "learning_rate"),
        ({"learning_rate": float("inf")}, "learning_rate"),
        ({"validation_split": 1.0}, "validation_split"),
        ({"subset_percent": 101}, "subset_percent"),
    ],
)
def test_training_config_validation(overrides, field) -> None:
    with pytest.raises(InvalidTrainingConfig) as excinfo:
        TrainingConfig(**overrides).validate()
    assert excinfo.value.field == field
    assert isinstance(excinfo.value, ValueError)
