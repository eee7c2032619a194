"""Configuration interfaces and data structures."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from numbers import Integral, Real
from pathlib import Path
from typing import Any

from .errors import InvalidTrainingConfig, ValidationError


def _require_int(name: str, value: Any, *, minimum: int, error=ValidationError) -> None:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise error(name, f"must be an integer, got {value!r}")
    if value < minimum:
        raise error(name, f"must be at least {minimum}, got {value}")


def _require_finite(name: str, value: Any, *, error=ValidationError) -> float:
    if isinstance(value, bool) or not isinstance(value, Real) or not math.isfinite(value):
        raise error(name, f"must be a finite number, got {value!r}")
    return float(value)


@dataclass(frozen=True)
class GenerationConfig:
    """Inputs of the synthetic sine-wave generator."""

    samples: int = 100
    sequence_length: int = 50
    seed: int = 42
    noise_std: float = 0.1
    amp_min: float = 0.5
    amp_max: float = 2.0
    freq_min: float = 0.05
    freq_max: float = 0.2

    def validate(self, *, strict: bool = True, allow_degenerate_ranges: bool = False) -> None:
        """Raise :class:`ValidationError` naming the first violated constraint.

        ``strict`` additionally requires non-negative amplitude and frequency
        lower bounds. ``allow_degenerate_ranges`` accepts ``min == max`` for the
        amplitude and frequency ranges (a constant parameter).
        """

        _require_int("samples", self.samples, minimum=1)
        _require_int("sequence_length", self.sequence_length, minimum=1)
        if isinstance(self.seed, bool) or not isinstance(self.seed, Integral):
            raise ValidationError("seed", f"must be an integer, got {self.seed!r}")
        noise_std = _require_finite("noise_std", self.noise_std)
        if noise_std < 0:
            raise ValidationError("noise_std", "must be non-negative")
        for lower_name, upper_name, label in (
            ("amp_min", "amp_max", "amplitude"),
            ("freq_min", "freq_max", "frequency"),
        ):
            lower = _require_finite(lower_name, getattr(self, lower_name))
            upper = _require_finite(upper_name, getattr(self, upper_name))
            if lower > upper or (lower == upper and not allow_degenerate_ranges):
                raise ValidationError(
                    lower_name, f"{label} min must be less than max ({lower} >= {upper})"
                )
            if strict and lower < 0:
                raise ValidationError(lower_name, f"{label} must be non-negative")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def to_json_dict(self) -> dict[str, Any]:
        """Return the camelCase mapping used by the JSON export format."""

        return {
            "samples": self.samples,
            "sequenceLength": self.sequence_length,
            "seed": self.seed,
            "noiseStd": self.noise_std,
            "ampMin": self.amp_min,
            "ampMax": self.amp_max,
            "freqMin": self.freq_min,
            "freqMax": self.freq_max,
        }

    @classmethod
    def from_json_dict(cls, raw: dict[str, Any], **fallback: Any) -> "GenerationConfig":
        defaults = {**asdict(cls()), **fallback}
        return cls(
            samples=int(raw.get("samples", defaults["samples"])),
            sequence_length=int(raw.get("sequenceLength", defaults["sequence_length"])),
            seed=int(raw.get("seed", defaults["seed"])),
            noise_std=float(raw.get("noiseStd", defaults["noise_std"])),
            amp_min=float(raw.get("ampMin", defaults["amp_min"])),
            amp_max=float(raw.get("ampMax", defaults["amp_max"])),
            freq_min=float(raw.get("freqMin", defaults["freq_min"])),
            freq_max=float(raw.get("freqMax", defaults["freq_max"])),
        )


@dataclass(frozen=True)
class TrainingConfig:
    """Hyperparameters for one LSTM training run."""

    units: int = 32
    batch_size: int = 32
    epochs: int = 50
    learning_rate: float = 1e-3
    validation_split: float = 0.2
    low_cpu: bool = False
    subset_percent: int = 20

    def validate(self) -> None:
        """Raise :class:`InvalidTrainingConfig` naming the offending field."""

        _require_int("units", self.units, minimum=1, error=InvalidTrainingConfig)
        _require_int("batch_size", self.batch_size, minimum=1, error=InvalidTrainingConfig)
        _require_int("epochs", self.epochs, minimum=1, error=InvalidTrainingConfig)
        lr = _require_finite("learning_rate", self.learning_rate, error=InvalidTrainingConfig)
        if lr <= 0:
            raise InvalidTrainingConfig("learning_rate", "must be greater than 0")
        split = _require_finite(
            "validation_split", self.validation_split, error=InvalidTrainingConfig
        )
        if not 0.0 <= split < 1.0:
            raise InvalidTrainingConfig("validation_split", "must be in [0, 1)")
        _require_int("subset_percent", self.subset_percent, minimum=1, error=InvalidTrainingConfig)
        if self.subset_percent > 100:
            raise InvalidTrainingConfig("subset_percent", "must be at most 100")


@dataclass(frozen=True)
class ExportSettings:
    prefix: str = "sine_dataset"
    subdir: str = "exports"


@dataclass(frozen=True)
class AppConfig:
    """Runtime configuration loaded from ``config.yml``."""

    version: str
    data_root: Path
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    training: TrainingConfig = field(default_factory=TrainingConfig)
    export: ExportSettings = field(default_factory=ExportSettings)
    log_level: str = "INFO"
    progress_interval: float = 0.2

    @property
    def export_dir(self) -> Path:
        return self.data_root / self.export.subdir

    def get(self, key: str, default: Any = None) -> Any:
        return getattr(self, key, default)
