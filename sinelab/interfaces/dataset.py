"""Shared data structures for generated sine-wave datasets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np

from .config import GenerationConfig


@dataclass(frozen=True)
class SampleMeta:
    """Latent parameters that produced one sequence."""

    sample_id: int
    amplitude: float
    frequency: float
    phase: float

    def to_json_dict(self) -> dict[str, Any]:
        return {
            "sampleId": self.sample_id,
            "amplitude": self.amplitude,
            "frequency": self.frequency,
            "phase": self.phase,
        }

    @classmethod
    def from_json_dict(cls, raw: dict[str, Any]) -> "SampleMeta":
        return cls(
            sample_id=int(raw["sampleId"]),
            amplitude=float(raw["amplitude"]),
            frequency=float(raw["frequency"]),
            phase=float(raw["phase"]),
        )


@dataclass(frozen=True)
class DatasetStats:
    """Summary statistics over the flattened sequence values (targets excluded)."""

    min: float
    max: float
    mean: float
    std: float
    samples_count: int
    sequence_length: int
    generated_at: str
    config: GenerationConfig

    @classmethod
    def from_values(
        cls,
        values: np.ndarray,
        *,
        samples_count: int,
        sequence_length: int,
        generated_at: str,
        config: GenerationConfig,
    ) -> "DatasetStats":
        flat = np.asarray(values, dtype=np.float64).ravel()
        return cls(
            min=float(flat.min()),
            max=float(flat.max()),
            mean=float(flat.mean()),
            std=float(flat.std()),
            samples_count=samples_count,
            sequence_length=sequence_length,
            generated_at=generated_at,
            config=config,
        )

    def to_json_dict(self) -> dict[str, Any]:
        return {
            "min": self.min,
            "max": self.max,
            "mean": self.mean,
            "std": self.std,
            "samplesCount": self.samples_count,
            "sequenceLength": self.sequence_length,
            "generatedAt": self.generated_at,
            "config": self.config.to_json_dict(),
        }

    @classmethod
    def from_json_dict(cls, raw: dict[str, Any]) -> "DatasetStats":
        samples_count = int(raw["samplesCount"])
        sequence_length = int(raw["sequenceLength"])
        return cls(
            min=float(raw["min"]),
            max=float(raw["max"]),
            mean=float(raw["mean"]),
            std=float(raw["std"]),
            samples_count=samples_count,
            sequence_length=sequence_length,
            generated_at=str(raw.get("generatedAt", "")),
            config=GenerationConfig.from_json_dict(
                raw.get("config", {}),
                samples=samples_count,
                sequence_length=sequence_length,
            ),
        )


def _frozen(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class Dataset:
    """Container for generated sequences, one-step-ahead targets, and metadata.

    ``sequences`` has shape ``(samples, sequence_length)`` and ``targets`` shape
    ``(samples,)``. Both arrays are read-only; regenerating creates a new
    instance.
    """

    sequences: np.ndarray
    targets: np.ndarray
    metadata: tuple[SampleMeta, ...]
    stats: DatasetStats

    def __post_init__(self) -> None:
        sequences = np.array(self.sequences, dtype=np.float64)
        targets = np.array(self.targets, dtype=np.float64).reshape(-1)
        if sequences.ndim != 2:
            raise ValueError(f"sequences must be 2-D, got shape {sequences.shape}")
        if not (len(sequences) == len(targets) == len(self.metadata)):
            raise ValueError(
                "sequences, targets and metadata must have the same length "
                f"({len(sequences)}, {len(targets)}, {len(self.metadata)})"
            )
        object.__setattr__(self, "sequences", _frozen(sequences))
        object.__setattr__(self, "targets", _frozen(targets))
        object.__setattr__(self, "metadata", tuple(self.metadata))

    @property
    def num_samples(self) -> int:
        return self.sequences.shape[0]

    @property
    def sequence_length(self) -> int:
        return self.sequences.shape[1]

    def select(self, indices: Sequence[int]) -> tuple[np.ndarray, np.ndarray, tuple[SampleMeta, ...]]:
        """Return index-aligned copies of sequences, targets and metadata."""

        idx = np.asarray(indices, dtype=np.intp)
        return (
            self.sequences[idx],
            self.targets[idx],
            tuple(self.metadata[i] for i in idx.tolist()),
        )

    def to_json_dict(self) -> dict[str, Any]:
        return {
            "sequences": self.sequences.tolist(),
            "targets": self.targets.tolist(),
            "metadata": [meta.to_json_dict() for meta in self.metadata],
            "stats": self.stats.to_json_dict(),
        }

    @classmethod
    def from_json_dict(cls, raw: dict[str, Any]) -> "Dataset":
        return cls(
            sequences=np.asarray(raw["sequences"], dtype=np.float64),
            targets=np.asarray(raw["targets"], dtype=np.float64),
            metadata=tuple(SampleMeta.from_json_dict(m) for m in raw["metadata"]),
            stats=DatasetStats.from_json_dict(raw["stats"]),
        )
