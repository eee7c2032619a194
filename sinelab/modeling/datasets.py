"""Dataset adapters for training: low-CPU subsetting and z-score normalization."""

from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..interfaces.dataset import Dataset, DatasetStats
from ..interfaces.errors import DegenerateDatasetError

logger = logging.getLogger(__name__)

# std at or below this cannot be used as a z-score denominator
MIN_STD = 1e-12


def subset_count(total: int, percent: int) -> int:
    pct = min(100, max(1, int(percent)))
    return max(1, math.floor(total * pct / 100))


def sample_subset(
    dataset: Dataset,
    percent: int,
    rng: Optional[np.random.Generator] = None,
) -> Dataset:
    """Return a uniform-without-replacement subset of ``dataset``.

    The index domain is Fisher-Yates shuffled and the first
    ``max(1, floor(n * percent / 100))`` indices are kept. ``rng`` defaults to an
    unseeded generator, so two calls normally pick different subsets.

    The subset keeps the parent's value statistics (they stay the normalization
    basis); only ``samples_count`` is updated.
    """

    rng = rng if rng is not None else np.random.default_rng()
    total = dataset.num_samples
    count = subset_count(total, percent)

    indices = list(range(total))
    for i in range(total - 1, 0, -1):
        j = int(rng.integers(0, i + 1))
        indices[i], indices[j] = indices[j], indices[i]
    chosen = indices[:count]

    sequences, targets, metadata = dataset.select(chosen)
    stats = dataclasses.replace(dataset.stats, samples_count=count)
    logger.info("Low-CPU mode: training on %d/%d samples", count, total)
    return Dataset(sequences=sequences, targets=targets, metadata=metadata, stats=stats)


def normalize(value, mean: float, std: float):
    """Z-score ``value`` (scalar or array) with the given statistics."""

    return (value - mean) / std


def denormalize(value, mean: float, std: float):
    """Invert :func:`normalize`."""

    return value * std + mean


@dataclass(frozen=True)
class Normalizer:
    """Dataset-level z-score transform.

    Refuses a non-finite or near-zero ``std`` with :class:`DegenerateDatasetError`
    instead of emitting NaN/Inf into training.
    """

    mean: float
    std: float

    def __post_init__(self) -> None:
        if not math.isfinite(self.mean) or not math.isfinite(self.std):
            raise DegenerateDatasetError(
                f"Dataset statistics are not finite (mean={self.mean}, std={self.std})."
            )
        if abs(self.std) <= MIN_STD:
            raise DegenerateDatasetError(
                f"Dataset standard deviation {self.std!r} is too small to normalize; "
                "the generated values are (almost) constant."
            )

    @classmethod
    def from_stats(cls, stats: DatasetStats) -> "Normalizer":
        return cls(mean=float(stats.mean), std=float(stats.std))

    def normalize(self, value):
        return normalize(value, self.mean, self.std)

    def denormalize(self, value):
        return denormalize(value, self.mean, self.std)

    def transform_dataset(self, dataset: Dataset) -> tuple[np.ndarray, np.ndarray]:
        """Return ``xs`` (samples, steps, 1) and ``ys`` (samples, 1) as float32."""

        xs = self.normalize(dataset.sequences).astype(np.float32)[..., np.newaxis]
        ys = self.normalize(dataset.targets).astype(np.float32).reshape(-1, 1)
        return xs, ys
