"""Tests for the low-CPU subset sampler and the z-score normalizer."""

from __future__ import annotations

import numpy as np
import pytest

from sinelab.generation import generate_dataset
from sinelab.interfaces import DegenerateDatasetError, GenerationConfig
from sinelab.modeling import Normalizer, denormalize, normalize, sample_subset, subset_count


@pytest.mark.parametrize(
    "total, percent, expected",
    [(10, 50, 5), (10, 100, 10), (10, 1, 1), (3, 20, 1), (10, 0, 1), (10, 250, 10), (7, 30, 2)],
)
def test_subset_count(total: int, percent: int, expected: int) -> None:
    assert subset_count(total, percent) == expected


def test_full_subset_is_a_permutation(small_dataset) -> None:
    subset = sample_subset(small_dataset, 100, rng=np.random.default_rng(0))
    ids = sorted(m.sample_id for m in subset.metadata)
    assert ids == list(range(small_dataset.num_samples))


def test_half_subset_has_distinct_indices() -> None:
    dataset = generate_dataset(GenerationConfig(samples=10, sequence_length=4))
    subset = sample_subset(dataset, 50, rng=np.random.default_rng(1))
    ids = [m.sample_id for m in subset.metadata]
    assert len(ids) == 5
    assert len(set(ids)) == 5


def test_subset_rows_stay_aligned(small_dataset) -> None:
    subset = sample_subset(small_dataset, 40, rng=np.random.default_rng(2))
    for row, target, meta in zip(subset.sequences, subset.targets, subset.metadata):
        np.testing.assert_array_equal(row, small_dataset.sequences[meta.sample_id])
        assert target == small_dataset.targets[meta.sample_id]


def test_subset_keeps_parent_value_stats(small_dataset) -> None:
    subset = sample_subset(small_dataset, 25, rng=np.random.default_rng(3))
    assert subset.stats.samples_count == 5
    assert subset.stats.mean == small_dataset.stats.mean
    assert subset.stats.std == small_dataset.stats.std


def test_normalize_round_trip() -> None:
    values = np.array([-3.5, 0.0, 1.25, 1e6])
    restored = denormalize(normalize(values, 0.7, 2.3), 0.7, 2.3)
    np.testing.assert_allclose(restored, values, rtol=1e-12)


def test_transform_dataset_shapes_and_scaling(small_dataset) -> None:
    normalizer = Normalizer.from_stats(small_dataset.stats)
    xs, ys = normalizer.transform_dataset(small_dataset)
    assert xs.shape == (20, 12, 1)
    assert ys.shape == (20, 1)
    assert xs.dtype == np.float32 and ys.dtype == np.float32
    assert float(xs.mean()) == pytest.approx(0.0, abs=1e-5)
    assert float(xs.std()) == pytest.approx(1.0, abs=1e-4)


@pytest.mark.parametrize("std", [0.0, 1e-13, float("nan"), float("inf")])
def test_degenerate_std_is_rejected(std: float) -> None:
    with pytest.raises(DegenerateDatasetError):
        Normalizer(mean=0.0, std=std)


def test_constant_dataset_cannot_be_normalized() -> None:
    config = GenerationConfig(
        samples=3, sequence_length=1, seed=0, noise_std=0.0,
        amp_min=0.0, amp_max=0.0, freq_min=0.1, freq_max=0.1,
    )
    dataset = generate_dataset(config, allow_degenerate_ranges=True)
    with pytest.raises(DegenerateDatasetError):
        Normalizer.from_stats(dataset.stats)
