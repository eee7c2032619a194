"""Tests for the deterministic sine-wave dataset generator."""

from __future__ import annotations

import math

import numpy as np
import pytest

from sinelab.generation import DatasetGenerator, SeededRandom, generate_dataset
from sinelab.interfaces import GenerationConfig, ValidationError


def test_same_config_gives_identical_dataset(small_config: GenerationConfig) -> None:
    first = generate_dataset(small_config)
    second = generate_dataset(small_config)
    assert first.sequences.tobytes() == second.sequences.tobytes()
    assert first.targets.tobytes() == second.targets.tobytes()
    assert first.metadata == second.metadata


def test_different_seed_changes_dataset(small_config: GenerationConfig) -> None:
    other = GenerationConfig(samples=20, sequence_length=12, seed=8)
    assert not np.array_equal(
        generate_dataset(small_config).sequences, generate_dataset(other).sequences
    )


def test_shapes_and_metadata(small_dataset) -> None:
    assert small_dataset.sequences.shape == (20, 12)
    assert small_dataset.targets.shape == (20,)
    assert [m.sample_id for m in small_dataset.metadata] == list(range(20))
    for meta in small_dataset.metadata:
        assert 0.5 <= meta.amplitude <= 2.0
        assert 0.05 <= meta.frequency <= 0.2
        assert 0.0 <= meta.phase < 2 * math.pi


def test_arrays_are_read_only(small_dataset) -> None:
    with pytest.raises(ValueError):
        small_dataset.sequences[0, 0] = 1.0


def test_stats_match_flattened_sequences(small_dataset) -> None:
    flat = small_dataset.sequences.ravel()
    stats = small_dataset.stats
    assert stats.min <= flat.min() and flat.max() <= stats.max
    assert stats.mean == pytest.approx(flat.mean(), rel=1e-9)
    assert stats.std == pytest.approx(np.sqrt(np.mean((flat - flat.mean()) ** 2)), rel=1e-9)
    assert stats.samples_count == 20
    assert stats.sequence_length == 12
    assert stats.generated_at.endswith("Z")


def test_stats_exclude_targets() -> None:
    dataset = generate_dataset(GenerationConfig(samples=5, sequence_length=4, seed=1))
    assert dataset.stats.mean == pytest.approx(dataset.sequences.mean(), rel=1e-9)


def test_noise_free_targets_are_exact() -> None:
    config = GenerationConfig(samples=10, sequence_length=9, seed=5, noise_std=0.0)
    dataset = generate_dataset(config)
    for meta, target in zip(dataset.metadata, dataset.targets):
        expected = meta.amplitude * math.sin(2 * math.pi * meta.frequency * 9 + meta.phase)
        assert target == expected


def test_draw_order_amplitude_frequency_phase_then_noise() -> None:
    config = GenerationConfig(samples=1, sequence_length=3, seed=42, noise_std=0.0)
    dataset = generate_dataset(config)
    rng = SeededRandom(42)
    amplitude = 0.5 + rng() * (2.0 - 0.5)
    frequency = 0.05 + rng() * (0.2 - 0.05)
    phase = rng() * 2 * math.pi
    meta = dataset.metadata[0]
    assert (meta.amplitude, meta.frequency, meta.phase) == (amplitude, frequency, phase)


def test_phase_shifted_copies_with_degenerate_ranges() -> None:
    config = GenerationConfig(
        samples=3,
        sequence_length=5,
        seed=42,
        noise_std=0.0,
        amp_min=1.0,
        amp_max=1.0,
        freq_min=0.1,
        freq_max=0.1,
    )
    dataset = generate_dataset(config, allow_degenerate_ranges=True)
    for i, meta in enumerate(dataset.metadata):
        assert meta.amplitude == 1.0
        assert meta.frequency == pytest.approx(0.1)
        for t in range(5):
            assert dataset.sequences[i][t] == pytest.approx(
                math.sin(2 * math.pi * 0.1 * t + meta.phase), abs=1e-12
            )
    assert len({m.phase for m in dataset.metadata}) == 3


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"samples": 0}, "samples"),
        ({"sequence_length": 0}, "sequence_length"),
        ({"noise_std": -0.1}, "noise_std"),
        ({"noise_std": float("nan")}, "noise_std"),
        ({"amp_min": 2.0, "amp_max": 1.0}, "amp_min"),
        ({"amp_min": 1.0, "amp_max": 1.0}, "amp_min"),
        ({"freq_min": 0.3, "freq_max": 0.2}, "freq_min"),
        ({"freq_min": -0.1}, "freq_min"),
        ({"samples": 2.5}, "samples"),
    ],
)
def test_invalid_config_raises_validation_error(overrides, field) -> None:
    config = GenerationConfig(**overrides)
    with pytest.raises(ValidationError) as excinfo:
        generate_dataset(config)
    assert excinfo.value.field == field
    assert field in str(excinfo.value)


def test_negative_bounds_allowed_when_not_strict() -> None:
    config = GenerationConfig(samples=4, sequence_length=3, amp_min=-1.0, amp_max=1.0)
    dataset = DatasetGenerator(strict=False).generate(config)
    assert dataset.num_samples == 4


def test_progress_callback_reports_chunks() -> None:
    calls: list[tuple[int, int]] = []
    generator = DatasetGenerator(chunk_size=4)
    generator.generate(
        GenerationConfig(samples=10, sequence_length=3), progress_cb=lambda d, t: calls.append((d, t))
    )
    assert calls == [(4, 10), (8, 10), (10, 10)]


def test_progress_callback_error_aborts() -> None:
    def boom(done: int, total: int) -> None:
        raise RuntimeError("cancelled")

    with pytest.raises(RuntimeError, match="cancelled"):
        DatasetGenerator(chunk_size=2).generate(
            GenerationConfig(samples=6, sequence_length=3), progress_cb=boom
        )
