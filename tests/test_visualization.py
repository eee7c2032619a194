"""Smoke tests for the matplotlib renderers."""

from __future__ import annotations

import pytest

from sinelab.interfaces import EpochMetrics, TrainingHistory
from sinelab.visualization import plot_dataset_preview, plot_training_curves


def test_dataset_preview_adds_png_suffix(small_dataset, tmp_path) -> None:
    artifact = plot_dataset_preview(small_dataset, tmp_path / "preview", sample_index=3, overlay=True)
    assert artifact.path == tmp_path / "preview.png"
    assert artifact.path.stat().st_size > 0


def test_dataset_preview_rejects_bad_index(small_dataset, tmp_path) -> None:
    with pytest.raises(IndexError):
        plot_dataset_preview(small_dataset, tmp_path / "bad.png", sample_index=20)


def test_training_curves(tmp_path) -> None:
    history = TrainingHistory()
    for loss in (0.5, 0.3, 0.2):
        history.append(EpochMetrics(loss, loss * 1.2, loss / 2, loss / 2 * 1.2))
    artifact = plot_training_curves(history, tmp_path / "curves.png")
    assert artifact.path.exists()


def test_training_curves_need_history(tmp_path) -> None:
    with pytest.raises(ValueError):
        plot_training_curves(TrainingHistory(), tmp_path / "empty.png")
