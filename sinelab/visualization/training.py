"""Visualization helpers for training metrics."""

from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure

from ..interfaces.training import TrainingHistory
from ..interfaces.visualization import PlotArtifact


def _resolve_output(path_like: str | Path) -> Path:
    path = Path(path_like)
    if not path.suffix:
        path = path.with_suffix(".png")
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def training_curves_figure(history: TrainingHistory, *, title: str | None = None) -> Figure:
    """Build the two-panel (loss, MAE) figure without saving it."""

    if not len(history):
        raise ValueError("Cannot plot an empty training history.")
    epochs = np.arange(1, len(history) + 1)
    fig, (loss_ax, mae_ax) = plt.subplots(1, 2, figsize=(11, 4), dpi=160)
    for ax, train, val, label in (
        (loss_ax, history.train_losses, history.val_losses, "loss (MSE)"),
        (mae_ax, history.train_maes, history.val_maes, "MAE"),
    ):
        ax.plot(epochs, train, color="#1f77b4", linewidth=2.0, label="train")
        ax.plot(epochs, val, color="#ff7f0e", linewidth=2.0, linestyle="--", label="validation")
        ax.set_xlabel("epoch")
        ax.set_ylabel(label)
        ax.grid(True, linestyle="--", linewidth=0.5, alpha=0.6)
        ax.legend(loc="best")
    loss_ax.set_title("Loss")
    mae_ax.set_title("Mean absolute error")
    if title:
        fig.suptitle(title)
    fig.tight_layout()
    return fig


def plot_training_curves(
    history: TrainingHistory, output_path: str | Path, *, title: str | None = None
) -> PlotArtifact:
    target = _resolve_output(output_path)
    fig = training_curves_figure(history, title=title)
    fig.savefig(target, bbox_inches="tight")
    plt.close(fig)
    return PlotArtifact(path=target)
