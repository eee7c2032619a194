"""Dataset preview plots: every sequence faded, one highlighted."""

from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure

from ..interfaces.dataset import Dataset
from ..interfaces.visualization import PlotArtifact
from .training import _resolve_output

MAX_BACKGROUND_SEQUENCES = 200


def dataset_preview_figure(
    dataset: Dataset,
    sample_index: int = 0,
    *,
    overlay: bool = False,
    title: str | None = None,
) -> Figure:
    """Draw sample ``sample_index`` on top of the (faded) rest of the dataset.

    With ``overlay`` the previous sample is drawn as well, dashed. The
    one-step-ahead target is marked just past the end of the window.
    """

    if not 0 <= sample_index < dataset.num_samples:
        raise IndexError(
            f"sample_index {sample_index} out of range for {dataset.num_samples} samples"
        )
    steps = np.arange(dataset.sequence_length)
    fig, ax = plt.subplots(figsize=(9, 4), dpi=160)
    for row in dataset.sequences[:MAX_BACKGROUND_SEQUENCES]:
        ax.plot(steps, row, color="#999999", linewidth=0.6, alpha=0.15)

    if overlay and sample_index > 0:
        prev = dataset.sequences[sample_index - 1]
        ax.plot(steps, prev, color="#2ca02c", linewidth=1.5, linestyle="--", label=f"sample {sample_index - 1}")

    meta = dataset.metadata[sample_index]
    ax.plot(
        steps,
        dataset.sequences[sample_index],
        color="#1f77b4",
        linewidth=2.0,
        label=f"sample {sample_index} (A={meta.amplitude:.2f}, f={meta.frequency:.3f})",
    )
    ax.scatter(
        [dataset.sequence_length],
        [dataset.targets[sample_index]],
        color="#d62728",
        zorder=3,
        label="target",
    )
    ax.set_xlabel("time step")
    ax.set_ylabel("value")
    ax.set_title(title or "Generated sequences")
    ax.grid(True, linestyle="--", linewidth=0.5, alpha=0.6)
    ax.legend(loc="upper right")
    fig.tight_layout()
    return fig


def plot_dataset_preview(
    dataset: Dataset,
    output_path: str | Path,
    *,
    sample_index: int = 0,
    overlay: bool = False,
    title: str | None = None,
) -> PlotArtifact:
    target = _resolve_output(output_path)
    fig = dataset_preview_figure(dataset, sample_index, overlay=overlay, title=title)
    fig.savefig(target, bbox_inches="tight")
    plt.close(fig)
    return PlotArtifact(path=target)
