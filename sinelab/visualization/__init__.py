"""Visualization helpers for generated datasets and training metrics.

===================================================================================
OVERVIEW
===================================================================================
Matplotlib (Agg backend) renderings shared by the CLI and the Streamlit app:
  - Dataset preview: all sequences faded, one sample highlighted, target marked
  - Training curves: loss and MAE panels, train vs validation

Builders named ``*_figure`` return the Figure (Streamlit draws it with
``st.pyplot``); ``plot_*`` functions save a PNG and return a PlotArtifact.

===================================================================================
SUBMODULE STRUCTURE
===================================================================================

dataset.py:
    dataset_preview_figure(dataset, sample_index, overlay) → Figure
    plot_dataset_preview(dataset, output_path, ...) → PlotArtifact

training.py:
    training_curves_figure(history) → Figure
    plot_training_curves(history, output_path) → PlotArtifact

===================================================================================
ERROR HANDLING
===================================================================================

ValueError:
    - Empty training history → nothing to plot

IndexError:
    - sample_index outside [0, samples)

===================================================================================
"""

from .dataset import dataset_preview_figure, plot_dataset_preview
from .training import plot_training_curves, training_curves_figure

__all__ = [
    "dataset_preview_figure",
    "plot_dataset_preview",
    "plot_training_curves",
    "training_curves_figure",
]
