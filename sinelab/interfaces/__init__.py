"""Shared interfaces for the sine-wave generation and training toolchain."""

from .config import AppConfig, ExportSettings, GenerationConfig, TrainingConfig
from .dataset import Dataset, DatasetStats, SampleMeta
from .errors import (
    DegenerateDatasetError,
    ExternalFitError,
    InvalidTrainingConfig,
    NonFiniteMetricError,
    SinelabError,
    ValidationError,
)
from .launch_options import LaunchOptions
from .training import (
    EpochMetrics,
    EpochResult,
    FitOptions,
    FitPrimitive,
    TrainingArtifacts,
    TrainingHistory,
    TrainingState,
    TrainingSummary,
)
from .visualization import PlotArtifact

__all__ = [
    "AppConfig",
    "ExportSettings",
    "GenerationConfig",
    "TrainingConfig",
    "Dataset",
    "DatasetStats",
    "SampleMeta",
    "SinelabError",
    "ValidationError",
    "InvalidTrainingConfig",
    "DegenerateDatasetError",
    "ExternalFitError",
    "NonFiniteMetricError",
    "LaunchOptions",
    "EpochMetrics",
    "EpochResult",
    "FitOptions",
    "FitPrimitive",
    "TrainingArtifacts",
    "TrainingHistory",
    "TrainingState",
    "TrainingSummary",
    "PlotArtifact",
]
