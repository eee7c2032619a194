"""Exception taxonomy shared by the generator, normalizer, and training loop."""

from __future__ import annotations


class SinelabError(Exception):
    """Base class for every error raised by the sinelab core."""


class ValidationError(SinelabError, ValueError):
    """A configuration field is missing, non-numeric, or outside its range."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class InvalidTrainingConfig(ValidationError):
    """A training hyperparameter failed validation before the run started."""


class DegenerateDatasetError(SinelabError, ValueError):
    """The dataset has (near) zero variance and cannot be z-score normalized."""


class ExternalFitError(SinelabError, RuntimeError):
    """The model-fit primitive raised or returned an unusable result."""

    def __init__(self, epoch_index: int, message: str) -> None:
        super().__init__(f"epoch {epoch_index + 1}: {message}")
        self.epoch_index = epoch_index


class NonFiniteMetricError(ExternalFitError):
    """A fit call reported NaN or infinite metrics."""
