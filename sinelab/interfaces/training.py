"""Training-run interfaces: fit contract, epoch results, and run summaries."""

from __future__ import annotations

import math
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

import numpy as np

OVERFIT_RATIO = 1.1


class TrainingState(str, Enum):
    IDLE = "idle"
    PREPARING = "preparing"
    RUNNING = "running"
    COMPLETED = "completed"
    STOPPED = "stopped"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (TrainingState.COMPLETED, TrainingState.STOPPED, TrainingState.FAILED)


@dataclass(frozen=True)
class FitOptions:
    """Options handed to the model-fit primitive for a single epoch."""

    epochs: int
    batch_size: int
    validation_split: float
    shuffle: bool = True
    verbose: int = 0


class FitPrimitive(Protocol):
    """Anything that trains one epoch and reports at least ``loss``/``val_loss``."""

    def __call__(
        self, xs: np.ndarray, ys: np.ndarray, options: FitOptions
    ) -> Any:  # pragma: no cover - protocol definition
        ...


@dataclass(frozen=True)
class EpochMetrics:
    train_loss: float
    val_loss: float
    train_mae: float
    val_mae: float

    def is_finite(self) -> bool:
        return all(
            math.isfinite(v)
            for v in (self.train_loss, self.val_loss, self.train_mae, self.val_mae)
        )


@dataclass(frozen=True)
class EpochResult:
    """Progress record emitted after a completed epoch."""

    epoch_index: int
    total_epochs: int
    train_loss: float
    val_loss: float
    train_mae: float
    val_mae: float
    progress_percent: float

    @property
    def epoch(self) -> int:
        return self.epoch_index + 1


@dataclass
class TrainingHistory:
    """Append-only per-epoch metric history of one run.

    A training thread may append while another thread reads; readers on other
    threads should work from :meth:`snapshot`, whose four lists always have
    the same length.
    """

    train_losses: list[float] = field(default_factory=list)
    val_losses: list[float] = field(default_factory=list)
    train_maes: list[float] = field(default_factory=list)
    val_maes: list[float] = field(default_factory=list)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def append(self, metrics: EpochMetrics) -> None:
        with self._lock:
            self.train_losses.append(metrics.train_loss)
            self.val_losses.append(metrics.val_loss)
            self.train_maes.append(metrics.train_mae)
            self.val_maes.append(metrics.val_mae)

    def snapshot(self) -> "TrainingHistory":
        with self._lock:
            return TrainingHistory(
                train_losses=list(self.train_losses),
                val_losses=list(self.val_losses),
                train_maes=list(self.train_maes),
                val_maes=list(self.val_maes),
            )

    def __len__(self) -> int:
        return len(self.train_losses)


@dataclass(frozen=True)
class TrainingSummary:
    final_train_loss: float
    final_val_loss: float
    best_val_loss: float
    best_epoch: int
    train_val_ratio: float

    @property
    def overfitting(self) -> bool:
        """True when the final validation loss exceeds the train loss by more than 10%."""

        return self.final_val_loss > OVERFIT_RATIO * self.final_train_loss

    @classmethod
    def from_history(cls, history: TrainingHistory) -> "TrainingSummary":
        history = history.snapshot()
        if not len(history):
            raise RuntimeError("No completed epochs to summarize.")
        final_train = history.train_losses[-1]
        final_val = history.val_losses[-1]
        best_val = min(history.val_losses)
        ratio = final_val / final_train if final_train != 0 else math.nan
        return cls(
            final_train_loss=final_train,
            final_val_loss=final_val,
            best_val_loss=best_val,
            # list.index returns the first occurrence of the minimum
            best_epoch=history.val_losses.index(best_val) + 1,
            train_val_ratio=ratio,
        )


@dataclass(frozen=True)
class TrainingArtifacts:
    """Outcome of :meth:`TrainingLoopController.run`."""

    state: TrainingState
    history: TrainingHistory
    summary: TrainingSummary
    samples_used: int
    samples_total: int
    duration_s: float
