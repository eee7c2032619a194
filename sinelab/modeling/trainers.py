"""Epoch-by-epoch training loop with cooperative cancellation."""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterator, Optional

from ..interfaces.config import TrainingConfig
from ..interfaces.dataset import Dataset
from ..interfaces.errors import ExternalFitError, NonFiniteMetricError
from ..interfaces.training import (
    EpochResult,
    FitOptions,
    FitPrimitive,
    TrainingArtifacts,
    TrainingHistory,
    TrainingState,
    TrainingSummary,
)
from .datasets import Normalizer, sample_subset
from .metrics import extract_epoch_metrics, non_finite_fields

logger = logging.getLogger(__name__)

DEFAULT_PROGRESS_INTERVAL = 0.2


def _release(fit: object) -> None:
    for name in ("dispose", "close"):
        release = getattr(fit, name, None)
        if callable(release):
            release()
            return


class TrainingLoopController:
    """
    Drive an external fit primitive one epoch at a time.

    State machine: ``IDLE -> PREPARING -> RUNNING -> {COMPLETED | STOPPED | FAILED}``.

    **Preparation** (first iteration of :meth:`start`):
    1. Reset the stop flag and the metric history of any previous run
    2. Validate the training config (``InvalidTrainingConfig`` names the field)
    3. Low-CPU mode: keep a random ``subset_percent`` of the samples
    4. Z-score sequences and targets with the dataset-level statistics
       (``DegenerateDatasetError`` on a (near) constant dataset)

    **Epoch loop**:
    - ``fit(xs, ys, FitOptions(epochs=1, ...))`` trains exactly one epoch
    - Metrics are pulled out of the returned history by
      :func:`~sinelab.modeling.metrics.extract_epoch_metrics`; a missing or
      non-numeric metric becomes ``0.0``, a NaN/Inf one fails the run
    - The result is appended to the history and yielded, unless an
      intermediate epoch arrives within ``progress_interval`` seconds of the
      previous emission. The final epoch is always yielded.
    - :meth:`request_stop` is honoured between epochs only; the epoch in
      flight always completes.

    **Resources**: the fit primitive's ``dispose()``/``close()`` (when present)
    runs in a ``finally`` block, so it is released on completion, stop,
    failure, or when the consumer closes the generator early.

    **Usage Example**::

        controller = TrainingLoopController()
        fit = TorchLSTMFit(config)
        for result in controller.start(dataset, config, fit):
            print(f"epoch {result.epoch}/{result.total_epochs} loss={result.train_loss:.4f}")
        print(controller.state, controller.summary())
    """

    def __init__(
        self,
        *,
        progress_interval: float = DEFAULT_PROGRESS_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.progress_interval = float(progress_interval)
        self._clock = clock
        self._state = TrainingState.IDLE
        self._stop_requested = False
        self._history = TrainingHistory()
        self.samples_used = 0
        self.samples_total = 0

    @property
    def state(self) -> TrainingState:
        return self._state

    @property
    def history(self) -> TrainingHistory:
        return self._history

    @property
    def stop_requested(self) -> bool:
        return self._stop_requested

    def request_stop(self) -> None:
        """Ask the loop to stop after the epoch currently in flight."""

        self._stop_requested = True

    def summary(self) -> TrainingSummary:
        return TrainingSummary.from_history(self._history)

    def start(
        self,
        dataset: Dataset,
        config: TrainingConfig,
        fit: FitPrimitive,
    ) -> Iterator[EpochResult]:
        """Stream :class:`EpochResult` records while training runs."""

        self._stop_requested = False
        self._history = TrainingHistory()
        self._state = TrainingState.PREPARING
        epoch_index = -1
        try:
            config.validate()
            data = sample_subset(dataset, config.subset_percent) if config.low_cpu else dataset
            self.samples_used = data.num_samples
            self.samples_total = dataset.num_samples
            normalizer = Normalizer.from_stats(dataset.stats)
            xs, ys = normalizer.transform_dataset(data)
            options = FitOptions(
                epochs=1,
                batch_size=config.batch_size,
                validation_split=config.validation_split,
                shuffle=True,
                verbose=0,
            )

            self._state = TrainingState.RUNNING
            last_emit: float | None = None
            for epoch_index in range(config.epochs):
                try:
                    history = fit(xs, ys, options)
                except Exception as error:
                    raise ExternalFitError(epoch_index, f"fit primitive raised {error!r}") from error

                metrics = extract_epoch_metrics(history)
                bad = non_finite_fields(metrics)
                if bad:
                    raise NonFiniteMetricError(
                        epoch_index, f"non-finite metrics reported: {', '.join(bad)}"
                    )
                self._history.append(metrics)
                logger.debug(
                    "epoch %d/%d loss=%.6f val_loss=%.6f mae=%.6f val_mae=%.6f",
                    epoch_index + 1,
                    config.epochs,
                    metrics.train_loss,
                    metrics.val_loss,
                    metrics.train_mae,
                    metrics.val_mae,
                )

                final = epoch_index == config.epochs - 1 or self._stop_requested
                now = self._clock()
                if final or last_emit is None or now - last_emit >= self.progress_interval:
                    last_emit = now
                    yield EpochResult(
                        epoch_index=epoch_index,
                        total_epochs=config.epochs,
                        train_loss=metrics.train_loss,
                        val_loss=metrics.val_loss,
                        train_mae=metrics.train_mae,
                        val_mae=metrics.val_mae,
                        progress_percent=(epoch_index + 1) / config.epochs * 100.0,
                    )

                # Cooperative cancellation is only observed between epochs
                if self._stop_requested:
                    self._state = TrainingState.STOPPED
                    logger.info("Training stopped after epoch %d/%d", epoch_index + 1, config.epochs)
                    return

            self._state = TrainingState.COMPLETED
        except GeneratorExit:
            self._state = TrainingState.STOPPED
            raise
        except Exception as error:
            self._state = TrainingState.FAILED
            if epoch_index >= 0:
                logger.error("Training failed at epoch %d: %s", epoch_index + 1, error)
            else:
                logger.error("Training preparation failed: %s", error)
            raise
        finally:
            _release(fit)

    def run(
        self,
        dataset: Dataset,
        config: TrainingConfig,
        fit: FitPrimitive,
        progress_cb: Optional[Callable[[EpochResult], None]] = None,
    ) -> TrainingArtifacts:
        """Train to completion (or stop) and return the run's artifacts."""

        logger.info(
            "Training on %d samples: units=%s batch=%s epochs=%s lr=%s split=%s low_cpu=%s",
            dataset.num_samples,
            config.units,
            config.batch_size,
            config.epochs,
            config.learning_rate,
            config.validation_split,
            config.low_cpu,
        )
        start = time.perf_counter()
        for result in self.start(dataset, config, fit):
            if progress_cb is not None:
                progress_cb(result)
        duration = time.perf_counter() - start
        summary = self.summary()
        logger.info(
            "Training %s in %.2fs: final loss=%.6f val_loss=%.6f best val_loss=%.6f (epoch %d)",
            self._state.value,
            duration,
            summary.final_train_loss,
            summary.final_val_loss,
            summary.best_val_loss,
            summary.best_epoch,
        )
        return TrainingArtifacts(
            state=self._state,
            history=self._history,
            summary=summary,
            samples_used=self.samples_used,
            samples_total=self.samples_total,
            duration_s=duration,
        )
