"""Tests for the epoch-by-epoch training loop controller."""

from __future__ import annotations

import math
import threading

import pytest
from conftest import FakeClock, FakeFit

from sinelab.generation import generate_dataset
from sinelab.interfaces import (
    DegenerateDatasetError,
    EpochMetrics,
    ExternalFitError,
    GenerationConfig,
    InvalidTrainingConfig,
    NonFiniteMetricError,
    TrainingConfig,
    TrainingHistory,
    TrainingState,
    TrainingSummary,
)
from sinelab.modeling import TrainingLoopController


def _controller(step: float = 1.0) -> TrainingLoopController:
    return TrainingLoopController(progress_interval=0.2, clock=FakeClock(step))


def test_full_run_emits_every_epoch_when_slow(small_dataset) -> None:
    controller = _controller(step=1.0)
    fit = FakeFit()
    config = TrainingConfig(epochs=4, batch_size=8)
    results = list(controller.start(small_dataset, config, fit))
    assert [r.epoch_index for r in results] == [0, 1, 2, 3]
    assert results[-1].progress_percent == 100.0
    assert controller.state is TrainingState.COMPLETED
    assert len(controller.history) == 4
    assert fit.disposed == 1


def test_fit_called_one_epoch_at_a_time(small_dataset) -> None:
    fit = FakeFit()
    config = TrainingConfig(epochs=2, batch_size=5, validation_split=0.25)
    list(_controller().start(small_dataset, config, fit))
    options = fit.calls[0][2]
    assert options.epochs == 1
    assert options.batch_size == 5
    assert options.validation_split == 0.25
    assert options.shuffle is True
    xs, ys = fit.calls[0][0], fit.calls[0][1]
    assert xs.shape == (20, 12, 1)
    assert ys.shape == (20, 1)


def test_throttle_drops_intermediate_but_keeps_final(small_dataset) -> None:
    controller = _controller(step=0.0)
    results = list(controller.start(small_dataset, TrainingConfig(epochs=6), FakeFit()))
    assert [r.epoch_index for r in results] == [0, 5]
    assert len(controller.history) == 6


def test_throttle_window_boundary(small_dataset) -> None:
    controller = _controller(step=0.1)
    results = list(controller.start(small_dataset, TrainingConfig(epochs=5), FakeFit()))
    # readings 0.0, 0.1, 0.2, 0.3, 0.4 → emit at 0.0, 0.2 and the final epoch
    assert [r.epoch_index for r in results] == [0, 2, 4]


def test_stop_during_epoch_k_emits_nothing_later(small_dataset) -> None:
    controller = _controller(step=0.0)

    def stop_at_two(index: int) -> None:
        if index == 2:
            controller.request_stop()

    fit = FakeFit(on_call=stop_at_two)
    results = list(controller.start(small_dataset, TrainingConfig(epochs=10), fit))
    assert results[-1].epoch_index == 2
    assert all(r.epoch_index <= 2 for r in results)
    assert len(fit.calls) == 3
    assert controller.state is TrainingState.STOPPED
    assert fit.disposed == 1


def test_stop_from_consumer_between_epochs(small_dataset) -> None:
    controller = _controller(step=1.0)
    fit = FakeFit()
    seen = []
    for result in controller.start(small_dataset, TrainingConfig(epochs=8), fit):
        seen.append(result.epoch_index)
        if result.epoch_index == 1:
            controller.request_stop()
    assert seen == [0, 1]
    assert controller.state is TrainingState.STOPPED


def test_new_run_resets_stop_flag_and_history(small_dataset) -> None:
    controller = _controller()
    controller.request_stop()
    results = list(controller.start(small_dataset, TrainingConfig(epochs=3), FakeFit()))
    assert len(results) == 3
    assert len(controller.history) == 3
    list(controller.start(small_dataset, TrainingConfig(epochs=2), FakeFit()))
    assert len(controller.history) == 2


def test_fit_error_is_wrapped_with_epoch(small_dataset) -> None:
    def explode(index: int) -> None:
        if index == 1:
            raise MemoryError("out of memory")

    controller = _controller()
    fit = FakeFit(on_call=explode)
    with pytest.raises(ExternalFitError) as excinfo:
        list(controller.start(small_dataset, TrainingConfig(epochs=5), fit))
    assert excinfo.value.epoch_index == 1
    assert isinstance(excinfo.value.__cause__, MemoryError)
    assert controller.state is TrainingState.FAILED
    assert len(controller.history) == 1
    assert fit.disposed == 1


def test_non_finite_metric_fails_run(small_dataset) -> None:
    controller = _controller()
    fit = FakeFit(losses=[0.5, math.nan, 0.1])
    with pytest.raises(NonFiniteMetricError) as excinfo:
        list(controller.start(small_dataset, TrainingConfig(epochs=3), fit))
    assert excinfo.value.epoch_index == 1
    assert controller.state is TrainingState.FAILED
    assert fit.disposed == 1


def test_invalid_config_fails_before_fit(small_dataset) -> None:
    controller = _controller()
    fit = FakeFit()
    with pytest.raises(InvalidTrainingConfig) as excinfo:
        list(controller.start(small_dataset, TrainingConfig(epochs=0), fit))
    assert excinfo.value.field == "epochs"
    assert fit.calls == []
    assert controller.state is TrainingState.FAILED
    assert fit.disposed == 1


def test_degenerate_dataset_fails() -> None:
    dataset = generate_dataset(
        GenerationConfig(samples=4, sequence_length=3, noise_std=0.0, amp_min=0.0, amp_max=0.0),
        allow_degenerate_ranges=True,
    )
    controller = _controller()
    with pytest.raises(DegenerateDatasetError):
        list(controller.start(dataset, TrainingConfig(epochs=2), FakeFit()))
    assert controller.state is TrainingState.FAILED


def test_closing_generator_releases_fit(small_dataset) -> None:
    controller = _controller()
    fit = FakeFit()
    stream = controller.start(small_dataset, TrainingConfig(epochs=5), fit)
    next(stream)
    stream.close()
    assert controller.state is TrainingState.STOPPED
    assert fit.disposed == 1


def test_low_cpu_trains_on_subset(small_dataset) -> None:
    controller = _controller()
    fit = FakeFit()
    config = TrainingConfig(epochs=1, low_cpu=True, subset_percent=25)
    list(controller.start(small_dataset, config, fit))
    assert fit.calls[0][0].shape == (5, 12, 1)
    assert (controller.samples_used, controller.samples_total) == (5, 20)


def test_run_returns_artifacts_and_summary(small_dataset) -> None:
    controller = _controller()
    received = []
    artifacts = controller.run(
        small_dataset,
        TrainingConfig(epochs=3),
        FakeFit(losses=[0.4, 0.1, 0.2]),
        progress_cb=received.append,
    )
    assert artifacts.state is TrainingState.COMPLETED
    assert len(received) == 3
    summary = artifacts.summary
    assert summary.final_train_loss == 0.2
    assert summary.best_epoch == 2
    assert summary.best_val_loss == pytest.approx(0.11)
    assert summary.train_val_ratio == pytest.approx(1.1)
    assert artifacts.samples_used == artifacts.samples_total == 20


def test_summary_before_any_epoch_raises() -> None:
    with pytest.raises(RuntimeError):
        TrainingLoopController().summary()


def test_history_snapshot_is_a_consistent_copy() -> None:
    history = TrainingHistory()
    history.append(EpochMetrics(0.5, 0.6, 0.2, 0.3))
    snapshot = history.snapshot()
    history.append(EpochMetrics(0.4, 0.5, 0.1, 0.2))
    assert len(snapshot) == 1
    assert snapshot.val_losses == [0.6]
    assert len(history) == 2


def test_snapshot_lists_match_under_concurrent_appends() -> None:
    history = TrainingHistory()
    finished = threading.Event()

    def writer() -> None:
        for i in range(20000):
            history.append(EpochMetrics(float(i), float(i), float(i), float(i)))
        finished.set()

    thread = threading.Thread(target=writer)
    thread.start()
    while not finished.is_set():
        snapshot = history.snapshot()
        lengths = {
            len(snapshot.train_losses),
            len(snapshot.val_losses),
            len(snapshot.train_maes),
            len(snapshot.val_maes),
        }
        assert len(lengths) == 1
    thread.join()


@pytest.mark.parametrize(
    "final_train, final_val, expected",
    [(0.10, 0.12, True), (0.10, 0.11, False), (0.10, 0.05, False)],
)
def test_summary_flags_overfitting(final_train, final_val, expected) -> None:
    history = TrainingHistory()
    history.append(EpochMetrics(final_train, final_val, 0.0, 0.0))
    assert TrainingSummary.from_history(history).overfitting is expected
