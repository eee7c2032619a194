"""Tests for the fit-history metric adapter."""

from __future__ import annotations

import math
from types import SimpleNamespace

import numpy as np

from sinelab.modeling import extract_epoch_metrics, extract_metric
from sinelab.modeling.metrics import VAL_MAE_KEYS, non_finite_fields


def test_plain_mapping_with_lists() -> None:
    metrics = extract_epoch_metrics(
        {"loss": [0.9, 0.5], "val_loss": [0.6], "mae": [0.4], "val_mae": [0.45]}
    )
    assert metrics.train_loss == 0.5
    assert metrics.val_loss == 0.6
    assert metrics.train_mae == 0.4
    assert metrics.val_mae == 0.45


def test_keras_style_history_attribute() -> None:
    result = SimpleNamespace(history={"loss": [0.2], "valLoss": [0.3], "meanAbsoluteError": [0.1]})
    metrics = extract_epoch_metrics(result)
    assert (metrics.train_loss, metrics.val_loss, metrics.train_mae) == (0.2, 0.3, 0.1)
    assert metrics.val_mae == 0.0


def test_attribute_and_array_values() -> None:
    result = SimpleNamespace(loss=np.array([0.7, 0.25]), val_loss=np.float32(0.5))
    metrics = extract_epoch_metrics(result)
    assert metrics.train_loss == 0.25
    assert metrics.val_loss == 0.5


def test_key_priority_order() -> None:
    history = {"val_mean_absolute_error": [3.0], "valMeanAbsoluteError": [2.0], "val_mae": [1.0]}
    assert extract_metric(history, VAL_MAE_KEYS) == 1.0


def test_missing_or_unusable_values_default_to_zero() -> None:
    metrics = extract_epoch_metrics({"loss": "n/a", "val_loss": [], "mae": None, "val_mae": True})
    assert metrics.train_loss == 0.0
    assert metrics.val_loss == 0.0
    assert metrics.train_mae == 0.0
    assert metrics.val_mae == 0.0


def test_non_finite_values_pass_through_for_rejection() -> None:
    metrics = extract_epoch_metrics({"loss": [float("nan")], "val_loss": [math.inf]})
    assert non_finite_fields(metrics) == ["train_loss", "val_loss"]
