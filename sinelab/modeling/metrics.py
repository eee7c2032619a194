"""Boundary adapter that pulls per-epoch metrics out of a fit history.

Fit primitives report metrics in different shapes: a plain mapping, a
Keras-style object with a ``.history`` mapping, or attributes on the result
itself; values may be scalars, lists, NumPy arrays or tensors. Everything is
reduced here to plain floats so the training loop only sees ``EpochMetrics``.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Sequence

from ..interfaces.training import EpochMetrics

TRAIN_LOSS_KEYS: tuple[str, ...] = ("loss",)
VAL_LOSS_KEYS: tuple[str, ...] = ("val_loss", "valLoss")
TRAIN_MAE_KEYS: tuple[str, ...] = ("mae", "meanAbsoluteError", "mean_absolute_error")
VAL_MAE_KEYS: tuple[str, ...] = ("val_mae", "valMeanAbsoluteError", "val_mean_absolute_error")

_MISSING = object()


def _lookup(history: Any, key: str) -> Any:
    records = getattr(history, "history", None)
    if isinstance(records, Mapping) and key in records:
        return records[key]
    if isinstance(history, Mapping):
        return history.get(key, _MISSING)
    return getattr(history, key, _MISSING)


def _to_scalar(value: Any) -> float | None:
    if value is _MISSING or value is None:
        return None
    if hasattr(value, "tolist") and not isinstance(value, (str, bytes)):
        value = value.tolist()
    if isinstance(value, (list, tuple)):
        if not value:
            return None
        return _to_scalar(value[-1])
    if isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def extract_metric(history: Any, keys: Sequence[str], default: float = 0.0) -> float:
    """Return the first numeric value found under ``keys``, else ``default``.

    Non-finite numbers are returned as-is so the caller can reject them.
    """

    for key in keys:
        scalar = _to_scalar(_lookup(history, key))
        if scalar is not None:
            return scalar
    return default


def extract_epoch_metrics(history: Any) -> EpochMetrics:
    return EpochMetrics(
        train_loss=extract_metric(history, TRAIN_LOSS_KEYS),
        val_loss=extract_metric(history, VAL_LOSS_KEYS),
        train_mae=extract_metric(history, TRAIN_MAE_KEYS),
        val_mae=extract_metric(history, VAL_MAE_KEYS),
    )


def non_finite_fields(metrics: EpochMetrics) -> list[str]:
    return [
        name
        for name in ("train_loss", "val_loss", "train_mae", "val_mae")
        if not math.isfinite(getattr(metrics, name))
    ]
