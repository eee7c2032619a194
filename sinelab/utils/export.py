"""Dataset export and import helpers (JSON and CSV)."""

from __future__ import annotations

import datetime as _dt
import json
import logging
from pathlib import Path
from typing import Any

import pandas as pd

from ..interfaces.dataset import Dataset

logger = logging.getLogger(__name__)

CSV_COLUMNS = (
    "sample_id",
    "time_step",
    "value",
    "target",
    "amplitude",
    "frequency",
    "phase",
)


def dataset_filename(prefix: str, date: _dt.date | None = None, suffix: str = "json") -> str:
    """Return ``<prefix>_<YYYY-MM-DD>.<suffix>``."""

    day = date or _dt.date.today()
    return f"{prefix}_{day.isoformat()}.{suffix}"


def dataset_to_json(dataset: Dataset) -> str:
    """Serialize the full dataset, pretty-printed with two-space indentation."""

    return json.dumps(dataset.to_json_dict(), indent=2, ensure_ascii=False)


def dataset_to_frame(dataset: Dataset) -> pd.DataFrame:
    """Long-format frame with one row per (sample, time step)."""

    rows: list[dict[str, Any]] = []
    for sequence, target, meta in zip(dataset.sequences, dataset.targets, dataset.metadata):
        for step, value in enumerate(sequence.tolist()):
            rows.append(
                {
                    "sample_id": meta.sample_id,
                    "time_step": step,
                    "value": value,
                    "target": float(target),
                    "amplitude": meta.amplitude,
                    "frequency": meta.frequency,
                    "phase": meta.phase,
                }
            )
    return pd.DataFrame(rows, columns=list(CSV_COLUMNS))


def dataset_to_csv(dataset: Dataset) -> str:
    return dataset_to_frame(dataset).to_csv(index=False, lineterminator="\n")


def _write_text(path: Path, text: str) -> Path:
    path = Path(path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def export_json(dataset: Dataset, path: str | Path) -> Path:
    written = _write_text(Path(path), dataset_to_json(dataset))
    logger.info("Exported %d samples to %s", dataset.num_samples, written)
    return written


def export_csv(dataset: Dataset, path: str | Path) -> Path:
    written = _write_text(Path(path), dataset_to_csv(dataset))
    logger.info("Exported %d CSV rows to %s", dataset.num_samples * dataset.sequence_length, written)
    return written


def load_dataset_json(path: str | Path) -> Dataset:
    """Rebuild a :class:`Dataset` from a JSON export."""

    source = Path(path).expanduser()
    if not source.exists():
        raise FileNotFoundError(f"Dataset file not found: {source}")
    with source.open("r", encoding="utf-8") as handle:
        raw = json.load(handle)
    try:
        dataset = Dataset.from_json_dict(raw)
    except (KeyError, TypeError) as exc:
        raise ValueError(f"{source} is not a sinelab dataset export: {exc}") from exc
    logger.info("Loaded %d samples from %s", dataset.num_samples, source)
    return dataset
