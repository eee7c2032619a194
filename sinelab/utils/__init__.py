"""Utility helpers: paths, config loading, logging, and dataset export."""

from .config import load_config
from .export import (
    dataset_filename,
    dataset_to_csv,
    dataset_to_json,
    export_csv,
    export_json,
    load_dataset_json,
)
from .logging import configure_logging
from .paths import data_root, export_dir, project_root, streamlit_script

__all__ = [
    "load_config",
    "configure_logging",
    "dataset_filename",
    "dataset_to_csv",
    "dataset_to_json",
    "export_csv",
    "export_json",
    "load_dataset_json",
    "data_root",
    "project_root",
    "export_dir",
    "streamlit_script",
]
