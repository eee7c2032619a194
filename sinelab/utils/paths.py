"""Where sinelab keeps its config, exported datasets, and the Streamlit script."""

from __future__ import annotations

from pathlib import Path

from ..interfaces.config import ExportSettings

_PROJECT_ROOT = Path(__file__).resolve().parents[2]
_DATA_ROOT = _PROJECT_ROOT / "data"


def project_root() -> Path:
    """Checkout root; ``config.yml`` lives here."""

    return _PROJECT_ROOT


def data_root() -> Path:
    return _DATA_ROOT


def export_dir(settings: ExportSettings | None = None, root: Path | None = None) -> Path:
    """Directory that receives dataset exports: ``<root>/<settings.subdir>``.

    ``root`` defaults to :func:`data_root`. Nothing is created here; the
    exporters make parent directories when they write.
    """

    settings = settings or ExportSettings()
    return Path(root or _DATA_ROOT) / settings.subdir


def streamlit_script() -> Path:
    return _PROJECT_ROOT / "sinelab" / "app" / "ui.py"
