"""Visualization-oriented interfaces."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class PlotArtifact:
    """Metadata describing a saved visualization asset."""

    path: Path | None
