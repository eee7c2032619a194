"""Shared fixtures for the sinelab test-suite."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from sinelab.generation import generate_dataset
from sinelab.interfaces import Dataset, GenerationConfig, LaunchOptions


class FakeFit:
    """Scripted fit primitive: returns ``losses[i]`` on call ``i``.

    ``on_call(i)`` runs before each epoch returns; a test can use it to request
    a stop or raise to simulate a failing backend.
    """

    def __init__(
        self,
        losses: list[float] | None = None,
        *,
        on_call: Callable[[int], None] | None = None,
    ) -> None:
        self.losses = losses
        self.on_call = on_call
        self.calls: list[tuple] = []
        self.disposed = 0

    def __call__(self, xs, ys, options):
        index = len(self.calls)
        self.calls.append((xs, ys, options))
        if self.on_call is not None:
            self.on_call(index)
        loss = self.losses[index] if self.losses else 1.0 / (index + 1)
        return {
            "loss": [loss],
            "val_loss": [loss * 1.1],
            "mae": [loss / 2],
            "val_mae": [loss / 2 * 1.1],
        }

    def dispose(self) -> None:
        self.disposed += 1


class FakeClock:
    """Monotonic clock advanced by ``step`` seconds per reading."""

    def __init__(self, step: float = 0.0) -> None:
        self.now = 0.0
        self.step = step

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        return value


class RecordingChannel:
    """InteractionChannel that keeps every message for assertions."""

    def __init__(self) -> None:
        self.messages: list[str] = []
        self.successes: list[str] = []
        self.hints: list[LaunchOptions] = []
        self._paths: dict[str, Path] = {}

    def say(self, message: str) -> None:
        self.messages.append(message)

    def success(self, message: str) -> None:
        self.successes.append(message)

    def hint(self, option: LaunchOptions) -> None:
        self.hints.append(option)

    def default_path(self, key: str) -> Path | None:
        return self._paths.get(key)

    def remember_path(self, key: str, path: Path | None) -> None:
        if path is not None:
            self._paths[key] = path


@pytest.fixture()
def small_config() -> GenerationConfig:
    return GenerationConfig(samples=20, sequence_length=12, seed=7)


@pytest.fixture()
def small_dataset(small_config: GenerationConfig) -> Dataset:
    return generate_dataset(small_config)


@pytest.fixture()
def channel() -> RecordingChannel:
    return RecordingChannel()
