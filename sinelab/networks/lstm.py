"""PyTorch LSTM forecaster and the one-epoch fit primitive built on it."""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np
import torch
import torch.nn as nn
from torch.optim import Adam

from ..interfaces.config import TrainingConfig
from ..interfaces.training import FitOptions

logger = logging.getLogger(__name__)

HEAD_UNITS = 32
DROPOUT_P = 0.2


def select_device(preference: str = "auto") -> str:
    if preference != "auto":
        return preference
    if torch.cuda.is_available():  # pragma: no cover - hardware specific
        return "cuda"
    if getattr(torch.backends, "mps", None) and torch.backends.mps.is_available():  # pragma: no cover - hardware specific
        return "mps"
    return "cpu"


class LSTMForecaster(nn.Module):
    """LSTM(units) -> Dropout -> Linear(units, 32) + ReLU -> Linear(32, 1)."""

    def __init__(self, units: int, head_units: int = HEAD_UNITS, dropout_p: float = DROPOUT_P) -> None:
        super().__init__()
        self.lstm = nn.LSTM(input_size=1, hidden_size=units, batch_first=True)
        self.dropout = nn.Dropout(dropout_p)
        self.head = nn.Sequential(
            nn.Linear(units, head_units),
            nn.ReLU(inplace=True),
            nn.Linear(head_units, 1),
        )

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        # x: (batch, steps, 1); only the last hidden state feeds the head
        _, (h_n, _) = self.lstm(x)
        return self.head(self.dropout(h_n[-1]))


class TorchLSTMFit:
    """Callable fit primitive: each call trains :class:`LSTMForecaster` for one epoch.

    Mirrors the Keras ``fit`` conventions the training loop expects: the last
    ``floor(n * validation_split)`` samples are held out for validation, the
    training part is reshuffled every epoch when ``options.shuffle`` is set, and
    the result is a history mapping ``{"loss", "mae", "val_loss", "val_mae"}``
    of one-element lists. Validation keys are omitted when nothing is held out.
    """

    def __init__(
        self,
        config: TrainingConfig,
        *,
        device: str = "auto",
        seed: Optional[int] = None,
    ) -> None:
        self.device = select_device(device)
        self._generator = torch.Generator()
        if seed is not None:
            self._generator.manual_seed(int(seed))
            torch.manual_seed(int(seed))
        else:
            self._generator.seed()
        self.model: LSTMForecaster | None = LSTMForecaster(units=config.units).to(self.device)
        self.optimizer: Adam | None = Adam(self.model.parameters(), lr=config.learning_rate)
        self.loss_fn = nn.MSELoss()
        self._source: tuple[np.ndarray, np.ndarray] | None = None
        self._tensors: tuple[torch.Tensor, torch.Tensor] | None = None

    def _as_tensors(self, xs: np.ndarray, ys: np.ndarray) -> tuple[torch.Tensor, torch.Tensor]:
        if self._source is None or self._source[0] is not xs or self._source[1] is not ys:
            x_tensor = torch.as_tensor(np.asarray(xs, dtype=np.float32), device=self.device)
            y_tensor = torch.as_tensor(np.asarray(ys, dtype=np.float32), device=self.device).reshape(-1, 1)
            self._source = (xs, ys)
            self._tensors = (x_tensor, y_tensor)
        assert self._tensors is not None
        return self._tensors

    @torch.no_grad()
    def _evaluate(self, x: torch.Tensor, y: torch.Tensor, batch_size: int) -> tuple[float, float]:
        assert self.model is not None
        self.model.eval()
        total_loss = 0.0
        total_mae = 0.0
        for start in range(0, x.shape[0], batch_size):
            xb = x[start : start + batch_size]
            yb = y[start : start + batch_size]
            pred = self.model(xb)
            total_loss += float(self.loss_fn(pred, yb).item()) * xb.shape[0]
            total_mae += float((pred - yb).abs().mean().item()) * xb.shape[0]
        count = max(1, x.shape[0])
        return total_loss / count, total_mae / count

    def __call__(self, xs: np.ndarray, ys: np.ndarray, options: FitOptions) -> dict[str, list[float]]:
        if self.model is None or self.optimizer is None:
            raise RuntimeError("This fit primitive has been disposed.")
        x_all, y_all = self._as_tensors(xs, ys)
        total = x_all.shape[0]
        split_at = int(total * (1.0 - float(options.validation_split)))
        if split_at <= 0:
            raise ValueError(
                f"validation_split={options.validation_split} leaves no training samples out of {total}."
            )
        x_train, y_train = x_all[:split_at], y_all[:split_at]
        x_val, y_val = x_all[split_at:], y_all[split_at:]
        batch_size = max(1, int(options.batch_size))

        history: dict[str, list[float]] = {"loss": [], "mae": []}
        for _ in range(max(1, int(options.epochs))):
            self.model.train()
            if options.shuffle:
                order = torch.randperm(split_at, generator=self._generator).to(self.device)
            else:
                order = torch.arange(split_at, device=self.device)
            running_loss = 0.0
            running_mae = 0.0
            for start in range(0, split_at, batch_size):
                idx = order[start : start + batch_size]
                xb, yb = x_train[idx], y_train[idx]

                # Forward pass: MSE on the normalized next value
                self.optimizer.zero_grad(set_to_none=True)
                pred = self.model(xb)
                loss = self.loss_fn(pred, yb)

                # Backward pass
                loss.backward()
                self.optimizer.step()

                running_loss += float(loss.item()) * xb.shape[0]
                running_mae += float((pred.detach() - yb).abs().mean().item()) * xb.shape[0]

            history["loss"].append(running_loss / split_at)
            history["mae"].append(running_mae / split_at)
            if x_val.shape[0] > 0:
                val_loss, val_mae = self._evaluate(x_val, y_val, batch_size)
                history.setdefault("val_loss", []).append(val_loss)
                history.setdefault("val_mae", []).append(val_mae)
            if options.verbose:
                logger.info("fit epoch: %s", {k: v[-1] for k, v in history.items()})
        return history

    @torch.no_grad()
    def predict(self, xs: np.ndarray) -> np.ndarray:
        """Return normalized next-value predictions with shape (samples, 1)."""

        if self.model is None:
            raise RuntimeError("This fit primitive has been disposed.")
        self.model.eval()
        x = torch.as_tensor(np.asarray(xs, dtype=np.float32), device=self.device)
        return self.model(x).cpu().numpy()

    def dispose(self) -> None:
        """Release model, optimizer and cached tensors."""

        self.model = None
        self.optimizer = None
        self._source = None
        self._tensors = None
        if self.device == "cuda":  # pragma: no cover - hardware specific
            torch.cuda.empty_cache()


def describe_architecture(sequence_length: int, units: int, learning_rate: float = 1e-3) -> str:
    """Return an ASCII diagram of :class:`LSTMForecaster` for the given sizes."""

    seq = str(sequence_length).rjust(3)
    hid = str(units).rjust(3)
    return f"""
                        INPUT
                          │
                ┌─────────▼──────────┐
                │  Raw sequences     │
                │  shape (B, {seq}, 1) │
                │  z-score normalized│
                └─────────┬──────────┘
                          │
                ┌─────────▼──────────┐
                │  LSTM              │
                │  units: {hid}        │
                │  dropout: {int(DROPOUT_P * 100)}%      │
                │  output (B, {hid})   │
                └─────────┬──────────┘
                          │
                ┌─────────▼──────────┐
                │  Dense + ReLU      │
                │  output (B, {HEAD_UNITS})    │
                └─────────┬──────────┘
                          │
                ┌─────────▼──────────┐
                │  Dense (linear)    │
                │  output (B, 1)     │
                └─────────┬──────────┘
                          │
                  PREDICTION (next value)

  Loss:       MSE (mean squared error)
  Optimizer:  Adam (learning rate {learning_rate:g})
  Metric:     MAE (mean absolute error)
"""
