"""Neural network backends for next-value prediction.

The training loop only knows the ``fit(xs, ys, options) -> history`` contract;
this package supplies the PyTorch implementation of it.

    LSTMForecaster        nn.Module: LSTM(units) → Dropout(0.2) → Dense(32, ReLU) → Dense(1)
    TorchLSTMFit          one-epoch fit primitive (Adam + MSE, MAE metric, Keras-style
                          validation split), releases its model/tensors on dispose()
    describe_architecture ASCII diagram used by the CLI and the Streamlit app
    select_device         "auto" → cuda / mps / cpu
"""

from .lstm import LSTMForecaster, TorchLSTMFit, describe_architecture, select_device

__all__ = [
    "LSTMForecaster",
    "TorchLSTMFit",
    "describe_architecture",
    "select_device",
]
