"""Streamlit front end for sinelab."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import MutableMapping

import matplotlib.pyplot as plt
import pandas as pd
import streamlit as st
from matplotlib.figure import Figure

from sinelab.cli.commands import InteractionChannel
from sinelab.generation import generate_dataset
from sinelab.interfaces.config import AppConfig, GenerationConfig, TrainingConfig
from sinelab.interfaces.dataset import Dataset
from sinelab.interfaces.launch_options import LaunchOptions
from sinelab.interfaces.training import EpochResult, TrainingHistory, TrainingState
from sinelab.modeling import TrainingLoopController
from sinelab.networks import TorchLSTMFit, describe_architecture
from sinelab.utils.config import load_config
from sinelab.utils.export import dataset_filename, dataset_to_csv, dataset_to_json
from sinelab.utils.paths import data_root
from sinelab.visualization import dataset_preview_figure

REFRESH_SECONDS = 0.5


class StreamlitChannel(InteractionChannel):
    def __init__(self) -> None:
        self._last_paths: dict[str, Path] = {}

    def say(self, message: str) -> None:
        st.info(message)

    def success(self, message: str) -> None:
        st.success(message)

    def hint(self, option: LaunchOptions) -> None:
        st.caption(f"Try the CLI: `{option.command_hint()}`")

    def default_path(self, key: str) -> Path | None:
        return self._last_paths.get(key)

    def remember_path(self, key: str, path: Path | None) -> None:
        if path is not None:
            self._last_paths[key] = path


@dataclass
class TrainingRun:
    """Background training thread plus what the page needs to redraw it."""

    controller: TrainingLoopController
    config: TrainingConfig
    results: list[EpochResult] = field(default_factory=list)
    error: Exception | None = None
    thread: threading.Thread | None = None
    _cancelled: threading.Event = field(default_factory=threading.Event, init=False, repr=False)

    def start(self, dataset: Dataset, fit) -> None:
        def _worker() -> None:
            try:
                for result in self.controller.start(dataset, self.config, fit):
                    self.results.append(result)
                    # controller.start() clears stop requests made before its first epoch
                    if self._cancelled.is_set():
                        self.controller.request_stop()
            except Exception as error:  # surfaced on the next rerun via st.error
                self.error = error

        self.thread = threading.Thread(target=_worker, name="sinelab-training", daemon=True)
        self.thread.start()

    def cancel(self) -> None:
        """Stop the run after the epoch in flight."""

        self._cancelled.set()
        self.controller.request_stop()

    @property
    def running(self) -> bool:
        return self.thread is not None and self.thread.is_alive()


def retire_training_run(state: MutableMapping) -> TrainingRun | None:
    """Drop the session's training run, stopping it first when still alive."""

    run: TrainingRun | None = state.pop("training_run", None)
    if run is not None and run.running:
        run.cancel()
    return run


def show_figure(fig: Figure) -> None:
    """Render a matplotlib figure and release it; Streamlit reruns build a new one."""

    try:
        st.pyplot(fig)
    finally:
        plt.close(fig)


def history_frame(history: TrainingHistory) -> pd.DataFrame:
    """Per-epoch metrics indexed by epoch, read from a consistent snapshot."""

    snapshot = history.snapshot()
    return pd.DataFrame(
        {
            "epoch": range(1, len(snapshot) + 1),
            "train loss": snapshot.train_losses,
            "val loss": snapshot.val_losses,
            "train MAE": snapshot.train_maes,
            "val MAE": snapshot.val_maes,
        }
    ).set_index("epoch")


def _load_app_config() -> AppConfig:
    try:
        return load_config()
    except FileNotFoundError:
        return AppConfig(version="unknown", data_root=data_root())


def main() -> None:
    st.set_page_config(page_title="sinelab", layout="wide")
    config = _load_app_config()
    channel = StreamlitChannel()

    st.title("Sine-wave LSTM lab")
    st.write(
        "Generate noisy sine waves, inspect them, then train an LSTM to predict the next value."
    )
    st.sidebar.header("sinelab")
    st.sidebar.caption(f"Version: {config.version}")

    _render_generation_panel(channel, config)
    dataset: Dataset | None = st.session_state.get("dataset")
    if dataset is None:
        st.caption("Status: no dataset generated yet.")
        return
    _render_dataset_panel(dataset, config)
    _render_training_panel(dataset, config)
    with st.expander("Model architecture"):
        training: TrainingConfig = st.session_state.get("training_config", config.training)
        st.code(
            describe_architecture(dataset.sequence_length, training.units, training.learning_rate),
            language="text",
        )


def _render_generation_panel(channel: InteractionChannel, config: AppConfig) -> None:
    gen = config.generation
    st.subheader("1. Generate dataset")
    with st.form("generate-form"):
        cols = st.columns(4)
        samples = cols[0].number_input("Samples", min_value=1, value=gen.samples, step=10)
        sequence_length = cols[1].number_input(
            "Sequence length", min_value=1, value=gen.sequence_length, step=5
        )
        seed = cols[2].number_input("Seed", value=gen.seed, step=1)
        noise_std = cols[3].number_input(
            "Noise std", min_value=0.0, value=gen.noise_std, step=0.01, format="%.3f"
        )
        cols = st.columns(4)
        amp_min = cols[0].number_input("Amplitude min", value=gen.amp_min, step=0.1)
        amp_max = cols[1].number_input("Amplitude max", value=gen.amp_max, step=0.1)
        freq_min = cols[2].number_input("Frequency min", value=gen.freq_min, step=0.01, format="%.3f")
        freq_max = cols[3].number_input("Frequency max", value=gen.freq_max, step=0.01, format="%.3f")
        submitted = st.form_submit_button("Generate")

    if not submitted:
        return
    generation = GenerationConfig(
        samples=int(samples),
        sequence_length=int(sequence_length),
        seed=int(seed),
        noise_std=float(noise_std),
        amp_min=float(amp_min),
        amp_max=float(amp_max),
        freq_min=float(freq_min),
        freq_max=float(freq_max),
    )
    progress = st.progress(0.0, text="Generating...")
    try:
        dataset = generate_dataset(
            generation,
            progress_cb=lambda done, total: progress.progress(done / total, text=f"Generated {done}/{total}"),
        )
    except Exception as error:
        st.error(f"{error.__class__.__name__}: {error}")
        return
    st.session_state["dataset"] = dataset
    st.session_state["sample_index"] = 0
    previous = retire_training_run(st.session_state)
    if previous is not None and previous.running:
        st.info("Stopping the previous training run after its current epoch.")
    channel.success(
        f"Generated {dataset.num_samples} samples x {dataset.sequence_length} steps."
    )
    channel.hint(LaunchOptions(command="generate", generation=generation))


def _render_dataset_panel(dataset: Dataset, config: AppConfig) -> None:
    stats = dataset.stats
    st.subheader("2. Inspect")
    cols = st.columns(5)
    cols[0].metric("Samples", stats.samples_count)
    cols[1].metric("Min", f"{stats.min:.4f}")
    cols[2].metric("Max", f"{stats.max:.4f}")
    cols[3].metric("Mean", f"{stats.mean:.4f}")
    cols[4].metric("Std", f"{stats.std:.4f}")
    st.caption(f"Generated at {stats.generated_at}")

    index = int(st.session_state.get("sample_index", 0))
    nav = st.columns([1, 1, 2, 4])
    if nav[0].button("◀ Previous", disabled=index <= 0):
        index -= 1
    if nav[1].button("Next ▶", disabled=index >= dataset.num_samples - 1):
        index += 1
    overlay = nav[2].checkbox("Overlay previous sample")
    index = min(max(index, 0), dataset.num_samples - 1)
    st.session_state["sample_index"] = index
    meta = dataset.metadata[index]
    nav[3].caption(
        f"Sample {index + 1}/{dataset.num_samples}: amplitude {meta.amplitude:.3f}, "
        f"frequency {meta.frequency:.4f}, phase {meta.phase:.3f}, target {dataset.targets[index]:.4f}"
    )
    show_figure(dataset_preview_figure(dataset, index, overlay=overlay))

    cols = st.columns(2)
    cols[0].download_button(
        "Download JSON",
        data=dataset_to_json(dataset),
        file_name=dataset_filename(config.export.prefix),
        mime="application/json",
    )
    cols[1].download_button(
        "Download CSV",
        data=dataset_to_csv(dataset),
        file_name=dataset_filename(config.export.prefix, suffix="csv"),
        mime="text/csv",
    )


def _render_training_panel(dataset: Dataset, config: AppConfig) -> None:
    defaults = config.training
    run: TrainingRun | None = st.session_state.get("training_run")
    busy = run is not None and run.running

    st.subheader("3. Train")
    with st.form("train-form"):
        cols = st.columns(5)
        units = cols[0].number_input("LSTM units", min_value=1, value=defaults.units, step=8)
        batch_size = cols[1].number_input("Batch size", min_value=1, value=defaults.batch_size, step=8)
        epochs = cols[2].number_input("Epochs", min_value=1, value=defaults.epochs, step=5)
        learning_rate = cols[3].number_input(
            "Learning rate", min_value=0.0, value=defaults.learning_rate, step=0.0005, format="%.4f"
        )
        validation_split = cols[4].number_input(
            "Validation split", min_value=0.0, max_value=0.95, value=defaults.validation_split, step=0.05
        )
        cols = st.columns(2)
        low_cpu = cols[0].checkbox("Low-CPU mode", value=defaults.low_cpu)
        subset_percent = cols[1].slider(
            "Subset percent", min_value=1, max_value=100, value=defaults.subset_percent
        )
        start = st.form_submit_button("Start training", disabled=busy)

    if start and not busy:
        training = TrainingConfig(
            units=int(units),
            batch_size=int(batch_size),
            epochs=int(epochs),
            learning_rate=float(learning_rate),
            validation_split=float(validation_split),
            low_cpu=bool(low_cpu),
            subset_percent=int(subset_percent),
        )
        try:
            training.validate()
        except Exception as error:
            st.error(f"{error.__class__.__name__}: {error}")
            return
        st.session_state["training_config"] = training
        run = TrainingRun(
            controller=TrainingLoopController(progress_interval=config.progress_interval),
            config=training,
        )
        run.start(dataset, TorchLSTMFit(training))
        st.session_state["training_run"] = run
        busy = True

    if run is None:
        return
    if busy and st.button("Stop training"):
        run.controller.request_stop()
        st.info("Stop requested; the current epoch will finish first.")

    _render_training_progress(run)
    if run.running:
        time.sleep(REFRESH_SECONDS)
        st.rerun()


def _render_training_progress(run: TrainingRun) -> None:
    controller = run.controller
    latest = run.results[-1] if run.results else None
    if latest is not None:
        st.progress(
            min(latest.progress_percent / 100.0, 1.0),
            text=f"Epoch {latest.epoch}/{latest.total_epochs}",
        )
    st.caption(f"Status: {controller.state.value}")
    if not controller.state.is_terminal and controller.stop_requested:
        st.caption("Stopping after the current epoch...")
    if controller.samples_total:
        st.caption(f"Training on {controller.samples_used}/{controller.samples_total} samples")

    frame = history_frame(controller.history)
    if len(frame):
        cols = st.columns(2)
        cols[0].line_chart(frame[["train loss", "val loss"]])
        cols[1].line_chart(frame[["train MAE", "val MAE"]])

    if run.error is not None:
        st.error(f"{run.error.__class__.__name__}: {run.error}")
        return
    if controller.state in (TrainingState.COMPLETED, TrainingState.STOPPED) and len(frame):
        summary = controller.summary()
        cols = st.columns(4)
        cols[0].metric("Final train loss", f"{summary.final_train_loss:.6f}")
        cols[1].metric("Final val loss", f"{summary.final_val_loss:.6f}")
        cols[2].metric("Best val loss", f"{summary.best_val_loss:.6f}", help=f"epoch {summary.best_epoch}")
        cols[3].metric(
            "Val/train ratio",
            f"{summary.train_val_ratio:.3f}",
            delta="possible overfitting" if summary.overfitting else None,
            delta_color="inverse",
        )
        if summary.overfitting:
            st.caption("Validation loss ends more than 10% above the training loss.")


if __name__ == "__main__":  # pragma: no cover - manual launch
    main()
