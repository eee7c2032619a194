"""Shared launch option definitions consumed by the CLI and Streamlit app."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from .config import GenerationConfig, TrainingConfig


@dataclass(frozen=True)
class LaunchOptions:
    """Inputs that drive dataset generation, export, and training."""

    command: str
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    training: TrainingConfig = field(default_factory=TrainingConfig)
    input_path: Path | None = None
    output_path: Path | None = None
    export_csv: bool = False
    plot_path: Path | None = None
    prefix: str | None = None
    extra_flags: tuple[str, ...] = field(default_factory=tuple)

    def command_hint(self) -> str:
        short = f"sinelab-cli {self.command}"
        args: list[str] = []
        if self.command == "generate":
            gen = self.generation
            args.extend(
                [
                    f"--samples {gen.samples}",
                    f"--sequence-length {gen.sequence_length}",
                    f"--seed {gen.seed}",
                    f"--noise-std {gen.noise_std}",
                    f"--amp-min {gen.amp_min}",
                    f"--amp-max {gen.amp_max}",
                    f"--freq-min {gen.freq_min}",
                    f"--freq-max {gen.freq_max}",
                ]
            )
            if self.output_path:
                args.append(f"--output {self.output_path}")
            if self.export_csv:
                args.append("--csv")
            if self.plot_path:
                args.append(f"--plot {self.plot_path}")
        elif self.command == "train":
            cfg = self.training
            if self.input_path:
                args.append(f"--input {self.input_path}")
            args.extend(
                [
                    f"--units {cfg.units}",
                    f"--batch-size {cfg.batch_size}",
                    f"--epochs {cfg.epochs}",
                    f"--lr {cfg.learning_rate}",
                    f"--validation-split {cfg.validation_split}",
                ]
            )
            if cfg.low_cpu:
                args.append(f"--low-cpu --subset-percent {cfg.subset_percent}")
            if self.plot_path:
                args.append(f"--plot {self.plot_path}")
        elif self.command == "architecture":
            args.extend(
                [
                    f"--sequence-length {self.generation.sequence_length}",
                    f"--units {self.training.units}",
                ]
            )
        args.extend(self.extra_flags)
        return " ".join([short, *args])

    @classmethod
    def conversational_commands(cls) -> Iterable[str]:
        return ("generate", "train", "export", "architecture")
