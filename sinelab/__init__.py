"""sinelab: synthetic sine-wave datasets and an LSTM next-value training loop.

===================================================================================
OVERVIEW
===================================================================================
Two halves that meet at the Dataset type:

  1. A deterministic generator that turns a seed plus parameter ranges into
     noisy sine-wave sequences, their noise-free one-step-ahead targets, and
     summary statistics. Same config, same seed → bit-identical dataset.
  2. A training-loop controller that normalizes the dataset, optionally
     subsamples it, and drives an external fit primitive (the bundled PyTorch
     LSTM) one epoch at a time, streaming throttled progress and honouring a
     cooperative stop between epochs.

===================================================================================
PACKAGE STRUCTURE
===================================================================================

sinelab/
├── interfaces/      Config, dataset and training dataclasses, error types
├── generation/      SeededRandom, Box-Muller noise, DatasetGenerator
├── modeling/        Subset sampler, Normalizer, metric adapter, controller
├── networks/        LSTMForecaster + TorchLSTMFit (PyTorch fit primitive)
├── visualization/   Matplotlib dataset previews and training curves
├── utils/           config.yml loading, Rich logging, JSON/CSV export, paths
├── cli/             argparse + questionary CLI (sinelab-cli)
├── app/             Streamlit front end
└── main.py          Banner + CLI/GUI launcher (sinelab)

===================================================================================
DATA FLOW
===================================================================================

    GenerationConfig ──► DatasetGenerator.generate() ──► Dataset
                                                          │
                         export_json / export_csv ◄───────┤
                                                          ▼
    TrainingConfig ────► TrainingLoopController.start(dataset, config, fit)
                                  │
                                  ├─ sample_subset()      (low-CPU mode)
                                  ├─ Normalizer           (dataset mean/std)
                                  ├─ fit(xs, ys, epochs=1) per epoch
                                  └─ yield EpochResult    (≤ 1 per 0.2 s, final always)
                                  │
                                  ▼
                         TrainingHistory / TrainingSummary

===================================================================================
USAGE EXAMPLES
===================================================================================

from sinelab.generation import generate_dataset
from sinelab.interfaces import GenerationConfig, TrainingConfig
from sinelab.modeling import TrainingLoopController
from sinelab.networks import TorchLSTMFit

dataset = generate_dataset(GenerationConfig(samples=500, sequence_length=50, seed=7))
config = TrainingConfig(units=32, epochs=20, low_cpu=True, subset_percent=40)
controller = TrainingLoopController()
for result in controller.start(dataset, config, TorchLSTMFit(config)):
    print(result.epoch, result.val_loss)
    if result.val_loss < 0.01:
        controller.request_stop()

===================================================================================
"""

__version__ = "1.0.0"
