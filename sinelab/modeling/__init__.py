"""Training infrastructure: subsetting, normalization, metric adaptation, and the epoch loop.

===================================================================================
OVERVIEW
===================================================================================
Turns a generated Dataset into normalized arrays and drives an external fit
primitive one epoch at a time:

  - sample_subset        low-CPU uniform-without-replacement subsetting
  - Normalizer           dataset-level z-score transform (and its inverse)
  - extract_epoch_metrics  tolerant reader for fit histories
  - TrainingLoopController epoch loop, throttled progress, cooperative stop

===================================================================================
WORKFLOW DIAGRAM
===================================================================================

    Dataset (sequences, targets, stats)
            │
            ▼
    sample_subset()            only when TrainingConfig.low_cpu
            │
            ▼
    Normalizer.transform_dataset()
        ├─ xs: (samples, steps, 1) float32
        └─ ys: (samples, 1) float32
            │
            ▼
    TrainingLoopController.start()
        ├─ fit(xs, ys, FitOptions(epochs=1, ...))   once per epoch
        ├─ extract_epoch_metrics(history)
        ├─ history.append(...)                       append-only
        ├─ yield EpochResult                         throttled, final always
        └─ stop flag checked between epochs
            │
            ▼
    COMPLETED | STOPPED | FAILED   (fit.dispose() on every path)

===================================================================================
USAGE EXAMPLES
===================================================================================

from sinelab.generation import generate_dataset
from sinelab.interfaces import GenerationConfig, TrainingConfig
from sinelab.modeling import TrainingLoopController
from sinelab.networks import TorchLSTMFit

dataset = generate_dataset(GenerationConfig(samples=200, sequence_length=40))
config = TrainingConfig(units=16, epochs=10)
controller = TrainingLoopController()
artifacts = controller.run(dataset, config, TorchLSTMFit(config))
print(artifacts.summary)

===================================================================================
ERROR HANDLING
===================================================================================

InvalidTrainingConfig:
    - non-integer / non-finite / out-of-range hyperparameter (names the field)

DegenerateDatasetError:
    - dataset std is zero or not finite → normalization would produce NaN/Inf

ExternalFitError:
    - fit primitive raised (original exception chained as __cause__)
    - NonFiniteMetricError: NaN/Inf loss or MAE reported

===================================================================================
"""

from .datasets import Normalizer, denormalize, normalize, sample_subset, subset_count
from .metrics import extract_epoch_metrics, extract_metric
from .trainers import TrainingLoopController

__all__ = [
    "Normalizer",
    "normalize",
    "denormalize",
    "sample_subset",
    "subset_count",
    "extract_metric",
    "extract_epoch_metrics",
    "TrainingLoopController",
]
