"""Synthetic dataset generation: seeded uniform stream, Gaussian noise, sine sequences.

===================================================================================
OVERVIEW
===================================================================================
Every dataset is a pure function of its GenerationConfig. One SeededRandom is
created from ``config.seed`` and consumed sequentially for the whole run:

    for sample i in [0, samples):
        amplitude  = amp_min  + u() * (amp_max  - amp_min)
        frequency  = freq_min + u() * (freq_max - freq_min)
        phase      = u() * 2π
        for t in [0, sequence_length):
            value  = amplitude · sin(2π · frequency · t + phase)
            value += gaussian(u) · noise_std          (only when noise_std > 0)
        target     = amplitude · sin(2π · frequency · sequence_length + phase)

The draw order is part of the reproducibility contract.

===================================================================================
SUBMODULE STRUCTURE
===================================================================================

rng.py:
    SeededRandom   - frac(sin(counter) · 10000), counter advances every draw
    gaussian       - Box-Muller, redraws u1 while u1 <= 1e-10
    GaussianNoise  - object wrapper around gaussian()

generator.py:
    DatasetGenerator - validation, synthesis, statistics, chunked progress
    generate_dataset - functional shortcut

===================================================================================
ERROR HANDLING
===================================================================================

ValidationError:
    - samples < 1, sequence_length < 1, noise_std < 0
    - amp_min >= amp_max, freq_min >= freq_max
    - amp_min < 0 or freq_min < 0 (strict mode)

Exceptions raised by a progress callback abort generation; nothing is returned.

===================================================================================
"""

from .generator import DatasetGenerator, generate_dataset
from .rng import GaussianNoise, SeededRandom, gaussian

__all__ = [
    "DatasetGenerator",
    "generate_dataset",
    "GaussianNoise",
    "SeededRandom",
    "gaussian",
]
