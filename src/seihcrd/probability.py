"""
===========================================================
probability.py
Last Updated: 2026-10-19
===========================================================
Random draws used by the SEIHCRD agent-based model
======================================================
All stochastic behaviour of the model goes through a single
RandomSource so that a run is reproducible from one seed:
- uniform integer draws (contact sampling)
- Gaussian draws rounded up and floored at 0 (ages)
- Gamma draws (per-contact infectiousness)
- Bernoulli draws at a fixed precision (outcomes)
- Gaussian-mixture draws (location age structure)

License: MIT
===========================================================
"""
from __future__ import annotations
import math
import numpy as np
from typing import Optional, Sequence, Tuple

# mixture weights may drift this far from 1 before sampling is refused
MIXTURE_TOLERANCE = 0.2


class InvalidMixture(ValueError):
    """Raised when a Gaussian mixture cannot be sampled"""


class RandomSource:
    """Thin wrapper around a numpy Generator exposing the model's draws.

    Parameters:
    seed: int, optional. Seed for the underlying generator. None gives
        a non-reproducible stream.
    """
    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self.generator = np.random.default_rng(seed)

    def uniform_int(self, low: int, high: int) -> int:
        """Integer drawn uniformly from [low, high] (both inclusive)"""
        return int(self.generator.integers(low, high, endpoint=True))

    def uniform_indices(self, n: int, size: Tuple[int, ...]) -> np.ndarray:
        """Array of indices drawn uniformly (with replacement) from [0, n)"""
        return self.generator.integers(0, n, size=size)

    def gaussian(self, mean: float, sd: float) -> int:
        """Normal draw rounded up to an integer; negative values clamp to 0"""
        value = math.ceil(self.generator.normal(mean, sd))
        return max(value, 0)

    def gamma(self, shape: float, scale: float) -> float:
        return float(self.generator.gamma(shape, scale))

    def gammas(self, shape: float, scale: float, size: Tuple[int, ...]) -> np.ndarray:
        """Array of independent Gamma draws, one per entry of `size`"""
        return self.generator.gamma(shape, scale, size=size)

    def bernoulli(self, probability: float, precision: float = 0.001) -> bool:
        """True with the given probability, resolved to `precision`.

        The probability is truncated to a whole number of `precision`
        units, so rates below the precision never fire.
        """
        resolution = int(round(1 / precision))
        threshold = int(probability * resolution)
        return int(self.generator.integers(0, resolution)) < threshold

    def gaussian_mixture(self, components: Sequence[Tuple[float, float, float]]) -> int:
        """Pick a (weight, mean, sd) component by weight and sample it.

        Raises:
        InvalidMixture if there are no components, a weight is negative,
        or the weights sum to more than MIXTURE_TOLERANCE away from 1.
        """
        if len(components) == 0:
            raise InvalidMixture("Invalid mixture: no components")
        weights = np.array([c[0] for c in components], dtype=float)
        if np.any(weights < 0):
            raise InvalidMixture(f"Invalid mixture: negative weight in {weights.tolist()}")
        total = weights.sum()
        if abs(total - 1.0) > MIXTURE_TOLERANCE:
            raise InvalidMixture(f"Invalid mixture: weights sum to {total:.3f}")

        idx = int(self.generator.choice(len(components), p=weights / total))
        _, mean, sd = components[idx]
        return self.gaussian(mean, sd)


# process-wide stream for callers that do not pass their own
_default_source = RandomSource()


def default_source() -> RandomSource:
    return _default_source


def seed_default(seed: Optional[int]) -> RandomSource:
    """Replace the process-wide source with a freshly seeded one"""
    global _default_source
    _default_source = RandomSource(seed)
    return _default_source
