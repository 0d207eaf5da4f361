"""Seeded noise fields and PRNG streams for map generation.

One integer seed derives every random source used by the generator by
adding a fixed offset per stream, so each phase draws from its own
uncorrelated but fully reproducible sequence.
"""

from enum import IntEnum

import numpy as np
from opensimplex import OpenSimplex

# Streams are seeded with (seed + offset) folded into this range
_SEED_MODULUS = 2**63


class NoiseField(IntEnum):
    """2D noise fields, valued by their seed offset."""

    BIOME = 0
    MOISTURE = 1
    ELEVATION = 2


class StreamOffset(IntEnum):
    """Per-phase PRNG streams, valued by their seed offset."""

    TERRAIN = 10
    HYDROLOGY = 11
    SETTLEMENTS = 12
    ROADS = 13
    BUILDINGS = 14


def stream_seed(seed: int, offset: int) -> int:
    """Non-negative seed for the stream at ``offset``."""
    return (seed + offset) % _SEED_MODULUS


def sample_noise(noise: OpenSimplex, x: float, y: float, scale: float) -> float:
    """Sample simplex noise at (x * scale, y * scale), mapped from [-1, 1] to [0, 1]."""
    value = (noise.noise2(x * scale, y * scale) + 1.0) / 2.0
    return min(1.0, max(0.0, value))


class SeededNoiseSource:
    """Noise fields and PRNG streams derived from a single seed.

    Noise fields are stateless and built once. PRNG streams are stateful,
    so ``rng()`` hands out a freshly seeded generator on every call.
    """

    def __init__(self, seed: int):
        self.seed = seed
        self._fields = {
            field: OpenSimplex(seed=stream_seed(seed, field.value))
            for field in NoiseField
        }

    def sample(self, field: NoiseField, x: float, y: float, scale: float) -> float:
        """Sample one noise field in [0, 1]."""
        return sample_noise(self._fields[field], x, y, scale)

    def rng(self, stream: StreamOffset) -> np.random.Generator:
        """Fresh PRNG for one generation phase."""
        return np.random.default_rng(stream_seed(self.seed, stream.value))
