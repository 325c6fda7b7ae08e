"""Seeded 3D gradient (Perlin) noise.

Each :class:`NoiseField` owns its permutation table, built once when the
instance is constructed. Two fields created with the same seed sample
identically; a field created without a seed or generator is not
reproducible across runs.
"""
from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Tuple

logger = logging.getLogger(__name__)

# Columns of the rotation applied between fbm octaves.
_OCTAVE_ROTATION = (
    (0.00, 0.80, 0.60),
    (-0.80, 0.36, -0.48),
    (-0.60, -0.48, 0.64),
)
_OCTAVE_SHIFT = (1.7, 9.2, 3.1)


@dataclass(eq=False)
class NoiseField:
    seed: int | None = None
    rng: random.Random | None = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        rng = self.rng if self.rng is not None else random.Random(self.seed)
        p = list(range(256))
        rng.shuffle(p)
        # Doubled so corner hashes never need to wrap past index 255.
        self.permutation: Tuple[int, ...] = tuple(p * 2)
        logger.debug("Built permutation table (seed=%s)", self.seed)

    @staticmethod
    def _fade(t: float) -> float:
        return t * t * t * (t * (t * 6 - 15) + 10)

    @staticmethod
    def _lerp(a: float, b: float, t: float) -> float:
        return a + t * (b - a)

    @staticmethod
    def _grad(hash_value: int, x: float, y: float, z: float) -> float:
        h = hash_value & 15
        u = x if h < 8 else y
        v = y if h < 4 else (x if h in (12, 14) else z)
        return ((u if (h & 1) == 0 else -u) + (v if (h & 2) == 0 else -v))

    def sample(self, x: float, y: float, z: float) -> float:
        """Noise value at ``(x, y, z)``, clamped to [-1, 1]."""
        fx, fy, fz = math.floor(x), math.floor(y), math.floor(z)
        xi = int(fx) & 255
        yi = int(fy) & 255
        zi = int(fz) & 255
        xf = x - fx
        yf = y - fy
        zf = z - fz

        u = self._fade(xf)
        v = self._fade(yf)
        w = self._fade(zf)

        p = self.permutation

        a = p[xi] + yi
        aa = p[a] + zi
        ab = p[a + 1] + zi
        b = p[xi + 1] + yi
        ba = p[b] + zi
        bb = p[b + 1] + zi

        grad, lerp = self._grad, self._lerp
        x1 = lerp(grad(p[aa], xf, yf, zf), grad(p[ba], xf - 1, yf, zf), u)
        x2 = lerp(grad(p[ab], xf, yf - 1, zf), grad(p[bb], xf - 1, yf - 1, zf), u)
        y1 = lerp(x1, x2, v)

        x3 = lerp(grad(p[aa + 1], xf, yf, zf - 1), grad(p[ba + 1], xf - 1, yf, zf - 1), u)
        x4 = lerp(grad(p[ab + 1], xf, yf - 1, zf - 1), grad(p[bb + 1], xf - 1, yf - 1, zf - 1), u)
        y2 = lerp(x3, x4, v)

        value = lerp(y1, y2, w)
        return max(-1.0, min(1.0, value))

    def fbm(
        self,
        x: float,
        y: float,
        z: float,
        octaves: int = 3,
        lacunarity: float = 2.0,
        gain: float = 0.5,
    ) -> float:
        """Fractal sum of ``octaves`` noise layers, rotated between layers.

        With the default gain the result stays within [-1, 1].
        """
        if octaves < 1:
            raise ValueError(f"octaves must be >= 1, got {octaves}")
        c0, c1, c2 = _OCTAVE_ROTATION
        sx, sy, sz = _OCTAVE_SHIFT
        value = 0.0
        amp = 0.5
        for _ in range(octaves):
            value += amp * self.sample(x, y, z)
            x, y, z = (
                (c0[0] * x + c1[0] * y + c2[0] * z) * lacunarity + sx,
                (c0[1] * x + c1[1] * y + c2[1] * z) * lacunarity + sy,
                (c0[2] * x + c1[2] * y + c2[2] * z) * lacunarity + sz,
            )
            amp *= gain
        return value
