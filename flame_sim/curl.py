"""Curl noise: an approximately divergence-free turbulence field.

The velocity is the curl of a vector potential whose three components are
decorrelated samples of a single :class:`~flame_sim.perlin.NoiseField`.
Derivatives are taken by central differences, so the result is only
divergence-free up to the O(eps^2) truncation error of the stencil.
"""
from __future__ import annotations

from typing import Tuple

from .perlin import NoiseField
from .vector import Vec3


class CurlNoiseField:
    def __init__(
        self,
        noise: NoiseField,
        epsilon: float = 0.1,
        offsets: Tuple[float, float] = (100.0, 200.0),
    ) -> None:
        if epsilon <= 0.0:
            raise ValueError(f"epsilon must be positive, got {epsilon}")
        self.noise = noise
        self.epsilon = epsilon
        self.offsets = offsets

    def _potential(self, x: float, y: float, z: float, time: float) -> Tuple[float, float, float]:
        n = self.noise.sample
        o1, o2 = self.offsets
        zt = z + time
        return (
            n(x, y, zt),
            n(x + o1, y + o1, zt),
            n(x + o2, y + o2, zt),
        )

    def potential(self, pos: Vec3, time: float) -> Vec3:
        """Vector potential at ``pos``; time scrolls the field along z."""
        return Vec3(*self._potential(pos.x, pos.y, pos.z, time))

    def sample_velocity(self, pos: Vec3, time: float) -> Vec3:
        eps = self.epsilon
        inv = 1.0 / (2.0 * eps)
        x, y, z = pos.x, pos.y, pos.z
        pot = self._potential

        px_p = pot(x + eps, y, z, time)
        px_m = pot(x - eps, y, z, time)
        py_p = pot(x, y + eps, z, time)
        py_m = pot(x, y - eps, z, time)
        pz_p = pot(x, y, z + eps, time)
        pz_m = pot(x, y, z - eps, time)

        d_dx = [(a - b) * inv for a, b in zip(px_p, px_m)]
        d_dy = [(a - b) * inv for a, b in zip(py_p, py_m)]
        d_dz = [(a - b) * inv for a, b in zip(pz_p, pz_m)]

        return Vec3(
            d_dy[2] - d_dz[1],
            d_dz[0] - d_dx[2],
            d_dx[1] - d_dy[0],
        )

    def divergence(self, pos: Vec3, time: float, eps: float | None = None) -> float:
        """Central-difference estimate of div v at ``pos``.

        With ``eps`` equal to the field's own step (the default) the difference
        operators commute and the estimate only carries rounding error. A
        smaller, independent step (e.g. 1e-3) instead measures the O(epsilon^2)
        truncation error of the curl stencil, which for unit-scale noise and
        epsilon=0.1 is of order 0.1 rather than zero.
        """
        if eps is None:
            eps = self.epsilon
        sample = self.sample_velocity
        dvx = sample(pos + Vec3(eps, 0.0, 0.0), time).x - sample(pos - Vec3(eps, 0.0, 0.0), time).x
        dvy = sample(pos + Vec3(0.0, eps, 0.0), time).y - sample(pos - Vec3(0.0, eps, 0.0), time).y
        dvz = sample(pos + Vec3(0.0, 0.0, eps), time).z - sample(pos - Vec3(0.0, 0.0, eps), time).z
        return (dvx + dvy + dvz) / (2.0 * eps)
