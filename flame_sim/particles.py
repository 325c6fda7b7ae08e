"""Fixed-pool flame particle system driven by curl-noise turbulence."""
from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Iterator, List, Tuple

from .curl import CurlNoiseField
from .perlin import NoiseField
from .vector import Vec3, ZERO, length_2d, normalize

logger = logging.getLogger(__name__)

_RADIAL_EPS = 1e-6


@dataclass
class FlameConfig:
    gravity: float = -9.81
    thermal_buoyancy: float = 3.0
    ambient_temperature: float = 0.2
    spawn_temperature: float = 1.0
    cooling_rate: float = 0.8
    flame_base_y: float = 0.0
    spawn_radius: float = 0.15
    capacity: int = 256
    max_height: float = 3.0
    min_life: float = 0.8
    max_life: float = 1.5
    turbulence_frequency: float = 2.0
    turbulence_time_scale: float = 1.5
    turbulence_strength: float = 2.0
    smoke_temperature: float = 0.3
    smoke_gravity_scale: float = 0.1
    cone_height: float = 3.0
    min_cone_radius: float = 0.05
    spring_constant: float = 3.0
    spawn_jitter: float = 0.05
    spawn_lift: float = 0.2
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.capacity <= 0:
            raise ValueError(f"capacity must be positive, got {self.capacity}")
        if self.cooling_rate <= 0.0:
            raise ValueError(f"cooling_rate must be positive, got {self.cooling_rate}")
        if not 0.0 < self.spawn_temperature <= 1.0:
            raise ValueError(f"spawn_temperature must lie in (0, 1], got {self.spawn_temperature}")
        if self.spawn_radius <= 0.0:
            raise ValueError(f"spawn_radius must be positive, got {self.spawn_radius}")
        if self.min_life <= 0.0 or self.min_life > self.max_life:
            raise ValueError(f"Invalid lifetime range [{self.min_life}, {self.max_life}]")
        if self.max_height <= self.flame_base_y:
            raise ValueError(f"max_height {self.max_height} must lie above flame_base_y {self.flame_base_y}")
        if self.cone_height <= 0.0:
            raise ValueError(f"cone_height must be positive, got {self.cone_height}")


@dataclass
class Particle:
    position: Vec3 = ZERO
    velocity: Vec3 = ZERO
    temperature: float = 1.0
    age: float = 0.0
    max_life: float = 1.0
    respawns: int = 0


def cone_correction(position: Vec3, config: FlameConfig) -> float:
    """Magnitude of the inward push for a particle outside the flame cone.

    The allowed radius shrinks linearly with height above the base and is
    floored at ``min_cone_radius``. Returns 0.0 below the base, inside the
    cone, or on the axis itself.
    """
    height = position.y - config.flame_base_y
    if height < 0.0:
        return 0.0
    max_radius = max(config.spawn_radius * (1.0 - height / config.cone_height), config.min_cone_radius)
    radial = length_2d(position.x, position.z)
    if radial <= max_radius or radial <= _RADIAL_EPS:
        return 0.0
    return (radial - max_radius) * config.spring_constant


def apply_shape_constraint(position: Vec3, velocity: Vec3, dt: float, config: FlameConfig) -> Vec3:
    push = cone_correction(position, config)
    if push == 0.0:
        return velocity
    outward = normalize(Vec3(position.x, 0.0, position.z))
    k = push * dt
    return Vec3(velocity.x - outward.x * k, velocity.y, velocity.z - outward.z * k)


class ParticleSystem:
    """Owns a pre-allocated pool of particles and advances it once per frame.

    Slots are never added or removed; expired particles are reset in place.
    A ready-made ``curl`` field takes the place of ``noise``; passing both is
    rejected.
    """

    def __init__(
        self,
        config: FlameConfig | None = None,
        noise: NoiseField | None = None,
        curl: CurlNoiseField | None = None,
        rng: random.Random | None = None,
    ) -> None:
        if noise is not None and curl is not None:
            raise ValueError("Pass either noise or curl, not both")
        self.config = config or FlameConfig()
        self.rng = rng or random.Random(self.config.seed)
        if curl is None:
            curl = CurlNoiseField(noise or NoiseField(seed=self.config.seed))
        self.curl = curl
        self._pool: List[Particle] = [Particle() for _ in range(self.config.capacity)]
        self.init()

    def init(self) -> None:
        """Spawn every slot afresh and reset the counters."""
        for particle in self._pool:
            self._spawn(particle)
            particle.respawns = 0
        self.steps = 0
        self.total_respawns = 0
        logger.debug("Spawned %d particles (seed=%s)", len(self._pool), self.config.seed)

    def _spawn(self, particle: Particle) -> None:
        c = self.config
        rng = self.rng
        angle = rng.uniform(0.0, 2.0 * math.pi)
        radius = rng.uniform(0.0, c.spawn_radius)
        particle.position = Vec3(radius * math.cos(angle), c.flame_base_y, radius * math.sin(angle))
        particle.velocity = Vec3(
            rng.uniform(-c.spawn_jitter, c.spawn_jitter),
            rng.uniform(0.0, c.spawn_lift),
            rng.uniform(-c.spawn_jitter, c.spawn_jitter),
        )
        particle.temperature = c.spawn_temperature
        particle.age = 0.0
        particle.max_life = rng.uniform(c.min_life, c.max_life)

    def update(self, dt: float, sim_time: float) -> None:
        if not math.isfinite(dt) or dt < 0.0:
            raise ValueError(f"dt must be a finite non-negative number, got {dt}")
        if dt == 0.0:
            return

        c = self.config
        cooling = math.exp(-c.cooling_rate * dt)
        smoke_kick = c.gravity * dt * c.smoke_gravity_scale
        turbulence_scale = dt * c.turbulence_strength
        noise_time = sim_time * c.turbulence_time_scale
        sample_velocity = self.curl.sample_velocity

        for particle in self._pool:
            particle.temperature *= cooling
            temperature = particle.temperature

            vel = particle.velocity
            vy = vel.y + c.thermal_buoyancy * (temperature - c.ambient_temperature) * dt
            if temperature < c.smoke_temperature:
                vy += smoke_kick
            vel = Vec3(vel.x, vy, vel.z)

            turbulence = sample_velocity(particle.position * c.turbulence_frequency, noise_time)
            vel = vel + turbulence * ((0.5 + temperature) * turbulence_scale)

            vel = apply_shape_constraint(particle.position, vel, dt, c)

            particle.velocity = vel
            particle.position = particle.position + vel * dt
            particle.age += dt

            if particle.age > particle.max_life or particle.position.y > c.max_height:
                self._spawn(particle)
                particle.respawns += 1
                self.total_respawns += 1

        self.steps += 1

    # Read view for renderers

    @property
    def particles(self) -> Tuple[Particle, ...]:
        return tuple(self._pool)

    def snapshot(self) -> List[Tuple[Vec3, float]]:
        return [(p.position, p.temperature) for p in self._pool]

    def __iter__(self) -> Iterator[Tuple[Vec3, float]]:
        for p in self._pool:
            yield p.position, p.temperature

    def __len__(self) -> int:
        return len(self._pool)

    def mean_temperature(self) -> float:
        return sum(p.temperature for p in self._pool) / float(len(self._pool))
