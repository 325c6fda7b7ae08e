"""Frame loop that feeds clamped wall-clock deltas into the particle system."""
from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field
from typing import List

from .particles import FlameConfig, ParticleSystem
from .perlin import NoiseField

logger = logging.getLogger(__name__)

_GLYPHS = " .:*#@"


@dataclass
class DriverConfig:
    max_dt: float = 0.05
    formation_duration: float = 2.5
    stats_interval: float = 2.0
    frames: int = 600
    frame_dt: float = 1.0 / 60.0
    preview: bool = False
    preview_every: int = 60
    preview_sleep: float = 0.0
    seed: int | None = None
    flame: FlameConfig = field(default_factory=FlameConfig)

    def __post_init__(self) -> None:
        if self.max_dt <= 0.0:
            raise ValueError(f"max_dt must be positive, got {self.max_dt}")
        if self.formation_duration <= 0.0:
            raise ValueError(f"formation_duration must be positive, got {self.formation_duration}")
        if self.stats_interval <= 0.0:
            raise ValueError(f"stats_interval must be positive, got {self.stats_interval}")
        if self.frame_dt <= 0.0:
            raise ValueError(f"frame_dt must be positive, got {self.frame_dt}")
        if self.frames < 0:
            raise ValueError(f"frames must be non-negative, got {self.frames}")


class FlameDriver:
    def __init__(self, config: DriverConfig | None = None, system: ParticleSystem | None = None) -> None:
        self.config = config or DriverConfig()
        if system is None:
            seed = self.config.seed if self.config.seed is not None else self.config.flame.seed
            system = ParticleSystem(self.config.flame, noise=NoiseField(seed=seed), rng=random.Random(seed))
        self.system = system
        self.sim_time = 0.0
        self.frames = 0
        self.fps = 0.0
        self._progress = 0.0
        self._formed = False
        self._fps_timer = 0.0
        self._fps_frames = 0

    @property
    def formation(self) -> float:
        """Eased 0..1 ramp over the first ``formation_duration`` seconds.

        Informational only: renderers can use it to fade the flame in. The
        particle simulation itself does not read it.
        """
        return 1.0 - (1.0 - self._progress) ** 3

    @property
    def formed(self) -> bool:
        return self._formed

    def tick(self, raw_dt: float) -> float:
        """Advance one frame and return the delta that was actually applied."""
        c = self.config
        # Lag spikes would otherwise produce one oversized Euler step.
        dt = min(max(raw_dt, 0.0), c.max_dt)
        self.sim_time += dt

        if not self._formed:
            self._progress = min(self._progress + dt / c.formation_duration, 1.0)
            if self._progress >= 1.0:
                self._formed = True
                logger.info("Flame formation complete after %.2fs", self.sim_time)

        self.system.update(dt, self.sim_time)
        self.frames += 1

        self._fps_timer += dt
        self._fps_frames += 1
        if self._fps_timer >= c.stats_interval:
            self.fps = self._fps_frames / self._fps_timer
            logger.info(
                "%.1f FPS | mean temperature %.3f | respawns %d",
                self.fps,
                self.system.mean_temperature(),
                self.system.total_respawns,
            )
            self._fps_timer = 0.0
            self._fps_frames = 0
        return dt


def render_ascii(system: ParticleSystem, width: int = 48, height: int = 20) -> str:
    """Coarse XY projection of the cloud; hotter cells get denser glyphs."""
    c = system.config
    half_width = c.spawn_radius * 4.0
    grid: List[List[float]] = [[0.0 for _ in range(width)] for _ in range(height)]

    def project(value: float, lo: float, hi: float, size: int) -> int:
        return max(0, min(size - 1, int((value - lo) / (hi - lo) * (size - 1))))

    for pos, temperature in system:
        col = project(pos.x, -half_width, half_width, width)
        row = height - 1 - project(pos.y, c.flame_base_y, c.max_height, height)
        grid[row][col] = max(grid[row][col], temperature)

    top = c.spawn_temperature or 1.0
    lines = []
    for row in grid:
        lines.append("".join(_GLYPHS[min(len(_GLYPHS) - 1, int(v / top * (len(_GLYPHS) - 1) + 0.5))] for v in row))
    return "\n".join(lines)


def run(config: DriverConfig | None = None) -> FlameDriver:
    config = config or DriverConfig()
    driver = FlameDriver(config)
    for frame in range(config.frames):
        driver.tick(config.frame_dt)
        if config.preview and config.preview_every and (frame + 1) % config.preview_every == 0:
            print(f"frame {frame + 1:04d} t={driver.sim_time:.2f}s formation={driver.formation:.2f}\n{render_ascii(driver.system)}")
            if config.preview_sleep:
                time.sleep(config.preview_sleep)
    return driver


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    driver = run(DriverConfig(frames=300, preview=True, seed=0))
    print(f"Simulated {driver.frames} frames ({driver.sim_time:.2f}s), {driver.system.total_respawns} respawns")


if __name__ == "__main__":
    main()
