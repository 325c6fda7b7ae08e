"""Curl-noise driven flame particle simulation package."""
from .curl import CurlNoiseField
from .driver import DriverConfig, FlameDriver, render_ascii, run
from .particles import FlameConfig, Particle, ParticleSystem, apply_shape_constraint, cone_correction
from .perlin import NoiseField
from .vector import Vec3

__all__ = [
    "CurlNoiseField",
    "DriverConfig",
    "FlameConfig",
    "FlameDriver",
    "NoiseField",
    "Particle",
    "ParticleSystem",
    "Vec3",
    "apply_shape_constraint",
    "cone_correction",
    "render_ascii",
    "run",
]
