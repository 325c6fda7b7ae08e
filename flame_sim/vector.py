"""Small immutable 3D vector used throughout the simulation."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True)
class Vec3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, s: float) -> "Vec3":
        return Vec3(self.x * s, self.y * s, self.z * s)

    __rmul__ = __mul__

    def __neg__(self) -> "Vec3":
        return Vec3(-self.x, -self.y, -self.z)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z


ZERO = Vec3()


def dot(a: Vec3, b: Vec3) -> float:
    return a.x * b.x + a.y * b.y + a.z * b.z


def length(v: Vec3) -> float:
    return math.sqrt(dot(v, v))


def length_2d(x: float, z: float) -> float:
    """Horizontal distance from the vertical axis (XZ plane)."""
    return math.sqrt(x * x + z * z)


def normalize(v: Vec3, eps: float = 1e-12) -> Vec3:
    """Unit vector along ``v``; the zero vector for degenerate input instead of NaN."""
    l = length(v)
    if l <= eps:
        return ZERO
    return Vec3(v.x / l, v.y / l, v.z / l)

