import random
from unittest import TestCase

from flame_sim.perlin import NoiseField


def _grid_points():
    for i in range(-6, 7):
        for j in range(-4, 5):
            for k in range(-3, 4):
                yield i * 0.731 + 0.05, j * 1.377 - 0.2, k * 2.113 + 0.41


class TestNoiseField(TestCase):

    def test_permutation_table(self):
        p = NoiseField(seed=3).permutation
        self.assertEqual(512, len(p))
        self.assertEqual(list(range(256)), sorted(p[:256]))
        self.assertEqual(p[:256], p[256:])

    def test_bounded(self):
        noise = NoiseField(seed=11)
        for x, y, z in _grid_points():
            value = noise.sample(x, y, z)
            self.assertGreaterEqual(value, -1.0)
            self.assertLessEqual(value, 1.0)

    def test_deterministic_per_instance(self):
        noise = NoiseField(seed=5)
        for x, y, z in _grid_points():
            self.assertEqual(noise.sample(x, y, z), noise.sample(x, y, z))

    def test_seed_reproducible(self):
        a, b = NoiseField(seed=21), NoiseField(seed=21)
        self.assertEqual(a.permutation, b.permutation)
        self.assertEqual(a.sample(1.3, -2.7, 0.4), b.sample(1.3, -2.7, 0.4))
        self.assertNotEqual(a.permutation, NoiseField(seed=22).permutation)

    def test_injected_rng(self):
        self.assertEqual(NoiseField(seed=7).permutation, NoiseField(rng=random.Random(7)).permutation)

    def test_zero_at_lattice_points(self):
        noise = NoiseField(seed=1)
        for point in [(0, 0, 0), (3, 5, -2), (-17, 255, 256), (1000, -1000, 4)]:
            self.assertEqual(0.0, noise.sample(*map(float, point)))

    def test_not_constant(self):
        noise = NoiseField(seed=9)
        values = {round(noise.sample(x, y, z), 6) for x, y, z in _grid_points()}
        self.assertGreater(len(values), 100)

    def test_continuous(self):
        noise = NoiseField(seed=2)
        for x, y, z in [(0.999999, 0.5, 0.5), (4.2, -1.0000001, 3.3), (-0.3, 2.7, 7.9999999)]:
            self.assertAlmostEqual(noise.sample(x, y, z), noise.sample(x + 1e-6, y, z), places=4)

    def test_fbm(self):
        noise = NoiseField(seed=4)
        for x, y, z in _grid_points():
            value = noise.fbm(x, y, z, octaves=4)
            self.assertLessEqual(abs(value), 1.0)
        self.assertEqual(0.5 * noise.sample(0.3, 0.2, 0.1), noise.fbm(0.3, 0.2, 0.1, octaves=1))
        with self.assertRaises(ValueError):
            noise.fbm(0.0, 0.0, 0.0, octaves=0)
