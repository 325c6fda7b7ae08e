import math
from unittest import TestCase

from flame_sim.vector import Vec3, ZERO, length, length_2d, normalize


class TestVec3(TestCase):

    def test_arithmetic(self):
        a = Vec3(1.0, 2.0, 3.0)
        b = Vec3(0.5, -1.0, 2.0)
        self.assertEqual(Vec3(1.5, 1.0, 5.0), a + b)
        self.assertEqual(Vec3(0.5, 3.0, 1.0), a - b)
        self.assertEqual(Vec3(2.0, 4.0, 6.0), a * 2.0)
        self.assertEqual(Vec3(2.0, 4.0, 6.0), 2.0 * a)
        self.assertEqual(Vec3(1.0, 2.0, 3.0), a)  # operands untouched

    def test_normalize(self):
        n = normalize(Vec3(3.0, 0.0, 4.0))
        self.assertAlmostEqual(1.0, length(n))
        self.assertAlmostEqual(0.6, n.x)

    def test_normalize_zero_vector(self):
        n = normalize(ZERO)
        self.assertEqual(ZERO, n)
        self.assertFalse(any(math.isnan(c) for c in n))

    def test_length_2d_ignores_height(self):
        self.assertAlmostEqual(5.0, length_2d(3.0, -4.0))
