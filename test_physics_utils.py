import sys
import unittest
import numpy as np
from physics_utils import (safe_divide, normalize_vector, angular_diameter, PhysicsError, RangeError,
                           MassClassificationError)

class TestSafeDivide(unittest.TestCase):

    def test_regular_quotient(self):
        self.assertAlmostEqual(safe_divide(9.0, 4.0), 2.25)
        self.assertAlmostEqual(safe_divide(-1.5, 0.5), -3.0)
        self.assertEqual(safe_divide(0.0, 7.0), 0.0)

    def test_near_zero_denominator_gives_default(self):
        self.assertEqual(safe_divide(3.0, 0.0), 0.0)
        self.assertEqual(safe_divide(3.0, 5e-13), 0.0)
        self.assertEqual(safe_divide(3.0, 0.0, default_on_zero_denom=-1.0), -1.0)

    def test_infinite_default_follows_numerator_sign(self):
        inf = float('inf')
        self.assertEqual(safe_divide(2.0, 0.0, default_on_zero_denom=inf), inf)
        self.assertEqual(safe_divide(-2.0, 0.0, default_on_zero_denom=inf), -inf)
        self.assertEqual(safe_divide(2.0, 0.0, default_on_zero_denom=-inf), inf)
        self.assertEqual(safe_divide(0.0, 0.0, default_on_zero_denom=inf), 0.0)

    def test_subnormal_denominator(self):
        # Below the smallest normal float the quotient is taken as infinite
        tiny = sys.float_info.min
        self.assertEqual(safe_divide(1.0, tiny * 1e-10, epsilon=tiny, default_on_zero_denom=float('inf')), float('inf'))
        self.assertEqual(safe_divide(1.0, 0.0, epsilon=tiny, default_on_zero_denom=float('inf')), float('inf'))
        self.assertAlmostEqual(safe_divide(1e-300, 1e-10, epsilon=tiny), 1e-290)

class TestNormalizeVector(unittest.TestCase):

    def test_unit_length(self):
        result = normalize_vector(np.array([2.0, -3.0, 6.0]))
        np.testing.assert_array_almost_equal(result, [2.0 / 7.0, -3.0 / 7.0, 6.0 / 7.0])
        self.assertAlmostEqual(np.linalg.norm(result), 1.0)

    def test_axis_vector(self):
        np.testing.assert_array_equal(normalize_vector(np.array([0.0, 0.0, -4.0])), [0.0, 0.0, -1.0])

    def test_sequence_input(self):
        np.testing.assert_array_almost_equal(normalize_vector((0.0, 3.0, 4.0)), [0.0, 0.6, 0.8])

    def test_zero_vector(self):
        result = normalize_vector(np.zeros(3))
        self.assertEqual(result.shape, (3,))
        np.testing.assert_array_equal(result, [0.0, 0.0, 0.0])

    def test_tiny_vector(self):
        np.testing.assert_array_equal(normalize_vector(np.array([1e-14, 0.0, 1e-14])), np.zeros(3))
        result = normalize_vector(np.array([1e-9, 0.0, 0.0]))
        np.testing.assert_array_almost_equal(result, [1.0, 0.0, 0.0])
        np.testing.assert_array_equal(normalize_vector(np.array([1e-3, 0.0, 0.0]), epsilon=1e-2), np.zeros(3))

class TestErrorHierarchy(unittest.TestCase):

    def test_range_error_is_physics_and_value_error(self):
        self.assertTrue(issubclass(RangeError, PhysicsError))
        self.assertTrue(issubclass(RangeError, ValueError))

    def test_mass_classification_error_is_physics_and_value_error(self):
        self.assertTrue(issubclass(MassClassificationError, PhysicsError))
        self.assertTrue(issubclass(MassClassificationError, ValueError))

    def test_range_error_caught_as_physics_error(self):
        with self.assertRaises(PhysicsError):
            raise RangeError("out of range")

class TestAngularDiameter(unittest.TestCase):

    def test_known_angle(self):
        # A sphere of diameter 2 seen from sqrt(2) away subtends 2 * asin(1/sqrt(2)) = 90 degrees
        self.assertAlmostEqual(angular_diameter(2.0, np.sqrt(2.0)), 90.0)

    def test_far_away_is_small(self):
        self.assertAlmostEqual(angular_diameter(1.0, 1e9), np.degrees(1e-9), places=12)

    def test_observer_inside_sphere(self):
        self.assertEqual(angular_diameter(2.0, 0.5), 180.0)
        self.assertEqual(angular_diameter(2.0, 0.0), 180.0)

    def test_touching_surface(self):
        self.assertAlmostEqual(angular_diameter(2.0, 1.0), 180.0)

if __name__ == '__main__':
    unittest.main(argv=['first-arg-is-ignored'], exit=False)
