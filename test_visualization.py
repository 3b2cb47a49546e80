import math
import unittest
import numpy as np
from orbit import Orbit
from quaternion import Quat4d
from scales import Scales
from solarsystem import CelestialBody
from vector3d import Vector3d, ZERO, Z_AXIS
from visualization import transform_mesh, project_points, fit_pixels_per_unit

class TestTransformMesh(unittest.TestCase):

    def setUp(self):
        self.mesh = np.array([[1.0, 0.0, 0.0],
                              [0.0, 1.0, 0.0],
                              [0.0, 0.0, 1.0]])

    def test_identity_transform(self):
        result = transform_mesh(self.mesh, Quat4d.identity(), ZERO, 1.0)
        np.testing.assert_array_equal(result, self.mesh)

    def test_rotate_scale_translate(self):
        rotation = Quat4d.from_axis_angle(Z_AXIS, math.pi / 2)
        result = transform_mesh(self.mesh, rotation, Vector3d(10.0, 0.0, -1.0), 2.0)
        expected = np.array([[10.0, 2.0, -1.0],
                             [8.0, 0.0, -1.0],
                             [10.0, 0.0, 1.0]])
        np.testing.assert_array_almost_equal(result, expected)

    def test_matches_quaternion_rotation(self):
        rotation = Quat4d.from_euler(0.3, -1.2, 2.5)
        result = transform_mesh(self.mesh, rotation, ZERO, 1.0)
        for row, vertex in zip(result, self.mesh):
            np.testing.assert_array_almost_equal(row, rotation.rotate_vector(Vector3d.from_array(vertex)).data)

class TestProjectPoints(unittest.TestCase):

    def test_center_maps_to_screen_middle(self):
        pixels = project_points(np.array([[5.0, -3.0, 7.0]]), Vector3d(5.0, -3.0, 0.0), 1.0, 10.0, (800, 600))
        np.testing.assert_array_equal(pixels, [[400, 300]])

    def test_axes_and_zoom(self):
        points = np.array([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])
        pixels = project_points(points, (0.0, 0.0, 0.0), 2.0, 10.0, (800, 600))
        # +X to the right, +Y up on screen
        np.testing.assert_array_equal(pixels, [[420, 300], [400, 280]])

    def test_returns_integers(self):
        pixels = project_points(np.array([[0.26, 0.0, 0.0]]), ZERO, 1.0, 10.0, (100, 100))
        self.assertTrue(np.issubdtype(pixels.dtype, np.integer))
        np.testing.assert_array_equal(pixels, [[53, 50]])

class TestFitPixelsPerUnit(unittest.TestCase):

    def test_outermost_orbit_fits(self):
        star = CelestialBody(scales=Scales(), name="Sun")
        planet = CelestialBody(Orbit(star).set_semi_major_axis(100.0).set_eccentricity(0.5))
        CelestialBody(Orbit(planet).set_semi_major_axis(10.0))
        ppu = fit_pixels_per_unit(star, (800, 600), margin=1.0)
        # Reach of the moon: apoapsis 150 plus 10
        self.assertAlmostEqual(ppu, 600 / (2.0 * 160.0))

    def test_lonely_star(self):
        star = CelestialBody(scales=Scales(), name="Sun").set_radius(50.0)
        self.assertAlmostEqual(fit_pixels_per_unit(star, (400, 400), margin=1.0), 4.0)

if __name__ == '__main__':
    unittest.main(argv=['first-arg-is-ignored'], exit=False)
