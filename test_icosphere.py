import unittest
import numpy as np
from icosphere import IcoSphereCreator, generate_icosphere, mesh_to_array
from physics_utils import RangeError

class TestIcoSphere(unittest.TestCase):

    def test_level_zero_is_icosahedron(self):
        creator = IcoSphereCreator()
        mesh = creator.create_icosphere(0)
        self.assertEqual(len(mesh), 60)
        self.assertEqual(len(set(mesh)), 12)
        self.assertEqual((creator.face_count, creator.vertex_count), (20, 12))

    def test_level_one(self):
        creator = IcoSphereCreator()
        mesh = creator.create_icosphere(1)
        self.assertEqual(len(mesh), 240)
        self.assertEqual(len(set(mesh)), 42)
        self.assertEqual((creator.face_count, creator.vertex_count), (80, 42))
        for vertex in mesh:
            self.assertAlmostEqual(vertex.length(), 1.0, delta=1e-9)

    def test_counts_for_higher_levels(self):
        for level in (2, 3):
            mesh = generate_icosphere(level)
            self.assertEqual(len(mesh), 3 * 20 * 4 ** level)
            self.assertEqual(len(set(mesh)), 10 * 4 ** level + 2)

    def test_shared_edge_midpoint_is_identical(self):
        # Faces (0, 11, 5) and (0, 5, 1) share the edge 0-5; after one pass the
        # first triangle of each face starts at vertex 0 and ends at that midpoint
        mesh = generate_icosphere(1)
        midpoint_from_first = mesh[2]   # (i0, a, c) of (0, 11, 5): c = mid(5, 0)
        midpoint_from_second = mesh[12 + 1]  # (i0, a, c) of (0, 5, 1): a = mid(0, 5)
        self.assertTrue(np.array_equal(midpoint_from_first.data, midpoint_from_second.data))

    def test_is_deterministic(self):
        first = mesh_to_array(generate_icosphere(2))
        second = mesh_to_array(IcoSphereCreator().create_icosphere(2))
        np.testing.assert_array_equal(first, second)

    def test_creator_can_be_reused(self):
        creator = IcoSphereCreator()
        creator.create_icosphere(2)
        mesh = creator.create_icosphere(0)
        self.assertEqual(len(mesh), 60)
        self.assertEqual(creator.vertex_count, 12)

    def test_faces_point_outward(self):
        faces = mesh_to_array(generate_icosphere(1)).reshape(-1, 3, 3)
        normals = np.cross(faces[:, 1] - faces[:, 0], faces[:, 2] - faces[:, 0])
        centers = faces.mean(axis=1)
        self.assertTrue(np.all(np.einsum('ij,ij->i', normals, centers) > 0.0))

    def test_negative_level(self):
        with self.assertRaises(RangeError):
            generate_icosphere(-1)

    def test_mesh_to_array(self):
        array = mesh_to_array(generate_icosphere(0))
        self.assertEqual(array.shape, (60, 3))
        np.testing.assert_allclose(np.linalg.norm(array, axis=1), 1.0)
        self.assertEqual(mesh_to_array([]).shape, (0, 3))

if __name__ == '__main__':
    unittest.main(argv=['first-arg-is-ignored'], exit=False)
