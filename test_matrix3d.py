import unittest
import numpy as np
from matrix3d import Matrix3d
from vector3d import Vector3d, X_AXIS, Y_AXIS, Z_AXIS

class TestMatrix3d(unittest.TestCase):

    def setUp(self):
        self.m = Matrix3d(((1.0, 2.0, 3.0),
                           (4.0, 5.0, 6.0),
                           (7.0, 8.0, 10.0)))

    def test_rows_and_columns(self):
        self.assertEqual(self.m.row(1), Vector3d(4.0, 5.0, 6.0))
        self.assertEqual(self.m.column(2), Vector3d(3.0, 6.0, 10.0))

    def test_index_out_of_range(self):
        with self.assertRaises(IndexError):
            self.m.row(3)
        with self.assertRaises(IndexError):
            self.m.column(-1)

    def test_from_rows_and_columns(self):
        r1, r2, r3 = Vector3d(1, 2, 3), Vector3d(4, 5, 6), Vector3d(7, 8, 10)
        self.assertEqual(Matrix3d.from_rows(r1, r2, r3), self.m)
        self.assertEqual(Matrix3d.from_columns(r1, r2, r3), self.m.transpose())

    def test_identity(self):
        identity = Matrix3d.identity()
        self.assertEqual(identity.multiply(self.m), self.m)
        self.assertEqual(identity.multiply(Vector3d(1.5, -2.0, 3.0)), Vector3d(1.5, -2.0, 3.0))

    def test_multiply_vector(self):
        self.assertEqual(self.m.multiply(X_AXIS), Vector3d(1.0, 4.0, 7.0))
        self.assertEqual(self.m @ Vector3d(1.0, 1.0, 1.0), Vector3d(6.0, 15.0, 25.0))

    def test_multiply_matrix(self):
        expected = self.m.data @ self.m.data
        np.testing.assert_array_almost_equal((self.m @ self.m).data, expected)

    def test_multiply_rejects_other_types(self):
        with self.assertRaises(TypeError):
            self.m.multiply(3.0)

    def test_determinant_and_transpose(self):
        self.assertAlmostEqual(self.m.determinant(), -3.0)
        self.assertEqual(self.m.transpose().transpose(), self.m)
        self.assertEqual(self.m.transpose().row(0), self.m.column(0))

    def test_rotation_about_z(self):
        rotation = Matrix3d.from_columns(Y_AXIS, -X_AXIS, Z_AXIS)
        self.assertTrue(rotation.multiply(X_AXIS).is_close(Y_AXIS))
        self.assertAlmostEqual(rotation.determinant(), 1.0)

    def test_is_read_only(self):
        with self.assertRaises(ValueError):
            self.m.data[0, 0] = 0.0

if __name__ == '__main__':
    unittest.main(argv=['first-arg-is-ignored'], exit=False)
