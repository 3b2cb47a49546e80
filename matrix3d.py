# matrix3d.py
import numpy as np

from vector3d import Vector3d


class Matrix3d:
    """Immutable row-major 3x3 matrix with double precision."""
    __slots__ = ('_data',)

    def __init__(self, rows):
        data = np.array(rows, dtype=np.float64).reshape(3, 3)
        data.flags.writeable = False
        self._data = data

    @classmethod
    def from_columns(cls, c1: Vector3d, c2: Vector3d, c3: Vector3d) -> 'Matrix3d':
        return cls(np.column_stack((c1.data, c2.data, c3.data)))

    @classmethod
    def from_rows(cls, r1: Vector3d, r2: Vector3d, r3: Vector3d) -> 'Matrix3d':
        return cls(np.vstack((r1.data, r2.data, r3.data)))

    @staticmethod
    def identity() -> 'Matrix3d':
        return Matrix3d(np.eye(3))

    @property
    def data(self) -> np.ndarray:
        return self._data

    def row(self, index: int) -> Vector3d:
        if not 0 <= index < 3:
            raise IndexError(f"Matrix3d row index out of range: {index}")
        return Vector3d.from_array(self._data[index, :])

    def column(self, index: int) -> Vector3d:
        if not 0 <= index < 3:
            raise IndexError(f"Matrix3d column index out of range: {index}")
        return Vector3d.from_array(self._data[:, index])

    def transpose(self) -> 'Matrix3d':
        return Matrix3d(self._data.T)

    def determinant(self) -> float:
        return float(np.linalg.det(self._data))

    def multiply(self, other):
        """Matrix product with another `Matrix3d`, or the image of a `Vector3d`."""
        if isinstance(other, Matrix3d):
            return Matrix3d(self._data @ other._data)
        if isinstance(other, Vector3d):
            return Vector3d.from_array(self._data @ other.data)
        raise TypeError(f"Cannot multiply Matrix3d by {type(other).__name__}")

    def __matmul__(self, other):
        if not isinstance(other, (Matrix3d, Vector3d)):
            return NotImplemented
        return self.multiply(other)

    def is_close(self, other: 'Matrix3d', tolerance: float = 1e-9) -> bool:
        return bool(np.allclose(self._data, other._data, rtol=0.0, atol=tolerance))

    def __eq__(self, other):
        if not isinstance(other, Matrix3d):
            return NotImplemented
        return bool(np.array_equal(self._data, other._data))

    def __hash__(self):
        return hash(self._data.tobytes())

    def __repr__(self):
        return f"Matrix3d({self._data.tolist()!r})"
