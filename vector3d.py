# vector3d.py
import math

import numpy as np

from physics_utils import safe_divide, normalize_vector


class Vector3d:
    """Immutable 3D vector with double precision.

    The components live in a read-only float64 numpy array, so a vector can be
    shared freely between caches, meshes and callers. All operations return
    new vectors.
    """
    __slots__ = ('_data',)

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        data = np.array([x, y, z], dtype=np.float64)
        data.flags.writeable = False
        self._data = data

    @classmethod
    def from_array(cls, values) -> 'Vector3d':
        """Creates a vector from any length-3 sequence or array."""
        values = np.asarray(values, dtype=np.float64).reshape(3)
        return cls(values[0], values[1], values[2])

    @property
    def x(self) -> float:
        return float(self._data[0])

    @property
    def y(self) -> float:
        return float(self._data[1])

    @property
    def z(self) -> float:
        return float(self._data[2])

    @property
    def data(self) -> np.ndarray:
        """Read-only view of the components."""
        return self._data

    def dot(self, other: 'Vector3d') -> float:
        return float(np.dot(self._data, other._data))

    def cross(self, other: 'Vector3d') -> 'Vector3d':
        return Vector3d.from_array(np.cross(self._data, other._data))

    def length_squared(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        return math.sqrt(self.length_squared())

    def normalize(self) -> 'Vector3d':
        """Unit vector in the same direction; the zero vector stays zero."""
        return Vector3d.from_array(normalize_vector(self._data))

    def add(self, other: 'Vector3d') -> 'Vector3d':
        return Vector3d.from_array(self._data + other._data)

    def subtract(self, other: 'Vector3d') -> 'Vector3d':
        return Vector3d.from_array(self._data - other._data)

    def scale(self, factor: float) -> 'Vector3d':
        return Vector3d.from_array(self._data * factor)

    def angle_between(self, other: 'Vector3d') -> float:
        """Angle to `other` in radians, in [0, pi]."""
        cosine = safe_divide(self.dot(other), self.length() * other.length())
        return math.acos(min(1.0, max(-1.0, cosine)))

    def any_orthogonal(self) -> 'Vector3d':
        """A vector orthogonal to this one.

        Crosses with the coordinate axis this vector is least aligned with, which
        keeps the result well conditioned. The result is not normalized.
        """
        magnitudes = np.abs(self._data)
        axis = np.zeros(3)
        axis[int(np.argmin(magnitudes))] = 1.0
        return Vector3d.from_array(np.cross(self._data, axis))

    def is_close(self, other: 'Vector3d', tolerance: float = 1e-9) -> bool:
        return bool(np.allclose(self._data, other._data, rtol=0.0, atol=tolerance))

    def to_tuple(self):
        return (self.x, self.y, self.z)

    __add__ = add
    __sub__ = subtract

    def __mul__(self, factor):
        if isinstance(factor, Vector3d):
            return NotImplemented
        return self.scale(factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor):
        return self.scale(1.0 / divisor)

    def __neg__(self):
        return self.scale(-1.0)

    def __iter__(self):
        return iter(self.to_tuple())

    def __eq__(self, other):
        if not isinstance(other, Vector3d):
            return NotImplemented
        return bool(np.array_equal(self._data, other._data))

    def __hash__(self):
        return hash(self.to_tuple())

    def __repr__(self):
        return f"Vector3d({self.x!r}, {self.y!r}, {self.z!r})"

    def __str__(self):
        return f"[ {self.x:.3f}   {self.y:.3f}   {self.z:.3f} ]"


ZERO = Vector3d(0.0, 0.0, 0.0)
X_AXIS = Vector3d(1.0, 0.0, 0.0)
Y_AXIS = Vector3d(0.0, 1.0, 0.0)
Z_AXIS = Vector3d(0.0, 0.0, 1.0)
