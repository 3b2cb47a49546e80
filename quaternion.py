# quaternion.py
import math

import numpy as np

from config import config
from physics_utils import safe_divide
from vector3d import Vector3d
from matrix3d import Matrix3d

# Squared-length band outside of which a composed quaternion is renormalized
_DRIFT_LOW = 1.0 / config.Model.QUATERNION_DRIFT_TOLERANCE ** 2
_DRIFT_HIGH = config.Model.QUATERNION_DRIFT_TOLERANCE ** 2
_ALIGNMENT_EPSILON = 1e-6


class Quat4d:
    """Immutable quaternion with double precision, `w + xi + yj + zk`.

    Used as an orientation or rotation and meant to stay of unit length.
    Composition follows the Hamilton product: `q.multiply(r)` applies `r` first,
    expressed in the frame produced by `q`. The elemental helpers `roll`,
    `pitch` and `yaw` post-multiply a rotation about the local X, Y and Z axis,
    so chained calls describe intrinsic rotations. All angles are radians.
    """
    __slots__ = ('_data',)

    def __init__(self, w: float = 1.0, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        data = np.array([w, x, y, z], dtype=np.float64)
        data.flags.writeable = False
        self._data = data

    # --- Construction ---
    @staticmethod
    def identity() -> 'Quat4d':
        return Quat4d(1.0, 0.0, 0.0, 0.0)

    @classmethod
    def from_axis_angle(cls, axis: Vector3d, angle: float) -> 'Quat4d':
        """Rotation by `angle` around `axis` (normalized here)."""
        half_sin = math.sin(angle * 0.5)
        unit = axis.normalize()
        return cls(math.cos(angle * 0.5), unit.x * half_sin, unit.y * half_sin, unit.z * half_sin)

    @classmethod
    def from_euler(cls, roll: float, pitch: float, yaw: float) -> 'Quat4d':
        """Intrinsic roll (X), then pitch (Y), then yaw (Z)."""
        return cls.identity().roll(roll).pitch(pitch).yaw(yaw)

    @classmethod
    def from_to(cls, source: Vector3d, target: Vector3d) -> 'Quat4d':
        """Shortest rotation taking the direction of `source` to the direction of `target`."""
        alignment = source.normalize().dot(target.normalize())
        if alignment >= 1.0 - _ALIGNMENT_EPSILON:
            return cls.identity()
        if alignment <= -1.0 + _ALIGNMENT_EPSILON:
            return cls.from_axis_angle(source.any_orthogonal(), math.pi)
        axis = source.cross(target)
        w = math.sqrt(source.length_squared() * target.length_squared()) + source.dot(target)
        return cls(w, axis.x, axis.y, axis.z).normalize()

    # --- Accessors ---
    @property
    def w(self) -> float:
        return float(self._data[0])

    @property
    def x(self) -> float:
        return float(self._data[1])

    @property
    def y(self) -> float:
        return float(self._data[2])

    @property
    def z(self) -> float:
        return float(self._data[3])

    @property
    def data(self) -> np.ndarray:
        return self._data

    def imaginary(self) -> Vector3d:
        return Vector3d(self.x, self.y, self.z)

    # --- Algebra ---
    def length_squared(self) -> float:
        return float(np.dot(self._data, self._data))

    def length(self) -> float:
        return math.sqrt(self.length_squared())

    def normalize(self) -> 'Quat4d':
        length = self.length()
        return Quat4d(*(self._data / length))

    def conjugate(self) -> 'Quat4d':
        return Quat4d(self.w, -self.x, -self.y, -self.z)

    def dot(self, other: 'Quat4d') -> float:
        return float(np.dot(self._data, other._data))

    def cross(self, other: 'Quat4d') -> Vector3d:
        """Cross product of the imaginary parts."""
        return self.imaginary().cross(other.imaginary())

    def multiply(self, other: 'Quat4d') -> 'Quat4d':
        """Hamilton product `self * other`, renormalized if it drifted from unit length."""
        w1, x1, y1, z1 = self._data
        w2, x2, y2, z2 = other._data
        product = Quat4d(
            w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
            w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
            w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
        )
        length_squared = product.length_squared()
        if length_squared < _DRIFT_LOW or length_squared > _DRIFT_HIGH:
            return product.normalize()
        return product

    def roll(self, angle: float) -> 'Quat4d':
        return self.multiply(Quat4d(math.cos(angle * 0.5), math.sin(angle * 0.5), 0.0, 0.0))

    def pitch(self, angle: float) -> 'Quat4d':
        return self.multiply(Quat4d(math.cos(angle * 0.5), 0.0, math.sin(angle * 0.5), 0.0))

    def yaw(self, angle: float) -> 'Quat4d':
        return self.multiply(Quat4d(math.cos(angle * 0.5), 0.0, 0.0, math.sin(angle * 0.5)))

    # --- Rotation ---
    def to_rotation_matrix(self) -> Matrix3d:
        """Rotation matrix scaled by 2/|q|^2, valid for quaternions that are not exactly unit length."""
        w, x, y, z = self._data
        s = safe_divide(2.0, self.length_squared())
        return Matrix3d((
            (1.0 - s * (y * y + z * z), s * (x * y - z * w), s * (x * z + y * w)),
            (s * (x * y + z * w), 1.0 - s * (x * x + z * z), s * (y * z - x * w)),
            (s * (x * z - y * w), s * (y * z + x * w), 1.0 - s * (x * x + y * y)),
        ))

    def rotate_vector(self, vector: Vector3d) -> Vector3d:
        return self.to_rotation_matrix().multiply(vector)

    def is_close(self, other: 'Quat4d', tolerance: float = 1e-9) -> bool:
        return bool(np.allclose(self._data, other._data, rtol=0.0, atol=tolerance))

    def same_rotation(self, other: 'Quat4d', tolerance: float = 1e-9) -> bool:
        """True if both describe the same rotation (q and -q are equivalent)."""
        return self.is_close(other, tolerance) or self.is_close(Quat4d(*(-other._data)), tolerance)

    def __mul__(self, other):
        if isinstance(other, Quat4d):
            return self.multiply(other)
        if isinstance(other, Vector3d):
            return self.rotate_vector(other)
        return NotImplemented

    def __eq__(self, other):
        if not isinstance(other, Quat4d):
            return NotImplemented
        return bool(np.array_equal(self._data, other._data))

    def __hash__(self):
        return hash(tuple(self._data.tolist()))

    def __repr__(self):
        return f"Quat4d(w={self.w!r}, x={self.x!r}, y={self.y!r}, z={self.z!r})"

    def __str__(self):
        return f"[{self.w:.4f}, {self.x:.4f}i, {self.y:.4f}j, {self.z:.4f}k]"
