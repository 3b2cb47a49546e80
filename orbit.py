# orbit.py
import math
from typing import List

from caches import ResultCache
from physics_utils import PhysicsError, RangeError
from quaternion import Quat4d
from vector3d import Vector3d


class Orbit:
    """Keplerian orbit of one satellite around its parent celestial body.

    Angles are stored in radians but set and reported in degrees, wrapped into
    [0, 360). The orbit is owned by the `CelestialBody` moving on it and keeps a
    read-only reference to the body at its focus.

    The orbital plane is the parent's global orientation followed by three
    intrinsic rotations: yaw by minus the longitude of the ascending node, pitch
    by the inclination and yaw by minus the argument of periapsis. Within that
    plane the ellipse is laid out with periapsis along local -Y at true anomaly 0
    and the parent at the focus.

    Both query methods keep a single-slot `ResultCache`. Every setter bumps the
    orbit's version and empties the caches; the parent's state token is part of
    every cache key, so changes up the tree are picked up as well.

    Attributes:
        parent (CelestialBody): The body at the focus of this orbit.
        body (CelestialBody): The satellite moving on this orbit, None until attached.
    """

    def __init__(self, parent: 'CelestialBody'):
        if parent is None:
            raise PhysicsError("An orbit needs a parent body. Create a star as CelestialBody() without an orbit.")
        self._parent = parent
        self._owner = None
        self._eccentricity = 0.0
        self._semi_major_axis = 1.0
        self._inclination = 0.0
        self._longitude_of_ascending_node = 1.5 * math.pi
        self._argument_of_periapsis = math.pi
        self._version = 0
        self._plane_cache = ResultCache("orbital plane orientation")
        self._position_cache = ResultCache("orbital position")

    # --- Ownership ---
    @property
    def parent(self) -> 'CelestialBody':
        return self._parent

    @property
    def body(self):
        return self._owner

    def attach(self, body: 'CelestialBody'):
        """Marks `body` as the satellite moving on this orbit. An orbit carries exactly one body."""
        if self._owner is not None:
            raise PhysicsError(f"Orbit around {self._parent!r} is already assigned to {self._owner!r}.")
        self._owner = body

    @property
    def version(self) -> int:
        return self._version

    def _touch(self):
        self._version += 1
        self._plane_cache.invalidate()
        self._position_cache.invalidate()

    # --- Elements ---
    def set_eccentricity(self, e: float) -> 'Orbit':
        """Sets how far from circular the orbit is.

        Args:
            e (float): Eccentricity in [0, 1); 0 is a circle.

        Returns:
            Orbit: This orbit for fluent method calls.

        Raises:
            RangeError: If `e` is outside [0, 1). The orbit is left unchanged.
        """
        if not (0.0 <= e < 1.0):
            raise RangeError(f"Orbital eccentricity can only be modeled in the interval [0, 1), got {e}.")
        self._eccentricity = float(e)
        self._touch()
        return self

    def set_semi_major_axis(self, a: float) -> 'Orbit':
        """Sets half the longest diameter of the orbital ellipse.

        Raises:
            RangeError: If `a` is not greater than zero. The orbit is left unchanged.
        """
        if not a > 0.0:
            raise RangeError(f"Semi-major axis must be greater than zero, got {a}.")
        self._semi_major_axis = float(a)
        self._touch()
        return self

    def set_inclination(self, degrees: float) -> 'Orbit':
        """Sets the tilt of the orbital plane against the parent's reference plane."""
        self._inclination = math.radians(degrees % 360.0)
        self._touch()
        return self

    def set_longitude_of_ascending_node(self, degrees: float) -> 'Orbit':
        """Sets the rotation of the line around which the inclination tilts the plane."""
        self._longitude_of_ascending_node = math.radians(degrees % 360.0)
        self._touch()
        return self

    def set_argument_of_periapsis(self, degrees: float) -> 'Orbit':
        """Sets the angle from the ascending node to periapsis within the orbital plane."""
        self._argument_of_periapsis = math.radians(degrees % 360.0)
        self._touch()
        return self

    @property
    def eccentricity(self) -> float:
        return self._eccentricity

    @property
    def semi_major_axis(self) -> float:
        return self._semi_major_axis

    @property
    def semi_minor_axis(self) -> float:
        return self._semi_major_axis * math.sqrt(1.0 - self._eccentricity * self._eccentricity)

    @property
    def inclination(self) -> float:
        """Inclination in degrees."""
        return math.degrees(self._inclination)

    @property
    def longitude_of_ascending_node(self) -> float:
        """Longitude of the ascending node in degrees."""
        return math.degrees(self._longitude_of_ascending_node)

    @property
    def argument_of_periapsis(self) -> float:
        """Argument of periapsis in degrees."""
        return math.degrees(self._argument_of_periapsis)

    def get_focal_distance(self) -> float:
        """Distance between the ellipse center and the focus holding the parent."""
        a = self._semi_major_axis
        b = self.semi_minor_axis
        return math.sqrt(max(0.0, a * a - b * b))

    def get_periapsis_distance(self) -> float:
        return self._semi_major_axis - self.get_focal_distance()

    def get_apoapsis_distance(self) -> float:
        return self._semi_major_axis + self.get_focal_distance()

    # --- Queries ---
    def get_orbital_plane_orientation(self) -> Quat4d:
        """Global orientation of the orbital plane; cached until the orbit or its parent changes."""
        key = (self._version, self._parent.state_token())
        return self._plane_cache.get_or_compute(key, self._compute_plane_orientation)

    def _compute_plane_orientation(self) -> Quat4d:
        return (self._parent.get_global_orientation()
                .yaw(-self._longitude_of_ascending_node)
                .pitch(self._inclination)
                .yaw(-self._argument_of_periapsis))

    def get_orbital_position_by_true_anomaly(self, true_anomaly: float) -> Vector3d:
        """Position relative to the parent for a true anomaly in radians.

        The result is cached for the last anomaly asked for.
        """
        key = (float(true_anomaly), self._version, self._parent.state_token())
        return self._position_cache.get_or_compute(
            key, lambda: self._position_in_plane(true_anomaly, self.get_orbital_plane_orientation()))

    def _position_in_plane(self, true_anomaly: float, plane: Quat4d) -> Vector3d:
        a = self._semi_major_axis
        b = self.semi_minor_axis
        on_ellipse = Vector3d(b * math.sin(true_anomaly), -a * math.cos(true_anomaly), 0.0)
        focus = Vector3d(0.0, -self.get_focal_distance(), 0.0)
        return plane.rotate_vector(on_ellipse - focus)

    def get_orbit_path(self, samples: int) -> List[Vector3d]:
        """Positions relative to the parent at `samples` evenly spaced true anomalies.

        Bypasses the position cache so drawing an orbit does not evict the
        last queried position.
        """
        if samples < 1:
            raise RangeError(f"An orbit path needs at least one sample, got {samples}.")
        plane = self.get_orbital_plane_orientation()
        step = 2.0 * math.pi / samples
        return [self._position_in_plane(i * step, plane) for i in range(samples)]

    def __repr__(self):
        return (f"Orbit(a={self._semi_major_axis!r}, e={self._eccentricity!r}, i={self.inclination:.3f}, "
                f"lan={self.longitude_of_ascending_node:.3f}, aop={self.argument_of_periapsis:.3f})")
