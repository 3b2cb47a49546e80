# solarsystem.py
import math
import sys
import logging
from typing import Dict, Iterator, List, Optional

from caches import ResultCache
from config import config, ConfigurationError, validate_body_data
from orbit import Orbit
from physics_utils import PhysicsError, RangeError, MassClassificationError, angular_diameter, safe_divide
from quaternion import Quat4d
from scales import Scales
from vector3d import Vector3d, ZERO, X_AXIS, Z_AXIS


class CelestialBody:
    """A node of a hierarchical orbital system.

    A body constructed without an orbit is the star at the root of its tree.
    Every other body is constructed with the `Orbit` it moves on, which already
    names its parent, so parents are fixed at construction and the tree cannot
    contain cycles. The parent keeps the list of its satellites.

    Setters validate before they commit and return the body for fluent calls.
    Structural setters bump the body's version and empty its caches; queries
    are memoized in single-slot `ResultCache`s keyed by their argument and the
    body's `state_token()`.

    Frames: the axis of rotation is given relative to the orbital plane. The
    global orientation is the orbital plane orientation followed by the
    rotation taking local +Z to the axis; the global rotation at a time adds the
    spin about that axis.
    Compositions are Hamilton products `q ⊗ r` (r applied first, in the frame
    of q): the global orientation is `plane ⊗ axial` and the global rotation is
    `orientation ⊗ spin`.

    Attributes:
        name (str): Label used in logs and by the viewer.
        color (Tuple[int, int, int]): RGB color used by the viewer.
    """

    def __init__(self, orbit: Optional[Orbit] = None, scales: Optional[Scales] = None, name: Optional[str] = None):
        """Creates a star (no orbit) or a satellite on `orbit`.

        Args:
            orbit (Orbit, optional): The orbit this body moves on. None creates a star.
            scales (Scales, optional): Unit scales of the model, accepted for stars only.
                Defaults to the scales described by `config`.
            name (str, optional): Label of the body.

        Raises:
            ConfigurationError: If scales are passed for a satellite.
            PhysicsError: If `orbit` already carries another body.
        """
        if orbit is not None and scales is not None:
            raise ConfigurationError("Satellites share the scales of their star; pass scales to the star only.")
        if orbit is not None:
            orbit.attach(self)
            self._scales = orbit.parent.scales
        else:
            self._scales = scales if scales is not None else Scales.from_config(config)

        self._orbit = orbit
        self.name = name if name is not None else ("star" if orbit is None else f"satellite of {orbit.parent.name}")
        self.color = (200, 200, 200)
        self._satellites: List['CelestialBody'] = []

        self._radius = config.Model.DEFAULT_RADIUS
        # Stars start at the threshold; satellites at the smallest positive mass
        self._mass = self._scales.stellar_mass_threshold() if orbit is None else sys.float_info.min
        self._axis_of_rotation = Z_AXIS
        self._rotational_period = self._scales.day() * config.Model.DEFAULT_ROTATIONAL_PERIOD_DAYS
        self._orbital_offset = 0.0
        self._rotational_offset = 0.0

        self._version = 0
        self._position_cache = ResultCache(f"position of {self.name}")
        self._orientation_cache = ResultCache(f"global orientation of {self.name}")
        self._rotation_cache = ResultCache(f"global rotation of {self.name}")

        if orbit is not None:
            orbit.parent._satellites.append(self)

    # --- Tree structure ---
    @property
    def is_star(self) -> bool:
        """A star, in the context of this model, is a body without an orbit."""
        return self._orbit is None

    @property
    def orbit(self) -> Optional[Orbit]:
        return self._orbit

    @property
    def parent(self) -> Optional['CelestialBody']:
        return None if self._orbit is None else self._orbit.parent

    @property
    def satellites(self) -> List['CelestialBody']:
        return list(self._satellites)

    @property
    def scales(self) -> Scales:
        return self._scales

    def get_system_star(self) -> 'CelestialBody':
        body = self
        while body._orbit is not None:
            body = body._orbit.parent
        return body

    def walk(self) -> Iterator['CelestialBody']:
        """Yields this body and all bodies orbiting it, depth first."""
        yield self
        for satellite in self._satellites:
            yield from satellite.walk()

    def state_token(self):
        """Versions of this body, its orbit and all its ancestors.

        Changes whenever anything this body's position or orientation depends on
        is mutated. Used as part of every cache key.
        """
        if self._orbit is None:
            return (self._version,)
        return (self._version, self._orbit.version, self._orbit.parent.state_token())

    def _touch(self):
        self._version += 1
        self._position_cache.invalidate()
        self._orientation_cache.invalidate()
        self._rotation_cache.invalidate()

    # --- Setters ---
    def set_radius(self, r: float) -> 'CelestialBody':
        """Sets the radius of this body.

        Raises:
            RangeError: If `r` is not greater than zero.
        """
        if not r > 0.0:
            raise RangeError(f"Radius must be greater than zero, got {r}.")
        # Positions and orientations do not depend on the radius
        self._radius = float(r)
        return self

    def set_mass(self, m: float) -> 'CelestialBody':
        """Sets the mass of this body.

        A star needs at least the stellar mass threshold of its scales; a satellite
        needs a positive mass strictly below it.

        Raises:
            MassClassificationError: If `m` contradicts the star/satellite classification.
                The previous mass is kept.
        """
        threshold = self._scales.stellar_mass_threshold()
        if self.is_star:
            if not m >= threshold:
                raise MassClassificationError(f"Mass {m} is too low for a star (threshold {threshold}).")
        else:
            if not m > 0.0:
                raise MassClassificationError(f"Mass of a satellite must be positive and non-zero, got {m}.")
            if m >= threshold:
                raise MassClassificationError(
                    f"Mass {m} is too high for a non-star celestial body (threshold {threshold}).")
        self._mass = float(m)
        self._touch()
        return self

    def set_axis_of_rotation(self, axis) -> 'CelestialBody':
        """Sets the axis this body spins around, relative to its orbital plane.

        Args:
            axis (Vector3d or sequence of 3 floats): Any non-zero vector; it is normalized.

        Raises:
            RangeError: If `axis` has (near) zero length.
        """
        if not isinstance(axis, Vector3d):
            axis = Vector3d.from_array(axis)
        if not axis.length() > 1e-12:
            raise RangeError(f"Axis of rotation must be a non-zero vector, got {axis!r}.")
        self._axis_of_rotation = axis.normalize()
        self._touch()
        return self

    def set_rotational_period(self, period: float) -> 'CelestialBody':
        """Sets the time of one full spin. A period of 0 stops the spin.

        Raises:
            RangeError: If `period` is negative.
        """
        if not period >= 0.0:
            raise RangeError(f"Rotational period cannot be negative, got {period}.")
        self._rotational_period = float(period)
        self._touch()
        return self

    def set_orbital_offset(self, offset: float) -> 'CelestialBody':
        """Sets the fraction of a revolution already completed at time 0.

        Ignored with a warning for a star, which has no orbit.

        Raises:
            RangeError: If `offset` is outside [0, 1).
        """
        if self.is_star:
            logging.warning(f"Orbital offset {offset} ignored for star '{self.name}', which has no orbit.")
            return self
        if not (0.0 <= offset < 1.0):
            raise RangeError(f"Orbital offset must be in [0, 1), got {offset}.")
        self._orbital_offset = float(offset)
        self._touch()
        return self

    def set_rotational_offset(self, offset: float) -> 'CelestialBody':
        """Sets the fraction of a spin already completed at time 0.

        Raises:
            RangeError: If `offset` is outside [0, 1).
        """
        if not (0.0 <= offset < 1.0):
            raise RangeError(f"Rotational offset must be in [0, 1), got {offset}.")
        self._rotational_offset = float(offset)
        self._touch()
        return self

    # --- Attributes ---
    @property
    def radius(self) -> float:
        return self._radius

    @property
    def mass(self) -> float:
        return self._mass

    @property
    def axis_of_rotation(self) -> Vector3d:
        return self._axis_of_rotation

    @property
    def rotational_period(self) -> float:
        return self._rotational_period

    @property
    def orbital_offset(self) -> float:
        return self._orbital_offset

    @property
    def rotational_offset(self) -> float:
        return self._rotational_offset

    # --- Queries ---
    def get_sidereal_period(self) -> float:
        """Time for one revolution around the parent, by Kepler's third law. 0 for a star.

        Infinite when the masses are too small for `G * (m + M)` to be a normal float;
        such a body stays at its orbital offset.
        """
        if self.is_star:
            return 0.0
        gm = self._scales.gravitational_constant() * (self._mass + self._orbit.parent.mass)
        a = self._orbit.semi_major_axis
        return 2.0 * math.pi * math.sqrt(
            safe_divide(a * a * a, gm, epsilon=sys.float_info.min, default_on_zero_denom=float('inf')))

    def get_position(self, time: float) -> Vector3d:
        """Global position at `time`. The star sits at the origin."""
        key = (float(time), self.state_token())
        return self._position_cache.get_or_compute(key, lambda: self._compute_position(time))

    def _compute_position(self, time: float) -> Vector3d:
        if self.is_star:
            return ZERO
        # Linear in time: exact for circular orbits, a mean-anomaly proxy otherwise
        true_anomaly = 2.0 * math.pi * (time / self.get_sidereal_period() + self._orbital_offset)
        return self._orbit.parent.get_position(time) + self._orbit.get_orbital_position_by_true_anomaly(true_anomaly)

    def get_global_orientation(self) -> Quat4d:
        """Orientation of this body without its spin: orbital plane, then axial tilt."""
        return self._orientation_cache.get_or_compute(self.state_token(), self._compute_global_orientation)

    def _compute_global_orientation(self) -> Quat4d:
        axial = Quat4d.from_to(Z_AXIS, self._axis_of_rotation)
        if self.is_star:
            return axial
        return self._orbit.get_orbital_plane_orientation().multiply(axial)

    def get_local_rotation(self, time: float) -> Quat4d:
        """Spin about the local Z axis at `time`."""
        turns = self._rotational_offset
        if self._rotational_period > 0.0:
            turns += time / self._rotational_period
        return Quat4d.identity().yaw(2.0 * math.pi * turns)

    def get_global_rotation(self, time: float) -> Quat4d:
        """Global orientation including the spin at `time`."""
        key = (float(time), self.state_token())
        return self._rotation_cache.get_or_compute(
            key, lambda: self.get_global_orientation().multiply(self.get_local_rotation(time)))

    def get_global_axis_of_rotation(self) -> Vector3d:
        """The axis of rotation expressed in the global frame."""
        return self.get_global_orientation().rotate_vector(Z_AXIS)

    def get_axial_tilt(self) -> float:
        """Angle in radians between the orbital plane normal and the axis of rotation."""
        return Z_AXIS.angle_between(self._axis_of_rotation)

    def get_position_on_surface(self, time: float, azimuth: float, zenith: float) -> Vector3d:
        """Global position of a surface point at `time`.

        Args:
            time (float): Model time.
            azimuth (float): Angle around the axis of rotation in radians, 0 along local +X.
            zenith (float): Angle from the rotational pole in radians; pi/2 is the equator.

        Returns:
            Vector3d: Body position plus the rotated surface direction times the radius.
        """
        direction = (self.get_global_rotation(time)
                     .yaw(azimuth)
                     .pitch(zenith - 0.5 * math.pi)
                     .rotate_vector(X_AXIS)
                     .normalize())
        return self.get_position(time) + direction * self._radius

    def get_angular_diameter_from(self, observer: 'CelestialBody', time: float) -> float:
        """Apparent diameter of this body in degrees, seen from the center of `observer`."""
        distance = (self.get_position(time) - observer.get_position(time)).length()
        return angular_diameter(2.0 * self._radius, distance)

    def __repr__(self):
        return f"CelestialBody({self.name!r})"


def iter_bodies(star: CelestialBody) -> Iterator[CelestialBody]:
    """All bodies of the tree rooted at `star`, depth first."""
    return star.walk()


def _create_body(name: str, data: Dict, parent: Optional[CelestialBody], scales: Scales) -> CelestialBody:
    if parent is None:
        body = CelestialBody(scales=scales, name=name)
    else:
        orbit = (Orbit(parent)
                 .set_semi_major_axis(data['semi_major_axis_km'] * scales.kilometer())
                 .set_eccentricity(data.get('eccentricity', 0.0))
                 .set_inclination(data.get('inclination_deg', 0.0))
                 .set_longitude_of_ascending_node(data.get('longitude_of_ascending_node_deg', 270.0))
                 .set_argument_of_periapsis(data.get('argument_of_periapsis_deg', 180.0)))
        body = CelestialBody(orbit, name=name)
        body.set_orbital_offset(data.get('orbital_offset', 0.0))

    rotational_period_hours = data.get('rotational_period_hours', config.Model.DEFAULT_ROTATIONAL_PERIOD_DAYS * 24.0)
    body.set_mass(data['mass_earth'] * scales.earth_mass()) \
        .set_radius(data['radius_km'] * scales.kilometer()) \
        .set_axis_of_rotation(data.get('axis_of_rotation', (0.0, 0.0, 1.0))) \
        .set_rotational_period(rotational_period_hours * scales.hour()) \
        .set_rotational_offset(data.get('rotational_offset', 0.0))
    body.color = tuple(data.get('color', body.color))
    return body


def build_system(body_data: Optional[Dict[str, Dict]] = None, scales: Optional[Scales] = None,
                 root_name: Optional[str] = None) -> Dict[str, CelestialBody]:
    """Builds linked celestial bodies from a body table.

    The table uses the layout of `config.SolarSystem.BODY_DATA`: lengths in km,
    masses in Earth masses, periods in hours and angles in degrees. Values are
    converted into model units through `scales`.

    Args:
        body_data (Dict[str, Dict], optional): Body table. Defaults to the configured demo system.
        scales (Scales, optional): Model unit scales. Defaults to `Scales.from_config(config)`.
        root_name (str, optional): Required name of the star; any name is accepted if None.

    Returns:
        Dict[str, CelestialBody]: Bodies by name, parents before their satellites.

    Raises:
        ConfigurationError: If the table is inconsistent or a body rejects its parameters.
    """
    body_data = config.SolarSystem.BODY_DATA if body_data is None else body_data
    scales = Scales.from_config(config) if scales is None else scales
    validate_body_data(body_data, scales.stellar_mass_threshold_earth_masses, root_name=root_name)

    bodies: Dict[str, CelestialBody] = {}
    pending = list(body_data)
    while pending:
        ready = [name for name in pending
                 if body_data[name].get('central_body') is None or body_data[name]['central_body'] in bodies]
        if not ready:
            raise ConfigurationError(f"Could not resolve central bodies for {pending}.")
        for name in ready:
            data = body_data[name]
            try:
                bodies[name] = _create_body(name, data, bodies.get(data.get('central_body')), scales)
            except PhysicsError as e:
                raise ConfigurationError(f"Invalid parameters for celestial body '{name}': {e}") from e
            pending.remove(name)

    logging.info(f"Built system of {len(bodies)} celestial bodies: {', '.join(bodies)}.")
    return bodies
