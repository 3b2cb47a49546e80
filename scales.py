# scales.py
from config import (ConfigurationError, GRAVITATIONAL_CONSTANT_SI, AU_M, EARTH_RADIUS_M, JUPITER_RADIUS_M,
                    SOLAR_RADIUS_M, EARTH_MASS_KG, JUPITER_MASS_KG, SOLAR_MASS_KG, SECONDS_PER_DAY,
                    SECONDS_PER_YEAR)


class Scales:
    """Conversion table from SI units to the units a model is expressed in.

    One model length equals `distance_scale` meters, one model mass equals
    `mass_scale` kilograms and one model time equals `time_scale` seconds.
    Every accessor returns the named quantity in model units, e.g.
    `Scales(1000.0).astronomical_unit()` is one AU in kilometers.

    The root `CelestialBody` of a tree receives an instance and all of its
    satellites share it, so the gravitational constant and the stellar mass
    threshold are always consistent with the values fed into the setters.

    Raises:
        ConfigurationError: If any scale factor is not positive.
    """

    def __init__(self, distance_scale: float = 1.0, mass_scale: float = 1.0, time_scale: float = 1.0,
                 stellar_mass_threshold_earth_masses: float = 23835.0):
        for label, value in (("distance_scale", distance_scale), ("mass_scale", mass_scale),
                             ("time_scale", time_scale),
                             ("stellar_mass_threshold_earth_masses", stellar_mass_threshold_earth_masses)):
            if not value > 0:
                raise ConfigurationError(f"Scales.{label} must be positive, got {value}.")
        self.distance_scale = float(distance_scale)
        self.mass_scale = float(mass_scale)
        self.time_scale = float(time_scale)
        self.stellar_mass_threshold_earth_masses = float(stellar_mass_threshold_earth_masses)

    @classmethod
    def from_config(cls, cfg) -> 'Scales':
        """Builds the scales described by `cfg.Units` and `cfg.Model`."""
        return cls(
            distance_scale=cfg.Units.DISTANCE_SCALE_M,
            mass_scale=cfg.Units.MASS_SCALE_KG,
            time_scale=cfg.Units.TIME_SCALE_S,
            stellar_mass_threshold_earth_masses=cfg.Model.STELLAR_MASS_THRESHOLD_EARTH_MASSES,
        )

    # --- Length ---
    def meter(self) -> float:
        return 1.0 / self.distance_scale

    def kilometer(self) -> float:
        return 1000.0 / self.distance_scale

    def earth_radius(self) -> float:
        return EARTH_RADIUS_M / self.distance_scale

    def jupiter_radius(self) -> float:
        return JUPITER_RADIUS_M / self.distance_scale

    def solar_radius(self) -> float:
        return SOLAR_RADIUS_M / self.distance_scale

    def astronomical_unit(self) -> float:
        return AU_M / self.distance_scale

    # --- Mass ---
    def kilogram(self) -> float:
        return 1.0 / self.mass_scale

    def ton(self) -> float:
        return 1000.0 / self.mass_scale

    def earth_mass(self) -> float:
        return EARTH_MASS_KG / self.mass_scale

    def jupiter_mass(self) -> float:
        return JUPITER_MASS_KG / self.mass_scale

    def solar_mass(self) -> float:
        return SOLAR_MASS_KG / self.mass_scale

    # --- Time ---
    def second(self) -> float:
        return 1.0 / self.time_scale

    def minute(self) -> float:
        return 60.0 / self.time_scale

    def hour(self) -> float:
        return 3600.0 / self.time_scale

    def day(self) -> float:
        return SECONDS_PER_DAY / self.time_scale

    def year(self) -> float:
        return SECONDS_PER_YEAR / self.time_scale

    # --- Derived ---
    def gravitational_constant(self) -> float:
        """G expressed in model length^3 / (model mass * model time^2)."""
        return GRAVITATIONAL_CONSTANT_SI * self.mass_scale * self.time_scale ** 2 / self.distance_scale ** 3

    def stellar_mass_threshold(self) -> float:
        """Smallest mass a star may have, in model mass units."""
        return self.stellar_mass_threshold_earth_masses * self.earth_mass()

    def __repr__(self):
        return (f"Scales(distance_scale={self.distance_scale}, mass_scale={self.mass_scale}, "
                f"time_scale={self.time_scale})")
