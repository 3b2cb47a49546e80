# config.py
import numpy as np
import logging

# Configure basic logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(module)s - %(message)s')

# Fundamental Physical Constants (SI, used by scales.Scales to derive model units)
GRAVITATIONAL_CONSTANT_SI = 6.67408e-11  # G in m^3 kg^-1 s^-2
AU_M = 1.495978707e11
EARTH_RADIUS_M = 6.3781e6
JUPITER_RADIUS_M = 6.9911e7
SOLAR_RADIUS_M = 6.957e8
EARTH_MASS_KG = 5.97237e24
JUPITER_MASS_KG = 1.89819e27
SOLAR_MASS_KG = 1.98855e30
SECONDS_PER_DAY = 86400.0
SECONDS_PER_YEAR = 3.15576e7  # Julian year

class ConfigurationError(Exception):
    """Custom exception for model configuration errors.

    Raised by `ModelConfig.validate()`, by `scales.Scales` for non-positive
    unit factors and by `solarsystem.build_system` when the body table cannot
    be turned into a consistent tree of celestial bodies.

    Attributes:
        message (str): A human-readable explanation of the configuration error.
                       This is the first argument passed to the exception constructor.
    """
    pass

class ModelConfig:
    """Centralized, hierarchical configuration for the orbit modeler.

    Parameters are grouped into nested static classes (`ModelConfig.Units`,
    `ModelConfig.Model`, `ModelConfig.SolarSystem`, ...). An instance named
    `config` is created at the end of this module, making it globally available
    via `from config import config`.

    The constructor runs `validate()`, which raises a `ConfigurationError` for
    inconsistent settings before any body is built.

    Example Usage:
        >>> from config import config
        >>> print(f"Length unit (m): {config.Units.DISTANCE_SCALE_M}")
        >>> print(f"Icosphere level: {config.Mesh.ICOSPHERE_RECURSION_LEVEL}")
    """

    # --- Unit Configuration ---
    class Units:
        """Scale factors from SI units to the values supplied to the model.

        1.0 of a model length corresponds to `DISTANCE_SCALE_M` meters, 1.0 of a
        model mass to `MASS_SCALE_KG` kilograms and 1.0 of a model time to
        `TIME_SCALE_S` seconds. The defaults model kilometers, Earth masses and days.

        Attributes:
            DISTANCE_SCALE_M (float): Meters per model length unit.
            MASS_SCALE_KG (float): Kilograms per model mass unit.
            TIME_SCALE_S (float): Seconds per model time unit.
        """
        DISTANCE_SCALE_M = 1000.0
        MASS_SCALE_KG = EARTH_MASS_KG
        TIME_SCALE_S = SECONDS_PER_DAY

    # --- Model Configuration ---
    class Model:
        """Constants of the celestial body model.

        Attributes:
            STELLAR_MASS_THRESHOLD_EARTH_MASSES (float): Minimum mass of a star (and
                exclusive upper bound for any satellite), in Earth masses. Roughly
                the hydrogen-burning limit.
            DEFAULT_ROTATIONAL_PERIOD_DAYS (float): Rotational period given to new bodies.
            DEFAULT_RADIUS (float): Radius given to new bodies, in model length units.
            QUATERNION_DRIFT_TOLERANCE (float): Composed quaternions are renormalized once
                their length leaves [1/tolerance, tolerance].
        """
        STELLAR_MASS_THRESHOLD_EARTH_MASSES = 23835.0
        DEFAULT_ROTATIONAL_PERIOD_DAYS = 1.0
        DEFAULT_RADIUS = 1.0
        QUATERNION_DRIFT_TOLERANCE = 1.01

    # --- Mesh Configuration ---
    class Mesh:
        """Configuration for the icosphere meshes used to draw bodies.

        Attributes:
            ICOSPHERE_RECURSION_LEVEL (int): Subdivision passes for body meshes.
            MAX_RECURSION_LEVEL (int): Upper bound accepted by the configuration; a level
                of n yields 20 * 4^n triangles.
        """
        ICOSPHERE_RECURSION_LEVEL = 2
        MAX_RECURSION_LEVEL = 7

    # --- Solar System Configuration ---
    class SolarSystem:
        """Demo system: a heavy star, a Jupiter-like planet and an Earth-like moon.

        Lengths are given in km, masses in Earth masses, periods in hours and angles
        in degrees. `solarsystem.build_system` converts them through `scales.Scales`.

        Attributes:
            ROOT_BODY (str): Name of the star at the root of the tree.
            BODY_DATA (Dict[str, Dict]): Per-body physical and orbital parameters.
                Bodies with `central_body` set to None are stars.
        """
        ROOT_BODY = 'Star'
        BODY_DATA = {
            'Star': {
                'mass_earth': 432900.0, 'radius_km': 843185.0, 'color': (255, 220, 120),
                'rotational_period_hours': 609.12, 'central_body': None
            },
            'Rith': {
                'mass_earth': 317.8, 'radius_km': 69911.0, 'color': (216, 168, 120),
                'semi_major_axis_km': 299197541.4, 'eccentricity': 0.0, 'inclination_deg': 0.0,
                'longitude_of_ascending_node_deg': 270.0, 'argument_of_periapsis_deg': 180.0,
                'rotational_period_hours': 9.925, 'axis_of_rotation': (0.0, 0.0543, 0.9985),
                'orbital_offset': 0.0, 'rotational_offset': 0.0, 'central_body': 'Star'
            },
            'Exes': {
                'mass_earth': 1.0, 'radius_km': 6371.0, 'color': (70, 130, 220),
                'semi_major_axis_km': 801879.2, 'eccentricity': 0.0, 'inclination_deg': 0.0,
                'longitude_of_ascending_node_deg': 0.0, 'argument_of_periapsis_deg': 180.0,
                'rotational_period_hours': 23.934, 'axis_of_rotation': (0.0, 0.3978, 0.9175),
                'orbital_offset': 0.25, 'rotational_offset': 0.0, 'central_body': 'Rith'
            }
        }

    # --- Visualization Configuration ---
    class Visualization:
        """Configuration for the pygame viewer.

        Attributes:
            SCREEN_WIDTH_PX (int): Width of the display window in pixels.
            SCREEN_HEIGHT_PX (int): Height of the display window in pixels.
            FPS (int): Target frames per second.
            ORBIT_PATH_SAMPLES (int): Points sampled along each orbit when drawing it.
            BODY_SCALE (float): Bodies are drawn this many times larger than their radius.
            MIN_ZOOM (float): Lower bound for the zoom level.
            MAX_ZOOM (float): Upper bound for the zoom level.
            TIME_SPEED_DAYS_PER_SECOND (float): Initial model days advanced per real second.
            BACKGROUND_COLOR (Tuple[int,int,int]): Window clear color.
            ORBIT_COLOR (Tuple[int,int,int]): Color of orbit paths.
            TEXT_COLOR (Tuple[int,int,int]): Color of labels and the status line.
        """
        SCREEN_WIDTH_PX = 1200
        SCREEN_HEIGHT_PX = 800
        FPS = 60
        ORBIT_PATH_SAMPLES = 256
        BODY_SCALE = 40.0
        MIN_ZOOM = 0.01
        MAX_ZOOM = 5000.0
        TIME_SPEED_DAYS_PER_SECOND = 10.0
        BACKGROUND_COLOR = (8, 8, 20)
        ORBIT_COLOR = (80, 80, 80)
        TEXT_COLOR = (220, 220, 220)

    # --- Debug Configuration ---
    class Debug:
        """Configuration for debugging features and logging verbosity.

        Attributes:
            CACHE_TRACING (bool): Log every cache recomputation at DEBUG level.
            LOG_ORBIT_INTERVAL_STEPS (int): Frequency (steps) at which the headless run
                logs body positions.
        """
        CACHE_TRACING = False
        LOG_ORBIT_INTERVAL_STEPS = 1

    def __init__(self):
        """Initializes the `ModelConfig` instance and validates it.

        Raises:
            ConfigurationError: If `self.validate()` detects any issue with the
                                configuration values.
        """
        self.validate()

    def validate(self):
        """Performs validation of all configuration settings.

        -   **Units**: all scale factors must be positive.
        -   **Model**: the stellar threshold, default radius and rotational period must be
            positive and the drift tolerance greater than one.
        -   **Mesh**: `0 <= ICOSPHERE_RECURSION_LEVEL <= MAX_RECURSION_LEVEL`.
        -   **SolarSystem**: exactly one star, named `ROOT_BODY`; valid central bodies;
            elements and offsets in range; masses on the correct side of the threshold.
        -   **Visualization**: positive screen dimensions, FPS, sample count and zoom range.

        Raises:
            ConfigurationError: If any configuration setting is found to be invalid.
        """
        # Units
        for name in ("DISTANCE_SCALE_M", "MASS_SCALE_KG", "TIME_SCALE_S"):
            if getattr(self.Units, name) <= 0:
                raise ConfigurationError(f"Units.{name} must be positive.")

        # Model
        if self.Model.STELLAR_MASS_THRESHOLD_EARTH_MASSES <= 0:
            raise ConfigurationError("Model.STELLAR_MASS_THRESHOLD_EARTH_MASSES must be positive.")
        if self.Model.DEFAULT_ROTATIONAL_PERIOD_DAYS < 0:
            raise ConfigurationError("Model.DEFAULT_ROTATIONAL_PERIOD_DAYS cannot be negative.")
        if self.Model.DEFAULT_RADIUS <= 0:
            raise ConfigurationError("Model.DEFAULT_RADIUS must be positive.")
        if self.Model.QUATERNION_DRIFT_TOLERANCE <= 1.0:
            raise ConfigurationError("Model.QUATERNION_DRIFT_TOLERANCE must be greater than 1.")

        # Mesh
        if not (0 <= self.Mesh.ICOSPHERE_RECURSION_LEVEL <= self.Mesh.MAX_RECURSION_LEVEL):
            raise ConfigurationError(
                f"Mesh.ICOSPHERE_RECURSION_LEVEL ({self.Mesh.ICOSPHERE_RECURSION_LEVEL}) "
                f"must be between 0 and MAX_RECURSION_LEVEL ({self.Mesh.MAX_RECURSION_LEVEL})."
            )

        # Visualization
        if self.Visualization.SCREEN_WIDTH_PX <= 0 or self.Visualization.SCREEN_HEIGHT_PX <= 0:
            raise ConfigurationError("Visualization screen dimensions (SCREEN_WIDTH_PX, SCREEN_HEIGHT_PX) must be positive.")
        if self.Visualization.FPS <= 0:
            raise ConfigurationError("Visualization.FPS must be positive.")
        if self.Visualization.ORBIT_PATH_SAMPLES < 2:
            raise ConfigurationError("Visualization.ORBIT_PATH_SAMPLES must be at least 2.")
        if not (0 < self.Visualization.MIN_ZOOM < self.Visualization.MAX_ZOOM):
            raise ConfigurationError("Visualization zoom limits must satisfy 0 < MIN_ZOOM < MAX_ZOOM.")

        # Solar System Data Validation
        validate_body_data(self.SolarSystem.BODY_DATA, self.Model.STELLAR_MASS_THRESHOLD_EARTH_MASSES,
                           root_name=self.SolarSystem.ROOT_BODY)

        logging.info("Configuration validated successfully.")


def validate_body_data(body_data, stellar_threshold_earth_masses, root_name=None):
    """Checks a body table (same layout as `ModelConfig.SolarSystem.BODY_DATA`).

    Args:
        body_data (Dict[str, Dict]): Body name -> parameter dict.
        stellar_threshold_earth_masses (float): Stellar mass threshold in Earth masses.
        root_name (str, optional): Expected name of the single star.

    Raises:
        ConfigurationError: On the first inconsistency found.
    """
    roots = [name for name, data in body_data.items() if data.get('central_body') is None]
    if len(roots) != 1:
        raise ConfigurationError(f"Body table must contain exactly one star (body without central_body), found {roots}.")
    if root_name is not None and roots[0] != root_name:
        raise ConfigurationError(f"Star of the body table is '{roots[0]}', expected '{root_name}'.")

    for name, data in body_data.items():
        central_body_name = data.get('central_body')
        is_star = central_body_name is None
        mass = data.get('mass_earth', -1.0)
        if is_star and mass < stellar_threshold_earth_masses:
            raise ConfigurationError(
                f"Mass of star '{name}' ({mass} Earth masses) is below the stellar threshold "
                f"({stellar_threshold_earth_masses})."
            )
        if not is_star and not (0.0 < mass < stellar_threshold_earth_masses):
            raise ConfigurationError(
                f"Mass of satellite '{name}' ({mass} Earth masses) must be positive and below the "
                f"stellar threshold ({stellar_threshold_earth_masses})."
            )
        if data.get('radius_km', -1.0) <= 0:
            raise ConfigurationError(f"Radius of celestial body '{name}' must be positive.")
        if data.get('rotational_period_hours', 0.0) < 0:
            raise ConfigurationError(f"Rotational period of '{name}' cannot be negative.")
        if not (0.0 <= data.get('rotational_offset', 0.0) < 1.0):
            raise ConfigurationError(f"Rotational offset of '{name}' must be >= 0 and < 1.")
        axis = data.get('axis_of_rotation', (0.0, 0.0, 1.0))
        if len(axis) != 3 or np.linalg.norm(np.asarray(axis, dtype=float)) <= 0:
            raise ConfigurationError(f"Axis of rotation of '{name}' must be a non-zero 3-vector.")

        if is_star:
            continue
        if central_body_name not in body_data:
            raise ConfigurationError(f"Central body '{central_body_name}' for '{name}' not found in body table.")
        if central_body_name == name:
            raise ConfigurationError(f"Celestial body '{name}' cannot orbit itself.")
        if data.get('semi_major_axis_km', 0.0) <= 0:
            raise ConfigurationError(f"Semi-major axis of celestial body '{name}' must be positive.")
        if not (0.0 <= data.get('eccentricity', 0.0) < 1.0):
            raise ConfigurationError(f"Eccentricity of celestial body '{name}' ({data.get('eccentricity')}) must be >= 0 and < 1.")
        if not (0.0 <= data.get('orbital_offset', 0.0) < 1.0):
            raise ConfigurationError(f"Orbital offset of '{name}' must be >= 0 and < 1.")

    # Every chain of central bodies must end at the star
    for name in body_data:
        seen = set()
        current = name
        while body_data[current].get('central_body') is not None:
            if current in seen:
                raise ConfigurationError(f"Central body chain of '{name}' contains a cycle.")
            seen.add(current)
            current = body_data[current]['central_body']


# --- Instantiate the configuration ---
# This makes the config object available for import and runs validation.
# e.g., from config import config
try:
    config = ModelConfig()
except ConfigurationError as e:
    logging.error(f"FATAL CONFIGURATION ERROR: {e}", exc_info=True)
    raise
