import copy
import unittest
from config import config, ConfigurationError, ModelConfig, validate_body_data

THRESHOLD = 23835.0

def make_table():
    return {
        'Sun': {'mass_earth': 333000.0, 'radius_km': 696340.0, 'central_body': None},
        'Earth': {'mass_earth': 1.0, 'radius_km': 6371.0, 'semi_major_axis_km': 149597870.7,
                  'eccentricity': 0.0167, 'central_body': 'Sun'},
        'Moon': {'mass_earth': 0.0123, 'radius_km': 1737.4, 'semi_major_axis_km': 384400.0,
                 'eccentricity': 0.0549, 'central_body': 'Earth'},
    }

class TestModelConfig(unittest.TestCase):

    def test_global_config_is_valid(self):
        self.assertIsInstance(config, ModelConfig)
        config.validate()

    def test_demo_system_root(self):
        root = config.SolarSystem.ROOT_BODY
        self.assertIsNone(config.SolarSystem.BODY_DATA[root]['central_body'])

class TestValidateBodyData(unittest.TestCase):

    def test_valid_table(self):
        validate_body_data(make_table(), THRESHOLD)
        validate_body_data(make_table(), THRESHOLD, root_name='Sun')

    def test_wrong_root_name(self):
        with self.assertRaises(ConfigurationError):
            validate_body_data(make_table(), THRESHOLD, root_name='Star')

    def test_no_root(self):
        table = make_table()
        table['Sun']['central_body'] = 'Moon'
        with self.assertRaises(ConfigurationError):
            validate_body_data(table, THRESHOLD)

    def test_two_roots(self):
        table = make_table()
        table['Other'] = copy.deepcopy(table['Sun'])
        with self.assertRaises(ConfigurationError):
            validate_body_data(table, THRESHOLD)

    def test_light_star(self):
        table = make_table()
        table['Sun']['mass_earth'] = THRESHOLD - 1.0
        with self.assertRaises(ConfigurationError):
            validate_body_data(table, THRESHOLD)

    def test_heavy_or_massless_satellite(self):
        for mass in (THRESHOLD, 0.0, -1.0):
            table = make_table()
            table['Earth']['mass_earth'] = mass
            with self.assertRaises(ConfigurationError):
                validate_body_data(table, THRESHOLD)

    def test_unknown_central_body(self):
        table = make_table()
        table['Moon']['central_body'] = 'Mars'
        with self.assertRaises(ConfigurationError):
            validate_body_data(table, THRESHOLD)

    def test_self_reference(self):
        table = make_table()
        table['Moon']['central_body'] = 'Moon'
        with self.assertRaises(ConfigurationError):
            validate_body_data(table, THRESHOLD)

    def test_cycle(self):
        table = make_table()
        table['Earth']['central_body'] = 'Moon'
        with self.assertRaises(ConfigurationError):
            validate_body_data(table, THRESHOLD)

    def test_out_of_range_elements(self):
        for key, value in (('eccentricity', 1.0), ('eccentricity', -0.1), ('semi_major_axis_km', 0.0),
                           ('orbital_offset', 1.0), ('rotational_offset', -0.5), ('radius_km', 0.0),
                           ('rotational_period_hours', -1.0), ('axis_of_rotation', (0.0, 0.0, 0.0))):
            table = make_table()
            table['Moon'][key] = value
            with self.assertRaises(ConfigurationError, msg=f"{key}={value}"):
                validate_body_data(table, THRESHOLD)

if __name__ == '__main__':
    unittest.main(argv=['first-arg-is-ignored'], exit=False)
