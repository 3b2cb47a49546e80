import unittest
from config import ConfigurationError, config
from main import OrbitSimulation, parse_args, main
from vector3d import ZERO

class TestOrbitSimulation(unittest.TestCase):

    def setUp(self):
        self.simulation = OrbitSimulation()

    def test_builds_demo_system(self):
        self.assertEqual(self.simulation.star.name, config.SolarSystem.ROOT_BODY)
        self.assertEqual(set(self.simulation.bodies), set(config.SolarSystem.BODY_DATA))
        self.assertEqual(self.simulation.time, 0.0)

    def test_headless_run(self):
        history = self.simulation.run_headless(3, 2.0)
        self.assertEqual(len(history), 3)
        self.assertAlmostEqual(self.simulation.time, 6.0 * self.simulation.scales.day())
        for snapshot in history:
            self.assertEqual(snapshot[self.simulation.star.name], ZERO)
        self.assertNotEqual(history[0]['Rith'], history[2]['Rith'])

    def test_negative_steps(self):
        with self.assertRaises(ValueError):
            self.simulation.run_headless(-1, 1.0)

    def test_invalid_body_table(self):
        table = {'Star': {'mass_earth': 1.0, 'radius_km': 1.0, 'central_body': None}}
        with self.assertRaises(ConfigurationError):
            OrbitSimulation(table)

class TestCommandLine(unittest.TestCase):

    def test_defaults(self):
        args = parse_args([])
        self.assertFalse(args.headless)
        self.assertFalse(args.profile)
        self.assertEqual(args.steps, 30)
        self.assertEqual(args.dt_days, 1.0)

    def test_headless_main(self):
        self.assertEqual(main(['--headless', '--steps', '2', '--dt-days', '0.5']), 0)

if __name__ == '__main__':
    unittest.main(argv=['first-arg-is-ignored'], exit=False)
