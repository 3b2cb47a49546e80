# main.py
import logging
import math
import cProfile
import pstats
import argparse # For command line arguments (headless run, profiling)
import io
from typing import Dict, List, Optional

from config import config, ConfigurationError # Use the global config instance
from physics_utils import PhysicsError
from scales import Scales
from solarsystem import build_system, iter_bodies
from vector3d import Vector3d


class OrbitSimulation:
    """Owns a built celestial body tree and the model clock.

    The simulation has no state besides the current model time: every position
    and rotation is a pure function of time answered by the body tree, so
    stepping only moves the clock. Two front ends drive it:
    -   `run_headless()` steps a fixed number of times and logs an ephemeris
        (positions, distances and apparent sizes) every
        `config.Debug.LOG_ORBIT_INTERVAL_STEPS` steps.
    -   `run_interactive()` opens the pygame viewer and advances time with the
        wall clock until the window is closed.

    Attributes:
        bodies (Dict[str, CelestialBody]): The bodies by name, parents first.
        star (CelestialBody): The root of the tree.
        scales (Scales): Unit scales shared by all bodies.
        time (float): Current model time.
        running (bool): Cleared when the viewer asks to quit.
    """

    def __init__(self, body_data: Optional[Dict[str, Dict]] = None, scales: Optional[Scales] = None):
        """Builds the body tree.

        Args:
            body_data (Dict[str, Dict], optional): Body table, defaults to
                `config.SolarSystem.BODY_DATA` (whose star must be `config.SolarSystem.ROOT_BODY`).
            scales (Scales, optional): Unit scales, defaults to `Scales.from_config(config)`.

        Raises:
            ConfigurationError: If the body table cannot be built into a tree.
        """
        root_name = config.SolarSystem.ROOT_BODY if body_data is None else None
        try:
            self.bodies = build_system(body_data, scales, root_name=root_name)
        except ConfigurationError as e:
            logging.critical(f"Failed to initialize OrbitSimulation due to ConfigurationError: {e}", exc_info=True)
            raise
        self.star = next(body for body in self.bodies.values() if body.is_star)
        self.scales = self.star.scales
        self.time = 0.0
        self.running = True

        for body in iter_bodies(self.star):
            if body.is_star:
                logging.info(f"{body.name}: star, mass {body.mass:.4g}, radius {body.radius:.4g}")
            else:
                logging.info(f"{body.name}: orbits {body.parent.name}, sidereal period "
                             f"{body.get_sidereal_period() / self.scales.day():.3f} d, axial tilt "
                             f"{math.degrees(body.get_axial_tilt()):.2f} deg")

    def step(self, dt: float) -> float:
        """Advances the clock by `dt` model time units and returns the new time."""
        self.time += dt
        return self.time

    def snapshot(self) -> Dict[str, Vector3d]:
        """Global positions of all bodies at the current time."""
        return {body.name: body.get_position(self.time) for body in iter_bodies(self.star)}

    def log_ephemeris(self):
        days = self.time / self.scales.day()
        for body in iter_bodies(self.star):
            position = body.get_position(self.time)
            if body.is_star:
                logging.info(f"t={days:10.3f} d  {body.name:<10} {position}")
                continue
            distance = (position - body.parent.get_position(self.time)).length()
            parent_size = body.parent.get_angular_diameter_from(body, self.time)
            logging.info(f"t={days:10.3f} d  {body.name:<10} {position}  distance to {body.parent.name} "
                         f"{distance:.6g}  {body.parent.name} spans {parent_size:.4f} deg")

    def run_headless(self, steps: int, dt_days: float) -> List[Dict[str, Vector3d]]:
        """Steps the clock `steps` times by `dt_days` days, logging the ephemeris.

        Returns:
            List[Dict[str, Vector3d]]: Body positions after each step.
        """
        if steps < 0:
            raise ValueError(f"Number of steps cannot be negative, got {steps}.")
        dt = dt_days * self.scales.day()
        interval = max(1, config.Debug.LOG_ORBIT_INTERVAL_STEPS)
        logging.info(f"Starting headless run: {steps} steps of {dt_days} d")
        history = []
        for step_count in range(1, steps + 1):
            self.step(dt)
            history.append(self.snapshot())
            if step_count % interval == 0:
                self.log_ephemeris()
        logging.info(f"Headless run finished at t={self.time / self.scales.day():.3f} d")
        return history

    def run_interactive(self):
        """Runs the pygame viewer until the window is closed."""
        from visualization import Visualization  # pygame is only needed for the viewer
        visualization = Visualization(self.star)
        try:
            while self.running:
                if not visualization.handle_events():
                    self.running = False
                    break
                self.time = visualization.advance_time(self.time)
                visualization.render(self.time)
        finally:
            visualization.close()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run the hierarchical orbit modeler.")
    parser.add_argument("--headless", action="store_true",
                        help="Log an ephemeris instead of opening the viewer.")
    parser.add_argument("--steps", type=int, default=30,
                        help="Number of steps of a headless run (default: 30).")
    parser.add_argument("--dt-days", type=float, default=1.0,
                        help="Model days per headless step (default: 1.0).")
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Enable profiling for the simulation. Statistics will be saved to 'simulation_profile.prof'."
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    profiler = None
    if args.profile:
        profiler = cProfile.Profile()
        profiler.enable()
        logging.info("cProfile profiling enabled. Output will be saved to simulation_profile.prof upon completion.")

    try:
        logging.info("Initializing OrbitSimulation...")
        simulation = OrbitSimulation()
        if args.headless:
            simulation.run_headless(args.steps, args.dt_days)
        else:
            simulation.run_interactive()
        return 0
    except ConfigurationError as e_config_main:
        logging.critical(f"OrbitSimulation could not be initialized or run due to a ConfigurationError: {e_config_main}", exc_info=True)
        return 2
    except PhysicsError as e_physics:
        logging.critical(f"Model error during simulation: {e_physics}", exc_info=True)
        return 1
    finally:
        if profiler:
            profiler.disable()
            stats_file = "simulation_profile.prof"
            profiler.dump_stats(stats_file)
            logging.info(f"Profiling data successfully saved to {stats_file}")
            s = io.StringIO()
            pstats.Stats(profiler, stream=s).sort_stats('cumulative').print_stats(20)
            logging.info(f"\n--- Top 20 Profiled Functions (Cumulative Time) ---\n{s.getvalue()}")


if __name__ == "__main__":
    raise SystemExit(main())
