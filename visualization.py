# visualization.py
import pygame
import numpy as np
from typing import List, Tuple
import logging
from config import config, ConfigurationError
from icosphere import generate_icosphere, mesh_to_array
from quaternion import Quat4d
from solarsystem import CelestialBody, iter_bodies
from vector3d import Vector3d


def transform_mesh(mesh: np.ndarray, rotation: Quat4d, position: Vector3d, scale: float) -> np.ndarray:
    """Places a unit mesh in the world.

    Args:
        mesh (np.ndarray): `(N, 3)` vertices of a unit-radius mesh, see `icosphere.mesh_to_array`.
        rotation (Quat4d): Global rotation of the body.
        position (Vector3d): Global position of the body center.
        scale (float): Radius the unit mesh is scaled to.

    Returns:
        np.ndarray: `(N, 3)` world coordinates, rotated then scaled then translated.
    """
    rotation_matrix = rotation.to_rotation_matrix().data
    return mesh @ rotation_matrix.T * scale + position.data


def project_points(points: np.ndarray, center, zoom: float, pixels_per_unit: float,
                   screen_size: Tuple[int, int]) -> np.ndarray:
    """Projects world points top-down (onto the X/Y plane) into screen pixels.

    The world point `center` lands in the middle of the screen. World +Y points up
    on screen, so the screen Y axis is flipped.

    Args:
        points (np.ndarray): `(N, 3)` world coordinates.
        center (Vector3d or array-like): World point at the screen center.
        zoom (float): Camera zoom factor, 1.0 shows the whole system.
        pixels_per_unit (float): Pixels per world length unit at zoom 1.0.
        screen_size (Tuple[int, int]): `(width, height)` of the screen in pixels.

    Returns:
        np.ndarray: `(N, 2)` integer pixel coordinates.
    """
    center = center.data if isinstance(center, Vector3d) else np.asarray(center, dtype=np.float64)
    points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    factor = zoom * pixels_per_unit
    screen_x = screen_size[0] / 2.0 + (points[:, 0] - center[0]) * factor
    screen_y = screen_size[1] / 2.0 - (points[:, 1] - center[1]) * factor
    return np.rint(np.column_stack((screen_x, screen_y))).astype(int)


def fit_pixels_per_unit(star: CelestialBody, screen_size: Tuple[int, int], margin: float = 0.9) -> float:
    """Pixels per world unit so the outermost apoapsis fits on screen at zoom 1.0."""
    extent = 0.0
    for body in iter_bodies(star):
        if body.is_star:
            extent = max(extent, body.radius)
            continue
        # Upper bound of the distance from the star: sum of apoapses along the chain
        reach = 0.0
        node = body
        while not node.is_star:
            reach += node.orbit.get_apoapsis_distance()
            node = node.parent
        extent = max(extent, reach)
    return margin * min(screen_size) / (2.0 * extent)


class Visualization:
    """Top-down pygame viewer of a celestial body tree.

    Each frame draws every orbit as a polyline sampled from `Orbit.get_orbit_path`,
    offset by the parent's current position, and every body as its icosphere mesh
    rotated by `get_global_rotation(t)`, scaled to its radius times
    `config.Visualization.BODY_SCALE` and shaded by the Z component of the face
    normals. Bodies smaller than a few pixels are drawn as dots.

    Controls:
        - `+`/`=` and `-`, or the mouse wheel: zoom in and out.
        - `.` and `,`: double or halve the time speed.
        - `Space`: pause and resume.
        - `Tab`: cycle the body the camera is centered on.
        - `Esc` or closing the window: quit.

    Attributes:
        screen (pygame.Surface): The main Pygame display surface.
        clock (pygame.time.Clock): Pygame clock for controlling FPS.
        font (pygame.font.Font | None): Font for labels and the status line.
        bodies (List[CelestialBody]): Bodies of the tree, depth first.
        mesh (np.ndarray): `(N, 3)` vertices of the unit icosphere, 3 per face.
        zoom_level (float): Current zoom level, clamped to the configured range.
        time_speed_days (float): Model days advanced per real second.
        paused (bool): Whether time is frozen.
        focus_index (int): Index into `bodies` of the camera target.
        pixels_per_unit (float): Pixels per world length unit at zoom 1.0.

    Raises:
        ConfigurationError: If the screen dimensions in `config.Visualization` are unusable.
        pygame.error: If Pygame cannot open the display.
    """

    def __init__(self, star: CelestialBody):
        pygame.init()
        screen_w = config.Visualization.SCREEN_WIDTH_PX
        screen_h = config.Visualization.SCREEN_HEIGHT_PX
        if not (isinstance(screen_w, int) and screen_w > 0 and isinstance(screen_h, int) and screen_h > 0):
            raise ConfigurationError("SCREEN_WIDTH_PX and SCREEN_HEIGHT_PX must be positive integers.")
        try:
            self.screen = pygame.display.set_mode((screen_w, screen_h))
        except pygame.error as e_disp:
            logging.critical(f"Error setting display mode: {e_disp}", exc_info=True)
            raise
        pygame.display.set_caption(f"Orbit Modeler - {star.name} system")
        self.screen_size = (screen_w, screen_h)
        self.clock = pygame.time.Clock()

        try:
            self.font = pygame.font.Font(None, 20)
        except pygame.error as e_font:
            logging.error(f"Pygame error initializing fonts: {e_font}. Labels are disabled.", exc_info=True)
            self.font = None

        self.star = star
        self.bodies: List[CelestialBody] = list(iter_bodies(star))
        self.mesh = mesh_to_array(generate_icosphere(config.Mesh.ICOSPHERE_RECURSION_LEVEL))
        self.zoom_level = 1.0
        self.time_speed_days = config.Visualization.TIME_SPEED_DAYS_PER_SECOND
        self.paused = False
        self.focus_index = 0
        self.pixels_per_unit = fit_pixels_per_unit(star, self.screen_size)
        logging.info(f"Visualization ready: {len(self.bodies)} bodies, {len(self.mesh) // 3} faces per body mesh, "
                     f"{self.pixels_per_unit:.3e} px per unit")

    @property
    def focus(self) -> CelestialBody:
        return self.bodies[self.focus_index]

    def advance_time(self, time: float) -> float:
        """Returns `time` advanced by the real time since the last frame, honoring speed and pause."""
        elapsed_s = self.clock.tick(config.Visualization.FPS) / 1000.0
        if self.paused:
            return time
        return time + elapsed_s * self.time_speed_days * self.star.scales.day()

    def _to_screen(self, points: np.ndarray, center: Vector3d) -> np.ndarray:
        return project_points(points, center, self.zoom_level, self.pixels_per_unit, self.screen_size)

    def render(self, time: float):
        """Draws orbits, bodies and the status line for model time `time`."""
        try:
            self.screen.fill(config.Visualization.BACKGROUND_COLOR)
            center = self.focus.get_position(time)
            self._draw_orbits(time, center)
            for body in self.bodies:
                self._draw_body(body, time, center)
            self._draw_status(time)
            pygame.display.flip()
        except pygame.error as e_pygame_render:
            logging.error(f"Pygame error during render: {e_pygame_render}. Attempting to continue.", exc_info=True)

    def _draw_orbits(self, time: float, center: Vector3d):
        samples = config.Visualization.ORBIT_PATH_SAMPLES
        for body in self.bodies:
            if body.is_star:
                continue
            path = mesh_to_array(body.orbit.get_orbit_path(samples)) + body.parent.get_position(time).data
            screen_points = self._to_screen(path, center)
            pygame.draw.lines(self.screen, config.Visualization.ORBIT_COLOR, True, screen_points.tolist(), 1)

    def _draw_body(self, body: CelestialBody, time: float, center: Vector3d):
        position = body.get_position(time)
        scale = body.radius * config.Visualization.BODY_SCALE
        screen_center = self._to_screen(position.data, center)[0]
        screen_radius = scale * self.zoom_level * self.pixels_per_unit

        if screen_radius < 3.0:
            pygame.draw.circle(self.screen, body.color, screen_center.tolist(), max(1, int(screen_radius)))
        else:
            world = transform_mesh(self.mesh, body.get_global_rotation(time), position, scale)
            faces = world.reshape(-1, 3, 3)
            normals = np.cross(faces[:, 1] - faces[:, 0], faces[:, 2] - faces[:, 0])
            lengths = np.linalg.norm(normals, axis=1)
            facing = normals[:, 2] / np.where(lengths > 0.0, lengths, 1.0)
            screen_faces = self._to_screen(world, center).reshape(-1, 3, 2)
            color = np.asarray(body.color, dtype=np.float64)
            # Faces turned towards the viewer only, far ones first
            for index in np.argsort(faces[:, :, 2].mean(axis=1)):
                if facing[index] <= 0.0:
                    continue
                shade = np.clip(color * (0.35 + 0.65 * facing[index]), 0, 255).astype(int)
                pygame.draw.polygon(self.screen, tuple(shade), screen_faces[index].tolist())

        if self.font:
            label = self.font.render(body.name, True, config.Visualization.TEXT_COLOR)
            self.screen.blit(label, label.get_rect(center=(int(screen_center[0]),
                                                           int(screen_center[1] - max(screen_radius, 3.0) - 10))))

    def _draw_status(self, time: float):
        if not self.font:
            return
        days = time / self.star.scales.day()
        status = (f"t = {days:.2f} d   speed = {self.time_speed_days:g} d/s{' (paused)' if self.paused else ''}   "
                  f"zoom = {self.zoom_level:.3g}   focus = {self.focus.name}")
        self.screen.blit(self.font.render(status, True, config.Visualization.TEXT_COLOR), (10, 10))

    def handle_events(self) -> bool:
        """Processes the Pygame event queue.

        Returns:
            bool: `False` if the user asked to quit, `True` otherwise.
        """
        min_zoom = config.Visualization.MIN_ZOOM
        max_zoom = config.Visualization.MAX_ZOOM
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("QUIT event received via Pygame window. Signaling shutdown.")
                return False

            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    logging.info("Escape pressed. Signaling shutdown.")
                    return False
                if event.key == pygame.K_PLUS or event.key == pygame.K_EQUALS:
                    self.zoom_level *= 1.2
                elif event.key == pygame.K_MINUS:
                    self.zoom_level /= 1.2
                elif event.key == pygame.K_PERIOD:
                    self.time_speed_days *= 2.0
                elif event.key == pygame.K_COMMA:
                    self.time_speed_days /= 2.0
                elif event.key == pygame.K_SPACE:
                    self.paused = not self.paused
                elif event.key == pygame.K_TAB:
                    self.focus_index = (self.focus_index + 1) % len(self.bodies)
                    logging.info(f"Camera focus set to {self.focus.name}")
                self.zoom_level = float(np.clip(self.zoom_level, min_zoom, max_zoom))

            if event.type == pygame.MOUSEBUTTONDOWN:  # Mouse wheel for zoom
                if event.button == 4:
                    self.zoom_level *= 1.1
                elif event.button == 5:
                    self.zoom_level /= 1.1
                self.zoom_level = float(np.clip(self.zoom_level, min_zoom, max_zoom))
        return True

    def close(self):
        pygame.quit()
