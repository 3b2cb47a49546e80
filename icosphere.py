# icosphere.py
import math
import logging
from typing import Dict, List

import numpy as np

from physics_utils import RangeError
from vector3d import Vector3d

# Faces of the base icosahedron, wound consistently outward
_ICOSAHEDRON_FACES = (
    # 5 faces around vertex 0
    (0, 11, 5), (0, 5, 1), (0, 1, 7), (0, 7, 10), (0, 10, 11),
    # 5 adjacent faces
    (1, 5, 9), (5, 11, 4), (11, 10, 2), (10, 7, 6), (7, 1, 8),
    # 5 faces around vertex 3
    (3, 9, 4), (3, 4, 2), (3, 2, 6), (3, 6, 8), (3, 8, 9),
    # 5 adjacent faces
    (4, 9, 5), (2, 4, 11), (6, 2, 10), (8, 6, 7), (9, 8, 1),
)


class IcoSphereCreator:
    """Builds unit-radius geodesic spheres by subdividing an icosahedron.

    Every call to `create_icosphere` starts from a fresh vertex list and midpoint
    cache, so the result only depends on the recursion level. A level of n yields
    `20 * 4^n` triangles sharing `10 * 4^n + 2` distinct vertices.

    Attributes:
        vertex_count (int): Distinct vertices of the last generated mesh.
        face_count (int): Triangles of the last generated mesh.
    """

    def __init__(self):
        self._vertices: List[Vector3d] = []
        self._midpoint_cache: Dict[int, int] = {}
        self.vertex_count = 0
        self.face_count = 0

    def _add_vertex(self, point: Vector3d) -> int:
        """Adds `point` projected onto the unit sphere and returns its index."""
        self._vertices.append(point.normalize())
        return len(self._vertices) - 1

    def _get_midpoint(self, i1: int, i2: int) -> int:
        # Unordered edge key, so both triangles sharing an edge get the same vertex
        smaller, greater = (i1, i2) if i1 < i2 else (i2, i1)
        key = (smaller << 32) | greater
        index = self._midpoint_cache.get(key)
        if index is None:
            index = self._add_vertex((self._vertices[i1] + self._vertices[i2]) * 0.5)
            self._midpoint_cache[key] = index
        return index

    def create_icosphere(self, recursion_level: int) -> List[Vector3d]:
        """Generates the triangle list of an icosphere.

        Args:
            recursion_level (int): Number of subdivision passes, 0 for the plain icosahedron.

        Returns:
            List[Vector3d]: Vertices of the triangles, three consecutive entries per
                triangle. Vertices shared between triangles are the same objects.

        Raises:
            RangeError: If `recursion_level` is negative.
        """
        if recursion_level < 0:
            raise RangeError(f"Icosphere recursion level cannot be negative, got {recursion_level}.")
        self._vertices = []
        self._midpoint_cache = {}

        t = (1.0 + math.sqrt(5.0)) / 2.0
        for x, y, z in ((-1, t, 0), (1, t, 0), (-1, -t, 0), (1, -t, 0),
                        (0, -1, t), (0, 1, t), (0, -1, -t), (0, 1, -t),
                        (t, 0, -1), (t, 0, 1), (-t, 0, -1), (-t, 0, 1)):
            self._add_vertex(Vector3d(x, y, z))

        faces = list(_ICOSAHEDRON_FACES)
        for _ in range(recursion_level):
            refined = []
            for i0, i1, i2 in faces:
                a = self._get_midpoint(i0, i1)
                b = self._get_midpoint(i1, i2)
                c = self._get_midpoint(i2, i0)
                refined.extend(((i0, a, c), (i1, b, a), (i2, c, b), (a, b, c)))
            faces = refined

        self.vertex_count = len(self._vertices)
        self.face_count = len(faces)
        logging.debug(f"Generated icosphere level {recursion_level}: {self.face_count} faces, "
                      f"{self.vertex_count} vertices")
        return [self._vertices[i] for face in faces for i in face]


def generate_icosphere(recursion_level: int) -> List[Vector3d]:
    """Convenience wrapper around a fresh `IcoSphereCreator`."""
    return IcoSphereCreator().create_icosphere(recursion_level)


def mesh_to_array(mesh: List[Vector3d]) -> np.ndarray:
    """Stacks a vertex list into an (N, 3) float array."""
    if not mesh:
        return np.zeros((0, 3), dtype=np.float64)
    return np.vstack([vertex.data for vertex in mesh])
