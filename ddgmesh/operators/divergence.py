"""
Divergence of a face vector field, as a vertex scalar.
"""

import numpy as np

from ..exceptions import MeshInputError
from ..mesh.half_edge import NO_FACE
from .weights import _positions, divide_by_area, vertex_areas


def face_field(mesh, field):
    """Validate a (F, 3) per-face vector field."""
    field = np.asarray(field, dtype=np.float64)
    if field.shape != (mesh.num_faces, 3):
        raise MeshInputError(
            f"face field must be shaped ({mesh.num_faces}, 3), got {field.shape}"
        )
    return field


def face_corner_edges(mesh, positions=None):
    """
    Interior half-edges with their owning vertex, face and edge vector.

    Returns ``(vertex, face, vector)`` where ``vector`` runs from ``vertex``
    to the next vertex around ``face``.
    """
    p = _positions(mesh, positions)
    h = np.flatnonzero(mesh.he_face != NO_FACE)
    origin = mesh.he_origin[h]
    target = mesh.he_origin[mesh.he_next[h]]
    return origin, mesh.he_face[h], p[target] - p[origin]


def divergence(mesh, field, positions=None):
    """
    Per-vertex divergence of a per-face vector field.

    For each vertex, sums ``X_f · (p_next - p_i)`` over its incident faces,
    where ``p_next`` follows the vertex around the face, and divides by the
    mixed vertex area (vertices without area get 0).

    Returns:
        (N,) array
    """
    field = face_field(mesh, field)
    vertex, face, vector = face_corner_edges(mesh, positions)
    total = np.zeros(mesh.num_vertices)
    np.add.at(total, vertex, np.sum(field[face] * vector, axis=1))
    return divide_by_area(total, vertex_areas(mesh, positions))
