"""
Gradient of a piecewise-linear vertex function.
"""

import numpy as np

from ..exceptions import MeshInputError
from .weights import _positions

_EPS = 1e-12


def _vertex_field(mesh, field):
    field = np.asarray(field, dtype=np.float64)
    if field.shape[0] != mesh.num_vertices:
        raise MeshInputError(
            f"field has {field.shape[0]} rows but the mesh has {mesh.num_vertices} vertices"
        )
    return field


def gradient(mesh, field, positions=None, area_normalized=False):
    """
    Per-face gradient of a scalar vertex field.

    On each triangle this evaluates

        Σ_i f_i (N × e_i) / |N|

    with ``N`` the face normal ``(p1 - p0) × (p2 - p0)`` and ``e_i`` the
    edge opposite corner ``i``, oriented along the face winding. That is
    ``2A ∇f`` for the linear interpolant of ``f`` on a face of area ``A``.
    With ``area_normalized`` the result is divided by ``2A`` and gives the
    gradient ``∇f`` itself.

    Args:
        mesh: triangle HalfEdgeMesh
        field: (N,) scalar per vertex
        positions: optional (N, 3) positions overriding the vertex payload
        area_normalized: divide each face value by twice the face area

    Returns:
        (F, 3) gradient vectors; zero on degenerate faces
    """
    field = _vertex_field(mesh, field)
    p = _positions(mesh, positions)
    tris = mesh.triangles()
    p0, p1, p2 = p[tris[:, 0]], p[tris[:, 1]], p[tris[:, 2]]

    normal = np.cross(p1 - p0, p2 - p0)
    double_area = np.linalg.norm(normal, axis=1)
    valid = double_area > _EPS
    unit = np.zeros_like(normal)
    unit[valid] = normal[valid] / double_area[valid, None]

    opposite = (p2 - p1, p0 - p2, p1 - p0)
    grad = np.zeros((tris.shape[0], 3))
    for corner, edge in enumerate(opposite):
        grad += field[tris[:, corner], None] * np.cross(unit, edge)
    if area_normalized:
        grad[valid] /= double_area[valid, None]
    grad[~valid] = 0.0
    return grad
