import numpy as np

from ..exceptions import MeshInputError
from .gradient import gradient
from .weights import _positions

_EPS = 1e-12


def jacobian(mesh, field, positions=None, area_normalized=False):
    """
    Per-face Jacobian of a vertex vector field.

    Column ``c`` of each 3x3 tensor is :func:`gradient` of component ``c``
    of the field, so it carries the same ``2A`` face-area factor unless
    ``area_normalized`` is set. With ``area_normalized`` the derivative
    along a tangent direction ``d`` is ``J.T @ d``, and ``field = positions``
    gives the projector onto each face plane.

    Args:
        mesh: triangle HalfEdgeMesh
        field: (N, 3) vector per vertex
        positions: optional (N, 3) positions overriding the vertex payload
        area_normalized: divide the columns by twice the face area

    Returns:
        (F, 3, 3) array; degenerate faces get the identity
    """
    field = np.asarray(field, dtype=np.float64)
    if field.shape != (mesh.num_vertices, 3):
        raise MeshInputError(
            f"field must be shaped ({mesh.num_vertices}, 3), got {field.shape}"
        )
    columns = [
        gradient(mesh, field[:, c], positions, area_normalized=area_normalized)
        for c in range(3)
    ]
    J = np.stack(columns, axis=2)

    p = _positions(mesh, positions)
    tris = mesh.triangles()
    p0, p1, p2 = p[tris[:, 0]], p[tris[:, 1]], p[tris[:, 2]]
    degenerate = np.linalg.norm(np.cross(p1 - p0, p2 - p0), axis=1) <= _EPS
    J[degenerate] = np.eye(3)
    return J
