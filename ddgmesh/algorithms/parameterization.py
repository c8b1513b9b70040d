"""
Harmonic (Tutte-style, cotangent weighted) disk parameterization.

The boundary loop is pinned to the unit circle and every interior vertex
solves the discrete Laplace equation

    Σ_j w_ij (u_j - u_i) = 0

so the map is harmonic in the interior.
"""

import logging
import warnings

import numpy as np
import scipy.linalg

from ..exceptions import NumericError, TopologyError
from ..geometry.predicates import orient2d
from ..operators.weights import cotangent_laplacian_matrix

logger = logging.getLogger(__name__)


def boundary_loop(mesh):
    """
    The boundary loop used as the disk rim: the longest one.

    Raises:
        TopologyError: if the mesh is closed.
    """
    loops = mesh.boundary_loops()
    if not loops:
        raise TopologyError("mesh has no boundary loop to parameterize against")
    if len(loops) > 1:
        warnings.warn(
            f"mesh has {len(loops)} boundary loops; only the longest "
            f"({len(loops[0])} vertices) is mapped to the circle"
        )
    return loops[0]


def circle_positions(count):
    """(count, 2) points evenly spaced on the unit circle, starting at (1, 0)."""
    theta = 2.0 * np.pi * np.arange(count) / count
    return np.stack([np.cos(theta), np.sin(theta)], axis=1)


def harmonic_parameterization(mesh):
    """
    Map a disk-like triangle mesh to the unit disk.

    The ``k``-th vertex of the boundary loop goes to angle ``2πk/m``. The
    ``n x n`` stiffness system is assembled densely, its boundary rows are
    replaced by identity rows holding the circle positions, and the system
    is solved by LU decomposition for both coordinates at once.

    Returns:
        (N, 2) texture coordinates

    Raises:
        TopologyError: if the mesh has no boundary.
        NumericError: if the assembled system is singular (for example an
            interior vertex without edges).
    """
    loop = boundary_loop(mesh)
    n = mesh.num_vertices

    A = -cotangent_laplacian_matrix(mesh).toarray()
    rhs = np.zeros((n, 2))

    A[loop, :] = 0.0
    A[loop, loop] = 1.0
    rhs[loop] = circle_positions(len(loop))

    try:
        uv = scipy.linalg.solve(A, rhs)
    except np.linalg.LinAlgError as exc:
        raise NumericError("harmonic parameterization system is singular") from exc

    logger.debug("Harmonic map: %d vertices, boundary loop of %d", n, len(loop))
    return uv


def project_xy(positions):
    """Planar parameterization by dropping the z coordinate."""
    positions = np.asarray(positions, dtype=np.float64)
    return positions[:, :2].copy()


def flipped_faces(mesh, uv):
    """
    Faces whose image in the parameter plane is clockwise or degenerate.

    An embedding of a consistently oriented disk has none.
    """
    uv = np.asarray(uv, dtype=np.float64)
    tris = mesh.triangles()
    flipped = [
        f for f, (a, b, c) in enumerate(tris)
        if orient2d(uv[a], uv[b], uv[c]) <= 0.0
    ]
    return np.array(flipped, dtype=np.int64)
