import logging
import warnings

import numpy as np
from scipy import sparse

from ..exceptions import MeshInputError
from ..operators.weights import divide_by_area, edge_endpoints

logger = logging.getLogger(__name__)


def build_adjacency_matrix(mesh):
    """
    Build the row-normalized adjacency matrix W = D^-1 * A of the mesh edges.

    ``(W @ p)[i]`` is the uniform average of the neighbors of ``i``;
    isolated vertices get an all-zero row.
    """
    n = mesh.num_vertices
    ends = edge_endpoints(mesh)
    rows = np.concatenate([ends[:, 0], ends[:, 1]])
    cols = np.concatenate([ends[:, 1], ends[:, 0]])

    A = sparse.coo_matrix((np.ones(len(rows)), (rows, cols)), shape=(n, n))
    A = A.tocsr()
    A.sum_duplicates()
    A.data[:] = 1.0

    degrees = np.array(A.sum(axis=1)).flatten()
    # Avoid division by zero
    degrees[degrees == 0] = 1
    return sparse.diags(1.0 / degrees) @ A


def _fixed_mask(num_verts, fixed_vertices):
    if fixed_vertices is None:
        return np.zeros(num_verts, dtype=bool)
    fixed = np.asarray(fixed_vertices)
    if fixed.dtype == bool:
        if fixed.shape != (num_verts,):
            raise MeshInputError("fixed_vertices mask must have one entry per vertex")
        return fixed
    mask = np.zeros(num_verts, dtype=bool)
    mask[fixed.astype(np.int64)] = True
    return mask


def _check_iterations(iterations):
    if iterations < 0:
        raise MeshInputError(f"iterations must be non-negative, got {iterations}")


def laplacian_smoothing(mesh, iterations=1, alpha=0.5, fixed_vertices=None):
    """
    Area-normalized uniform Laplacian smoothing.

    Every round computes, from the previous round's positions only,

        d_i = (mean of the neighbors of i - p_i) / A_i

    and then moves all vertices at once by ``alpha * d_i``. ``A_i`` is the
    mixed area at the start of the round, recomputed from the moved
    positions every round rather than fixed once before the loop, so
    ``k`` rounds equal ``k`` single-round calls. Vertices without area
    stay put.

    Args:
        mesh: triangle HalfEdgeMesh, updated in place
        iterations: number of rounds; 0 leaves the mesh unchanged
        alpha: damping factor, expected in (0, 1)
        fixed_vertices: optional indices or boolean mask of vertices to pin

    Returns:
        (N, 3) smoothed positions (also stored on the mesh)
    """
    _check_iterations(iterations)
    if not 0.0 < alpha < 1.0:
        warnings.warn(f"alpha={alpha} is outside (0, 1); smoothing may diverge")

    verts = mesh.positions.copy()
    fixed_mask = _fixed_mask(mesh.num_vertices, fixed_vertices)
    W = build_adjacency_matrix(mesh)

    for _ in range(iterations):
        areas = mesh.vertex_areas()
        displacement = divide_by_area(W @ verts - verts, areas)
        displacement[fixed_mask] = 0.0
        verts = verts + alpha * displacement
        mesh.positions = verts

    logger.debug("Laplacian smoothing: %d iterations, alpha=%g", iterations, alpha)
    return verts


def taubin_smoothing(mesh, iterations=1, lambda_val=0.5, mu_val=-0.53, fixed_vertices=None):
    """
    Apply Taubin smoothing to the mesh.

    Each iteration is a shrinking umbrella pass with ``lambda_val`` followed
    by an expanding pass with ``mu_val`` (negative, ``|mu| > lambda``), which
    smooths without the volume loss of plain Laplacian smoothing.
    """
    _check_iterations(iterations)
    num_verts = mesh.num_vertices
    W = build_adjacency_matrix(mesh)
    I = sparse.eye(num_verts)

    K_lambda = (1 - lambda_val) * I + lambda_val * W
    K_mu = (1 - mu_val) * I + mu_val * W

    verts = mesh.positions.copy()
    fixed_mask = _fixed_mask(num_verts, fixed_vertices)
    original_positions = verts[fixed_mask].copy()
    for _ in range(iterations):
        # Shrink
        verts = K_lambda @ verts
        # Expand
        verts = K_mu @ verts
        verts[fixed_mask] = original_positions

    mesh.positions = verts
    return verts
