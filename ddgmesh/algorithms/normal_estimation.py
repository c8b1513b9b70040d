"""Per-vertex normals from a principal component fit of the one-ring."""

import logging

import numpy as np

from ..operators.weights import vertex_normals

logger = logging.getLogger(__name__)


def estimate_normals(mesh, orient=True):
    """
    Estimate vertex normals by PCA of each vertex neighborhood.

    The normal is the eigenvector of the smallest eigenvalue of the
    covariance of the vertex and its neighbors. With ``orient`` the sign is
    chosen to agree with the face-averaged vertex normals; otherwise the
    sign is whatever the eigen solver returns.

    Vertices with fewer than two neighbors get a zero normal.

    Returns:
        (N, 3) unit normals
    """
    p = mesh.positions
    normals = np.zeros((mesh.num_vertices, 3))
    for v in range(mesh.num_vertices):
        ring = mesh.vertex_neighbors(v)
        if len(ring) < 2:
            continue
        pts = p[[v] + ring]
        centered = pts - pts.mean(axis=0)
        cov = centered.T @ centered / (len(pts) - 1)
        # eigh sorts eigenvalues in ascending order
        _, vecs = np.linalg.eigh(cov)
        normals[v] = vecs[:, 0]

    if orient:
        reference = vertex_normals(mesh)
        flip = np.sum(normals * reference, axis=1) < 0
        normals[flip] *= -1.0
        logger.debug("Flipped %d estimated normals", int(flip.sum()))
    return normals
