"""
Per-vertex shape operator (Weingarten map) estimated from normal variation.

For every vertex ``i`` the operator ``S`` is the least-squares fit of

    n_j - n_i ≈ S (p_j - p_i)

over the one-ring, weighted by the cotangent edge weights. With

    M = Σ w e e^T        C = Σ w (Δn) e^T

the normal equations give ``S = M^-1 C``.
"""

import logging

import numpy as np

from ..exceptions import NumericError
from ..geometry.matrix import identity, inverse
from .weights import _positions, cotangent_weights, edge_endpoints, vertex_normals

logger = logging.getLogger(__name__)


def shape_operator(mesh, positions=None):
    """
    Shape operator at every vertex.

    Vertices whose ``M`` is singular (flat one-rings, isolated vertices)
    get the identity tensor.

    Returns:
        (N, 3, 3) array
    """
    p = _positions(mesh, positions)
    n = mesh.num_vertices
    normals = vertex_normals(mesh, p)
    w = cotangent_weights(mesh, p)
    ends = edge_endpoints(mesh)
    i, j = ends[:, 0], ends[:, 1]

    e = p[j] - p[i]
    dn = normals[j] - normals[i]
    ee = w[:, None, None] * np.einsum('ka,kb->kab', e, e)
    dne = w[:, None, None] * np.einsum('ka,kb->kab', dn, e)

    # Reversing the edge flips both factors, so both ends get the same term.
    M = np.zeros((n, 3, 3))
    C = np.zeros((n, 3, 3))
    for ends_of in (i, j):
        np.add.at(M, ends_of, ee)
        np.add.at(C, ends_of, dne)

    S = np.empty((n, 3, 3))
    fallback = 0
    for v in range(n):
        try:
            S[v] = inverse(M[v]) @ C[v]
        except NumericError:
            S[v] = identity()
            fallback += 1
    if fallback:
        logger.debug("Shape operator fell back to identity at %d of %d vertices", fallback, n)
    return S
