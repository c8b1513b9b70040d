"""
Discrete curvature of a triangle mesh surface.

Mean curvature comes from the cotangent Laplacian of the positions and
Gaussian curvature from the angle defect, both normalized by the mixed
vertex area (Meyer et al. 2003).
"""

import numpy as np

from .weights import (
    _positions,
    cotangent_weights,
    divide_by_area,
    edge_endpoints,
    vertex_areas,
    vertex_normals,
)
from ..geometry.area import corner_angles


def mean_curvature_normal(mesh, positions=None):
    """
    Mean curvature normal ``H n`` at every vertex.

    Accumulated per edge: ``w_ij (p_j - p_i)`` is added to ``i`` and
    subtracted from ``j``, then each total is divided by twice the mixed
    area. The vector points towards the concave side, so on a unit sphere
    it is ``-n`` with length 1; on a flat region it vanishes.

    Returns:
        (N, 3) array
    """
    p = _positions(mesh, positions)
    w = cotangent_weights(mesh, p)
    ends = edge_endpoints(mesh)
    i, j = ends[:, 0], ends[:, 1]
    contribution = w[:, None] * (p[j] - p[i])

    total = np.zeros((mesh.num_vertices, 3))
    np.add.at(total, i, contribution)
    np.add.at(total, j, -contribution)
    return divide_by_area(total, 2.0 * vertex_areas(mesh, positions))


def mean_curvature(mesh, positions=None):
    """
    Signed mean curvature: the curvature normal projected on the outward
    vertex normal, positive on convex regions.
    """
    hn = mean_curvature_normal(mesh, positions)
    normals = vertex_normals(mesh, positions)
    return -np.sum(hn * normals, axis=1)


def angle_sums(mesh, positions=None):
    """Sum of the triangle corner angles at every vertex."""
    p = _positions(mesh, positions)
    sums = np.zeros(mesh.num_vertices)
    if mesh.num_faces == 0:
        return sums
    tris = mesh.triangles()
    angles = corner_angles(p[tris[:, 0]], p[tris[:, 1]], p[tris[:, 2]])
    for corner in range(3):
        np.add.at(sums, tris[:, corner], angles[:, corner])
    return sums


def gaussian_curvature(mesh, positions=None):
    """
    Gaussian curvature by angle defect:

        K_i = (2π - Σ θ) / A_i

    No boundary correction is applied, so boundary vertices report the
    defect against a full turn.
    """
    defect = 2.0 * np.pi - angle_sums(mesh, positions)
    return divide_by_area(defect, vertex_areas(mesh, positions))
