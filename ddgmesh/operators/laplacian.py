"""
Cotangent Laplace-Beltrami operator on vertex fields.
"""

import numpy as np

from ..exceptions import MeshInputError
from .weights import cotangent_laplacian_matrix, divide_by_area, vertex_areas


def laplacian(mesh, field, positions=None):
    """
    Cotangent Laplacian of a vertex field.

        (Δf)_i = Σ_j w_ij (f_j - f_i) / A_i

    summed over the edges incident to ``i``; ``A_i`` is the mixed area.
    Smoothing, diffusion and parameterization all use this discretization.

    Args:
        mesh: triangle HalfEdgeMesh
        field: (N,) scalars or (N, k) vectors per vertex
        positions: optional (N, 3) positions overriding the vertex payload

    Returns:
        array shaped like ``field``; 0 at vertices without area
    """
    field = np.asarray(field, dtype=np.float64)
    if field.shape[0] != mesh.num_vertices:
        raise MeshInputError(
            f"field has {field.shape[0]} rows but the mesh has {mesh.num_vertices} vertices"
        )
    L = cotangent_laplacian_matrix(mesh, positions)
    return divide_by_area(L @ field, vertex_areas(mesh, positions))
