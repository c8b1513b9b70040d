import numpy as np

from .divergence import face_corner_edges, face_field
from .weights import divide_by_area, vertex_areas


def curl(mesh, field, positions=None):
    """
    Per-vertex curl of a per-face vector field.

    Same accumulation as :func:`divergence` with the cross product
    ``X_f x (p_next - p_i)`` in place of the dot product.

    Returns:
        (N, 3) array
    """
    field = face_field(mesh, field)
    vertex, face, vector = face_corner_edges(mesh, positions)
    total = np.zeros((mesh.num_vertices, 3))
    np.add.at(total, vertex, np.cross(field[face], vector))
    return divide_by_area(total, vertex_areas(mesh, positions))
