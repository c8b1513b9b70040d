"""
Discrete differential operators on triangle meshes.

All operators are stateless functions of a mesh (and optionally a set of
positions overriding its vertex payload) and share the cotangent weights
and mixed vertex areas from :mod:`ddgmesh.operators.weights`.
"""

from .curl import curl
from .curvature import gaussian_curvature, mean_curvature, mean_curvature_normal
from .divergence import divergence
from .gradient import gradient
from .jacobian import jacobian
from .laplacian import laplacian
from .shape_operator import shape_operator
from .weights import (
    cotangent_laplacian_matrix,
    cotangent_weights,
    face_normals,
    mass_matrix,
    vertex_normals,
)

__all__ = [
    'curl',
    'gaussian_curvature',
    'mean_curvature',
    'mean_curvature_normal',
    'divergence',
    'gradient',
    'jacobian',
    'laplacian',
    'shape_operator',
    'cotangent_laplacian_matrix',
    'cotangent_weights',
    'face_normals',
    'mass_matrix',
    'vertex_normals',
]
