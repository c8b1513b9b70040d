"""
ddgmesh: discrete differential geometry on half-edge triangle meshes.

    >>> from ddgmesh import primitives, operators
    >>> mesh = primitives.icosphere(2)
    >>> H = operators.mean_curvature(mesh)
"""

from . import algorithms, geometry, operators
from .exceptions import MeshError, MeshInputError, NumericError, TopologyError
from .mesh import NO_FACE, NO_HALF_EDGE, HalfEdgeMesh, primitives

__version__ = "0.1.0"

__all__ = [
    'algorithms',
    'geometry',
    'operators',
    'primitives',
    'HalfEdgeMesh',
    'NO_FACE',
    'NO_HALF_EDGE',
    'MeshError',
    'MeshInputError',
    'NumericError',
    'TopologyError',
]
