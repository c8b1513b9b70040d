"""
Half-edge mesh data structure and procedural test meshes.
"""

from .half_edge import NO_FACE, NO_HALF_EDGE, HalfEdgeMesh
from . import primitives

__all__ = [
    'NO_FACE',
    'NO_HALF_EDGE',
    'HalfEdgeMesh',
    'primitives',
]
