"""
Vector, matrix, area and orientation primitives.
"""

from .area import (
    angle,
    barycentric_area,
    corner_angles,
    cotangent,
    cotangent_at,
    mixed_area,
    triangle_area,
)
from .matrix import closest_rotation, det, identity, inverse, svd
from .predicates import orient2d, orient3d
from .vector import cross, dot, norm, normalize, normalize_rows, outer, vec3, zero

__all__ = [
    'angle',
    'barycentric_area',
    'corner_angles',
    'cotangent',
    'cotangent_at',
    'mixed_area',
    'triangle_area',
    'closest_rotation',
    'det',
    'identity',
    'inverse',
    'svd',
    'orient2d',
    'orient3d',
    'cross',
    'dot',
    'norm',
    'normalize',
    'normalize_rows',
    'outer',
    'vec3',
    'zero',
]
