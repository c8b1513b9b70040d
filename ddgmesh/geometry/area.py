"""
Per-triangle area, angle and cotangent helpers.

Every function accepts either single points of shape (3,) or stacks of
shape (N, 3) and reduces over the last axis, so the same code serves a
single triangle and a whole mesh.

The mixed (Voronoi) area follows Meyer et al., "Discrete
Differential-Geometry Operators for Triangulated 2-Manifolds" (2003):
acute triangles are split by their circumcentric Voronoi regions, obtuse
triangles give half their area to the obtuse corner and a quarter to each
of the other two.
"""

import numpy as np

# Cross-product length below which a cotangent is reported as 0.
_COT_EPS = 1e-10
# Triangles with a smaller area are degenerate and own no area.
_AREA_EPS = 1e-12


def _dot(u, v):
    return np.sum(u * v, axis=-1)


def triangle_area(a, b, c):
    """Area of triangle ``abc``."""
    a, b, c = (np.asarray(p, dtype=np.float64) for p in (a, b, c))
    return 0.5 * np.linalg.norm(np.cross(b - a, c - a), axis=-1)


def barycentric_area(a, b, c):
    """One third of the triangle area for each corner, shape (..., 3)."""
    third = triangle_area(a, b, c) / 3.0
    return np.stack([third, third, third], axis=-1)


def angle(u, v):
    """Unsigned angle between ``u`` and ``v``; 0 if either has zero length."""
    u = np.asarray(u, dtype=np.float64)
    v = np.asarray(v, dtype=np.float64)
    lengths = np.linalg.norm(u, axis=-1) * np.linalg.norm(v, axis=-1)
    safe = np.where(lengths == 0.0, 1.0, lengths)
    cos_angle = np.clip(_dot(u, v) / safe, -1.0, 1.0)
    return np.where(lengths == 0.0, 0.0, np.arccos(cos_angle))


def corner_angles(a, b, c):
    """Interior angles at ``a``, ``b`` and ``c``, shape (..., 3)."""
    a, b, c = (np.asarray(p, dtype=np.float64) for p in (a, b, c))
    return np.stack([
        angle(b - a, c - a),
        angle(c - b, a - b),
        angle(a - c, b - c),
    ], axis=-1)


def cotangent(u, v):
    """
    Cotangent of the angle between ``u`` and ``v``.

    cot(θ) = (u · v) / ||u × v||, reported as 0 when the vectors are
    (numerically) parallel.
    """
    u = np.asarray(u, dtype=np.float64)
    v = np.asarray(v, dtype=np.float64)
    cross_norm = np.linalg.norm(np.cross(u, v), axis=-1)
    degenerate = cross_norm < _COT_EPS
    safe = np.where(degenerate, 1.0, cross_norm)
    return np.where(degenerate, 0.0, _dot(u, v) / safe)


def cotangent_at(apex, p, q):
    """Cotangent of the angle at ``apex`` in triangle ``(apex, p, q)``."""
    apex = np.asarray(apex, dtype=np.float64)
    return cotangent(np.asarray(p) - apex, np.asarray(q) - apex)


def mixed_area(a, b, c):
    """
    Mixed (Voronoi) area of each corner of triangle ``abc``.

    Args:
        a, b, c: corner positions, (3,) or (N, 3)

    Returns:
        (..., 3) array with the share of the triangle area owned by each
        corner. The shares sum to the triangle area; degenerate triangles
        own nothing.
    """
    a, b, c = (np.asarray(p, dtype=np.float64) for p in (a, b, c))
    total = np.asarray(triangle_area(a, b, c))
    angles = corner_angles(a, b, c)

    ab = b - a
    ac = c - a
    bc = c - b
    cot_alpha = cotangent_at(a, b, c)
    cot_beta = cotangent_at(b, c, a)
    cot_gamma = cotangent_at(c, a, b)
    voronoi = np.stack([
        (_dot(ab, ab) * cot_gamma + _dot(ac, ac) * cot_beta) / 8.0,
        (_dot(bc, bc) * cot_alpha + _dot(ab, ab) * cot_gamma) / 8.0,
        (_dot(ac, ac) * cot_beta + _dot(bc, bc) * cot_alpha) / 8.0,
    ], axis=-1)

    # Obtuse (or right) corner takes half, the other two a quarter each.
    obtuse = angles >= 0.5 * np.pi
    first = np.asarray(np.argmax(obtuse, axis=-1))
    any_obtuse = np.asarray(np.any(obtuse, axis=-1))
    split = np.repeat(total[..., None] / 4.0, 3, axis=-1)
    np.put_along_axis(split, first[..., None], np.asarray(total / 2.0)[..., None], axis=-1)

    result = np.where(any_obtuse[..., None], split, voronoi)
    degenerate = np.asarray(total < _AREA_EPS)
    return np.where(degenerate[..., None], 0.0, result)
