"""
3D vector helpers.

Vectors are plain ``numpy`` arrays of shape (3,). Functions that accept
stacked vectors of shape (N, 3) say so in their docstring.
"""

import numpy as np

from ..exceptions import NumericError


def vec3(x=0.0, y=0.0, z=0.0):
    """Build a float64 3-vector."""
    return np.array([x, y, z], dtype=np.float64)


def zero():
    return np.zeros(3, dtype=np.float64)


def dot(u, v):
    return float(np.dot(u, v))


def cross(u, v):
    return np.cross(u, v)


def norm(v):
    return float(np.linalg.norm(v))


def normalize(v):
    """
    Return ``v`` scaled to unit length.

    Raises:
        NumericError: if ``v`` has zero length.
    """
    length = np.linalg.norm(v)
    if length == 0.0:
        raise NumericError("cannot normalize a zero-length vector")
    return np.asarray(v, dtype=np.float64) / length


def normalize_rows(vectors, eps=1e-12):
    """
    Normalize each row of an (N, 3) array.

    Rows shorter than ``eps`` are returned unchanged instead of raising, which
    is what per-element normal computations on degenerate faces need.
    """
    vectors = np.asarray(vectors, dtype=np.float64)
    lengths = np.linalg.norm(vectors, axis=1, keepdims=True)
    lengths = np.where(lengths < eps, 1.0, lengths)
    return vectors / lengths


def outer(u, v):
    """Outer product ``u v^T`` as a 3x3 array."""
    return np.outer(u, v)
