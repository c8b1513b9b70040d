"""
Small dense matrix helpers for 2x2 and 3x3 arrays.

Determinants and inverses are written out explicitly for the two fixed
sizes; the singular value decomposition defers to LAPACK through numpy.
"""

import numpy as np

from ..exceptions import NumericError

# Determinant magnitude below which a matrix is treated as singular.
_SINGULAR_TOL = 1e-12


def identity(n=3):
    return np.eye(n, dtype=np.float64)


def det(m):
    """Determinant of a 2x2 or 3x3 matrix."""
    m = np.asarray(m, dtype=np.float64)
    if m.shape == (2, 2):
        return float(m[0, 0] * m[1, 1] - m[0, 1] * m[1, 0])
    if m.shape == (3, 3):
        return float(
            m[0, 0] * (m[1, 1] * m[2, 2] - m[1, 2] * m[2, 1])
            - m[0, 1] * (m[1, 0] * m[2, 2] - m[1, 2] * m[2, 0])
            + m[0, 2] * (m[1, 0] * m[2, 1] - m[1, 1] * m[2, 0])
        )
    raise ValueError(f"det expects a 2x2 or 3x3 matrix, got shape {m.shape}")


def inverse(m, tol=_SINGULAR_TOL):
    """
    Inverse of a 2x2 or 3x3 matrix via the adjugate.

    Args:
        m: (2, 2) or (3, 3) array
        tol: determinant magnitude below which ``m`` counts as singular

    Returns:
        inverse matrix with the same shape as ``m``

    Raises:
        NumericError: if ``m`` is singular.
    """
    m = np.asarray(m, dtype=np.float64)
    d = det(m)
    if abs(d) < tol:
        raise NumericError(f"matrix is singular (det={d:.3e})")

    if m.shape == (2, 2):
        adj = np.array([[m[1, 1], -m[0, 1]], [-m[1, 0], m[0, 0]]])
        return adj / d

    # Cofactor matrix; the inverse is its transpose over the determinant.
    cof = np.empty((3, 3))
    for i in range(3):
        for j in range(3):
            minor = np.delete(np.delete(m, i, axis=0), j, axis=1)
            cof[i, j] = (-1) ** (i + j) * det(minor)
    return cof.T / d


def svd(m):
    """Return ``(U, S, Vt)`` with ``m = U @ diag(S) @ Vt``."""
    return np.linalg.svd(np.asarray(m, dtype=np.float64))


def closest_rotation(m):
    """
    Closest proper rotation to ``m`` in the Frobenius sense (Kabsch).

    With ``m = U S V^T`` the answer is ``U V^T``; when that product is a
    reflection the column of ``U`` paired with the smallest singular value
    is flipped.
    """
    u, _, vt = svd(m)
    r = u @ vt
    if np.linalg.det(r) < 0:
        u = u.copy()
        u[:, -1] *= -1
        r = u @ vt
    return r
