"""
Geometric weights shared by every discrete operator.

All operators derive their weights here so the Laplacian, the curvature
operators, the shape operator and the linear solvers agree on the same
discretization:

    w_ij = (cot α_ij + cot β_ij) / 2

where α_ij and β_ij are the angles opposite edge ij. A boundary edge has a
single opposite angle; the missing one contributes nothing.
"""

import numpy as np
from scipy import sparse

from ..geometry.area import cotangent_at
from ..geometry.vector import normalize_rows
from ..mesh.half_edge import NO_FACE


def _positions(mesh, positions):
    if positions is None:
        return mesh.positions
    return np.asarray(positions, dtype=np.float64)


def corner_cotangents(mesh, positions=None):
    """
    (F, 3) cotangent of the interior angle at each triangle corner.

    Corner ``i`` of a face is the origin of column ``i`` of
    :meth:`HalfEdgeMesh.triangle_half_edges`.
    """
    p = _positions(mesh, positions)
    tris = mesh.triangles()
    p0, p1, p2 = p[tris[:, 0]], p[tris[:, 1]], p[tris[:, 2]]
    return np.stack([
        cotangent_at(p0, p1, p2),
        cotangent_at(p1, p2, p0),
        cotangent_at(p2, p0, p1),
    ], axis=1)


def half_edge_cotangents(mesh, positions=None):
    """
    Cotangent of the angle opposite every half-edge, 0 on the open side.
    """
    cot = np.zeros(mesh.num_half_edges)
    if mesh.num_faces == 0:
        return cot
    tri_he = mesh.triangle_half_edges()
    corners = corner_cotangents(mesh, positions)
    # Half-edge j runs from corner j to corner j + 1, facing corner j + 2.
    for j in range(3):
        cot[tri_he[:, j]] = corners[:, (j + 2) % 3]
    return cot


def cotangent_weights(mesh, positions=None):
    """
    Cotangent weight of every edge.

    Args:
        mesh: triangle HalfEdgeMesh
        positions: optional (N, 3) positions overriding the vertex payload

    Returns:
        (E,) array ``w_e = (cot α + cot β) / 2``
    """
    he_cot = half_edge_cotangents(mesh, positions)
    h = mesh.edge_he
    return 0.5 * (he_cot[h] + he_cot[mesh.he_twin[h]])


def edge_endpoints(mesh):
    """(E, 2) endpoint vertices of every edge."""
    h = mesh.edge_he
    return np.stack([mesh.he_origin[h], mesh.he_origin[mesh.he_twin[h]]], axis=1)


def face_normals(mesh, positions=None, normalized=True):
    """
    (F, 3) triangle normals ``(p1 - p0) x (p2 - p0)``.

    With ``normalized=False`` the length of each normal is twice the
    triangle area. Degenerate triangles keep their (near) zero normal.
    """
    p = _positions(mesh, positions)
    tris = mesh.triangles()
    p0, p1, p2 = p[tris[:, 0]], p[tris[:, 1]], p[tris[:, 2]]
    normals = np.cross(p1 - p0, p2 - p0)
    if normalized:
        normals = normalize_rows(normals)
    return normals


def vertex_normals(mesh, positions=None):
    """
    (N, 3) unit vertex normals: the normalized sum of the unit normals of
    the incident faces.
    """
    normals = np.zeros((mesh.num_vertices, 3))
    if mesh.num_faces == 0:
        return normals
    tris = mesh.triangles()
    fn = face_normals(mesh, positions)
    for corner in range(3):
        np.add.at(normals, tris[:, corner], fn)
    return normalize_rows(normals)


def cotangent_laplacian_matrix(mesh, positions=None):
    """
    Sparse cotangent Laplacian ``L`` (N x N, CSR).

    Off-diagonal entries hold the edge weights ``w_ij`` and each diagonal
    entry is the negative sum of its row, so ``(L @ f)[i] =
    Σ_j w_ij (f_j - f_i)``. ``L`` is symmetric negative semi-definite;
    ``-L`` is the stiffness matrix.
    """
    n = mesh.num_vertices
    w = cotangent_weights(mesh, positions)
    ends = edge_endpoints(mesh)
    rows = np.concatenate([ends[:, 0], ends[:, 1]])
    cols = np.concatenate([ends[:, 1], ends[:, 0]])
    data = np.concatenate([w, w])

    L = sparse.coo_matrix((data, (rows, cols)), shape=(n, n)).tocsr()
    L.sum_duplicates()
    diag = -np.asarray(L.sum(axis=1)).ravel()
    return (L + sparse.diags(diag)).tocsr()


def mass_matrix(mesh, positions=None):
    """Diagonal lumped mass matrix of mixed vertex areas (CSR)."""
    if positions is not None:
        mesh = _with_positions(mesh, positions)
    return sparse.diags(mesh.vertex_areas()).tocsr()


def divide_by_area(values, areas):
    """
    Divide per-vertex ``values`` by ``areas`` wherever the area is non-zero.

    Vertices without area get 0 rather than inf/nan.
    """
    values = np.asarray(values, dtype=np.float64)
    areas = np.asarray(areas, dtype=np.float64)
    shape = (-1,) + (1,) * (values.ndim - 1)
    a = areas.reshape(shape)
    out = np.zeros_like(values)
    np.divide(values, a, out=out, where=np.broadcast_to(a != 0.0, values.shape))
    return out


def vertex_areas(mesh, positions=None):
    """Mixed vertex areas, optionally for positions other than the payload."""
    if positions is not None:
        mesh = _with_positions(mesh, positions)
    return mesh.vertex_areas()


def _with_positions(mesh, positions):
    view = mesh.copy()
    view.positions = positions
    return view


def boundary_half_edges(mesh):
    """Indices of the face-less half-edges."""
    return np.flatnonzero(mesh.he_face == NO_FACE)
