"""
Catmull-Clark and Loop subdivision.

Both schemes run three passes that only read the previous positions:
face points (Catmull-Clark), edge points, then new vertex positions.
Nothing is written back until all three are done.

With ``refine=False`` (the default) only the vertex positions move and the
connectivity stays as it is. With ``refine=True`` the face and edge points
become vertices of a new, finer mesh: quads for Catmull-Clark, a 1-to-4
triangle split for Loop. Edge and face payloads do not carry over to the
refined mesh.
"""

import logging

import numpy as np

from ..mesh.half_edge import NO_FACE, HalfEdgeMesh
from ..operators.weights import boundary_half_edges

logger = logging.getLogger(__name__)


def face_points(mesh):
    """(F, 3) centroid of every face."""
    p = mesh.positions
    points = np.zeros((mesh.num_faces, 3))
    for f in range(mesh.num_faces):
        points[f] = p[mesh.face_vertices(f)].mean(axis=0)
    return points


def _boundary_rule(mesh, positions):
    """
    New positions for boundary vertices from the cubic B-spline rule
    ``(q_prev + 6 p + q_next) / 8``; NaN rows for interior vertices.
    """
    h = boundary_half_edges(mesh)
    src = mesh.he_origin[h]
    dst = mesh.he_origin[mesh.he_twin[h]]
    total = np.zeros((mesh.num_vertices, 3))
    count = np.zeros(mesh.num_vertices, dtype=np.int64)
    np.add.at(total, src, positions[dst])
    np.add.at(total, dst, positions[src])
    np.add.at(count, src, 1)
    np.add.at(count, dst, 1)

    rule = np.full((mesh.num_vertices, 3), np.nan)
    ok = count == 2
    rule[ok] = (total[ok] + 6.0 * positions[ok]) / 8.0
    # Vertices touching more than one boundary span keep their position.
    odd = count > 2
    rule[odd] = positions[odd]
    return rule


def _edge_sides(mesh):
    h = mesh.edge_he
    t = mesh.he_twin[h]
    boundary = (mesh.he_face[h] == NO_FACE) | (mesh.he_face[t] == NO_FACE)
    return h, t, boundary


def _catmull_clark_points(mesh):
    p = mesh.positions
    fp = face_points(mesh)

    h, t, boundary = _edge_sides(mesh)
    v0 = mesh.he_origin[h]
    v1 = mesh.he_origin[t]
    ep = 0.5 * (p[v0] + p[v1])
    inner = ~boundary
    ep[inner] = (
        p[v0[inner]] + p[v1[inner]]
        + fp[mesh.he_face[h[inner]]] + fp[mesh.he_face[t[inner]]]
    ) / 4.0

    vp = _boundary_rule(mesh, p)
    for v in range(mesh.num_vertices):
        if not np.isnan(vp[v, 0]):
            continue
        ring = mesh.outgoing_half_edges(v)
        n = len(ring)
        if n == 0:
            vp[v] = p[v]
            continue
        faces = [int(mesh.he_face[he]) for he in ring]
        edges = [int(mesh.he_edge[he]) for he in ring]
        q = fp[faces].mean(axis=0)
        e = ep[edges].mean(axis=0)
        # Same as (Q + 2R + (n - 3) P) / n with R the mean edge midpoint.
        vp[v] = (4.0 * e - q + (n - 3.0) * p[v]) / n
    return fp, ep, vp


def catmull_clark(mesh, refine=False):
    """
    Catmull-Clark subdivision.

    Face points are face centroids. An interior edge point averages the
    edge's endpoints and its two face points; a boundary edge point is the
    edge midpoint. An interior vertex of valence ``n`` moves to
    ``(Q + 2R + (n - 3) P) / n`` (Q: mean face point, R: mean edge
    midpoint); a boundary vertex follows the boundary curve.

    Args:
        mesh: polygon HalfEdgeMesh
        refine: also split every ``k``-gon into ``k`` quads

    Returns:
        ``mesh`` with moved vertices, or a new refined mesh if ``refine``
    """
    fp, ep, vp = _catmull_clark_points(mesh)
    if not refine:
        mesh.positions = vp
        return mesh

    n, nf = mesh.num_vertices, mesh.num_faces
    counts = []
    indices = []
    for f in range(nf):
        for he in mesh.face_half_edges(f):
            prev = _prev_in_face(mesh, he)
            counts.append(4)
            indices.extend([
                int(mesh.he_origin[he]),
                n + nf + int(mesh.he_edge[he]),
                n + f,
                n + nf + int(mesh.he_edge[prev]),
            ])
    refined = HalfEdgeMesh.from_arrays(np.vstack([vp, fp, ep]), counts, indices)
    logger.debug("Catmull-Clark refined %r into %r", mesh, refined)
    return refined


def _prev_in_face(mesh, he):
    prev = he
    while mesh.he_next[prev] != he:
        prev = mesh.he_next[prev]
    return prev


def _loop_points(mesh):
    p = mesh.positions
    tri_he = mesh.triangle_half_edges()

    h, t, boundary = _edge_sides(mesh)
    v0 = mesh.he_origin[h]
    v1 = mesh.he_origin[t]
    ep = 0.5 * (p[v0] + p[v1])
    inner = ~boundary
    if np.any(inner):
        o0 = mesh.he_origin[mesh.he_next[mesh.he_next[h[inner]]]]
        o1 = mesh.he_origin[mesh.he_next[mesh.he_next[t[inner]]]]
        ep[inner] = (3.0 * (p[v0[inner]] + p[v1[inner]]) + p[o0] + p[o1]) / 8.0

    vp = _boundary_rule(mesh, p)
    for v in range(mesh.num_vertices):
        if not np.isnan(vp[v, 0]):
            continue
        edges = mesh.vertex_incident_edges(v)
        n = len(edges)
        vp[v] = (3.0 * p[v] + ep[edges].sum(axis=0)) / (n + 3.0)
    return tri_he, ep, vp


def loop_subdivision(mesh, refine=False):
    """
    Loop subdivision of a triangle mesh.

    An interior edge point weighs its endpoints by 3 and the two opposite
    vertices by 1 (over 8); a boundary edge point is the midpoint. An
    interior vertex of valence ``n`` moves to ``(3 P + Σ E) / (n + 3)``
    over its incident edge points; a boundary vertex follows the boundary
    curve.

    Raises:
        TopologyError: if the mesh has a non-triangular face.
    """
    tri_he, ep, vp = _loop_points(mesh)
    if not refine:
        mesh.positions = vp
        return mesh

    n = mesh.num_vertices
    corners = mesh.he_origin[tri_he]
    mids = n + mesh.he_edge[tri_he]
    a, b, c = corners[:, 0], corners[:, 1], corners[:, 2]
    ab, bc, ca = mids[:, 0], mids[:, 1], mids[:, 2]
    faces = np.concatenate([
        np.stack([a, ab, ca], axis=1),
        np.stack([b, bc, ab], axis=1),
        np.stack([c, ca, bc], axis=1),
        np.stack([ab, bc, ca], axis=1),
    ])
    refined = HalfEdgeMesh.from_triangles(np.vstack([vp, ep]), faces)
    logger.debug("Loop refined %r into %r", mesh, refined)
    return refined
