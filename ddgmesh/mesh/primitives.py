"""
Small procedural meshes for examples and tests.

All builders return a :class:`HalfEdgeMesh` with counter-clockwise
(outward-facing) triangles.
"""

import numpy as np

from .half_edge import HalfEdgeMesh


def right_triangle():
    """Single triangle with unit legs and the right angle at vertex 0."""
    verts = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])
    return HalfEdgeMesh.from_triangles(verts, [[0, 1, 2]])


def unit_square():
    """Unit square in the XY plane split into two triangles."""
    verts = np.array([
        [0.0, 0.0, 0.0],
        [1.0, 0.0, 0.0],
        [1.0, 1.0, 0.0],
        [0.0, 1.0, 0.0],
    ])
    return HalfEdgeMesh.from_triangles(verts, [[0, 1, 2], [0, 2, 3]])


def grid(nx=4, ny=4, size=1.0):
    """
    Planar triangulated grid in the XY plane.

    Args:
        nx, ny: number of cells along x and y
        size: side length of the square covered by the grid

    Returns:
        HalfEdgeMesh with (nx + 1) * (ny + 1) vertices; vertex ``j * (nx + 1) + i``
        sits at column ``i``, row ``j``.
    """
    if nx < 1 or ny < 1:
        raise ValueError(f"grid needs at least one cell per side, got {nx=}, {ny=}")
    xs = np.linspace(0.0, size, nx + 1)
    ys = np.linspace(0.0, size, ny + 1)
    xx, yy = np.meshgrid(xs, ys)
    verts = np.stack([xx.ravel(), yy.ravel(), np.zeros(xx.size)], axis=1)

    faces = []
    for j in range(ny):
        for i in range(nx):
            v00 = j * (nx + 1) + i
            v10 = v00 + 1
            v01 = v00 + nx + 1
            v11 = v01 + 1
            faces.append([v00, v10, v11])
            faces.append([v00, v11, v01])
    return HalfEdgeMesh.from_triangles(verts, faces)


def tetrahedron():
    verts = np.array([
        [1.0, 1.0, 1.0],
        [1.0, -1.0, -1.0],
        [-1.0, 1.0, -1.0],
        [-1.0, -1.0, 1.0],
    ])
    faces = [[0, 1, 2], [0, 3, 1], [0, 2, 3], [1, 3, 2]]
    return HalfEdgeMesh.from_triangles(verts, faces)


def octahedron():
    verts = np.array([
        [1.0, 0.0, 0.0],
        [-1.0, 0.0, 0.0],
        [0.0, 1.0, 0.0],
        [0.0, -1.0, 0.0],
        [0.0, 0.0, 1.0],
        [0.0, 0.0, -1.0],
    ])
    faces = [
        [0, 2, 4], [2, 1, 4], [1, 3, 4], [3, 0, 4],
        [2, 0, 5], [1, 2, 5], [3, 1, 5], [0, 3, 5],
    ]
    return HalfEdgeMesh.from_triangles(verts, faces)


def _icosahedron_arrays():
    phi = (1.0 + np.sqrt(5.0)) / 2.0
    verts = np.array([
        [-1, phi, 0], [1, phi, 0], [-1, -phi, 0], [1, -phi, 0],
        [0, -1, phi], [0, 1, phi], [0, -1, -phi], [0, 1, -phi],
        [phi, 0, -1], [phi, 0, 1], [-phi, 0, -1], [-phi, 0, 1],
    ], dtype=np.float64)
    verts /= np.linalg.norm(verts, axis=1, keepdims=True)
    faces = np.array([
        [0, 11, 5], [0, 5, 1], [0, 1, 7], [0, 7, 10], [0, 10, 11],
        [1, 5, 9], [5, 11, 4], [11, 10, 2], [10, 7, 6], [7, 1, 8],
        [3, 9, 4], [3, 4, 2], [3, 2, 6], [3, 6, 8], [3, 8, 9],
        [4, 9, 5], [2, 4, 11], [6, 2, 10], [8, 6, 7], [9, 8, 1],
    ], dtype=np.int64)
    return verts, faces


def _midpoint_refine(verts, faces):
    """Split every triangle into four at its edge midpoints."""
    verts = list(verts)
    midpoint = {}

    def split(a, b):
        key = (min(a, b), max(a, b))
        if key not in midpoint:
            midpoint[key] = len(verts)
            verts.append((verts[a] + verts[b]) / 2.0)
        return midpoint[key]

    new_faces = []
    for a, b, c in faces:
        ab = split(a, b)
        bc = split(b, c)
        ca = split(c, a)
        new_faces.extend([[a, ab, ca], [b, bc, ab], [c, ca, bc], [ab, bc, ca]])
    return np.array(verts), np.array(new_faces, dtype=np.int64)


def icosahedron(radius=1.0):
    verts, faces = _icosahedron_arrays()
    return HalfEdgeMesh.from_triangles(verts * radius, faces)


def icosphere(subdivisions=1, radius=1.0):
    """
    Sphere made by refining an icosahedron and projecting onto the sphere.

    Each level quadruples the triangle count (20 * 4**subdivisions).
    """
    if radius <= 0:
        raise ValueError(f"radius must be positive, got {radius=}")
    if subdivisions < 0:
        raise ValueError(f"subdivisions must be non-negative, got {subdivisions=}")
    verts, faces = _icosahedron_arrays()
    for _ in range(subdivisions):
        verts, faces = _midpoint_refine(verts, faces)
        verts /= np.linalg.norm(verts, axis=1, keepdims=True)
    return HalfEdgeMesh.from_triangles(verts * radius, faces)
