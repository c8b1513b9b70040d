"""Shared fixtures and checks for the ddgmesh test suite."""

from __future__ import annotations

import os
import sys

import numpy as np
import pytest

# Allow running the suite from a checkout without installing the package
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from ddgmesh import NO_FACE, HalfEdgeMesh, primitives  # noqa: E402


def assert_half_edge_invariants(mesh: HalfEdgeMesh) -> None:
    """Check the connectivity invariants every valid mesh satisfies."""
    h = np.arange(mesh.num_half_edges)
    twin = mesh.he_twin
    nxt = mesh.he_next

    assert np.all(twin[twin] == h), "twin is not an involution"
    assert np.all(twin != h), "half-edge is its own twin"
    assert np.all(mesh.he_edge[twin] == mesh.he_edge), "twins disagree on their edge"
    # The next half-edge starts where this one ends.
    assert np.all(mesh.he_origin[nxt] == mesh.he_origin[twin])
    assert np.all(mesh.he_face[nxt] == mesh.he_face)

    for e in range(mesh.num_edges):
        assert mesh.he_edge[mesh.edge_he[e]] == e
    for f in range(mesh.num_faces):
        assert mesh.he_face[mesh.face_he[f]] == f
    for v in range(mesh.num_vertices):
        if mesh.vertex_he[v] >= 0:
            assert mesh.he_origin[mesh.vertex_he[v]] == v

    # Each edge has at least one face.
    both_open = (mesh.he_face == NO_FACE) & (mesh.he_face[twin] == NO_FACE)
    assert not both_open.any(), "edge without any face"


def _assert_finite_array(name: str, arr: np.ndarray) -> None:
    if not np.isfinite(arr).all():
        bad = np.argwhere(~np.isfinite(arr))[:10]
        raise AssertionError(f"{name} contains non-finite values at indices: {bad.tolist()}")


@pytest.fixture
def right_triangle() -> HalfEdgeMesh:
    return primitives.right_triangle()


@pytest.fixture
def unit_square() -> HalfEdgeMesh:
    return primitives.unit_square()


@pytest.fixture
def grid() -> HalfEdgeMesh:
    return primitives.grid(4, 4)


@pytest.fixture
def octahedron() -> HalfEdgeMesh:
    return primitives.octahedron()


@pytest.fixture
def icosphere() -> HalfEdgeMesh:
    return primitives.icosphere(2)


@pytest.fixture
def cube() -> HalfEdgeMesh:
    """Unit cube surface, 8 vertices and 12 outward-facing triangles."""
    verts = np.array(
        [
            [0.0, 0.0, 0.0],
            [1.0, 0.0, 0.0],
            [1.0, 1.0, 0.0],
            [0.0, 1.0, 0.0],
            [0.0, 0.0, 1.0],
            [1.0, 0.0, 1.0],
            [1.0, 1.0, 1.0],
            [0.0, 1.0, 1.0],
        ]
    )
    faces = np.array(
        [
            # bottom (z=0)
            [0, 2, 1],
            [0, 3, 2],
            # top (z=1)
            [4, 5, 6],
            [4, 6, 7],
            # front (y=0)
            [0, 1, 5],
            [0, 5, 4],
            # back (y=1)
            [3, 6, 2],
            [3, 7, 6],
            # left (x=0)
            [0, 7, 3],
            [0, 4, 7],
            # right (x=1)
            [1, 2, 6],
            [1, 6, 5],
        ]
    )
    return HalfEdgeMesh.from_triangles(verts, faces)
