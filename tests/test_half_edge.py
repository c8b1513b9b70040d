from __future__ import annotations

import numpy as np
import pytest

from conftest import assert_half_edge_invariants
from ddgmesh import NO_FACE, HalfEdgeMesh, MeshInputError, TopologyError, primitives
from ddgmesh.geometry import triangle_area


def test_build_from_flat_arrays_round_trips_polygons() -> None:
    positions = np.array([
        [0.0, 0.0, 0.0],
        [1.0, 0.0, 0.0],
        [1.0, 1.0, 0.0],
        [0.0, 1.0, 0.0],
        [2.0, 0.5, 0.0],
    ])
    counts = [4, 3]
    indices = [0, 1, 2, 3, 1, 4, 2]
    mesh = HalfEdgeMesh.from_arrays(positions, counts, indices)

    assert mesh.num_vertices == 5
    assert mesh.num_faces == 2
    assert mesh.num_edges == 6
    assert mesh.face_vertex_counts().tolist() == counts
    assert mesh.face_vertex_indices().tolist() == indices
    assert mesh.face_degree(0) == 4
    assert_half_edge_invariants(mesh)


def test_counts_match_euler_characteristic(octahedron, icosphere) -> None:
    for mesh in (octahedron, icosphere):
        assert mesh.num_vertices - mesh.num_edges + mesh.num_faces == 2
        assert mesh.num_half_edges == 2 * mesh.num_edges
        assert_half_edge_invariants(mesh)


def test_boundary_half_edges_are_explicit(right_triangle) -> None:
    mesh = right_triangle
    assert mesh.num_half_edges == 6
    assert np.sum(mesh.he_face == NO_FACE) == 3
    assert all(mesh.is_boundary_edge(e) for e in range(mesh.num_edges))
    assert all(mesh.is_boundary_vertex(v) for v in range(3))
    assert_half_edge_invariants(mesh)


def test_one_ring_traversal_on_interior_vertex(grid) -> None:
    # Vertex 12 sits in the middle of the 4x4 grid.
    center = 12
    neighbors = grid.vertex_neighbors(center)
    assert sorted(neighbors) == [6, 7, 11, 13, 17, 18]
    assert grid.vertex_valence(center) == 6
    assert len(grid.vertex_incident_faces(center)) == 6
    assert len(grid.vertex_incident_edges(center)) == 6
    assert not grid.is_boundary_vertex(center)


def test_one_ring_traversal_on_boundary_vertex(grid) -> None:
    corner = 0
    assert sorted(grid.vertex_neighbors(corner)) == [1, 5, 6]
    # The open side is skipped for faces but not for edges.
    assert len(grid.vertex_incident_faces(corner)) == 2
    assert len(grid.vertex_incident_edges(corner)) == 3
    assert grid.is_boundary_vertex(corner)


def test_traversal_is_restartable(icosphere) -> None:
    first = icosphere.vertex_neighbors(5)
    second = icosphere.vertex_neighbors(5)
    assert first == second


def test_neighbors_rotate_consistently(octahedron) -> None:
    # Consecutive neighbors around a vertex share a face with it.
    v = 4
    ring = octahedron.vertex_neighbors(v)
    faces = {frozenset(octahedron.face_vertices(f)) for f in range(octahedron.num_faces)}
    for a, b in zip(ring, ring[1:] + ring[:1]):
        assert frozenset((v, a, b)) in faces


def test_right_triangle_mixed_areas(right_triangle) -> None:
    np.testing.assert_allclose(right_triangle.vertex_areas(), [0.25, 0.125, 0.125])


@pytest.mark.parametrize("make", [primitives.octahedron, primitives.tetrahedron,
                                  lambda: primitives.icosphere(2)])
def test_mixed_areas_partition_surface_area(make) -> None:
    mesh = make()
    p = mesh.positions
    tris = mesh.triangles()
    total = triangle_area(p[tris[:, 0]], p[tris[:, 1]], p[tris[:, 2]]).sum()
    assert mesh.vertex_areas().sum() == pytest.approx(total)


def test_degenerate_face_contributes_no_area() -> None:
    verts = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [2.0, 0.0, 0.0]])
    mesh = HalfEdgeMesh.from_triangles(verts, [[0, 1, 2]])
    np.testing.assert_array_equal(mesh.vertex_areas(), np.zeros(3))


def test_isolated_vertex_has_no_ring() -> None:
    verts = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [5.0, 5.0, 5.0]])
    mesh = HalfEdgeMesh.from_triangles(verts, [[0, 1, 2]])
    assert mesh.vertex_neighbors(3) == []
    assert mesh.vertex_areas()[3] == 0.0


def test_boundary_loops_follow_face_winding(unit_square, grid) -> None:
    assert unit_square.boundary_loops() == [[0, 1, 2, 3]]
    loops = grid.boundary_loops()
    assert len(loops) == 1
    assert len(loops[0]) == 16
    assert loops[0][:5] == [0, 1, 2, 3, 4]


def test_closed_mesh_has_no_boundary(icosphere) -> None:
    assert icosphere.boundary_loops() == []


def test_to_triangles_round_trip(icosphere) -> None:
    verts, faces = icosphere.to_triangles()
    rebuilt = HalfEdgeMesh.from_triangles(verts, faces)
    np.testing.assert_array_equal(rebuilt.triangles(), faces)
    np.testing.assert_allclose(rebuilt.positions, verts)


def test_payloads_are_indexed_by_handle() -> None:
    verts = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [1.0, 1.0, 0.0], [0.0, 1.0, 0.0]])
    mesh = HalfEdgeMesh.from_triangles(verts, [[0, 1, 2], [0, 2, 3]],
                                       face_data=np.array(["a", "b"]))
    assert mesh.face_data[1] == "b"
    clone = mesh.copy()
    clone.positions = clone.positions + 1.0
    assert mesh.positions[0, 0] == 0.0


def test_triangle_queries_reject_polygons() -> None:
    positions = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [1.0, 1.0, 0.0], [0.0, 1.0, 0.0]])
    quad = HalfEdgeMesh.from_arrays(positions, [4], [0, 1, 2, 3])
    with pytest.raises(TopologyError):
        quad.triangles()


@pytest.mark.parametrize(
    "positions, counts, indices",
    [
        (np.zeros((3, 2)), [3], [0, 1, 2]),
        (np.zeros((3, 3)), [3], [0, 1]),
        (np.zeros((3, 3)), [2], [0, 1]),
        (np.zeros((3, 3)), [3], [0, 1, 3]),
    ],
)
def test_malformed_input_is_rejected(positions, counts, indices) -> None:
    with pytest.raises(MeshInputError):
        HalfEdgeMesh.from_arrays(positions, counts, indices)


def test_mesh_errors_are_value_errors() -> None:
    with pytest.raises(ValueError):
        HalfEdgeMesh.from_arrays(np.zeros((3, 3)), [3], [0, 1, 7])
