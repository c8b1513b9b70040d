from __future__ import annotations

import numpy as np
import pytest

from ddgmesh import HalfEdgeMesh, MeshInputError
from ddgmesh.algorithms import geodesic_distance, shortest_path


def test_distance_to_source_is_zero(icosphere) -> None:
    dist = geodesic_distance(icosphere, 7)
    assert dist[7] == 0.0
    assert np.all(dist[np.arange(icosphere.num_vertices) != 7] > 0)


def test_grid_distances(grid) -> None:
    dist = geodesic_distance(grid, 0)
    # Axis-aligned steps of 0.25 and diagonals of 0.25 * sqrt(2).
    assert dist[4] == pytest.approx(1.0)
    assert dist[24] == pytest.approx(np.sqrt(2.0))
    assert dist[9] == pytest.approx(0.75 + 0.25 * np.sqrt(2.0))


def test_triangle_inequality_holds_on_every_edge(icosphere) -> None:
    dist = geodesic_distance(icosphere, 0)
    p = icosphere.positions
    for e in range(icosphere.num_edges):
        u, v = icosphere.edge_vertices(e)
        length = np.linalg.norm(p[u] - p[v])
        assert dist[v] <= dist[u] + length + 1e-12
        assert dist[u] <= dist[v] + length + 1e-12


def test_graph_distance_bounds_euclidean_distance(icosphere) -> None:
    dist = geodesic_distance(icosphere, 3)
    p = icosphere.positions
    euclid = np.linalg.norm(p - p[3], axis=1)
    assert np.all(dist >= euclid - 1e-12)


def test_unreachable_vertices_are_infinite() -> None:
    verts = np.array([
        [0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0],
        [5.0, 0.0, 0.0], [6.0, 0.0, 0.0], [5.0, 1.0, 0.0],
    ])
    mesh = HalfEdgeMesh.from_triangles(verts, [[0, 1, 2], [3, 4, 5]])
    dist = geodesic_distance(mesh, 0)
    assert np.all(np.isinf(dist[3:]))
    assert shortest_path(mesh, 0, 4) == []


def test_shortest_path_matches_distance(grid) -> None:
    path = shortest_path(grid, 0, 24)
    assert path[0] == 0 and path[-1] == 24
    p = grid.positions
    length = sum(np.linalg.norm(p[a] - p[b]) for a, b in zip(path, path[1:]))
    assert length == pytest.approx(geodesic_distance(grid, 0)[24])
    # Along the diagonal of the grid.
    assert path == [0, 6, 12, 18, 24]


def test_source_must_exist(grid) -> None:
    with pytest.raises(MeshInputError):
        geodesic_distance(grid, grid.num_vertices)
