from __future__ import annotations

import numpy as np
import pytest

from ddgmesh import HalfEdgeMesh, NumericError, TopologyError
from ddgmesh.algorithms import flipped_faces, harmonic_parameterization, project_xy
from ddgmesh.algorithms.parameterization import boundary_loop, circle_positions


def test_square_corners_land_on_cardinal_points(unit_square) -> None:
    uv = harmonic_parameterization(unit_square)
    expected = [[1.0, 0.0], [0.0, 1.0], [-1.0, 0.0], [0.0, -1.0]]
    np.testing.assert_allclose(uv, expected, atol=1e-6)


def test_grid_maps_into_the_disk(grid) -> None:
    uv = harmonic_parameterization(grid)
    assert uv.shape == (grid.num_vertices, 2)

    loop = grid.boundary_loops()[0]
    np.testing.assert_allclose(np.linalg.norm(uv[loop], axis=1), 1.0)
    interior = np.setdiff1d(np.arange(grid.num_vertices), loop)
    assert np.all(np.linalg.norm(uv[interior], axis=1) < 1.0)
    # The center of a symmetric grid maps to the center of the disk.
    np.testing.assert_allclose(uv[12], [0.0, 0.0], atol=1e-12)
    assert flipped_faces(grid, uv).size == 0


def test_closed_mesh_is_rejected(icosphere) -> None:
    with pytest.raises(TopologyError):
        harmonic_parameterization(icosphere)


def test_several_boundaries_warn() -> None:
    verts = np.array([
        [0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0],
        [5.0, 0.0, 0.0], [6.0, 0.0, 0.0], [5.0, 1.0, 0.0],
    ])
    mesh = HalfEdgeMesh.from_triangles(verts, [[0, 1, 2], [3, 4, 5]])
    with pytest.warns(UserWarning):
        loop = boundary_loop(mesh)
    assert len(loop) == 3


def test_isolated_vertex_makes_system_singular() -> None:
    verts = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [3.0, 3.0, 0.0]])
    mesh = HalfEdgeMesh.from_triangles(verts, [[0, 1, 2]])
    with pytest.raises(NumericError):
        harmonic_parameterization(mesh)


def test_circle_positions_are_evenly_spaced() -> None:
    pts = circle_positions(4)
    np.testing.assert_allclose(pts, [[1, 0], [0, 1], [-1, 0], [0, -1]], atol=1e-12)


def test_project_xy_drops_height(grid) -> None:
    uv = project_xy(grid.positions)
    assert uv.shape == (grid.num_vertices, 2)
    np.testing.assert_array_equal(uv, grid.positions[:, :2])
    assert flipped_faces(grid, uv).size == 0


def test_flipped_faces_detects_mirrored_map(grid) -> None:
    uv = project_xy(grid.positions)
    uv[:, 0] *= -1.0
    assert flipped_faces(grid, uv).size == grid.num_faces
