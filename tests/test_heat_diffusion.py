from __future__ import annotations

import numpy as np
import pytest

from ddgmesh import HalfEdgeMesh, MeshInputError, NumericError
from ddgmesh.algorithms import heat_diffusion


def test_right_triangle_single_step(right_triangle) -> None:
    u = heat_diffusion(right_triangle, [1.0, 0.0, 0.0], time=0.1)
    np.testing.assert_allclose(u, [7.0 / 9.0, 2.0 / 9.0, 2.0 / 9.0])


def test_heat_is_conserved(icosphere) -> None:
    areas = icosphere.vertex_areas()
    field = np.zeros(icosphere.num_vertices)
    field[0] = 1.0
    u = heat_diffusion(icosphere, field, time=0.05, steps=4)
    assert np.sum(areas * u) == pytest.approx(np.sum(areas * field))


def test_long_diffusion_approaches_average(icosphere) -> None:
    areas = icosphere.vertex_areas()
    field = icosphere.positions[:, 2] + 1.0
    u = heat_diffusion(icosphere, field, time=20.0, steps=20)
    mean = np.sum(areas * field) / areas.sum()
    np.testing.assert_allclose(u, mean, atol=1e-6)


def test_diffusion_never_increases_the_spread(grid) -> None:
    field = np.zeros(grid.num_vertices)
    field[12] = 1.0
    short = heat_diffusion(grid, field, time=0.01)
    longer = heat_diffusion(grid, field, time=0.1)
    assert short.max() <= 1.0
    assert longer.max() < short.max()
    assert longer.min() >= -1e-12


def test_constant_field_is_steady(grid) -> None:
    u = heat_diffusion(grid, np.full(grid.num_vertices, 3.0), time=1.0, steps=3)
    np.testing.assert_allclose(u, 3.0)


def test_zero_time_is_identity(grid) -> None:
    field = np.linspace(0.0, 1.0, grid.num_vertices)
    np.testing.assert_allclose(heat_diffusion(grid, field, time=0.0), field)


@pytest.mark.parametrize("field, steps", [
    (np.zeros(2), 1),
    (np.zeros((3, 2)), 1),
    (np.zeros(3), 0),
])
def test_bad_arguments_are_rejected(right_triangle, field, steps) -> None:
    with pytest.raises(MeshInputError):
        heat_diffusion(right_triangle, field, time=0.1, steps=steps)


def test_vertex_without_area_or_edges_is_singular() -> None:
    verts = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [3.0, 3.0, 0.0]])
    mesh = HalfEdgeMesh.from_triangles(verts, [[0, 1, 2]])
    with pytest.raises(NumericError):
        heat_diffusion(mesh, np.ones(4), time=0.1)
