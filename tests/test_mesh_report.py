"""Smoke tests for the ``scripts/mesh_report.py`` command line."""

from __future__ import annotations

import csv

import pytest

from scripts.mesh_report import ReportParams, build_mesh, main, run_algorithm, summarize


def _report_lines(capsys) -> dict[str, str]:
    out = capsys.readouterr().out
    return dict(line.split(": ", 1) for line in out.splitlines() if ": " in line)


def test_default_report_describes_a_sphere(capsys) -> None:
    assert main(["--shape", "icosphere", "--subdivisions", "1"]) == 0
    report = _report_lines(capsys)
    assert report["vertex_count"] == "42"
    assert report["euler_characteristic"] == "2"
    assert report["boundary_loops"] == "0"
    assert float(report["total_gaussian_curvature"]) == pytest.approx(12.566370614359172)


def test_simplify_reaches_target(capsys) -> None:
    assert main(["--shape", "grid", "--resolution", "4", "--algorithm", "simplify",
                 "--target-vertices", "20"]) == 0
    report = _report_lines(capsys)
    assert report["vertex_count"] == "20"
    assert report["boundary_loops"] == "1"


def test_loop_refinement_grows_mesh(capsys) -> None:
    assert main(["--shape", "octahedron", "--algorithm", "loop", "--iterations", "2"]) == 0
    report = _report_lines(capsys)
    # 6 -> 18 -> 66 vertices
    assert report["vertex_count"] == "66"
    assert report["face_count"] == "128"


def test_report_row_is_appended_to_csv(tmp_path, capsys) -> None:
    log_path = tmp_path / "logs" / "report.csv"
    for _ in range(2):
        assert main(["--shape", "tetrahedron", "--log-path", str(log_path)]) == 0
    assert "Report appended to" in capsys.readouterr().out

    with open(log_path, newline="") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 2
    assert rows[0]["shape"] == "tetrahedron"
    assert rows[0]["face_count"] == "4"


def test_flat_grid_summary() -> None:
    params = ReportParams(shape="grid", resolution=4, algorithm="laplacian", iterations=0)
    mesh = run_algorithm(build_mesh(params), params)
    report = summarize(mesh)
    assert report["surface_area"] == pytest.approx(1.0)
    assert report["mean_curvature_mean"] == pytest.approx(0.0, abs=1e-12)
    assert report["total_gaussian_curvature"] == pytest.approx(0.0, abs=1e-10)
