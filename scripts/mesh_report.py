"""
Build a procedural mesh, optionally process it, and report its geometry.

    python scripts/mesh_report.py --shape icosphere --subdivisions 3
    python scripts/mesh_report.py --shape grid --algorithm simplify --target-vertices 40
    python scripts/mesh_report.py --algorithm loop --log-path results/report.csv
"""

import argparse
import csv
import datetime
import logging
import os
import sys
import time
from dataclasses import asdict, dataclass

import numpy as np

from ddgmesh import MeshError, algorithms, operators, primitives

logger = logging.getLogger("mesh_report")

SHAPES = ('icosphere', 'octahedron', 'tetrahedron', 'grid')
ALGORITHMS = ('none', 'laplacian', 'taubin', 'loop', 'catmull-clark', 'simplify', 'arap')


@dataclass
class ReportParams:
    shape: str = 'icosphere'
    subdivisions: int = 2  # icosphere refinement level
    resolution: int = 8  # grid cells per side
    algorithm: str = 'none'
    iterations: int = 1
    alpha: float = 0.5
    target_vertices: int = 0  # 0 halves the vertex count


def build_mesh(params: ReportParams):
    if params.shape == 'icosphere':
        return primitives.icosphere(params.subdivisions)
    if params.shape == 'octahedron':
        return primitives.octahedron()
    if params.shape == 'tetrahedron':
        return primitives.tetrahedron()
    if params.shape == 'grid':
        return primitives.grid(params.resolution, params.resolution)
    raise ValueError(f"unknown shape {params.shape!r}")


def run_algorithm(mesh, params: ReportParams):
    """Apply the selected algorithm and return the resulting mesh."""
    if params.algorithm == 'laplacian':
        algorithms.laplacian_smoothing(mesh, params.iterations, alpha=params.alpha)
    elif params.algorithm == 'taubin':
        algorithms.taubin_smoothing(mesh, params.iterations, lambda_val=params.alpha)
    elif params.algorithm == 'loop':
        for _ in range(params.iterations):
            mesh = algorithms.loop_subdivision(mesh, refine=True)
    elif params.algorithm == 'catmull-clark':
        for _ in range(params.iterations):
            mesh = algorithms.catmull_clark(mesh, refine=False)
    elif params.algorithm == 'simplify':
        target = params.target_vertices or mesh.num_vertices // 2
        algorithms.simplify(mesh, target)
    elif params.algorithm == 'arap':
        algorithms.arap_deformation(mesh, params.iterations)
    return mesh


def summarize(mesh):
    """
    Counts, area and curvature statistics of a triangle mesh.

    Curvature statistics skip boundary vertices, where the discrete
    operators do not estimate the surface curvature.
    """
    areas = mesh.vertex_areas()
    interior = np.array([not mesh.is_boundary_vertex(v) for v in range(mesh.num_vertices)], dtype=bool)
    H = operators.mean_curvature(mesh)[interior]
    K = operators.gaussian_curvature(mesh)

    return {
        'vertex_count': mesh.num_vertices,
        'edge_count': mesh.num_edges,
        'face_count': mesh.num_faces,
        'euler_characteristic': mesh.num_vertices - mesh.num_edges + mesh.num_faces,
        'boundary_loops': len(mesh.boundary_loops()),
        'surface_area': float(areas.sum()),
        'mean_curvature_mean': float(np.mean(H)) if H.size else 0.0,
        'mean_curvature_std': float(np.std(H)) if H.size else 0.0,
        'total_gaussian_curvature': float(np.sum(K[interior] * areas[interior])),
    }


def write_log_row(log_path, row):
    """Append ``row`` to a CSV log, writing the header on first use."""
    directory = os.path.dirname(log_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    file_exists = os.path.isfile(log_path)
    with open(log_path, 'a' if file_exists else 'w', newline='') as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=list(row))
        if not file_exists:
            writer.writeheader()
        writer.writerow(row)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Discrete differential geometry mesh report")
    parser.add_argument('--shape', choices=SHAPES, default='icosphere', help='Procedural mesh to build')
    parser.add_argument('--subdivisions', type=int, default=2, help='Icosphere refinement level')
    parser.add_argument('--resolution', type=int, default=8, help='Grid cells per side')
    parser.add_argument('--algorithm', choices=ALGORITHMS, default='none', help='Processing step to apply')
    parser.add_argument('--iterations', type=int, default=1, help='Iterations / subdivision levels')
    parser.add_argument('--alpha', type=float, default=0.5, help='Smoothing step size')
    parser.add_argument('--target-vertices', type=int, default=0, help='Simplification target (0 = half)')
    parser.add_argument('--log-path', help='Append the report to this CSV file')
    parser.add_argument('--verbose', action='store_true', help='Log progress')
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    params = ReportParams(
        shape=args.shape,
        subdivisions=args.subdivisions,
        resolution=args.resolution,
        algorithm=args.algorithm,
        iterations=args.iterations,
        alpha=args.alpha,
        target_vertices=args.target_vertices,
    )

    start = time.time()
    try:
        mesh = run_algorithm(build_mesh(params), params)
        report = summarize(mesh)
    except MeshError as exc:
        logger.error("Processing failed: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    elapsed = time.time() - start
    logger.info("Report for %s built in %.3fs", params.shape, elapsed)

    for key, value in report.items():
        print(f"{key}: {value}")

    if args.log_path:
        row = {'timestamp': datetime.datetime.now().isoformat(), **asdict(params), **report,
               'execution_time_sec': elapsed}
        write_log_row(args.log_path, row)
        print(f"Report appended to {args.log_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
