"""
Mesh processing algorithms built on the half-edge mesh and the operators.
"""

from .deformation import arap_deformation
from .geodesic import geodesic_distance, shortest_path
from .heat_diffusion import heat_diffusion
from .normal_estimation import estimate_normals
from .parameterization import (
    boundary_loop,
    flipped_faces,
    harmonic_parameterization,
    project_xy,
)
from .simplification import collapse_edge, simplify
from .smoothing import laplacian_smoothing, taubin_smoothing
from .subdivision import catmull_clark, loop_subdivision

__all__ = [
    'arap_deformation',
    'geodesic_distance',
    'shortest_path',
    'heat_diffusion',
    'estimate_normals',
    'boundary_loop',
    'flipped_faces',
    'harmonic_parameterization',
    'project_xy',
    'collapse_edge',
    'simplify',
    'laplacian_smoothing',
    'taubin_smoothing',
    'catmull_clark',
    'loop_subdivision',
]
