"""Heat diffusion of a vertex scalar field by implicit Euler steps."""

import logging

import numpy as np
import scipy.linalg

from ..exceptions import MeshInputError, NumericError
from ..operators.weights import cotangent_laplacian_matrix, mass_matrix

logger = logging.getLogger(__name__)


def heat_diffusion(mesh, field, time, diffusivity=1.0, steps=1):
    """
    Diffuse a scalar field over the surface.

    Solves the heat equation ∂u/∂t = k Δu with ``steps`` implicit Euler
    steps of length ``dt = time / steps``:

        (M - dt k L) u_{n+1} = M u_n

    where ``M`` is the diagonal mixed-area mass matrix and ``L`` the
    cotangent Laplacian (negative semi-definite, so ``-L`` is the
    stiffness). The system is solved densely by LU decomposition. The
    heat ``Σ M u`` is conserved on every mesh.

    Args:
        mesh: triangle HalfEdgeMesh
        field: (N,) initial values per vertex
        time: total diffusion time
        diffusivity: diffusion coefficient ``k``
        steps: number of implicit sub-steps

    Returns:
        (N,) diffused field

    Raises:
        NumericError: if the system is singular (for example a vertex with
            neither area nor edges).
    """
    field = np.asarray(field, dtype=np.float64)
    if field.shape != (mesh.num_vertices,):
        raise MeshInputError(
            f"field must be shaped ({mesh.num_vertices},), got {field.shape}"
        )
    if steps < 1:
        raise MeshInputError(f"steps must be at least 1, got {steps}")

    dt = time / steps
    M = mass_matrix(mesh).toarray()
    L = cotangent_laplacian_matrix(mesh).toarray()
    A = M - dt * diffusivity * L

    u = field
    for _ in range(steps):
        try:
            u = scipy.linalg.solve(A, M @ u)
        except np.linalg.LinAlgError as exc:
            raise NumericError("heat diffusion system is singular") from exc

    logger.debug("Heat diffusion: %d vertices, t=%g, %d steps", mesh.num_vertices, time, steps)
    return u
