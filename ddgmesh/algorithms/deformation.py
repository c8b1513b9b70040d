"""
As-rigid-as-possible (ARAP) surface deformation.

Two local/global schemes are available, both with uniform edge weights and
a fixed number of rounds.

``mode="displacement"`` (default) keeps one rotation per vertex, starting
at the identity, and with ``e_ij = p_j - p_i`` over the current one-ring:

local   R_i  = closest rotation to  Σ_j R_j e_ij e_ij^T
global  p_i += mean_j R_j e_ij

``mode="sorkine"`` is Sorkine and Alexa, "As-Rigid-As-Possible Surface
Modeling" (2007), with a Jacobi global step against the rest shape ``r``
(the positions when the call starts):

local   R_i = closest rotation to  S_i = Σ_j (p_j - p_i)(r_j - r_i)^T
global  p_i = mean_j [ p_j + (R_i + R_j)(r_i - r_j) / 2 ]

In both schemes the local step reads only the previous round's rotations
and positions, and the global step reads the previous round's positions
and the rotations fitted in the same round.
"""

import logging

import numpy as np

from ..exceptions import MeshInputError
from ..geometry.matrix import closest_rotation

logger = logging.getLogger(__name__)

MODES = ('displacement', 'sorkine')


def _neighbor_lists(mesh):
    return [mesh.vertex_neighbors(v) for v in range(mesh.num_vertices)]


def _parse_handles(mesh, handles):
    if not handles:
        return np.zeros(0, dtype=np.int64), np.zeros((0, 3))
    indices = np.array(list(handles.keys()), dtype=np.int64)
    targets = np.array([handles[k] for k in handles], dtype=np.float64).reshape(-1, 3)
    if indices.min() < 0 or indices.max() >= mesh.num_vertices:
        raise MeshInputError("handle refers to a vertex outside the mesh")
    return indices, targets


def fit_rotations(rest, current, neighbors):
    """Local step: best rotation per vertex between rest and current one-rings."""
    rotations = np.empty((len(neighbors), 3, 3))
    for i, ring in enumerate(neighbors):
        if not ring:
            rotations[i] = np.eye(3)
            continue
        cur = current[ring] - current[i]
        ref = rest[ring] - rest[i]
        rotations[i] = closest_rotation(cur.T @ ref)
    return rotations


def fit_neighbor_rotations(current, rotations, neighbors):
    """
    Local step of the displacement scheme: per vertex, the closest rotation
    to ``Σ_j R_j e_ij e_ij^T`` with ``R_j`` the previous neighbor rotations.
    """
    fitted = np.empty_like(rotations)
    for i, ring in enumerate(neighbors):
        if not ring:
            fitted[i] = np.eye(3)
            continue
        edges = current[ring] - current[i]
        cov = np.einsum('kab,kb,kc->ac', rotations[ring], edges, edges)
        fitted[i] = closest_rotation(cov)
    return fitted


def rotated_displacements(current, rotations, neighbors):
    """Global step of the displacement scheme: ``mean_j R_j e_ij`` per vertex."""
    delta = np.zeros_like(current)
    for i, ring in enumerate(neighbors):
        if not ring:
            continue
        edges = current[ring] - current[i]
        delta[i] = np.einsum('kab,kb->ka', rotations[ring], edges).mean(axis=0)
    return delta


def _displacement_rounds(mesh, current, neighbors, iterations, handle_idx, handle_pos):
    rotations = np.tile(np.eye(3), (mesh.num_vertices, 1, 1))
    # Vertices without area do not move
    frozen = mesh.vertex_areas() == 0.0
    frozen[handle_idx] = True

    for _ in range(iterations):
        rotations = fit_neighbor_rotations(current, rotations, neighbors)
        delta = rotated_displacements(current, rotations, neighbors)
        delta[frozen] = 0.0
        current = current + delta
        current[handle_idx] = handle_pos
    return current


def _sorkine_rounds(rest, current, neighbors, iterations, handle_idx, handle_pos):
    for _ in range(iterations):
        rotations = fit_rotations(rest, current, neighbors)
        updated = current.copy()
        for i, ring in enumerate(neighbors):
            if not ring:
                continue
            mixed = 0.5 * (rotations[i] + rotations[ring])
            edges = rest[i] - rest[ring]
            target = current[ring] + np.einsum('kab,kb->ka', mixed, edges)
            updated[i] = target.mean(axis=0)
        updated[handle_idx] = handle_pos
        current = updated
    return current


def arap_deformation(mesh, iterations=10, handles=None, mode='displacement'):
    """
    Deform the mesh by alternating local rotation fits and global updates.

    Args:
        mesh: HalfEdgeMesh, positions updated in place
        iterations: number of local/global rounds
        handles: optional ``{vertex: (x, y, z)}`` targets kept fixed during
            the global step
        mode: ``'displacement'`` adds the rotated mean edge vector to every
            vertex each round, which pulls an unconstrained surface inwards;
            ``'sorkine'`` solves towards the rest shape, which is then a
            fixed point without handles

    Returns:
        (N, 3) deformed positions
    """
    if mode not in MODES:
        raise MeshInputError(f"unknown ARAP mode {mode!r}, expected one of {MODES}")
    if iterations < 0:
        raise MeshInputError(f"iterations must be non-negative, got {iterations}")
    rest = mesh.positions.copy()
    current = rest.copy()
    handle_idx, handle_pos = _parse_handles(mesh, handles)
    current[handle_idx] = handle_pos
    neighbors = _neighbor_lists(mesh)

    if mode == 'sorkine':
        current = _sorkine_rounds(rest, current, neighbors, iterations, handle_idx, handle_pos)
    else:
        current = _displacement_rounds(mesh, current, neighbors, iterations, handle_idx, handle_pos)

    logger.debug("ARAP (%s): %d iterations, %d handles", mode, iterations, len(handle_idx))
    mesh.positions = current
    return current
