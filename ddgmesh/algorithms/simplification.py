"""
Edge-collapse simplification on the half-edge arrays.

Each collapse merges the endpoints of an edge at its midpoint. The edge,
its adjacent triangles and the two side edges those triangles fold onto
disappear. Collapses that would break the 2-manifold property are
refused (link condition, Dey et al. 1999).

The collapse cost is the edge length. This is coarser than quadric error
metrics and flattens curved regions faster.
"""

import heapq
import logging

import numpy as np

from ..exceptions import TopologyError
from ..mesh.half_edge import NO_FACE

logger = logging.getLogger(__name__)


def _prev(mesh, h):
    """Half-edge whose ``next`` is ``h``, found by rotating around its origin."""
    for out in mesh.outgoing_half_edges(int(mesh.he_origin[h])):
        incoming = int(mesh.he_twin[out])
        if mesh.he_next[incoming] == h:
            return incoming
    raise TopologyError(f"half-edge {h} has no predecessor")


def _opposite_vertex(mesh, h):
    if mesh.he_face[h] == NO_FACE:
        return None
    return int(mesh.he_origin[mesh.he_next[mesh.he_next[h]]])


def edge_length(mesh, e):
    u, v = mesh.edge_vertices(e)
    p = mesh.positions
    return float(np.linalg.norm(p[u] - p[v]))


def is_collapse_legal(mesh, e):
    """
    Whether collapsing edge ``e`` keeps the mesh a 2-manifold.

    The endpoints may only share the vertices opposite the edge, an
    interior edge may not join two boundary vertices, and no triangle may
    fold onto a dangling edge or leave a vertex with fewer than three
    neighbors.
    """
    h = int(mesh.edge_he[e])
    t = int(mesh.he_twin[h])
    u = int(mesh.he_origin[h])
    v = int(mesh.he_origin[t])

    opposite = [o for o in (_opposite_vertex(mesh, h), _opposite_vertex(mesh, t)) if o is not None]
    if len(set(opposite)) != len(opposite):
        return False
    common = set(mesh.vertex_neighbors(u)) & set(mesh.vertex_neighbors(v))
    if common != set(opposite):
        return False
    if not mesh.is_boundary_edge(e) and mesh.is_boundary_vertex(u) and mesh.is_boundary_vertex(v):
        return False

    for side in (h, t):
        if mesh.he_face[side] == NO_FACE:
            continue
        hn = mesh.he_next[side]
        hp = mesh.he_next[hn]
        if mesh.he_face[mesh.he_twin[hn]] == NO_FACE and mesh.he_face[mesh.he_twin[hp]] == NO_FACE:
            return False
        w = int(mesh.he_origin[hp])
        if not mesh.is_boundary_vertex(w) and mesh.vertex_valence(w) <= 3:
            return False
    return True


class _LiveMasks:
    """Liveness masks for every entity kind during a batch of collapses."""

    def __init__(self, mesh):
        self.vertices = np.ones(mesh.num_vertices, dtype=bool)
        self.half_edges = np.ones(mesh.num_half_edges, dtype=bool)
        self.edges = np.ones(mesh.num_edges, dtype=bool)
        self.faces = np.ones(mesh.num_faces, dtype=bool)

    def compact(self, mesh):
        return mesh.compact(self.vertices, self.half_edges, self.edges, self.faces)


def _collapse(mesh, alive, e):
    """
    Collapse edge ``e`` in place, clearing removed entities in ``alive``.

    Returns ``(kept_vertex, removed_edges)``.
    """
    h = int(mesh.edge_he[e])
    t = int(mesh.he_twin[h])
    u = int(mesh.he_origin[h])
    v = int(mesh.he_origin[t])

    ring_v = mesh.outgoing_half_edges(v)
    prev_h = _prev(mesh, h) if mesh.he_face[h] == NO_FACE else None
    prev_t = _prev(mesh, t) if mesh.he_face[t] == NO_FACE else None

    p = mesh.vertex_data
    p[u] = 0.5 * (p[u] + p[v])

    removed_edges = [e]
    keep_out = []

    # h: u -> v. Its triangle loses hn (v -> w); hp (w -> u) keeps its edge.
    if mesh.he_face[h] == NO_FACE:
        mesh.he_next[prev_h] = mesh.he_next[h]
        keep_out.append(int(mesh.he_next[h]))
    else:
        hn = int(mesh.he_next[h])
        hp = int(mesh.he_next[hn])
        a, b = int(mesh.he_twin[hn]), int(mesh.he_twin[hp])
        w = int(mesh.he_origin[hp])
        kept_edge = int(mesh.he_edge[hp])
        removed_edges.append(int(mesh.he_edge[hn]))
        mesh.he_twin[a] = b
        mesh.he_twin[b] = a
        mesh.he_edge[a] = kept_edge
        mesh.edge_he[kept_edge] = b
        mesh.vertex_he[w] = a
        alive.faces[mesh.he_face[h]] = False
        alive.half_edges[[hn, hp]] = False
        keep_out.append(b)

    # t: v -> u. Its triangle loses tp (x -> v); tn (u -> x) keeps its edge.
    if mesh.he_face[t] == NO_FACE:
        mesh.he_next[prev_t] = mesh.he_next[t]
        keep_out.append(int(mesh.he_next[t]))
    else:
        tn = int(mesh.he_next[t])
        tp = int(mesh.he_next[tn])
        c, d = int(mesh.he_twin[tn]), int(mesh.he_twin[tp])
        x = int(mesh.he_origin[tp])
        kept_edge = int(mesh.he_edge[tn])
        removed_edges.append(int(mesh.he_edge[tp]))
        mesh.he_twin[c] = d
        mesh.he_twin[d] = c
        mesh.he_edge[d] = kept_edge
        mesh.edge_he[kept_edge] = c
        mesh.vertex_he[x] = c
        alive.faces[mesh.he_face[t]] = False
        alive.half_edges[[tn, tp]] = False
        keep_out.append(d)

    alive.half_edges[[h, t]] = False
    alive.edges[removed_edges] = False
    alive.vertices[v] = False

    for out in ring_v:
        mesh.he_origin[out] = u
    mesh.vertex_he[u] = next(out for out in keep_out if alive.half_edges[out])
    mesh.vertex_he[v] = -1
    return u, removed_edges


def collapse_edge(mesh, e):
    """
    Collapse a single edge and compact the arrays.

    The first endpoint of ``e`` (``mesh.edge_vertices(e)[0]``) survives at
    the midpoint; the other vertex is removed and every later vertex, edge,
    face and half-edge handle shifts down.

    Returns:
        (N_old,) array mapping old vertex handles to new ones (-1 for the
        removed vertex)

    Raises:
        TopologyError: if ``e`` is not an edge of the mesh or the collapse
            would make the mesh non-manifold.
    """
    if not 0 <= e < mesh.num_edges:
        raise TopologyError(f"edge {e} does not exist")
    if not is_collapse_legal(mesh, e):
        raise TopologyError(f"collapsing edge {e} would break the manifold")
    mesh.positions = mesh.positions.copy()
    alive = _LiveMasks(mesh)
    _collapse(mesh, alive, e)
    return alive.compact(mesh)


def simplify(mesh, target_vertex_count):
    """
    Simplify the mesh by collapsing its shortest edges.

    Edges sit in a min-heap keyed by length. Popping an edge whose cached
    cost no longer matches (it was removed or re-pushed after a nearby
    collapse) skips it; so does an edge whose collapse would break the
    manifold. Costs of the edges around the merged vertex are recomputed
    after every collapse.

    Args:
        mesh: triangle HalfEdgeMesh, modified in place
        target_vertex_count: stop once this many vertices remain

    An edge refused by the manifold check leaves the heap and comes back
    only when a later collapse merges into one of its endpoints, so the
    target can be missed when every remaining edge is refused. A
    tetrahedron, for example, admits no collapse and keeps its four
    vertices.

    Returns:
        the simplified mesh, with more than ``target_vertex_count``
        vertices when the heap runs dry first
    """
    mesh.positions = mesh.positions.copy()
    num_vertices = mesh.num_vertices
    if target_vertex_count >= num_vertices:
        return mesh

    alive = _LiveMasks(mesh)
    costs = np.array([edge_length(mesh, e) for e in range(mesh.num_edges)])
    heap = [(cost, e) for e, cost in enumerate(costs)]
    heapq.heapify(heap)

    collapses = 0
    skipped = 0
    while heap and num_vertices > target_vertex_count:
        cost, e = heapq.heappop(heap)

        # Skip if cost changed (stale entry)
        if not alive.edges[e] or costs[e] != cost:
            continue
        if not is_collapse_legal(mesh, e):
            skipped += 1
            continue

        u, removed = _collapse(mesh, alive, e)
        costs[removed] = np.inf
        num_vertices -= 1
        collapses += 1

        for edge in mesh.vertex_incident_edges(u):
            costs[edge] = edge_length(mesh, edge)
            heapq.heappush(heap, (costs[edge], edge))

    alive.compact(mesh)
    logger.debug(
        "Simplified to %d vertices (%d collapses, %d refused)",
        mesh.num_vertices, collapses, skipped,
    )
    return mesh
