"""
Graph geodesics along the mesh edges.
"""

import heapq
import logging

import numpy as np

from ..exceptions import MeshInputError

logger = logging.getLogger(__name__)


def _check_vertex(mesh, v, name):
    if not 0 <= v < mesh.num_vertices:
        raise MeshInputError(f"{name} {v} is not a vertex of a mesh with {mesh.num_vertices} vertices")


def _dijkstra(mesh, source):
    p = mesh.positions
    dist = np.full(mesh.num_vertices, np.inf)
    prev = np.full(mesh.num_vertices, -1, dtype=np.int64)
    dist[source] = 0.0

    heap = [(0.0, source)]
    while heap:
        d, v = heapq.heappop(heap)
        # Skip stale entries
        if d > dist[v]:
            continue
        for u in mesh.vertex_neighbors(v):
            candidate = d + float(np.linalg.norm(p[u] - p[v]))
            if candidate < dist[u]:
                dist[u] = candidate
                prev[u] = v
                heapq.heappush(heap, (candidate, u))
    return dist, prev


def geodesic_distance(mesh, source):
    """
    Shortest-path distance from ``source`` to every vertex over the mesh
    edges, with Euclidean edge lengths as weights (Dijkstra).

    Args:
        mesh: HalfEdgeMesh
        source: vertex handle

    Returns:
        (N,) distances; ``inf`` for vertices not connected to ``source``
    """
    source = int(source)
    _check_vertex(mesh, source, "source")
    dist, _ = _dijkstra(mesh, source)
    logger.debug("Geodesic from %d reached %d vertices", source, int(np.isfinite(dist).sum()))
    return dist


def shortest_path(mesh, source, target):
    """
    Vertex sequence of a shortest edge path from ``source`` to ``target``.

    Returns an empty list if ``target`` cannot be reached.
    """
    source, target = int(source), int(target)
    _check_vertex(mesh, source, "source")
    _check_vertex(mesh, target, "target")
    dist, prev = _dijkstra(mesh, source)
    if not np.isfinite(dist[target]):
        return []
    path = [target]
    while path[-1] != source:
        path.append(int(prev[path[-1]]))
    path.reverse()
    return path
