"""
Half-edge mesh stored as dense integer arrays.

Every entity is a row in a per-entity array and every reference between
entities is an integer handle into one of those arrays:

    half-edge  ->  origin vertex, twin, next (around its face), edge, face
    vertex     ->  one outgoing half-edge
    edge       ->  one of its two half-edges
    face       ->  one of its half-edges

Boundary edges still own two half-edges; the one on the open side belongs
to no face (``NO_FACE``) and is linked through ``next`` into a boundary
loop. Rotating around a vertex with ``next(twin(h))`` therefore works the
same on the boundary as in the interior.

Attribute payloads (``vertex_data``, ``edge_data``, ``face_data``) are
arrays indexed by handle and carry whatever the caller wants; the vertex
payload holds positions for every geometric operator.

Handles are only valid until the next mutating operation: edge collapse
compacts the arrays and subdivision rebuilds them.
"""

from __future__ import annotations

import logging

import numpy as np

from ..exceptions import MeshInputError, TopologyError
from ..geometry.area import mixed_area

logger = logging.getLogger(__name__)

NO_FACE = -1
NO_HALF_EDGE = -1


def _take(data, keep):
    """Rows of a payload selected by a boolean mask."""
    if data is None:
        return None
    if isinstance(data, np.ndarray):
        return data[keep]
    return [item for item, flag in zip(data, keep) if flag]


def _lookup(table, handles):
    """Map handles through ``table`` leaving -1 sentinels untouched."""
    out = np.full(handles.shape, -1, dtype=np.int64)
    valid = handles >= 0
    out[valid] = table[handles[valid]]
    return out


def _copy_payload(data):
    if data is None:
        return None
    if isinstance(data, np.ndarray):
        return data.copy()
    return list(data)


class HalfEdgeMesh:
    """
    Polygon mesh with half-edge connectivity.

    Build one with :meth:`from_arrays` (vertex positions, polygon degrees,
    flattened polygon indices) or :meth:`from_triangles`. Input topology is
    trusted: orientation consistency and manifoldness are the caller's
    responsibility.
    """

    def __init__(
        self,
        he_origin,
        he_twin,
        he_next,
        he_edge,
        he_face,
        vertex_he,
        edge_he,
        face_he,
        vertex_data=None,
        edge_data=None,
        face_data=None,
    ):
        self.he_origin = np.asarray(he_origin, dtype=np.int64)
        self.he_twin = np.asarray(he_twin, dtype=np.int64)
        self.he_next = np.asarray(he_next, dtype=np.int64)
        self.he_edge = np.asarray(he_edge, dtype=np.int64)
        self.he_face = np.asarray(he_face, dtype=np.int64)
        self.vertex_he = np.asarray(vertex_he, dtype=np.int64)
        self.edge_he = np.asarray(edge_he, dtype=np.int64)
        self.face_he = np.asarray(face_he, dtype=np.int64)
        self.vertex_data = vertex_data
        self.edge_data = edge_data
        self.face_data = face_data

    # ------------------------------------------------------------------
    # Construction and export
    # ------------------------------------------------------------------

    @classmethod
    def from_arrays(cls, positions, face_vertex_counts, face_vertex_indices,
                    edge_data=None, face_data=None) -> HalfEdgeMesh:
        """
        Build a mesh from the flat array triple used by mesh file formats.

        Args:
            positions: (N, 3) vertex positions, stored as the vertex payload
            face_vertex_counts: (F,) polygon degrees
            face_vertex_indices: flattened vertex indices; polygon ``i`` owns
                the next ``face_vertex_counts[i]`` entries
            edge_data: optional edge payload, indexed by the edge handles
                this construction assigns
            face_data: optional (F, ...) face payload

        Returns:
            HalfEdgeMesh

        Raises:
            MeshInputError: if the arrays are inconsistent with each other.
        """
        positions = np.asarray(positions, dtype=np.float64)
        if positions.ndim != 2 or positions.shape[1] != 3:
            raise MeshInputError(f"positions must be shaped (N, 3), got {positions.shape}")
        counts = np.asarray(face_vertex_counts, dtype=np.int64).reshape(-1)
        indices = np.asarray(face_vertex_indices, dtype=np.int64).reshape(-1)
        num_vertices = positions.shape[0]

        if counts.size and counts.min() < 3:
            raise MeshInputError("every polygon needs at least 3 vertices")
        if int(counts.sum()) != indices.size:
            raise MeshInputError(
                f"face_vertex_counts sum to {int(counts.sum())} but "
                f"{indices.size} indices were given"
            )
        if indices.size and (indices.min() < 0 or indices.max() >= num_vertices):
            raise MeshInputError("face_vertex_indices reference a vertex out of range")
        if face_data is not None and len(face_data) != counts.size:
            raise MeshInputError("face_data length must match the number of polygons")

        he_origin = indices.tolist()
        he_next = []
        he_face = []
        face_he = []
        offset = 0
        for f, degree in enumerate(counts.tolist()):
            for k in range(degree):
                he_next.append(offset + (k + 1) % degree)
                he_face.append(f)
            face_he.append(offset)
            offset += degree

        num_inner = len(he_origin)
        he_twin = [NO_HALF_EDGE] * num_inner
        he_edge = [-1] * num_inner
        edge_he = []

        # Pair each half-edge a->b with an earlier b->a if there is one.
        unmatched = {}
        for h in range(num_inner):
            a = he_origin[h]
            b = he_origin[he_next[h]]
            opposite = unmatched.pop((b, a), None)
            if opposite is not None:
                he_twin[h] = opposite
                he_twin[opposite] = h
                he_edge[h] = he_edge[opposite]
            else:
                he_edge[h] = len(edge_he)
                edge_he.append(h)
                unmatched[(a, b)] = h

        # Close every unmatched half-edge with a face-less twin and chain
        # those twins into boundary loops.
        boundary_out = {}
        boundary = []
        for (a, b), h in sorted(unmatched.items(), key=lambda item: item[1]):
            g = len(he_origin)
            he_origin.append(b)
            he_twin.append(h)
            he_next.append(NO_HALF_EDGE)
            he_edge.append(he_edge[h])
            he_face.append(NO_FACE)
            he_twin[h] = g
            boundary_out[b] = g
            boundary.append((g, a))
        for g, a in boundary:
            he_next[g] = boundary_out.get(a, NO_HALF_EDGE)

        # Any outgoing half-edge will do; boundary half-edges come last so
        # boundary vertices start their rotation on the open side.
        vertex_he = [NO_HALF_EDGE] * num_vertices
        for h, v in enumerate(he_origin):
            vertex_he[v] = h

        mesh = cls(
            he_origin, he_twin, he_next, he_edge, he_face,
            vertex_he, edge_he, face_he,
            vertex_data=positions, edge_data=edge_data, face_data=face_data,
        )
        if edge_data is not None and len(edge_data) != mesh.num_edges:
            raise MeshInputError("edge_data length must match the number of edges")
        logger.debug("Built %r", mesh)
        return mesh

    @classmethod
    def from_triangles(cls, verts, faces, **kwargs) -> HalfEdgeMesh:
        """Build a mesh from (N, 3) vertices and (M, 3) triangle indices."""
        faces = np.asarray(faces, dtype=np.int64)
        if faces.size == 0:
            faces = faces.reshape(0, 3)
        if faces.ndim != 2 or faces.shape[1] != 3:
            raise MeshInputError(f"faces must be shaped (M, 3), got {faces.shape}")
        counts = np.full(faces.shape[0], 3, dtype=np.int64)
        return cls.from_arrays(verts, counts, faces.reshape(-1), **kwargs)

    def face_vertex_counts(self):
        """Polygon degree of every face."""
        return np.array([self.face_degree(f) for f in range(self.num_faces)], dtype=np.int64)

    def face_vertex_indices(self):
        """Flattened vertex indices of every face, in face order."""
        indices = []
        for f in range(self.num_faces):
            indices.extend(self.face_vertices(f))
        return np.array(indices, dtype=np.int64)

    def to_arrays(self):
        """Return ``(positions, face_vertex_counts, face_vertex_indices)``."""
        return self.positions.copy(), self.face_vertex_counts(), self.face_vertex_indices()

    def to_triangles(self):
        """Return ``(verts, faces)`` as (N, 3) and (M, 3) arrays."""
        return self.positions.copy(), self.triangles()

    def copy(self) -> HalfEdgeMesh:
        return HalfEdgeMesh(
            self.he_origin.copy(), self.he_twin.copy(), self.he_next.copy(),
            self.he_edge.copy(), self.he_face.copy(),
            self.vertex_he.copy(), self.edge_he.copy(), self.face_he.copy(),
            vertex_data=_copy_payload(self.vertex_data),
            edge_data=_copy_payload(self.edge_data),
            face_data=_copy_payload(self.face_data),
        )

    # ------------------------------------------------------------------
    # Sizes and payloads
    # ------------------------------------------------------------------

    @property
    def num_vertices(self) -> int:
        return int(self.vertex_he.shape[0])

    @property
    def num_half_edges(self) -> int:
        return int(self.he_origin.shape[0])

    @property
    def num_edges(self) -> int:
        return int(self.edge_he.shape[0])

    @property
    def num_faces(self) -> int:
        return int(self.face_he.shape[0])

    @property
    def positions(self) -> np.ndarray:
        """Vertex payload viewed as (N, 3) float positions."""
        if self.vertex_data is None:
            raise MeshInputError("mesh carries no vertex positions")
        return np.asarray(self.vertex_data, dtype=np.float64)

    @positions.setter
    def positions(self, value):
        value = np.asarray(value, dtype=np.float64)
        if value.shape != (self.num_vertices, 3):
            raise MeshInputError(
                f"positions must be shaped ({self.num_vertices}, 3), got {value.shape}"
            )
        self.vertex_data = value

    def __repr__(self):
        return (
            f"HalfEdgeMesh(vertices={self.num_vertices}, edges={self.num_edges}, "
            f"faces={self.num_faces}, half_edges={self.num_half_edges})"
        )

    # ------------------------------------------------------------------
    # Local traversal
    # ------------------------------------------------------------------

    def outgoing_half_edges(self, v):
        """
        Half-edges leaving ``v`` in rotational order, starting at its
        stored outgoing half-edge.

        The walk stops when it comes back to the start handle, so it needs
        no face count and works on boundary vertices.
        """
        start = int(self.vertex_he[v])
        if start == NO_HALF_EDGE:
            return []
        ring = []
        he = start
        while True:
            ring.append(he)
            he = int(self.he_next[self.he_twin[he]])
            if he == start:
                break
            if len(ring) > self.num_half_edges:
                raise TopologyError(f"rotation around vertex {v} does not close")
        return ring

    def vertex_neighbors(self, v):
        """Vertices adjacent to ``v`` in rotational order."""
        return [int(self.he_origin[self.he_twin[h]]) for h in self.outgoing_half_edges(v)]

    def vertex_incident_faces(self, v):
        """Faces around ``v`` in rotational order, without the open side."""
        faces = [int(self.he_face[h]) for h in self.outgoing_half_edges(v)]
        return [f for f in faces if f != NO_FACE]

    def vertex_incident_edges(self, v):
        """Edges incident to ``v`` in rotational order."""
        return [int(self.he_edge[h]) for h in self.outgoing_half_edges(v)]

    def vertex_valence(self, v):
        return len(self.outgoing_half_edges(v))

    def is_boundary_vertex(self, v):
        return any(self.he_face[h] == NO_FACE for h in self.outgoing_half_edges(v))

    def is_boundary_half_edge(self, h):
        return bool(self.he_face[h] == NO_FACE)

    def is_boundary_edge(self, e):
        h = self.edge_he[e]
        return bool(self.he_face[h] == NO_FACE or self.he_face[self.he_twin[h]] == NO_FACE)

    def edge_vertices(self, e):
        """The two endpoints of edge ``e``."""
        h = self.edge_he[e]
        return int(self.he_origin[h]), int(self.he_origin[self.he_twin[h]])

    def face_half_edges(self, f):
        start = int(self.face_he[f])
        loop = []
        he = start
        while True:
            loop.append(he)
            he = int(self.he_next[he])
            if he == start:
                break
            if len(loop) > self.num_half_edges:
                raise TopologyError(f"face {f} does not close")
        return loop

    def face_vertices(self, f):
        """Vertices of face ``f`` in winding order."""
        return [int(self.he_origin[h]) for h in self.face_half_edges(f)]

    def face_degree(self, f):
        return len(self.face_half_edges(f))

    # ------------------------------------------------------------------
    # Whole-mesh queries
    # ------------------------------------------------------------------

    def triangle_half_edges(self):
        """
        (F, 3) half-edges of every triangle.

        Column ``i`` starts at corner ``i``; the edge opposite corner ``i`` is
        column ``(i + 1) % 3``.

        Raises:
            TopologyError: if some face is not a triangle.
        """
        h0 = self.face_he
        h1 = self.he_next[h0]
        h2 = self.he_next[h1]
        if not np.array_equal(self.he_next[h2], h0):
            raise TopologyError("operation requires a triangle mesh")
        return np.stack([h0, h1, h2], axis=1)

    def triangles(self):
        """(F, 3) corner vertices of every triangle."""
        return self.he_origin[self.triangle_half_edges()]

    def vertex_areas(self):
        """
        Mixed (Voronoi) area of every vertex.

        Each triangle splits its area among its corners with
        :func:`ddgmesh.geometry.area.mixed_area`; degenerate triangles give
        nothing, so isolated or degenerate-only vertices get area 0 and
        callers must check before dividing.
        """
        areas = np.zeros(self.num_vertices)
        if self.num_faces == 0:
            return areas
        tris = self.triangles()
        p = self.positions
        shares = mixed_area(p[tris[:, 0]], p[tris[:, 1]], p[tris[:, 2]])
        for corner in range(3):
            np.add.at(areas, tris[:, corner], shares[:, corner])
        return areas

    def boundary_loops(self):
        """
        Vertex loops along the mesh boundary.

        Each loop follows the winding of the faces next to it and starts at
        its smallest vertex handle. Loops are sorted longest first.
        """
        seen = np.zeros(self.num_half_edges, dtype=bool)
        loops = []
        for h in np.flatnonzero(self.he_face == NO_FACE):
            if seen[h]:
                continue
            verts = []
            he = int(h)
            while not seen[he]:
                seen[he] = True
                verts.append(int(self.he_origin[he]))
                he = int(self.he_next[he])
                if he == NO_HALF_EDGE:
                    raise TopologyError("boundary loop is not closed")
            # Face-less half-edges run against the face winding.
            verts.reverse()
            k = verts.index(min(verts))
            loops.append(verts[k:] + verts[:k])
        loops.sort(key=lambda loop: (-len(loop), loop[0]))
        return loops

    # ------------------------------------------------------------------
    # Array surgery
    # ------------------------------------------------------------------

    def compact(self, keep_vertices, keep_half_edges, keep_edges, keep_faces):
        """
        Drop entities whose mask entry is False and renumber the rest.

        Surviving entities keep their relative order, so later handles shift
        down. References to removed entities must already have been rewired
        by the caller.
        """
        keep_vertices = np.asarray(keep_vertices, dtype=bool)
        keep_half_edges = np.asarray(keep_half_edges, dtype=bool)
        keep_edges = np.asarray(keep_edges, dtype=bool)
        keep_faces = np.asarray(keep_faces, dtype=bool)

        def remap(mask):
            new_index = np.cumsum(mask) - 1
            new_index[~mask] = -1
            return new_index

        v_map = remap(keep_vertices)
        h_map = remap(keep_half_edges)
        e_map = remap(keep_edges)
        f_map = remap(keep_faces)

        self.he_face = _lookup(f_map, self.he_face[keep_half_edges])
        self.he_origin = v_map[self.he_origin[keep_half_edges]]
        self.he_twin = h_map[self.he_twin[keep_half_edges]]
        self.he_next = h_map[self.he_next[keep_half_edges]]
        self.he_edge = e_map[self.he_edge[keep_half_edges]]

        self.vertex_he = _lookup(h_map, self.vertex_he[keep_vertices])
        self.edge_he = h_map[self.edge_he[keep_edges]]
        self.face_he = h_map[self.face_he[keep_faces]]

        self.vertex_data = _take(self.vertex_data, keep_vertices)
        self.edge_data = _take(self.edge_data, keep_edges)
        self.face_data = _take(self.face_data, keep_faces)
        return v_map
