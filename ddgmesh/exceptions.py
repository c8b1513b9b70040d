"""Error types raised by ddgmesh."""


class MeshError(ValueError):
    """Base class for every error raised by the package."""


class MeshInputError(MeshError):
    """Raw arrays or fields handed to the toolkit are malformed."""


class TopologyError(MeshError):
    """The request cannot be honoured for the given mesh topology."""


class NumericError(MeshError):
    """A numeric step failed (singular system, zero-length vector, ...)."""
