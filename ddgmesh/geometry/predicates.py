"""Orientation predicates in plain floating point (no exact arithmetic)."""


def orient2d(a, b, c):
    """
    Twice the signed area of triangle ``abc`` projected onto the XY plane.

    Positive when ``a, b, c`` wind counter-clockwise.
    """
    return (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])


def orient3d(a, b, c, d):
    """Six times the signed volume of tetrahedron ``abcd``."""
    abx, aby, abz = b[0] - a[0], b[1] - a[1], b[2] - a[2]
    acx, acy, acz = c[0] - a[0], c[1] - a[1], c[2] - a[2]
    adx, ady, adz = d[0] - a[0], d[1] - a[1], d[2] - a[2]
    return (
        abx * (acy * adz - acz * ady)
        - aby * (acx * adz - acz * adx)
        + abz * (acx * ady - acy * adx)
    )
