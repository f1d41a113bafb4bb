import numpy as np

from quadellipse.config import get_tolerance


def sanitize_quadrilateral(vertices):
    """Return vertices as a 4x2 float array, raising ValueError for any other shape."""
    vertices = np.asarray(vertices, dtype=float)
    if vertices.shape != (4, 2):
        raise ValueError("Quadrilateral must be given as 4 x-y vertices, i.e. shape (4, 2). "
                         f"Input shape: {vertices.shape}")
    return vertices


def is_convex(points, tol=None):
    """
    Determine whether an ordered set of points forms a convex polygon.

    Parameters
    ----------
    points: array-like
        N x 2 x-y coordinates of the polygon vertices in traversal order.
        The polygon is closed by joining the last vertex to the first.
    tol: `float`, optional
        Cross products with a magnitude below this are treated as zero.
        Defaults to `quadellipse.config.TOLERANCE`.

    Returns
    -------
    `bool`
        True if every turn between consecutive edges is in the same direction.

    Notes
    -----
    For each vertex i, the 2-D cross product of the edges (p[i] -> p[i+1]) and
    (p[i+1] -> p[i+2]) is computed, wrapping around the polygon.
    The sign of the first nonzero cross product is recorded and any later
    nonzero cross product of the opposite sign means a non-convex or
    self-intersecting polygon.
    Zero cross products, i.e. collinear consecutive edges, are ignored.
    Consequently, fewer than 4 points and completely collinear point sets are
    both reported as convex.
    """
    points = np.asarray(points, dtype=float)
    if points.ndim != 2 or points.shape[-1] != 2:
        raise ValueError(f"points must have shape (N, 2). Input shape: {points.shape}")
    n = len(points)
    if n < 4:
        return True
    tol = get_tolerance(tol)
    sign = 0
    for i in range(n):
        p0, p1, p2 = points[i], points[(i + 1) % n], points[(i + 2) % n]
        edge1 = p1 - p0
        edge2 = p2 - p1
        cross = edge1[0] * edge2[1] - edge1[1] * edge2[0]
        if abs(cross) < tol:
            continue
        if sign == 0:
            sign = np.sign(cross)
        elif np.sign(cross) != sign:
            return False
    return True


def get_diagonal_midpoints(vertices):
    """
    Calculate the midpoints of the diagonals of a quadrilateral.

    Parameters
    ----------
    vertices: array-like
        4 x 2 x-y coordinates of the vertices, p0, p1, p2, p3, in traversal order.

    Returns
    -------
    mid02, mid13: `numpy.ndarray`
        Length-2 midpoints of the diagonals p0-p2 and p1-p3, respectively.

    Notes
    -----
    By Newton's theorem, the center of every ellipse inscribed in a quadrilateral
    lies on the line segment joining these midpoints.
    For a parallelogram the midpoints coincide and so fix the center uniquely.
    """
    vertices = sanitize_quadrilateral(vertices)
    mid02 = (vertices[0] + vertices[2]) / 2
    mid13 = (vertices[1] + vertices[3]) / 2
    return mid02, mid13


def convert_to_homogeneous_coords(coords, component_axis=-1,
                                  trailing_convention=True, vector=False):
    """Convert N-D coordinate(s) to homogeneous coordinates.

    Parameters
    ----------
    coords: `numpy.ndarray`
        Array of coordinates to be converted.
    component_axis: `int`
        The axis of coords array corresponding to the coordinate components, e.g. x, y.
    trailing_convention: `bool`
        States which homogeneous convention is to be used.
        True (default) means homogenous component is placed at end of coordinate,
        as expected by the 3x3 homographies in this package.
        False means homogenous component is placed at start of coordinate.
    vector: `bool`
        States whether the coordinates are vectors or locations.
        If the coords are vectors (vector=True), the value of the homogenous component is 0.
        If the coords are locations (vector=False), the value of the homogenous component is 1.
    """
    coords = np.asarray(coords, dtype=float)
    hom_shape = list(coords.shape)
    hom_shape[component_axis] = 1
    if vector:
        hom_component = np.zeros(hom_shape)
    else:
        hom_component = np.ones(hom_shape)
    c = (hom_component, coords)
    if trailing_convention:
        c = c[::-1]
    return np.concatenate(c, axis=component_axis)


def convert_from_homogeneous_coords(coords, component_axis=-1, trailing_convention=True):
    """Convert homogeneous coordinate(s) back to Cartesian ones.

    The other components are divided by the homogeneous component, which is then dropped.
    Locations at infinity, i.e. with a zero homogeneous component, give inf or nan.
    """
    coords = np.asarray(coords, dtype=float)
    coords = np.moveaxis(coords, component_axis, -1)
    if trailing_convention:
        w, xy = coords[..., -1:], coords[..., :-1]
    else:
        w, xy = coords[..., :1], coords[..., 1:]
    with np.errstate(divide="ignore", invalid="ignore"):
        cartesian = xy / w
    return np.moveaxis(cartesian, -1, component_axis)
