import numpy as np

from quadellipse import utils
from quadellipse.config import get_tolerance
from quadellipse.linalg import solve_linear_system

# Corners of the unit square in the order they are mapped to the quadrilateral vertices.
UNIT_SQUARE = np.array([[0., 0.], [1., 0.], [1., 1.], [0., 1.]])


class NonInvertibleError(ValueError):
    """Raised when a projective transformation matrix is singular."""


def derive_homography_from_unit_square(vertices, tol=None, full_output=False):
    """Derive the homography mapping the unit square onto a quadrilateral.

    Parameters
    ----------
    vertices: array-like
        4 x 2 x-y coordinates of the quadrilateral vertices p0, p1, p2, p3.
        The unit square corners (0, 0), (1, 0), (1, 1), (0, 1) are mapped to
        p0, p1, p2, p3, respectively.
    tol: `float`, optional
        Passed to the linear solver. Defaults to `quadellipse.config.TOLERANCE`.
    full_output: `bool`
        If True, also return whether the linear system was degenerate.

    Returns
    -------
    H: `numpy.ndarray`
        3 x 3 homography acting on column vectors (u, v, 1), normalized so H[2, 2] == 1.
    degenerate: `bool`
        Only returned if full_output is True.

    Notes
    -----
    A planar homography has 8 degrees of freedom once its overall scale is fixed
    by setting h33 = 1. Each correspondence (u, v) -> (x, y) satisfies
        x = (h11 u + h12 v + h13) / (h31 u + h32 v + 1)
        y = (h21 u + h22 v + h23) / (h31 u + h32 v + 1)
    which, multiplied out, gives two rows of a linear system in h11, ..., h32:
        [u, v, 1, 0, 0, 0, -u x, -v x] . h = x
        [0, 0, 0, u, v, 1, -u y, -v y] . h = y
    The four corners therefore give an 8 x 8 system.
    No singularity check is made. A degenerate quadrilateral gives zeros for
    the undetermined coefficients, see `quadellipse.linalg.solve_linear_system`.

    References
    ----------
    [1] Zhang 1993, Estimating Projective Transformation Matrix (Collineation, Homography),
        Microsoft Research Techical Report MSR-TR-2010-63,
        https://www.microsoft.com/en-us/research/wp-content/uploads/2016/02/MSR-TR-2010-63.pdf
    """
    vertices = utils.sanitize_quadrilateral(vertices)
    M = np.zeros((8, 8))
    B = np.zeros(8)
    for i, ((u, v), (x, y)) in enumerate(zip(UNIT_SQUARE, vertices)):
        M[2*i] = [u, v, 1, 0, 0, 0, -u*x, -v*x]
        B[2*i] = x
        M[2*i + 1] = [0, 0, 0, u, v, 1, -u*y, -v*y]
        B[2*i + 1] = y
    h, degenerate = solve_linear_system(M, B, tol=tol, full_output=True)
    H = np.append(h, 1.).reshape(3, 3)
    if full_output:
        return H, degenerate
    return H


def _sanitize_matrix(H):
    H = np.asarray(H, dtype=float)
    if H.shape != (3, 3):
        raise ValueError(f"Projective transformation must be a 3x3 matrix. Input shape: {H.shape}")
    return H


def invert_projective_matrix(H, tol=None):
    """Invert a 3x3 projective transformation matrix without renormalizing it.

    Parameters
    ----------
    H: array-like
        3 x 3 matrix.
    tol: `float`, optional
        Determinants with a magnitude below this are treated as zero.
        Defaults to `quadellipse.config.TOLERANCE`.

    Returns
    -------
    H_inv: `numpy.ndarray`
        The exact matrix inverse. Its [2, 2] entry is generally not 1.
        Suitable wherever the overall scale is irrelevant, e.g. transforming
        conics and lines. Use `invert_homography` for mapping points.

    Raises
    ------
    NonInvertibleError
        If the determinant of H is below tol in magnitude.

    Notes
    -----
    The determinant is found by cofactor expansion along the first row and
    the inverse is the adjugate (transpose of the cofactor matrix) divided by it.
    """
    H = _sanitize_matrix(H)
    tol = get_tolerance(tol)
    (a, b, c), (d, e, f), (g, h, i) = H
    # Cofactors of the first row.
    c00 = e*i - f*h
    c01 = -(d*i - f*g)
    c02 = d*h - e*g
    det = a*c00 + b*c01 + c*c02
    if abs(det) < tol:
        raise NonInvertibleError(f"Matrix is singular to within tolerance {tol}. det: {det}")
    # Remaining cofactors.
    c10 = -(b*i - c*h)
    c11 = a*i - c*g
    c12 = -(a*h - b*g)
    c20 = b*f - c*e
    c21 = -(a*f - c*d)
    c22 = a*e - b*d
    adjugate = np.array([[c00, c10, c20],
                         [c01, c11, c21],
                         [c02, c12, c22]])
    return adjugate / det


def invert_homography(H, tol=None):
    """Invert a homography and normalize the result so its [2, 2] entry is 1.

    This is the inverse to use for mapping points back through H.

    Raises
    ------
    NonInvertibleError
        If H is singular, or if the [2, 2] entry of its inverse is zero, i.e. the
        inverse maps the origin to infinity and cannot be normalized.
    """
    tol = get_tolerance(tol)
    H_inv = invert_projective_matrix(H, tol=tol)
    if abs(H_inv[2, 2]) < tol:
        raise NonInvertibleError("Inverse homography cannot be normalized; "
                                 f"its [2, 2] entry is {H_inv[2, 2]}.")
    return H_inv / H_inv[2, 2]


def apply_homography(H, points):
    """Map x-y points through a homography.

    Parameters
    ----------
    H: array-like
        3 x 3 homography acting on column vectors (x, y, 1).
    points: array-like
        Length-2 point or N x 2 array of points.

    Returns
    -------
    `numpy.ndarray`
        The mapped points with the same shape as the input.
        Points mapped to infinity give inf or nan components.
    """
    H = _sanitize_matrix(H)
    points = np.asarray(points, dtype=float)
    if points.ndim not in (1, 2) or points.shape[-1] != 2:
        raise ValueError(f"points must have shape (2,) or (N, 2). Input shape: {points.shape}")
    hom_points = utils.convert_to_homogeneous_coords(points)
    mapped = hom_points @ H.T
    return utils.convert_from_homogeneous_coords(mapped)
