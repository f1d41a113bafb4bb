from collections import namedtuple

import numpy as np

from quadellipse.config import get_tolerance
from quadellipse.transformations import invert_projective_matrix

EllipseParameters = namedtuple("EllipseParameters", ["cx", "cy", "rx", "ry", "angle"])
EllipseParameters.__doc__ = """Center, semi-axes and rotation of an ellipse.

rx is the semi-axis along the primary axis, which is rotated anti-clockwise
from the x-axis by angle (in degrees). ry is the semi-axis perpendicular to it.
"""


def conic_matrix(a, b, d, g, f, c):
    """
    Build the symmetric matrix of the conic a x^2 + 2d xy + b y^2 + 2g x + 2f y + c = 0.

    The point (x, y) lies on the conic if [x y 1] C [x y 1]^T = 0.
    """
    return np.array([[a, d, g],
                     [d, b, f],
                     [g, f, c]], dtype=float)


def conic_coefficients(C):
    """Return the coefficients (a, b, d, g, f, c) of a conic matrix. See `conic_matrix`."""
    C = _sanitize_conic(C)
    return C[0, 0], C[1, 1], C[0, 1], C[0, 2], C[1, 2], C[2, 2]


# Circle inscribed in the unit square: (u - 0.5)^2 + (v - 0.5)^2 = 0.25
UNIT_CIRCLE_CONIC = conic_matrix(1, 1, 0, -0.5, -0.5, 0.25)


def _sanitize_conic(C):
    C = np.asarray(C, dtype=float)
    if C.shape != (3, 3):
        raise ValueError(f"Conic must be a 3x3 matrix. Input shape: {C.shape}")
    return C


def transform_conic(C, H, tol=None):
    """Transform a conic through a point homography.

    Parameters
    ----------
    C: array-like
        3 x 3 symmetric conic matrix in the source plane.
    H: array-like
        3 x 3 homography mapping source points to target points.
    tol: `float`, optional
        Passed to `quadellipse.transformations.invert_projective_matrix`.

    Returns
    -------
    `numpy.ndarray`
        3 x 3 conic matrix in the target plane.

    Raises
    ------
    NonInvertibleError
        If H is singular.

    Notes
    -----
    If x = H u and the source conic is u^T C u = 0, substituting u = H^-1 x gives
        x^T (H^-T C H^-1) x = 0
    so the target conic is H^-T C H^-1.
    A conic is only defined up to scale, so the inverse need not be normalized.
    """
    C = _sanitize_conic(C)
    H_inv = invert_projective_matrix(H, tol=tol)
    return H_inv.T @ C @ H_inv


def normalize_conic(C):
    """Rescale a conic so the largest magnitude in its quadratic part is 1.

    The conic describes the same curve. Transformed conics of large quadrilaterals
    have tiny quadratic coefficients, e.g. ~1e-8 for coordinates ~1e4, which the
    absolute tolerances of `get_ellipse_parameters` would mistake for zero.
    A conic with no quadratic part is returned unchanged.
    """
    C = _sanitize_conic(C)
    scale = np.abs(C[:2, :2]).max()
    if scale == 0:
        return C
    return C / scale


def is_ellipse(C, tol=None):
    """
    Determine whether a conic is a real, non-degenerate ellipse.

    The quadratic part must be definite, a b - d^2 > 0, and the conic's value at
    its center must have the opposite sign to a. Otherwise the curve is a
    hyperbola, a parabola, a degenerate conic or an imaginary ellipse.
    """
    C = normalize_conic(C)
    tol = get_tolerance(tol)
    a, b, d = C[0, 0], C[1, 1], C[0, 1]
    det2 = a * b - d**2
    if det2 <= tol:
        return False
    # det(C) = det2 * (value of the conic at its center)
    return bool(a * np.linalg.det(C) < 0)


def get_ellipse_parameters(C, tol=None):
    """
    Calculate the center, semi-axes and rotation of the ellipse described by a conic.

    Parameters
    ----------
    C: array-like
        3 x 3 symmetric conic matrix. See `conic_matrix`.
    tol: `float`, optional
        Determinants and coefficients with a magnitude below this are treated as zero.
        Defaults to `quadellipse.config.TOLERANCE`.

    Returns
    -------
    `EllipseParameters`
        cx, cy: the center.
        rx, ry: the semi-axes along the primary and secondary axes.
        angle: the anti-clockwise rotation of the primary axis from the x-axis in degrees.

    Notes
    -----
    The conic is not checked to be an ellipse. Hyperbolae, parabolae and degenerate
    conics still give real non-negative semi-axes, or inf/nan where a rotated
    coefficient is zero, so results must be filtered by the caller,
    e.g. with `is_ellipse` or `quadellipse.elliptical.is_drawable`.
    Coefficients are compared against tol as given, so conics with very small
    quadratic coefficients should first be rescaled with `normalize_conic`.

    The center is where the gradient of the conic vanishes:
        [a d] [cx]   [-g]
        [d b] [cy] = [-f]
    If this system is singular, the center falls back to the origin.
    The value of the conic at the center, c', sets the scale of the axes.
    The rotation, theta, diagonalizes the quadratic part, i.e. tan(2 theta) = 2d / (a - b).
    When d is zero the conic is already axis-aligned and theta = 0; when a == b
    and d is nonzero, theta = 45 degrees.
    In the rotated frame the quadratic coefficients become
        A11 = a cos^2(theta) + 2d cos(theta) sin(theta) + b sin^2(theta)
        A22 = a sin^2(theta) - 2d sin(theta) cos(theta) + b cos^2(theta)
    and the semi-axes are sqrt(|c' / A11|) and sqrt(|c' / A22|).
    """
    a, b, d, g, f, c = conic_coefficients(C)
    tol = get_tolerance(tol)
    # Derive the center.
    det = a * b - d**2
    if abs(det) >= tol:
        cx = (b * -g - d * -f) / det
        cy = (-d * -g + a * -f) / det
    else:
        cx = cy = 0.
    # Conic value at the center.
    c_center = a * cx**2 + 2 * d * cx * cy + b * cy**2 + 2 * g * cx + 2 * f * cy + c
    # Derive rotation of the primary axis.
    if abs(d) < tol:
        theta = 0.
    elif abs(a - b) >= tol:
        theta = 0.5 * np.arctan2(2 * d, a - b)
    else:
        theta = np.pi / 4
    cos, sin = np.cos(theta), np.sin(theta)
    A11 = a * cos**2 + 2 * d * cos * sin + b * sin**2
    A22 = a * sin**2 - 2 * d * sin * cos + b * cos**2
    with np.errstate(divide="ignore", invalid="ignore"):
        rx = np.sqrt(np.abs(-c_center / A11))
        ry = np.sqrt(np.abs(-c_center / A22))
    return EllipseParameters(float(cx), float(cy), float(rx), float(ry), float(np.degrees(theta)))
