import logging

import numpy as np

from quadellipse import conics, transformations, utils

logger = logging.getLogger(__name__)


def inscribe_ellipse(vertices, tol=None):
    """Derive the ellipse inscribed in a convex quadrilateral.

    Parameters
    ----------
    vertices: array-like
        4 x 2 x-y coordinates of the quadrilateral vertices, p0, p1, p2, p3,
        in traversal order. The quadrilateral should be convex, see `quadellipse.utils.is_convex`.
    tol: `float`, optional
        Numerical tolerance passed to every stage.
        Defaults to `quadellipse.config.TOLERANCE`.

    Returns
    -------
    `quadellipse.conics.EllipseParameters`
        Center, semi-axes and rotation (degrees) of the ellipse.
        Check the result with `is_drawable` before using it; degenerate
        quadrilaterals can produce zero, infinite or nan semi-axes.

    Raises
    ------
    NonInvertibleError
        If the homography from the unit square to the quadrilateral is singular,
        in which case no ellipse can be computed.

    Notes
    -----
    Outline
    The quadrilateral is treated as the image of the unit square under a
    projective transformation (homography), H. Projective transformations preserve
    incidence and tangency, so the image of the circle inscribed in the unit square,
    (u - 0.5)^2 + (v - 0.5)^2 = 0.25, is a conic tangent to all four sides
    of the quadrilateral. For a convex quadrilateral that conic is an ellipse.

    Pipeline
    1. H is derived from the 4 vertex correspondences.
    2. The unit-circle conic is transformed to the quadrilateral's plane via H^-T C H^-1.
    3. The transformed conic is rescaled so its largest quadratic coefficient is 1.
       Otherwise the coefficients shrink with the square of the quadrilateral size
       and fall below the absolute tolerance for coordinates of order 1e4.
    4. The center, semi-axes and tilt are extracted from the rescaled conic.

    References
    ----------
    [1] Zhang 1993, Estimating Projective Transformation Matrix (Collineation, Homography),
        Microsoft Research Techical Report MSR-TR-2010-63,
        https://www.microsoft.com/en-us/research/wp-content/uploads/2016/02/MSR-TR-2010-63.pdf
    [2] Hartley & Zisserman 2004, Multiple View Geometry in Computer Vision, 2nd ed.,
        Section 2.2.3, Conics and dual conics.
    """
    vertices = utils.sanitize_quadrilateral(vertices)
    if not utils.is_convex(vertices, tol=tol):
        logger.warning("Quadrilateral is not convex; inscribed ellipse will not be meaningful. "
                       "Vertices: %s", vertices.tolist())
    H, degenerate = transformations.derive_homography_from_unit_square(
        vertices, tol=tol, full_output=True)
    if degenerate:
        logger.debug("Homography for vertices %s derived from a degenerate system.",
                     vertices.tolist())
    C = conics.normalize_conic(conics.transform_conic(conics.UNIT_CIRCLE_CONIC, H, tol=tol))
    params = conics.get_ellipse_parameters(C, tol=tol)
    logger.debug("Inscribed ellipse: %s", params)
    return params


def is_drawable(params, conic=None, tol=None):
    """
    Determine whether ellipse parameters can be drawn.

    Parameters
    ----------
    params: `quadellipse.conics.EllipseParameters`
        Output of `inscribe_ellipse` or `quadellipse.conics.get_ellipse_parameters`.
    conic: array-like, optional
        The 3 x 3 conic params were extracted from. If given, it must also be a
        real ellipse, see `quadellipse.conics.is_ellipse`.
    tol: `float`, optional
        Passed to `quadellipse.conics.is_ellipse`.

    Returns
    -------
    `bool`
        True if the center and semi-axes are finite and the semi-axes strictly positive.

    Notes
    -----
    Without conic, only the parameters themselves are checked. Hyperbolae also
    give finite positive semi-axes, e.g. x^2 - y^2 - 1 = 0 gives rx = ry = 1,
    so pass the conic to reject them.
    """
    cx, cy, rx, ry, angle = params
    drawable = bool(np.isfinite([cx, cy, rx, ry, angle]).all() and rx > 0 and ry > 0)
    if drawable and conic is not None:
        drawable = conics.is_ellipse(conic, tol=tol)
    return drawable


def parametric_ellipse_angled(h, k, a, b, theta, phi):
    """
    Return x-y coordinate on the point on an ellipse at an angle phi from the semi-major axis.

    Parameters
    ----------
    h, k: `float` or `numpy.ndarray`
        The center of the ellipse(s)
    a, b: `float` or `numpy.ndarray`
        The semi-axes of the ellipse along its primary and secondary axes.
    theta: `float` or `numpy.ndarray`
        The rotation of the primary axis from the x-axis in radians.
    phi: `float` or `numpy.ndarray`
        The parametric angle, in radians, measured from the primary axis.

    Returns
    -------
    x, y: `numpy.ndarray`
        The x and y coordinates of the point on the ellipse.
    """
    x = h + a * np.cos(phi) * np.cos(theta) - b * np.sin(phi) * np.sin(theta)
    y = k + a * np.cos(phi) * np.sin(theta) + b * np.sin(phi) * np.cos(theta)
    return x, y


def get_ellipse_semi_axes_coords(params):
    """
    Calculate coords of one end of the primary and secondary semi-axes of an ellipse.

    Parameters
    ----------
    params: `quadellipse.conics.EllipseParameters`
        The ellipse.

    Returns
    -------
    primary_coord, secondary_coord: `numpy.ndarray`
        Length-2 x-y coordinates of the ends of the semi-axes of length rx and ry.
        Note that either may be the semi-major axis.
    """
    cx, cy, rx, ry, angle = params
    theta = np.radians(angle)
    ellipse_points = parametric_ellipse_angled(cx, cy, rx, ry, theta, np.array([0, np.pi / 2]))
    xy = np.stack(ellipse_points, axis=-1)
    return xy[0], xy[1]
