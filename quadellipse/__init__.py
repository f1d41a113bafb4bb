"""Ellipses inscribed in convex quadrilaterals via projective transformations."""
from .config import TOLERANCE, get_tolerance
from .linalg import solve_linear_system
from .transformations import (
    UNIT_SQUARE,
    NonInvertibleError,
    apply_homography,
    derive_homography_from_unit_square,
    invert_homography,
    invert_projective_matrix,
)
from .conics import (
    UNIT_CIRCLE_CONIC,
    EllipseParameters,
    conic_coefficients,
    conic_matrix,
    get_ellipse_parameters,
    is_ellipse,
    normalize_conic,
    transform_conic,
)
from .utils import get_diagonal_midpoints, is_convex
from .elliptical import (
    get_ellipse_semi_axes_coords,
    inscribe_ellipse,
    is_drawable,
    parametric_ellipse_angled,
)

__version__ = "0.1.0"
