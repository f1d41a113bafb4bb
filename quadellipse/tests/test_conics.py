import numpy as np
import pytest

from quadellipse import conics
from quadellipse.elliptical import is_drawable
from quadellipse.transformations import NonInvertibleError


def _ellipse_conic(cx, cy, rx, ry, angle):
    """Conic matrix of an ellipse with the given parameters; angle in degrees."""
    theta = np.radians(angle)
    R = np.array([[np.cos(theta), -np.sin(theta)],
                  [np.sin(theta), np.cos(theta)]])
    Q = R @ np.diag([1 / rx**2, 1 / ry**2]) @ R.T
    center = np.array([cx, cy])
    C = np.empty((3, 3))
    C[:2, :2] = Q
    C[:2, 2] = C[2, :2] = -Q @ center
    C[2, 2] = center @ Q @ center - 1
    return C


def test_conic_matrix():
    C = conics.conic_matrix(1, 2, 3, 4, 5, 6)
    expected = np.array([[1, 3, 4],
                         [3, 2, 5],
                         [4, 5, 6]])
    assert np.allclose(C, expected)
    assert np.allclose(conics.conic_coefficients(C), [1, 2, 3, 4, 5, 6])


def test_unit_circle_conic():
    # Points on the circle inscribed in the unit square satisfy the conic.
    phi = np.linspace(0, 2 * np.pi, 9)
    points = np.stack([0.5 + 0.5 * np.cos(phi), 0.5 + 0.5 * np.sin(phi), np.ones(9)], axis=-1)
    values = np.einsum("ni,ij,nj->n", points, conics.UNIT_CIRCLE_CONIC, points)
    assert np.allclose(values, 0)


def test_transform_conic_identity():
    output = conics.transform_conic(conics.UNIT_CIRCLE_CONIC, np.eye(3))
    assert np.allclose(output, conics.UNIT_CIRCLE_CONIC)


def test_transform_conic_affine():
    H = np.array([[2, 0, 1],
                  [0, 3, 2],
                  [0, 0, 1]])
    C = conics.transform_conic(conics.UNIT_CIRCLE_CONIC, H)
    output = conics.get_ellipse_parameters(C)
    assert np.allclose(output, [2, 3.5, 1, 1.5, 0])


def test_transform_conic_scale_invariant():
    H = np.array([[1.3, 0.2, 6],
                  [0.15, 1.2, 4],
                  [0.015, 0.01, 1.]])
    output1 = conics.get_ellipse_parameters(conics.transform_conic(conics.UNIT_CIRCLE_CONIC, H))
    output2 = conics.get_ellipse_parameters(
        conics.transform_conic(conics.UNIT_CIRCLE_CONIC, 5 * H))
    assert np.allclose(output1, output2)


def test_transform_conic_singular():
    with pytest.raises(NonInvertibleError):
        conics.transform_conic(conics.UNIT_CIRCLE_CONIC, np.zeros((3, 3)))


def test_get_ellipse_parameters_unit_circle():
    output = conics.get_ellipse_parameters(conics.UNIT_CIRCLE_CONIC)
    assert isinstance(output, conics.EllipseParameters)
    assert np.allclose(output, [0.5, 0.5, 0.5, 0.5, 0])


def test_get_ellipse_parameters_axis_aligned():
    # Wider than tall: primary axis stays along x.
    output = conics.get_ellipse_parameters(_ellipse_conic(-1, 2, 5, 2, 0))
    assert np.allclose(output, [-1, 2, 5, 2, 0])
    output = conics.get_ellipse_parameters(_ellipse_conic(-1, 2, 2, 5, 0))
    assert np.allclose(output, [-1, 2, 2, 5, 0])


def test_get_ellipse_parameters_rotated():
    C = _ellipse_conic(1, -2, 3, 1, 30)
    output = conics.get_ellipse_parameters(C)
    # Same ellipse described from its other axis.
    assert np.allclose(output, [1, -2, 1, 3, -60])


def test_get_ellipse_parameters_45_degrees():
    # a == b with a nonzero cross term.
    C = conics.conic_matrix(0.625, 0.625, -0.375, 0, 0, -1)
    output = conics.get_ellipse_parameters(C)
    assert np.allclose(output, [0, 0, 2, 1, 45])


def test_get_ellipse_parameters_scale_invariant():
    C = _ellipse_conic(3, 4, 2, 0.5, 10)
    assert np.allclose(conics.get_ellipse_parameters(C),
                       conics.get_ellipse_parameters(7 * C))


def test_get_ellipse_parameters_parabola():
    # y = x^2 has no center; the result must not raise but is not drawable.
    C = conics.conic_matrix(1, 0, 0, 0, -0.5, 0)
    output = conics.get_ellipse_parameters(C)
    assert output.cx == 0 and output.cy == 0
    assert not is_drawable(output)


def test_get_ellipse_parameters_bad_shape():
    with pytest.raises(ValueError):
        conics.get_ellipse_parameters(np.eye(2))


def test_normalize_conic():
    C = 1e-9 * _ellipse_conic(3, 4, 2, 0.5, 10)
    output = conics.normalize_conic(C)
    assert np.isclose(np.abs(output[:2, :2]).max(), 1)
    # Positive rescaling keeps the sign of every coefficient.
    assert np.allclose(output * np.abs(C[:2, :2]).max(), C)
    line = conics.conic_matrix(0, 0, 0, 1, 1, 0)
    assert np.array_equal(conics.normalize_conic(line), line)


def test_get_ellipse_parameters_small_coefficients():
    # Conic of a 10000 x 10000 square's inscribed circle as produced by transform_conic.
    C = conics.conic_matrix(1e-8, 1e-8, 0, -5e-5, -5e-5, 0.25)
    # The unscaled center determinant, 1e-16, is below the default tolerance.
    assert conics.get_ellipse_parameters(C)[:2] == (0, 0)
    output = conics.get_ellipse_parameters(conics.normalize_conic(C))
    assert np.allclose(output, [5000, 5000, 5000, 5000, 0])


@pytest.mark.parametrize("C, expected", [
    (_ellipse_conic(1, -2, 3, 1, 30), True),
    (-_ellipse_conic(1, -2, 3, 1, 30), True),
    (1e-10 * conics.UNIT_CIRCLE_CONIC, True),
    (conics.conic_matrix(1, -1, 0, 0, 0, -1), False),  # hyperbola
    (conics.conic_matrix(1, 0, 0, 0, -0.5, 0), False),  # parabola
    (conics.conic_matrix(1, 1, 0, 0, 0, 1), False),  # imaginary
    (conics.conic_matrix(1, 1, 0, 0, 0, 0), False),  # single point
])
def test_is_ellipse(C, expected):
    assert conics.is_ellipse(C) is expected
