"""Package-wide numerical settings."""
import math
import os

TOLERANCE_ENV_VAR = "QUADELLIPSE_TOLERANCE"


def _read_tolerance(default=1e-14):
    value = os.environ.get(TOLERANCE_ENV_VAR)
    if value is None:
        return default
    try:
        tol = float(value)
    except ValueError:
        raise ValueError(f"{TOLERANCE_ENV_VAR} must be a number. Got: {value!r}") from None
    return _check_tolerance(tol)


def _check_tolerance(tol):
    if not math.isfinite(tol) or tol < 0:
        raise ValueError(f"Tolerance must be a finite non-negative number. Got: {tol}")
    return tol


# Magnitude below which a pivot, determinant, cross product or coefficient
# is treated as zero.
TOLERANCE = _read_tolerance()


def get_tolerance(tol=None):
    """Return tol if given, otherwise the package-wide TOLERANCE."""
    if tol is None:
        return TOLERANCE
    return _check_tolerance(float(tol))
