import logging

import numpy as np

from quadellipse.config import get_tolerance

logger = logging.getLogger(__name__)


def solve_linear_system(M, B, tol=None, overwrite=False, full_output=False):
    """Solve the square linear system M X = B by Gaussian elimination.

    Parameters
    ----------
    M: `numpy.ndarray`
        n x n coefficient matrix.
    B: `numpy.ndarray`
        Length-n right hand side vector.
    tol: `float`, optional
        Pivots with a magnitude below this are treated as zero.
        Defaults to `quadellipse.config.TOLERANCE`.
    overwrite: `bool`
        If True, M and B are used as the elimination buffers and are left in
        their reduced state. They must then be float arrays and must not be
        reused by the caller. If False (default) both are copied first.
    full_output: `bool`
        If True, also return a flag stating whether the system was degenerate.

    Returns
    -------
    X: `numpy.ndarray`
        Length-n solution vector.
    degenerate: `bool`
        Only returned if full_output is True. True if any pivot fell below tol.

    Notes
    -----
    Forward elimination uses partial pivoting: for each column i the row at or
    below i with the largest absolute value in that column is swapped into row i.
    If even that value is below tol, the column is skipped.
    Back-substitution then runs from the last row to the first.
    Unknowns whose pivot is below tol are set to 0 rather than raising,
    so singular systems return a solution with zeros in the undetermined directions.
    Use full_output=True to detect this case.
    """
    # Sanitize inputs.
    if overwrite:
        if not (isinstance(M, np.ndarray) and isinstance(B, np.ndarray)):
            raise TypeError("M and B must be numpy arrays if overwrite=True.")
        if not (np.issubdtype(M.dtype, np.floating) and np.issubdtype(B.dtype, np.floating)):
            raise TypeError("M and B must be float arrays if overwrite=True. "
                            f"M: {M.dtype}. B: {B.dtype}")
    else:
        M = np.array(M, dtype=float)
        B = np.array(B, dtype=float)
    if M.ndim != 2 or M.shape[0] != M.shape[1]:
        raise ValueError(f"M must be a square 2-D matrix. M: {M.shape}")
    n = M.shape[0]
    if B.shape != (n,):
        raise ValueError(f"B must be 1-D and the same length as M. M: {M.shape}. B: {B.shape}")
    tol = get_tolerance(tol)
    degenerate = False

    # Forward elimination with partial pivoting.
    for i in range(n):
        pivot_row = i + np.argmax(np.abs(M[i:, i]))
        if pivot_row != i:
            M[[i, pivot_row]] = M[[pivot_row, i]]
            B[[i, pivot_row]] = B[[pivot_row, i]]
        if abs(M[i, i]) < tol:
            degenerate = True
            continue
        for r in range(i + 1, n):
            factor = M[r, i] / M[i, i]
            M[r, i:] -= factor * M[i, i:]
            B[r] -= factor * B[i]

    # Back-substitution.
    X = np.zeros(n)
    for i in range(n - 1, -1, -1):
        if abs(M[i, i]) < tol:
            degenerate = True
            continue
        X[i] = (B[i] - M[i, i+1:] @ X[i+1:]) / M[i, i]

    if degenerate:
        logger.debug("Degenerate %dx%d linear system; undetermined unknowns set to 0.", n, n)
    if full_output:
        return X, degenerate
    return X
