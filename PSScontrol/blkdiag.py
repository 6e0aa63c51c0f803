import numpy as np

from .errors import ShapeMismatchError


def blkdiag(*mats):
    """
    Block-diagonal assembly of matrices.

    Parameters
    ----------
    *mats : array-like
        Matrices (or scalars / 1-D rows) of possibly different numeric types

    Returns
    -------
    M : ndarray
        Matrix with the k-th argument on the k-th diagonal block and zeros
        elsewhere. The element type is the promoted type of all arguments.
        An empty 0 x 0 float matrix when called without arguments.
    """
    if not mats:
        return np.zeros((0, 0))

    mats = [_as_matrix(M) for M in mats]
    rows = [M.shape[0] for M in mats]
    cols = [M.shape[1] for M in mats]
    dtype = np.result_type(*mats)

    res = np.zeros((sum(rows), sum(cols)), dtype=dtype)
    i = j = 0
    for M, r, c in zip(mats, rows, cols):
        res[i:i + r, j:j + c] = M
        i += r
        j += c
    return res


def _as_matrix(M):
    M = np.atleast_2d(np.asarray(M))
    if M.ndim != 2:
        raise ShapeMismatchError(f"Expected a matrix, got an array with shape {M.shape}")
    if not (np.issubdtype(M.dtype, np.number) or M.dtype == np.bool_):
        raise TypeError(f"Expected a numeric matrix, got dtype {M.dtype}")
    return M
