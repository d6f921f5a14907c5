# lie.py
import math
from numpy import asarray as np_asarray
from numpy import eye as np_eye
from numpy import float64 as np_float64
from numpy import ndarray
from numpy.linalg import inv as np_inv
import numpy as np
from numba import njit

from numba.core.errors import NumbaPerformanceWarning
import warnings
warnings.filterwarnings("ignore", category=NumbaPerformanceWarning)


def dimension(n: int) -> int:
    """Dimension of the manifold SO(n), i.e. n(n-1)/2."""
    return n * (n - 1) // 2


def ambient_dim(d: int) -> int:
    """
    Recover the ambient size n from the manifold dimension d = n(n-1)/2.

    Solves n^2 - n - 2d = 0 for the positive root. An integer square root is used
    so that every triangular d maps back to its n exactly. Non-triangular d is not
    validated here; the truncated root is returned.

    Parameters:
        d (int): dimension of the Lie algebra (length of a tangent vector).

    Returns:
        int: the matrix size n.
    """
    return (1 + math.isqrt(1 + 8 * int(d))) // 2


@njit(cache=True)
def _hat(xi: ndarray, n: int) -> ndarray:
    # Fill so(2), so(3), ... so(n) bottom-up. Block k reads the trailing k(k-1)/2
    # entries of xi, of which the leading k-1 go into its last row and column.
    d = xi.shape[0]
    X = np.zeros((n, n), dtype=np_float64)
    for k in range(2, n + 1):
        dk = k * (k - 1) // 2
        offset = d - dk
        sign = -1.0 if dk % 2 else 1.0
        for i in range(k - 1):
            j = k - 2 - i
            X[k - 1, j] = -sign * xi[offset + i]
            X[j, k - 1] = -X[k - 1, j]
            sign = -sign
    return X


@njit(cache=True)
def _vee(X: ndarray) -> ndarray:
    n = X.shape[0]
    d = n * (n - 1) // 2
    xi = np.empty(d, dtype=np_float64)
    for k in range(2, n + 1):
        dk = k * (k - 1) // 2
        offset = d - dk
        sign = -1.0 if dk % 2 else 1.0
        for i in range(k - 1):
            j = k - 2 - i
            xi[offset + i] = -sign * X[k - 1, j]
            sign = -sign
    return xi


def hat(xi: ndarray) -> ndarray:
    """
    Create the skew-symmetric Lie algebra element corresponding to a d-vector.

    The d-vector is laid out such that the last element corresponds to so(2), the
    last 3 to so(3), the last 6 to so(4) etc. For example, the vector-space
    isomorphic to so(5) is laid out as:
        a b c d | u v w | x y | z
    where the latter elements correspond to "telescoping" sub-algebras:
         0 -z  y  w -d
         z  0 -x -v  c
        -y  x  0  u -b
        -w  v -u  0  a
         d -c  b -a  0
    For SO(2) and SO(3) this is the usual hat operator.

    Parameters:
        xi (ndarray): tangent vector of length n(n-1)/2.

    Returns:
        ndarray: n x n skew-symmetric matrix.

    Raises:
        ValueError: if n < 2, or the length of xi is not n(n-1)/2 for any n.
    """
    xi = np_asarray(xi, dtype=np_float64).reshape(-1)
    d = xi.shape[0]
    n = ambient_dim(d)
    if n < 2:
        raise ValueError(f"hat: n<2 not supported (got tangent vector of length {d})")
    if dimension(n) != d:
        raise ValueError(f"hat: {d} is not a valid so(n) dimension")
    return _hat(xi, n)


def vee(X: ndarray) -> ndarray:
    """Inverse of `hat`: read the tangent vector back out of a skew-symmetric matrix."""
    X = np_asarray(X, dtype=np_float64)
    if X.ndim != 2 or X.shape[0] != X.shape[1]:
        raise ValueError(f"vee: matrix must be square, got shape {X.shape}")
    if X.shape[0] < 2:
        raise ValueError("vee: n<2 not supported")
    return _vee(np.ascontiguousarray(X))


def cayley(X: ndarray) -> ndarray:
    """Cayley transform (I + X)(I - X)^-1, mapping skew-symmetric X into SO(n)."""
    I = np_eye(X.shape[0], dtype=np_float64)
    return (I + X) @ np_inv(I - X)


def inverse_cayley(R: ndarray) -> ndarray:
    """
    Inverse Cayley transform (R - I)(R + I)^-1.

    Only defined when R has no eigenvalue -1 (rotations by less than pi).
    """
    I = np_eye(R.shape[0], dtype=np_float64)
    return (R - I) @ np_inv(R + I)
