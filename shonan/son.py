# son.py

# Rotations in n dimensions, SO(n), represented by their n x n matrix.

from numpy import array as np_array
from numpy import asarray as np_asarray
from numpy import allclose as np_allclose
from numpy import array2string as np_array2string
from numpy import array_equal as np_array_equal
from numpy import eye as np_eye
from numpy import float64 as np_float64
from numpy import ndarray
from numpy.linalg import det as np_det
import numpy as np

from typing import Optional, Union
from shonan import lie


class SOn:
    """
    An element of the rotation manifold SO(n), for arbitrary n.

    The rotation is stored as its n x n ambient matrix. Orthogonality is assumed,
    not enforced; use `is_orthogonal` to check it.

    Attributes:
        matrix (ndarray): read-only n x n rotation matrix.
    """
    __slots__ = ("_matrix",)

    def __init__(self, matrix: Union[ndarray, list, tuple]):
        matrix = np_array(matrix, dtype=np_float64, copy=True)
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise ValueError(f"Invalid matrix shape: {matrix.shape}, must be n x n")
        matrix.flags.writeable = False
        self._matrix = matrix

    @classmethod
    def identity(cls, n: int) -> "SOn":
        """
        Create the identity rotation in n dimensions.

        Returns:
            A new SOn whose `matrix` is the n x n identity matrix.
        """
        return cls(np_eye(n, dtype=np_float64))

    @classmethod
    def random(cls, n: int, rng: Optional[Union[int, np.random.Generator]] = None, scale: float = 0.1) -> "SOn":
        """
        Create a random rotation by retracting a Gaussian tangent vector.

        Args:
            n: ambient dimension.
            rng: seed or numpy Generator.
            scale: standard deviation of each tangent vector component.

        Returns:
            A new SOn near the identity (for small scale).
        """
        rng = np.random.default_rng(rng)
        xi = rng.normal(scale=scale, size=lie.dimension(n))
        return cls.retract(xi)

    @property
    def matrix(self) -> ndarray:
        """The n x n rotation matrix (read-only)."""
        return self._matrix

    @property
    def n(self) -> int:
        """Ambient dimension n."""
        return self._matrix.shape[0]

    @property
    def dim(self) -> int:
        """Manifold dimension n(n-1)/2."""
        return lie.dimension(self.n)

    def vec(self, jacobian: bool = False) -> ndarray:
        """
        Return the rotation matrix vectorized in column order.

        Args:
            jacobian: request the derivative of the vectorization with respect to the
                tangent space. Not supported.

        Returns:
            length n*n vector.

        Raises:
            NotImplementedError: if jacobian is requested.
        """
        if jacobian:
            # would be (I \oplus Q) * P with P the basis of the Lie algebra
            raise NotImplementedError("SOn.vec jacobian not implemented.")
        return self._matrix.flatten(order="F")

    ###########
    # Manifold
    #

    @staticmethod
    def dimension(n: int) -> int:
        return lie.dimension(n)

    @staticmethod
    def ambient_dim(d: int) -> int:
        return lie.ambient_dim(d)

    @staticmethod
    def hat(xi: ndarray) -> ndarray:
        return lie.hat(xi)

    @staticmethod
    def vee(X: ndarray) -> ndarray:
        return lie.vee(X)

    @classmethod
    def retract(cls, xi: ndarray, jacobian: bool = False) -> "SOn":
        """
        Retract a tangent vector at the identity onto SO(n) using the Cayley transform.

        With X = hat(xi / 2), the result is (I + X)(I - X)^-1. This agrees with the
        exponential map to first order and returns the identity exactly at xi = 0.

        Args:
            xi: tangent vector of length n(n-1)/2.
            jacobian: request the derivative of the retraction. Not supported.

        Returns:
            A new SOn.

        Raises:
            ValueError: if xi does not describe an so(n) with n >= 2.
            NotImplementedError: if jacobian is requested.
        """
        if jacobian:
            raise NotImplementedError("SOn.retract jacobian not implemented.")
        X = lie.hat(np_asarray(xi, dtype=np_float64) / 2.0)
        return cls(lie.cayley(X))

    @staticmethod
    def local_coordinates(R: Union["SOn", ndarray]) -> ndarray:
        """
        Inverse of `retract`: the tangent vector xi with retract(xi) == R.

        Only defined for rotations without an eigenvalue of -1.
        """
        if isinstance(R, SOn):
            R = R.matrix
        R = np_asarray(R, dtype=np_float64)
        return 2.0 * lie.vee(lie.inverse_cayley(R))

    def local(self, other: "SOn") -> ndarray:
        """Tangent vector at self that retracts onto other, i.e. self * retract(xi) == other."""
        return self.local_coordinates(self.between(other))

    ###########
    # Group
    #

    def compose(self, other: "SOn") -> "SOn":
        if self.n != other.n:
            raise ValueError(f"Cannot compose SO({self.n}) with SO({other.n})")
        return self.__class__(self._matrix @ other.matrix)

    def inverse(self) -> "SOn":
        return self.__class__(self._matrix.T)

    def between(self, other: "SOn") -> "SOn":
        """Relative rotation self^-1 * other."""
        return self.inverse().compose(other)

    def is_orthogonal(self, tol: float = 1e-9) -> bool:
        """Check R^T R == I and det(R) == +1 to within tol."""
        R = self._matrix
        if not np_allclose(R.T @ R, np_eye(self.n), atol=tol):
            return False
        return abs(np_det(R) - 1.0) <= tol

    ###########
    # Dunder methods
    #

    def __matmul__(self, other: Union["SOn", ndarray]) -> Union["SOn", ndarray]:
        if isinstance(other, SOn):
            return self.compose(other)
        return self._matrix @ np_asarray(other, dtype=np_float64)

    def __eq__(self, other) -> bool:
        if not isinstance(other, self.__class__):
            return False
        return bool(np_array_equal(self._matrix, other._matrix))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(n={self.n}, matrix={np_array2string(self._matrix, precision=4, separator=', ')})"

    def __copy__(self) -> "SOn":
        # the matrix is read-only, so sharing it is safe
        instance = object.__new__(self.__class__)
        instance._matrix = self._matrix
        return instance

    def __deepcopy__(self, memo) -> "SOn":
        return self.__class__(self._matrix)

    def __reduce__(self):
        return (self.__class__, (self._matrix.copy(),))
