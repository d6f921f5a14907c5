"""Frobenius prior: minimizes the Frobenius error to a given "prior mean" matrix."""

import logging

import numpy as np
import pyceres
from numpy import asarray as np_asarray
from numpy import eye as np_eye
from numpy import float64 as np_float64
from numpy import ndarray

from shonan import lie
from shonan.son import SOn

logger = logging.getLogger(__name__)


class DimensionMismatchError(ValueError):
    """A parameter buffer does not match the size registered by a cost function."""


class FrobeniusPrior(pyceres.CostFunction):
    """
    Element-wise error between an SO(n) variable and a fixed n x n prior mean.

    The variable is a single parameter block holding the n x n rotation matrix in
    column order (the layout of `SOn.vec`). There are n*n residuals, in the same
    order, so the squared norm of the residual is ||R - M||_F^2.
    """

    def __init__(self, mean: ndarray) -> None:
        super().__init__()
        mean = np.array(mean, dtype=np_float64, copy=True)
        if mean.ndim != 2 or mean.shape[0] != mean.shape[1]:
            raise ValueError(f"prior mean must be n x n, got shape {mean.shape}")
        mean.flags.writeable = False
        self.mean = mean
        self.n = mean.shape[0]
        self.nn = self.n * self.n
        self.dim = lie.dimension(self.n)
        self.set_num_residuals(self.nn)  # elements in Frobenius norm
        self.set_parameter_block_sizes([self.nn])  # elements in SO(n) matrix
        logger.debug("FrobeniusPrior on SO(%d): %d residuals, block size %d", self.n, self.nn, self.nn)

    @classmethod
    def from_rotation(cls, rotation: SOn) -> "FrobeniusPrior":
        return cls(rotation.matrix)

    def _as_matrix(self, values: ndarray) -> ndarray:
        values = np_asarray(values, dtype=np_float64).reshape(-1)
        if values.shape[0] != self.nn:
            raise DimensionMismatchError(
                f"expected parameter block of size {self.nn}, got {values.shape[0]}")
        return values.reshape((self.n, self.n), order="F")

    def evaluate(self, values: ndarray, jacobian: bool = False):
        """
        Evaluate the Frobenius error for a column-ordered n x n matrix.

        Args:
            values: flat parameter block of length n*n.
            jacobian: also return the (n*n x n*n) Jacobian of the residuals.

        Returns:
            residuals, or (residuals, jacobian) if jacobian is requested.

        Raises:
            DimensionMismatchError: if values does not hold n*n entries.
        """
        R = self._as_matrix(values)
        # column j outer, row i inner
        error = (R - self.mean).flatten(order="F")
        if not jacobian:
            return error
        # the error is linear in R with unit coefficients
        return error, np_eye(self.nn, dtype=np_float64)

    def cost(self, values: ndarray) -> float:
        """Scalar cost 0.5 * ||R - M||_F^2, as reported by ceres."""
        error = self.evaluate(values)
        return 0.5 * float(error @ error)

    def Evaluate(self, parameters, residuals, jacobians) -> bool:
        if len(parameters) != 1:
            logger.error("FrobeniusPrior expects 1 parameter block, got %d", len(parameters))
            return False
        try:
            error = self.evaluate(parameters[0])
        except DimensionMismatchError as e:
            logger.error("FrobeniusPrior: %s", e)
            return False
        residuals[:] = error

        # Compute the Jacobian if asked for, row-major n*n x n*n.
        if jacobians is not None and jacobians[0] is not None:
            jacobians[0][:] = np_eye(self.nn, dtype=np_float64).ravel()
        return True
