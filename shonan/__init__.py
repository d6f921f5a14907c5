"""
shonan: rotations in n dimensions, SO(n), with a Cayley retraction and a Frobenius
prior cost function for pyceres.
"""

__version__ = version = "0.1.0"

# exposing the public API of the package
from shonan.son import SOn
from shonan.frobenius_prior import FrobeniusPrior, DimensionMismatchError

__all__ = [
    "SOn",
    "FrobeniusPrior",
    "DimensionMismatchError",
]
