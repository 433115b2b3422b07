"""
Two-dimensional Chebyshev interpolation.

Builds the tensor-product Chebyshev expansion passing through a grid of
samples and evaluates it anywhere in the plane. Samples are expected on
Chebyshev-Lobatto nodes (see `opacity_tables.core.domain.chebygrid`), where
the expansion is well conditioned, but any strictly ascending nodes work.
"""

import numpy as np
from numpy.polynomial import chebyshev as C


class BichebyshevInterpolator:
    """Chebyshev interpolant of a function sampled on a rectangular grid.

    Parameters
    ----------
    x : array_like
        Strictly ascending nodes along the first axis, shape (nx,)
    y : array_like
        Strictly ascending nodes along the second axis, shape (ny,)
    Z : array_like
        Samples, shape (nx, ny), with Z[i, j] = f(x[i], y[j])

    Notes
    -----
    Evaluation outside [x[0], x[-1]] x [y[0], y[-1]] extrapolates the
    polynomial; nothing is clamped.
    """

    def __init__(self, x, y, Z):
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        Z = np.asarray(Z, dtype=np.float64)

        if x.ndim != 1 or y.ndim != 1:
            raise ValueError("interpolation nodes must be one-dimensional")
        if Z.shape != (x.size, y.size):
            raise ValueError(
                f"sample grid shape {Z.shape} does not match nodes ({x.size}, {y.size})"
            )
        if x.size < 2 or y.size < 2:
            raise ValueError("at least 2 nodes are required along each axis")
        if np.any(np.diff(x) <= 0) or np.any(np.diff(y) <= 0):
            raise ValueError("interpolation nodes must be strictly ascending")

        self.xa, self.xb = float(x[0]), float(x[-1])
        self.ya, self.yb = float(y[0]), float(y[-1])

        # Z = Vx @ A @ Vy.T  ->  A = Vx^-1 @ Z @ Vy^-T
        Vx = C.chebvander(self._map(x, self.xa, self.xb), x.size - 1)
        Vy = C.chebvander(self._map(y, self.ya, self.yb), y.size - 1)
        A = np.linalg.solve(Vx, Z)
        self.coef = np.linalg.solve(Vy, A.T).T

    @classmethod
    def from_coefficients(cls, coef, xbounds, ybounds) -> "BichebyshevInterpolator":
        """Rebuild an interpolant from stored expansion coefficients."""
        obj = cls.__new__(cls)
        obj.xa, obj.xb = float(xbounds[0]), float(xbounds[1])
        obj.ya, obj.yb = float(ybounds[0]), float(ybounds[1])
        obj.coef = np.array(coef, dtype=np.float64)
        return obj

    @staticmethod
    def _map(v, a, b):
        return 2.0 * (v - a) / (b - a) - 1.0

    @property
    def shape(self):
        """Number of coefficients along each axis."""
        return self.coef.shape

    def __call__(self, x, y):
        """Evaluate the interpolant at (x, y); scalars or broadcastable arrays."""
        xi = self._map(x, self.xa, self.xb)
        eta = self._map(y, self.ya, self.yb)
        return C.chebval2d(xi, eta, self.coef)

    def __eq__(self, other):
        if not isinstance(other, BichebyshevInterpolator):
            return NotImplemented
        return (
            (self.xa, self.xb, self.ya, self.yb) == (other.xa, other.xb, other.ya, other.yb)
            and np.array_equal(self.coef, other.coef)
        )

    __hash__ = None
