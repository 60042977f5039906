"""
Mercer kernels usable by the kernel-based algorithm families.

Called with two matrices a kernel returns the Gram matrix (what ``SVC``
expects from a callable kernel); called with two vectors it returns a
scalar (what ``pairwise_kernels`` passes to a callable metric).
"""

from typing import Annotated, Literal, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field
from scipy.spatial.distance import cdist
from sklearn.metrics.pairwise import linear_kernel, polynomial_kernel, rbf_kernel, sigmoid_kernel


class BaseKernel(BaseModel):
    # Hashable, scikit-learn looks callables up in its metric tables
    model_config = ConfigDict(frozen=True)

    def gram(self, X: np.ndarray, Y: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def __call__(self, x, y, **kwargs):
        x = np.asarray(x, dtype=float)
        y = np.asarray(y, dtype=float)
        if x.ndim == 1 and y.ndim == 1:
            return float(self.gram(x.reshape(1, -1), y.reshape(1, -1))[0, 0])
        return self.gram(np.atleast_2d(x), np.atleast_2d(y))


class GaussianKernel(BaseKernel):
    """k(x, y) = exp(-||x - y||^2 / (2 * sigma^2))"""

    kind: Literal["gaussian"] = "gaussian"
    sigma: float = Field(default=0.01, gt=0.0)

    def gram(self, X, Y):
        return rbf_kernel(X, Y, gamma=1.0 / (2.0 * self.sigma ** 2))


class LaplacianKernel(BaseKernel):
    """k(x, y) = exp(-||x - y|| / sigma)"""

    kind: Literal["laplacian"] = "laplacian"
    sigma: float = Field(default=0.01, gt=0.0)

    def gram(self, X, Y):
        return np.exp(-cdist(X, Y, metric="euclidean") / self.sigma)


class PolynomialKernel(BaseKernel):
    """k(x, y) = (scale * <x, y> + offset)^degree"""

    kind: Literal["polynomial"] = "polynomial"
    degree: int = Field(default=2, ge=1)
    scale: float = Field(default=1.0, gt=0.0)
    offset: float = Field(default=0.0, ge=0.0)

    def gram(self, X, Y):
        return polynomial_kernel(X, Y, degree=self.degree, gamma=self.scale, coef0=self.offset)


class HellingerKernel(BaseKernel):
    """k(x, y) = sum_i sqrt(x_i * y_i), for non-negative data."""

    kind: Literal["hellinger"] = "hellinger"

    def gram(self, X, Y):
        return np.sqrt(np.asarray(X, dtype=float)) @ np.sqrt(np.asarray(Y, dtype=float)).T


class PearsonKernel(BaseKernel):
    """Pearson VII universal kernel."""

    kind: Literal["pearson"] = "pearson"
    omega: float = Field(default=1.0, gt=0.0)
    sigma: float = Field(default=1.0, gt=0.0)

    def gram(self, X, Y):
        d = cdist(X, Y, metric="euclidean")
        c = 2.0 * np.sqrt(2.0 ** (1.0 / self.omega) - 1.0) / self.sigma
        return 1.0 / (1.0 + (c * d) ** 2) ** self.omega


class LinearKernel(BaseKernel):
    kind: Literal["linear"] = "linear"

    def gram(self, X, Y):
        return linear_kernel(X, Y)


class HyperbolicTangentKernel(BaseKernel):
    """k(x, y) = tanh(scale * <x, y> + offset)"""

    kind: Literal["tanh"] = "tanh"
    scale: float = 1.0
    offset: float = 0.0

    def gram(self, X, Y):
        return sigmoid_kernel(X, Y, gamma=self.scale, coef0=self.offset)


Kernel = Annotated[
    Union[
        GaussianKernel,
        LaplacianKernel,
        PolynomialKernel,
        HellingerKernel,
        PearsonKernel,
        LinearKernel,
        HyperbolicTangentKernel,
    ],
    Field(discriminator="kind"),
]
