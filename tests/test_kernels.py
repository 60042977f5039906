import math

import numpy as np
import pytest
from pydantic import BaseModel, ValidationError

from tabbridge.math import (
    EuclideanDistance,
    GaussianKernel,
    HellingerKernel,
    HyperbolicTangentKernel,
    Kernel,
    LaplacianKernel,
    LinearKernel,
    PearsonKernel,
    PolynomialKernel,
)

X = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 2.0]])


class Holder(BaseModel):
    kernel: Kernel = GaussianKernel()


def test_defaults():
    assert GaussianKernel().sigma == 0.01
    assert PearsonKernel().omega == 1.0
    assert PearsonKernel().sigma == 1.0
    assert HyperbolicTangentKernel().scale == 1.0
    assert HyperbolicTangentKernel().offset == 0.0


def test_gaussian_scalar():
    k = GaussianKernel(sigma=1.0)
    assert k(np.array([0.0, 0.0]), np.array([1.0, 0.0])) == pytest.approx(math.exp(-0.5))
    assert k([1.0, 2.0], [1.0, 2.0]) == pytest.approx(1.0)


def test_gram_matches_scalar_calls():
    for kernel in (GaussianKernel(sigma=0.7), LaplacianKernel(sigma=2.0), PolynomialKernel(degree=3, offset=1.0),
                   PearsonKernel(), LinearKernel(), HyperbolicTangentKernel(scale=0.1)):
        gram = kernel(X, X)
        assert gram.shape == (3, 3)
        for i in range(3):
            for j in range(3):
                assert gram[i, j] == pytest.approx(kernel(X[i], X[j]))


def test_laplacian():
    assert LaplacianKernel(sigma=2.0)([0.0, 0.0], [3.0, 4.0]) == pytest.approx(math.exp(-2.5))


def test_hellinger():
    assert HellingerKernel()([1.0, 4.0], [4.0, 1.0]) == pytest.approx(4.0)


def test_pearson_at_zero_distance():
    assert PearsonKernel(omega=2.0, sigma=0.5)([1.0, 1.0], [1.0, 1.0]) == pytest.approx(1.0)


def test_kernel_selected_by_kind():
    holder = Holder.model_validate({"kernel": {"kind": "laplacian", "sigma": 3.0}})
    assert isinstance(holder.kernel, LaplacianKernel)
    assert holder.kernel.sigma == 3.0
    assert isinstance(Holder().kernel, GaussianKernel)


def test_invalid_kernel():
    with pytest.raises(ValidationError):
        Holder.model_validate({"kernel": {"kind": "cosine"}})
    with pytest.raises(ValidationError):
        GaussianKernel(sigma=0.0)


def test_kernels_are_hashable():
    assert hash(GaussianKernel(sigma=1.0)) == hash(GaussianKernel(sigma=1.0))


def test_euclidean_distance():
    d = EuclideanDistance()
    assert d([0.0, 0.0], [3.0, 4.0]) == 5.0
    np.testing.assert_allclose(d.pairwise(X, X)[0], [0.0, 1.0, math.sqrt(5.0)])


class TestKernelFamilies:
    def test_svr_with_linear_kernel(self, regression_host):
        from tabbridge.modeling import create_adapter

        adapter = create_adapter("svr", {"kernel": {"kind": "linear"}, "capacity": 100.0})
        adapter.build(regression_host)
        assert adapter.predict({"x": 10.0}) == pytest.approx(20.0, abs=0.5)

    def test_gaussian_process_regression(self, regression_host):
        from tabbridge.modeling import create_adapter

        adapter = create_adapter(
            "gaussian_process_regression", {"kernel": {"kind": "gaussian", "sigma": 3.0}, "shrinkage": 0.001}
        )
        adapter.build(regression_host)
        assert adapter.predict({"x": 10.0}) == pytest.approx(20.0, abs=0.5)
