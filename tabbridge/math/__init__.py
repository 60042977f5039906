from .distance import Distance, EuclideanDistance
from .kernels import (
    GaussianKernel,
    HellingerKernel,
    HyperbolicTangentKernel,
    Kernel,
    LaplacianKernel,
    LinearKernel,
    PearsonKernel,
    PolynomialKernel,
)
