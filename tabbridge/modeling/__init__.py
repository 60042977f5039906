from .base import (
    BaseModelApplier,
    BaseModelCalculator,
    ClassifierAdapter,
    ClustererAdapter,
    DistributionFallback,
    ModelAdapter,
    RegressorAdapter,
    create_adapter,
)
from .capabilities import (
    Capabilities,
    ModelCapability,
    check_algorithms,
    get_capabilities,
    get_model_capabilities,
    list_algorithms,
)
from .classification import (
    KNNApplier, KNNCalculator,
    RandomForestClassifierApplier, RandomForestClassifierCalculator,
    SGDClassifierApplier, SGDClassifierCalculator,
    SVMApplier, SVMCalculator,
)
from .clustering import BIRCHApplier, BIRCHCalculator, KMeansApplier, KMeansCalculator
from .online import OnlineUpdateAdapter
from .regression import (
    GaussianProcessRegressionApplier, GaussianProcessRegressionCalculator,
    RandomForestRegressorApplier, RandomForestRegressorCalculator,
    RidgeRegressionApplier, RidgeRegressionCalculator,
    SVRApplier, SVRCalculator,
)
