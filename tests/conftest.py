"""Pytest fixtures for the tabbridge test suite."""

import numpy as np
import pandas as pd
import pytest

from tabbridge.config import get_settings
from tabbridge.data.host import HostDataset


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Settings are cached; make every test read the environment again."""
    for name in (
        "TABBRIDGE_UNKNOWN_VALUE_POLICY",
        "TABBRIDGE_DISTRIBUTION_FALLBACK",
        "TABBRIDGE_DEFAULT_DATE_FORMAT",
        "TABBRIDGE_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def weather_frame() -> pd.DataFrame:
    """Numeric + nominal features, nominal class; 'no' iff x > 5."""
    x = [1.0, 1.5, 2.0, 2.5, 3.0, 3.5, 4.0, 4.5, 6.0, 6.5, 7.0, 7.5, 8.0, 8.5, 9.0, 9.5]
    colors = ["red", "blue"] * 8
    labels = ["yes" if v < 5 else "no" for v in x]
    return pd.DataFrame(
        {
            "x": x,
            "color": pd.Categorical(colors, categories=["red", "blue"]),
            "label": pd.Categorical(labels, categories=["yes", "no"]),
        }
    )


@pytest.fixture
def weather_host(weather_frame) -> HostDataset:
    return HostDataset.from_frame(weather_frame, target_column="label", relation="weather")


@pytest.fixture
def regression_host() -> HostDataset:
    """Simple linear regression problem y = 2*x"""
    x = np.arange(1.0, 21.0)
    df = pd.DataFrame({"x": x, "target": 2 * x})
    return HostDataset.from_frame(df, target_column="target", relation="linear")


@pytest.fixture
def cluster_host() -> HostDataset:
    """Two well separated blobs, no class column."""
    rng = np.random.RandomState(42)
    a = rng.normal(0.0, 0.1, size=(10, 2))
    b = rng.normal(10.0, 0.1, size=(10, 2))
    df = pd.DataFrame(np.vstack([a, b]), columns=["a", "b"])
    return HostDataset.from_frame(df, relation="blobs")
