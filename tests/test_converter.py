import math

import numpy as np
import pandas as pd
import pytest

from tabbridge.data.attributes import NominalAttribute, NumericAttribute, StringAttribute
from tabbridge.data.converter import (
    UnknownValuePolicy,
    convert_attribute,
    convert_dataset,
    convert_label,
    convert_row,
    decode_label,
)
from tabbridge.data.host import HostAttribute, HostAttributeType, HostDataset, HostSchema
from tabbridge.exceptions import IncompatibleData, UnknownCategoryValue, UnsupportedAttributeType


def _scenario_host(rows):
    df = pd.DataFrame(
        {
            "x": [r[0] for r in rows],
            "color": pd.Categorical([r[1] for r in rows], categories=["red", "blue"]),
            "label": pd.Categorical([r[2] for r in rows], categories=["yes", "no"]),
        }
    )
    return HostDataset.from_frame(df, target_column="label")


def test_scenario_row_and_label():
    host = _scenario_host([(1.5, "blue", "no")])
    dataset = convert_dataset(host)

    assert [a.name for a in dataset.attributes] == ["x", "color"]
    assert isinstance(dataset.response, NominalAttribute)
    assert dataset.response.labels == ["yes", "no"]
    np.testing.assert_array_equal(dataset.matrix(), [[1.5, 1.0]])
    np.testing.assert_array_equal(dataset.labels(), [1.0])


def test_class_column_in_the_middle_is_skipped_by_position():
    df = pd.DataFrame(
        {
            "a": [1.0],
            "label": pd.Categorical(["no"], categories=["yes", "no"]),
            "color": pd.Categorical(["blue"], categories=["red", "blue"]),
            "b": [7.0],
        }
    )
    host = HostDataset.from_frame(df, target_column="label")
    dataset = convert_dataset(host)

    assert [a.name for a in dataset.attributes] == ["a", "color", "b"]
    np.testing.assert_array_equal(dataset.matrix(), [[1.0, 1.0, 7.0]])
    assert dataset.y == [1.0]


def test_no_class_column_means_no_labels():
    df = pd.DataFrame({"a": [1.0, 2.0], "b": [3.0, 4.0]})
    dataset = convert_dataset(HostDataset.from_frame(df))
    assert dataset.response is None
    assert dataset.labels() is None
    assert dataset.matrix().shape == (2, 2)


def test_missing_cells_become_nan_without_error():
    df = pd.DataFrame(
        {
            "x": [np.nan, 2.0],
            "color": pd.Categorical([None, "red"], categories=["red", "blue"]),
            "text": ["a", None],
            "when": pd.to_datetime([None, "2020-01-01"]),
        }
    )
    dataset = convert_dataset(HostDataset.from_frame(df))
    matrix = dataset.matrix()
    assert np.isnan(matrix[0, 0])
    assert np.isnan(matrix[0, 1])
    assert matrix[0, 2] == 0.0
    assert np.isnan(matrix[0, 3])
    assert np.isnan(matrix[1, 2])


def test_string_column_grows_its_own_table():
    df = pd.DataFrame({"text": ["b", "a"], "label": pd.Categorical(["y", "n"], categories=["y", "n"])})
    host = HostDataset.from_frame(df, target_column="label")
    dataset = convert_dataset(host)
    text = dataset.attributes[0]
    assert isinstance(text, StringAttribute)

    row = convert_row({"text": "c"}, host.schema, dataset)
    assert row[0] == 2.0
    assert text.values == ["b", "a", "c"]


def test_date_cells_use_the_column_format():
    df = pd.DataFrame({"when": pd.to_datetime(["1970-01-02", "1970-01-03"])})
    host = HostDataset.from_frame(df, date_formats={"when": "%Y-%m-%d"})
    dataset = convert_dataset(host)
    np.testing.assert_array_equal(dataset.matrix()[:, 0], [86400000.0, 172800000.0])

    # String cells are parsed with the same format
    row = convert_row({"when": "1970-01-02"}, host.schema, dataset)
    assert row[0] == 86400000.0


def test_tables_belong_to_each_dataset():
    schema_a = HostSchema(
        attributes=[HostAttribute(name="c", type=HostAttributeType.NOMINAL, values=["red", "blue"])]
    )
    schema_b = HostSchema(
        attributes=[HostAttribute(name="c", type=HostAttributeType.NOMINAL, values=["blue", "red"])]
    )
    frame = pd.DataFrame({"c": ["blue"]})
    a = convert_dataset(HostDataset(schema_a, frame))
    b = convert_dataset(HostDataset(schema_b, frame))
    assert a.matrix()[0, 0] == 1.0
    assert b.matrix()[0, 0] == 0.0


class TestUnknownValues:
    def test_unknown_nominal_raises_by_default(self, weather_host):
        dataset = convert_dataset(weather_host)
        with pytest.raises(UnknownCategoryValue):
            convert_row({"x": 1.0, "color": "green"}, weather_host.schema, dataset)

    def test_missing_policy_maps_to_nan(self, weather_host):
        dataset = convert_dataset(weather_host)
        row = convert_row({"x": 1.0, "color": "green"}, weather_host.schema, dataset, UnknownValuePolicy.MISSING)
        assert row[0] == 1.0
        assert math.isnan(row[1])

    def test_policy_from_environment(self, weather_host, monkeypatch):
        from tabbridge.config import get_settings

        monkeypatch.setenv("TABBRIDGE_UNKNOWN_VALUE_POLICY", "missing")
        get_settings.cache_clear()
        dataset = convert_dataset(weather_host)
        row = convert_row({"x": 1.0, "color": "green"}, weather_host.schema, dataset)
        assert math.isnan(row[1])

    def test_unknown_label_raises(self, weather_host):
        dataset = convert_dataset(weather_host)
        with pytest.raises(UnknownCategoryValue):
            convert_label({"x": 1.0, "color": "red", "label": "maybe"}, weather_host.schema, dataset)


class TestNumericText:
    def test_numeric_text_is_parsed(self, regression_host):
        dataset = convert_dataset(regression_host)
        assert convert_row({"x": "2.5"}, regression_host.schema, dataset)[0] == 2.5

    def test_non_number_raises_by_default(self, regression_host):
        dataset = convert_dataset(regression_host)
        with pytest.raises(UnknownCategoryValue):
            convert_row({"x": "abc"}, regression_host.schema, dataset)

    def test_non_number_follows_missing_policy(self, regression_host):
        dataset = convert_dataset(regression_host)
        row = convert_row({"x": "abc"}, regression_host.schema, dataset, UnknownValuePolicy.MISSING)
        assert math.isnan(row[0])


class TestAttributeMapping:
    def test_supported_types(self):
        assert isinstance(convert_attribute(HostAttribute(name="x", type=HostAttributeType.NUMERIC), 0), NumericAttribute)
        date = convert_attribute(HostAttribute(name="d", type=HostAttributeType.DATE, date_format="%d.%m.%Y"), 0)
        assert date.date_format == "%d.%m.%Y"
        nominal = convert_attribute(
            HostAttribute(name="c", type=HostAttributeType.NOMINAL, values=["z", "a"], weight=3.0), 0
        )
        assert nominal.labels == ["z", "a"]
        assert nominal.weight == 3.0

    def test_unsupported_type_reports_column(self):
        df = pd.DataFrame({"x": [1.0], "flag": [True]})
        with pytest.raises(UnsupportedAttributeType) as excinfo:
            convert_dataset(HostDataset.from_frame(df))
        assert excinfo.value.index == 1
        assert excinfo.value.name == "flag"
        assert "#2/flag" in str(excinfo.value)

    def test_unsupported_is_not_unknown_value(self):
        assert not issubclass(UnsupportedAttributeType, UnknownCategoryValue)
        assert not issubclass(UnknownCategoryValue, UnsupportedAttributeType)


class TestLabels:
    def test_numeric_label_passes_through(self, regression_host):
        dataset = convert_dataset(regression_host)
        assert convert_label({"x": 1.0, "target": 4.25}, regression_host.schema, dataset) == 4.25

    def test_missing_label_is_nan(self, weather_host):
        dataset = convert_dataset(weather_host)
        assert math.isnan(convert_label({"x": 1.0, "color": "red", "label": None}, weather_host.schema, dataset))

    def test_decode_label(self, weather_host, regression_host):
        dataset = convert_dataset(weather_host)
        assert decode_label(0.0, dataset) == "yes"
        assert decode_label(1.0, dataset) == "no"
        assert decode_label(float("nan"), dataset) is None
        assert decode_label(3.5, convert_dataset(regression_host)) == 3.5

    def test_label_requires_response(self, cluster_host):
        dataset = convert_dataset(cluster_host)
        with pytest.raises(IncompatibleData):
            convert_label({"a": 1.0, "b": 2.0}, cluster_host.schema, dataset)


def test_row_missing_column_raises(weather_host):
    dataset = convert_dataset(weather_host)
    with pytest.raises(IncompatibleData, match="color"):
        convert_row({"x": 1.0}, weather_host.schema, dataset)


def test_pandas_row_input(weather_host, weather_frame):
    dataset = convert_dataset(weather_host)
    row = convert_row(weather_frame.iloc[1], weather_host.schema, dataset)
    np.testing.assert_array_equal(row, [1.5, 1.0])
