#!filepath: tests/data/test_schema.py
import numpy as np
import pandas as pd
import pytest

from churn_search.data.schema import EncodingSchema
from churn_search.search.types import FeatureKind
from churn_search.utils.errors import SchemaMismatchError, UserInputError


def test_schema_kinds_and_levels(schema):
    kinds = {d.name: d.kind for d in schema.descriptors}

    assert kinds["x0"] is FeatureKind.CONTINUOUS
    assert kinds["x3"] is FeatureKind.CATEGORICAL
    assert kinds["x33"] is FeatureKind.CATEGORICAL
    assert "y" not in kinds

    assert schema.levels("x33") == ("AZ", "CA", "NY", "TX")


def test_reference_level_is_dropped(schema):
    cols = schema.encoded_columns(["x33"])

    # AZ = first sorted level = reference
    assert cols == ["x33_CA", "x33_NY", "x33_TX"]


def test_encode_preserves_index_and_values(schema, churn_frame):
    sub = churn_frame.iloc[[5, 2, 9]]
    X = schema.encode(sub, ["x0", "x33"])

    assert list(X.index) == [5, 2, 9]
    assert list(X.columns) == ["x0", "x33_CA", "x33_NY", "x33_TX"]
    np.testing.assert_allclose(X["x0"].to_numpy(), sub["x0"].to_numpy())

    for idx, state in sub["x33"].items():
        row = X.loc[idx, ["x33_CA", "x33_NY", "x33_TX"]]
        expected = [float(state == s) for s in ("CA", "NY", "TX")]
        assert list(row) == expected


def test_encode_levels_fixed_across_frames(schema, churn_frame):
    # a frame where only one state appears still gets every indicator column
    only_tx = churn_frame[churn_frame["x33"] == "TX"]
    X = schema.encode(only_tx, ["x33"])

    assert list(X.columns) == ["x33_CA", "x33_NY", "x33_TX"]
    assert (X["x33_TX"] == 1.0).all()


def test_encode_unseen_level_raises(schema, churn_frame):
    bad = churn_frame.head(3).copy()
    bad.loc[bad.index[0], "x33"] = "WA"

    with pytest.raises(SchemaMismatchError, match="unseen"):
        schema.encode(bad, ["x33"])


def test_encode_missing_categorical_raises(schema, churn_frame):
    bad = churn_frame.head(3).copy()
    bad.loc[bad.index[1], "x3"] = None

    with pytest.raises(SchemaMismatchError, match="missing"):
        schema.encode(bad, ["x3"])


def test_encode_missing_column_raises(schema, churn_frame):
    with pytest.raises(SchemaMismatchError):
        schema.encode(churn_frame.drop(columns=["x1"]), ["x0", "x1"])


def test_unknown_feature_raises(schema):
    with pytest.raises(SchemaMismatchError):
        schema.descriptors_for(["x0", "nope"])


def test_indicator_parents(schema):
    parents = schema.indicator_parents(["x0", "x3", "x33"])

    assert parents["x0"] == "x0"
    assert parents["x33_CA"] == "x33"
    # Friday is the reference level of x3
    assert "x3_Friday" not in parents
    assert parents["x3_Monday"] == "x3"
    # parent names map to themselves
    assert parents["x33"] == "x33"
    assert parents["x3"] == "x3"


def test_with_squares_adds_derived(schema, churn_frame):
    sq = schema.with_squares(["x0"])

    d = sq.descriptor("x0_sq")
    assert d.kind is FeatureKind.DERIVED
    assert d.base == "x0"
    assert sq.feature_names[-1] == "x0_sq"

    out = sq.add_squares(churn_frame)
    np.testing.assert_allclose(out["x0_sq"].to_numpy(), churn_frame["x0"].to_numpy() ** 2)
    # original frame untouched
    assert "x0_sq" not in churn_frame.columns


def test_with_squares_rejects_categorical(schema):
    with pytest.raises(UserInputError):
        schema.with_squares(["x33"])


def test_levels_union_of_train_and_test():
    train = pd.DataFrame({"a": [1.0, 2.0], "c": ["p", "q"]})
    test = pd.DataFrame({"a": [3.0], "c": ["r"]})

    schema = EncodingSchema.from_frames(train, test)

    assert schema.levels("c") == ("p", "q", "r")
    X = schema.encode(test)
    assert list(X.columns) == ["a", "c_q", "c_r"]
    assert X.iloc[0].tolist() == [3.0, 0.0, 1.0]


def test_colliding_indicator_names_rejected():
    df = pd.DataFrame({"c": ["a", "b"], "c_b": [1.0, 2.0]})

    with pytest.raises(SchemaMismatchError):
        EncodingSchema.from_frames(df)
