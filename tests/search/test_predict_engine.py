#!filepath: tests/search/test_predict_engine.py
import dataclasses

import pytest

from churn_search.search.engines.predict_engine import PredictEngine
from churn_search.search.engines.report_engine import ReportEngine
from churn_search.search.engines.train_evaluate_engine import train_and_evaluate
from churn_search.utils.errors import SchemaMismatchError, UserInputError


@pytest.fixture
def fitted(train_valid, schema, make_feature_set):
    train, valid = train_valid
    fs = make_feature_set(2, ["x0", "x3", "x33"])
    return train_and_evaluate(fs, "random_forest", train, valid, schema=schema, seed=0)


def test_predict_test_rows(fitted, schema, test_frame):
    proba = PredictEngine(schema).predict(fitted, test_frame)

    assert len(proba) == len(test_frame)
    assert list(proba.index) == list(test_frame.index)
    assert proba.name == "churn_probability"
    assert ((proba >= 0.0) & (proba <= 1.0)).all()


def test_predict_is_stable(fitted, schema, test_frame):
    a = PredictEngine(schema).predict(fitted, test_frame)
    b = PredictEngine(schema).predict(fitted, test_frame)

    assert a.equals(b)


def test_predict_unseen_level_raises(fitted, schema, test_frame):
    bad = test_frame.copy()
    bad.loc[bad.index[0], "x3"] = "Sunday"

    with pytest.raises(SchemaMismatchError):
        PredictEngine(schema).predict(fitted, bad)


def test_predict_missing_column_raises(fitted, schema, test_frame):
    with pytest.raises(SchemaMismatchError):
        PredictEngine(schema).predict(fitted, test_frame.drop(columns=["x33"]))


def test_predict_failed_record_raises(fitted, schema, test_frame):
    failed = dataclasses.replace(fitted, fit_ok=False, artifact=None)

    with pytest.raises(UserInputError):
        PredictEngine(schema).predict(failed, test_frame)


def test_write_predictions(fitted, schema, test_frame, tmp_path):
    proba = PredictEngine(schema).predict(fitted, test_frame)

    path = ReportEngine().write_predictions(proba, tmp_path / "run")

    assert path.exists()
    lines = path.read_text().strip().splitlines()
    assert lines[0].endswith("churn_probability")
    assert len(lines) == len(test_frame) + 1
