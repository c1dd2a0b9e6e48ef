#!filepath: tests/search/test_evaluate_engine.py
import numpy as np
import pandas as pd
import pytest

from churn_search.search.engines.evaluate_engine import ModelEvaluateEngine


def test_evaluate_metrics():
    y = pd.Series([0, 0, 1, 1])
    proba = np.array([0.1, 0.6, 0.4, 0.9])

    ev = ModelEvaluateEngine().evaluate(proba=proba, y=y)

    assert ev.auc == pytest.approx(0.75)
    assert ev.accuracy == pytest.approx(0.5)
    assert (ev.confusion.tn, ev.confusion.fp, ev.confusion.fn, ev.confusion.tp) == (1, 1, 1, 1)
    assert ev.confusion.total == 4


def test_threshold_is_strictly_greater():
    y = pd.Series([0, 1])

    ev = ModelEvaluateEngine(threshold=0.5).evaluate(proba=np.array([0.5, 0.51]), y=y)

    assert ev.confusion.tn == 1
    assert ev.confusion.tp == 1


def test_single_class_auc_undefined():
    y = pd.Series([1, 1, 1])

    ev = ModelEvaluateEngine().evaluate(proba=np.array([0.2, 0.7, 0.9]), y=y)

    assert ev.auc is None
    assert ev.accuracy == pytest.approx(2 / 3)
    # 2x2 even when only one class is present
    np.testing.assert_array_equal(ev.confusion.as_array(), [[0, 0], [1, 2]])


def test_empty_eval_raises():
    with pytest.raises(ValueError):
        ModelEvaluateEngine().evaluate(proba=np.array([]), y=pd.Series([], dtype=int))


def test_shape_mismatch_raises():
    with pytest.raises(ValueError):
        ModelEvaluateEngine().evaluate(proba=np.array([0.1]), y=pd.Series([0, 1]))
