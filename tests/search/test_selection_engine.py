#!filepath: tests/search/test_selection_engine.py
import math

import pytest

from churn_search.search.engines.selection_engine import (
    best_by_family,
    select_best,
    selection_table,
)
from churn_search.search.types import ModelFamily, ModelRecord


def _rec(index, family, n, auc, fit_ok=True):
    return ModelRecord(
        feature_set_index=index,
        family=ModelFamily(family),
        n_features=n,
        artifact=None,
        auc=auc,
        accuracy=None if auc is None else 0.8,
        confusion=None,
        fit_ok=fit_ok,
    )


def test_select_max_auc():
    records = [
        _rec(1, "logistic", 3, 0.70),
        _rec(2, "logistic", 5, 0.80),
        _rec(3, "random_forest", 8, 0.75),
    ]

    assert select_best(records).key == (2, "logistic")
    assert select_best(records, "random_forest").key == (3, "random_forest")


def test_ties_prefer_fewer_features_then_lower_index():
    records = [
        _rec(3, "logistic", 5, 0.80),
        _rec(2, "logistic", 4, 0.80),
        _rec(1, "decision_tree", 4, 0.80),
    ]

    assert select_best(records).key == (1, "decision_tree")
    assert select_best(records, ModelFamily.LOGISTIC).key == (2, "logistic")


def test_undefined_auc_never_wins():
    records = [
        _rec(1, "logistic", 3, None),
        _rec(2, "logistic", 5, None, fit_ok=False),
        _rec(3, "logistic", 9, 0.51),
    ]

    assert select_best(records).key == (3, "logistic")
    assert select_best(records[:2]) is None
    assert select_best([]) is None


def test_best_by_family_keeps_first_seen_order():
    records = [
        _rec(1, "random_forest", 3, 0.6),
        _rec(1, "logistic", 3, 0.7),
        _rec(2, "random_forest", 5, 0.65),
        _rec(2, "mlp_single", 5, None),
    ]

    best = best_by_family(records)

    assert list(best) == [ModelFamily.RANDOM_FOREST, ModelFamily.LOGISTIC, ModelFamily.MLP_SINGLE]
    assert best[ModelFamily.RANDOM_FOREST].feature_set_index == 2
    assert best[ModelFamily.MLP_SINGLE] is None


def test_selection_table_exposes_gap_without_tolerance():
    records = [
        _rec(1, "logistic", 2, 0.795),
        _rec(2, "logistic", 6, 0.800),
        _rec(3, "logistic", 9, None),
    ]

    table = selection_table(records)

    assert list(table["feature_set"]) == [1, 2, 3]
    assert list(table["is_best"]) == [False, True, False]
    # the sparser set is within 0.005 but is NOT picked automatically
    assert table.loc[0, "auc_gap"] == pytest.approx(0.005)
    assert bool(table.loc[0, "fewer_features"])
    assert table.loc[1, "auc_gap"] == pytest.approx(0.0)
    assert math.isnan(table.loc[2, "auc_gap"])
