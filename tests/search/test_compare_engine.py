#!filepath: tests/search/test_compare_engine.py
import pytest

from churn_search.search.engines.compare_engine import compare_all
from churn_search.search.types import ModelFamily
from churn_search.utils.errors import UserInputError


@pytest.fixture
def five_sets(make_feature_set, schema):
    return [
        make_feature_set(1, ["x0"], strength=0.5),
        make_feature_set(2, ["x0", "x33"], strength=0.2),
        make_feature_set(3, ["x0", "x4", "x33"], strength=0.1),
        make_feature_set(4, ["x0", "x3", "x4", "x33"], strength=0.05),
        make_feature_set(5, schema.feature_names),
    ]


def test_compare_order_set_outer_family_inner(five_sets, train_valid, schema):
    train, valid = train_valid

    records = compare_all(
        five_sets,
        ["logistic", "decision_tree"],
        train,
        valid,
        schema=schema,
        max_workers=1,
    )

    assert len(records) == 10
    assert [r.key for r in records] == [
        (i, f) for i in range(1, 6) for f in ("logistic", "decision_tree")
    ]
    assert len({r.key for r in records}) == 10
    assert [r.n_features for r in records[::2]] == [1, 2, 3, 4, 6]


def test_compare_parallel_matches_sequential(five_sets, train_valid, schema):
    train, valid = train_valid
    families = [ModelFamily.LOGISTIC, ModelFamily.RANDOM_FOREST]

    seq = compare_all(five_sets[:3], families, train, valid, schema=schema, max_workers=1)
    par = compare_all(five_sets[:3], families, train, valid, schema=schema, max_workers=2)

    assert [r.key for r in par] == [r.key for r in seq]
    assert [r.auc for r in par] == [r.auc for r in seq]


def test_compare_rejects_duplicate_indices(make_feature_set, train_valid, schema):
    train, valid = train_valid
    sets = [make_feature_set(1, ["x0"]), make_feature_set(1, ["x1"])]

    with pytest.raises(UserInputError):
        compare_all(sets, ["logistic"], train, valid, schema=schema, max_workers=1)


def test_compare_rejects_unknown_family(five_sets, train_valid, schema):
    train, valid = train_valid

    with pytest.raises(UserInputError):
        compare_all(five_sets, ["svm"], train, valid, schema=schema, max_workers=1)


def test_compare_no_sets(train_valid, schema):
    train, valid = train_valid

    assert compare_all([], ["logistic"], train, valid, schema=schema) == []


def test_single_class_training_does_not_stop_sweep(five_sets, train_valid, schema):
    train, valid = train_valid

    records = compare_all(
        five_sets[:2],
        ["logistic", "decision_tree"],
        train.assign(y=1),
        valid,
        schema=schema,
        max_workers=1,
    )

    assert len(records) == 4
    assert all(not r.fit_ok and r.auc is None for r in records)
