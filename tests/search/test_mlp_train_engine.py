#!filepath: tests/search/test_mlp_train_engine.py
import numpy as np
import pytest

pytest.importorskip("tensorflow")

from churn_search.config.model_config import ModelConfig  # noqa: E402
from churn_search.search.engines.model.mlp_train_engine import (  # noqa: E402
    DoubleHiddenMLPTrainEngine,
    SingleHiddenMLPTrainEngine,
)
from churn_search.search.engines.train_evaluate_engine import train_and_evaluate  # noqa: E402

pytestmark = pytest.mark.slow


@pytest.fixture
def fast_cfg() -> ModelConfig:
    return ModelConfig(mlp={"epochs": 3, "batch_size": 32})


def _dense_units(model):
    return [layer.units for layer in model.layers if hasattr(layer, "units")]


def test_architectures(fast_cfg):
    single = SingleHiddenMLPTrainEngine(fast_cfg).build(5)
    double = DoubleHiddenMLPTrainEngine(fast_cfg).build(5)

    assert _dense_units(single) == [5, 1]
    assert _dense_units(double) == [15, 15, 1]
    assert single.layers[0].activation.__name__ == "tanh"
    assert single.layers[-1].activation.__name__ == "sigmoid"


@pytest.mark.parametrize("family", ["mlp_single", "mlp_double"])
def test_mlp_fit_and_score(family, train_valid, schema, make_feature_set, fast_cfg):
    train, valid = train_valid
    fs = make_feature_set(1, ["x0", "x33"])

    rec = train_and_evaluate(fs, family, train, valid, schema=schema, cfg=fast_cfg, seed=0)

    assert rec.fit_ok
    assert rec.auc is not None
    assert len(rec.artifact.history["loss"]) == 3
    assert rec.confusion.total == len(valid)


def test_mlp_is_reproducible_for_seed(train_valid, schema, make_feature_set, fast_cfg):
    train, valid = train_valid
    fs = make_feature_set(1, ["x0", "x4", "x33"])

    a = train_and_evaluate(fs, "mlp_single", train, valid, schema=schema, cfg=fast_cfg, seed=5)
    b = train_and_evaluate(fs, "mlp_single", train, valid, schema=schema, cfg=fast_cfg, seed=5)

    for wa, wb in zip(a.artifact.weights, b.artifact.weights):
        np.testing.assert_array_equal(wa, wb)
    assert a.auc == b.auc
