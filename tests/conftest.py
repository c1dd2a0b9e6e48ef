# tests/conftest.py
from __future__ import annotations

import multiprocessing

import numpy as np
import pandas as pd
import pytest
from loguru import logger

from churn_search.data.schema import EncodingSchema
from churn_search.search.types import CandidateFeatureSet

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]
STATES = ["AZ", "CA", "NY", "TX"]
STATE_EFFECT = {"AZ": 0.0, "CA": 1.2, "NY": 0.0, "TX": -1.2}


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)  # or sys.stderr
    yield


@pytest.fixture(scope="session", autouse=True)
def _set_start_method():
    multiprocessing.set_start_method("spawn", force=True)


def make_churn_frame(n: int = 400, seed: int = 0, with_label: bool = True) -> pd.DataFrame:
    """
    Synthetic churn table:
      x0        strong signal
      x1, x2    noise
      x4        weak signal
      x3        weekday (noise)
      x33       state (CA up, TX down)
      y         0/1
    """
    rng = np.random.default_rng(seed)
    df = pd.DataFrame(
        {
            "x0": rng.normal(size=n),
            "x1": rng.normal(size=n),
            "x2": rng.normal(size=n),
            "x3": rng.choice(WEEKDAYS, size=n),
            "x4": rng.normal(size=n),
            "x33": rng.choice(STATES, size=n),
        }
    )
    if with_label:
        logit = 2.0 * df["x0"] + 0.3 * df["x4"] + df["x33"].map(STATE_EFFECT)
        p = 1.0 / (1.0 + np.exp(-logit))
        df["y"] = (rng.uniform(size=n) < p).astype(int)
    return df


@pytest.fixture
def churn_frame() -> pd.DataFrame:
    return make_churn_frame()


@pytest.fixture
def test_frame() -> pd.DataFrame:
    return make_churn_frame(n=60, seed=1, with_label=False)


@pytest.fixture
def schema(churn_frame, test_frame) -> EncodingSchema:
    return EncodingSchema.from_frames(churn_frame, test_frame, exclude=["y"])


@pytest.fixture
def train_valid(churn_frame):
    """(train, validation): plain 300 / 100 row split, label kept."""
    return churn_frame.iloc[:300].copy(), churn_frame.iloc[300:].copy()


@pytest.fixture
def make_feature_set(schema):
    def _make(index: int, names, strength=None) -> CandidateFeatureSet:
        return CandidateFeatureSet(
            index=index,
            features=schema.descriptors_for(names),
            strength=strength,
        )

    return _make


@pytest.fixture
def make_frame():
    return make_churn_frame
