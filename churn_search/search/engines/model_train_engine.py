from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import numpy as np
import pandas as pd

from churn_search.config.model_config import ModelConfig
from churn_search.search.types import ModelFamily


class FitWarning(UserWarning):
    """Numerical trouble during a fit (non-finite loss, diverged weights ...)."""


class ModelTrainEngine(ABC):
    """
    Abstract ModelTrainEngine (FINAL)

    Shared capability of every model family:
      fit(X, y)                    -> artifact
      predict_proba(artifact, X)   -> P(churn) per row

    X is always an encoded design matrix from EncodingSchema.encode().
    Non-convergence is reported through warnings (ConvergenceWarning /
    FitWarning), never by raising.
    """

    family: ModelFamily

    def __init__(self, cfg: ModelConfig, seed: int = 42):
        self.cfg = cfg
        self.seed = seed

    @abstractmethod
    def fit(self, X: pd.DataFrame, y: pd.Series) -> Any:
        raise NotImplementedError

    @abstractmethod
    def predict_proba(self, artifact: Any, X: pd.DataFrame) -> np.ndarray:
        raise NotImplementedError


def positive_class_proba(model: Any, X: np.ndarray) -> np.ndarray:
    """P(y=1) from a fitted sklearn classifier."""
    proba = model.predict_proba(X)
    classes = list(model.classes_)
    if 1 not in classes:
        raise ValueError(f"classifier was fitted without the positive class: classes={classes}")
    return proba[:, classes.index(1)]
