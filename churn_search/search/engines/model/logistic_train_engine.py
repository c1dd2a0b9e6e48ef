# churn_search/search/engines/model/logistic_train_engine.py
from __future__ import annotations

import numpy as np
import pandas as pd
from sklearn.linear_model import LogisticRegression
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler

from churn_search.search.engines.model_train_engine import ModelTrainEngine, positive_class_proba
from churn_search.search.types import ModelFamily


class LogisticTrainEngine(ModelTrainEngine):
    """
    Plain logistic regression (no penalty), lbfgs, deterministic.
    """

    family = ModelFamily.LOGISTIC

    def build(self) -> LogisticRegression:
        return LogisticRegression(
            penalty=None,
            solver="lbfgs",
            max_iter=self.cfg.logistic.max_iter,
        )

    def fit(self, X: pd.DataFrame, y: pd.Series) -> Pipeline:
        model = Pipeline(
            [
                ("scale", StandardScaler()),
                ("clf", self.build()),
            ]
        )
        model.fit(X.to_numpy(dtype=float), y.to_numpy())
        return model

    def predict_proba(self, artifact: Pipeline, X: pd.DataFrame) -> np.ndarray:
        return positive_class_proba(artifact, X.to_numpy(dtype=float))


class LassoLogisticTrainEngine(LogisticTrainEngine):
    """
    L1-regularized logistic regression on standardized inputs.
    """

    family = ModelFamily.LASSO_LOGISTIC

    def build(self) -> LogisticRegression:
        return LogisticRegression(
            penalty="l1",
            solver="liblinear",
            C=self.cfg.lasso.C,
            max_iter=self.cfg.lasso.max_iter,
            random_state=self.seed,
        )
