# churn_search/search/engines/model/tree_train_engine.py
from __future__ import annotations

import numpy as np
import pandas as pd
from sklearn.ensemble import RandomForestClassifier
from sklearn.tree import DecisionTreeClassifier

from churn_search.search.engines.model_train_engine import ModelTrainEngine, positive_class_proba
from churn_search.search.types import ModelFamily


class RandomForestTrainEngine(ModelTrainEngine):
    family = ModelFamily.RANDOM_FOREST

    def fit(self, X: pd.DataFrame, y: pd.Series) -> RandomForestClassifier:
        forest = self.cfg.forest
        model = RandomForestClassifier(
            n_estimators=forest.n_estimators,
            max_depth=forest.max_depth,
            min_samples_leaf=forest.min_samples_leaf,
            n_jobs=forest.n_jobs,
            random_state=self.seed,
        )
        model.fit(X.to_numpy(dtype=float), y.to_numpy())
        return model

    def predict_proba(self, artifact: RandomForestClassifier, X: pd.DataFrame) -> np.ndarray:
        return positive_class_proba(artifact, X.to_numpy(dtype=float))


class DecisionTreeTrainEngine(ModelTrainEngine):
    family = ModelFamily.DECISION_TREE

    def fit(self, X: pd.DataFrame, y: pd.Series) -> DecisionTreeClassifier:
        model = DecisionTreeClassifier(
            max_depth=self.cfg.tree.max_depth,
            min_samples_leaf=self.cfg.tree.min_samples_leaf,
            random_state=self.seed,
        )
        model.fit(X.to_numpy(dtype=float), y.to_numpy())
        return model

    def predict_proba(self, artifact: DecisionTreeClassifier, X: pd.DataFrame) -> np.ndarray:
        return positive_class_proba(artifact, X.to_numpy(dtype=float))
