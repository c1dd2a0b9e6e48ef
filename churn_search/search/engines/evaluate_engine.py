# churn_search/search/engines/evaluate_engine.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd
from sklearn.metrics import accuracy_score, confusion_matrix, roc_auc_score

from churn_search.search.types import ConfusionMatrix
from churn_search.utils.logger import logs


@dataclass(frozen=True)
class Evaluation:
    auc: Optional[float]
    accuracy: float
    confusion: ConfusionMatrix


class ModelEvaluateEngine:
    """
    ModelEvaluateEngine（FINAL / FROZEN）

    Responsibility:
    - Score P(churn) against validation labels
    - Return pure metrics (no side effects)

    Contract:
    - proba > threshold → predicted churn (positive class = 1)
    - AUC on raw probabilities, accuracy / confusion at threshold
    - single-class labels → auc=None（未定义，不是 0.5 也不是 1.0）
    """

    def __init__(self, threshold: float = 0.5):
        self.threshold = threshold

    def evaluate(self, *, proba: np.ndarray, y: pd.Series) -> Evaluation:
        if len(y) == 0:
            raise ValueError("[ModelEvaluateEngine] empty eval dataset")

        proba = np.asarray(proba, dtype=float)
        y_true = np.asarray(y, dtype=int)
        if proba.shape != y_true.shape:
            raise ValueError(
                f"[ModelEvaluateEngine] proba shape {proba.shape} != labels {y_true.shape}"
            )

        y_pred = (proba > self.threshold).astype(int)

        accuracy = float(accuracy_score(y_true, y_pred))
        cm = ConfusionMatrix.from_array(confusion_matrix(y_true, y_pred, labels=[0, 1]))

        if np.unique(y_true).size < 2:
            logs.info(
                f"[ModelEvaluateEngine] validation labels are all {int(y_true[0])}, AUC undefined"
            )
            auc = None
        else:
            auc = float(roc_auc_score(y_true, proba))

        return Evaluation(auc=auc, accuracy=accuracy, confusion=cm)
