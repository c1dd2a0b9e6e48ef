# churn_search/search/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Tuple

import numpy as np


class FeatureKind(str, Enum):
    CONTINUOUS = "continuous"
    CATEGORICAL = "categorical"
    DERIVED = "derived"          # value = base ** 2


class ModelFamily(str, Enum):
    LOGISTIC = "logistic"
    LASSO_LOGISTIC = "lasso_logistic"
    RANDOM_FOREST = "random_forest"
    DECISION_TREE = "decision_tree"
    MLP_SINGLE = "mlp_single"    # 1 hidden layer, width 1x input
    MLP_DOUBLE = "mlp_double"    # 2 hidden layers, width 3x input


@dataclass(frozen=True)
class FeatureDescriptor:
    name: str
    kind: FeatureKind
    base: Optional[str] = None

    @property
    def is_categorical(self) -> bool:
        return self.kind is FeatureKind.CATEGORICAL


@dataclass(frozen=True)
class CandidateFeatureSet:
    """
    CandidateFeatureSet（FROZEN）

    - features 按 schema 顺序排列（typed，不经过 formula 字符串）
    - index 从 1 开始：1 最稀疏，最后一个是 full set
    - strength=None 表示 full set（不来自 path）
    """

    index: int
    features: Tuple[FeatureDescriptor, ...]
    strength: Optional[float] = None

    @property
    def names(self) -> FrozenSet[str]:
        return frozenset(f.name for f in self.features)

    @property
    def ordered_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.features)

    @property
    def is_full(self) -> bool:
        return self.strength is None

    def __len__(self) -> int:
        return len(self.features)


@dataclass(frozen=True)
class ConfusionMatrix:
    """2x2 confusion matrix, positive class = churn (label 1)."""

    tn: int
    fp: int
    fn: int
    tp: int

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "ConfusionMatrix":
        # sklearn layout: [[TN, FP], [FN, TP]]
        tn, fp, fn, tp = (int(v) for v in np.asarray(arr).ravel())
        return cls(tn=tn, fp=fp, fn=fn, tp=tp)

    def as_array(self) -> np.ndarray:
        return np.array([[self.tn, self.fp], [self.fn, self.tp]], dtype=int)

    @property
    def total(self) -> int:
        return self.tn + self.fp + self.fn + self.tp


@dataclass(frozen=True)
class ModelRecord:
    """
    ModelRecord（FINAL / FROZEN）

    语义：
    - (feature_set_index, family) 唯一
    - 评估后不可变，只用于报告 / 选择 / test 预测
    - auc=None 且 fit 成功 → validation 只有一个类别，AUC 未定义
    - fit_ok=False → 拟合失败，所有指标为 None，原因见 warnings
    """

    feature_set_index: int
    family: ModelFamily
    n_features: int
    artifact: Any
    auc: Optional[float]
    accuracy: Optional[float]
    confusion: Optional[ConfusionMatrix]
    encoded_columns: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()
    fit_ok: bool = True
    fit_seconds: float = 0.0
    feature_names: Tuple[str, ...] = field(default=(), repr=False)

    @property
    def key(self) -> Tuple[int, str]:
        return self.feature_set_index, self.family.value

    @property
    def auc_defined(self) -> bool:
        return self.auc is not None

    def to_row(self) -> Dict[str, Any]:
        cm = self.confusion
        return {
            "feature_set": self.feature_set_index,
            "family": self.family.value,
            "n_features": self.n_features,
            "auc": self.auc,
            "accuracy": self.accuracy,
            "tn": cm.tn if cm else None,
            "fp": cm.fp if cm else None,
            "fn": cm.fn if cm else None,
            "tp": cm.tp if cm else None,
            "fit_ok": self.fit_ok,
            "fit_seconds": round(self.fit_seconds, 4),
            "warnings": " | ".join(self.warnings),
        }
