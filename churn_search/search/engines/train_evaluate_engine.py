# churn_search/search/engines/train_evaluate_engine.py
from __future__ import annotations

import warnings
from time import perf_counter
from typing import List, Optional

import numpy as np
import pandas as pd
from sklearn.exceptions import ConvergenceWarning

from churn_search.config.model_config import ModelConfig
from churn_search.data.schema import EncodingSchema
from churn_search.search.engines.evaluate_engine import ModelEvaluateEngine
from churn_search.search.engines.model_train_engine import FitWarning
from churn_search.search.engines.registry import resolve_family, resolve_model_train_engine
from churn_search.search.types import CandidateFeatureSet, ModelFamily, ModelRecord
from churn_search.utils.errors import SchemaMismatchError, UserInputError
from churn_search.utils.logger import logs

# 拟合阶段被视为「不收敛」的异常：记录在 ModelRecord 上，不中断 sweep
_FIT_FAILURES = (np.linalg.LinAlgError, FloatingPointError)


def _check_columns(frame: pd.DataFrame, names, label_column: str, role: str) -> None:
    missing = [n for n in names if n not in frame.columns]
    if missing:
        raise SchemaMismatchError(f"{role} data missing feature columns: {missing[:10]}")
    if label_column not in frame.columns:
        raise SchemaMismatchError(f"{role} data missing label column '{label_column}'")


def train_and_evaluate(
        feature_set: CandidateFeatureSet,
        family: "ModelFamily | str",
        train: pd.DataFrame,
        validation: pd.DataFrame,
        *,
        schema: EncodingSchema,
        label_column: str = "y",
        cfg: Optional[ModelConfig] = None,
        seed: int = 42,
        evaluator: Optional[ModelEvaluateEngine] = None,
) -> ModelRecord:
    """
    Fit one model family on one feature set and score it on validation.

    - 只使用 feature_set 中的列 + label
    - 编码统一走 schema.encode()（同一 reference level）
    - 缺列 / 未见过的 level → SchemaMismatchError（fail fast）
    - 不收敛 → warning 挂在 record 上；指标置 None
    - 训练集只有一个类别 → 不拟合，fit_ok=False
    """
    family = resolve_family(family)
    cfg = cfg if cfg is not None else ModelConfig()
    evaluator = evaluator if evaluator is not None else ModelEvaluateEngine()

    if len(feature_set) == 0:
        raise UserInputError(f"feature set #{feature_set.index} is empty")

    names = feature_set.ordered_names
    _check_columns(train, names, label_column, "train")
    _check_columns(validation, names, label_column, "validation")

    X_train = schema.encode(train, feature_set.features)
    X_valid = schema.encode(validation, feature_set.features)
    if list(X_train.columns) != list(X_valid.columns):
        raise SchemaMismatchError("train / validation encoded columns differ")

    y_train = train[label_column].astype(int)
    y_valid = validation[label_column].astype(int)

    messages: List[str] = []
    artifact = None
    proba = None
    start = perf_counter()

    train_classes = sorted(int(c) for c in y_train.unique())
    if len(train_classes) < 2:
        # 单一类别无法拟合：记为失败，不给 0.5 之类的默认分数
        messages.append(f"fit failed: training labels have a single class {train_classes}")
    else:
        engine = resolve_model_train_engine(family, cfg=cfg, seed=seed)
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always", ConvergenceWarning)
            warnings.simplefilter("always", FitWarning)
            try:
                artifact = engine.fit(X_train, y_train)
                proba = engine.predict_proba(artifact, X_valid)
            except _FIT_FAILURES as e:
                messages.append(f"fit failed: {type(e).__name__}: {e}")

        for w in caught:
            if issubclass(w.category, (ConvergenceWarning, FitWarning)):
                messages.append(f"{w.category.__name__}: {w.message}")

    elapsed = perf_counter() - start

    fit_ok = proba is not None
    if fit_ok and not np.all(np.isfinite(proba)):
        messages.append("non-finite predicted probabilities")
        fit_ok = False

    if fit_ok:
        ev = evaluator.evaluate(proba=proba, y=y_valid)
        auc, accuracy, confusion = ev.auc, ev.accuracy, ev.confusion
    else:
        auc, accuracy, confusion = None, None, None

    for m in messages:
        logs.warning(f"[TrainEvaluate] set={feature_set.index} family={family.value} {m}")

    return ModelRecord(
        feature_set_index=feature_set.index,
        family=family,
        n_features=len(feature_set),
        artifact=artifact,
        auc=auc,
        accuracy=accuracy,
        confusion=confusion,
        encoded_columns=tuple(X_train.columns),
        warnings=tuple(messages),
        fit_ok=fit_ok,
        fit_seconds=elapsed,
        feature_names=names,
    )
