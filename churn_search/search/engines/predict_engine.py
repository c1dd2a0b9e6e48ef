# churn_search/search/engines/predict_engine.py
from __future__ import annotations

from typing import Optional

import numpy as np
import pandas as pd

from churn_search.config.model_config import ModelConfig
from churn_search.data.schema import EncodingSchema
from churn_search.search.engines.registry import resolve_model_train_engine
from churn_search.search.types import ModelRecord
from churn_search.utils.errors import SchemaMismatchError, UserInputError


class PredictEngine:
    """
    PredictEngine（FINAL）

    Contract:
    - 使用 record 自带的 artifact（不重新训练）
    - test 编码列必须与训练时完全一致
    - 输出与 test 行顺序对齐，每行一个 [0, 1] 概率
    """

    def __init__(self, schema: EncodingSchema, cfg: Optional[ModelConfig] = None, seed: int = 42):
        self.schema = schema
        self.cfg = cfg if cfg is not None else ModelConfig()
        self.seed = seed

    def predict(self, record: ModelRecord, test: pd.DataFrame) -> pd.Series:
        if not record.fit_ok or record.artifact is None:
            raise UserInputError(
                f"record {record.key} has no usable fitted model: {list(record.warnings)}"
            )

        X = self.schema.encode(test, record.feature_names)
        if tuple(X.columns) != record.encoded_columns:
            raise SchemaMismatchError(
                f"test encoding differs from training encoding for {record.key}"
            )

        engine = resolve_model_train_engine(record.family, cfg=self.cfg, seed=self.seed)
        proba = np.clip(np.asarray(engine.predict_proba(record.artifact, X), dtype=float), 0.0, 1.0)

        return pd.Series(proba, index=test.index, name="churn_probability")
