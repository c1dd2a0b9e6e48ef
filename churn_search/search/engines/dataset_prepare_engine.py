from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import pandas as pd

from churn_search.config.data_config import DataConfig
from churn_search.data.impute import Imputer
from churn_search.data.loader import coerce_numeric, split_label, train_validation_split
from churn_search.data.schema import EncodingSchema
from churn_search.search.types import FeatureKind
from churn_search.utils.errors import SchemaMismatchError
from churn_search.utils.logger import logs


@dataclass(frozen=True)
class PreparedDataset:
    train: pd.DataFrame                 # features + label
    validation: pd.DataFrame            # features + label
    test: Optional[pd.DataFrame]        # features only
    schema: EncodingSchema


class DatasetPrepareEngine:
    """
    DatasetPrepareEngine（FINAL / FROZEN）

    Responsibility:
    - Own ALL dataset construction semantics:
        - raw numeric coercion
        - train / validation split (stratified)
        - imputation (fit on train split only)
        - schema from train ∪ validation ∪ test
        - squared features, regenerated for every frame

    Contract:
    - Step MUST NOT perform any pandas logic
    - Engine guarantees: identical feature columns on every output frame
    """

    def __init__(self, cfg: DataConfig, seed: int = 42):
        self.cfg = cfg
        self.seed = seed

    @logs.catch("dataset preparation failed")
    def prepare(self, train_raw: pd.DataFrame, test_raw: Optional[pd.DataFrame] = None) -> PreparedDataset:
        label = self.cfg.label_column

        train_raw = coerce_numeric(train_raw, self.cfg.coerce_columns)
        X, y = split_label(train_raw, label)

        X_train, X_valid, y_train, y_valid = train_validation_split(
            X, y, fraction=self.cfg.validation_fraction, seed=self.seed
        )

        imputer = Imputer(n_neighbors=self.cfg.knn_neighbors).fit(X_train)
        X_train = imputer.transform(X_train)
        X_valid = imputer.transform(X_valid)

        X_test = None
        if test_raw is not None:
            test_raw = coerce_numeric(test_raw, self.cfg.coerce_columns)
            if label in test_raw.columns:
                test_raw = test_raw.drop(columns=[label])
            missing = [c for c in X_train.columns if c not in test_raw.columns]
            if missing:
                raise SchemaMismatchError(f"test data missing feature columns: {missing[:10]}")
            X_test = imputer.transform(test_raw[list(X_train.columns)])

        frames = [X_train, X_valid] + ([X_test] if X_test is not None else [])
        schema = EncodingSchema.from_frames(*frames)
        bases = list(self.cfg.squared_features)
        if self.cfg.square_all_continuous:
            bases += [d.name for d in schema.descriptors if d.kind is FeatureKind.CONTINUOUS]
        schema = schema.with_squares(dict.fromkeys(bases))

        train = schema.add_squares(X_train).assign(**{label: y_train})
        validation = schema.add_squares(X_valid).assign(**{label: y_valid})
        test = schema.add_squares(X_test) if X_test is not None else None

        n_cat = sum(d.is_categorical for d in schema.descriptors)
        logs.info(
            f"[DatasetPrepareEngine] features={len(schema.descriptors)} "
            f"categorical={n_cat} encoded={len(schema.encoded_columns())} "
            f"train={len(train)} valid={len(validation)} "
            f"test={len(test) if test is not None else 0}"
        )

        return PreparedDataset(train=train, validation=validation, test=test, schema=schema)
