# churn_search/data/impute.py
from __future__ import annotations

from typing import Dict, List, Optional

import pandas as pd
from sklearn.impute import KNNImputer
from sklearn.preprocessing import StandardScaler

from churn_search.utils.logger import logs


class Imputer:
    """
    Imputer（fit on train, apply everywhere）

    - numeric     : KNNImputer over standardized numeric columns
    - categorical : training mode
    """

    def __init__(self, n_neighbors: int = 5):
        self.n_neighbors = n_neighbors
        self.numeric_cols: List[str] = []
        self.categorical_cols: List[str] = []
        self.modes: Dict[str, object] = {}
        self._scaler: Optional[StandardScaler] = None
        self._knn: Optional[KNNImputer] = None

    def fit(self, df: pd.DataFrame) -> "Imputer":
        self.numeric_cols = [c for c in df.columns if pd.api.types.is_numeric_dtype(df[c])
                             and not pd.api.types.is_bool_dtype(df[c])]
        self.categorical_cols = [c for c in df.columns if c not in self.numeric_cols]

        for col in self.categorical_cols:
            mode = df[col].mode(dropna=True)
            self.modes[col] = mode.iloc[0] if len(mode) else None

        if self.numeric_cols:
            self._scaler = StandardScaler().fit(df[self.numeric_cols])
            self._knn = KNNImputer(n_neighbors=self.n_neighbors, keep_empty_features=True).fit(
                self._scaler.transform(df[self.numeric_cols])
            )
        return self

    def transform(self, df: pd.DataFrame) -> pd.DataFrame:
        out = df.copy()

        for col in self.categorical_cols:
            if col in out.columns and self.modes.get(col) is not None:
                out[col] = out[col].fillna(self.modes[col])

        if self._knn is not None and out[self.numeric_cols].isna().any().any():
            n_missing = int(out[self.numeric_cols].isna().sum().sum())
            scaled = self._scaler.transform(out[self.numeric_cols])
            filled = self._scaler.inverse_transform(self._knn.transform(scaled))
            out[self.numeric_cols] = pd.DataFrame(
                filled, columns=self.numeric_cols, index=out.index
            )
            logs.info(f"[Imputer] filled {n_missing} numeric values (k={self.n_neighbors})")

        return out
