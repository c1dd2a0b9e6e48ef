# churn_search/data/loader.py
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Tuple

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split

from churn_search.utils.errors import SchemaMismatchError, UserInputError
from churn_search.utils.logger import logs

_STRIP_CHARS = r"[\$%,\s]"


def load_table(path: str | Path) -> pd.DataFrame:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)
    df = pd.read_csv(path)
    logs.info(f"[Loader] {path.name} rows={len(df)} cols={df.shape[1]}")
    return df


def coerce_numeric(df: pd.DataFrame, columns: Iterable[str]) -> pd.DataFrame:
    """
    "$1,024.50" -> 1024.5, "12.5%" -> 12.5 (percent units kept).
    Unparseable values become NaN and are left to the imputer.
    """
    out = df.copy()
    for col in columns:
        if col not in out.columns:
            raise SchemaMismatchError(f"coerce column '{col}' missing from table")
        if pd.api.types.is_numeric_dtype(out[col]):
            continue
        cleaned = out[col].astype("string").str.replace(_STRIP_CHARS, "", regex=True)
        out[col] = pd.to_numeric(cleaned, errors="coerce").astype(float)
    return out


def split_label(df: pd.DataFrame, label_column: str) -> Tuple[pd.DataFrame, pd.Series]:
    """
    Returns (X, y). y is int 0/1, 1 = churn.
    """
    if label_column not in df.columns:
        raise SchemaMismatchError(f"label column '{label_column}' missing from table")

    raw = df[label_column]
    if raw.isna().any():
        raise UserInputError(f"label column '{label_column}' has missing values")

    if raw.dtype == bool:
        y = raw.astype(int)
    else:
        y = pd.to_numeric(raw.astype(str).str.strip(), errors="coerce")

    values = set(np.unique(y.dropna()))
    if y.isna().any() or not values <= {0, 1}:
        raise UserInputError(
            f"label column '{label_column}' must be binary 0/1, got {sorted(map(str, raw.unique()))[:5]}"
        )

    return df.drop(columns=[label_column]), y.astype(int).rename(label_column)


def train_validation_split(
        X: pd.DataFrame,
        y: pd.Series,
        *,
        fraction: float,
        seed: int,
) -> Tuple[pd.DataFrame, pd.DataFrame, pd.Series, pd.Series]:
    """
    Stratified split; original row index is preserved on both sides.

    Returns:
        X_train, X_valid, y_train, y_valid
    """
    stratify = y if y.nunique() > 1 else None
    X_train, X_valid, y_train, y_valid = train_test_split(
        X, y, test_size=fraction, stratify=stratify, random_state=seed
    )
    logs.info(
        f"[Loader] split train={len(X_train)} valid={len(X_valid)} "
        f"pos_rate={y_train.mean():.4f}/{y_valid.mean():.4f}"
    )
    return X_train, X_valid, y_train, y_valid


__all__ = [
    "load_table",
    "coerce_numeric",
    "split_label",
    "train_validation_split",
]
