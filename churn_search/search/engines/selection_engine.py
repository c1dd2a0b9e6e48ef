# churn_search/search/engines/selection_engine.py
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from churn_search.search.engines.registry import resolve_family
from churn_search.search.types import ModelFamily, ModelRecord


def _rank_key(r: ModelRecord):
    # max AUC → fewer features → lower feature-set index
    return -r.auc, r.n_features, r.feature_set_index


def select_best(
        records: Iterable[ModelRecord],
        family: "ModelFamily | str | None" = None,
) -> Optional[ModelRecord]:
    """
    Best record (optionally within one family).

    Records with undefined AUC never win; None if nothing is defined.
    The 'within a small margin prefer the simpler model' call is NOT made
    here: selection_table() exposes auc_gap for the caller.
    """
    fam = resolve_family(family) if family is not None else None
    candidates = [
        r for r in records
        if r.auc_defined and (fam is None or r.family is fam)
    ]
    if not candidates:
        return None
    return min(candidates, key=_rank_key)


def best_by_family(records: Iterable[ModelRecord]) -> Dict[ModelFamily, Optional[ModelRecord]]:
    records = list(records)
    families: List[ModelFamily] = []
    for r in records:
        if r.family not in families:
            families.append(r.family)
    return {f: select_best(records, f) for f in families}


def selection_table(records: Iterable[ModelRecord]) -> pd.DataFrame:
    """
    One row per record (input order) plus:
      auc_gap          best AUC of the family minus this AUC
      is_best          this record is the family's pick
      fewer_features   n_features below the family pick's
    """
    records = list(records)
    best = best_by_family(records)

    rows = []
    for r in records:
        pick = best.get(r.family)
        row = r.to_row()
        if pick is not None and r.auc_defined:
            row["auc_gap"] = pick.auc - r.auc
        else:
            row["auc_gap"] = np.nan
        row["is_best"] = pick is not None and pick.key == r.key
        row["fewer_features"] = pick is not None and r.n_features < pick.n_features
        rows.append(row)

    return pd.DataFrame(rows)
