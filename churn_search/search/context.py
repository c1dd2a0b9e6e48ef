# churn_search/search/context.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from churn_search.data.schema import EncodingSchema
from churn_search.search.engines.regularization_path_engine import RegularizationPath
from churn_search.search.types import CandidateFeatureSet, ModelFamily, ModelRecord


@dataclass
class SearchContext:
    """
    SearchContext（FINAL / FROZEN）

    Semantics:
    - One context == one search run
    - run_id is immutable and mandatory
    - Step 之间唯一通信载体，只存事实 / 中间态
    """

    # -------------------------
    # Identity (FROZEN)
    # -------------------------
    run_id: str

    # -------------------------
    # Static bindings
    # -------------------------
    cfg: Any
    inst: Any
    run_dir: Path

    # -------------------------
    # Raw inputs (None → load from cfg.data paths)
    # -------------------------
    train_raw: Optional[pd.DataFrame] = None
    test_raw: Optional[pd.DataFrame] = None

    # -------------------------
    # Prepared data
    # -------------------------
    train: Optional[pd.DataFrame] = None
    validation: Optional[pd.DataFrame] = None
    test: Optional[pd.DataFrame] = None
    schema: Optional[EncodingSchema] = None

    # -------------------------
    # Search state
    # -------------------------
    path: Optional[RegularizationPath] = None
    feature_sets: List[CandidateFeatureSet] = field(default_factory=list)
    records: List[ModelRecord] = field(default_factory=list)

    # -------------------------
    # Reports
    # -------------------------
    selection: Optional[pd.DataFrame] = None
    best_by_family: Dict[ModelFamily, Optional[ModelRecord]] = field(default_factory=dict)
    best: Optional[ModelRecord] = None
    test_proba: Optional[pd.Series] = None
    outputs: Dict[str, Path] = field(default_factory=dict)
