# churn_search/search/engines/compare_engine.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

import pandas as pd

from churn_search.config.model_config import ModelConfig
from churn_search.data.schema import EncodingSchema
from churn_search.pipeline.parallel.executor import ParallelExecutor
from churn_search.pipeline.parallel.types import ParallelKind
from churn_search.search.engines.registry import resolve_families
from churn_search.search.engines.train_evaluate_engine import train_and_evaluate
from churn_search.search.types import CandidateFeatureSet, ModelFamily, ModelRecord
from churn_search.utils.errors import UserInputError
from churn_search.utils.logger import logs


@dataclass(frozen=True)
class CandidateJob:
    """One (feature set, family) unit of work; read-only inputs only."""

    feature_set: CandidateFeatureSet
    family: ModelFamily
    train: pd.DataFrame
    validation: pd.DataFrame
    schema: EncodingSchema
    label_column: str
    cfg: ModelConfig
    seed: int


def run_candidate(job: CandidateJob) -> ModelRecord:
    # 模块级函数：ProcessPoolExecutor 需要可 pickle 的 handler
    return train_and_evaluate(
        job.feature_set,
        job.family,
        job.train,
        job.validation,
        schema=job.schema,
        label_column=job.label_column,
        cfg=job.cfg,
        seed=job.seed,
    )


def compare_all(
        feature_sets: Sequence[CandidateFeatureSet],
        families: Sequence["ModelFamily | str"],
        train: pd.DataFrame,
        validation: pd.DataFrame,
        *,
        schema: EncodingSchema,
        label_column: str = "y",
        cfg: Optional[ModelConfig] = None,
        seed: int = 42,
        max_workers: Optional[int] = None,
) -> List[ModelRecord]:
    """
    Comparison driver.

    Order (FROZEN): feature-set index OUTER, family INNER, i.e.
        (1, f1), (1, f2), ..., (2, f1), (2, f2), ...
    The returned order is the same whatever order workers finish in.
    """
    families = resolve_families(families)
    cfg = cfg if cfg is not None else ModelConfig()

    indices = [fs.index for fs in feature_sets]
    if len(set(indices)) != len(indices):
        raise UserInputError(f"duplicate feature-set indices: {indices}")

    jobs = [
        CandidateJob(
            feature_set=fs,
            family=family,
            train=train,
            validation=validation,
            schema=schema,
            label_column=label_column,
            cfg=cfg,
            seed=seed,
        )
        for fs in feature_sets
        for family in families
    ]

    records: List[ModelRecord] = ParallelExecutor.run(
        kind=ParallelKind.CANDIDATE,
        items=jobs,
        handler=run_candidate,
        max_workers=max_workers,
    )

    for r in records:
        auc = f"{r.auc:.4f}" if r.auc_defined else "undefined"
        acc = f"{r.accuracy:.4f}" if r.accuracy is not None else "n/a"
        logs.info(
            f"[CompareEngine] set={r.feature_set_index} n={r.n_features:<4d} "
            f"family={r.family.value:<15s} auc={auc} acc={acc} "
            f"time={r.fit_seconds:.2f}s"
        )

    return records
