# churn_search/search/pipeline.py
from __future__ import annotations

from typing import List, Optional

import pandas as pd

from churn_search.config.app_config import AppConfig
from churn_search.observability.instrumentation import Instrumentation
from churn_search.pipeline.step import PipelineStep
from churn_search.search.context import SearchContext
from churn_search.utils.logger import logs
from churn_search.utils.path import PathManager


class SearchPipeline:
    """
    SearchPipeline（FINAL / FROZEN）

    Semantics:
    - Pipeline owns orchestration (step order / context)
    - Steps execute semantics via engines
    - One run() == one run_id == one output directory
    """

    def __init__(
            self,
            *,
            steps: List[PipelineStep],
            pm: PathManager,
            inst: Instrumentation,
            cfg: AppConfig,
    ):
        self.steps = steps
        self.pm = pm
        self.inst = inst
        self.cfg = cfg

    def run(
            self,
            run_id: str,
            *,
            train_raw: Optional[pd.DataFrame] = None,
            test_raw: Optional[pd.DataFrame] = None,
    ) -> SearchContext:
        logs.info(f"[SearchPipeline] ====== START run_id={run_id} ======")

        ctx = SearchContext(
            run_id=run_id,
            cfg=self.cfg,
            inst=self.inst,
            run_dir=self.pm.run_dir(run_id),
            train_raw=train_raw,
            test_raw=test_raw,
        )

        for step in self.steps:
            ctx = step.run(ctx)

        self.inst.generate_timeline_report(run_id)

        logs.info(f"[SearchPipeline] ====== DONE run_id={run_id} ======")
        return ctx
