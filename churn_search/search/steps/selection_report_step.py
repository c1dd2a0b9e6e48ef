# churn_search/search/steps/selection_report_step.py
from __future__ import annotations

import pandas as pd

from churn_search.pipeline.step import PipelineStep
from churn_search.search.context import SearchContext
from churn_search.search.engines.report_engine import ReportEngine
from churn_search.search.engines.selection_engine import (
    best_by_family,
    select_best,
    selection_table,
)
from churn_search.utils.logger import logs


class SelectionReportStep(PipelineStep):
    """
    Contract:
    - consumes ctx.records
    - produces ctx.selection / ctx.best_by_family / ctx.best
    - writes results.csv + selection.csv into ctx.run_dir
    """

    def __init__(self, engine: ReportEngine, inst=None):
        super().__init__(inst)
        self.engine = engine

    def run(self, ctx: SearchContext) -> SearchContext:
        with self.timed():
            results = pd.DataFrame([r.to_row() for r in ctx.records])
            ctx.selection = selection_table(ctx.records)
            ctx.best_by_family = best_by_family(ctx.records)
            ctx.best = select_best(ctx.records)

            ctx.outputs["results"] = self.engine.write_csv(results, ctx.run_dir, "results.csv")
            ctx.outputs["selection"] = self.engine.write_csv(ctx.selection, ctx.run_dir, "selection.csv")

        for family, rec in ctx.best_by_family.items():
            if rec is None:
                logs.warning(f"[{self.step_name}] {family.value}: no record with a defined AUC")
                continue
            self.inst.metrics.record(f"best_auc@{family.value}", round(rec.auc, 6))
            logs.info(
                f"[{self.step_name}] {family.value}: set #{rec.feature_set_index} "
                f"({rec.n_features} features) auc={rec.auc:.4f}"
            )

        if ctx.best is not None:
            self.inst.metrics.record("best_model", f"{ctx.best.family.value}@set{ctx.best.feature_set_index}")

        return ctx
