# churn_search/search/steps/holdout_predict_step.py
from __future__ import annotations

from churn_search.pipeline.step import PipelineStep
from churn_search.search.context import SearchContext
from churn_search.search.engines.predict_engine import PredictEngine
from churn_search.search.engines.report_engine import ReportEngine
from churn_search.utils.logger import logs


class HoldoutPredictStep(PipelineStep):
    """
    Contract:
    - consumes ctx.best / ctx.test
    - produces ctx.test_proba, writes test_predictions.csv
    - 无 test 数据或无可用模型 → skip
    """

    def __init__(self, engine: ReportEngine, inst=None):
        super().__init__(inst)
        self.engine = engine

    def run(self, ctx: SearchContext) -> SearchContext:
        if ctx.test is None:
            logs.info(f"[{self.step_name}] no test data -> skip")
            return ctx
        if ctx.best is None:
            logs.warning(f"[{self.step_name}] no selectable model -> skip")
            return ctx

        with self.timed():
            predictor = PredictEngine(ctx.schema, cfg=ctx.cfg.model, seed=ctx.cfg.search.seed)
            ctx.test_proba = predictor.predict(ctx.best, ctx.test)
            ctx.outputs["predictions"] = self.engine.write_predictions(ctx.test_proba, ctx.run_dir)

        logs.info(
            f"[{self.step_name}] {len(ctx.test_proba)} rows scored with "
            f"{ctx.best.family.value}@set{ctx.best.feature_set_index}, "
            f"mean p={ctx.test_proba.mean():.4f}"
        )
        return ctx
