# churn_search/search/steps/compare_step.py
from __future__ import annotations

from churn_search.pipeline.step import PipelineStep
from churn_search.search.context import SearchContext
from churn_search.search.engines.compare_engine import compare_all


class CompareStep(PipelineStep):
    """
    Contract:
    - consumes ctx.feature_sets / ctx.train / ctx.validation
    - produces ctx.records (feature-set outer, family inner)
    """

    def run(self, ctx: SearchContext) -> SearchContext:
        self.requires(ctx, "train", "validation", "schema")
        search = ctx.cfg.search

        with self.timed():
            ctx.records = compare_all(
                ctx.feature_sets,
                search.families,
                ctx.train,
                ctx.validation,
                schema=ctx.schema,
                label_column=ctx.cfg.data.label_column,
                cfg=ctx.cfg.model,
                seed=search.seed,
                max_workers=search.max_workers,
            )

        return ctx
