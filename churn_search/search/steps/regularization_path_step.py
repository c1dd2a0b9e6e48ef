# churn_search/search/steps/regularization_path_step.py
from __future__ import annotations

from churn_search.pipeline.step import PipelineStep
from churn_search.search.context import SearchContext
from churn_search.search.engines.regularization_path_engine import RegularizationPathEngine


class RegularizationPathStep(PipelineStep):
    """
    Contract:
    - consumes ctx.train / ctx.schema
    - produces ctx.path (fitted on ALL encoded features of the train split)
    """

    def __init__(self, engine: RegularizationPathEngine, inst=None):
        super().__init__(inst)
        self.engine = engine

    def run(self, ctx: SearchContext) -> SearchContext:
        self.requires(ctx, "train", "schema")
        label = ctx.cfg.data.label_column

        with self.timed():
            X = ctx.schema.encode(ctx.train)
            ctx.path = self.engine.fit(X, ctx.train[label])

        return ctx
