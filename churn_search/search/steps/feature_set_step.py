# churn_search/search/steps/feature_set_step.py
from __future__ import annotations

from churn_search.pipeline.step import PipelineStep
from churn_search.search.context import SearchContext
from churn_search.search.engines.feature_set_engine import extract_feature_sets
from churn_search.utils.errors import UserInputError
from churn_search.utils.logger import logs


class FeatureSetStep(PipelineStep):
    """
    Contract:
    - consumes ctx.path / ctx.schema / cfg.search.strengths
    - produces ctx.feature_sets (sparsest first, full set last)
    """

    def run(self, ctx: SearchContext) -> SearchContext:
        self.requires(ctx, "path", "schema")

        with self.timed():
            strengths = [spec.resolve(ctx.path) for spec in ctx.cfg.search.strengths]

            sets = extract_feature_sets(
                ctx.path,
                strengths,
                parents=ctx.schema.indicator_parents(),
                full_features=ctx.schema.descriptors,
            )

        if len(sets[-1]) == 0:
            raise UserInputError("schema has no features")

        empty = [fs for fs in sets if len(fs) == 0]
        if empty:
            raise UserInputError(
                f"strength {empty[0].strength:.6g} selects no features; "
                f"choose a weaker strength (larger path index)"
            )

        for fs in sets:
            label = "full" if fs.is_full else f"strength={fs.strength:.6g}"
            logs.info(f"[{self.step_name}] set #{fs.index}: {len(fs)} features ({label})")

        ctx.feature_sets = sets
        return ctx
