# churn_search/search/steps/dataset_prepare_step.py
from __future__ import annotations

from churn_search.data.loader import load_table
from churn_search.pipeline.step import PipelineStep
from churn_search.search.context import SearchContext
from churn_search.search.engines.dataset_prepare_engine import DatasetPrepareEngine
from churn_search.utils.errors import UserInputError
from churn_search.utils.logger import logs


class DatasetPrepareStep(PipelineStep):
    """
    DatasetPrepareStep（FINAL）

    Contract:
    - consumes ctx.train_raw / ctx.test_raw (或 cfg.data 路径)
    - produces ctx.train / ctx.validation / ctx.test / ctx.schema
    """

    def __init__(self, engine: DatasetPrepareEngine, inst=None):
        super().__init__(inst)
        self.engine = engine

    def run(self, ctx: SearchContext) -> SearchContext:
        data = ctx.cfg.data

        with self.timed():
            if ctx.train_raw is None:
                if not data.train_path:
                    raise UserInputError("no training data: set data.train_path or pass a frame")
                ctx.train_raw = load_table(data.train_path)

            if ctx.test_raw is None and data.test_path:
                ctx.test_raw = load_table(data.test_path)

            prepared = self.engine.prepare(ctx.train_raw, ctx.test_raw)

        ctx.train = prepared.train
        ctx.validation = prepared.validation
        ctx.test = prepared.test
        ctx.schema = prepared.schema

        if ctx.test is None:
            logs.info(f"[{self.step_name}] no test data, test prediction will be skipped")
        return ctx
