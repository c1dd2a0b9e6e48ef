# churn_search/workflows/model_search.py
from __future__ import annotations

from churn_search.config.app_config import AppConfig
from churn_search.observability.instrumentation import Instrumentation
from churn_search.search.engines.dataset_prepare_engine import DatasetPrepareEngine
from churn_search.search.engines.regularization_path_engine import RegularizationPathEngine
from churn_search.search.engines.report_engine import ReportEngine
from churn_search.search.pipeline import SearchPipeline
from churn_search.search.steps.compare_step import CompareStep
from churn_search.search.steps.dataset_prepare_step import DatasetPrepareStep
from churn_search.search.steps.feature_set_step import FeatureSetStep
from churn_search.search.steps.holdout_predict_step import HoldoutPredictStep
from churn_search.search.steps.regularization_path_step import RegularizationPathStep
from churn_search.search.steps.selection_report_step import SelectionReportStep
from churn_search.utils.path import PathManager


def build_model_search(cfg: AppConfig | None = None, inst: Instrumentation | None = None) -> SearchPipeline:
    """
    Candidate Model Search Workflow (FINAL / FROZEN)
    """

    if cfg is None:
        cfg = AppConfig.load()
    if inst is None:
        inst = Instrumentation()

    pm = PathManager(cfg.data.output_dir)
    report = ReportEngine()

    return SearchPipeline(
        steps=[
            DatasetPrepareStep(DatasetPrepareEngine(cfg.data, seed=cfg.search.seed), inst=inst),
            RegularizationPathStep(RegularizationPathEngine(cfg.search.path, seed=cfg.search.seed), inst=inst),
            FeatureSetStep(inst=inst),
            CompareStep(inst=inst),
            SelectionReportStep(report, inst=inst),
            HoldoutPredictStep(report, inst=inst),
        ],
        pm=pm,
        inst=inst,
        cfg=cfg,
    )


def build_path_preview(cfg: AppConfig | None = None, inst: Instrumentation | None = None) -> SearchPipeline:
    """
    Data prep + regularization path only (used to pick strength indices).
    """

    if cfg is None:
        cfg = AppConfig.load()
    if inst is None:
        inst = Instrumentation()

    return SearchPipeline(
        steps=[
            DatasetPrepareStep(DatasetPrepareEngine(cfg.data, seed=cfg.search.seed), inst=inst),
            RegularizationPathStep(RegularizationPathEngine(cfg.search.path, seed=cfg.search.seed), inst=inst),
        ],
        pm=PathManager(cfg.data.output_dir),
        inst=inst,
        cfg=cfg,
    )
