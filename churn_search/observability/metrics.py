#!filepath: churn_search/observability/metrics.py
from typing import Any, Dict

from churn_search.utils.logger import logs


class MetricRecorder:
    """
    Run 级 metrics：best_auc@<family>、best_model ...
    同名 metric 覆盖旧值（debug 日志留痕）。
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.metrics: Dict[str, Any] = {}

    def record(self, name: str, value: Any):
        if not self.enabled:
            return

        previous = self.metrics.get(name)
        if previous is not None and previous != value:
            logs.debug(f"[Metric] {name}: {previous} -> {value}")

        self.metrics[name] = value
        logs.info(f"[Metric] {name} = {value}")
