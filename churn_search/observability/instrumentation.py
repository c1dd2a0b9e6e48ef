#!filepath: churn_search/observability/instrumentation.py
from __future__ import annotations

from collections import OrderedDict
from contextlib import contextmanager
from time import perf_counter
from typing import Dict, Iterator

from churn_search.observability.metrics import MetricRecorder
from churn_search.observability.timeline_reporter import TimelineReporter


class Instrumentation:
    """
    Search run instrumentation.

    - timer(name)                 leaf：耗时写入 timeline（同名累加）
    - timer(name, record=False)   父级 scope：只界定 wall-time，无副作用
    - metrics                     run 级标量（best_auc@<family>, best_model）

    timeline 顺序 = leaf 第一次结束的顺序。
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.metrics = MetricRecorder(enabled=enabled)
        self.timeline: Dict[str, float] = OrderedDict()

    @contextmanager
    def timer(self, name: str, *, record: bool = True) -> Iterator[None]:
        if not (self.enabled and record):
            yield
            return

        start = perf_counter()
        try:
            yield
        finally:
            self.timeline[name] = self.timeline.get(name, 0.0) + perf_counter() - start

    def generate_timeline_report(self, run_id: str):
        if not self.enabled:
            return
        TimelineReporter(self.timeline, run_id).print()


class NoOpInstrumentation(Instrumentation):
    """Step 没有注入 inst 时使用：不计时、不记 metric、不输出。"""

    def __init__(self):
        super().__init__(enabled=False)
