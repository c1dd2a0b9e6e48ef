#!filepath: tests/observability/test_instrumentation.py

import time

from loguru import logger

from churn_search.observability.instrumentation import Instrumentation, NoOpInstrumentation
from churn_search.observability.metrics import MetricRecorder
from churn_search.observability.timeline_reporter import TimelineReporter
from churn_search.pipeline.step import PipelineStep


def test_metric_record():
    m = MetricRecorder(enabled=True)
    m.record("best_auc@logistic", 0.81)

    assert m.metrics == {"best_auc@logistic": 0.81}


def test_metric_disabled():
    m = MetricRecorder(enabled=False)
    m.record("x", 1)

    assert m.metrics == {}


def test_instrumentation_timer_leaf_only():
    inst = Instrumentation(enabled=True)

    with inst.timer("search", record=False):
        with inst.timer("CompareStep"):
            time.sleep(0.005)

    assert list(inst.timeline) == ["CompareStep"]
    assert inst.timeline["CompareStep"] > 0


def test_instrumentation_disabled():
    inst = Instrumentation(enabled=False)

    with inst.timer("x"):
        pass
    inst.metrics.record("rows", 1)

    assert inst.timeline == {}
    assert inst.metrics.metrics == {}


def test_noop_instrumentation():
    inst = NoOpInstrumentation()

    with inst.timer("x"):
        pass
    inst.metrics.record("rows", 1)
    inst.generate_timeline_report("r")

    assert inst.timeline == {}


def test_generate_timeline_report():
    inst = Instrumentation(enabled=True)

    with inst.timer("phase_X"):
        time.sleep(0.005)

    captured = []
    sink_id = logger.add(lambda msg: captured.append(str(msg)))
    inst.generate_timeline_report("run_42")
    logger.remove(sink_id)

    output = "\n".join(captured)

    assert "phase_X" in output
    assert "run_42" in output
    assert "Total" in output


def test_timeline_total():
    assert TimelineReporter({"a": 1.5, "b": 0.5}, "r").total() == 2.0


def test_step_defaults_to_noop_and_times_itself():
    class Echo(PipelineStep):
        def run(self, ctx):
            with self.timed():
                return ctx

    assert isinstance(Echo().inst, NoOpInstrumentation)

    inst = Instrumentation(enabled=True)
    assert Echo(inst).run("ctx") == "ctx"
    assert "Echo" in inst.timeline


def test_same_leaf_accumulates():
    inst = Instrumentation(enabled=True)

    for _ in range(2):
        with inst.timer("fit"):
            time.sleep(0.002)
    first = inst.timeline["fit"]

    with inst.timer("fit"):
        time.sleep(0.002)

    assert inst.timeline["fit"] > first
    assert list(inst.timeline) == ["fit"]


def test_metric_overwrite_keeps_last():
    m = MetricRecorder(enabled=True)
    m.record("best_model", "logistic@set1")
    m.record("best_model", "random_forest@set3")

    assert m.metrics == {"best_model": "random_forest@set3"}
