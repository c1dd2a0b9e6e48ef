# churn_search/pipeline/step.py
from __future__ import annotations

from typing import Any

from churn_search.observability.instrumentation import (
    Instrumentation,
    NoOpInstrumentation,
)


class PipelineStep:
    """
    Search Step 基类

    职责：
      1. orchestration（调度 / 条件执行 / 写回 ctx）
      2. Step 级 wall-time：每个 step 是 timeline 的一个 leaf

    约束：
      - pandas / sklearn / keras 计算全部在 Engine
      - 上游产物缺失 → requires() 直接报错，不做隐式补算
      - inst 可选；没有注入时为 NoOp
    """

    def __init__(self, inst: Instrumentation | None = None):
        self.inst: Instrumentation = inst if inst is not None else NoOpInstrumentation()

    @property
    def step_name(self) -> str:
        return self.__class__.__name__

    def timed(self):
        return self.inst.timer(self.step_name)

    def requires(self, ctx: Any, *fields: str) -> None:
        missing = [f for f in fields if getattr(ctx, f, None) is None]
        if missing:
            raise RuntimeError(
                f"[{self.step_name}] upstream output missing on context: {missing} "
                f"(check step order)"
            )

    def run(self, ctx: Any) -> Any:
        raise NotImplementedError
