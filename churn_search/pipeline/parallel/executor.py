# churn_search/pipeline/parallel/executor.py
from __future__ import annotations

import os
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Any, Callable, Dict, Iterable, TypeVar

from churn_search.pipeline.parallel.types import ParallelKind
from churn_search.utils.logger import logs

T = TypeVar("T")


class ParallelExecutor:
    """
    ParallelExecutor（FINAL）

    语义：
    - 统一的 ProcessPoolExecutor 封装
    - handler 必须是模块级函数（可 pickle）
    - 返回结果顺序 == items 顺序（与完成顺序无关）
    - worker 之间不共享可变结构：每个 future 的结果按 position 收集后再 merge
    - 任一 item 失败 → 取消剩余任务并抛出（fail fast）
    """

    @staticmethod
    def run(
            *,
            kind: ParallelKind,
            items: Iterable[T],
            handler: Callable[[T], Any],
            max_workers: int | None = None,
    ) -> list[Any]:
        items = list(items)
        if not items:
            logs.info("[ParallelExecutor] no items to process")
            return []

        workers = ParallelExecutor._resolve_workers(items, max_workers)

        logs.info(
            f"[ParallelExecutor] start "
            f"kind={kind.value} total={len(items)} workers={workers}"
        )

        if workers == 1:
            return ParallelExecutor._run_sequential(items, handler)
        return ParallelExecutor._run_parallel(items, handler, workers)

    # ---------------- internal ----------------

    @staticmethod
    def _resolve_workers(items: list, max_workers: int | None) -> int:
        cpu = os.cpu_count() or 1
        if max_workers is None:
            return max(1, min(cpu, len(items)))
        return max(1, min(max_workers, cpu, len(items)))

    @staticmethod
    def _run_sequential(
            items: list,
            handler: Callable[[Any], Any],
    ) -> list[Any]:
        return [handler(item) for item in items]

    @staticmethod
    def _run_parallel(
            items: list,
            handler: Callable[[Any], Any],
            workers: int,
    ) -> list[Any]:
        # position -> result，完成顺序无关
        collected: Dict[int, Any] = {}

        with ProcessPoolExecutor(max_workers=workers) as pool:
            futures = {
                pool.submit(handler, item): pos
                for pos, item in enumerate(items)
            }
            try:
                for fut in as_completed(futures):
                    collected[futures[fut]] = fut.result()
            except Exception:
                for fut in futures:
                    fut.cancel()
                raise

        return [collected[pos] for pos in range(len(items))]
