# churn_search/config/search_config.py
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


class StrengthSpec(BaseModel):
    """
    One requested point on the regularization path.

    Exactly one of:
      - index   : a fitted path position (0 = strongest penalty)
      - between : two fitted positions, geometric mean of their strengths
      - value   : an explicit strength
    """

    index: Optional[int] = None
    between: Optional[List[int]] = None
    value: Optional[float] = None

    @model_validator(mode="after")
    def _exactly_one(self) -> "StrengthSpec":
        given = [v for v in (self.index, self.between, self.value) if v is not None]
        if len(given) != 1:
            raise ValueError("StrengthSpec needs exactly one of index / between / value")
        if self.between is not None and len(self.between) != 2:
            raise ValueError("StrengthSpec.between needs exactly two path positions")
        return self

    def resolve(self, path) -> float:
        if self.index is not None:
            return path.strength_at(self.index)
        if self.between is not None:
            return path.geometric_mean(self.between[0], self.between[1])
        return float(self.value)


class PathConfig(BaseModel):
    n_strengths: int = Field(50, ge=2)
    # smallest strength = lambda_max * min_strength_ratio
    min_strength_ratio: float = Field(1e-3, gt=0.0, lt=1.0)
    max_iter: int = 2000
    tol: float = 1e-4


class SearchConfig(BaseModel):
    """
    SearchConfig（FINAL）

    语义：
      - 本次 candidate model search 的实验定义
      - feature set 由 strengths 决定（full set 永远追加在最后）
    """

    name: str = "default"
    seed: int = 42

    # None -> bounded by cpu count
    max_workers: Optional[int] = Field(None, ge=1)

    families: List[str] = Field(
        default_factory=lambda: [
            "logistic",
            "lasso_logistic",
            "random_forest",
            "decision_tree",
            "mlp_single",
            "mlp_double",
        ],
        min_length=1,
    )

    path: PathConfig = Field(default_factory=PathConfig)
    strengths: List[StrengthSpec] = Field(default_factory=list)
