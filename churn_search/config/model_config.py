#!filepath: churn_search/config/model_config.py
from typing import Optional

from pydantic import BaseModel, Field


class LassoConfig(BaseModel):
    C: float = 1.0
    max_iter: int = 2000


class LogisticConfig(BaseModel):
    max_iter: int = 1000


class ForestConfig(BaseModel):
    n_estimators: int = 200
    max_depth: Optional[int] = None
    min_samples_leaf: int = 1
    n_jobs: int = 1


class TreeConfig(BaseModel):
    max_depth: Optional[int] = 8
    min_samples_leaf: int = 1


class MLPConfig(BaseModel):
    """
    MLP 固定超参（不按 call 调参）
    """

    hidden_activation: str = "tanh"
    output_activation: str = "sigmoid"
    dropout: float = Field(0.5, ge=0.0, lt=1.0)
    learning_rate: float = 0.01
    momentum: float = 0.1
    epochs: int = Field(20, ge=1)
    batch_size: int = Field(10, ge=1)
    # monitoring only, never used for selection
    validation_split: float = Field(0.2, ge=0.0, lt=1.0)
    verbose: int = 0


class ModelConfig(BaseModel):
    logistic: LogisticConfig = Field(default_factory=LogisticConfig)
    lasso: LassoConfig = Field(default_factory=LassoConfig)
    forest: ForestConfig = Field(default_factory=ForestConfig)
    tree: TreeConfig = Field(default_factory=TreeConfig)
    mlp: MLPConfig = Field(default_factory=MLPConfig)
