#!filepath: churn_search/config/data_config.py
from typing import List, Optional

from pydantic import BaseModel, Field


class DataConfig(BaseModel):
    """
    DataConfig

    语义：
      - 数据从哪里来 / 结果写到哪里
      - 哪些原始列需要数值化、平方
    """

    train_path: Optional[str] = None
    test_path: Optional[str] = None
    output_dir: str = "runs"

    label_column: str = "y"

    # held-out validation split of the labelled data
    validation_fraction: float = Field(0.25, gt=0.0, lt=1.0)

    # "$1,234.5" / "12.5%" style raw columns
    coerce_columns: List[str] = Field(default_factory=list)

    # continuous features that get a derived <name>_sq column
    squared_features: List[str] = Field(default_factory=list)
    # true → every continuous feature gets <name>_sq (in addition to squared_features)
    square_all_continuous: bool = False

    knn_neighbors: int = Field(5, ge=1)
