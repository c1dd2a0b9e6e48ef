#!filepath: churn_search/config/app_config.py
import os

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .log_config import LogConfig
from .data_config import DataConfig
from .model_config import ModelConfig
from .search_config import SearchConfig
from churn_search.utils.logger import logs


def project_root() -> str:
    """
    返回项目根目录（基于当前文件位置推导）:
    churn_search/config/app_config.py → churn_search/config → churn_search → project_root
    """
    return os.path.abspath(os.path.join(os.path.dirname(__file__), "../../"))


def default_config_path() -> str:
    return os.path.join(os.path.dirname(os.path.abspath(__file__)), "base.yml")


class AppConfig(BaseModel):
    log: LogConfig = Field(default_factory=LogConfig)
    data: DataConfig = Field(default_factory=DataConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    model: ModelConfig = Field(default_factory=ModelConfig)

    @classmethod
    def load(cls, path: str | None = None) -> "AppConfig":
        """
        加载 YAML 配置 + .env
        - 默认使用 churn_search/config/base.yml
        - 不依赖当前工作目录
        """
        root = project_root()

        # 1) 先加载 .env（在项目根目录下）
        load_dotenv(os.path.join(root, ".env"))

        # 2) 决定配置文件路径
        if path is None:
            path = default_config_path()

        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")

        # 3) 读取 YAML
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        # 4) env 覆盖
        output_dir = os.getenv("CHURN_SEARCH_OUTPUT_DIR")
        if output_dir:
            raw.setdefault("data", {})["output_dir"] = output_dir

        max_workers = os.getenv("CHURN_SEARCH_MAX_WORKERS")
        if max_workers:
            raw.setdefault("search", {})["max_workers"] = int(max_workers)

        logs.debug(f"[AppConfig] loaded {path}")
        return cls(**raw)
