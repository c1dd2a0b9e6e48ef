#!filepath: churn_search/utils/path.py
from pathlib import Path

from churn_search.utils.logger import logs


class PathManager:
    """
    输出目录结构：

    <output_dir>/
     └── <run_id>/
           ├── results.csv
           ├── selection.csv
           └── test_predictions.csv
    """

    def __init__(self, output_dir: Path | str = "runs"):
        self.output_dir = Path(output_dir).resolve()
        logs.debug(f"[PathManager] output_dir = {self.output_dir}")

    def run_dir(self, run_id: str) -> Path:
        return self.output_dir / run_id
