from __future__ import annotations

from pathlib import Path

import pandas as pd


class ReportEngine:
    """
    ReportEngine（FINAL / FROZEN）

    Responsibility:
    - Persist search reports (CSV)
    """

    def write_csv(
        self,
        df: pd.DataFrame,
        out_dir: Path,
        name: str,
        *,
        index: bool = False,
    ) -> Path:
        out_dir.mkdir(parents=True, exist_ok=True)
        path = out_dir / name
        df.to_csv(path, index=index)
        return path

    def write_predictions(
        self,
        proba: pd.Series,
        out_dir: Path,
        name: str = "test_predictions.csv",
    ) -> Path:
        return self.write_csv(proba.rename("churn_probability").to_frame(), out_dir, name, index=True)
