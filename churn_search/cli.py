#!filepath: churn_search/cli.py
from datetime import datetime
from typing import Optional

import typer
from rich import print
from rich.table import Table

from churn_search import __version__, init_logging
from churn_search.config.app_config import AppConfig
from churn_search.search.engines.feature_set_engine import coalesce_to_parents
from churn_search.utils.errors import ChurnSearchError

app = typer.Typer(help="Churn candidate model search CLI")


def _load_config(config: Optional[str], train: Optional[str], test: Optional[str]) -> AppConfig:
    cfg = AppConfig.load(config)
    if train:
        cfg.data.train_path = train
    if test:
        cfg.data.test_path = test
    init_logging(cfg.log)
    return cfg


def _abort(e: ChurnSearchError):
    # 用户可修正的错误：只打印原因，不打印 traceback
    print(f"[red]{type(e).__name__}: {e}[/red]")
    raise typer.Exit(code=1) from e


@app.command()
def version():
    print(f"v{__version__}")


@app.command()
def search(
        config: Optional[str] = typer.Option(None, help="YAML config (default: packaged base.yml)"),
        train: Optional[str] = typer.Option(None, help="labelled training CSV"),
        test: Optional[str] = typer.Option(None, help="unlabelled test CSV"),
        run_id: Optional[str] = typer.Option(None, help="output sub-directory name"),
):
    """
    运行完整 candidate model search（path → feature sets → compare → select → predict）
    """
    from churn_search.workflows.model_search import build_model_search

    cfg = _load_config(config, train, test)
    run_id = run_id or datetime.now().strftime("%Y%m%d_%H%M%S")

    print(f"[green]Running model search {cfg.search.name} run_id={run_id}[/green]")
    try:
        ctx = build_model_search(cfg).run(run_id)
    except ChurnSearchError as e:
        _abort(e)

    table = Table(title=f"Best per family ({run_id})")
    for col in ("family", "set", "n_features", "auc", "accuracy"):
        table.add_column(col)
    for family, rec in ctx.best_by_family.items():
        if rec is None:
            table.add_row(family.value, "-", "-", "undefined", "-")
            continue
        table.add_row(
            family.value,
            str(rec.feature_set_index),
            str(rec.n_features),
            f"{rec.auc:.4f}",
            f"{rec.accuracy:.4f}",
        )
    print(table)

    for name, path in ctx.outputs.items():
        print(f"[blue]{name}[/blue]: {path}")


@app.command()
def path(
        config: Optional[str] = typer.Option(None, help="YAML config (default: packaged base.yml)"),
        train: Optional[str] = typer.Option(None, help="labelled training CSV"),
):
    """
    拟合 regularization path，列出每个 strength 对应的 feature 数（用于挑选 strengths.index）
    """
    from churn_search.workflows.model_search import build_path_preview

    cfg = _load_config(config, train, None)
    cfg.data.test_path = None
    try:
        ctx = build_path_preview(cfg).run(datetime.now().strftime("path_%Y%m%d_%H%M%S"))
    except ChurnSearchError as e:
        _abort(e)

    parents = ctx.schema.indicator_parents()
    table = Table(title="Regularization path")
    for col in ("index", "strength", "indicators", "features"):
        table.add_column(col)
    for i in range(len(ctx.path)):
        s = ctx.path.strength_at(i)
        support = ctx.path.support_at(s)
        table.add_row(str(i), f"{s:.6g}", str(len(support)), str(len(coalesce_to_parents(support, parents))))
    print(table)


if __name__ == "__main__":
    app()

# python -m churn_search.cli search --train data/train.csv --test data/test.csv
