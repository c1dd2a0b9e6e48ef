#!filepath: tests/config/test_app_config.py
import pytest
import yaml
from pydantic import ValidationError

from churn_search.config.app_config import AppConfig, default_config_path
from churn_search.search.types import ModelFamily


def test_load_packaged_default():
    cfg = AppConfig.load()

    assert cfg.data.label_column == "y"
    assert cfg.data.square_all_continuous
    assert [ModelFamily(f) for f in cfg.search.families] == list(ModelFamily)
    assert len(cfg.search.strengths) == 4
    assert cfg.search.strengths[2].between == [18, 19]
    assert cfg.model.mlp.epochs == 20
    assert cfg.model.mlp.dropout == 0.5


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        AppConfig.load(str(tmp_path / "nope.yml"))


def test_load_partial_yaml_uses_defaults(tmp_path):
    p = tmp_path / "cfg.yml"
    p.write_text(
        yaml.safe_dump(
            {
                "search": {"families": ["logistic"], "strengths": [{"value": 0.01}]},
                "data": {"squared_features": ["x0"]},
            }
        )
    )

    cfg = AppConfig.load(str(p))

    assert cfg.search.families == ["logistic"]
    assert cfg.search.strengths[0].value == 0.01
    assert cfg.search.path.n_strengths == 50
    assert cfg.data.squared_features == ["x0"]
    assert cfg.model.forest.n_estimators == 200


def test_env_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("CHURN_SEARCH_OUTPUT_DIR", str(tmp_path / "out"))
    monkeypatch.setenv("CHURN_SEARCH_MAX_WORKERS", "3")

    cfg = AppConfig.load(default_config_path())

    assert cfg.data.output_dir == str(tmp_path / "out")
    assert cfg.search.max_workers == 3


def test_invalid_strength_spec_rejected(tmp_path):
    p = tmp_path / "cfg.yml"
    p.write_text(yaml.safe_dump({"search": {"strengths": [{"index": 1, "value": 0.1}]}}))

    with pytest.raises(ValidationError):
        AppConfig.load(str(p))


def test_invalid_validation_fraction():
    with pytest.raises(ValidationError):
        AppConfig(data={"validation_fraction": 1.5})
