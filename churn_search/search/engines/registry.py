# churn_search/search/engines/registry.py
from typing import Callable, Dict, Iterable, List

from churn_search.config.model_config import ModelConfig
from churn_search.search.engines.model_train_engine import ModelTrainEngine
from churn_search.search.engines.model.logistic_train_engine import (
    LassoLogisticTrainEngine,
    LogisticTrainEngine,
)
from churn_search.search.engines.model.tree_train_engine import (
    DecisionTreeTrainEngine,
    RandomForestTrainEngine,
)
from churn_search.search.types import ModelFamily
from churn_search.utils.errors import UserInputError


def _single_mlp(cfg: ModelConfig, seed: int) -> ModelTrainEngine:
    # tensorflow 只在真正需要 MLP 时导入
    from churn_search.search.engines.model.mlp_train_engine import SingleHiddenMLPTrainEngine
    return SingleHiddenMLPTrainEngine(cfg, seed)


def _double_mlp(cfg: ModelConfig, seed: int) -> ModelTrainEngine:
    from churn_search.search.engines.model.mlp_train_engine import DoubleHiddenMLPTrainEngine
    return DoubleHiddenMLPTrainEngine(cfg, seed)


_ENGINE_REGISTRY: Dict[ModelFamily, Callable[[ModelConfig, int], ModelTrainEngine]] = {
    ModelFamily.LOGISTIC: lambda cfg, seed: LogisticTrainEngine(cfg, seed),
    ModelFamily.LASSO_LOGISTIC: lambda cfg, seed: LassoLogisticTrainEngine(cfg, seed),
    ModelFamily.RANDOM_FOREST: lambda cfg, seed: RandomForestTrainEngine(cfg, seed),
    ModelFamily.DECISION_TREE: lambda cfg, seed: DecisionTreeTrainEngine(cfg, seed),
    ModelFamily.MLP_SINGLE: _single_mlp,
    ModelFamily.MLP_DOUBLE: _double_mlp,
}


def resolve_family(family: "ModelFamily | str") -> ModelFamily:
    if isinstance(family, ModelFamily):
        return family
    try:
        return ModelFamily(str(family))
    except ValueError:
        available = ", ".join(f.value for f in ModelFamily)
        raise UserInputError(
            f"Unknown model family '{family}'. Available: {available}"
        ) from None


def resolve_families(families: Iterable["ModelFamily | str"]) -> List[ModelFamily]:
    resolved = [resolve_family(f) for f in families]
    if len(set(resolved)) != len(resolved):
        raise UserInputError(f"duplicate model families: {[f.value for f in resolved]}")
    return resolved


def resolve_model_train_engine(
        family: "ModelFamily | str",
        *,
        cfg: ModelConfig,
        seed: int = 42,
) -> ModelTrainEngine:
    return _ENGINE_REGISTRY[resolve_family(family)](cfg, seed)
