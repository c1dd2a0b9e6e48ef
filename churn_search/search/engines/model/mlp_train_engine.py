# churn_search/search/engines/model/mlp_train_engine.py
from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import Dict, List

import numpy as np
import pandas as pd
import tensorflow as tf
from tensorflow import keras

from churn_search.search.engines.model_train_engine import FitWarning, ModelTrainEngine
from churn_search.search.types import ModelFamily


@dataclass
class MLPArtifact:
    """
    Keras 模型以 (architecture json, weights) 形式保存，
    可以跨进程 pickle（ProcessPoolExecutor 返回值）。
    """

    model_json: str
    weights: List[np.ndarray]
    mean: np.ndarray
    scale: np.ndarray
    history: Dict[str, List[float]] = field(default_factory=dict)

    def standardize(self, X: np.ndarray) -> np.ndarray:
        return (X - self.mean) / self.scale


class MLPTrainEngine(ModelTrainEngine):
    """
    Sequential MLP (FINAL)

    Fixed architecture per family:
    - hidden layers: tanh, width = width_multiplier x n_inputs
    - Dropout(0.5) after every hidden layer
    - output: 1 unit sigmoid
    - loss: binary cross-entropy, SGD(lr=0.01, momentum=0.1)
    - 20 epochs, batch 10, validation_split 0.2 (monitoring only)

    Reproducibility: keras.utils.set_random_seed + op determinism.
    """

    hidden_layers: int = 1
    width_multiplier: int = 1

    def build(self, n_inputs: int) -> keras.Sequential:
        mlp = self.cfg.mlp
        width = max(1, n_inputs * self.width_multiplier)

        layers: list = [keras.Input(shape=(n_inputs,))]
        for _ in range(self.hidden_layers):
            layers.append(keras.layers.Dense(width, activation=mlp.hidden_activation))
            layers.append(keras.layers.Dropout(mlp.dropout))
        layers.append(keras.layers.Dense(1, activation=mlp.output_activation))

        model = keras.Sequential(layers, name=self.family.value)
        model.compile(
            optimizer=keras.optimizers.SGD(
                learning_rate=mlp.learning_rate,
                momentum=mlp.momentum,
            ),
            loss="binary_crossentropy",
        )
        return model

    def fit(self, X: pd.DataFrame, y: pd.Series) -> MLPArtifact:
        mlp = self.cfg.mlp

        keras.utils.set_random_seed(self.seed)
        tf.config.experimental.enable_op_determinism()

        values = X.to_numpy(dtype=np.float32)
        mean = values.mean(axis=0)
        scale = values.std(axis=0)
        scale[scale == 0] = 1.0

        model = self.build(values.shape[1])
        history = model.fit(
            (values - mean) / scale,
            y.to_numpy(dtype=np.float32),
            epochs=mlp.epochs,
            batch_size=mlp.batch_size,
            validation_split=mlp.validation_split,
            shuffle=True,
            verbose=mlp.verbose,
        )

        hist = {k: [float(v) for v in vs] for k, vs in history.history.items()}
        losses = hist.get("loss", [])
        if not losses or not np.all(np.isfinite(losses)):
            warnings.warn(
                f"{self.family.value}: training loss is not finite "
                f"(last={losses[-1] if losses else None})",
                FitWarning,
            )

        return MLPArtifact(
            model_json=model.to_json(),
            weights=model.get_weights(),
            mean=mean,
            scale=scale,
            history=hist,
        )

    def predict_proba(self, artifact: MLPArtifact, X: pd.DataFrame) -> np.ndarray:
        model = keras.models.model_from_json(artifact.model_json)
        model.set_weights(artifact.weights)
        Z = artifact.standardize(X.to_numpy(dtype=np.float32))
        return model.predict(Z, verbose=0).ravel().astype(float)


class SingleHiddenMLPTrainEngine(MLPTrainEngine):
    family = ModelFamily.MLP_SINGLE
    hidden_layers = 1
    width_multiplier = 1


class DoubleHiddenMLPTrainEngine(MLPTrainEngine):
    family = ModelFamily.MLP_DOUBLE
    hidden_layers = 2
    width_multiplier = 3
