# churn_search/search/engines/regularization_path_engine.py
from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Dict, FrozenSet, Tuple

import numpy as np
import pandas as pd
from sklearn.exceptions import ConvergenceWarning
from sklearn.linear_model import LogisticRegression
from sklearn.preprocessing import StandardScaler

from churn_search.config.search_config import PathConfig
from churn_search.utils.errors import InvalidStrengthError, SchemaMismatchError
from churn_search.utils.logger import logs

# relative tolerance for "strength equals a fitted value"
_EXACT_RTOL = 1e-9


@dataclass(frozen=True)
class RegularizationPath:
    """
    RegularizationPath（FROZEN）

    - strengths 严格递减（index 0 = 最强惩罚，最稀疏）
    - coefs[i] 对应 strengths[i]，列顺序 = feature_names（encoded columns）
    - intercept 单独存放，不参与 feature set
    """

    strengths: np.ndarray
    coefs: np.ndarray
    intercepts: np.ndarray
    feature_names: Tuple[str, ...]

    def __post_init__(self):
        if self.coefs.shape != (len(self.strengths), len(self.feature_names)):
            raise ValueError(
                f"coefs shape {self.coefs.shape} does not match "
                f"({len(self.strengths)}, {len(self.feature_names)})"
            )
        if len(self.strengths) == 0:
            raise ValueError("empty regularization path")
        if np.any(np.diff(self.strengths) >= 0):
            raise ValueError("path strengths must be strictly decreasing")

    def __len__(self) -> int:
        return len(self.strengths)

    @property
    def max_strength(self) -> float:
        return float(self.strengths[0])

    @property
    def min_strength(self) -> float:
        return float(self.strengths[-1])

    # ------------------------------------------------------------------
    # Path positions
    # ------------------------------------------------------------------
    def strength_at(self, position: int) -> float:
        if not 0 <= position < len(self):
            raise InvalidStrengthError(
                f"path position {position} out of range [0, {len(self) - 1}]"
            )
        return float(self.strengths[position])

    def geometric_mean(self, i: int, j: int) -> float:
        """Strength halfway (log scale) between two fitted positions."""
        return float(np.sqrt(self.strength_at(i) * self.strength_at(j)))

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------
    def coefficients_at(self, strength: float) -> pd.Series:
        """
        Coefficients at a strength.

        - equal to a fitted strength → that row (direct lookup)
        - strictly inside the fitted range → linear interpolation between
          the two neighbouring fitted solutions
        - outside the range → InvalidStrengthError (never clamped)
        """
        s = float(strength)
        if not np.isfinite(s) or s <= 0:
            raise InvalidStrengthError(f"strength must be positive and finite, got {strength}")

        exact = np.flatnonzero(np.isclose(self.strengths, s, rtol=_EXACT_RTOL, atol=0.0))
        if exact.size:
            row = self.coefs[exact[0]]
            return pd.Series(row, index=list(self.feature_names), dtype=float)

        if s > self.max_strength or s < self.min_strength:
            raise InvalidStrengthError(
                f"strength {s:.6g} outside fitted path "
                f"[{self.min_strength:.6g}, {self.max_strength:.6g}]"
            )

        # strengths descending: left = 最后一个 > s 的位置
        left = int(np.flatnonzero(self.strengths > s)[-1])
        right = left + 1
        s_left, s_right = self.strengths[left], self.strengths[right]
        frac = (s - s_right) / (s_left - s_right)
        row = frac * self.coefs[left] + (1.0 - frac) * self.coefs[right]
        return pd.Series(row, index=list(self.feature_names), dtype=float)

    def support_at(self, strength: float) -> FrozenSet[str]:
        """Encoded columns with a non-zero coefficient (intercept excluded)."""
        coefs = self.coefficients_at(strength)
        return frozenset(coefs.index[coefs.to_numpy() != 0.0])

    def support_sizes(self) -> Dict[float, int]:
        return {float(s): int(np.count_nonzero(c)) for s, c in zip(self.strengths, self.coefs)}


class RegularizationPathEngine:
    """
    RegularizationPathEngine（FINAL）

    Responsibility:
    - Fit an L1 logistic path on the FULL encoded design matrix

    Semantics (glmnet-style):
    - features standardized before fitting
    - strength grid: lambda_max → lambda_max * min_strength_ratio, log-spaced
      lambda_max = 最小的「全零解」strength
    - strength λ ↔ sklearn C = 1 / (λ · n_samples)
    - warm start along the path
    """

    def __init__(self, cfg: PathConfig, seed: int = 42):
        self.cfg = cfg
        self.seed = seed

    def fit(self, X: pd.DataFrame, y: pd.Series) -> RegularizationPath:
        if len(X) != len(y):
            raise SchemaMismatchError(f"X/y length mismatch: {len(X)} vs {len(y)}")
        if X.shape[1] == 0:
            raise SchemaMismatchError("empty design matrix")

        Z = StandardScaler().fit_transform(X.to_numpy(dtype=float))
        t = y.to_numpy(dtype=float)
        n = Z.shape[0]

        strengths = self.strength_grid(Z, t)

        model = LogisticRegression(
            penalty="l1",
            solver="saga",
            warm_start=True,
            max_iter=self.cfg.max_iter,
            tol=self.cfg.tol,
            random_state=self.seed,
        )

        coefs = np.zeros((len(strengths), Z.shape[1]))
        intercepts = np.zeros(len(strengths))
        n_unconverged = 0

        for i, s in enumerate(strengths):
            model.set_params(C=1.0 / (s * n))
            with warnings.catch_warnings(record=True) as caught:
                warnings.simplefilter("always", ConvergenceWarning)
                model.fit(Z, t)
            if any(issubclass(w.category, ConvergenceWarning) for w in caught):
                n_unconverged += 1
            coefs[i] = model.coef_[0]
            intercepts[i] = model.intercept_[0]

        if n_unconverged:
            logs.warning(
                f"[RegularizationPathEngine] {n_unconverged}/{len(strengths)} "
                f"path points did not converge (max_iter={self.cfg.max_iter})"
            )

        path = RegularizationPath(
            strengths=strengths,
            coefs=coefs,
            intercepts=intercepts,
            feature_names=tuple(X.columns),
        )
        logs.info(
            f"[RegularizationPathEngine] fitted {len(path)} strengths "
            f"[{path.min_strength:.4g}, {path.max_strength:.4g}] "
            f"support {np.count_nonzero(coefs[0])} → {np.count_nonzero(coefs[-1])}"
        )
        return path

    def strength_grid(self, Z: np.ndarray, t: np.ndarray) -> np.ndarray:
        n = Z.shape[0]
        # gradient of the mean log-loss at the intercept-only solution
        lambda_max = float(np.max(np.abs(Z.T @ (t - t.mean()))) / n)
        if lambda_max <= 0:
            raise SchemaMismatchError("no feature is correlated with the label; path is empty")
        return lambda_max * np.logspace(
            0.0, np.log10(self.cfg.min_strength_ratio), self.cfg.n_strengths
        )
