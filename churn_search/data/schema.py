# churn_search/data/schema.py
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from churn_search.search.types import FeatureDescriptor, FeatureKind
from churn_search.utils.errors import SchemaMismatchError, UserInputError

SQUARE_SUFFIX = "_sq"


def _is_categorical(s: pd.Series) -> bool:
    return (
        pd.api.types.is_object_dtype(s)
        or pd.api.types.is_string_dtype(s)
        or isinstance(s.dtype, pd.CategoricalDtype)
        or pd.api.types.is_bool_dtype(s)
    )


def _as_level_strings(s: pd.Series) -> pd.Series:
    return s.map(lambda v: v if pd.isna(v) else str(v))


class EncodingSchema:
    """
    EncodingSchema（FINAL / FROZEN）

    Responsibility:
    - 一次性（train ∪ test）确定所有 categorical 的 level 集合
    - 所有 design matrix 都经由 encode() 构建：
        path fit / 每个 family 的 fit / validation / test 共用同一套编码

    Contract:
    - reference level = 排序后的第一个 level（drop，不产生 indicator）
    - indicator 命名: <parent>_<level>
    - 缺列 / 未见过的 level / categorical 缺失值 → SchemaMismatchError
      （绝不 zero-fill）
    """

    def __init__(
            self,
            descriptors: Sequence[FeatureDescriptor],
            levels: Dict[str, Tuple[str, ...]],
    ):
        self._descriptors: Tuple[FeatureDescriptor, ...] = tuple(descriptors)
        self._by_name: Dict[str, FeatureDescriptor] = {d.name: d for d in self._descriptors}
        self._levels = dict(levels)

        if len(self._by_name) != len(self._descriptors):
            raise SchemaMismatchError("duplicate feature names in schema")

        encoded = self.encoded_columns()
        if len(set(encoded)) != len(encoded):
            raise SchemaMismatchError("indicator names collide with other encoded columns")

    # ======================================================================
    # Construction
    # ======================================================================
    @classmethod
    def from_frames(cls, *frames: pd.DataFrame, exclude: Iterable[str] = ()) -> "EncodingSchema":
        """
        Build from the UNION of frames (train + test).

        Column order follows the first frame; every frame must carry
        every feature column.
        """
        if not frames:
            raise UserInputError("EncodingSchema.from_frames needs at least one frame")

        exclude = set(exclude)
        names = [c for c in frames[0].columns if c not in exclude]

        for i, frame in enumerate(frames[1:], start=1):
            missing = [c for c in names if c not in frame.columns]
            if missing:
                raise SchemaMismatchError(f"frame #{i} missing feature columns: {missing[:10]}")

        descriptors: List[FeatureDescriptor] = []
        levels: Dict[str, Tuple[str, ...]] = {}

        for name in names:
            columns = [frame[name] for frame in frames]
            if any(_is_categorical(s) for s in columns):
                union = set()
                for s in columns:
                    union.update(_as_level_strings(s).dropna().unique())
                levels[name] = tuple(sorted(union))
                descriptors.append(FeatureDescriptor(name, FeatureKind.CATEGORICAL))
            else:
                descriptors.append(FeatureDescriptor(name, FeatureKind.CONTINUOUS))

        return cls(descriptors, levels)

    def with_squares(self, bases: Iterable[str]) -> "EncodingSchema":
        """
        Register derived <base>_sq features (base must be continuous).
        """
        descriptors = list(self._descriptors)
        for base in bases:
            d = self.descriptor(base)
            if d.kind is not FeatureKind.CONTINUOUS:
                raise UserInputError(f"cannot square non-continuous feature '{base}'")
            name = f"{base}{SQUARE_SUFFIX}"
            if name in self._by_name:
                continue
            descriptors.append(FeatureDescriptor(name, FeatureKind.DERIVED, base=base))
        return EncodingSchema(descriptors, self._levels)

    # ======================================================================
    # Lookup
    # ======================================================================
    @property
    def descriptors(self) -> Tuple[FeatureDescriptor, ...]:
        return self._descriptors

    @property
    def feature_names(self) -> Tuple[str, ...]:
        return tuple(d.name for d in self._descriptors)

    def descriptor(self, name: str) -> FeatureDescriptor:
        try:
            return self._by_name[name]
        except KeyError:
            raise SchemaMismatchError(f"feature '{name}' not in schema") from None

    def descriptors_for(self, names: Iterable[str]) -> Tuple[FeatureDescriptor, ...]:
        """Descriptors for names, in schema order."""
        wanted = set(names)
        unknown = wanted - set(self._by_name)
        if unknown:
            raise SchemaMismatchError(f"features not in schema: {sorted(unknown)[:10]}")
        return tuple(d for d in self._descriptors if d.name in wanted)

    def levels(self, name: str) -> Tuple[str, ...]:
        if name not in self._levels:
            raise SchemaMismatchError(f"feature '{name}' is not categorical")
        return self._levels[name]

    @staticmethod
    def indicator_name(parent: str, level: str) -> str:
        return f"{parent}_{level}"

    def _resolve(self, features: Optional[Iterable]) -> Tuple[FeatureDescriptor, ...]:
        if features is None:
            return self._descriptors
        names = [f.name if isinstance(f, FeatureDescriptor) else f for f in features]
        return self.descriptors_for(names)

    def encoded_columns(self, features: Optional[Iterable] = None) -> List[str]:
        cols: List[str] = []
        for d in self._resolve(features):
            if d.is_categorical:
                cols.extend(self.indicator_name(d.name, lv) for lv in self._levels[d.name][1:])
            else:
                cols.append(d.name)
        return cols

    def indicator_parents(self, features: Optional[Iterable] = None) -> Dict[str, str]:
        """
        Fixed lookup: encoded column name -> original feature name.
        Continuous / derived names map to themselves, and so does every
        categorical parent name (mapping an already coalesced set is a no-op).
        """
        parents: Dict[str, str] = {}
        for d in self._resolve(features):
            parents[d.name] = d.name
            if d.is_categorical:
                for lv in self._levels[d.name][1:]:
                    parents[self.indicator_name(d.name, lv)] = d.name
        return parents

    # ======================================================================
    # Transform
    # ======================================================================
    def add_squares(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        (Re)generate every derived column from its base. Same code path for
        train / validation / test.
        """
        out = df.copy()
        for d in self._descriptors:
            if d.kind is not FeatureKind.DERIVED:
                continue
            if d.base not in out.columns:
                raise SchemaMismatchError(f"base feature '{d.base}' missing for '{d.name}'")
            out[d.name] = out[d.base].astype(float) ** 2
        return out

    def encode(self, df: pd.DataFrame, features: Optional[Iterable] = None) -> pd.DataFrame:
        """
        Design matrix (float) for the given features, index preserved.
        """
        descriptors = self._resolve(features)

        missing = [d.name for d in descriptors if d.name not in df.columns]
        if missing:
            raise SchemaMismatchError(f"feature columns missing from data: {missing[:10]}")

        columns: Dict[str, np.ndarray] = {}
        for d in descriptors:
            if d.is_categorical:
                columns.update(self._encode_categorical(d.name, df[d.name]))
            else:
                try:
                    columns[d.name] = df[d.name].astype(float).to_numpy()
                except (TypeError, ValueError) as e:
                    raise SchemaMismatchError(f"feature '{d.name}' is not numeric: {e}") from e

        return pd.DataFrame(columns, index=df.index, columns=self.encoded_columns(descriptors))

    def _encode_categorical(self, name: str, s: pd.Series) -> Dict[str, np.ndarray]:
        levels = self._levels[name]
        values = _as_level_strings(s)

        if values.isna().any():
            raise SchemaMismatchError(
                f"categorical '{name}' has {int(values.isna().sum())} missing values"
            )

        codes = pd.Categorical(values, categories=list(levels)).codes
        unseen = codes < 0
        if unseen.any():
            examples = sorted(set(values[unseen]))[:5]
            raise SchemaMismatchError(f"categorical '{name}' has unseen levels {examples}")

        return {
            self.indicator_name(name, lv): (codes == j).astype(float)
            for j, lv in enumerate(levels)
            if j > 0
        }


__all__ = ["EncodingSchema", "SQUARE_SUFFIX"]
