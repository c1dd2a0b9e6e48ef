# churn_search/search/engines/feature_set_engine.py
from __future__ import annotations

from typing import List, Mapping, Sequence, Set

from churn_search.search.engines.regularization_path_engine import RegularizationPath
from churn_search.search.types import CandidateFeatureSet, FeatureDescriptor
from churn_search.utils.errors import SchemaMismatchError
from churn_search.utils.logger import logs

INTERCEPT_NAMES = frozenset({"(Intercept)", "intercept", "const"})


def coalesce_to_parents(indicators: Set[str] | frozenset, parents: Mapping[str, str]) -> Set[str]:
    """
    Indicator names → original feature names.

    任一 level 非零 → parent 整体加入一次。
    lookup 由调用方提供（来自编码 schema），不做推断。
    """
    out: Set[str] = set()
    for name in indicators:
        if name in INTERCEPT_NAMES:
            continue
        try:
            out.add(parents[name])
        except KeyError:
            raise SchemaMismatchError(
                f"indicator '{name}' has no parent in the supplied lookup"
            ) from None
    return out


def extract_feature_sets(
        path: RegularizationPath,
        strengths: Sequence[float],
        *,
        parents: Mapping[str, str],
        full_features: Sequence[FeatureDescriptor],
) -> List[CandidateFeatureSet]:
    """
    Candidate feature sets along a regularization path.

    Contract:
    - one candidate per requested strength, plus the full feature set
      (always last, not derived from the path)
    - path candidates ordered by increasing cardinality (stable),
      indices assigned 1..k+1 after ordering
    - out-of-range strength → InvalidStrengthError (raised by the path)
    """
    order = {d.name: i for i, d in enumerate(full_features)}
    by_name = {d.name: d for d in full_features}

    picked = []
    for s in strengths:
        support = path.support_at(s)
        names = coalesce_to_parents(support, parents)

        unknown = names - set(by_name)
        if unknown:
            raise SchemaMismatchError(
                f"path features not in full feature list: {sorted(unknown)[:10]}"
            )

        descriptors = tuple(sorted((by_name[n] for n in names), key=lambda d: order[d.name]))
        picked.append((float(s), descriptors))

        logs.info(
            f"[FeatureSetEngine] strength={float(s):.6g} "
            f"indicators={len(support)} features={len(descriptors)}"
        )

    picked.sort(key=lambda item: len(item[1]))

    sets = [
        CandidateFeatureSet(index=i, features=descriptors, strength=s)
        for i, (s, descriptors) in enumerate(picked, start=1)
    ]
    sets.append(
        CandidateFeatureSet(index=len(sets) + 1, features=tuple(full_features), strength=None)
    )
    return sets
