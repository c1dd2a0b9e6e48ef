# churn_search/pipeline/parallel/types.py
from enum import Enum


class ParallelKind(str, Enum):
    CANDIDATE = "candidate"   # one (feature set, family) fit
