from .loader import load_table, coerce_numeric, split_label, train_validation_split
from .impute import Imputer
from .schema import EncodingSchema

__all__ = [
    "load_table",
    "coerce_numeric",
    "split_label",
    "train_validation_split",
    "Imputer",
    "EncodingSchema",
]
