# churn_search/utils/errors.py


class ChurnSearchError(RuntimeError):
    """Base class for every error raised by churn_search."""


class UserInputError(ChurnSearchError):
    """
    Raised for invalid user-provided config (families, labels, strengths).
    Should NOT print traceback.
    """


class SchemaMismatchError(ChurnSearchError):
    """
    Data does not match the fixed EncodingSchema:
      - feature column missing
      - categorical level never seen when the schema was built
      - encoded columns differ between fit and predict
    Always fatal. Never zero-filled, never dropped.
    """


class InvalidStrengthError(ChurnSearchError):
    """Requested regularization strength is outside the fitted path."""
