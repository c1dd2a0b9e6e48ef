"""
Candidate Model Search Doctrine (FINAL / FROZEN)

------------------------------------------------------------
Flow
------------------------------------------------------------

raw tables
  → cleaned / imputed tables
  → squared features
  → L1 regularization path (ALL encoded features)
  → candidate feature sets (sparsest first, full set last)
  → (feature set × model family) fits
  → validation metrics
  → best model selection
  → test-set probabilities

------------------------------------------------------------
Invariants
------------------------------------------------------------

- ONE EncodingSchema per run, built from train ∪ test.
  Every design matrix (path fit, every family fit, validation, test)
  is produced by EncodingSchema.encode(). A level that the schema has
  never seen is a fatal SchemaMismatchError.

- Candidate feature sets hold ORIGINAL feature names. Any non-zero
  indicator of a categorical keeps the whole categorical.

- The comparison sweep order is feature-set OUTER, family INNER.
  Results are merged back into that order regardless of which worker
  finishes first.

- A ModelRecord is immutable once evaluated.
  Undefined AUC (single-class validation) is None, never 0.5.
  Non-convergence is a warning on the record, never an abort.

- Selection picks max AUC, then fewer features, then lower set index.
  "Close enough, prefer the simpler model" is a human decision: the
  selection table exposes auc_gap, it does not apply a tolerance.

------------------------------------------------------------
Non-goals
------------------------------------------------------------

- Distributed execution, streaming, real-time inference, serving
- Model persistence
"""
