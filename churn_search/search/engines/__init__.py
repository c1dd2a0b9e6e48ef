"""
Search Engines (FINAL / FROZEN)

Engines own ALL semantics; steps only orchestrate.

regularization_path_engine   L1 logistic path + RegularizationPath value
feature_set_engine           path → candidate feature sets (parent names)
model/                       one engine per model family (fit / predict_proba)
registry                     ModelFamily → engine
train_evaluate_engine        one (feature set, family) fit + validation metrics
compare_engine               (feature set × family) sweep, deterministic order
selection_engine             best record per family, auc_gap table
predict_engine               best record → test probabilities
dataset_prepare_engine       coercion / split / imputation / schema
report_engine                CSV reports
"""
