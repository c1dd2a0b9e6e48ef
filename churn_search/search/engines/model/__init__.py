"""
Model family engines (FINAL)

Each file defines COMPLETE fit / predict_proba semantics for its families.
Resolve engines through search.engines.registry, never by direct import
outside the search engines.

MLP engines import TensorFlow; the registry loads them lazily.
"""
