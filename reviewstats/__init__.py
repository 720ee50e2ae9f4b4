"""
ReviewStats - grouping analytics over product review dumps.

Computes user affinity pairs, per-user favourite products and the
monthly best-rated products from tab-delimited review records.
"""

__version__ = "1.0.0"
