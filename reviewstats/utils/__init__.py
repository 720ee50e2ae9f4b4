"""
Utility modules for ReviewStats.

Cross-cutting concerns:
- Storage: input discovery, intermediate and output files, run metadata
"""
