"""
Job definitions for ReviewStats.

- affinity: two-pass user affinity
- favourites: per-user top products
- monthly: per-month top products by mean score
"""
