"""
Configuration settings for ReviewStats.

Centralized configuration for all jobs and pipeline parameters.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_ROOT = Path(os.getenv("REVIEWSTATS_DATA_ROOT", str(PROJECT_ROOT / "data")))
OUTPUT_ROOT = Path(os.getenv("REVIEWSTATS_OUTPUT_ROOT", str(PROJECT_ROOT / "output")))
INTERMEDIATE_DIRNAME = "_tmp"

# Input schema
FIELD_DELIMITER = "\t"
FIELD_COUNT = 10

# User affinity
MIN_SCORE = 4  # A review counts as "highly rated" from this score up
MIN_PRODUCTS = 3  # Shared products needed for a pair to be reported
FANOUT_WARNING_USERS = 1000  # Log products whose pair expansion gets this large

# Top-K sizes
TOP_FAVOURITES = 10
TOP_MONTHLY = 5

# Month labels (derived in UTC)
MONTH_FORMAT = "%Y-%m"

# Local execution
NUM_WORKERS = int(os.getenv("REVIEWSTATS_WORKERS", "4"))
NUM_PARTITIONS = int(os.getenv("REVIEWSTATS_PARTITIONS", "8"))
KEEP_INTERMEDIATE = os.getenv("REVIEWSTATS_KEEP_INTERMEDIATE", "0") == "1"

# Output file names
AFFINITY_OUTPUT = "affinity.tsv"
FAVOURITES_OUTPUT = "top_favourites.tsv"
MONTHLY_OUTPUT = "monthly_top.tsv"

# Logging
LOG_LEVEL = os.getenv("REVIEWSTATS_LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "reviewstats.log"
