"""
Local stand-in for the distributed grouping engine.

- Job / JobResult: pass definition and outcome
- LocalJobRunner: map, pre-combine, shuffle and reduce on a thread pool
- run_chained: two passes with a barrier between them
"""

from reviewstats.engine.job import Job, JobResult
from reviewstats.engine.local_runner import LocalJobRunner, run_chained

__all__ = ["Job", "JobResult", "LocalJobRunner", "run_chained"]
