"""
Exception types for ReviewStats.

Malformed input rows are not errors: they are dropped and counted.
These exceptions cover the conditions that must stop a job or a pipeline.
"""


class ReviewStatsError(Exception):
    """Base class for all ReviewStats errors."""


class BarrierError(ReviewStatsError):
    """
    Raised when the first pass of a two-pass pipeline did not complete.

    The second pass is never started against missing or partial output.
    The failed first-pass result, when known, is kept in `result`.
    """

    def __init__(self, job_name: str, reason: str = "", result=None):
        self.job_name = job_name
        self.reason = reason
        self.result = result
        message = f"Job {job_name} failed, second pass not started"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class AggregatorStateError(ReviewStatsError):
    """Raised when an aggregator is used after it has been finalized."""


class JobFailedError(ReviewStatsError):
    """Raised when a job of the pipeline did not complete successfully."""

    def __init__(self, job_name: str, reason: str = ""):
        self.job_name = job_name
        self.reason = reason
        message = f"Job {job_name} failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
