"""
Pipeline Orchestrator.

Runs the review analytics jobs over an input dump and writes their
outputs and run metadata.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Dict, List, Optional

import config.settings as settings
from reviewstats.engine.job import JobResult
from reviewstats.engine.local_runner import LocalJobRunner, run_chained
from reviewstats.errors import BarrierError, JobFailedError
from reviewstats.jobs.affinity import build_candidate_job, build_filter_job
from reviewstats.jobs.favourites import build_favourites_job
from reviewstats.jobs.monthly import build_monthly_job
from reviewstats.utils.storage import StorageManager

logger = logging.getLogger(__name__)

ANALYSES = ("affinity", "favourites", "monthly")

FAVOURITES_COLUMNS = ["user_id", "product_id", "score"]
MONTHLY_COLUMNS = ["month", "product_id", "mean_score"]


class PipelineOrchestrator:
    """
    Orchestrates the analytics over one input dump.

    Analyses:
    1. affinity: pass 1 (candidate pairs) → barrier → pass 2 (filter)
    2. favourites: top products per user
    3. monthly: top products per month by mean score
    """

    def __init__(
        self,
        output_root: str,
        runner: Optional[LocalJobRunner] = None,
        keep_intermediate: bool = settings.KEEP_INTERMEDIATE
    ):
        """
        Initialize pipeline orchestrator.

        Args:
            output_root: Directory receiving outputs and metadata
            runner: Job runner (defaults to a LocalJobRunner from settings)
            keep_intermediate: Keep the affinity pass-1 file after the run
        """
        self.storage = StorageManager(output_root)
        self.runner = runner or LocalJobRunner()
        self.keep_intermediate = keep_intermediate

        logger.info(
            f"Pipeline initialized (workers={self.runner.num_workers}, "
            f"partitions={self.runner.num_partitions})"
        )

    def run(self, analysis: str, input_path: str) -> Dict[str, str]:
        """
        Run one analysis, or all of them, over the input.

        Args:
            analysis: One of ANALYSES, or "all"
            input_path: Input file or directory

        Returns:
            Mapping analysis name -> output file path

        Raises:
            ValueError: If analysis is unknown
            BarrierError: If the first affinity pass failed
            JobFailedError: If any other job failed
        """
        if analysis == "all":
            selected = list(ANALYSES)
        elif analysis in ANALYSES:
            selected = [analysis]
        else:
            raise ValueError(f"Unknown analysis: {analysis}. Must be one of {ANALYSES} or 'all'")

        lines = self.storage.read_lines(input_path)

        outputs = {}
        for name in selected:
            logger.info(f"Running analysis: {name}")
            runner_method = getattr(self, f"run_{name}")
            outputs[name] = runner_method(lines, input_path)

        return outputs

    def run_affinity(self, lines: List[str], input_path: str = "") -> str:
        """
        Two-pass user affinity.

        Pass 1 output is written to an intermediate file, and pass 2 only
        reads that closed file.
        """
        start_time = time.perf_counter()
        intermediate: Dict[str, str] = {}

        def materialize(first_result: JobResult) -> List[str]:
            path = self.storage.save_intermediate(first_result.rows, first_result.name)
            intermediate["path"] = path
            return self.storage.read_lines(path)

        try:
            first, second = run_chained(
                self.runner,
                build_candidate_job(),
                lines,
                build_filter_job(),
                materialize
            )
        except BarrierError as e:
            failed = [e.result] if e.result is not None else []
            self._save_metadata("affinity", input_path, failed, start_time, error=str(e))
            raise
        finally:
            if "path" in intermediate and not self.keep_intermediate:
                self.storage.remove_intermediate(intermediate["path"])

        self._check(second, "affinity", input_path, [first, second], start_time)
        output_path = self.storage.save_lines(second.rows, settings.AFFINITY_OUTPUT)
        self._save_metadata("affinity", input_path, [first, second], start_time)
        return output_path

    def run_favourites(self, lines: List[str], input_path: str = "") -> str:
        """Top products per user."""
        start_time = time.perf_counter()
        result = self.runner.run(build_favourites_job(), lines)

        self._check(result, "favourites", input_path, [result], start_time)
        output_path = self.storage.save_table(result.rows, FAVOURITES_COLUMNS, settings.FAVOURITES_OUTPUT)
        self._save_metadata("favourites", input_path, [result], start_time)
        return output_path

    def run_monthly(self, lines: List[str], input_path: str = "") -> str:
        """Top products per month."""
        start_time = time.perf_counter()
        result = self.runner.run(build_monthly_job(), lines)

        self._check(result, "monthly", input_path, [result], start_time)
        output_path = self.storage.save_table(result.rows, MONTHLY_COLUMNS, settings.MONTHLY_OUTPUT)
        self._save_metadata("monthly", input_path, [result], start_time)
        return output_path

    def _check(
        self,
        result: JobResult,
        analysis: str,
        input_path: str,
        results: List[JobResult],
        start_time: float
    ) -> None:
        """Record the failure and raise if the job did not succeed."""
        if result.success:
            return
        self._save_metadata(analysis, input_path, results, start_time, error=result.error)
        raise JobFailedError(result.name, result.error or "")

    def _save_metadata(
        self,
        analysis: str,
        input_path: str,
        results: List[JobResult],
        start_time: float,
        error: Optional[str] = None
    ) -> str:
        """Write counters, status and timing of one analysis."""
        metadata = {
            "analysis": analysis,
            "input_path": input_path,
            "success": error is None and all(r.success for r in results),
            "elapsed_seconds": time.perf_counter() - start_time,
            "jobs": [r.to_dict() for r in results],
            "error": error,
            "generated_at": datetime.now(timezone.utc).isoformat()
        }
        return self.storage.save_metadata(metadata, analysis)
