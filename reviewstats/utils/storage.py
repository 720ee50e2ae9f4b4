"""
Storage utility.

File I/O helpers for review inputs, intermediate pass output, final
tables and run metadata.
"""

import csv
import json
import os
import logging
from typing import Any, Dict, Iterable, List, Sequence

import pandas as pd

import config.settings as settings
from reviewstats.aggregation.base import Row

logger = logging.getLogger(__name__)


def format_field(value: Any) -> str:
    """Render one output field (pairs expand to two tab-separated ids)."""
    if isinstance(value, float):
        return repr(value)
    return str(value)


def format_row(row: Row) -> str:
    """Render one output row as a tab-delimited line."""
    return settings.FIELD_DELIMITER.join(format_field(value) for value in row)


class StorageManager:
    """
    Manages file I/O for all pipeline inputs and outputs.

    Handles:
    - Input dumps (a file, or a directory of files)
    - Intermediate pass output (output/_tmp/<job>.tsv)
    - Final tables (output/<analysis>.tsv)
    - Run metadata (output/<analysis>_metadata.json)
    """

    def __init__(self, output_root: str):
        """
        Initialize storage manager.

        Args:
            output_root: Directory receiving all outputs
        """
        self.output_root = output_root
        self.intermediate_dir = os.path.join(output_root, settings.INTERMEDIATE_DIRNAME)

        os.makedirs(self.output_root, exist_ok=True)

        logger.info(f"Initialized StorageManager with output_root={output_root}")

    def list_input_files(self, input_path: str) -> List[str]:
        """
        Resolve the input files of a run.

        Args:
            input_path: A file, or a directory whose regular, non-hidden
                files are all inputs

        Returns:
            Sorted list of file paths

        Raises:
            FileNotFoundError: If input_path does not exist
        """
        if not os.path.exists(input_path):
            raise FileNotFoundError(f"Input path does not exist: {input_path}")

        if os.path.isfile(input_path):
            return [input_path]

        files = []
        for filename in sorted(os.listdir(input_path)):
            filepath = os.path.join(input_path, filename)
            if filename.startswith(('.', '_')) or not os.path.isfile(filepath):
                continue
            files.append(filepath)

        if not files:
            logger.warning(f"No input files found in {input_path}")
        return files

    def read_lines(self, input_path: str) -> List[str]:
        """
        Read every non-empty line of the input.

        Args:
            input_path: A file or a directory of files

        Returns:
            Lines without their terminators
        """
        lines = []
        for filepath in self.list_input_files(input_path):
            with open(filepath, 'r', encoding='utf-8', errors='replace') as f:
                for line in f:
                    line = line.rstrip("\r\n")
                    if line:
                        lines.append(line)
            logger.debug(f"Read {filepath}")

        logger.info(f"Read {len(lines)} lines from {input_path}")
        return lines

    def save_lines(self, rows: Iterable[Row], filename: str) -> str:
        """
        Save variable-width rows, one tab-delimited line each.

        Args:
            rows: Output rows
            filename: File name under output_root

        Returns:
            Path of the written file
        """
        filepath = os.path.join(self.output_root, filename)
        return self._write_lines(rows, filepath)

    def save_table(self, rows: Sequence[Row], columns: List[str], filename: str) -> str:
        """
        Save fixed-width rows as a headerless tab-delimited table.

        Fields are written unquoted, the same way save_lines() writes them.

        Args:
            rows: Output rows, all with len(columns) fields
            columns: Column names
            filename: File name under output_root

        Returns:
            Path of the written file
        """
        filepath = os.path.join(self.output_root, filename)
        df = pd.DataFrame(list(rows), columns=columns)

        try:
            df.to_csv(
                filepath,
                sep=settings.FIELD_DELIMITER,
                header=False,
                index=False,
                quoting=csv.QUOTE_NONE
            )
            logger.info(f"Saved {len(df)} rows to {filepath}")
        except Exception as e:
            logger.error(f"Failed to save table {filepath}: {e}")
            raise
        return filepath

    def save_intermediate(self, rows: Iterable[Row], job_name: str) -> str:
        """
        Materialize the output of a first pass.

        Args:
            rows: Rows of the finished job
            job_name: Name of the job (used as file name)

        Returns:
            Path of the intermediate file
        """
        os.makedirs(self.intermediate_dir, exist_ok=True)
        filepath = os.path.join(self.intermediate_dir, f"{job_name}.tsv")
        return self._write_lines(rows, filepath)

    def remove_intermediate(self, filepath: str) -> None:
        """Delete an intermediate file, and its directory once empty."""
        if os.path.exists(filepath):
            os.remove(filepath)
            logger.debug(f"Removed intermediate file {filepath}")
        if os.path.isdir(self.intermediate_dir) and not os.listdir(self.intermediate_dir):
            os.rmdir(self.intermediate_dir)

    def save_metadata(self, metadata: Dict, analysis: str) -> str:
        """
        Save run metadata next to the analysis output.

        Args:
            metadata: JSON-serializable dict
            analysis: Analysis name

        Returns:
            Path of the metadata file
        """
        filepath = os.path.join(self.output_root, f"{analysis}_metadata.json")

        try:
            with open(filepath, 'w') as f:
                json.dump(metadata, f, indent=2)
            logger.info(f"Metadata saved to {filepath}")
        except Exception as e:
            logger.error(f"Failed to save metadata for {analysis}: {e}")
            raise
        return filepath

    def _write_lines(self, rows: Iterable[Row], filepath: str) -> str:
        count = 0
        try:
            with open(filepath, 'w', encoding='utf-8') as f:
                for row in rows:
                    f.write(format_row(row) + "\n")
                    count += 1
            logger.info(f"Saved {count} rows to {filepath}")
        except Exception as e:
            logger.error(f"Failed to save rows to {filepath}: {e}")
            raise
        return filepath


# Design Rationale and Trade-offs:
#
# 1. Why pandas for the fixed-width tables but plain writes for affinity rows?
#    - Favourites and monthly rows always have three columns
#    - Affinity rows carry a variable number of products
#    - Trade-off: Two write paths, both emit unquoted tab-separated fields
#
# 2. Why materialize pass-1 output to a file?
#    - Pass 2 reads a closed file, never a partially written one
#    - The file can be kept for inspection (--keep-intermediate)
#    - Trade-off: Extra disk round trip between the passes
