"""
Tests for the command line entry point.
"""

import os
import tempfile
from unittest.mock import patch

import pytest
import main

from conftest import build_review_line


def test_cli_runs_analysis(capsys):
    """Test a successful run: exit code 0, outputs and timing printed."""
    with tempfile.TemporaryDirectory() as tmpdir:
        input_path = os.path.join(tmpdir, "reviews.tsv")
        with open(input_path, 'w') as f:
            f.write(build_review_line("P1", "U1", 5) + "\n")
        output_dir = os.path.join(tmpdir, "out")

        with patch("main.setup_logging"):
            code = main.main(["favourites", input_path, "--output-dir", output_dir, "--workers", "2"])

        assert code == 0
        assert os.path.exists(os.path.join(output_dir, "top_favourites.tsv"))

    out = capsys.readouterr().out
    assert "Pipeline completed successfully" in out
    assert "#Execution time in seconds" in out


def test_cli_reports_failure(capsys):
    """Test that a failing pipeline exits with code 1."""
    with tempfile.TemporaryDirectory() as tmpdir:
        with patch("main.setup_logging"):
            code = main.main(["monthly", os.path.join(tmpdir, "missing"), "--output-dir", tmpdir])

    assert code == 1
    assert "Pipeline failed" in capsys.readouterr().out


def test_cli_usage_error():
    """Test that bad arguments exit with code 2."""
    with pytest.raises(SystemExit) as exc:
        main.main(["unknown-analysis", "input.tsv"])
    assert exc.value.code == 2

    with pytest.raises(SystemExit) as exc:
        main.main(["all", "input.tsv", "--workers", "0"])
    assert exc.value.code == 2


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
