"""Smoke tests for all example scripts.

These tests verify that examples run without errors.
They don't verify correctness of results, just that the code executes.
"""

import subprocess
import sys
from pathlib import Path

EXAMPLES_DIR = Path(__file__).parent.parent / "orbiter" / "examples"


def run_example(example_name: str, timeout: int = 120) -> subprocess.CompletedProcess:
    """Run an example script and return the result."""
    script_path = EXAMPLES_DIR / f"{example_name}.py"

    result = subprocess.run(
        [sys.executable, str(script_path)],
        capture_output=True,
        text=True,
        timeout=timeout,
        cwd=Path(__file__).parent.parent,  # Run from project root
    )

    return result


class TestExamplesSmoke:
    """Smoke tests that verify examples run without crashing."""

    def test_headless_launch_runs(self) -> None:
        """Test that headless_launch.py runs without errors."""
        result = run_example("headless_launch")
        assert result.returncode == 0, f"headless_launch failed:\n{result.stderr}"


class TestExamplesOutput:
    """Tests that verify examples produce expected output."""

    def test_headless_launch_output(self) -> None:
        """Test that headless_launch.py prints telemetry and a summary."""
        result = run_example("headless_launch")
        assert result.returncode == 0
        assert "Headless Launch Example" in result.stdout
        assert "Recorded" in result.stdout
        assert "Orbit time:" in result.stdout
