"""Test eval runner execution."""

import subprocess
import sys

import pytest


@pytest.fixture(scope="module")
def runner_output() -> subprocess.CompletedProcess[str]:
    """Run the eval runner once for the module."""
    return subprocess.run(
        [sys.executable, "eval/runner.py"], capture_output=True, text=True
    )


def _section(stdout: str, scenario_id: str) -> list[str]:
    """Lines printed for one scenario."""
    lines: list[str] = []
    in_section = False
    for line in stdout.split("\n"):
        if line.startswith("=== Scenario:"):
            in_section = scenario_id in line
            continue
        if line.startswith("=== Summary"):
            break
        if in_section:
            lines.append(line)
    return lines


def test_eval_runner_executes(runner_output: subprocess.CompletedProcess[str]) -> None:
    """Test that eval runner runs every scenario."""
    assert "Scenario: lisbon_generate" in runner_output.stdout
    assert "Scenario: castle_lock_refine" in runner_output.stdout
    assert "Scenario: refine_dropped_day_known_loss" in runner_output.stdout


@pytest.mark.parametrize(
    "scenario_id",
    [
        "lisbon_generate",
        "castle_lock_refine",
        "reorder_reschedules",
        "reorder_fail_open",
        "malformed_generate",
        "empty_generate",
        "analyze_fallback",
    ],
)
def test_scenario_passes_all_predicates(
    runner_output: subprocess.CompletedProcess[str], scenario_id: str
) -> None:
    """Test that the scenario prints no FAIL or ERROR lines."""
    lines = _section(runner_output.stdout, scenario_id)
    assert any("PASS" in line for line in lines)
    assert not any("FAIL" in line or "ERROR" in line for line in lines)


def test_dropped_day_scenario_fails_predicate(
    runner_output: subprocess.CompletedProcess[str],
) -> None:
    """Test that the known dropped-day loss is reported as a failure."""
    lines = _section(runner_output.stdout, "refine_dropped_day_known_loss")
    assert any("FAIL" in line for line in lines), "Expected the dropped-day loss to fail"


def test_runner_returns_nonzero_exit_code_on_failure(
    runner_output: subprocess.CompletedProcess[str],
) -> None:
    """Test that runner returns exit code 1 when predicates fail."""
    assert runner_output.returncode == 1, f"Expected exit code 1, got {runner_output.returncode}"


def test_runner_reports_summary(runner_output: subprocess.CompletedProcess[str]) -> None:
    """Test that eval runner reports summary with pass/fail counts."""
    assert "=== Summary ===" in runner_output.stdout
    assert "predicates passed" in runner_output.stdout
