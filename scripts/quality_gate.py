"""Run lint, format, type and test checks and report results as JSON.

Usage:
    python scripts/quality_gate.py              # run all, JSON output
    python scripts/quality_gate.py --skip-tests # skip pytest (fast)
    python scripts/quality_gate.py --fix        # auto-fix ruff issues first
"""

from __future__ import annotations

import argparse
import json
import re
import subprocess
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent

# (name, command, regex counting problems in the output)
CHECKS: list[tuple[str, list[str], str]] = [
    ("ruff_lint", ["ruff", "check", "."], r"^\S+:\d+:\d+:"),
    ("ruff_format", ["ruff", "format", "--check", "."], r"^Would reformat"),
    ("mypy", ["mypy", "circleci_cli/"], r": error:"),
]


def _run(module_cmd: list[str]) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-m", *module_cmd],
        capture_output=True,
        text=True,
        cwd=str(ROOT),
        timeout=300,
    )


def run_check(cmd: list[str], problem_re: str) -> dict:
    t0 = time.monotonic()
    r = _run(cmd)
    text = r.stdout + r.stderr
    problems = sum(1 for line in text.splitlines() if re.search(problem_re, line))
    result: dict = {
        "status": "pass" if r.returncode == 0 else "fail",
        "problems": problems,
        "duration_s": round(time.monotonic() - t0, 1),
    }
    if r.returncode != 0:
        result["output"] = text.strip()[-2000:]
    return result


def run_pytest() -> dict:
    t0 = time.monotonic()
    r = _run(["pytest", "tests/", "-q", "--no-header", "--tb=short"])
    counts = {"passed": 0, "failed": 0}
    # Summary line looks like "3 failed, 85 passed in 0.4s"
    for line in reversed(r.stdout.strip().splitlines()):
        found = dict((k, int(n)) for n, k in re.findall(r"(\d+)\s+(passed|failed)", line))
        if found:
            counts.update(found)
            break
    result: dict = {
        "status": "pass" if r.returncode == 0 else "fail",
        **counts,
        "duration_s": round(time.monotonic() - t0, 1),
    }
    if r.returncode != 0:
        result["output"] = r.stdout.strip()[-2000:]
    return result


def main() -> None:
    parser = argparse.ArgumentParser(description="Run all quality checks")
    parser.add_argument("--skip-tests", action="store_true", help="Skip pytest")
    parser.add_argument("--fix", action="store_true", help="Auto-fix ruff issues first")
    args = parser.parse_args()

    t0 = time.monotonic()
    if args.fix:
        _run(["ruff", "check", "--fix", "."])

    checks: dict[str, dict] = {}
    for name, cmd, problem_re in CHECKS:
        print(f"Running {name}...", file=sys.stderr)
        checks[name] = run_check(cmd, problem_re)

    if args.skip_tests:
        checks["pytest"] = {"status": "skip", "reason": "--skip-tests"}
    else:
        print("Running pytest...", file=sys.stderr)
        checks["pytest"] = run_pytest()

    overall = "pass" if all(c["status"] in ("pass", "skip") for c in checks.values()) else "fail"
    print(
        json.dumps(
            {
                "overall": overall,
                "checks": checks,
                "total_duration_s": round(time.monotonic() - t0, 1),
            },
            indent=2,
        )
    )
    sys.exit(0 if overall == "pass" else 1)


if __name__ == "__main__":
    main()
