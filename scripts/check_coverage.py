#!/usr/bin/env python3
"""Per-module coverage gate for the SDK sync and model resolution code.

Reads the JSON report written by ``pytest --cov`` (see ``[tool.coverage.json]``
in pyproject.toml) and fails when any gated module is under its floor.

    pytest --cov --cov-report=json
    python scripts/check_coverage.py [build/coverage.json]
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

DEFAULT_REPORT = Path("build/coverage.json")

# module -> minimum percent of statements covered
MODULE_FLOORS: dict[str, float] = {
    "ackgen/sdkrepo.py": 90.0,
    "ackgen/resolver.py": 95.0,
    "ackgen/locator.py": 90.0,
    "ackgen/versions.py": 95.0,
    "ackgen/gomod.py": 90.0,
    "ackgen/git.py": 80.0,
}


def module_percentages(payload: object) -> dict[str, float]:
    """Map each gated module found in *payload* to its statement coverage."""
    files = payload.get("files") if isinstance(payload, dict) else None
    if not isinstance(files, dict):
        raise ValueError("coverage report has no 'files' table")

    found: dict[str, float] = {}
    for filename, info in files.items():
        module = next(
            (m for m in MODULE_FLOORS if Path(filename).as_posix().endswith(m)), None
        )
        if module is None or not isinstance(info, dict):
            continue
        summary = info.get("summary") or {}
        covered = summary.get("covered_lines")
        statements = summary.get("num_statements")
        if not isinstance(covered, int) or not isinstance(statements, int):
            continue
        found[module] = 100.0 if statements == 0 else covered / statements * 100.0
    return found


def failing_modules(percentages: dict[str, float]) -> list[str]:
    """Gated modules that are missing from the report or under their floor."""
    failures = []
    for module, floor in MODULE_FLOORS.items():
        percent = percentages.get(module)
        if percent is None:
            failures.append(f"{module}: not in report")
        elif percent < floor:
            failures.append(f"{module}: {percent:.1f}% < {floor:.1f}%")
    return failures


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) > 1:
        print("usage: check_coverage.py [coverage.json]")
        return 2
    path = Path(args[0]) if args else DEFAULT_REPORT
    if not path.exists():
        print(f"coverage file missing: {path} (run pytest --cov --cov-report=json first)")
        return 2

    try:
        percentages = module_percentages(json.loads(path.read_text(encoding="utf-8")))
    except (json.JSONDecodeError, ValueError) as exc:
        print(f"invalid coverage report {path}: {exc}")
        return 2

    for module, floor in MODULE_FLOORS.items():
        if module in percentages:
            print(f"  {module:<22} {percentages[module]:6.1f}%  (floor {floor:.0f}%)")

    failures = failing_modules(percentages)
    if failures:
        print("coverage gate failed:")
        for line in failures:
            print(f"  {line}")
        return 1
    print("coverage gate passed")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
