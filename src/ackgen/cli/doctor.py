"""Doctor command: runs preflight checks and prints a color-coded report."""

from __future__ import annotations

import json
import sys

from ackgen.cli.checks import (
    CheckResult,
    check_cache_dir_writeable,
    check_config_loads,
    check_config_validates,
    check_git_version,
    check_python_version,
    check_sdk_checkout,
    check_tool_exists,
)


def _green(text: str) -> str:
    return f"\033[32m{text}\033[0m"


def _red(text: str) -> str:
    return f"\033[31m{text}\033[0m"


def _yellow(text: str) -> str:
    return f"\033[33m{text}\033[0m"


def _bold(text: str) -> str:
    return f"\033[1m{text}\033[0m"


def _print_result(result: CheckResult) -> None:
    icon = _green("✓") if result.passed else _red("✗")
    print(f"  {icon} {result.name}: {result.message}")
    if not result.passed and result.fix_hint:
        print(f"    {_yellow('Fix:')} {result.fix_hint}")


def _section(title: str) -> None:
    print(f"\n{_bold(title)}")


def run_doctor(*, json_output: bool = False, fix: bool = False) -> None:
    all_results: list[CheckResult] = []
    failed = False

    def _run(result: CheckResult) -> bool:
        all_results.append(result)
        _print_result(result)
        if not result.passed:
            if fix and result.fix_fn is not None:
                applied = result.fix_fn()
                status_text = "applied" if applied else "failed"
                print(f"    {_yellow('Auto-fix:')} {status_text}")
            nonlocal failed
            failed = True
        return result.passed

    # --- System Tools ---
    _section("System Tools")
    if _run(check_tool_exists("git")):
        _run(check_git_version())
    _run(check_python_version())

    # --- Configuration ---
    _section("Configuration")
    config_ok = _run(check_config_loads())
    if config_ok:
        _run(check_config_validates())

    # --- Cache ---
    _section("SDK Cache")
    if config_ok:
        from ackgen.config import Settings

        cache_dir = Settings().cache_root()
        _run(check_cache_dir_writeable(cache_dir))
        _run(check_sdk_checkout(cache_dir))
    else:
        print(f"  {_yellow('⊘')} skipped (configuration not loaded)")

    # --- Summary ---
    fail_count = sum(1 for r in all_results if not r.passed)
    print()
    if fail_count == 0:
        print(_green("All checks passed!"))
    else:
        print(_red(f"{fail_count} check(s) failed."))

    if json_output:
        data = [
            {
                "name": r.name,
                "passed": r.passed,
                "message": r.message,
                "fix_hint": r.fix_hint,
            }
            for r in all_results
        ]
        print("\n" + json.dumps(data, indent=2))

    if failed:
        sys.exit(1)
