"""Preflight check primitives for the doctor command."""

from __future__ import annotations

import shutil
import subprocess
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from ackgen.errors import NotWriteableError
from ackgen.sdkrepo import SRC_DIR, ensure_dir, sdk_repo_path


@dataclass(frozen=True, slots=True)
class CheckResult:
    name: str
    passed: bool
    message: str
    fix_hint: str = ""
    fix_fn: Callable[[], bool] | None = None


def check_tool_exists(name: str) -> CheckResult:
    found = shutil.which(name) is not None
    return CheckResult(
        name=f"{name} on PATH",
        passed=found,
        message=f"{name} found" if found else f"{name} not found",
        fix_hint=f"Install {name} and ensure it is on your PATH.",
    )


def check_git_version() -> CheckResult:
    try:
        result = subprocess.run(
            ["git", "--version"],
            capture_output=True,
            text=True,
            timeout=10,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        return CheckResult(name="git runs", passed=False, message=str(exc))
    ok = result.returncode == 0
    return CheckResult(
        name="git runs",
        passed=ok,
        message=result.stdout.strip() if ok else (result.stderr.strip() or "git failed"),
        fix_hint="Reinstall git.",
    )


def check_python_version() -> CheckResult:
    v = sys.version_info
    ok = (v.major, v.minor) >= (3, 11)
    version_str = f"{v.major}.{v.minor}.{v.micro}"
    return CheckResult(
        name="Python version is 3.11+",
        passed=ok,
        message=f"Python {version_str}",
        fix_hint="Requires Python 3.11 or newer. Install via pyenv or your package manager.",
    )


def check_config_loads() -> CheckResult:
    try:
        from ackgen.config import Settings

        Settings()
        return CheckResult(name="Settings load without error", passed=True, message="ok")
    except Exception as exc:
        return CheckResult(
            name="Settings load without error",
            passed=False,
            message=str(exc),
            fix_hint="Check .env for typos or invalid values.",
        )


def check_config_validates() -> CheckResult:
    try:
        from ackgen.config import Settings, validate_settings_for_env

        settings = Settings()
        validate_settings_for_env(settings)
        return CheckResult(
            name="validate_settings_for_env() passes", passed=True, message="ok"
        )
    except Exception as exc:
        return CheckResult(
            name="validate_settings_for_env() passes",
            passed=False,
            message=str(exc),
            fix_hint="Fix the listed settings in .env or the environment.",
        )


def check_cache_dir_writeable(cache_dir: Path) -> CheckResult:
    src_path = cache_dir / SRC_DIR
    if not src_path.exists():
        return CheckResult(
            name="Cache directory writeable",
            passed=False,
            message=f"{src_path} does not exist",
            fix_hint="Run with --fix to create it, or run ackgen ensure-repo.",
            fix_fn=lambda: _create_dir(src_path),
        )
    try:
        ensure_dir(src_path)
    except NotWriteableError as exc:
        return CheckResult(
            name="Cache directory writeable",
            passed=False,
            message=str(exc),
            fix_hint="Fix permissions (chown/chmod) or set ACK_CACHE_DIR.",
        )
    return CheckResult(name="Cache directory writeable", passed=True, message=str(src_path))


def check_sdk_checkout(cache_dir: Path) -> CheckResult:
    sdk_dir = sdk_repo_path(cache_dir)
    present = (sdk_dir / ".git").exists()
    return CheckResult(
        name="aws-sdk-go working tree",
        passed=present,
        message=str(sdk_dir) if present else f"{sdk_dir} not cloned yet",
        fix_hint="Run: ackgen ensure-repo",
    )


def _create_dir(path: Path) -> bool:
    try:
        ensure_dir(path)
    except NotWriteableError:
        return False
    return True
