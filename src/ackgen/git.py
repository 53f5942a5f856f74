"""Thin git subprocess wrappers that honour cancellation tokens."""

from __future__ import annotations

import logging
import os
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path

from ackgen.cancel import CancelToken, background
from ackgen.errors import GitCommandError

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 0.2
_TERMINATE_GRACE_SECONDS = 5.0


@dataclass(slots=True)
class CommandResult:
    command: str
    exit_code: int
    ok: bool
    stdout: str
    stderr: str
    duration_ms: int


@dataclass(frozen=True, slots=True)
class LocalRepository:
    path: Path
    git_dir: Path


def _git_env() -> dict[str, str]:
    env = dict(os.environ)
    # never block on a credential prompt
    env["GIT_TERMINAL_PROMPT"] = "0"
    return env


def _stop(proc: subprocess.Popen[str]) -> tuple[str, str]:
    proc.terminate()
    try:
        return proc.communicate(timeout=_TERMINATE_GRACE_SECONDS)
    except subprocess.TimeoutExpired:
        proc.kill()
        return proc.communicate()


def run_git(
    args: list[str],
    token: CancelToken | None = None,
    *,
    cwd: Path | None = None,
    poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
) -> CommandResult:
    """Run ``git <args>`` until it exits or *token* is cancelled.

    Raises GitCommandError on a non-zero exit, a passed deadline, or an
    explicit cancellation. The token is checked before the process starts.
    """
    token = token or background()
    command = ["git", *args]
    display = " ".join(command)
    if token.cancelled():
        timed_out = token.deadline_exceeded()
        reason = "deadline exceeded" if timed_out else "cancelled"
        raise GitCommandError(
            f"{display}: {reason} before start",
            command=command,
            timed_out=timed_out,
            cancelled=not timed_out,
        )

    logger.debug("Running %s", display)
    started = time.monotonic()
    proc = subprocess.Popen(
        command,
        cwd=str(cwd) if cwd is not None else None,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        stdin=subprocess.DEVNULL,
        text=True,
        env=_git_env(),
    )
    while True:
        wait = poll_interval
        remaining = token.remaining()
        if remaining is not None:
            wait = min(wait, max(remaining, 0.01))
        try:
            stdout, stderr = proc.communicate(timeout=wait)
            break
        except subprocess.TimeoutExpired:
            if not token.cancelled():
                continue
            timed_out = token.deadline_exceeded()
            _, stderr = _stop(proc)
            reason = "deadline exceeded" if timed_out else "cancelled"
            logger.warning("Stopped %s: %s", display, reason)
            raise GitCommandError(
                f"{display}: {reason}",
                command=command,
                returncode=proc.returncode,
                stderr=(stderr or "").strip(),
                timed_out=timed_out,
                cancelled=not timed_out,
            ) from None

    duration_ms = int((time.monotonic() - started) * 1000)
    result = CommandResult(
        command=display,
        exit_code=proc.returncode,
        ok=proc.returncode == 0,
        stdout=stdout,
        stderr=stderr,
        duration_ms=duration_ms,
    )
    if not result.ok:
        detail = result.stderr.strip() or f"exit status {result.exit_code}"
        raise GitCommandError(
            f"{display}: {detail}",
            command=command,
            returncode=result.exit_code,
            stderr=result.stderr.strip(),
        )
    logger.debug("%s finished in %dms", display, duration_ms)
    return result


def clone_repository(
    token: CancelToken,
    path: Path,
    url: str,
    *,
    poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
) -> CommandResult:
    return run_git(["clone", "--quiet", url, str(path)], token, poll_interval=poll_interval)


def fetch_repository_tags(
    token: CancelToken,
    path: Path,
    *,
    poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
) -> CommandResult:
    return run_git(
        ["-C", str(path), "fetch", "--quiet", "--tags", "--force", "origin"],
        token,
        poll_interval=poll_interval,
    )


def load_repository(path: Path, token: CancelToken | None = None) -> LocalRepository:
    result = run_git(["-C", str(path), "rev-parse", "--absolute-git-dir"], token)
    return LocalRepository(path=path, git_dir=Path(result.stdout.strip()))


def checkout_repository_tag(
    token: CancelToken,
    repo: LocalRepository,
    tag: str,
    *,
    poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
) -> CommandResult:
    return run_git(
        [
            "-C",
            str(repo.path),
            "-c",
            "advice.detachedHead=false",
            "checkout",
            "--quiet",
            f"refs/tags/{tag}",
        ],
        token,
        poll_interval=poll_interval,
    )
