"""Keep a local aws-sdk-go working tree checked out at the resolved version."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from ackgen.cancel import CancelToken
from ackgen.config import Settings, get_settings
from ackgen.errors import (
    CheckoutError,
    CloneError,
    FetchTagsError,
    GitCommandError,
    NotWriteableError,
    RepositoryLoadError,
)
from ackgen.git import (
    checkout_repository_tag,
    clone_repository,
    fetch_repository_tags,
    load_repository,
)
from ackgen.metadata import last_generation_sdk_version
from ackgen.resolver import ResolvedVersion, resolve_sdk_version

logger = logging.getLogger(__name__)

SRC_DIR = "src"
SDK_REPO_NAME = "aws-sdk-go"
_PERMCHECK_FILE = ".ackgen-permcheck"


class SyncState(StrEnum):
    UNINITIALIZED = "uninitialized"
    CLONING = "cloning"
    FETCHING = "fetching"
    CHECKING_OUT = "checking_out"
    CHECKED_OUT = "checked_out"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class UpstreamRepository:
    remote_url: str
    cache_root: Path
    path: Path
    version: ResolvedVersion


def sdk_repo_path(cache_dir: Path) -> Path:
    return cache_dir / SRC_DIR / SDK_REPO_NAME


def is_dir_writeable(path: Path) -> bool:
    probe = path / _PERMCHECK_FILE
    try:
        probe.write_text("")
    except OSError:
        return False
    probe.unlink(missing_ok=True)
    return True


def ensure_dir(path: Path) -> bool:
    """Make sure *path* is a writeable directory; return whether it already existed."""
    if not path.exists():
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise NotWriteableError(f"cannot create {path}: {exc.strerror or exc}") from exc
        existed = False
    elif not path.is_dir():
        raise NotWriteableError(f"expected {path} to be a directory")
    else:
        existed = True
    if not is_dir_writeable(path):
        raise NotWriteableError(f"{path} is not a writeable directory")
    return existed


class RepositorySynchronizer:
    """Clone, optionally fetch tags, then check out the resolved tag.

    Each synchronizer runs one ``ensure`` at a time; ``state`` reports the
    step reached, and stays FAILED once any step has failed.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.state = SyncState.UNINITIALIZED

    def _transition(self, state: SyncState) -> None:
        logger.debug("SDK repository sync: %s -> %s", self.state, state)
        self.state = state

    def ensure(
        self,
        token: CancelToken,
        cache_dir: Path,
        fetch_tags: bool,
        *,
        explicit_version: str = "",
        output_path: Path | None = None,
        last_generation_version: str | None = None,
    ) -> UpstreamRepository:
        try:
            return self._ensure(
                token,
                cache_dir,
                fetch_tags,
                explicit_version=explicit_version,
                output_path=output_path,
                last_generation_version=last_generation_version,
            )
        except Exception:
            self._transition(SyncState.FAILED)
            raise

    def _ensure(
        self,
        token: CancelToken,
        cache_dir: Path,
        fetch_tags: bool,
        *,
        explicit_version: str,
        output_path: Path | None,
        last_generation_version: str | None,
    ) -> UpstreamRepository:
        settings = self.settings
        poll = settings.git_poll_interval_seconds
        src_path = cache_dir / SRC_DIR
        ensure_dir(src_path)

        sdk_dir = sdk_repo_path(cache_dir)
        if not sdk_dir.exists():
            self._transition(SyncState.CLONING)
            logger.info("Cloning %s into %s", settings.sdk_repo_url, sdk_dir)
            try:
                clone_repository(
                    token.with_timeout(settings.git_clone_timeout_seconds),
                    sdk_dir,
                    settings.sdk_repo_url,
                    poll_interval=poll,
                )
            except GitCommandError as exc:
                raise CloneError(
                    f"cannot clone repository: {exc}", retryable=exc.retryable
                ) from exc
        else:
            logger.info("Reusing SDK working tree at %s", sdk_dir)

        if fetch_tags:
            self._transition(SyncState.FETCHING)
            logger.info("Fetching tags for %s", sdk_dir)
            try:
                fetch_repository_tags(
                    token.with_timeout(settings.git_fetch_timeout_seconds),
                    sdk_dir,
                    poll_interval=poll,
                )
            except GitCommandError as exc:
                raise FetchTagsError(
                    f"cannot fetch tags: {exc}", retryable=exc.retryable
                ) from exc

        if last_generation_version is None:
            last_generation_version = (
                last_generation_sdk_version(output_path) if output_path is not None else ""
            )
        version = resolve_sdk_version(
            explicit_version,
            last_generation_version,
            output_path,
            sdk_module=settings.sdk_module_path(),
        )

        self._transition(SyncState.CHECKING_OUT)
        try:
            repo = load_repository(sdk_dir, token)
        except GitCommandError as exc:
            raise RepositoryLoadError(f"cannot read local repository: {exc}") from exc
        try:
            checkout_repository_tag(token, repo, version.value, poll_interval=poll)
        except GitCommandError as exc:
            raise CheckoutError(f"cannot checkout tag {version.value}: {exc}") from exc

        self._transition(SyncState.CHECKED_OUT)
        logger.info("SDK working tree %s checked out at %s", sdk_dir, version.value)
        return UpstreamRepository(
            remote_url=settings.sdk_repo_url,
            cache_root=cache_dir,
            path=sdk_dir,
            version=version,
        )


def ensure_sdk_repo(
    token: CancelToken,
    cache_dir: Path,
    fetch_tags: bool,
    *,
    explicit_version: str = "",
    output_path: Path | None = None,
    last_generation_version: str | None = None,
    settings: Settings | None = None,
) -> UpstreamRepository:
    """Ensure a git clone of aws-sdk-go under *cache_dir* checked out at the resolved tag."""
    return RepositorySynchronizer(settings).ensure(
        token,
        cache_dir,
        fetch_tags,
        explicit_version=explicit_version,
        output_path=output_path,
        last_generation_version=last_generation_version,
    )
