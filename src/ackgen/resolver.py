"""Pick the aws-sdk-go version a generation run should use."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from ackgen.config import DEFAULT_SDK_REPO_URL
from ackgen.errors import GoModParseError, VersionNotDeterminableError
from ackgen.gomod import read_go_mod
from ackgen.versions import ensure_semver_prefix

logger = logging.getLogger(__name__)

GO_MOD_FILE = "go.mod"
DEFAULT_SDK_MODULE = DEFAULT_SDK_REPO_URL.removeprefix("https://")


class VersionSource(StrEnum):
    EXPLICIT = "explicit"
    LAST_GENERATION = "last_generation"
    GO_MOD = "go_mod"


@dataclass(frozen=True, slots=True)
class ResolvedVersion:
    value: str
    source: VersionSource

    def __str__(self) -> str:
        return self.value


def sdk_version_from_go_mod(go_mod_path: Path, sdk_module: str = DEFAULT_SDK_MODULE) -> str:
    """Return the version of *sdk_module* in the require list of a go.mod file."""
    try:
        go_mod = read_go_mod(go_mod_path)
    except OSError as exc:
        raise VersionNotDeterminableError(
            f"cannot read {go_mod_path}: {exc.strerror or exc}"
        ) from exc
    except GoModParseError as exc:
        raise VersionNotDeterminableError(f"cannot parse {go_mod_path}: {exc}") from exc
    version = go_mod.required_version(sdk_module)
    if not version:
        raise VersionNotDeterminableError(
            f"couldn't find {sdk_module} in the {go_mod_path} require block"
        )
    return version


def resolve_sdk_version(
    explicit_version: str = "",
    last_generation_version: str = "",
    output_path: Path | None = None,
    *,
    sdk_module: str = DEFAULT_SDK_MODULE,
) -> ResolvedVersion:
    """Resolve the SDK version by precedence: explicit, last generation, go.mod.

    The returned value always carries a single leading ``v``.
    """
    if explicit_version.strip():
        resolved = ResolvedVersion(
            ensure_semver_prefix(explicit_version.strip()), VersionSource.EXPLICIT
        )
    elif last_generation_version.strip():
        resolved = ResolvedVersion(
            ensure_semver_prefix(last_generation_version.strip()),
            VersionSource.LAST_GENERATION,
        )
    elif output_path is None:
        raise VersionNotDeterminableError(
            "aws-sdk-go version not determinable: no explicit version, "
            "no previous generation metadata and no output path"
        )
    else:
        version = sdk_version_from_go_mod(output_path / GO_MOD_FILE, sdk_module)
        resolved = ResolvedVersion(ensure_semver_prefix(version), VersionSource.GO_MOD)
    logger.info("Resolved aws-sdk-go version %s from %s", resolved.value, resolved.source)
    return resolved
