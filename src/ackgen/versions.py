"""Kubernetes-aware API version ordering and semver prefix helpers."""

from __future__ import annotations

import re
from enum import IntEnum
from functools import cmp_to_key
from pathlib import Path

from ackgen.errors import NoVersionsFoundError

APIS_DIR = "apis"

_KUBE_VERSION_RE = re.compile(r"^v(\d+)(?:(alpha|beta)(\d+))?$")


class VersionTrack(IntEnum):
    ALPHA = 0
    BETA = 1
    GA = 2


def ensure_semver_prefix(value: str) -> str:
    """Return *value* with exactly one leading ``v``."""
    return f"v{value.lstrip('v')}"


def parse_kube_version(value: str) -> tuple[int, VersionTrack, int] | None:
    """Split ``v1beta2`` into ``(1, BETA, 2)``; None when not Kubernetes-shaped."""
    match = _KUBE_VERSION_RE.match(value)
    if match is None:
        return None
    major, qualifier, minor = match.groups()
    if qualifier == "alpha":
        return int(major), VersionTrack.ALPHA, int(minor)
    if qualifier == "beta":
        return int(major), VersionTrack.BETA, int(minor)
    return int(major), VersionTrack.GA, 0


def compare_kube_aware_versions(left: str, right: str) -> int:
    """Three-way compare of two API version names.

    Well-formed versions order by track (alpha < beta < GA), then major,
    then minor. Anything else ranks below every well-formed version and
    sorts in reverse lexical order among its peers.
    """
    if left == right:
        return 0
    parsed_left = parse_kube_version(left)
    parsed_right = parse_kube_version(right)
    if parsed_left is None and parsed_right is None:
        return (right > left) - (right < left)
    if parsed_left is None:
        return -1
    if parsed_right is None:
        return 1
    left_major, left_track, left_minor = parsed_left
    right_major, right_track, right_minor = parsed_right
    if left_track != right_track:
        return int(left_track) - int(right_track)
    if left_major != right_major:
        return left_major - right_major
    return left_minor - right_minor


def sort_api_versions(versions: list[str]) -> list[str]:
    return sorted(versions, key=cmp_to_key(compare_kube_aware_versions))


def list_api_versions(output_path: Path) -> list[str]:
    """Names of generated API version directories under ``<output>/apis``, oldest first."""
    apis_path = output_path / APIS_DIR
    if not apis_path.is_dir():
        return []
    return sort_api_versions([entry.name for entry in apis_path.iterdir() if entry.is_dir()])


def latest_api_version(output_path: Path) -> str:
    versions = list_api_versions(output_path)
    if not versions:
        raise NoVersionsFoundError(f"no versions found in {output_path / APIS_DIR}")
    return versions[-1]
