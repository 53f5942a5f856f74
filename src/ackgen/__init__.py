"""Prepare the aws-sdk-go source of truth and resolve per-service models."""

from ackgen.locator import load_model, load_model_with_latest_api_version
from ackgen.resolver import ResolvedVersion, resolve_sdk_version
from ackgen.sdkrepo import UpstreamRepository, ensure_sdk_repo
from ackgen.versions import ensure_semver_prefix, latest_api_version

__all__ = [
    "ResolvedVersion",
    "UpstreamRepository",
    "ensure_sdk_repo",
    "ensure_semver_prefix",
    "latest_api_version",
    "load_model",
    "load_model_with_latest_api_version",
    "resolve_sdk_version",
]
