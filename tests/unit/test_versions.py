from pathlib import Path

import pytest

from ackgen.errors import NoVersionsFoundError
from ackgen.versions import (
    VersionTrack,
    compare_kube_aware_versions,
    ensure_semver_prefix,
    latest_api_version,
    parse_kube_version,
    sort_api_versions,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1.2.3", "v1.2.3"), ("v1.2.3", "v1.2.3"), ("vv1.2.3", "v1.2.3")],
)
def test_ensure_semver_prefix(raw: str, expected: str) -> None:
    assert ensure_semver_prefix(raw) == expected


def test_parse_kube_version() -> None:
    assert parse_kube_version("v1") == (1, VersionTrack.GA, 0)
    assert parse_kube_version("v2beta3") == (2, VersionTrack.BETA, 3)
    assert parse_kube_version("v1alpha10") == (1, VersionTrack.ALPHA, 10)
    assert parse_kube_version("v1gamma1") is None
    assert parse_kube_version("1") is None
    assert parse_kube_version("v1beta") is None


def test_track_outranks_generation() -> None:
    assert compare_kube_aware_versions("v1", "v2beta1") > 0
    assert compare_kube_aware_versions("v2alpha1", "v1beta1") < 0
    assert compare_kube_aware_versions("v1beta1", "v1beta1") == 0


def test_kubernetes_documented_order() -> None:
    shuffled = [
        "foo10",
        "v11alpha2",
        "v1",
        "v12alpha1",
        "v2",
        "v10beta3",
        "foo1",
        "v3beta1",
        "v10",
        "v11beta2",
        "v2beta1",
        "v1alpha1",
    ]
    assert sort_api_versions(shuffled) == [
        "foo10",
        "foo1",
        "v1alpha1",
        "v11alpha2",
        "v12alpha1",
        "v2beta1",
        "v3beta1",
        "v10beta3",
        "v11beta2",
        "v1",
        "v2",
        "v10",
    ]


def test_latest_prefers_stable(output_tree) -> None:
    root = output_tree("v1alpha1", "v1beta1", "v1")
    assert latest_api_version(root) == "v1"


def test_latest_compares_revisions_numerically(output_tree) -> None:
    root = output_tree("v1alpha2", "v1alpha10")
    assert latest_api_version(root) == "v1alpha10"


def test_latest_ignores_plain_files(output_tree) -> None:
    root = output_tree("v1alpha1")
    (root / "apis" / "v9").write_text("not a directory")
    assert latest_api_version(root) == "v1alpha1"


def test_latest_empty_apis_dir(output_tree) -> None:
    with pytest.raises(NoVersionsFoundError):
        latest_api_version(output_tree())


def test_latest_missing_apis_dir(tmp_path: Path) -> None:
    with pytest.raises(NoVersionsFoundError):
        latest_api_version(tmp_path / "nowhere")
