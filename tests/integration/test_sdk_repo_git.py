"""ensure_sdk_repo against a real local git remote."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from ackgen.cancel import CancelToken
from ackgen.cli.main import cli
from ackgen.config import get_settings
from ackgen.errors import CheckoutError
from ackgen.git import clone_repository, fetch_repository_tags
from ackgen.sdkrepo import ensure_sdk_repo

pytestmark = pytest.mark.git


@pytest.fixture
def remote_env(upstream_repo: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("SDK_REPO_URL", str(upstream_repo))
    get_settings.cache_clear()
    return upstream_repo


def _head_tag(path: Path) -> str:
    proc = subprocess.run(
        ["git", "-C", str(path), "describe", "--tags", "--exact-match"],
        capture_output=True,
        text=True,
        check=True,
    )
    return proc.stdout.strip()


def test_fresh_cache_clones_once_without_fetch(remote_env: Path, tmp_path: Path) -> None:
    cache = tmp_path / "cache"
    with (
        patch("ackgen.sdkrepo.clone_repository", wraps=clone_repository) as clone,
        patch("ackgen.sdkrepo.fetch_repository_tags", wraps=fetch_repository_tags) as fetch,
    ):
        repo = ensure_sdk_repo(CancelToken(), cache, False, explicit_version="1.0.0")
        again = ensure_sdk_repo(CancelToken(), cache, False, explicit_version="1.1.0")

    assert clone.call_count == 1
    fetch.assert_not_called()
    assert repo.path == again.path == cache / "src" / "aws-sdk-go"
    assert (repo.path / "VERSION").read_text(encoding="utf-8").strip() == "1.1.0"
    assert _head_tag(repo.path) == "v1.1.0"


def test_checkout_of_first_tag(remote_env: Path, tmp_path: Path) -> None:
    repo = ensure_sdk_repo(CancelToken(), tmp_path / "cache", False, explicit_version="v1.0.0")
    assert _head_tag(repo.path) == "v1.0.0"
    assert (repo.path / "VERSION").read_text(encoding="utf-8").strip() == "1.0.0"


def test_new_tag_needs_fetch(remote_env: Path, tmp_path: Path, git_in) -> None:
    cache = tmp_path / "cache"
    ensure_sdk_repo(CancelToken(), cache, False, explicit_version="1.0.0")

    (remote_env / "VERSION").write_text("1.2.0\n", encoding="utf-8")
    git_in(remote_env, "commit", "--quiet", "-am", "release 1.2.0")
    git_in(remote_env, "tag", "v1.2.0")

    with pytest.raises(CheckoutError, match="v1.2.0"):
        ensure_sdk_repo(CancelToken(), cache, False, explicit_version="1.2.0")

    repo = ensure_sdk_repo(CancelToken(), cache, True, explicit_version="1.2.0")
    assert _head_tag(repo.path) == "v1.2.0"


def test_version_from_go_mod(remote_env: Path, tmp_path: Path, output_tree) -> None:
    module = get_settings().sdk_module_path()
    out = output_tree(go_mod=f"module m\n\nrequire {module} v1.0.0\n")
    repo = ensure_sdk_repo(CancelToken(), tmp_path / "cache", False, output_path=out)
    assert repo.version.value == "v1.0.0"
    assert _head_tag(repo.path) == "v1.0.0"


def test_cli_ensure_repo(
    remote_env: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("ackgen.cli.main.configure_logging", lambda *a, **k: None)
    cache = tmp_path / "cache"
    result = CliRunner().invoke(
        cli, ["ensure-repo", "--cache-dir", str(cache), "--aws-sdk-go-version", "1.1.0"]
    )
    assert result.exit_code == 0, result.output
    assert "version: v1.1.0 (explicit)" in result.output
    assert _head_tag(cache / "src" / "aws-sdk-go") == "v1.1.0"
