import json
import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest

from ackgen.config import get_settings

_ENV_KEYS = (
    "APP_ENV",
    "LOG_LEVEL",
    "SDK_REPO_URL",
    "ACK_CACHE_DIR",
    "ACK_OUTPUT_PATH",
    "ACK_GENERATOR_CONFIG_PATH",
    "AWS_SDK_GO_VERSION",
    "GIT_CLONE_TIMEOUT_SECONDS",
    "GIT_FETCH_TIMEOUT_SECONDS",
    "GIT_POLL_INTERVAL_SECONDS",
)


@pytest.fixture(autouse=True)
def test_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    # keep a developer .env out of the settings under test
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ACK_CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.setenv("GIT_POLL_INTERVAL_SECONDS", "0.05")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def add_service_model(tmp_path: Path) -> Callable[..., Path]:
    """Write models/apis/<name>/<version>/api-2.json under an SDK directory."""

    def _add(
        name: str,
        service_id: str,
        api_version: str = "2015-01-01",
        *,
        sdk_dir: Path | None = None,
        operations: tuple[str, ...] = ("CreateThing", "DeleteThing"),
        docs: bool = False,
    ) -> Path:
        root = sdk_dir or tmp_path / "aws-sdk-go"
        version_dir = root / "models" / "apis" / name / api_version
        version_dir.mkdir(parents=True, exist_ok=True)
        definition = {
            "version": "2.0",
            "metadata": {
                "apiVersion": api_version,
                "serviceId": service_id,
                "serviceFullName": f"Amazon {service_id}",
                "protocol": "json",
            },
            "operations": {op: {"name": op} for op in operations},
            "shapes": {f"{op}Request": {"type": "structure"} for op in operations},
        }
        (version_dir / "api-2.json").write_text(json.dumps(definition), encoding="utf-8")
        if docs:
            (version_dir / "docs-2.json").write_text(
                json.dumps({"version": "2.0", "service": f"{service_id} docs"}),
                encoding="utf-8",
            )
        return root

    return _add


@pytest.fixture
def output_tree(tmp_path: Path) -> Callable[..., Path]:
    """Create a service controller tree with apis/<version> dirs and an optional go.mod."""

    def _make(*versions: str, go_mod: str | None = None) -> Path:
        root = tmp_path / "controller"
        (root / "apis").mkdir(parents=True, exist_ok=True)
        for version in versions:
            (root / "apis" / version).mkdir(exist_ok=True)
        if go_mod is not None:
            (root / "go.mod").write_text(go_mod, encoding="utf-8")
        return root

    return _make


def _git(*args: str, cwd: Path) -> None:
    subprocess.run(
        ["git", "-c", "user.name=ackgen", "-c", "user.email=ackgen@example.com", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )


@pytest.fixture
def upstream_repo(tmp_path: Path) -> Path:
    """Local stand-in for aws-sdk-go with tags v1.0.0 and v1.1.0."""
    if shutil.which("git") is None:
        pytest.skip("git not on PATH")
    repo = tmp_path / "upstream"
    repo.mkdir()
    _git("init", "--quiet", cwd=repo)
    for version in ("1.0.0", "1.1.0"):
        (repo / "VERSION").write_text(version + "\n", encoding="utf-8")
        _git("add", "VERSION", cwd=repo)
        _git("commit", "--quiet", "-m", f"release {version}", cwd=repo)
        _git("tag", f"v{version}", cwd=repo)
    return repo


@pytest.fixture
def git_in() -> Callable[..., None]:
    return lambda repo, *args: _git(*args, cwd=repo)
