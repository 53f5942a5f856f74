"""Click CLI group: ensure-repo, resolve-version, latest-api-version, locate-model, doctor."""

from __future__ import annotations

import json
from collections.abc import Callable
from functools import wraps
from pathlib import Path
from typing import ParamSpec, TypeVar

import click

from ackgen.cancel import cancel_on_signals
from ackgen.config import Settings, get_settings
from ackgen.errors import AckGenError
from ackgen.genconfig import DEFAULT_CONFIG
from ackgen.locator import load_model
from ackgen.logging import configure_logging, log_context, run_context
from ackgen.metadata import last_generation_sdk_version
from ackgen.resolver import resolve_sdk_version
from ackgen.sdkrepo import ensure_sdk_repo
from ackgen.versions import latest_api_version

P = ParamSpec("P")
R = TypeVar("R")


def _fail_on_ackgen_error(func: Callable[P, R]) -> Callable[P, R]:
    @wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return func(*args, **kwargs)
        except AckGenError as exc:
            raise click.ClickException(str(exc)) from exc

    return wrapper


def _output_path(settings: Settings, value: str | None) -> Path | None:
    raw = value or settings.output_path
    return Path(raw).expanduser() if raw else None


def _require_output_path(settings: Settings, value: str | None) -> Path:
    path = _output_path(settings, value)
    if path is None:
        raise click.ClickException("--output-path (or ACK_OUTPUT_PATH) is required")
    return path


def _cache_dir(settings: Settings, value: str | None) -> Path:
    return Path(value).expanduser() if value else settings.cache_root()


cache_dir_option = click.option(
    "--cache-dir",
    type=click.Path(path_type=str),
    default=None,
    help="SDK cache root (default: ACK_CACHE_DIR).",
)
output_path_option = click.option(
    "--output-path",
    type=click.Path(path_type=str),
    default=None,
    help="Service controller source tree (default: ACK_OUTPUT_PATH).",
)
sdk_version_option = click.option(
    "--aws-sdk-go-version",
    "sdk_version",
    type=str,
    default=None,
    help="aws-sdk-go version to check out (default: AWS_SDK_GO_VERSION).",
)


@click.group()
@click.option("--log-level", type=str, default=None, help="Override LOG_LEVEL.")
def cli(log_level: str | None) -> None:
    """ackgen: prepare aws-sdk-go and resolve service models for code generation."""
    settings = get_settings()
    configure_logging(log_level or settings.log_level, json_output=settings.app_env == "prod")


@cli.command("ensure-repo")
@cache_dir_option
@output_path_option
@sdk_version_option
@click.option("--fetch-tags", is_flag=True, help="Fetch remote tags before checkout.")
@_fail_on_ackgen_error
def ensure_repo(
    cache_dir: str | None,
    output_path: str | None,
    sdk_version: str | None,
    fetch_tags: bool,
) -> None:
    """Clone (once) and check out aws-sdk-go at the resolved version."""
    settings = get_settings()
    root = _cache_dir(settings, cache_dir)
    with log_context(**run_context(settings, cache_dir=root)), cancel_on_signals() as token:
        repo = ensure_sdk_repo(
            token,
            root,
            fetch_tags,
            explicit_version=sdk_version or settings.aws_sdk_go_version,
            output_path=_output_path(settings, output_path),
            settings=settings,
        )
    click.echo(f"sdk dir: {repo.path}")
    click.echo(f"version: {repo.version.value} ({repo.version.source})")


@cli.command("resolve-version")
@output_path_option
@sdk_version_option
@_fail_on_ackgen_error
def resolve_version(output_path: str | None, sdk_version: str | None) -> None:
    """Print the aws-sdk-go version a generation run would use."""
    settings = get_settings()
    path = _output_path(settings, output_path)
    last_generation = last_generation_sdk_version(path) if path is not None else ""
    resolved = resolve_sdk_version(
        sdk_version or settings.aws_sdk_go_version,
        last_generation,
        path,
        sdk_module=settings.sdk_module_path(),
    )
    click.echo(f"{resolved.value} ({resolved.source})")


@cli.command("latest-api-version")
@output_path_option
@_fail_on_ackgen_error
def latest_api_version_cmd(output_path: str | None) -> None:
    """Print the newest API version already generated in the output tree."""
    settings = get_settings()
    click.echo(latest_api_version(_require_output_path(settings, output_path)))


@cli.command("locate-model")
@click.argument("service_alias")
@click.option(
    "--api-version",
    type=str,
    default=None,
    help="Target API version (default: latest generated).",
)
@click.option("--api-group", type=str, default="", help="Override the API group suffix.")
@click.option(
    "--generator-config-path",
    type=click.Path(path_type=str),
    default=None,
    help="generator.yaml to merge over the defaults (default: ACK_GENERATOR_CONFIG_PATH).",
)
@cache_dir_option
@output_path_option
@sdk_version_option
@click.option("--fetch-tags", is_flag=True, help="Fetch remote tags before checkout.")
@click.option("--json", "json_output", is_flag=True, help="Print the model summary as JSON.")
@_fail_on_ackgen_error
def locate_model(
    service_alias: str,
    api_version: str | None,
    api_group: str,
    generator_config_path: str | None,
    cache_dir: str | None,
    output_path: str | None,
    sdk_version: str | None,
    fetch_tags: bool,
    json_output: bool,
) -> None:
    """Synchronize aws-sdk-go and resolve the service model for SERVICE_ALIAS."""
    settings = get_settings()
    root = _cache_dir(settings, cache_dir)
    out = _output_path(settings, output_path)
    if not api_version:
        if out is None:
            raise click.ClickException("--api-version or --output-path is required")
        api_version = latest_api_version(out)

    with log_context(**run_context(settings, cache_dir=root, service_alias=service_alias)):
        with cancel_on_signals() as token:
            repo = ensure_sdk_repo(
                token,
                root,
                fetch_tags,
                explicit_version=sdk_version or settings.aws_sdk_go_version,
                output_path=out,
                settings=settings,
            )
        with log_context(sdk_version=repo.version.value):
            model = load_model(
                repo.path,
                service_alias,
                api_version,
                api_group,
                DEFAULT_CONFIG,
                generator_config_path=generator_config_path or settings.generator_config_path,
            )
    summary = model.summary()
    summary["aws_sdk_go_version"] = repo.version.value
    if json_output:
        click.echo(json.dumps(summary, indent=2, sort_keys=True))
        return
    for key, value in summary.items():
        click.echo(f"{key}: {value}")


@cli.command()
@click.option("--json", "json_output", is_flag=True, help="Append JSON output to the report.")
@click.option("--fix", is_flag=True, help="Try to auto-fix supported failed checks.")
def doctor(json_output: bool, fix: bool) -> None:
    """Run preflight checks and print a health report."""
    from ackgen.cli.doctor import run_doctor

    run_doctor(json_output=json_output, fix=fix)
