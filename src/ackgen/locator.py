"""Find a service's SDK definition and build its ServiceModel."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from ackgen.errors import SDKModelError, ServiceNotFoundError
from ackgen.genconfig import DEFAULT_CONFIG, GeneratorConfig, load_generator_config
from ackgen.model import ServiceModel
from ackgen.sdk import SDKAPI, SDKHelper, fallback_find_service_id
from ackgen.versions import latest_api_version

logger = logging.getLogger(__name__)

HelperFactory = Callable[[Path, GeneratorConfig], SDKHelper]
FallbackFinder = Callable[[Path, str], str]


def _find_sdk_api(
    helper: SDKHelper,
    sdk_dir: Path,
    svc_alias: str,
    model_name: str,
    fallback: FallbackFinder,
) -> SDKAPI:
    try:
        return helper.api(model_name)
    except SDKModelError as exc:
        logger.info("No SDK model named %s (%s), scanning serviceIds", model_name, exc)

    retry_model_name = fallback(sdk_dir, svc_alias)
    try:
        return helper.api(retry_model_name)
    except SDKModelError as exc:
        raise ServiceNotFoundError(svc_alias) from exc


def load_model(
    sdk_dir: Path,
    svc_alias: str,
    api_version: str,
    api_group: str,
    default_cfg: GeneratorConfig,
    *,
    generator_config_path: str | Path | None = None,
    helper_factory: HelperFactory = SDKHelper,
    fallback: FallbackFinder = fallback_find_service_id,
) -> ServiceModel:
    """Build the ServiceModel for *svc_alias* from the SDK checkout at *sdk_dir*.

    Lookup is by the configured model name (else the alias); the serviceId
    scan only runs when that lookup fails, and the lookup is retried once
    with whatever the scan found.
    """
    cfg = load_generator_config(generator_config_path, default_cfg)
    model_name = cfg.lookup_model_name(svc_alias)

    helper = helper_factory(sdk_dir, cfg)
    sdk_api = _find_sdk_api(helper, sdk_dir, svc_alias, model_name, fallback)

    if api_group:
        sdk_api.api_group_suffix = api_group

    return ServiceModel(
        service_alias=svc_alias,
        api_version=api_version,
        sdk_api=sdk_api,
        config=cfg,
    )


def load_model_with_latest_api_version(
    sdk_dir: Path,
    svc_alias: str,
    output_path: Path,
    *,
    generator_config_path: str | Path | None = None,
) -> ServiceModel:
    """Like load_model, targeting the newest API version already generated in *output_path*."""
    api_version = latest_api_version(output_path)
    return load_model(
        sdk_dir,
        svc_alias,
        api_version,
        "",
        DEFAULT_CONFIG,
        generator_config_path=generator_config_path,
    )
