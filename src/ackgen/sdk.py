"""Access to service API definitions inside an aws-sdk-go working tree."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ackgen.errors import SDKModelError, ServiceNotFoundError
from ackgen.genconfig import GeneratorConfig

logger = logging.getLogger(__name__)

MODELS_APIS_DIR = ("models", "apis")
API_FILE = "api-2.json"
DOCS_FILE = "docs-2.json"
DEFAULT_API_GROUP_SUFFIX = "services.k8s.aws"


@dataclass(slots=True)
class SDKAPI:
    service_model_name: str
    api_version: str
    definition: dict[str, Any]
    docs: dict[str, Any] = field(default_factory=dict)
    api_group_suffix: str = DEFAULT_API_GROUP_SUFFIX

    @property
    def metadata(self) -> dict[str, Any]:
        meta = self.definition.get("metadata")
        return meta if isinstance(meta, dict) else {}

    @property
    def service_id(self) -> str:
        return str(self.metadata.get("serviceId", ""))

    @property
    def service_full_name(self) -> str:
        return str(self.metadata.get("serviceFullName", ""))

    @property
    def operation_names(self) -> list[str]:
        operations = self.definition.get("operations")
        return sorted(operations) if isinstance(operations, dict) else []

    @property
    def shape_names(self) -> list[str]:
        shapes = self.definition.get("shapes")
        return sorted(shapes) if isinstance(shapes, dict) else []


def models_path(sdk_dir: Path) -> Path:
    return sdk_dir.joinpath(*MODELS_APIS_DIR)


def _read_json(path: Path) -> dict[str, Any]:
    try:
        decoded = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise SDKModelError(f"cannot read {path}: {exc.strerror or exc}") from exc
    except json.JSONDecodeError as exc:
        raise SDKModelError(f"cannot parse {path}: {exc}") from exc
    if not isinstance(decoded, dict):
        raise SDKModelError(f"{path} is not a JSON object")
    return decoded


class SDKHelper:
    """Loads api-2.json documents for service models from an SDK checkout.

    When no API version is pinned, the first (oldest) version directory of
    the service model is used.
    """

    def __init__(
        self, sdk_dir: Path, cfg: GeneratorConfig | None = None, api_version: str = ""
    ) -> None:
        self.sdk_dir = sdk_dir
        self.cfg = cfg
        self.api_version = api_version

    def api_versions(self, service_model_name: str) -> list[str]:
        service_path = models_path(self.sdk_dir) / service_model_name
        if not service_path.is_dir():
            raise SDKModelError(f"no service model {service_model_name} in {self.sdk_dir}")
        versions = sorted(entry.name for entry in service_path.iterdir() if entry.is_dir())
        if not versions:
            raise SDKModelError(f"no API versions found for service model {service_model_name}")
        return versions

    def model_and_docs_path(self, service_model_name: str) -> tuple[Path, Path]:
        api_version = self.api_version or self.api_versions(service_model_name)[0]
        version_path = models_path(self.sdk_dir) / service_model_name / api_version
        return version_path / API_FILE, version_path / DOCS_FILE

    def api(self, service_model_name: str) -> SDKAPI:
        model_path, docs_path = self.model_and_docs_path(service_model_name)
        definition = _read_json(model_path)
        docs = _read_json(docs_path) if docs_path.is_file() else {}
        return SDKAPI(
            service_model_name=service_model_name,
            api_version=model_path.parent.name,
            definition=definition,
            docs=docs,
        )


def _normalize_service_id(value: str) -> str:
    return value.replace(" ", "").lower()


def fallback_find_service_id(sdk_dir: Path, svc_alias: str) -> str:
    """Return the service model directory whose serviceId matches *svc_alias*.

    Every ``models/apis/*/*/api-2.json`` is read, so callers only reach for
    this after a direct lookup by name has failed.
    """
    wanted = _normalize_service_id(svc_alias)
    base = models_path(sdk_dir)
    if not base.is_dir():
        raise ServiceNotFoundError(svc_alias, f"service {svc_alias} not found: no {base}")
    for api_file in sorted(base.glob(f"*/*/{API_FILE}")):
        try:
            definition = _read_json(api_file)
        except SDKModelError as exc:
            logger.debug("Skipping unreadable model %s: %s", api_file, exc)
            continue
        metadata = definition.get("metadata")
        if not isinstance(metadata, dict):
            continue
        service_id = metadata.get("serviceId")
        if isinstance(service_id, str) and _normalize_service_id(service_id) == wanted:
            service_model_name = api_file.parent.parent.name
            logger.info(
                "Matched service alias %s to model %s by serviceId", svc_alias, service_model_name
            )
            return service_model_name
    raise ServiceNotFoundError(
        svc_alias, f"service {svc_alias} not found: no model declares a matching serviceId"
    )
