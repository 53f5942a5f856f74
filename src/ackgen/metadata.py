"""Reader for the generation metadata left next to generated APIs."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from ackgen.versions import APIS_DIR, list_api_versions

logger = logging.getLogger(__name__)

METADATA_FILE = "ack-generate-metadata.yaml"


class GeneratorFileInfo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    original_file_name: str = ""
    file_checksum: str = ""


class GenerationMetadata(BaseModel):
    model_config = ConfigDict(extra="ignore")

    api_version: str = ""
    api_directory_checksum: str = ""
    aws_sdk_go_version: str = ""
    generator_config_info: GeneratorFileInfo | None = None


def metadata_path(output_path: Path, api_version: str) -> Path:
    return output_path / APIS_DIR / api_version / METADATA_FILE


def read_generation_metadata(path: Path) -> GenerationMetadata | None:
    """Parse one metadata file; None when missing or unusable."""
    if not path.is_file():
        return None
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Ignoring unreadable generation metadata %s: %s", path, exc)
        return None
    if not isinstance(raw, dict):
        return None
    try:
        return GenerationMetadata.model_validate(raw)
    except ValidationError as exc:
        logger.warning("Ignoring invalid generation metadata %s: %s", path, exc)
        return None


def last_generation_sdk_version(output_path: Path) -> str:
    """aws-sdk-go version recorded by the newest generated API version, or ""."""
    for api_version in reversed(list_api_versions(output_path)):
        meta = read_generation_metadata(metadata_path(output_path, api_version))
        if meta is not None and meta.aws_sdk_go_version:
            return meta.aws_sdk_go_version
    return ""
