"""Generator configuration document (generator.yaml) and its merge rules."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ackgen.errors import GeneratorConfigError


class IgnoreSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    resource_names: list[str] = Field(default_factory=list)
    operations: list[str] = Field(default_factory=list)
    shape_names: list[str] = Field(default_factory=list)
    field_paths: list[str] = Field(default_factory=list)


class PrefixConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    spec_field: str = ".Spec"
    status_field: str = ".Status"


class GeneratorConfig(BaseModel):
    """Subset of the generator configuration consumed before code emission.

    Sections this package does not interpret are kept as extra fields so the
    merged document can be handed on unchanged.
    """

    model_config = ConfigDict(extra="allow", protected_namespaces=())

    model_name: str = ""
    ignore: IgnoreSpec = Field(default_factory=IgnoreSpec)
    resources: dict[str, dict[str, Any]] = Field(default_factory=dict)
    operations: dict[str, dict[str, Any]] = Field(default_factory=dict)
    prefix_config: PrefixConfig = Field(default_factory=PrefixConfig)

    def lookup_model_name(self, svc_alias: str) -> str:
        """Name under models/apis to search for: lowercased override, else the alias."""
        return self.model_name.lower() or svc_alias


DEFAULT_CONFIG = GeneratorConfig()


def load_generator_config(path: str | Path | None, default: GeneratorConfig) -> GeneratorConfig:
    """Read *path* and overlay its top-level keys on *default*.

    An empty path returns a copy of *default*.
    """
    if not path:
        return default.model_copy(deep=True)
    config_path = Path(path)
    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise GeneratorConfigError(
            f"cannot read generator config {config_path}: {exc.strerror or exc}"
        ) from exc
    except yaml.YAMLError as exc:
        raise GeneratorConfigError(f"cannot parse generator config {config_path}: {exc}") from exc
    if raw is None:
        return default.model_copy(deep=True)
    if not isinstance(raw, dict):
        raise GeneratorConfigError(f"generator config {config_path} must be a mapping")

    merged = default.model_dump()
    merged.update(raw)
    try:
        return GeneratorConfig.model_validate(merged)
    except ValidationError as exc:
        raise GeneratorConfigError(f"invalid generator config {config_path}: {exc}") from exc
