"""Normalized per-service model handed to the code generator."""

from __future__ import annotations

from dataclasses import dataclass

from ackgen.genconfig import GeneratorConfig
from ackgen.sdk import SDKAPI


@dataclass(frozen=True, slots=True)
class ServiceModel:
    service_alias: str
    api_version: str
    sdk_api: SDKAPI
    config: GeneratorConfig

    @property
    def api_group(self) -> str:
        return f"{self.service_alias}.{self.sdk_api.api_group_suffix}"

    @property
    def service_model_name(self) -> str:
        return self.sdk_api.service_model_name

    def summary(self) -> dict[str, object]:
        return {
            "service_alias": self.service_alias,
            "api_version": self.api_version,
            "api_group": self.api_group,
            "service_model_name": self.sdk_api.service_model_name,
            "sdk_api_version": self.sdk_api.api_version,
            "service_id": self.sdk_api.service_id,
            "operations": len(self.sdk_api.operation_names),
            "shapes": len(self.sdk_api.shape_names),
        }
