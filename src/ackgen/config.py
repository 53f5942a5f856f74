"""Application configuration contract."""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SDK_REPO_URL = "https://github.com/aws/aws-sdk-go"
DEFAULT_GIT_CLONE_TIMEOUT_SECONDS = 180
DEFAULT_GIT_FETCH_TIMEOUT_SECONDS = 30

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = Field(alias="APP_ENV", default="dev")
    log_level: str = Field(alias="LOG_LEVEL", default="INFO")

    sdk_repo_url: str = Field(alias="SDK_REPO_URL", default=DEFAULT_SDK_REPO_URL)
    cache_dir: str = Field(alias="ACK_CACHE_DIR", default="~/.cache/aws-controllers-k8s")
    output_path: str = Field(alias="ACK_OUTPUT_PATH", default="")
    generator_config_path: str = Field(alias="ACK_GENERATOR_CONFIG_PATH", default="")
    aws_sdk_go_version: str = Field(alias="AWS_SDK_GO_VERSION", default="")

    git_clone_timeout_seconds: float = Field(
        alias="GIT_CLONE_TIMEOUT_SECONDS", default=DEFAULT_GIT_CLONE_TIMEOUT_SECONDS
    )
    git_fetch_timeout_seconds: float = Field(
        alias="GIT_FETCH_TIMEOUT_SECONDS", default=DEFAULT_GIT_FETCH_TIMEOUT_SECONDS
    )
    git_poll_interval_seconds: float = Field(alias="GIT_POLL_INTERVAL_SECONDS", default=0.2)

    def cache_root(self) -> Path:
        return Path(self.cache_dir).expanduser()

    def sdk_module_path(self) -> str:
        """Go module path of the SDK, e.g. github.com/aws/aws-sdk-go."""
        url = self.sdk_repo_url.strip()
        for scheme in ("https://", "http://"):
            if url.startswith(scheme):
                url = url[len(scheme):]
                break
        return url.rstrip("/").removesuffix(".git")


def validate_settings_for_env(settings: Settings) -> None:
    _logger = logging.getLogger(__name__)

    invalid: list[str] = []
    if not settings.sdk_repo_url.strip():
        invalid.append("SDK_REPO_URL")
    if settings.git_clone_timeout_seconds <= 0:
        invalid.append("GIT_CLONE_TIMEOUT_SECONDS")
    if settings.git_fetch_timeout_seconds <= 0:
        invalid.append("GIT_FETCH_TIMEOUT_SECONDS")
    if settings.git_poll_interval_seconds <= 0:
        invalid.append("GIT_POLL_INTERVAL_SECONDS")
    if settings.log_level.upper() not in _LOG_LEVELS:
        invalid.append("LOG_LEVEL")
    if invalid:
        raise ValueError(f"Invalid settings: {', '.join(invalid)}")

    if settings.app_env != "prod":
        return

    if not settings.output_path.strip():
        raise ValueError("Missing required prod settings: ACK_OUTPUT_PATH")
    if not settings.sdk_repo_url.startswith("https://"):
        _logger.warning("SDK_REPO_URL is not an https URL: %s", settings.sdk_repo_url)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
