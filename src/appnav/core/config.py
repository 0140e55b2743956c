"""Navigator configuration and process settings."""

from __future__ import annotations

import re
from enum import StrEnum
from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from appnav.core.errors import ConfigError

# Config file names looked up in the project root, in order
CONFIG_FILE_NAMES = ["appnav.config.yml", "appnav.config.yaml", ".appnav.yml"]

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_OUTPUT_DIR = "cursor-app-map"


class Settings(BaseSettings):
    """Process-level settings loaded from APPNAV_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="APPNAV_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "ci", "production"] = "development"
    log_level: Literal["trace", "debug", "info", "notice", "warn", "error", "fatal"] = "info"
    config_file: str | None = None

    @field_validator("log_level", mode="before")
    @classmethod
    def lowercase_log_level(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.strip().lower()
            return "warn" if v == "warning" else v
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class ScreenshotType(StrEnum):
    """Screenshot image formats accepted in the configuration."""

    PNG = "png"
    JPEG = "jpeg"
    WEBP = "webp"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Viewport(_CamelModel):
    """Browser viewport size."""

    width: int = Field(default=1280, gt=0)
    height: int = Field(default=720, gt=0)


class ClipRegion(_CamelModel):
    """Rectangular region to restrict a screenshot to."""

    x: float
    y: float
    width: float
    height: float


class ScreenshotOptions(_CamelModel):
    """Options forwarded to the page screenshot call."""

    type: ScreenshotType = ScreenshotType.PNG
    quality: int | None = Field(default=90, ge=0, le=100)  # JPEG only
    full_page: bool = True
    animations: Literal["disabled", "allow"] = "disabled"
    clip: ClipRegion | None = None


class PerformanceThresholds(_CamelModel):
    """Limits above which a metric is reported as a violation.

    A threshold set to None (or 0) disables the check for that metric.
    """

    load_time: float | None = 5000
    first_contentful_paint: float | None = 2000
    largest_contentful_paint: float | None = 4000
    cumulative_layout_shift: float | None = 0.1


class NavigatorConfig(_CamelModel):
    """Options for one navigator run.

    Parsed from appnav.config.yml; keys may be camelCase (baseUrl) or
    snake_case (base_url).
    """

    framework: str | None = None
    base_url: str = DEFAULT_BASE_URL
    output_dir: str = DEFAULT_OUTPUT_DIR
    timeout: int = Field(default=30000, gt=0, description="Per-route navigation timeout in ms")
    retries: int = Field(default=2, ge=0)
    parallel: bool = False
    headless: bool = True
    viewport: Viewport = Field(default_factory=Viewport)
    custom_selectors: list[str] = Field(default_factory=list)
    exclude_routes: list[str] = Field(default_factory=list)
    include_routes: list[str] = Field(default_factory=list)
    screenshot_options: ScreenshotOptions = Field(default_factory=ScreenshotOptions)
    performance_thresholds: PerformanceThresholds = Field(default_factory=PerformanceThresholds)

    @field_validator("exclude_routes", "include_routes")
    @classmethod
    def validate_patterns(cls, patterns: list[str]) -> list[str]:
        """Reject route patterns that are not valid regular expressions."""
        for pattern in patterns:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid route pattern {pattern!r}: {e}") from e
        return patterns

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, value: str) -> str:
        if not re.match(r"^https?://", value):
            raise ValueError(f"base_url must be an http(s) URL, got {value!r}")
        return value

    def to_yaml_dict(self) -> dict:
        """Dump to a camelCase mapping suitable for writing a config file."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def parse_navigator_config(yaml_content: str) -> NavigatorConfig:
    """Parse navigator configuration from YAML content.

    Args:
        yaml_content: Raw YAML string from appnav.config.yml.

    Returns:
        Parsed NavigatorConfig with defaults for missing fields.

    Raises:
        ConfigError: If the YAML is invalid or fails validation.
    """
    try:
        data = yaml.safe_load(yaml_content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}") from e

    if data is None:
        return NavigatorConfig()

    if not isinstance(data, dict):
        raise ConfigError("Config must be a YAML mapping")

    try:
        return NavigatorConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def find_config_file(project_root: Path) -> Path | None:
    """Return the first known config file present in project_root."""
    for filename in CONFIG_FILE_NAMES:
        candidate = project_root / filename
        if candidate.is_file():
            return candidate
    return None


def load_navigator_config(path: Path) -> NavigatorConfig:
    """Load navigator configuration from a YAML file.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Could not read config file {path}: {e}") from e
    return parse_navigator_config(content)


def save_navigator_config(config: NavigatorConfig, path: Path) -> None:
    """Write navigator configuration to a YAML file."""
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config.to_yaml_dict(), f, default_flow_style=False, sort_keys=False)
