from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated, ClassVar, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from domain.models import CONTAINER_NODE_TYPES, LayoutThresholds

DEFAULT_CONFIG_PATH = Path("config/layout.yaml")

ClassifierName = Literal["score", "relative"]


def _split_string_list_value(raw_value: str) -> list[str]:
    raw = raw_value.strip()
    if not raw:
        return []
    if (
        (raw.startswith('"') and raw.endswith('"')) or (raw.startswith("'") and raw.endswith("'"))
    ) and len(raw) >= 2:
        raw = raw[1:-1].strip()
    if raw.startswith("[") and raw.endswith("]"):
        raw = raw[1:-1].strip()
    if not raw:
        return []
    return [
        token for token in (part.strip().strip("'").strip('"') for part in raw.split(",")) if token
    ]


class LayoutSettings(BaseModel):
    classifier: ClassifierName = "score"
    container_types: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: sorted(CONTAINER_NODE_TYPES)
    )
    alignment_tolerance: float = Field(default=2.0, ge=0)
    max_distribution_gap: float = Field(default=50.0, ge=0)
    distribution_weight: float = Field(default=0.7, ge=0)
    alignment_bonus: float = Field(default=0.3, ge=0)
    min_score: float = Field(default=0.4, ge=0)
    group_split_threshold: float = Field(default=20.0, ge=0)
    projection_tolerance: float = Field(default=1.0, ge=0)
    relative_tolerance_minimum: float = Field(default=5.0, ge=0)
    relative_tolerance_ratio: float = Field(default=0.01, ge=0)
    gap_consistency_threshold: float = Field(default=0.7, ge=0)

    @field_validator("classifier", mode="before")
    @classmethod
    def normalize_classifier(cls, value: object) -> str:
        return str(value).strip().lower() if value else "score"

    @field_validator("container_types", mode="before")
    @classmethod
    def normalize_container_types(cls, value: object) -> list[str]:
        if value is None:
            return []
        if isinstance(value, list):
            normalized: list[str] = []
            for item in value:
                normalized.extend(_split_string_list_value(str(item)))
            return [item.upper() for item in normalized]
        return [item.upper() for item in _split_string_list_value(str(value))]

    def to_thresholds(self) -> LayoutThresholds:
        return LayoutThresholds(
            alignment_tolerance=self.alignment_tolerance,
            max_distribution_gap=self.max_distribution_gap,
            distribution_weight=self.distribution_weight,
            alignment_bonus=self.alignment_bonus,
            min_score=self.min_score,
            group_split_threshold=self.group_split_threshold,
            projection_tolerance=self.projection_tolerance,
            relative_tolerance_minimum=self.relative_tolerance_minimum,
            relative_tolerance_ratio=self.relative_tolerance_ratio,
            gap_consistency_threshold=self.gap_consistency_threshold,
        )


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FLOWLAYOUT_", env_nested_delimiter="__")

    layout: LayoutSettings = LayoutSettings()
    log_level: str = "WARNING"

    _yaml_path: ClassVar[Path | None] = None

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> str:
        return str(value).strip().upper() if value else "WARNING"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        ]
        if cls._yaml_path:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path))
        return tuple(sources)


def load_settings(config_path: Path | None = None) -> AppSettings:
    env_path = os.getenv("FLOWLAYOUT_CONFIG_PATH")
    resolved_path: Path | None = None

    if config_path is not None:
        resolved_path = config_path
    elif env_path:
        resolved_path = Path(env_path)
    elif DEFAULT_CONFIG_PATH.exists():
        resolved_path = DEFAULT_CONFIG_PATH

    previous = AppSettings._yaml_path
    try:
        if resolved_path is not None:
            if not resolved_path.exists():
                msg = f"Config file not found: {resolved_path}"
                raise FileNotFoundError(msg)
            AppSettings._yaml_path = resolved_path
        return AppSettings()
    finally:
        AppSettings._yaml_path = previous
