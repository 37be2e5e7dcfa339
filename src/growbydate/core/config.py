"""
Configuration system with validation and environment awareness.
Based on Pydantic Settings for robust configuration management.
"""
from pathlib import Path
import logging
import yaml
from pydantic import Field, field_validator, model_validator, ConfigDict
from pydantic_settings import BaseSettings
from typing import Optional, Literal, Union

from growbydate.core import constants


class DataConfig(BaseSettings):
    """Where the published planner datasets live"""

    # SOURCES (base_url wins over site_root when both are set)
    site_root: Optional[Path] = Field(None, description="Local directory of the built site")
    base_url: Optional[str] = Field(None, description="Published site origin, e.g. https://example.org")

    # PATHS
    frost_dataset_path: str = Field(constants.FROST_DATASET_PATH)
    station_index_path: str = Field(constants.STATION_INDEX_PATH)
    station_series_template: str = Field(
        constants.STATION_SERIES_TEMPLATE,
        description="Per-station path; must contain {station_id}"
    )

    # HTTP
    timeout_seconds: int = Field(default=30, gt=0)
    user_agent: str = Field("GrowByDate-Planner/1.0")

    model_config = ConfigDict(env_prefix="GROWBYDATE_DATA_", case_sensitive=False)

    @field_validator("station_series_template")
    @classmethod
    def validate_template(cls, v: str) -> str:
        """Template must be formattable with a station id"""
        if "{station_id}" not in v:
            raise ValueError("station_series_template must contain '{station_id}'")
        return v

    @field_validator("base_url")
    @classmethod
    def strip_base_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip().rstrip("/")
        return v or None


class PlannerConfig(BaseSettings):
    """Configuration for the GDD planner and its exports"""

    tool_slug: str = Field(constants.GDD_TOOL_SLUG, description="relatedTools entry marking eligible crops")
    report_title: str = Field(constants.REPORT_TITLE)
    csv_filename: str = Field("growbydate-gdd-results.csv")
    text_filename: str = Field("growbydate-gdd-results.txt")

    model_config = ConfigDict(env_prefix="GROWBYDATE_PLANNER_", case_sensitive=False)


class MonitoringConfig(BaseSettings):
    """Configuration for logging and diagnostics"""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: str = Field(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    model_config = ConfigDict(env_prefix="GROWBYDATE_MONITORING_", case_sensitive=False)


class GrowByDateConfig(BaseSettings):
    """Main configuration for the GrowByDate planner"""

    # System
    project_name: str = "growbydate"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False

    # Component configurations
    data: DataConfig = Field(default_factory=DataConfig)
    planner: PlannerConfig = Field(default_factory=PlannerConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    model_config = ConfigDict(
        env_prefix="GROWBYDATE_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_config(self):
        """Cross-field validation"""
        if self.environment == "production" and self.debug:
            raise ValueError("Debug mode cannot be enabled in production")
        return self

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> "GrowByDateConfig":
        """Load configuration from YAML file"""
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        with open(yaml_path, encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}

        return cls(**yaml_config)

    def to_yaml(self, yaml_path: Union[str, Path]):
        """Save configuration to YAML file"""
        yaml_path = Path(yaml_path)
        yaml_path.parent.mkdir(parents=True, exist_ok=True)

        with open(yaml_path, "w", encoding="utf-8") as f:
            yaml.dump(self.model_dump(mode="json"), f, default_flow_style=False, allow_unicode=True)


# Global configuration instance
_config: Optional[GrowByDateConfig] = None


def get_config(config_path: Optional[Path] = None) -> GrowByDateConfig:
    """Get or create configuration instance (singleton pattern)"""
    global _config

    if _config is None:
        if config_path and config_path.exists():
            _config = GrowByDateConfig.from_yaml(config_path)
        else:
            # Try to load from environment
            _config = GrowByDateConfig()

    return _config


def set_config(config: Optional[GrowByDateConfig]):
    """Set configuration (useful for testing)"""
    global _config
    _config = config


def configure_logging(config: Optional[GrowByDateConfig] = None):
    """Apply the configured level and format to the root logger"""
    config = config or get_config()
    level = "DEBUG" if config.debug else config.monitoring.log_level
    logging.basicConfig(level=getattr(logging, level), format=config.monitoring.log_format)
    logging.getLogger("growbydate").setLevel(getattr(logging, level))
