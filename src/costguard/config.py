"""Configuration management for Cost Guard.

Provides the tool settings (environment, ownership, overrides) and the
cost-control configuration record written into the target project.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .exceptions import ConfigurationError
from .inspection.profile import ProjectProfile

ALLOWED_ENVIRONMENTS = ["dev", "staging", "qa", "prod"]
ALLOWED_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

CONFIG_FILENAME = "cost-controls-config.json"
SETTINGS_FILENAME = ".costguard.yml"

REQUIRED_TAGS = ["Project", "Environment", "Owner", "CostCenter"]


class _CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ResourceLimits(_CamelModel):
    """Per-environment resource limits."""

    max_instance_types: list[str] = Field(..., description="Allowed EC2 instance types")
    max_volume_size: int = Field(..., description="Maximum EBS volume size in GB")
    max_monthly_cost: int = Field(..., description="Maximum monthly cost in USD")


RESOURCE_LIMITS: dict[str, ResourceLimits] = {
    "dev": ResourceLimits(
        max_instance_types=["t3.micro", "t3.small"],
        max_volume_size=100,
        max_monthly_cost=100,
    ),
    "staging": ResourceLimits(
        max_instance_types=["t3.micro", "t3.small", "t3.medium"],
        max_volume_size=500,
        max_monthly_cost=300,
    ),
    "qa": ResourceLimits(
        max_instance_types=["t3.micro", "t3.small", "t3.medium"],
        max_volume_size=200,
        max_monthly_cost=150,
    ),
    "prod": ResourceLimits(
        max_instance_types=["t3.small", "t3.medium", "t3.large", "m5.large", "m5.xlarge"],
        max_volume_size=2000,
        max_monthly_cost=1000,
    ),
}


def get_resource_limits(environment: str) -> ResourceLimits:
    """Resource limits for ``environment``, falling back to dev."""
    return RESOURCE_LIMITS.get(environment, RESOURCE_LIMITS["dev"]).model_copy(deep=True)


class TaggingConfig(_CamelModel):
    """Tagging policy."""

    required: list[str] = Field(default_factory=lambda: list(REQUIRED_TAGS))
    automatic: bool = Field(True, description="Apply required tags automatically")


class MonitoringConfig(_CamelModel):
    """Monitoring features enabled for the project."""

    dashboard: bool = True
    daily_reports: bool = True
    anomaly_detection: bool = True


class CostControlConfig(_CamelModel):
    """The cost-control record written to ``cost-controls-config.json``."""

    project_name: str
    environment: str = "dev"
    cost_center: str = "engineering"
    owner: str = "devops-team"
    budget: int = Field(..., description="Monthly budget in USD")
    infrastructure: str = "none-detected"
    alert_email: str = "admin@company.com"
    auto_shutdown: bool = True
    resource_limits: ResourceLimits = Field(default_factory=lambda: get_resource_limits("dev"))
    tagging: TaggingConfig = Field(default_factory=TaggingConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)

    @classmethod
    def from_file(cls, path: str | Path) -> "CostControlConfig":
        """Load a previously written ``cost-controls-config.json``."""
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return cls(**data)
        except (ValueError, TypeError) as e:
            raise ConfigurationError(f"Invalid configuration file {config_path}: {e}") from e


class ConnectSettings(BaseModel):
    """Settings that drive a ``connect`` run."""

    environment: str = Field("dev", description="Target environment")
    cost_center: str = Field("engineering", description="CostCenter tag value")
    owner: str = Field("devops-team", description="Owner tag value")
    budget: int | None = Field(None, description="Budget override in USD")
    alert_email: str | None = Field(None, description="Alert email override")
    log_level: str = Field("WARNING", description="Logging level")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment values."""
        if v not in ALLOWED_ENVIRONMENTS:
            raise ValueError(f"Environment must be one of: {ALLOWED_ENVIRONMENTS}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level values."""
        if v.upper() not in ALLOWED_LOG_LEVELS:
            raise ValueError(f"Log level must be one of: {ALLOWED_LOG_LEVELS}")
        return v.upper()

    @field_validator("budget")
    @classmethod
    def validate_budget(cls, v: int | None) -> int | None:
        if v is not None and v <= 0:
            raise ValueError("Budget must be a positive number of dollars")
        return v

    @staticmethod
    def env_overrides() -> dict[str, Any]:
        """Read ``COSTGUARD_*`` environment variables."""
        mapping = {
            "environment": "COSTGUARD_ENVIRONMENT",
            "cost_center": "COSTGUARD_COST_CENTER",
            "owner": "COSTGUARD_OWNER",
            "budget": "COSTGUARD_BUDGET",
            "alert_email": "COSTGUARD_ALERT_EMAIL",
            "log_level": "COSTGUARD_LOG_LEVEL",
        }
        return {key: os.environ[var] for key, var in mapping.items() if os.environ.get(var)}

    @classmethod
    def from_env(cls) -> "ConnectSettings":
        """Load settings from environment variables."""
        return cls(**cls.env_overrides())


def _normalize_keys(data: dict[str, Any]) -> dict[str, Any]:
    """Accept ``costCenter`` / ``cost-center`` spellings in YAML settings."""
    normalized = {}
    for key, value in data.items():
        snake = "".join(f"_{c.lower()}" if c.isupper() else c for c in str(key))
        normalized[snake.replace("-", "_")] = value
    return normalized


def load_settings(
    root: str | Path = ".",
    config_path: Path | None = None,
    **overrides: Any,
) -> ConnectSettings:
    """Load connect settings for a project.

    Precedence, lowest first: defaults, YAML file, ``COSTGUARD_*``
    environment variables, explicit ``overrides`` (None values ignored).

    Args:
        root: Target project directory
        config_path: Optional settings file; defaults to ``<root>/.costguard.yml``

    Returns:
        Validated settings

    Raises:
        ConfigurationError: If the settings file is missing or any value is invalid
    """
    data: dict[str, Any] = {}

    if config_path is not None and not config_path.exists():
        raise ConfigurationError(f"Settings file not found: {config_path}")
    path = config_path or Path(root) / SETTINGS_FILENAME

    try:
        if path.exists():
            with open(path, encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
            if not isinstance(loaded, dict):
                raise ConfigurationError(f"Settings file must contain a mapping: {path}")
            data.update(_normalize_keys(loaded))

        data.update(ConnectSettings.env_overrides())
        data.update({k: v for k, v in overrides.items() if v is not None})

        return ConnectSettings(**data)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid settings file {path}: {e}") from e
    except ValidationError as e:
        first = e.errors()[0]
        key = ".".join(str(p) for p in first.get("loc", ()))
        raise ConfigurationError(f"Invalid setting {key}: {first.get('msg')}", config_key=key) from e


def build_cost_control_config(profile: ProjectProfile, settings: ConnectSettings) -> CostControlConfig:
    """Combine an inspected profile and settings into the output record."""
    environment = settings.environment
    return CostControlConfig(
        project_name=profile.project_name,
        environment=environment,
        cost_center=settings.cost_center,
        owner=settings.owner,
        budget=settings.budget if settings.budget is not None else profile.budget_estimate_usd,
        infrastructure=profile.infrastructure,
        alert_email=settings.alert_email or profile.alert_email,
        auto_shutdown=environment != "prod",
        resource_limits=get_resource_limits(environment),
    )
