"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import MINUTES_PER_DAY, Modality, SchedulingRules, ServiceCatalog, ServiceType


class SchedulingConfig(BaseModel):
    """Day grid and horizon settings, in minutes unless noted."""
    day_start: int = 7 * 60
    day_end: int = 21 * 60
    quantum_minutes: int = 30
    min_slot_duration: int = 30
    default_slot_duration: int = 120
    availability_days: int = 28
    recurrence_weeks: int = 5
    commit_on_leave: bool = True

    @field_validator(
        "quantum_minutes",
        "min_slot_duration",
        "default_slot_duration",
        "availability_days",
        "recurrence_weeks",
    )
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Ensure durations and counts are positive."""
        if value <= 0:
            raise ValueError(f"must be greater than zero, got {value}")
        return value

    @field_validator("day_start", "day_end")
    @classmethod
    def validate_minute_of_day(cls, v: int) -> int:
        """Validate minutes are within a single day."""
        if not 0 <= v <= MINUTES_PER_DAY:
            raise ValueError(f"Minute of day must be between 0 and {MINUTES_PER_DAY}, got {v}")
        return v

    @model_validator(mode="after")
    def validate_day_window(self) -> "SchedulingConfig":
        """Ensure the day window is ordered, on the grid and can hold a slot."""
        if self.day_end <= self.day_start:
            raise ValueError("day_end must be later than day_start")
        if self.day_start % self.quantum_minutes or self.day_end % self.quantum_minutes:
            raise ValueError("day_start and day_end must be multiples of quantum_minutes")
        if self.min_slot_duration > self.day_end - self.day_start:
            raise ValueError("min_slot_duration does not fit in the day window")
        return self

    def to_rules(self) -> SchedulingRules:
        return SchedulingRules(**self.model_dump())


class ServiceTypeConfig(BaseModel):
    """A session type offered by the practice."""
    id: str
    title: str
    duration: int
    modality: Modality = Modality.VIDEO
    price: float = 0.0
    cooldown: int = 0

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure session duration is positive."""
        if value <= 0:
            raise ValueError("duration must be greater than zero")
        return value

    @field_validator("price", "cooldown")
    @classmethod
    def validate_non_negative(cls, value):
        if value < 0:
            raise ValueError("must not be negative")
        return value

    def to_service_type(self) -> ServiceType:
        return ServiceType(
            id=self.id,
            title=self.title,
            duration=self.duration,
            modality=self.modality,
            price=self.price,
            cooldown=self.cooldown,
        )


class AppConfig(BaseModel):
    """Application configuration."""
    scheduling: SchedulingConfig = Field(default_factory=SchedulingConfig)
    timezone: str = "Europe/London"
    services: List[ServiceTypeConfig] = Field(default_factory=list)
    log_level: str = "WARNING"

    @field_validator("services")
    @classmethod
    def validate_services(cls, value: List[ServiceTypeConfig]) -> List[ServiceTypeConfig]:
        """Ensure service ids are unique."""
        seen_ids: set[str] = set()
        for service in value:
            if service.id in seen_ids:
                raise ValueError(f"Duplicate service id detected: {service.id}")
            seen_ids.add(service.id)
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level

    def build_catalog(self) -> ServiceCatalog:
        """Build the read-only service catalog in configured order."""
        return ServiceCatalog(service.to_service_type() for service in self.services)

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
