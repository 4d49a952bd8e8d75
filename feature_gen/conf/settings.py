"""Configuration settings for the learning data feature generator."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONFIG_PATH = Path(__file__).parent / "feature_generator.yaml"


class Settings(BaseSettings):
    """Feature generator settings."""

    model_config = SettingsConfigDict(
        env_prefix="FEATURE_GEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Output
    planning_data_dir: str = "data/learning_data"
    enable_binary_learning_data: bool = True  # False writes indented JSON text

    # Label window
    label_sample_interval: int = Field(100, ge=1)  # Localization msgs per label
    trajectory_point_interval: int = Field(10, ge=1)  # Msgs per trajectory point
    move_window_step: int = Field(5, ge=1)  # Msgs evicted after each label

    # Batching
    frames_per_file: int = Field(100, ge=1)

    # Record channels
    localization_channel: str = "/apollo/localization/pose"
    chassis_channel: str = "/apollo/canbus/chassis"

    # Logging
    log_level: str = "INFO"
    log_to_file: bool = False
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    logs_path: str = "logs"

    @model_validator(mode="after")
    def _check_window_step(self) -> "Settings":
        if self.move_window_step > self.label_sample_interval:
            raise ValueError(
                f"move_window_step ({self.move_window_step}) must not exceed "
                f"label_sample_interval ({self.label_sample_interval})"
            )
        return self

    @classmethod
    def from_yaml(cls, config_path: str | Path, **overrides: Any) -> "Settings":
        """Load settings from a YAML mapping, then apply keyword overrides.

        Args:
            config_path: Path to YAML file
            **overrides: Field values taking precedence over the file

        Returns:
            Settings instance
        """
        with open(config_path, "r") as f:
            params = yaml.safe_load(f) or {}

        if not isinstance(params, dict):
            raise ValueError(f"Config file {config_path} must contain a mapping")

        params.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**params)


# Process default; pipelines take their own Settings instance
settings = Settings()
