"""Input sample schemas for localization and chassis channels."""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


class Point3D(BaseModel):
    """Cartesian vector (position, velocity, acceleration, angular rate)."""

    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


class GearPosition(str, Enum):
    """Gear location reported by the chassis."""

    NEUTRAL = "GEAR_NEUTRAL"
    DRIVE = "GEAR_DRIVE"
    REVERSE = "GEAR_REVERSE"
    PARKING = "GEAR_PARKING"
    LOW = "GEAR_LOW"
    INVALID = "GEAR_INVALID"
    NONE = "GEAR_NONE"


def _unwrap_header(data: Any) -> Any:
    """Lift ``header.timestamp_sec`` to the top level of a raw message dict."""
    if not isinstance(data, dict) or "header" not in data:
        return data

    data = dict(data)
    header = data.pop("header") or {}
    if not isinstance(header, dict):
        raise ValueError(f"header must be an object, got {type(header).__name__}")
    if "timestamp_sec" in header:
        data.setdefault("timestamp_sec", header["timestamp_sec"])
    return data


class LocalizationSample(BaseModel):
    """One localization estimate (vehicle pose).

    Accepts either the flat layout or the recorded message layout, where
    the pose fields sit under ``pose`` and the time under ``header``.
    """

    model_config = ConfigDict(frozen=True)

    timestamp_sec: Optional[float] = Field(None, description="Message time (seconds)")
    position: Point3D = Field(default_factory=Point3D, description="Position (m)")
    heading: float = Field(0.0, description="Heading (rad)")
    linear_velocity: Point3D = Field(default_factory=Point3D, description="Velocity (m/s)")
    linear_acceleration: Point3D = Field(
        default_factory=Point3D, description="Acceleration (m/s²)"
    )
    angular_velocity: Point3D = Field(
        default_factory=Point3D, description="Angular velocity (rad/s)"
    )

    @model_validator(mode="before")
    @classmethod
    def _flatten_pose(cls, data: Any) -> Any:
        data = _unwrap_header(data)
        if isinstance(data, dict) and isinstance(data.get("pose"), dict):
            data = dict(data)
            pose = data.pop("pose")
            data = {**pose, **data}
        return data


class ChassisSample(BaseModel):
    """One chassis status message."""

    model_config = ConfigDict(frozen=True)

    timestamp_sec: Optional[float] = Field(None, description="Message time (seconds)")
    speed_mps: float = Field(0.0, description="Vehicle speed (m/s)")
    throttle_percentage: float = Field(0.0, description="Throttle [0, 100]", ge=0, le=100)
    brake_percentage: float = Field(0.0, description="Brake [0, 100]", ge=0, le=100)
    steering_percentage: float = Field(
        0.0, description="Steering [-100, 100]", ge=-100, le=100
    )
    gear_location: GearPosition = Field(GearPosition.NONE, description="Gear location")

    @model_validator(mode="before")
    @classmethod
    def _flatten_header(cls, data: Any) -> Any:
        return _unwrap_header(data)
