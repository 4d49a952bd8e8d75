"""Learning data frame schemas (the persisted training records)."""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .samples import ChassisSample, GearPosition, LocalizationSample, Point3D


class LocalizationFeature(BaseModel):
    """Latest localization snapshot of a frame."""

    model_config = ConfigDict(frozen=True)

    position: Point3D = Field(default_factory=Point3D)
    heading: float = 0.0
    linear_velocity: Point3D = Field(default_factory=Point3D)
    linear_acceleration: Point3D = Field(default_factory=Point3D)
    angular_velocity: Point3D = Field(default_factory=Point3D)

    @classmethod
    def from_sample(cls, sample: LocalizationSample) -> "LocalizationFeature":
        return cls(
            position=sample.position,
            heading=sample.heading,
            linear_velocity=sample.linear_velocity,
            linear_acceleration=sample.linear_acceleration,
            angular_velocity=sample.angular_velocity,
        )


class ChassisFeature(BaseModel):
    """Latest chassis snapshot of a frame."""

    model_config = ConfigDict(frozen=True)

    speed_mps: float = 0.0
    throttle_percentage: float = 0.0
    brake_percentage: float = 0.0
    steering_percentage: float = 0.0
    gear_location: GearPosition = GearPosition.NONE

    @classmethod
    def from_sample(cls, sample: ChassisSample) -> "ChassisFeature":
        return cls(
            speed_mps=sample.speed_mps,
            throttle_percentage=sample.throttle_percentage,
            brake_percentage=sample.brake_percentage,
            steering_percentage=sample.steering_percentage,
            gear_location=sample.gear_location,
        )


class PathPoint(BaseModel):
    """Planar pose of a trajectory point."""

    model_config = ConfigDict(frozen=True)

    x: float = Field(..., description="X (m)")
    y: float = Field(..., description="Y (m)")
    z: float = Field(0.0, description="Z (m)")
    theta: float = Field(0.0, description="Heading (rad)")


class TrajectoryPoint(BaseModel):
    """Label trajectory point derived from one localization sample."""

    model_config = ConfigDict(frozen=True)

    path_point: PathPoint
    v: float = Field(..., description="Speed magnitude (m/s)", ge=0)
    a: float = Field(..., description="Acceleration magnitude (m/s²)", ge=0)


class LearningDataFrame(BaseModel):
    """One closed output frame: feature snapshots plus trajectory labels."""

    model_config = ConfigDict(frozen=True)

    frame_num: int = Field(..., description="Frame sequence number within a stream", ge=0)
    localization_feature: Optional[LocalizationFeature] = None
    chassis_feature: Optional[ChassisFeature] = None
    label_trajectory_points: List[TrajectoryPoint] = Field(default_factory=list)


class LearningData(BaseModel):
    """Batch of frames written to one output file."""

    learning_data: List[LearningDataFrame] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.learning_data)
