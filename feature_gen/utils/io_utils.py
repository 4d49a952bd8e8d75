"""IO utilities for learning data persistence."""

import io
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict

import orjson
import pandas as pd
import polars as pl

from feature_gen.schemas.frames import LearningData

_POINT3D = pl.Struct({"x": pl.Float64, "y": pl.Float64, "z": pl.Float64})

# One row per frame; features and labels stay nested
LEARNING_DATA_SCHEMA = {
    "frame_num": pl.Int64,
    "localization_feature": pl.Struct(
        {
            "position": _POINT3D,
            "heading": pl.Float64,
            "linear_velocity": _POINT3D,
            "linear_acceleration": _POINT3D,
            "angular_velocity": _POINT3D,
        }
    ),
    "chassis_feature": pl.Struct(
        {
            "speed_mps": pl.Float64,
            "throttle_percentage": pl.Float64,
            "brake_percentage": pl.Float64,
            "steering_percentage": pl.Float64,
            "gear_location": pl.Utf8,
        }
    ),
    "label_trajectory_points": pl.List(
        pl.Struct(
            {
                "path_point": pl.Struct(
                    {"x": pl.Float64, "y": pl.Float64, "z": pl.Float64, "theta": pl.Float64}
                ),
                "v": pl.Float64,
                "a": pl.Float64,
            }
        )
    ),
}

TEXT_SUFFIX = ".json"


def ensure_dir(path: str | Path) -> Path:
    """Ensure directory exists, create if needed.

    Args:
        path: Directory path

    Returns:
        Path object
    """
    path_obj = Path(path)
    path_obj.mkdir(parents=True, exist_ok=True)
    return path_obj


def atomic_write_bytes(file_path: str | Path, payload: bytes) -> Path:
    """Write bytes to a temporary file beside the target, then rename it into place.

    A reader never observes a partially written target; on failure the
    temporary file is removed and the exception propagates.

    Args:
        file_path: Final output path
        payload: File contents

    Returns:
        Path of the written file
    """
    path_obj = Path(file_path)
    ensure_dir(path_obj.parent)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path_obj.name}.", suffix=".tmp", dir=path_obj.parent
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path_obj)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    return path_obj


def encode_json(data: Dict[str, Any], pretty: bool = True) -> bytes:
    """Encode a JSON-compatible mapping.

    Args:
        data: Data to encode
        pretty: Indented text (standard json) or compact bytes (orjson)

    Returns:
        Encoded document
    """
    if pretty:
        return json.dumps(data, indent=2, default=str).encode("utf-8")
    return orjson.dumps(data, option=orjson.OPT_SERIALIZE_NUMPY)


def save_json(data: Dict[str, Any], file_path: str | Path, pretty: bool = True) -> Path:
    """Save data as a JSON file.

    Args:
        data: Data to save
        file_path: Output file path
        pretty: Whether to pretty-print (indent)

    Returns:
        Path of the written file
    """
    return atomic_write_bytes(file_path, encode_json(data, pretty=pretty))


def load_json(file_path: str | Path) -> Dict[str, Any]:
    """Load JSON file.

    Args:
        file_path: Path to JSON file

    Returns:
        Loaded data
    """
    with open(file_path, "rb") as f:
        return orjson.loads(f.read())


def save_parquet(df: pl.DataFrame, file_path: str | Path, compression: str = "snappy") -> Path:
    """Save DataFrame to Parquet, atomically.

    Args:
        df: Polars DataFrame
        file_path: Output path
        compression: Compression codec

    Returns:
        Path of the written file
    """
    buffer = io.BytesIO()
    df.write_parquet(buffer, compression=compression)
    return atomic_write_bytes(file_path, buffer.getvalue())


def learning_data_to_polars(data: LearningData) -> pl.DataFrame:
    """Convert a batch to a nested frame table (one row per frame)."""
    rows = [frame.model_dump(mode="json") for frame in data.learning_data]
    return pl.DataFrame(rows, schema=LEARNING_DATA_SCHEMA)


def save_learning_data(data: LearningData, file_path: str | Path, binary: bool = True) -> Path:
    """Write a batch as Parquet (binary) or indented JSON text.

    Args:
        data: LearningData batch
        file_path: Output path
        binary: Parquet if True, otherwise JSON text

    Returns:
        Path of the written file
    """
    if binary:
        return save_parquet(learning_data_to_polars(data), file_path)
    return save_json(data.model_dump(mode="json"), file_path, pretty=True)


def _null_struct_to_none(value: Any) -> Any:
    # Older polars releases return a null struct as a dict of nulls
    if isinstance(value, dict) and all(v is None for v in value.values()):
        return None
    return value


def load_learning_data(file_path: str | Path) -> LearningData:
    """Load a learning data file written in either binary or text form.

    ``.json`` files are read as JSON text; anything else as Parquet.

    Args:
        file_path: Path to a ``learning_data.<index>.*`` file

    Returns:
        Parsed LearningData batch
    """
    path_obj = Path(file_path)
    if path_obj.suffix == TEXT_SUFFIX:
        return LearningData.model_validate(load_json(path_obj))

    frames = [
        {key: _null_struct_to_none(value) for key, value in row.items()}
        for row in pl.read_parquet(path_obj).to_dicts()
    ]
    return LearningData.model_validate({"learning_data": frames})


def learning_data_to_dataframe(data: LearningData) -> pd.DataFrame:
    """Flatten a batch into one row per label trajectory point.

    Frame-level features are repeated on every row of their frame; frames
    without trajectory points contribute no rows.

    Args:
        data: LearningData batch

    Returns:
        DataFrame with frame features and trajectory point columns
    """
    rows = []
    for frame in data.learning_data:
        frame_row: Dict[str, Any] = {"frame_num": frame.frame_num}

        loc = frame.localization_feature
        if loc is not None:
            frame_row.update(
                {
                    "loc_x": loc.position.x,
                    "loc_y": loc.position.y,
                    "loc_heading": loc.heading,
                }
            )

        chassis = frame.chassis_feature
        if chassis is not None:
            frame_row.update(
                {
                    "speed_mps": chassis.speed_mps,
                    "throttle_percentage": chassis.throttle_percentage,
                    "brake_percentage": chassis.brake_percentage,
                    "steering_percentage": chassis.steering_percentage,
                    "gear_location": chassis.gear_location.value,
                }
            )

        for point_idx, point in enumerate(frame.label_trajectory_points):
            rows.append(
                {
                    **frame_row,
                    "point_idx": point_idx,
                    "x": point.path_point.x,
                    "y": point.path_point.y,
                    "z": point.path_point.z,
                    "theta": point.path_point.theta,
                    "v": point.v,
                    "a": point.a,
                }
            )

    return pd.DataFrame(rows)
