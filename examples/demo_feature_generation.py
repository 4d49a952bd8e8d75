"""Demo: synthesize a drive record and generate learning data from it.

A vehicle drives a circle at constant speed; localization is recorded at
100 Hz and chassis at 20 Hz into an NDJSON record, which is then run
through the feature generator.

Usage:
    python examples/demo_feature_generation.py --output-dir data/demo
"""

import argparse
import json
import math
import sys
from pathlib import Path

import polars as pl

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from feature_gen.conf.settings import Settings
from feature_gen.generator import FeatureGenerator
from feature_gen.utils.logging_utils import setup_logger

logger = setup_logger("feature_gen", log_level="INFO")


def synthesize_record(path: Path, duration_sec: float = 30.0, speed: float = 10.0) -> int:
    """Write a circular drive record.

    Args:
        path: Output NDJSON path
        duration_sec: Drive duration
        speed: Constant speed (m/s)

    Returns:
        Number of messages written
    """
    radius = 50.0
    omega = speed / radius
    rows = []

    for i in range(int(duration_sec * 100)):
        t = i / 100.0
        angle = omega * t
        heading = angle + math.pi / 2
        pose = {
            "position": {"x": radius * math.cos(angle), "y": radius * math.sin(angle), "z": 0.0},
            "heading": heading,
            "linear_velocity": {"x": speed * math.cos(heading), "y": speed * math.sin(heading)},
            # Centripetal acceleration
            "linear_acceleration": {
                "x": -speed * omega * math.cos(angle),
                "y": -speed * omega * math.sin(angle),
            },
            "angular_velocity": {"z": omega},
        }
        rows.append(
            {
                "timestamp": t,
                "channel_name": "/apollo/localization/pose",
                "content": json.dumps({"header": {"timestamp_sec": t}, "pose": pose}),
            }
        )

        if i % 5 == 0:
            chassis = {
                "header": {"timestamp_sec": t},
                "speed_mps": speed,
                "throttle_percentage": 18.0,
                "brake_percentage": 0.0,
                "steering_percentage": 12.5,
                "gear_location": "GEAR_DRIVE",
            }
            rows.append(
                {
                    "timestamp": t,
                    "channel_name": "/apollo/canbus/chassis",
                    "content": json.dumps(chassis),
                }
            )

    path.parent.mkdir(parents=True, exist_ok=True)
    pl.DataFrame(rows).write_ndjson(path)
    return len(rows)


def main():
    """Run the demo."""
    parser = argparse.ArgumentParser(description="Feature generation demo")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("data/demo"),
        help="Directory for the record and learning data (default: data/demo)",
    )
    parser.add_argument("--text", action="store_true", help="Write JSON text output")
    args = parser.parse_args()

    record_path = args.output_dir / "circle_drive.ndjson"
    message_count = synthesize_record(record_path)
    logger.info(f"Synthesized {message_count:,} messages into {record_path}")

    settings = Settings(
        planning_data_dir=str(args.output_dir / "learning_data"),
        label_sample_interval=100,
        trajectory_point_interval=10,
        move_window_step=5,
        frames_per_file=100,
        enable_binary_learning_data=not args.text,
    )

    generator = FeatureGenerator(settings)
    generator.process_offline_data(record_path)
    stats = generator.close()

    logger.info("")
    logger.info(f"Generated {stats.total_frames:,} frames in {stats.files_written} files")
    for output_file in stats.output_files:
        logger.info(f"  - {output_file}")


if __name__ == "__main__":
    main()
