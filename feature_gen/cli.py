"""Command line entry point: generate learning data from record files.

Usage:
    feature-gen records/drive_01.parquet records/drive_02.parquet \\
        --output-dir data/learning_data --frames-per-file 50
"""

import argparse
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

import yaml

from feature_gen.conf.settings import Settings
from feature_gen.generator import FeatureGenerator, SerializationError
from feature_gen.utils.io_utils import save_json
from feature_gen.utils.logging_utils import setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate planning learning data from localization and chassis records"
    )

    parser.add_argument(
        "records",
        nargs="+",
        type=Path,
        help="Record files (.parquet, .csv, .ndjson), processed in order",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML settings file (command line options take precedence)",
    )

    parser.add_argument(
        "--output-dir",
        dest="planning_data_dir",
        default=None,
        help="Directory for learning_data.<index> files",
    )

    parser.add_argument(
        "--label-sample-interval",
        type=int,
        default=None,
        help="Localization messages per trajectory label",
    )

    parser.add_argument(
        "--frames-per-file",
        type=int,
        default=None,
        help="Learning data frames per output file",
    )

    parser.add_argument(
        "--trajectory-point-interval",
        type=int,
        default=None,
        help="Localization messages per label trajectory point",
    )

    parser.add_argument(
        "--move-window-step",
        type=int,
        default=None,
        help="Localization messages evicted from the window after each label",
    )

    parser.add_argument(
        "--text",
        action="store_true",
        help="Write indented JSON text instead of binary files",
    )

    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: from settings)",
    )

    parser.add_argument(
        "--stats-file",
        type=Path,
        default=None,
        help="Write run statistics as JSON to this path",
    )

    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    """Build Settings from an optional YAML file plus command line overrides."""
    overrides = {
        "planning_data_dir": args.planning_data_dir,
        "label_sample_interval": args.label_sample_interval,
        "frames_per_file": args.frames_per_file,
        "trajectory_point_interval": args.trajectory_point_interval,
        "move_window_step": args.move_window_step,
        "log_level": args.log_level,
    }
    if args.text:
        overrides["enable_binary_learning_data"] = False

    if args.config is not None:
        return Settings.from_yaml(args.config, **overrides)
    return Settings(**{k: v for k, v in overrides.items() if v is not None})


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Returns:
        Process exit status
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    # ValidationError is a ValueError
    try:
        settings = load_settings(args)
    except (OSError, TypeError, ValueError, yaml.YAMLError) as e:
        parser.error(f"Invalid settings: {e}")

    try:
        logger = setup_logger(
            "feature_gen",
            log_level=settings.log_level,
            log_file="feature_gen.log" if settings.log_to_file else None,
            log_dir=settings.logs_path,
            log_format=settings.log_format,
        )
    except (OSError, TypeError, ValueError) as e:
        parser.error(f"Invalid logging settings: {e}")

    logger.info("=" * 60)
    logger.info("Planning Feature Generation")
    logger.info("=" * 60)
    logger.info(f"Records: {len(args.records)}")
    logger.info(f"Output dir: {settings.planning_data_dir}")
    logger.info(
        f"Label interval: {settings.label_sample_interval}, "
        f"point interval: {settings.trajectory_point_interval}, "
        f"window step: {settings.move_window_step}, "
        f"frames per file: {settings.frames_per_file}"
    )
    logger.info("=" * 60)

    generator = FeatureGenerator(settings)

    try:
        opened = 0
        for record in args.records:
            logger.info(f"Processing {record}")
            if generator.process_offline_data(record):
                opened += 1

        stats = generator.close()
    except SerializationError as e:
        logger.error(f"Feature generation failed: {e}")
        return 1

    if args.stats_file is not None:
        save_json(asdict(stats), args.stats_file)
        logger.info(f"Stats saved to: {args.stats_file}")

    if opened == 0:
        logger.error("No record could be read")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
