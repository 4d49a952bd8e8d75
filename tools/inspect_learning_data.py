"""Summarize learning data files written by the feature generator.

Loads every ``learning_data.<index>.*`` file in a directory, checks the
per-file frame counts, and prints trajectory label statistics.

Usage:
    python tools/inspect_learning_data.py --data-dir data/learning_data
"""

import argparse
import re
import sys
from pathlib import Path
from typing import List

import pandas as pd

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from feature_gen.utils.io_utils import learning_data_to_dataframe, load_learning_data
from feature_gen.utils.logging_utils import setup_logger

logger = setup_logger("inspect_learning_data", log_level="INFO")

FILE_PATTERN = re.compile(r"learning_data\.(\d+)\.(bin|json)$")


def find_learning_data_files(data_dir: Path) -> List[Path]:
    """List learning data files ordered by file index."""
    files = [p for p in data_dir.iterdir() if FILE_PATTERN.search(p.name)]
    return sorted(files, key=lambda p: int(FILE_PATTERN.search(p.name).group(1)))


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Summarize learning data files")
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=Path("data/learning_data"),
        help="Directory with learning data files (default: data/learning_data)",
    )
    args = parser.parse_args()

    if not args.data_dir.is_dir():
        logger.error(f"Data directory not found: {args.data_dir}")
        return 1

    files = find_learning_data_files(args.data_dir)
    if not files:
        logger.error(f"No learning data files in {args.data_dir}")
        return 1

    frames = []
    per_file = []
    for file_path in files:
        data = load_learning_data(file_path)
        per_file.append({"file": file_path.name, "frames": len(data)})
        df = learning_data_to_dataframe(data)
        df["file"] = file_path.name
        frames.append(df)

    df_files = pd.DataFrame(per_file)
    df_points = pd.concat(frames, ignore_index=True)

    logger.info("=" * 60)
    logger.info(f"Learning data: {args.data_dir}")
    logger.info("=" * 60)
    logger.info(f"  Files: {len(df_files)}")
    logger.info(f"  Frames: {df_files['frames'].sum():,}")

    # Every file but the last holds a full batch
    if len(df_files) > 1 and df_files["frames"].iloc[:-1].nunique() > 1:
        logger.warning("  Uneven batch sizes before the last file:")
        for _, row in df_files.iterrows():
            logger.warning(f"    {row['file']}: {row['frames']} frames")

    if df_points.empty:
        logger.info("  No trajectory points")
        return 0

    points_per_frame = df_points.groupby(["file", "frame_num"]).size()
    logger.info(f"  Trajectory points: {len(df_points):,}")
    logger.info(f"  Points per frame: {points_per_frame.min()}-{points_per_frame.max()}")
    logger.info(f"  Speed v (m/s): mean {df_points['v'].mean():.2f}, max {df_points['v'].max():.2f}")
    logger.info(f"  Accel a (m/s²): mean {df_points['a'].mean():.2f}, max {df_points['a'].max():.2f}")
    logger.info("=" * 60)

    return 0


if __name__ == "__main__":
    sys.exit(main())
