"""Utility modules for feature generation."""

from .logging_utils import setup_logger, get_logger
from .io_utils import (
    ensure_dir,
    atomic_write_bytes,
    encode_json,
    save_json,
    load_json,
    save_parquet,
    save_learning_data,
    load_learning_data,
    learning_data_to_polars,
    learning_data_to_dataframe,
)

__all__ = [
    # Logging
    "setup_logger",
    "get_logger",
    # IO
    "ensure_dir",
    "atomic_write_bytes",
    "encode_json",
    "save_json",
    "load_json",
    "save_parquet",
    "save_learning_data",
    "load_learning_data",
    "learning_data_to_polars",
    "learning_data_to_dataframe",
]
