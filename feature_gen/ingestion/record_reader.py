"""Recorded message reader: channel demultiplexing and sample decoding."""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

import orjson
import polars as pl
from pydantic import ValidationError

from feature_gen.schemas.samples import ChassisSample, LocalizationSample
from feature_gen.utils.logging_utils import get_logger

logger = get_logger(__name__)

REQUIRED_COLUMNS = ("channel_name", "content")


def _read_ndjson(file_path: Path) -> pl.DataFrame:
    """Read NDJSON line by line, keeping each message body as its own JSON text.

    Nested ``content`` objects are re-encoded per line; a column-wise read
    would unify them into one struct type and pad absent fields with nulls.
    """
    rows = []
    columns = set()
    with open(file_path, "rb") as f:
        for line in f:
            if not line.strip():
                continue
            row = orjson.loads(line)
            if not isinstance(row, dict):
                raise ValueError(f"NDJSON line is not an object: {line[:80]!r}")

            content = row.get("content")
            timestamp = row.get("timestamp")
            if content is not None and not isinstance(content, str):
                content = orjson.dumps(content).decode("utf-8")
            columns.update(row)
            rows.append(
                {
                    "channel_name": row.get("channel_name"),
                    "content": content,
                    "timestamp": float(timestamp) if timestamp is not None else None,
                }
            )

    schema = {"channel_name": pl.Utf8, "content": pl.Utf8, "timestamp": pl.Float64}
    schema = {name: dtype for name, dtype in schema.items() if name in columns}
    return pl.DataFrame(
        [{name: r[name] for name in schema} for r in rows],
        schema=schema,
    )


@dataclass
class RecordMessage:
    """One recorded message, still encoded."""

    channel_name: str
    content: str
    timestamp: Optional[float] = None


class RecordReader:
    """Reads a record table (Parquet, CSV or NDJSON) in file order.

    Columns: ``channel_name``, ``content`` (JSON message body) and optional
    ``timestamp``.
    """

    def __init__(self, file_path: str | Path):
        """Open and validate a record file.

        Args:
            file_path: Path to record file
        """
        self.file_path = Path(file_path)
        self._df: Optional[pl.DataFrame] = None

        try:
            df = self._load(self.file_path)
        except (OSError, TypeError, ValueError, pl.exceptions.PolarsError) as e:
            logger.error(f"Fail to open {self.file_path}: {e}")
            return

        missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
        if missing:
            logger.error(f"Record {self.file_path} missing columns: {missing}")
            return

        self._df = df
        logger.info(f"Opened record {self.file_path} ({df.height:,} messages)")

    @staticmethod
    def _load(file_path: Path) -> pl.DataFrame:
        if not file_path.exists():
            raise FileNotFoundError(f"No such record: {file_path}")

        suffix = file_path.suffix.lower()
        if suffix == ".parquet":
            return pl.read_parquet(file_path)
        elif suffix == ".csv":
            return pl.read_csv(file_path, infer_schema_length=0)
        elif suffix in (".ndjson", ".jsonl"):
            return _read_ndjson(file_path)
        else:
            raise ValueError(f"Unsupported record format: {suffix}")

    @property
    def is_valid(self) -> bool:
        return self._df is not None

    @property
    def message_count(self) -> int:
        return self._df.height if self._df is not None else 0

    def read_messages(self) -> Iterator[RecordMessage]:
        """Yield messages in file order.

        Yields:
            RecordMessage per row
        """
        if self._df is None:
            return

        has_timestamp = "timestamp" in self._df.columns
        for row in self._df.iter_rows(named=True):
            content = row["content"]
            if not isinstance(content, str):
                # Parquet records may store the message as a struct column
                content = orjson.dumps(content).decode("utf-8") if content is not None else ""

            timestamp = row["timestamp"] if has_timestamp else None
            yield RecordMessage(
                channel_name=str(row["channel_name"]),
                content=content,
                timestamp=float(timestamp) if timestamp is not None else None,
            )


def decode_localization(content: str) -> Optional[LocalizationSample]:
    """Decode a localization message body; None if malformed."""
    try:
        return LocalizationSample.model_validate_json(content)
    except ValidationError as e:
        logger.debug(f"Malformed localization message: {e.error_count()} errors")
        return None


def decode_chassis(content: str) -> Optional[ChassisSample]:
    """Decode a chassis message body; None if malformed."""
    try:
        return ChassisSample.model_validate_json(content)
    except ValidationError as e:
        logger.debug(f"Malformed chassis message: {e.error_count()} errors")
        return None
