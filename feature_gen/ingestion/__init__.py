"""Ingestion of recorded messages into typed samples."""

from .record_reader import (
    RecordMessage,
    RecordReader,
    decode_localization,
    decode_chassis,
)

__all__ = [
    "RecordMessage",
    "RecordReader",
    "decode_localization",
    "decode_chassis",
]
