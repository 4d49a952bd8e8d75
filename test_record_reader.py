"""Tests for record reading and sample decoding."""

import json
import sys
from pathlib import Path

import polars as pl

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from feature_gen.ingestion.record_reader import RecordReader, decode_chassis, decode_localization
from feature_gen.schemas.samples import GearPosition


def test_reads_messages_in_file_order(tmp_path):
    record = tmp_path / "record.parquet"
    pl.DataFrame(
        {
            "timestamp": [0.2, 0.1, 0.3],
            "channel_name": ["b", "a", "c"],
            "content": ["{}", "{}", "{}"],
        }
    ).write_parquet(record)

    reader = RecordReader(record)
    assert reader.is_valid
    assert reader.message_count == 3
    assert [m.channel_name for m in reader.read_messages()] == ["b", "a", "c"]
    assert [m.timestamp for m in reader.read_messages()] == [0.2, 0.1, 0.3]


def test_timestamp_column_optional(tmp_path):
    record = tmp_path / "record.csv"
    pl.DataFrame({"channel_name": ["a"], "content": ['{"x": 1}']}).write_csv(record)

    message = next(RecordReader(record).read_messages())
    assert message.timestamp is None
    assert json.loads(message.content) == {"x": 1}


def test_invalid_records(tmp_path):
    assert not RecordReader(tmp_path / "missing.parquet").is_valid

    unsupported = tmp_path / "record.txt"
    unsupported.write_text("channel_name,content\n")
    assert not RecordReader(unsupported).is_valid

    no_content = tmp_path / "record.parquet"
    pl.DataFrame({"channel_name": ["a"]}).write_parquet(no_content)
    reader = RecordReader(no_content)
    assert not reader.is_valid
    assert list(reader.read_messages()) == []


def test_decode_localization_nested_layout():
    content = json.dumps(
        {
            "header": {"timestamp_sec": 12.5},
            "pose": {
                "position": {"x": 1.0, "y": 2.0, "z": 0.5},
                "heading": 1.57,
                "linear_velocity": {"x": 3.0, "y": 4.0},
            },
        }
    )
    sample = decode_localization(content)

    assert sample.timestamp_sec == 12.5
    assert sample.position.y == 2.0
    assert sample.heading == 1.57
    assert sample.linear_velocity.y == 4.0
    assert sample.angular_velocity.z == 0.0


def test_decode_localization_flat_layout():
    sample = decode_localization(json.dumps({"position": {"x": 7.0}, "heading": 0.2}))
    assert sample.position.x == 7.0
    assert sample.timestamp_sec is None


def test_decode_malformed_returns_none():
    assert decode_localization("{not json") is None
    assert decode_localization(json.dumps({"position": {"x": "far"}})) is None
    assert decode_chassis("") is None
    assert decode_chassis(json.dumps({"brake_percentage": -3})) is None
    assert decode_chassis(json.dumps({"gear_location": "GEAR_WARP"})) is None


def test_decode_chassis():
    sample = decode_chassis(
        json.dumps(
            {
                "header": {"timestamp_sec": 3.0},
                "speed_mps": 8.5,
                "throttle_percentage": 20,
                "brake_percentage": 0,
                "steering_percentage": -45.0,
                "gear_location": "GEAR_REVERSE",
            }
        )
    )
    assert sample.timestamp_sec == 3.0
    assert sample.speed_mps == 8.5
    assert sample.steering_percentage == -45.0
    assert sample.gear_location == GearPosition.REVERSE


def test_decode_non_object_header_returns_none():
    assert decode_localization(json.dumps({"header": 5, "heading": 0.1})) is None
    assert decode_chassis(json.dumps({"header": [1], "speed_mps": 2.0})) is None
    assert decode_chassis(json.dumps({"header": "now"})) is None


def test_ndjson_nested_content_keeps_per_message_fields(tmp_path):
    record = tmp_path / "record.ndjson"
    lines = [
        {
            "channel_name": "/apollo/localization/pose",
            "content": {"pose": {"position": {"x": 1.0, "y": 2.0}, "heading": 0.3}},
        },
        {
            "channel_name": "/apollo/canbus/chassis",
            "content": {"speed_mps": 4.0, "gear_location": "GEAR_DRIVE"},
        },
        {
            "channel_name": "/apollo/localization/pose",
            "content": {
                "pose": {
                    "position": {"x": 1.5, "y": 2.0},
                    "heading": 0.3,
                    "linear_velocity": {"x": 5.0, "y": 0.0},
                }
            },
        },
    ]
    record.write_text("\n".join(json.dumps(line) for line in lines) + "\n\n")

    messages = list(RecordReader(record).read_messages())
    assert len(messages) == 3
    # Absent fields stay absent rather than becoming nulls
    assert json.loads(messages[0].content) == lines[0]["content"]
    assert json.loads(messages[1].content) == lines[1]["content"]

    first = decode_localization(messages[0].content)
    assert first is not None
    assert first.linear_velocity.x == 0.0
    assert decode_chassis(messages[1].content).gear_location == GearPosition.DRIVE
    assert decode_localization(messages[2].content).linear_velocity.x == 5.0


def test_ndjson_string_content_and_bad_lines(tmp_path):
    record = tmp_path / "record.jsonl"
    record.write_text(
        json.dumps({"channel_name": "a", "content": '{"x": 1}', "timestamp": 1}) + "\n"
    )
    message = next(RecordReader(record).read_messages())
    assert message.content == '{"x": 1}'
    assert message.timestamp == 1.0

    broken = tmp_path / "broken.ndjson"
    broken.write_text('{"channel_name": "a", "content": "{}"}\n{oops\n')
    assert not RecordReader(broken).is_valid
