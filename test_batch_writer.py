"""Tests for batch flushing and output file rotation."""

import sys
from pathlib import Path

import orjson
import polars as pl
import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from feature_gen.generator.batch_writer import BatchWriter
from feature_gen.generator.errors import SerializationError
from feature_gen.schemas.frames import (
    ChassisFeature,
    LearningDataFrame,
    PathPoint,
    TrajectoryPoint,
)
from feature_gen.utils.io_utils import load_learning_data


def make_frame(frame_num: int) -> LearningDataFrame:
    return LearningDataFrame(
        frame_num=frame_num,
        chassis_feature=ChassisFeature(speed_mps=float(frame_num)),
        label_trajectory_points=[
            TrajectoryPoint(path_point=PathPoint(x=float(frame_num), y=0.0), v=1.0, a=0.0)
        ],
    )


def test_flushes_when_batch_full(tmp_path):
    writer = BatchWriter(tmp_path, frames_per_file=2)

    assert writer.on_frame_closed(make_frame(0)) is None
    assert writer.pending == 1
    assert not any(tmp_path.iterdir())

    written = writer.on_frame_closed(make_frame(1))
    assert written == tmp_path / "learning_data.0.bin"
    assert written.exists()
    assert writer.pending == 0
    assert writer.file_index == 1
    assert writer.total_frames == 2


def test_file_rotation_and_partial_final_batch(tmp_path):
    writer = BatchWriter(tmp_path, frames_per_file=3)
    for i in range(8):
        writer.on_frame_closed(make_frame(i))

    total = writer.finalize()

    assert total == 8
    assert [p.name for p in writer.written_files] == [
        "learning_data.0.bin",
        "learning_data.1.bin",
        "learning_data.2.bin",
    ]
    counts = [len(load_learning_data(p)) for p in writer.written_files]
    assert counts == [3, 3, 2]

    frame_nums = [
        f.frame_num for p in writer.written_files for f in load_learning_data(p).learning_data
    ]
    assert frame_nums == list(range(8))


def test_finalize_without_remainder_writes_nothing_more(tmp_path):
    writer = BatchWriter(tmp_path, frames_per_file=2)
    for i in range(4):
        writer.on_frame_closed(make_frame(i))

    assert writer.finalize() == 4
    assert len(writer.written_files) == 2
    assert sorted(p.name for p in tmp_path.iterdir()) == [
        "learning_data.0.bin",
        "learning_data.1.bin",
    ]


def test_finalize_empty_batch_is_noop(tmp_path):
    output_dir = tmp_path / "out"
    writer = BatchWriter(output_dir, frames_per_file=2)

    assert writer.finalize() == 0
    assert writer.flush() is None
    assert not output_dir.exists()


def test_binary_and_text_forms(tmp_path):
    binary = BatchWriter(tmp_path / "bin", frames_per_file=1, binary=True)
    text = BatchWriter(tmp_path / "txt", frames_per_file=1, binary=False)

    bin_path = binary.on_frame_closed(make_frame(7))
    txt_path = text.on_frame_closed(make_frame(7))

    assert bin_path.name == "learning_data.0.bin"
    assert txt_path.name == "learning_data.0.json"
    assert txt_path.read_text().startswith("{\n")
    assert load_learning_data(bin_path) == load_learning_data(txt_path)

    payload = bin_path.read_bytes()
    assert payload[:4] == b"PAR1"
    with pytest.raises(orjson.JSONDecodeError):
        orjson.loads(payload)
    assert pl.read_parquet(bin_path)["frame_num"].to_list() == [7]


def test_serialization_failure_keeps_batch(tmp_path, monkeypatch):
    writer = BatchWriter(tmp_path, frames_per_file=2)
    writer.on_frame_closed(make_frame(0))

    def fail_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("feature_gen.utils.io_utils.os.replace", fail_replace)

    with pytest.raises(SerializationError) as exc_info:
        writer.on_frame_closed(make_frame(1))

    assert exc_info.value.frame_count == 2
    assert exc_info.value.file_path == tmp_path / "learning_data.0.bin"
    # No target and no leftover temporary file
    assert list(tmp_path.iterdir()) == []
    assert writer.pending == 2
    assert writer.file_index == 0
    assert writer.total_frames == 0

    monkeypatch.undo()
    assert writer.finalize() == 2
    assert len(load_learning_data(tmp_path / "learning_data.0.bin")) == 2


def test_backlog_after_failed_flush_is_chunked(tmp_path, monkeypatch):
    writer = BatchWriter(tmp_path, frames_per_file=2)

    def fail_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("feature_gen.utils.io_utils.os.replace", fail_replace)
    writer.on_frame_closed(make_frame(0))
    with pytest.raises(SerializationError):
        writer.on_frame_closed(make_frame(1))
    with pytest.raises(SerializationError) as exc_info:
        writer.on_frame_closed(make_frame(2))
    # Only one file's worth is attempted at a time
    assert exc_info.value.frame_count == 2
    assert writer.pending == 3

    monkeypatch.undo()
    written = writer.on_frame_closed(make_frame(3))

    assert written == tmp_path / "learning_data.1.bin"
    assert writer.pending == 0
    assert writer.finalize() == 4
    counts = [len(load_learning_data(p)) for p in writer.written_files]
    assert counts == [2, 2]


def test_finalize_writes_backlog_in_chunks(tmp_path, monkeypatch):
    writer = BatchWriter(tmp_path, frames_per_file=3, binary=False)
    writer.on_frame_closed(make_frame(0))
    writer.on_frame_closed(make_frame(1))

    def fail_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("feature_gen.utils.io_utils.os.replace", fail_replace)
    for i in range(2, 5):
        with pytest.raises(SerializationError):
            writer.on_frame_closed(make_frame(i))
    assert writer.pending == 5

    monkeypatch.undo()
    assert writer.finalize() == 5
    assert [p.name for p in writer.written_files] == [
        "learning_data.0.json",
        "learning_data.1.json",
    ]
    counts = [len(load_learning_data(p)) for p in writer.written_files]
    assert counts == [3, 2]


def test_unwritable_output_dir(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    writer = BatchWriter(blocker, frames_per_file=1)

    with pytest.raises(SerializationError):
        writer.on_frame_closed(make_frame(0))


def test_invalid_frames_per_file(tmp_path):
    with pytest.raises(ValueError):
        BatchWriter(tmp_path, frames_per_file=0)
