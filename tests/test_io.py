"""Tests for oralcheck.io module - JSON and text I/O utilities."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from oralcheck.io import read_text, write_json


class TestWriteJson:
    def test_write_creates_parent_dirs(self, tmp_path: Path) -> None:
        json_file = tmp_path / "nested" / "report.json"
        write_json(json_file, {"questions": ["Why?"]})

        assert json.loads(json_file.read_text()) == {"questions": ["Why?"]}

    def test_write_unicode(self, tmp_path: Path) -> None:
        json_file = tmp_path / "report.json"
        write_json(json_file, {"transcript": "café"})

        assert "café" in json_file.read_text(encoding="utf-8")

    def test_overwrite_leaves_no_temp_files(self, tmp_path: Path) -> None:
        json_file = tmp_path / "report.json"
        write_json(json_file, {"a": 1})
        write_json(json_file, {"a": 2})

        assert json.loads(json_file.read_text()) == {"a": 2}
        assert list(tmp_path.glob("*.tmp")) == []

    def test_unserializable_data_keeps_old_file(self, tmp_path: Path) -> None:
        json_file = tmp_path / "report.json"
        write_json(json_file, {"a": 1})

        with pytest.raises(TypeError):
            write_json(json_file, {"a": object()})

        assert json.loads(json_file.read_text()) == {"a": 1}
        assert list(tmp_path.glob("*.tmp")) == []


class TestReadText:
    def test_read_text(self, tmp_path: Path) -> None:
        text_file = tmp_path / "transcript.txt"
        text_file.write_text("Hello world", encoding="utf-8")

        assert read_text(text_file) == "Hello world"

    def test_read_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            read_text(tmp_path / "missing.txt")
