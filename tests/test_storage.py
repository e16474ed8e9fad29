"""Tests for storing and loading observer results."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import yamling

from observers import FileStorageConfig, Observer, ResultStore, StorageError, load, save
from observers.storage import dump_results, load_results


if TYPE_CHECKING:
    from pathlib import Path


def test_yaml_round_trip_keeps_order(observer: Observer, tmp_path: Path):
    observer.update(2).update(3)
    path = save(observer, tmp_path / "run" / "results.yml")

    assert path.exists()
    restored = load(tmp_path / "run" / "results.yml")
    assert restored.identifiers == ("sq", "inc")
    assert restored.results() == {"sq": [4, 9], "inc": [3, 4]}
    assert all(entry.is_detached for entry in restored.values())


def test_json_file_is_plain_mapping(observer: Observer, tmp_path: Path):
    observer.update(2)
    save(observer, tmp_path / "results.json")

    text = (tmp_path / "results.json").read_text(encoding="utf-8")
    data = yamling.load(text, mode="json")
    assert data == {"sq": [4], "inc": [3]}
    assert list(data) == ["sq", "inc"]
    assert load(tmp_path / "results.json").results("sq") == [4]


def test_dumped_yaml_keeps_registration_order(observer: Observer):
    observer.update(2)
    text = dump_results(observer, "yaml")
    assert text.index("sq") < text.index("inc")
    assert load_results(text).identifiers == ("sq", "inc")


def test_explicit_format_overrides_suffix(observer: Observer, tmp_path: Path):
    observer.update(1)
    save(observer, tmp_path / "results.txt", format="json")
    assert load(tmp_path / "results.txt", format="json").results("inc") == [2]


def test_unknown_suffix_is_rejected(observer: Observer, tmp_path: Path):
    with pytest.raises(StorageError):
        save(observer, tmp_path / "results.bin")


def test_missing_file(tmp_path: Path):
    with pytest.raises(StorageError, match="not found"):
        load(tmp_path / "missing.yml")


def test_invalid_content_is_rejected():
    with pytest.raises(StorageError):
        load_results("- just\n- a list\n")
    with pytest.raises(StorageError):
        load_results("a: 1\n")
    with pytest.raises(StorageError):
        load_results("{not: valid", format="json")


def test_unserializable_results_are_reported():
    observer = Observer([("obj", lambda: object())])
    observer.update()
    with pytest.raises(StorageError):
        dump_results(observer, "json")


def test_result_store(observer: Observer, tmp_path: Path):
    config = FileStorageConfig(path=str(tmp_path / "store.yaml"))
    store = ResultStore(config)
    assert not store.exists()

    observer.update(5)
    store.save(observer)
    assert store.exists()
    assert store.load().to_table() == [("sq", [25]), ("inc", [6])]


if __name__ == "__main__":
    pytest.main([__file__, "-vv"])
