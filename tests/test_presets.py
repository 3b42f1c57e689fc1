#!/usr/bin/env python3
# ABOUTME: Tests for the preset stores.
# ABOUTME: Verifies round-trips, corrupt-file handling and atomic replacement.

import json
import os
import stat
import pytest
from unittest.mock import patch

from quadslator.errors import StorageReadError, StorageWriteError
from quadslator.models import SavedContext
from quadslator.presets import STORAGE_KEY, JsonFilePresetStore, MemoryPresetStore

PRESETS = [
    SavedContext("Formal", "Business email tone"),
    SavedContext("Casual", "Chat with friends"),
]


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "storage.json"


def test_load_absent_file(store_path):
    """Test that a missing file loads as an empty list without error."""
    presets, error = JsonFilePresetStore(store_path).load()
    assert presets == []
    assert error is None


def test_round_trip(store_path):
    """Test that save_all followed by load returns the same presets."""
    store = JsonFilePresetStore(store_path)
    store.save_all(PRESETS)

    presets, error = store.load()
    assert presets == PRESETS
    assert error is None

    with open(store_path, "r", encoding="utf-8") as f:
        data = json.load(f)
    assert data[STORAGE_KEY] == [
        {"name": "Formal", "value": "Business email tone"},
        {"name": "Casual", "value": "Chat with friends"},
    ]


def test_save_preserves_other_keys(store_path):
    """Test that other keys in the blob survive a save."""
    store_path.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")
    store = JsonFilePresetStore(store_path)

    presets, error = store.load()
    assert presets == [] and error is None

    store.save_all(PRESETS[:1])
    data = json.loads(store_path.read_text(encoding="utf-8"))
    assert data["theme"] == "dark"
    assert len(data[STORAGE_KEY]) == 1


@pytest.mark.parametrize("content", [
    "{not json",
    '["just", "a", "list"]',
    json.dumps({STORAGE_KEY: "Formal"}),
    json.dumps({STORAGE_KEY: [{"name": "Formal"}]}),
])
def test_load_corrupt_content(store_path, content):
    """Test that corrupt content yields an empty list and a StorageReadError."""
    store_path.write_text(content, encoding="utf-8")

    presets, error = JsonFilePresetStore(store_path).load()

    assert presets == []
    assert isinstance(error, StorageReadError)


def test_save_replaces_corrupt_file(store_path):
    """Test that saving over a corrupt file writes a valid blob."""
    store_path.write_text("{not json", encoding="utf-8")
    store = JsonFilePresetStore(store_path)

    store.save_all(PRESETS)

    presets, error = store.load()
    assert presets == PRESETS
    assert error is None


def test_save_creates_parent_directory(tmp_path):
    """Test that missing parent directories are created."""
    store = JsonFilePresetStore(tmp_path / "nested" / "dir" / "storage.json")
    store.save_all(PRESETS)
    assert store.load()[0] == PRESETS


def test_save_failure_raises_and_leaves_file_intact(store_path):
    """Test that a failed write raises StorageWriteError without partial output."""
    store = JsonFilePresetStore(store_path)
    store.save_all(PRESETS)

    with patch("quadslator.presets.os.replace", side_effect=OSError("disk full")):
        with pytest.raises(StorageWriteError, match="disk full"):
            store.save_all(PRESETS[:1])

    assert store.load()[0] == PRESETS
    leftovers = [name for name in os.listdir(store_path.parent) if name.endswith(".tmp")]
    assert leftovers == []


def test_memory_store_round_trip():
    """Test the in-memory store."""
    store = MemoryPresetStore()
    assert store.load() == ([], None)

    store.save_all(PRESETS)
    assert store.load() == (PRESETS, None)


def test_memory_store_corrupt_blob():
    """Test that a corrupt in-memory blob reports a StorageReadError."""
    presets, error = MemoryPresetStore("{oops").load()
    assert presets == []
    assert isinstance(error, StorageReadError)


@pytest.mark.skipif(os.name != "posix", reason="POSIX file modes")
def test_save_keeps_existing_file_mode(store_path):
    """Test that replacing the file keeps its permissions."""
    store = JsonFilePresetStore(store_path)
    store.save_all(PRESETS)
    os.chmod(store_path, 0o644)

    store.save_all(PRESETS[:1])

    assert stat.S_IMODE(os.stat(store_path).st_mode) == 0o644
    assert store.load()[0] == PRESETS[:1]
