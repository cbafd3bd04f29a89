import json

import pytest

from rps_arena.utils.config import DEFAULT_CONFIG, load_config, merge_config
from rps_arena.utils.errors import StorageError
from rps_arena.game.storage import JsonFileStore, KeyValueStore, MemoryStore


def test_memory_store():
    store = MemoryStore()
    assert store.get("missing") is None
    store.set("key", "value")
    assert store.get("key") == "value"


def test_json_file_store_persists(tmp_path):
    path = tmp_path / "store.json"
    store = JsonFileStore(str(path))
    assert store.get("achievements") is None

    store.set("achievements", "[]")
    store.set("achievementStats", '{"totalRounds": 1}')
    again = JsonFileStore(str(path))
    assert again.get("achievements") == "[]"
    assert json.loads(again.get("achievementStats")) == {"totalRounds": 1}


def test_json_file_store_corrupt_file(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("{broken", encoding="utf-8")
    store = JsonFileStore(str(path))
    with pytest.raises(StorageError):
        store.get("achievements")

    store.set("achievements", "[]")
    assert store.get("achievements") == "[]"


def test_json_file_store_write_failure(tmp_path):
    store = JsonFileStore(str(tmp_path))
    with pytest.raises(StorageError):
        store.set("achievements", "[]")


def test_non_string_values_come_back_as_json(tmp_path):
    path = tmp_path / "store.json"
    path.write_text(json.dumps({"achievementStats": {"totalRounds": 3}}), encoding="utf-8")
    assert json.loads(JsonFileStore(str(path)).get("achievementStats")) == {"totalRounds": 3}


def test_missing_config_gives_defaults(tmp_path):
    cfg = load_config(str(tmp_path / "nope.json"))
    assert cfg == DEFAULT_CONFIG
    assert cfg is not DEFAULT_CONFIG


def test_config_is_merged_over_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"game": {"difficulty": "hard"}, "extra": 1}), encoding="utf-8")
    cfg = load_config(str(path))
    assert cfg["game"]["difficulty"] == "hard"
    assert cfg["game"]["mode"] == DEFAULT_CONFIG["game"]["mode"]
    assert cfg["stabilizer"] == DEFAULT_CONFIG["stabilizer"]
    assert cfg["extra"] == 1


@pytest.mark.parametrize("content", ["{oops", "[1, 2, 3]"])
def test_bad_config_gives_defaults(tmp_path, content):
    path = tmp_path / "config.json"
    path.write_text(content, encoding="utf-8")
    assert load_config(str(path)) == DEFAULT_CONFIG


def test_merge_does_not_touch_base():
    merged = merge_config(DEFAULT_CONFIG, {"timing": {"countdown_start": 1}})
    assert merged["timing"]["countdown_start"] == 1
    assert DEFAULT_CONFIG["timing"]["countdown_start"] == 3


def test_key_value_store_is_abstract():
    with pytest.raises(TypeError):
        KeyValueStore()
