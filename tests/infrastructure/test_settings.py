"""Tests for the settings schema and manager."""

import json

import pytest

from cropstudio.errors import SettingsLoadError, SettingsValidationError
from cropstudio.settings import DEFAULT_SETTINGS, SettingsManager, merge_with_defaults


def test_merge_with_defaults_keeps_missing_keys():
    merged = merge_with_defaults({"editor": {"min_crop_size": 40}})
    assert merged["editor"]["min_crop_size"] == 40
    assert merged["editor"]["max_suggested_pct"] == DEFAULT_SETTINGS["editor"]["max_suggested_pct"]
    assert merged["storage"]["database_path"] is None


def test_load_creates_file_with_defaults(tmp_path, qapp):
    path = tmp_path / "settings.json"
    manager = SettingsManager(path=path)
    manager.load()
    assert path.exists()
    stored = json.loads(path.read_text(encoding="utf-8"))
    assert stored["schema"] == "cropstudio/settings@1"
    assert manager.get("editor.default_aspect") == "1:1"
    assert manager.get("editor.missing", "fallback") == "fallback"


def test_set_persists_and_notifies(tmp_path, qapp):
    path = tmp_path / "settings.json"
    manager = SettingsManager(path=path)
    manager.load()
    changes = []
    manager.settingsChanged.connect(lambda key, value: changes.append((key, value)))

    manager.set("editor.max_suggested_pct", 52)
    assert manager.get("editor.max_suggested_pct") == 52
    assert changes == [("editor.max_suggested_pct", 52)]
    stored = json.loads(path.read_text(encoding="utf-8"))
    assert stored["editor"]["max_suggested_pct"] == 52


def test_set_out_of_range_is_rejected(tmp_path, qapp):
    manager = SettingsManager(path=tmp_path / "settings.json")
    manager.load()
    with pytest.raises(SettingsValidationError):
        manager.set("editor.max_suggested_pct", 70)
    assert manager.get("editor.max_suggested_pct") == DEFAULT_SETTINGS["editor"]["max_suggested_pct"]


def test_set_path_value_is_stored_as_string(tmp_path, qapp):
    manager = SettingsManager(path=tmp_path / "settings.json")
    manager.load()
    manager.set("storage.database_path", tmp_path / "crops.db")
    assert manager.get("storage.database_path") == str(tmp_path / "crops.db")


def test_invalid_file_content(tmp_path, qapp):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(SettingsLoadError):
        SettingsManager(path=path).load()

    path.write_text(json.dumps({"editor": {"default_aspect": "16:9"}}), encoding="utf-8")
    with pytest.raises(SettingsValidationError):
        SettingsManager(path=path).load()
