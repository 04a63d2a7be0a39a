import json
import logging

import pytest

from clippy.utils.json_loader import SettingsError, read_json_dict, truthy_env


def test_read_valid_object(tmp_path):
    path = tmp_path / "shortcuts.json"
    path.write_text(json.dumps({"quit": "Ctrl+Q"}), encoding="utf-8")
    assert read_json_dict(path, strict=True) == {"quit": "Ctrl+Q"}


def test_missing_file_lenient_logs_warning(tmp_path, caplog):
    with caplog.at_level(logging.WARNING):
        data = read_json_dict(tmp_path / "nope.json", strict=False,
                              logger=logging.getLogger("clippy.test"))
    assert data is None
    assert "not found" in caplog.text


def test_missing_file_strict_raises(tmp_path):
    with pytest.raises(SettingsError, match="not found"):
        read_json_dict(tmp_path / "nope.json", strict=True)


def test_non_object_is_rejected(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")
    assert read_json_dict(path, strict=False) is None
    with pytest.raises(SettingsError, match="JSON object"):
        read_json_dict(path, strict=True)


def test_broken_json(tmp_path, caplog):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with caplog.at_level(logging.WARNING):
        assert read_json_dict(path, strict=False) is None
    assert "Cannot read" in caplog.text
    with pytest.raises(SettingsError) as info:
        read_json_dict(path, strict=True)
    assert isinstance(info.value.__cause__, json.JSONDecodeError)


@pytest.mark.parametrize("value, expected", [("1", True), ("Yes", True), ("0", False), ("", False)])
def test_truthy_env(monkeypatch, value, expected):
    monkeypatch.setenv("CLIPPY_TEST_FLAG", value)
    assert truthy_env("CLIPPY_TEST_FLAG") is expected
