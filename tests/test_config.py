import pytest

from icokit import config


def test_parse_kinds():
    assert config.parse_kinds("png,bmp") == ("png", "bmp")
    assert config.parse_kinds(" BMP ") == ("bmp",)
    with pytest.raises(ValueError):
        config.parse_kinds("png,gif")
    with pytest.raises(ValueError):
        config.parse_kinds(" , ")


def test_settings_round_trip(tmp_path):
    path = tmp_path / "state" / "settings.json"
    config.save_settings({"last_directory": "/icons", "appearance_mode": "dark"}, path)

    settings = config.load_settings(path)

    assert settings == {"last_directory": "/icons", "appearance_mode": "dark"}


def test_invalid_settings_fall_back_to_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json")
    assert config.load_settings(path) == config.DEFAULT_SETTINGS

    path.write_text('{"unknown": 1, "appearance_mode": "light"}')
    assert config.load_settings(path)["appearance_mode"] == "light"
    assert "unknown" not in config.load_settings(path)


def test_missing_settings(tmp_path):
    assert config.load_settings(tmp_path / "none.json") == config.DEFAULT_SETTINGS
