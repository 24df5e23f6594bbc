import json

from src.utils.config_manager import ConfigManager


def test_creates_file_with_defaults(tmp_path):
    path = tmp_path / "config" / "config.json"
    config = ConfigManager(path)

    assert path.exists()
    assert config.get_config("STORAGE.DEVICE_FILE") == "devices.txt"
    assert config.get_config("DEVICE_OPTIONS.LOW_BATTERY_THRESHOLD") == 20
    assert json.loads(path.read_text(encoding="utf-8"))["LOGGING"]["LEVEL"] == "INFO"


def test_user_values_merge_over_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps({"STORAGE": {"DEVICE_FILE": "home.txt"}}), encoding="utf-8"
    )
    config = ConfigManager(path)

    assert config.get_config("STORAGE.DEVICE_FILE") == "home.txt"
    assert config.get_config("STORAGE.ENCODING") == "utf-8"


def test_broken_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    config = ConfigManager(path)
    assert config.get_config("LOGGING.BACKUP_COUNT") == 30


def test_missing_path_returns_default(config):
    assert config.get_config("NO.SUCH.KEY", "fallback") == "fallback"


def test_update_config_persists(tmp_path):
    path = tmp_path / "config.json"
    config = ConfigManager(path)

    assert config.update_config("DEVICE_OPTIONS.LOW_BATTERY_THRESHOLD", 35)

    assert ConfigManager(path).get_config("DEVICE_OPTIONS.LOW_BATTERY_THRESHOLD") == 35


def test_defaults_are_not_shared_between_instances(tmp_path):
    first = ConfigManager(tmp_path / "a.json")
    first.update_config("STORAGE.DEVICE_FILE", "changed.txt")
    second = ConfigManager(tmp_path / "b.json")
    assert second.get_config("STORAGE.DEVICE_FILE") == "devices.txt"
