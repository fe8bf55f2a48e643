"""Tests for settings persistence."""

import json

from dircompare.core.models import UnreadablePolicy
from dircompare.services.settings import (
    ApplicationSettings,
    ServerSettings,
    SettingsManager,
)


class TestDefaults:
    def test_missing_file_gives_defaults(self, tmp_path):
        manager = SettingsManager(tmp_path / "settings.json")

        settings = manager.settings

        assert settings.server.host == "127.0.0.1"
        assert settings.server.port == 3000
        assert settings.server.cors_origins == ["http://localhost:5173"]
        assert settings.comparison.unreadable_policy == UnreadablePolicy.EQUAL
        assert settings.comparison.parallel_workers == 1
        assert settings.report.show_unchanged is True
        assert settings.log_level == "INFO"

    def test_default_path_honours_xdg(self, tmp_path, monkeypatch):
        monkeypatch.setattr("os.name", "posix")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

        manager = SettingsManager()

        assert manager.settings_path == tmp_path / "dircompare" / "settings.json"


class TestRoundTrip:
    def test_save_and_load(self, tmp_path):
        path = tmp_path / "conf" / "settings.json"
        settings = ApplicationSettings(server=ServerSettings(port=8080))
        settings.comparison.unreadable_policy = UnreadablePolicy.MODIFIED
        settings.report.show_unchanged = False

        assert SettingsManager(path).save(settings)
        loaded = SettingsManager(path).load()

        assert loaded == settings

    def test_enums_stored_by_name(self, tmp_path):
        path = tmp_path / "settings.json"
        settings = ApplicationSettings()
        settings.comparison.unreadable_policy = UnreadablePolicy.MODIFIED

        SettingsManager(path).save(settings)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["comparison"]["unreadable_policy"] == "MODIFIED"

    def test_reset_writes_defaults(self, tmp_path):
        path = tmp_path / "settings.json"
        manager = SettingsManager(path)
        manager.save(ApplicationSettings(log_level="DEBUG"))

        manager.reset()

        assert SettingsManager(path).load() == ApplicationSettings()

    def test_save_without_settings(self, tmp_path):
        assert SettingsManager(tmp_path / "settings.json").save() is False


class TestMalformed:
    def test_invalid_json(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{not json", encoding="utf-8")

        assert SettingsManager(path).load() == ApplicationSettings()

    def test_non_object_root(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("[1, 2]", encoding="utf-8")

        assert SettingsManager(path).load() == ApplicationSettings()

    def test_bad_port(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"server": {"port": "eighty"}}), encoding="utf-8")

        assert SettingsManager(path).load() == ApplicationSettings()

    def test_partial_file_fills_defaults(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({
            "comparison": {"parallel_workers": 0, "unreadable_policy": "modified"},
            "log_level": "debug",
        }), encoding="utf-8")

        settings = SettingsManager(path).load()

        assert settings.comparison.parallel_workers == 1
        assert settings.comparison.unreadable_policy == UnreadablePolicy.MODIFIED
        assert settings.log_level == "DEBUG"
        assert settings.server == ServerSettings()
