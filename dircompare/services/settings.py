"""
Application settings management.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from dircompare.core.models import UnreadablePolicy


@dataclass
class ServerSettings:
    """Settings for the HTTP viewer."""
    host: str = "127.0.0.1"
    port: int = 3000
    cors_origins: list[str] = field(default_factory=lambda: [
        "http://localhost:5173",
    ])


@dataclass
class ComparisonSettings:
    """Settings for scanning and comparison."""
    unreadable_policy: UnreadablePolicy = UnreadablePolicy.EQUAL
    parallel_workers: int = 1


@dataclass
class ReportSettings:
    """Settings for terminal and static reports."""
    static_output: str = "dircompare-report.html"
    show_unchanged: bool = True


@dataclass
class ApplicationSettings:
    """Main application settings container."""
    server: ServerSettings = field(default_factory=ServerSettings)
    comparison: ComparisonSettings = field(default_factory=ComparisonSettings)
    report: ReportSettings = field(default_factory=ReportSettings)
    log_level: str = "INFO"


class SettingsManager:
    """Manager for loading/saving application settings."""

    def __init__(self, settings_path: Optional[Path | str] = None):
        self.settings_path = Path(settings_path) if settings_path else self._get_default_path()
        self._settings: Optional[ApplicationSettings] = None

    @staticmethod
    def _get_default_path() -> Path:
        """Get the default settings file path."""
        if os.name == 'nt':
            # Windows
            app_data = os.environ.get('APPDATA', os.path.expanduser('~'))
            return Path(app_data) / 'DirCompare' / 'settings.json'
        else:
            # Linux/Mac
            config_home = os.environ.get('XDG_CONFIG_HOME',
                                         os.path.expanduser('~/.config'))
            return Path(config_home) / 'dircompare' / 'settings.json'

    @property
    def settings(self) -> ApplicationSettings:
        """Get current settings, loading from disk if needed."""
        if self._settings is None:
            self._settings = self.load()
        return self._settings

    def load(self) -> ApplicationSettings:
        """Load settings from disk; defaults if missing or unreadable."""
        if not self.settings_path.exists():
            return ApplicationSettings()

        try:
            with open(self.settings_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("settings root must be an object")
            return self._from_dict(data)
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logging.warning(f"SettingsManager - Could not load {self.settings_path}, using defaults: {e}")
            return ApplicationSettings()

    def save(self, settings: Optional[ApplicationSettings] = None) -> bool:
        """Save settings to disk."""
        settings = settings or self._settings
        if settings is None:
            return False

        try:
            self.settings_path.parent.mkdir(parents=True, exist_ok=True)

            with open(self.settings_path, 'w', encoding='utf-8') as f:
                json.dump(self._to_dict(settings), f, indent=2)

            self._settings = settings
            return True

        except OSError as e:
            logging.error(f"SettingsManager - Could not save {self.settings_path}: {e}")
            return False

    def reset(self) -> ApplicationSettings:
        """Reset to default settings."""
        self._settings = ApplicationSettings()
        self.save()
        return self._settings

    def _to_dict(self, settings: ApplicationSettings) -> dict:
        """Convert settings to dictionary for JSON serialization."""
        def convert(obj: Any) -> Any:
            if isinstance(obj, Enum):
                return obj.name
            elif isinstance(obj, list):
                return [convert(item) for item in obj]
            elif isinstance(obj, dict):
                return {k: convert(v) for k, v in obj.items()}
            else:
                return obj

        return convert(asdict(settings))

    def _from_dict(self, data: dict) -> ApplicationSettings:
        """Convert dictionary back to settings objects."""
        server_data = data.get('server', {})
        comparison_data = data.get('comparison', {})
        report_data = data.get('report', {})

        server = ServerSettings(
            host=server_data.get('host', ServerSettings().host),
            port=int(server_data.get('port', ServerSettings().port)),
            cors_origins=list(server_data.get('cors_origins', ServerSettings().cors_origins)),
        )

        comparison = ComparisonSettings(
            unreadable_policy=UnreadablePolicy.from_string(
                comparison_data.get('unreadable_policy', 'EQUAL')),
            parallel_workers=max(1, int(comparison_data.get('parallel_workers', 1))),
        )

        report = ReportSettings(
            static_output=report_data.get('static_output', ReportSettings().static_output),
            show_unchanged=bool(report_data.get('show_unchanged', True)),
        )

        return ApplicationSettings(
            server=server,
            comparison=comparison,
            report=report,
            log_level=str(data.get('log_level', 'INFO')).upper(),
        )
