"""User settings for the annotation engine.

Settings are stored as JSON in an OS-appropriate config directory. Missing,
unreadable or invalid values fall back to the defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .constants import AnnotationConstants as C

logger = logging.getLogger(__name__)


@dataclass
class AnnotationSettings:
    highlight_color: str = C.DEFAULT_HIGHLIGHT_COLOR
    plain_color: str = C.DEFAULT_PLAIN_COLOR
    feedback_key: str = C.DEFAULT_FEEDBACK_KEY
    correction_key: str = C.DEFAULT_CORRECTION_KEY


def validate_setting(key: str, value: Any) -> bool:
    """Check a single setting value.

    Colours must be non-empty strings; shortcut keys a single character.
    """
    if key in ('highlight_color', 'plain_color'):
        return isinstance(value, str) and bool(value.strip())
    if key in ('feedback_key', 'correction_key'):
        return isinstance(value, str) and len(value) == 1 and not value.isspace()
    return False


class SettingsStore:
    """Loads and saves :class:`AnnotationSettings`."""

    def __init__(self, config_dir: Optional[Path] = None):
        self._config_dir = Path(config_dir or platformdirs.user_config_dir("feedbackmark"))
        self._settings_file = self._config_dir / "settings.json"

    @property
    def path(self) -> Path:
        return self._settings_file

    def _read(self) -> Dict[str, Any]:
        if not self._settings_file.exists():
            return {}
        try:
            with open(self._settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load settings from {self._settings_file}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning("Settings file has invalid format (not a dict), ignoring")
            return {}
        return data

    def load(self) -> AnnotationSettings:
        data = self._read()
        values = {}
        for f in fields(AnnotationSettings):
            if f.name not in data:
                continue
            if validate_setting(f.name, data[f.name]):
                values[f.name] = data[f.name]
            else:
                logger.warning(f"Ignoring invalid value for {f.name}: {data[f.name]!r}")
        settings = AnnotationSettings(**values)
        if settings.feedback_key == settings.correction_key:
            logger.warning("Feedback and correction keys collide; using defaults")
            settings.feedback_key = C.DEFAULT_FEEDBACK_KEY
            settings.correction_key = C.DEFAULT_CORRECTION_KEY
        return settings

    def save(self, settings: AnnotationSettings) -> bool:
        """Write settings atomically. Returns False on failure."""
        temp_file = self._settings_file.with_suffix('.tmp')
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(asdict(settings), f, indent=2)
            temp_file.replace(self._settings_file)
            return True
        except OSError as e:
            logger.warning(f"Could not save settings to {self._settings_file}: {e}")
            try:
                if temp_file.exists():
                    temp_file.unlink()
            except OSError:
                pass
            return False
