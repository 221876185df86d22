from __future__ import annotations

import json
import os
from typing import Any

from .formats import TARGET_FORMATS, normalize_token
from .logger import get_logger

_logger = get_logger("settings")

_RGB_CHANNELS = 3


class SettingsManager:
    def __init__(self, settings_path: str):
        self.settings_path = settings_path
        self._settings: dict[str, Any] = {}
        self.load()

    DEFAULTS: dict[str, Any] = {
        "allowed_formats": list(TARGET_FORMATS),
        "jpeg_background": [0, 0, 0],
    }

    def load(self) -> None:
        try:
            if os.path.exists(self.settings_path):
                with open(self.settings_path, encoding="utf-8") as f:
                    data = json.load(f)
                    if isinstance(data, dict):
                        self._settings = data
                        _logger.debug("settings loaded: %s", self.settings_path)
                        return
        except (OSError, ValueError) as e:
            _logger.warning("settings load failed: %s", e)
        self._settings = {}

    def save(self) -> None:
        parent = os.path.dirname(self.settings_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(self.settings_path, "w", encoding="utf-8") as f:
            json.dump(self._settings, f, ensure_ascii=False, indent=2)
        _logger.debug("settings saved: %s", self.settings_path)

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._settings:
            return self._settings[key]
        if default is not None:
            return default
        return self.DEFAULTS.get(key)

    def has(self, key: str) -> bool:
        return key in self._settings

    def set(self, key: str, value: Any) -> None:
        self._settings[key] = value
        self.save()

    @property
    def data(self) -> dict[str, Any]:
        return self._settings

    @property
    def allowed_formats(self) -> set[str]:
        """Configured target tokens, restricted to formats that have an encoder."""
        val = self.get("allowed_formats")
        if not isinstance(val, (list, tuple)):
            _logger.warning("saved allowed_formats invalid: %r", val)
            val = self.DEFAULTS["allowed_formats"]
        tokens = {normalize_token(str(t)) for t in val}
        return {t for t in tokens if t in TARGET_FORMATS}

    @property
    def jpeg_background(self) -> tuple[int, int, int]:
        val = self.get("jpeg_background")
        if (
            isinstance(val, (list, tuple))
            and len(val) == _RGB_CHANNELS
            and all(isinstance(c, int) and 0 <= c <= 255 for c in val)
        ):
            return (val[0], val[1], val[2])
        _logger.warning("saved jpeg_background invalid: %r", val)
        return (0, 0, 0)
