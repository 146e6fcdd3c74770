"""Settings dataclass and JSON persistence with environment overrides."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping

from ..snippets.preview import PreviewConfig
from ..snippets.session import SessionConfig

__all__ = ["Settings", "SettingsStore", "DEFAULT_PAGE_SIZE"]

LOGGER = logging.getLogger(__name__)
_SETTINGS_DIR = Path.home() / ".snippetpick"
_DEFAULT_SETTINGS_PATH = _SETTINGS_DIR / "settings.json"
_SETTINGS_VERSION = 1
DEFAULT_PAGE_SIZE = 50
_ENV_OVERRIDES: Mapping[str, str] = {
    "SNIPPETPICK_THEME": "theme",
}
_BOOL_ENV_OVERRIDES: Mapping[str, str] = {
    "SNIPPETPICK_DEBUG_LOGGING": "debug_logging",
}
_INT_ENV_OVERRIDES: Mapping[str, str] = {
    "SNIPPETPICK_PAGE_SIZE": "page_size",
    "SNIPPETPICK_PREVIEW_MAX_LINES": "preview_max_lines",
    "SNIPPETPICK_PREVIEW_MAX_CHARS": "preview_max_chars",
}
_FLOAT_ENV_OVERRIDES: Mapping[str, str] = {
    "SNIPPETPICK_PREVIEW_DEBOUNCE_MS": "preview_debounce_ms",
}
_FOLDERS_ENV = "SNIPPETPICK_SNIPPET_FOLDERS"
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}


@dataclass(slots=True)
class Settings:
    """User-configurable settings persisted between launches."""

    snippet_folders: list[str] = field(default_factory=list)
    page_size: int = DEFAULT_PAGE_SIZE
    preview_max_lines: int = 30
    preview_max_chars: int = 1_000
    preview_debounce_ms: float = 100.0
    debug_logging: bool = False
    theme: str = "default"
    font_family: str = "JetBrains Mono"
    font_size: int = 12
    window_geometry: str | None = None

    def session_config(self) -> SessionConfig:
        """Return the explicit configuration handed to a picker session."""

        return SessionConfig(
            page_size=max(1, int(self.page_size)),
            preview=PreviewConfig(
                max_lines=max(1, int(self.preview_max_lines)),
                max_chars=max(1, int(self.preview_max_chars)),
                debounce_seconds=max(0.0, float(self.preview_debounce_ms)) / 1000.0,
            ),
        )


class SettingsStore:
    """Persistence adapter for :class:`Settings`."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or _DEFAULT_SETTINGS_PATH

    @property
    def path(self) -> Path:
        """Return the resolved path backing this store."""

        return self._path

    def load(self, *, overrides: Mapping[str, Any] | None = None) -> Settings:
        """Load settings from disk, then apply CLI and environment overrides."""

        settings = self._load_persisted()
        if overrides:
            settings = self._apply_overrides(settings, overrides, source="CLI")
        return _clamp_limits(self._apply_env_overrides(settings))

    def update(self, **changes: Any) -> Path:
        """Persist ``changes`` on top of the stored values, ignoring runtime overrides."""

        return self.save(replace(self._load_persisted(), **changes))

    def save(self, settings: Settings) -> Path:
        """Persist settings to disk via a temporary file swap."""

        payload = asdict(settings)
        payload["version"] = _SETTINGS_VERSION
        body = json.dumps(payload, indent=2, sort_keys=True)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(".tmp")
        tmp_path.write_text(body, encoding="utf-8")
        tmp_path.replace(self._path)
        LOGGER.debug("Settings saved to %s", self._path)
        return self._path

    def _load_persisted(self) -> Settings:
        payload = self._read_payload()
        if not payload:
            return Settings()
        data = _filter_fields(payload)
        folders = data.get("snippet_folders")
        if folders is not None and not _is_string_list(folders):
            LOGGER.warning("Ignoring malformed snippet_folders in %s: %r", self._path, folders)
            data.pop("snippet_folders")
        try:
            settings = Settings(**data)
        except TypeError as exc:
            LOGGER.warning("Settings payload contained unexpected data: %s", exc)
            return Settings()
        LOGGER.debug(
            "Settings loaded from %s: %d snippet folder(s)",
            self._path,
            len(settings.snippet_folders),
        )
        return settings

    def _read_payload(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as exc:
            LOGGER.warning("Settings file %s is not valid JSON: %s", self._path, exc)
            return {}
        if not isinstance(payload, dict):
            LOGGER.warning("Settings file %s does not contain an object", self._path)
            return {}
        return payload

    def _apply_overrides(
        self,
        settings: Settings,
        overrides: Mapping[str, Any],
        *,
        source: str = "runtime",
    ) -> Settings:
        allowed = {item.name for item in fields(Settings)}
        filtered = {key: value for key, value in overrides.items() if key in allowed and value is not None}
        if filtered:
            LOGGER.debug("Applying %s settings overrides: %s", source, sorted(filtered))
            settings = replace(settings, **filtered)
        return settings

    def _apply_env_overrides(self, settings: Settings) -> Settings:
        overrides: Dict[str, Any] = {}
        folders = os.environ.get(_FOLDERS_ENV)
        if folders is not None:
            overrides["snippet_folders"] = [part for part in folders.split(os.pathsep) if part.strip()]
        for env_name, field_name in _ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value
        for env_name, field_name in _BOOL_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is not None:
                overrides[field_name] = value.strip().lower() in _TRUE_VALUES
        for env_name, field_name in _INT_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is None:
                continue
            try:
                overrides[field_name] = int(value, 10)
            except ValueError:
                LOGGER.warning("Environment override %s=%s is not a valid integer", env_name, value)
        for env_name, field_name in _FLOAT_ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value is None:
                continue
            try:
                overrides[field_name] = float(value)
            except ValueError:
                LOGGER.warning("Environment override %s=%s is not a valid float", env_name, value)
        if overrides:
            settings = self._apply_overrides(settings, overrides, source="environment")
        return settings


def _filter_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    allowed = {item.name for item in fields(Settings)}
    return {key: value for key, value in payload.items() if key in allowed}


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def _clamp_limits(settings: Settings) -> Settings:
    return replace(
        settings,
        page_size=max(1, settings.page_size),
        preview_max_lines=max(1, settings.preview_max_lines),
        preview_max_chars=max(1, settings.preview_max_chars),
        preview_debounce_ms=max(0.0, settings.preview_debounce_ms),
    )
