"""Application bootstrap: logging, settings and the qasync-driven Qt window."""

from __future__ import annotations

import argparse
import asyncio
import json
import locale
import logging
import os
import sys
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Sequence, TextIO, cast, get_args, get_origin, get_type_hints

from .services.settings import Settings, SettingsStore
from .utils import logging as logging_utils

_LOGGER = logging.getLogger(__name__)
_ENV_PREFIX = "SNIPPETPICK_"
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
_FALSE_VALUES = {"0", "false", "no", "off", "disabled"}
_NONE_VALUES = {"", "none", "null"}


@dataclass(slots=True)
class QtRuntime:
    """Container returned by :func:`create_qapp`."""

    app: Any
    loop: asyncio.AbstractEventLoop


def configure_logging(debug: bool = False, *, force: bool = False) -> None:
    level = logging.DEBUG if debug else logging.INFO
    logging_utils.setup_logging(level, force=force)
    _LOGGER.debug("Logging configured (level=%s)", logging.getLevelName(level))
    logging_utils.route_qt_messages()


def configure_locale() -> str | None:
    """Adopt the user's collation rules; the catalog sort depends on them."""

    try:
        selected = locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as exc:
        _LOGGER.warning("Keeping the default collation, user locale unavailable: %s", exc)
        return None
    _LOGGER.debug("Collation locale: %s", selected)
    return selected


def load_settings(
    path: Path | None = None,
    *,
    store: SettingsStore | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Settings:
    """Load persisted settings or fall back to defaults."""

    active_store = store or SettingsStore(path)
    try:
        return active_store.load(overrides=overrides)
    except OSError as exc:
        _LOGGER.warning("Failed to load settings from %s: %s", active_store.path, exc)
        return Settings()


def create_qapp(settings: Settings) -> QtRuntime:
    """Create the QApplication and install a qasync event loop."""

    try:  # Local import so the CLI helpers stay importable without a display stack.
        from PySide6.QtWidgets import QApplication
    except ImportError as exc:  # pragma: no cover - depends on desktop stack
        raise RuntimeError("PySide6 must be installed to launch the snippetpick UI.") from exc

    try:
        from qasync import QEventLoop
    except ImportError as exc:  # pragma: no cover - depends on env setup
        raise RuntimeError("qasync is required to run the async Qt event loop.") from exc

    app = cast(Any, QApplication.instance() or QApplication(sys.argv))
    app.setApplicationName("snippetpick")
    app.setApplicationDisplayName("snippetpick")

    loop = QEventLoop(app)
    asyncio.set_event_loop(loop)
    app.aboutToQuit.connect(loop.stop)

    if (settings.theme or "").lower() == "dark":
        app.setStyle("Fusion")
    return QtRuntime(app=app, loop=loop)


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point invoked by the ``snippetpick`` console script."""

    args, passthrough = _parse_cli_args(argv)
    _rewrite_sys_argv(passthrough)

    debug = _env_flag("SNIPPETPICK_DEBUG", default=False)
    configure_logging(debug)
    configure_locale()

    settings_path = args.settings_path or os.environ.get("SNIPPETPICK_SETTINGS_PATH")
    resolved_path = Path(settings_path).expanduser() if settings_path else None
    store = SettingsStore(resolved_path)
    try:
        cli_overrides = _parse_overrides(args.overrides or [])
    except ValueError as exc:
        print(f"Invalid --set override: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc
    if args.folders:
        cli_overrides["snippet_folders"] = list(args.folders)

    settings = load_settings(resolved_path, store=store, overrides=cli_overrides or None)
    if args.dump_settings:
        _dump_settings(settings, store, overrides=cli_overrides)
        return

    if settings.debug_logging and not debug:
        configure_logging(True, force=True)

    runtime = create_qapp(settings)
    from .ui.main_window import MainWindow

    window = MainWindow(_settings_provider(store, cli_overrides), store=store)
    window.show()

    loop = runtime.loop
    try:
        loop.run_forever()
    except KeyboardInterrupt:  # pragma: no cover - manual shutdown path
        _LOGGER.info("Shutdown requested by user.")
    finally:
        _drain_event_loop(loop)
        loop.close()


def _settings_provider(store: SettingsStore, overrides: Mapping[str, Any]) -> Callable[[], Settings]:
    """Re-read settings for every command invocation so edits apply without a restart."""

    def _provide() -> Settings:
        return load_settings(store=store, overrides=overrides or None)

    return _provide


def _env_flag(name: str, *, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def _drain_event_loop(loop: asyncio.AbstractEventLoop) -> None:
    """Cancel whatever the session left running (preview loads, accept handlers)."""

    if loop.is_closed():
        return
    leftovers = [task for task in asyncio.all_tasks(loop) if not task.done()]
    for task in leftovers:
        task.cancel()
    if leftovers:
        _LOGGER.debug("Cancelled %d task(s) at shutdown", len(leftovers))
        loop.run_until_complete(asyncio.gather(*leftovers, return_exceptions=True))
    loop.run_until_complete(loop.shutdown_asyncgens())


def _parse_cli_args(argv: Sequence[str] | None) -> tuple[argparse.Namespace, list[str]]:
    parser = argparse.ArgumentParser(
        prog="snippetpick",
        description="Browse snippet folders and insert files into an editor tab.",
    )
    parser.add_argument(
        "--dump-settings",
        action="store_true",
        help="Print the effective settings payload and exit.",
    )
    parser.add_argument(
        "--settings-path",
        metavar="PATH",
        help="Override the default ~/.snippetpick/settings.json path.",
    )
    parser.add_argument(
        "--folder",
        dest="folders",
        metavar="PATH",
        action="append",
        default=[],
        help="Snippet folder to browse; replaces the configured folders (repeatable).",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        metavar="KEY=VALUE",
        action="append",
        default=[],
        help="Override persisted settings for this launch (repeatable).",
    )
    return parser.parse_known_args(argv)


def _rewrite_sys_argv(passthrough: Sequence[str]) -> None:
    program = sys.argv[0] if sys.argv else "snippetpick"
    sys.argv = [program, *passthrough]


def _parse_overrides(items: Sequence[str]) -> Dict[str, Any]:
    """Turn ``KEY=VALUE`` strings into typed settings values."""

    hints = get_type_hints(Settings)
    overrides: Dict[str, Any] = {}
    for entry in items:
        key, sep, raw = entry.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"expected KEY=VALUE, got {entry!r}")
        if key not in hints:
            raise ValueError(f"unknown setting {key!r}")
        overrides[key] = _convert_override(hints[key], raw.strip())
    return overrides


def _convert_override(hint: Any, raw: str) -> Any:
    members = [arg for arg in get_args(hint) if arg is not type(None)]
    if len(members) < len(get_args(hint)):
        # Optional field
        if raw.lower() in _NONE_VALUES:
            return None
        hint = members[0]
    if get_origin(hint) is list:
        folders = json.loads(raw)
        if not isinstance(folders, list) or not all(isinstance(item, str) for item in folders):
            raise ValueError(f"expected a JSON array of strings, got {raw!r}")
        return folders
    if hint is bool:
        return _parse_flag(raw)
    if hint in (int, float):
        return hint(raw)
    return raw


def _parse_flag(raw: str) -> bool:
    lowered = raw.lower()
    if lowered not in _TRUE_VALUES | _FALSE_VALUES:
        raise ValueError(f"expected a boolean, got {raw!r}")
    return lowered in _TRUE_VALUES


def _dump_settings(
    settings: Settings,
    store: SettingsStore,
    *,
    overrides: Mapping[str, Any],
    stream: TextIO | None = None,
) -> None:
    payload = {
        "settings": asdict(settings),
        "sources": {
            "file": str(store.path),
            "cli": sorted(overrides),
            "environment": sorted(name for name in os.environ if name.startswith(_ENV_PREFIX)),
        },
    }
    (stream or sys.stdout).write(json.dumps(payload, indent=2, sort_keys=True) + "\n")
