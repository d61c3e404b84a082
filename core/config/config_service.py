"""Typed, layered configuration loader with precedence handling."""
from __future__ import annotations

import os
import configparser
from dataclasses import dataclass, fields
from pathlib import Path
from threading import RLock
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from core.exceptions import ConfigurationError

# --------------------------------------------------------------------------- #
#  Paths & default definitions
# --------------------------------------------------------------------------- #

def _find_project_root() -> Path:
    here = Path(__file__).resolve()
    for parent in here.parents:
        if (parent / "core").is_dir():
            return parent
    return here.parent

PROJECT_ROOT = _find_project_root()
CONFIG_DIR = Path(__file__).resolve().parent
DEFAULTS_INI = CONFIG_DIR / "defaults.ini"

ENV_PREFIX = "DOCSIGN_"

SCRIPT_FONT_URL = (
    "https://raw.githubusercontent.com/google/fonts/main/ofl/sacramento/Sacramento-Regular.ttf"
)


_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "Layout": {
        # A4 in points
        "page_width": "595.28",
        "page_height": "841.89",
        "margin": "50",
        "line_height": "14",
        "title_size": "24",
        "heading_size": "16",
        "body_size": "12",
        "heading_gap": "5",
        "section_gap": "20",
        "footer_height": "100",
        "regular_font": "Times-Roman",
        "bold_font": "Times-Bold",
    },
    "Overlay": {
        "render_scale": "1.5",
        "default_size": "40",
        "min_size": "20",
        "hit_margin": "10",
        "handle_size": "20",
    },
    "Export": {
        "font_url": SCRIPT_FONT_URL,
        "font_timeout": "5.0",
        "fallback_font": "Times-Italic",
        "output_dir": (Path.home() / "Downloads").as_posix(),
    },
    "Logging": {
        "level": "INFO",
        "format": "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    },
}


# --------------------------------------------------------------------------- #
#  Datamodels
# --------------------------------------------------------------------------- #

@dataclass
class LayoutConfig:
    page_width: float = 595.28
    page_height: float = 841.89
    margin: float = 50.0
    line_height: float = 14.0
    title_size: float = 24.0
    heading_size: float = 16.0
    body_size: float = 12.0
    heading_gap: float = 5.0
    section_gap: float = 20.0
    footer_height: float = 100.0
    regular_font: str = "Times-Roman"
    bold_font: str = "Times-Bold"


@dataclass
class OverlayConfig:
    render_scale: float = 1.5
    default_size: float = 40.0
    min_size: float = 20.0
    hit_margin: float = 10.0
    handle_size: float = 20.0


@dataclass
class ExportConfig:
    font_url: str = SCRIPT_FONT_URL
    font_timeout: float = 5.0
    fallback_font: str = "Times-Italic"
    output_dir: Path = Path("out")


@dataclass
class LoggingConfig:
    level: str = "INFO"
    format: str = "%(levelname)s %(name)s: %(message)s"


@dataclass
class AppConfig:
    layout: LayoutConfig
    overlay: OverlayConfig
    export: ExportConfig
    logging: LoggingConfig


# --------------------------------------------------------------------------- #
#  Helpers
# --------------------------------------------------------------------------- #

def _cp_to_dict(cp: configparser.ConfigParser) -> Dict[str, Dict[str, Any]]:
    data: Dict[str, Dict[str, Any]] = {}
    for section in cp.sections():
        data[section] = {k: v for k, v in cp.items(section, raw=True)}
    return data


def _read_ini(path: Path) -> Dict[str, Dict[str, Any]]:
    cp = configparser.ConfigParser(interpolation=None)
    cp.read(path, encoding="utf-8")
    return _cp_to_dict(cp)


def _apply(target: Dict[str, Dict[str, Any]], source: Mapping[str, Mapping[str, Any]],
           layer: str, origin: str,
           sources: Dict[Tuple[str, str], Dict[str, str]]) -> None:
    for section, items in source.items():
        sec = target.setdefault(section, {})
        for key, value in items.items():
            sec[key] = value
            sources[(section, key)] = {"layer": layer, "source": origin}


def _cast(value: Any, typ: Any) -> Any:
    # dataclass field types are strings under postponed evaluation
    name = typ if isinstance(typ, str) else getattr(typ, "__name__", str(typ))
    if name == "Path":
        return Path(str(value)).expanduser()
    if name == "bool":
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in {"1", "true", "yes", "on"}
    if name == "int":
        return int(value)
    if name == "float":
        return float(value)
    return str(value)


def _build_dataclass(cls: type, section: str, data: Dict[str, Any]) -> Any:
    kwargs = {}
    for field in fields(cls):
        val = data.get(field.name, field.default)
        try:
            kwargs[field.name] = _cast(val, field.type)
        except ValueError as e:
            raise ConfigurationError(f"[{section}] {field.name}: invalid value {val!r}") from e
    return cls(**kwargs)


def _env_overlays(environ: Mapping[str, str]) -> Dict[str, Dict[str, Any]]:
    result: Dict[str, Dict[str, Any]] = {}
    for env_key, value in environ.items():
        if not env_key.startswith(ENV_PREFIX):
            continue
        remainder = env_key[len(ENV_PREFIX):]
        parts = remainder.split("__", 1)
        if len(parts) != 2:
            continue
        section, key = parts
        section = section.title()
        key = key.lower()
        result.setdefault(section, {})[key] = value
    return result


def _user_config_path() -> Path:
    if os.name == "nt":
        appdata = os.environ.get("APPDATA") or (Path.home() / "AppData" / "Roaming")
        return Path(appdata) / "DocSign" / "config.ini"
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "docsign" / "config.ini"


# --------------------------------------------------------------------------- #
#  ConfigService
# --------------------------------------------------------------------------- #


class ConfigService:
    """Facade merging layered configuration with type safety."""

    def __init__(self, *, defaults_ini: Optional[Path] = None,
                 user_ini: Optional[Path] = None,
                 environ: Optional[Mapping[str, str]] = None) -> None:
        self._lock = RLock()
        self._defaults_ini = defaults_ini or DEFAULTS_INI
        self._user_ini = user_ini
        self._environ = environ
        self.reload()

    # ------------------------------------------------------------------ #
    def reload(self) -> None:
        with self._lock:
            merged: Dict[str, Dict[str, Any]] = {}
            sources: Dict[Tuple[str, str], Dict[str, str]] = {}

            # Layer 0: embedded defaults
            _apply(merged, _DEFAULTS, "code", "embedded", sources)

            # Layer 1: defaults.ini
            if self._defaults_ini.exists():
                _apply(merged, _read_ini(self._defaults_ini), "defaults.ini",
                       str(self._defaults_ini), sources)

            # Layer 2: environment variables
            environ = os.environ if self._environ is None else self._environ
            _apply(merged, _env_overlays(environ), "env", "os.environ", sources)

            # Layer 3: user overrides
            user_ini = self._user_ini or _user_config_path()
            if user_ini.exists():
                _apply(merged, _read_ini(user_ini), "user", str(user_ini), sources)

            self._merged = merged
            self._sources = sources

            self.layout = _build_dataclass(LayoutConfig, "Layout", merged.get("Layout", {}))
            self.overlay = _build_dataclass(OverlayConfig, "Overlay", merged.get("Overlay", {}))
            self.export = _build_dataclass(ExportConfig, "Export", merged.get("Export", {}))
            self.logging = _build_dataclass(LoggingConfig, "Logging", merged.get("Logging", {}))

    # ------------------------------------------------------------------ #
    def get(self, section: str, key: str, *, cast: Callable[[Any], Any] | type = str) -> Any:
        val = self._merged.get(section, {}).get(key)
        if val is None:
            return None
        if isinstance(cast, type):
            return _cast(val, cast)
        return cast(val)

    def meta_source(self, section: str, key: str) -> Dict[str, str] | None:
        return self._sources.get((section, key))

    def snapshot(self) -> AppConfig:
        with self._lock:
            return AppConfig(layout=self.layout, overlay=self.overlay,
                             export=self.export, logging=self.logging)


# Global singleton
config_service = ConfigService()
