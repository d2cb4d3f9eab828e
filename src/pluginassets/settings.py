"""Runtime settings for a plugin's script assets."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from pluginassets import __version__

CONFIG_FILENAME = "pluginassets.yaml"
DEFAULT_TEXT_DOMAIN = "distributor"
SCRIPTS_SUBDIR = "dist/js"
LANG_SUBDIR = "lang"
CATALOG_FILENAME = "scripts.yaml"

_CONFIG_KEYS = {"url", "text_domain", "version"}


@dataclass(frozen=True)
class PluginSettings:
    plugin_dir_path: Path
    plugin_dir_url: str
    text_domain: str
    log_dir: Path
    version: str | None = __version__

    @property
    def scripts_dir(self) -> Path:
        return self.plugin_dir_path / SCRIPTS_SUBDIR

    @property
    def lang_dir(self) -> Path:
        return self.plugin_dir_path / LANG_SUBDIR

    @property
    def catalog_file(self) -> Path:
        return self.plugin_dir_path / CATALOG_FILENAME

    @property
    def base_url(self) -> str:
        """Plugin URL with exactly one trailing slash."""
        return self.plugin_dir_url.rstrip("/") + "/"


def _default_home_dir() -> Path:
    return Path.home() / ".pluginassets"


def _read_config_file(root: Path) -> dict[str, Any]:
    path = root / CONFIG_FILENAME
    if not path.exists():
        return {}
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid {CONFIG_FILENAME} structure: root is not a mapping")
    unknown = sorted(set(data) - _CONFIG_KEYS)
    if unknown:
        raise ValueError(f"Unknown keys in {path}: {', '.join(unknown)}")
    return data


def load_settings(root: Path | None = None) -> PluginSettings:
    if root is None:
        root = Path(os.environ.get("PLUGINASSETS_ROOT") or os.getcwd())
    root = root.expanduser().resolve()
    home = Path(os.environ.get("PLUGINASSETS_HOME") or _default_home_dir())
    settings = PluginSettings(
        plugin_dir_path=root,
        plugin_dir_url=os.environ.get("PLUGINASSETS_URL", "/"),
        text_domain=os.environ.get("PLUGINASSETS_TEXT_DOMAIN", DEFAULT_TEXT_DOMAIN),
        log_dir=home / "logs",
        version=os.environ.get("PLUGINASSETS_VERSION", __version__),
    )
    overrides = _read_config_file(root)
    if "url" in overrides:
        settings = replace(settings, plugin_dir_url=str(overrides["url"]))
    if "text_domain" in overrides:
        settings = replace(settings, text_domain=str(overrides["text_domain"]))
    if "version" in overrides:
        value = overrides["version"]
        if value is not None and not isinstance(value, str):
            raise ValueError(f"version in {root / CONFIG_FILENAME} must be a quoted string, got {value!r}")
        settings = replace(settings, version=value)
    return settings


SETTINGS = load_settings()
