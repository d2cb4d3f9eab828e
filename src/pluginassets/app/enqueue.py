"""Fluent registration of a plugin's built JavaScript file with the script host.

The builder handles:
  - script dependencies, merged ahead of the ones declared by the build
    manifest (``<name>.asset.json`` / ``<name>.asset.php``);
  - the cache-busting version, taken from the manifest, the configured
    version or the file modification time, in that order;
  - translation registration and localized data for the script.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence

from pluginassets.domain import AssetData, ScriptFileNotFoundError, ScriptPaths
from pluginassets.ports.script_host import ScriptHost
from pluginassets.settings import SETTINGS, PluginSettings
from pluginassets.utils.telemetry import record_event

from .manifest import find_manifest, load_manifest

# Versions that fall through to the file modification time, as empty and "0" do in PHP.
_UNSET_VERSIONS = (None, "", "0")


class EnqueueScript:
    def __init__(
        self,
        script_handle: str,
        script_name: str,
        *,
        host: ScriptHost,
        settings: PluginSettings = SETTINGS,
    ) -> None:
        self._settings = settings
        self._host = host
        self._script_handle = script_handle
        self._paths = ScriptPaths.for_script(settings.plugin_dir_path, script_name)
        self._script_dependencies: List[str] = []
        self._version: str | None = settings.version
        self._load_in_footer = False
        self._register_translations = False
        self._localize_param_name: str | None = None
        self._localize_param_data: Dict[str, Any] | None = None

        if not self._paths.absolute.exists():
            raise ScriptFileNotFoundError(f"Script file not found: {self._paths.absolute}")

    @property
    def script_handle(self) -> str:
        return self._script_handle

    @property
    def relative_script_path(self) -> str:
        return self._paths.relative

    @property
    def absolute_script_path(self) -> Path:
        return self._paths.absolute

    @property
    def script_url(self) -> str:
        return self._settings.base_url + self._paths.relative

    def get_script_handle(self) -> str:
        return self._script_handle

    def load_in_footer(self) -> "EnqueueScript":
        self._load_in_footer = True
        return self

    def dependencies(self, script_dependencies: Sequence[str]) -> "EnqueueScript":
        self._script_dependencies = list(script_dependencies)
        return self

    def version(self, version: str | None) -> "EnqueueScript":
        """Pin the version used when the script has no asset manifest."""
        self._version = version
        return self

    def register_translations(self) -> "EnqueueScript":
        """Must be called before ``register``/``enqueue`` to take effect."""
        self._register_translations = True
        return self

    def register_localize_data(self, js_variable_name: str, data: Mapping[str, Any]) -> "EnqueueScript":
        """Must be called before ``register``/``enqueue`` to take effect."""
        self._localize_param_name = js_variable_name
        self._localize_param_data = dict(data)
        return self

    def register(self) -> "EnqueueScript":
        asset = self.get_asset_file_data()
        self._version = asset.version

        added = self._host.register_script(
            self._script_handle,
            self.script_url,
            asset.dependencies,
            asset.version,
            self._load_in_footer,
        )

        if self._register_translations:
            self._host.set_script_translations(
                self._script_handle,
                self._settings.text_domain,
                self._settings.lang_dir,
            )

        if self._localize_param_data and self._localize_param_name:
            self._host.localize_script(
                self._script_handle,
                self._localize_param_name,
                self._localize_param_data,
            )

        record_event(
            self._settings,
            "script.register",
            {
                "handle": self._script_handle,
                "src": self.script_url,
                "dependencies": asset.dependencies,
                "version": asset.version,
                "footer": self._load_in_footer,
                "translations": self._register_translations,
                "localized": bool(self._localize_param_data),
            },
            status="registered" if added else "duplicate",
        )
        return self

    def enqueue(self) -> "EnqueueScript":
        registered_now = False
        if not self._host.script_is(self._script_handle, "registered"):
            self.register()
            registered_now = True
        self._host.enqueue_script(self._script_handle)
        record_event(
            self._settings,
            "script.enqueue",
            {"handle": self._script_handle, "registered": registered_now},
            status="enqueued",
        )
        return self

    def get_asset_file_data(self) -> AssetData:
        manifest_path = find_manifest(self._paths)
        if manifest_path is not None:
            asset = load_manifest(manifest_path)
        else:
            asset = AssetData(dependencies=[], version=self._fallback_version())

        if self._script_dependencies:
            asset.dependencies = [*self._script_dependencies, *asset.dependencies]
        return asset

    def get_version(self) -> str:
        return self.get_asset_file_data().version

    def _fallback_version(self) -> str:
        if self._version in _UNSET_VERSIONS:
            return self._file_mtime_version()
        return self._version

    def _file_mtime_version(self) -> str:
        return str(int(self._paths.absolute.stat().st_mtime))

    def __repr__(self) -> str:
        return f"EnqueueScript(handle={self._script_handle!r}, path={self._paths.relative!r})"


__all__ = ["EnqueueScript"]
