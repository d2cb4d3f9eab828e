"""Declarative script catalog loaded from the plugin's ``scripts.yaml``."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List

import yaml
from jsonschema import Draft202012Validator

from pluginassets.ports.script_host import ScriptHost
from pluginassets.resources import load_schema
from pluginassets.settings import PluginSettings

from .enqueue import EnqueueScript


class ScriptNotDeclaredError(KeyError):
    pass


@dataclass
class ScriptEntry:
    handle: str
    name: str
    dependencies: List[str] = field(default_factory=list)
    version: str | None = None
    footer: bool = False
    translations: bool = False
    enqueue: bool = False
    localize_name: str | None = None
    localize_data: Dict[str, Any] | None = None

    @classmethod
    def from_mapping(cls, handle: str, payload: Dict[str, Any]) -> "ScriptEntry":
        localize = payload.get("localize") or {}
        return cls(
            handle=handle,
            name=payload.get("name", handle),
            dependencies=list(payload.get("dependencies", [])),
            version=payload.get("version"),
            footer=bool(payload.get("footer", False)),
            translations=bool(payload.get("translations", False)),
            enqueue=bool(payload.get("enqueue", False)),
            localize_name=localize.get("name"),
            localize_data=localize.get("data"),
        )

    def build(self, host: ScriptHost, settings: PluginSettings) -> EnqueueScript:
        script = EnqueueScript(self.handle, self.name, host=host, settings=settings)
        if self.dependencies:
            script.dependencies(self.dependencies)
        if self.version is not None:
            script.version(self.version)
        if self.footer:
            script.load_in_footer()
        if self.translations:
            script.register_translations()
        if self.localize_name and self.localize_data is not None:
            script.register_localize_data(self.localize_name, self.localize_data)
        return script


@lru_cache(maxsize=1)
def _validator() -> Draft202012Validator:
    return Draft202012Validator(load_schema("script_catalog.schema.json"))


class ScriptCatalog:
    def __init__(self, entries: Dict[str, ScriptEntry]) -> None:
        self._entries = entries

    @classmethod
    def load_from_file(cls, path: Path) -> "ScriptCatalog":
        if not path.exists():
            raise FileNotFoundError(f"Script catalog missing: {path}")
        data = yaml.safe_load(path.read_text("utf-8")) or {"scripts": {}}
        return cls.from_mapping(data, source=str(path))

    @classmethod
    def from_mapping(cls, data: Any, *, source: str = "<memory>") -> "ScriptCatalog":
        errors = sorted(_validator().iter_errors(data), key=lambda item: [str(part) for part in item.absolute_path])
        if errors:
            details = "; ".join(
                f"{'.'.join(str(part) for part in error.absolute_path) or '<root>'}: {error.message}" for error in errors
            )
            raise ValueError(f"Invalid script catalog {source}: {details}")
        scripts = data.get("scripts") or {}
        return cls({handle: ScriptEntry.from_mapping(handle, payload or {}) for handle, payload in scripts.items()})

    def get(self, handle: str) -> ScriptEntry:
        if handle not in self._entries:
            raise ScriptNotDeclaredError(f"Script {handle} not declared in catalog")
        return self._entries[handle]

    def list_handles(self) -> Iterable[str]:
        return sorted(self._entries)

    def build(self, host: ScriptHost, settings: PluginSettings) -> Dict[str, EnqueueScript]:
        return {handle: entry.build(host, settings) for handle, entry in self._entries.items()}

    def register_all(self, host: ScriptHost, settings: PluginSettings) -> Dict[str, EnqueueScript]:
        scripts = self.build(host, settings)
        for handle, script in scripts.items():
            if self._entries[handle].enqueue:
                script.enqueue()
            elif not host.script_is(handle, "registered"):
                script.register()
        return scripts


__all__ = ["ScriptCatalog", "ScriptEntry", "ScriptNotDeclaredError"]
