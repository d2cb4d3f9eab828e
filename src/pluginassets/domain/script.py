"""Value objects describing a plugin script and its build manifest."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from pluginassets.settings import SCRIPTS_SUBDIR

# JSON output of the dependency-extraction plugin wins over the PHP one.
ASSET_MANIFEST_SUFFIXES = (".asset.json", ".asset.php")
SCRIPT_STATUSES = ("registered", "enqueued", "done")


class ScriptFileNotFoundError(FileNotFoundError):
    """Raised when a script's built file is missing from the plugin tree."""


class AssetManifestError(ValueError):
    """Raised when a script's asset manifest exists but cannot be used."""


class TranslationFileError(ValueError):
    """Raised when a JSON translation file for a script cannot be parsed."""


@dataclass(frozen=True)
class ScriptPaths:
    """Locations of a built script, computed once from its name."""

    relative: str
    absolute: Path

    @classmethod
    def for_script(cls, plugin_dir_path: Path, script_name: str) -> "ScriptPaths":
        relative = f"{SCRIPTS_SUBDIR}/{script_name}.js"
        return cls(relative=relative, absolute=plugin_dir_path / relative)

    def manifest_candidates(self) -> list[Path]:
        stem = self.absolute.name[: -len(".js")] if self.absolute.name.endswith(".js") else self.absolute.name
        return [self.absolute.parent / f"{stem}{suffix}" for suffix in ASSET_MANIFEST_SUFFIXES]


@dataclass
class AssetData:
    dependencies: List[str] = field(default_factory=list)
    version: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"dependencies": list(self.dependencies), "version": self.version}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssetData":
        return cls(
            dependencies=[str(item) for item in data.get("dependencies", [])],
            version=str(data.get("version", "")),
        )
