"""Locate and read the asset manifest that sits next to a built script."""

from __future__ import annotations

import json
from json import JSONDecodeError
from pathlib import Path
from typing import Any, Iterable

from pluginassets.domain import AssetData, AssetManifestError, ScriptPaths

from .php_asset import PhpAssetSyntaxError, parse_php_asset
from .schema import iter_schema_errors


def find_manifest(paths: ScriptPaths) -> Path | None:
    for candidate in paths.manifest_candidates():
        if candidate.exists():
            return candidate
    return None


def read_manifest(path: Path) -> dict[str, Any]:
    """Parse a manifest file without validating its shape."""

    raw = path.read_text(encoding="utf-8-sig")
    if path.name.endswith(".php"):
        try:
            manifest = parse_php_asset(raw)
        except PhpAssetSyntaxError as exc:
            raise AssetManifestError(f"{path}: {exc}") from exc
    else:
        try:
            manifest = json.loads(raw)
        except JSONDecodeError as exc:
            raise AssetManifestError(f"{path}: {exc.msg} (line {exc.lineno} column {exc.colno})") from exc
    if not isinstance(manifest, dict):
        raise AssetManifestError(f"{path}: manifest root must be a mapping")
    return manifest


def _schema_errors(path: Path, manifest: dict[str, Any]) -> list[str]:
    return [
        f"{path}: schema violation at {location or '<root>'}: {message}"
        for location, message in iter_schema_errors(manifest)
    ]


def manifest_errors(path: Path) -> list[str]:
    try:
        manifest = read_manifest(path)
    except AssetManifestError as exc:
        return [str(exc)]
    return _schema_errors(path, manifest)


def load_manifest(path: Path) -> AssetData:
    manifest = read_manifest(path)
    errors = _schema_errors(path, manifest)
    if errors:
        raise AssetManifestError("; ".join(errors))
    return AssetData.from_dict(manifest)


def iter_script_files(scripts_dir: Path) -> Iterable[Path]:
    if not scripts_dir.is_dir():
        return []
    return sorted(path for path in scripts_dir.glob("*.js") if path.is_file())


__all__ = ["find_manifest", "iter_script_files", "load_manifest", "manifest_errors", "read_manifest"]
