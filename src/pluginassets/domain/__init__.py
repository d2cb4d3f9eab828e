"""Domain objects for script registration."""

from .script import (
    ASSET_MANIFEST_SUFFIXES,
    SCRIPT_STATUSES,
    AssetData,
    AssetManifestError,
    ScriptFileNotFoundError,
    ScriptPaths,
    TranslationFileError,
)

__all__ = [
    "ASSET_MANIFEST_SUFFIXES",
    "SCRIPT_STATUSES",
    "AssetData",
    "AssetManifestError",
    "ScriptFileNotFoundError",
    "ScriptPaths",
    "TranslationFileError",
]
