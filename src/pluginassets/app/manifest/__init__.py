"""Asset manifest helpers."""

from .loader import find_manifest, iter_script_files, load_manifest, manifest_errors, read_manifest
from .php_asset import PhpAssetSyntaxError, parse_php_asset
from .schema import iter_schema_errors

__all__ = [
    "PhpAssetSyntaxError",
    "find_manifest",
    "iter_schema_errors",
    "iter_script_files",
    "load_manifest",
    "manifest_errors",
    "parse_php_asset",
    "read_manifest",
]
