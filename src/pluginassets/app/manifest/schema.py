"""Schema helpers for script asset manifests."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Iterator, Tuple

from jsonschema import Draft202012Validator

from pluginassets.resources import load_schema

_SCHEMA_RESOURCE = "asset_manifest.schema.json"


@lru_cache(maxsize=1)
def _validator() -> Draft202012Validator:
    return Draft202012Validator(load_schema(_SCHEMA_RESOURCE))


def iter_schema_errors(manifest: Any) -> Iterator[Tuple[str, str]]:
    """Yield (path, message) pairs for schema issues in the manifest."""
    validator = _validator()
    for error in sorted(validator.iter_errors(manifest), key=lambda item: [str(part) for part in item.absolute_path]):
        path = ".".join(str(item) for item in error.absolute_path)
        yield path, error.message


__all__ = ["iter_schema_errors"]
