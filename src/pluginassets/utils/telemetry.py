"""Lightweight telemetry events (opt-out)."""

from __future__ import annotations

import json
import os
import time
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable, Iterator

from jsonschema import Draft202012Validator

from pluginassets.resources import load_schema
from pluginassets.settings import PluginSettings

LEVELS = {"info", "warn", "error"}
LOG_FILENAME = "telemetry.jsonl"

_DISABLE_VALUES = {"0", "false", "no", "off"}


def telemetry_enabled() -> bool:
    value = os.getenv("PLUGINASSETS_TELEMETRY", "1").lower()
    return value not in _DISABLE_VALUES


def log_path(settings: PluginSettings) -> Path:
    return settings.log_dir / LOG_FILENAME


def record_event(settings: PluginSettings, event: str, payload: dict[str, Any] | None = None, **extra: Any) -> None:
    record_structured_event(settings, event, payload=payload, **extra)


def record_structured_event(
    settings: PluginSettings,
    event: str,
    *,
    payload: dict[str, Any] | None = None,
    level: str = "info",
    status: str | None = None,
    component: str | None = None,
    duration_ms: float | None = None,
) -> None:
    if not telemetry_enabled():
        return
    record: dict[str, Any] = {
        "ts": time.time(),
        "event": event,
        "payload": payload or {},
        "level": level,
    }
    if status:
        record["status"] = status
    if component:
        record["component"] = component
    if duration_ms is not None:
        record["durationMs"] = duration_ms
    _validate_record(record)
    _validator().validate(record)
    path = log_path(settings)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as fh:
        fh.write(json.dumps(record, ensure_ascii=False) + "\n")


def iter_events(settings: PluginSettings) -> Iterator[dict[str, Any]]:
    path = log_path(settings)
    if not path.exists():
        return
    with path.open("r", encoding="utf-8") as fh:
        for line in fh:
            line = line.strip()
            if not line:
                continue
            try:
                yield json.loads(line)
            except json.JSONDecodeError:
                continue


def summarize(events: Iterable[dict[str, Any]]) -> dict[str, Any]:
    total = 0
    by_event: dict[str, int] = {}
    by_status: dict[str, int] = {}
    for evt in events:
        name = evt.get("event", "unknown")
        by_event[name] = by_event.get(name, 0) + 1
        status = evt.get("status", "unknown")
        by_status[status] = by_status.get(status, 0) + 1
        total += 1
    return {"total": total, "by_event": by_event, "by_status": by_status}


def clear(settings: PluginSettings) -> None:
    path = log_path(settings)
    if path.exists():
        path.unlink()


def _validate_record(record: dict[str, Any]) -> None:
    if not isinstance(record.get("event"), str) or not record["event"].strip():
        raise ValueError("Telemetry event must have non-empty string 'event'")
    if not isinstance(record.get("payload"), dict):
        raise ValueError("Telemetry payload must be a dict")
    level = record.get("level", "info")
    if level not in LEVELS:
        raise ValueError(f"Telemetry level '{level}' is not supported")
    if "durationMs" in record and record["durationMs"] is not None:
        if not isinstance(record["durationMs"], (int, float)) or record["durationMs"] < 0:
            raise ValueError("Telemetry durationMs must be a non-negative number")
    record["ts"] = float(record.get("ts", time.time()))


@lru_cache(maxsize=1)
def _validator() -> Draft202012Validator:
    return Draft202012Validator(load_schema("telemetry.schema.json"))
