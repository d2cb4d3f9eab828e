"""In-memory script registry that prints script tags."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from html import escape
from json import JSONDecodeError
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence
from urllib.parse import quote

from pluginassets.domain import SCRIPT_STATUSES, TranslationFileError
from pluginassets.ports.script_host import ScriptHost

DEFAULT_LOCALE = "en_US"

# Keeps inline payloads from closing the surrounding <script> element.
_INLINE_ESCAPES = {"<": "\\u003C", ">": "\\u003E", "&": "\\u0026"}


def _inline_json(data: Any) -> str:
    payload = json.dumps(data, ensure_ascii=False, sort_keys=True)
    for char, replacement in _INLINE_ESCAPES.items():
        payload = payload.replace(char, replacement)
    return payload


@dataclass
class RegisteredScript:
    handle: str
    src: str
    deps: List[str]
    ver: str | None
    in_footer: bool
    translations: tuple[str, Path] | None = None
    localizations: List[tuple[str, Dict[str, Any]]] = field(default_factory=list)

    def url(self) -> str:
        if not self.ver:
            return self.src
        separator = "&" if "?" in self.src else "?"
        return f"{self.src}{separator}ver={quote(self.ver, safe='')}"


@dataclass
class RenderResult:
    html: str
    printed: List[str]
    missing: Dict[str, List[str]]


class InMemoryScriptHost(ScriptHost):
    """Tracks registered scripts and prints them in dependency order.

    Scripts enqueued for the head pull their dependencies into the head even
    when those are flagged for the footer. A script whose dependency chain
    cannot be resolved is skipped and reported in ``RenderResult.missing``.
    """

    def __init__(self, *, locale: str = DEFAULT_LOCALE) -> None:
        self._locale = locale
        self._scripts: Dict[str, RegisteredScript] = {}
        self._queue: List[str] = []
        self._done: set[str] = set()

    @property
    def locale(self) -> str:
        return self._locale

    def get(self, handle: str) -> RegisteredScript | None:
        return self._scripts.get(handle)

    def queue(self) -> list[str]:
        return list(self._queue)

    def register_script(
        self,
        handle: str,
        src: str,
        deps: Sequence[str],
        ver: str | None,
        in_footer: bool,
    ) -> bool:
        if handle in self._scripts:
            return False
        self._scripts[handle] = RegisteredScript(
            handle=handle,
            src=src,
            deps=list(deps),
            ver=ver,
            in_footer=in_footer,
        )
        return True

    def set_script_translations(self, handle: str, domain: str, path: Path) -> bool:
        script = self._scripts.get(handle)
        if script is None:
            return False
        script.translations = (domain, Path(path))
        return True

    def localize_script(self, handle: str, object_name: str, data: Mapping[str, Any]) -> bool:
        script = self._scripts.get(handle)
        if script is None:
            return False
        script.localizations.append((object_name, dict(data)))
        return True

    def script_is(self, handle: str, status: str = "enqueued") -> bool:
        if status not in SCRIPT_STATUSES:
            raise ValueError(f"Unknown script status '{status}'")
        if status == "registered":
            return handle in self._scripts
        if status == "enqueued":
            return handle in self._queue
        return handle in self._done

    def enqueue_script(self, handle: str) -> None:
        if handle not in self._queue:
            self._queue.append(handle)

    def render(self, *, footer: bool = False) -> RenderResult:
        order: list[str] = []
        missing: dict[str, list[str]] = {}
        for handle in self._queue:
            script = self._scripts.get(handle)
            if script is None:
                continue
            if not footer and script.in_footer:
                continue
            self._resolve(handle, order, missing, visiting=set())

        chunks: list[str] = []
        for handle in order:
            chunks.extend(self._print_script(self._scripts[handle]))
            self._done.add(handle)
        return RenderResult(html="\n".join(chunks), printed=order, missing=missing)

    def _resolve(
        self,
        handle: str,
        order: list[str],
        missing: dict[str, list[str]],
        *,
        visiting: set[str],
    ) -> bool:
        if handle in order or handle in self._done:
            return True
        if handle in missing:
            return False
        script = self._scripts.get(handle)
        if script is None or handle in visiting:
            return False
        visiting.add(handle)
        unresolved = [dep for dep in script.deps if not self._resolve(dep, order, missing, visiting=visiting)]
        visiting.discard(handle)
        if unresolved:
            missing[handle] = unresolved
            return False
        order.append(handle)
        return True

    def _print_script(self, script: RegisteredScript) -> list[str]:
        lines: list[str] = []
        for object_name, data in script.localizations:
            payload = _inline_json(data)
            lines.append(f'<script id="{escape(script.handle)}-js-extra">var {object_name} = {payload};</script>')
        translations = self._load_translations(script)
        if translations is not None:
            domain, locale_data = translations
            payload = _inline_json(locale_data)
            lines.append(
                f'<script id="{escape(script.handle)}-js-translations">'
                f'wp.i18n.setLocaleData({payload}, "{escape(domain)}");</script>'
            )
        lines.append(f'<script src="{escape(script.url())}" id="{escape(script.handle)}-js"></script>')
        return lines

    def _load_translations(self, script: RegisteredScript) -> tuple[str, dict[str, Any]] | None:
        if script.translations is None:
            return None
        domain, lang_dir = script.translations
        candidate = lang_dir / f"{domain}-{self._locale}-{script.handle}.json"
        if not candidate.exists():
            return None
        try:
            raw = json.loads(candidate.read_text(encoding="utf-8"))
        except JSONDecodeError as exc:
            raise TranslationFileError(f"{candidate}: {exc.msg} (line {exc.lineno} column {exc.colno})") from exc
        locale_data = raw.get("locale_data", {}).get("messages", raw) if isinstance(raw, dict) else {}
        return domain, locale_data


__all__ = ["DEFAULT_LOCALE", "InMemoryScriptHost", "RegisteredScript", "RenderResult"]
