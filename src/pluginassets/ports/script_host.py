"""Port definitions for the platform script registry."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Mapping, Sequence


class ScriptHost(ABC):
    """Registry the platform keeps for scripts, keyed by handle."""

    @abstractmethod
    def register_script(
        self,
        handle: str,
        src: str,
        deps: Sequence[str],
        ver: str | None,
        in_footer: bool,
    ) -> bool:
        """Register a script; return False when the handle is already taken."""

    @abstractmethod
    def set_script_translations(self, handle: str, domain: str, path: Path) -> bool:
        """Attach a translation domain and language directory to a registered script."""

    @abstractmethod
    def localize_script(self, handle: str, object_name: str, data: Mapping[str, Any]) -> bool:
        """Expose data to a registered script as a global JS object."""

    @abstractmethod
    def script_is(self, handle: str, status: str = "enqueued") -> bool:
        """Report whether a handle is registered, enqueued or already printed."""

    @abstractmethod
    def enqueue_script(self, handle: str) -> None:
        """Mark a handle for output."""
