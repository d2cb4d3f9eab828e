from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
PYTEST_TEMP = Path(os.environ.get("PYTEST_DEBUG_TEMPROOT", "/tmp/pluginassets-pytest")).resolve()
os.environ.setdefault("PYTEST_DEBUG_TEMPROOT", str(PYTEST_TEMP))
PYTEST_TEMP.mkdir(parents=True, exist_ok=True)
SANDBOX_HOME = PYTEST_TEMP / "global-home"
os.environ.setdefault("PLUGINASSETS_HOME", str(SANDBOX_HOME))
SANDBOX_HOME.mkdir(parents=True, exist_ok=True)
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from pluginassets.ports.script_host import ScriptHost  # noqa: E402
from pluginassets.settings import PluginSettings  # noqa: E402


class RecordingHost(ScriptHost):
    """Script host double that records every call it receives."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.registered: set[str] = set()
        self.enqueued: list[str] = []

    def register_script(self, handle, src, deps, ver, in_footer):
        self.calls.append(("register_script", handle, src, list(deps), ver, in_footer))
        if handle in self.registered:
            return False
        self.registered.add(handle)
        return True

    def set_script_translations(self, handle, domain, path):
        self.calls.append(("set_script_translations", handle, domain, Path(path)))
        return handle in self.registered

    def localize_script(self, handle, object_name, data):
        self.calls.append(("localize_script", handle, object_name, dict(data)))
        return handle in self.registered

    def script_is(self, handle, status="enqueued"):
        self.calls.append(("script_is", handle, status))
        if status == "registered":
            return handle in self.registered
        return handle in self.enqueued

    def enqueue_script(self, handle):
        self.calls.append(("enqueue_script", handle))
        if handle not in self.enqueued:
            self.enqueued.append(handle)

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture()
def plugin_root(tmp_path: Path) -> Path:
    root = tmp_path / "plugin"
    (root / "dist" / "js").mkdir(parents=True)
    (root / "lang").mkdir()
    return root


@pytest.fixture()
def plugin_settings(plugin_root: Path, tmp_path: Path) -> PluginSettings:
    log_dir = tmp_path / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return PluginSettings(
        plugin_dir_path=plugin_root,
        plugin_dir_url="https://example.test/wp-content/plugins/distributor",
        text_domain="distributor",
        log_dir=log_dir,
        version="2.0.0",
    )


@pytest.fixture()
def recording_host() -> RecordingHost:
    return RecordingHost()


@pytest.fixture()
def make_script(plugin_root: Path):
    """Write ``dist/js/<name>.js`` (and optionally its asset manifest) under the plugin root."""

    def _make(
        name: str,
        *,
        manifest: dict | None = None,
        php_manifest: str | None = None,
        body: str = "console.log('ok');\n",
    ) -> Path:
        target = plugin_root / "dist" / "js" / f"{name}.js"
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(body, encoding="utf-8")
        if manifest is not None:
            (target.parent / f"{name}.asset.json").write_text(json.dumps(manifest), encoding="utf-8")
        if php_manifest is not None:
            (target.parent / f"{name}.asset.php").write_text(php_manifest, encoding="utf-8")
        return target

    return _make
