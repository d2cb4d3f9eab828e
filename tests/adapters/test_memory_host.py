from __future__ import annotations

import json
from pathlib import Path

import pytest

from pluginassets.adapters.memory_host import InMemoryScriptHost
from pluginassets.domain import TranslationFileError


def _host_with(*scripts: tuple[str, list[str], bool]) -> InMemoryScriptHost:
    host = InMemoryScriptHost()
    for handle, deps, in_footer in scripts:
        host.register_script(handle, f"https://cdn.test/{handle}.js", deps, "1.0", in_footer)
    return host


def test_register_keeps_first_definition() -> None:
    host = InMemoryScriptHost()

    assert host.register_script("dt-push", "https://cdn.test/a.js", [], "1", False) is True
    assert host.register_script("dt-push", "https://cdn.test/b.js", [], "2", True) is False

    script = host.get("dt-push")
    assert script is not None
    assert script.src == "https://cdn.test/a.js"
    assert script.ver == "1"


def test_script_is_tracks_lifecycle() -> None:
    host = _host_with(("dt-push", [], False))

    assert host.script_is("dt-push", "registered")
    assert not host.script_is("dt-push", "enqueued")
    host.enqueue_script("dt-push")
    host.enqueue_script("dt-push")
    assert host.queue() == ["dt-push"]
    assert host.script_is("dt-push")
    assert not host.script_is("dt-push", "done")
    host.render()
    assert host.script_is("dt-push", "done")


def test_script_is_rejects_unknown_status() -> None:
    with pytest.raises(ValueError):
        InMemoryScriptHost().script_is("dt-push", "printed")


def test_translations_and_localization_need_registration() -> None:
    host = InMemoryScriptHost()

    assert host.set_script_translations("dt-push", "distributor", Path("/tmp/lang")) is False
    assert host.localize_script("dt-push", "dtPush", {"a": 1}) is False


def test_render_orders_dependencies_first() -> None:
    host = _host_with(
        ("dt-push", ["dt-shared", "wp-element"], False),
        ("dt-shared", ["wp-element"], False),
        ("wp-element", [], False),
    )
    host.enqueue_script("dt-push")

    result = host.render()

    assert result.printed == ["wp-element", "dt-shared", "dt-push"]
    assert result.html.count("<script src=") == 3
    assert result.missing == {}


def test_render_prints_each_script_once() -> None:
    host = _host_with(("wp-element", [], False), ("a", ["wp-element"], False), ("b", ["wp-element"], False))
    host.enqueue_script("a")
    host.enqueue_script("b")

    first = host.render()
    second = host.render()

    assert first.printed == ["wp-element", "a", "b"]
    assert second.printed == []


def test_render_splits_head_and_footer() -> None:
    host = _host_with(
        ("dt-admin", ["dt-lib"], False),
        ("dt-lib", [], True),
        ("dt-footer", [], True),
    )
    host.enqueue_script("dt-admin")
    host.enqueue_script("dt-footer")

    head = host.render()
    footer = host.render(footer=True)

    assert head.printed == ["dt-lib", "dt-admin"]
    assert footer.printed == ["dt-footer"]


def test_render_skips_unresolvable_scripts() -> None:
    host = _host_with(("dt-push", ["wp-missing"], False), ("a", ["b"], False), ("b", ["a"], False))
    host.enqueue_script("dt-push")
    host.enqueue_script("a")
    host.enqueue_script("never-registered")

    result = host.render()

    assert result.printed == []
    assert result.missing["dt-push"] == ["wp-missing"]
    assert "a" in result.missing


def test_render_outputs_version_and_localized_data() -> None:
    host = InMemoryScriptHost()
    host.register_script("dt-push", "https://cdn.test/push.js", [], "a b", False)
    host.localize_script("dt-push", "dtPush", {"endpoint": "/wp-json", "count": 2})
    host.enqueue_script("dt-push")

    html = host.render().html

    lines = html.splitlines()
    assert lines[0] == '<script id="dt-push-js-extra">var dtPush = {"count": 2, "endpoint": "/wp-json"};</script>'
    assert lines[1] == '<script src="https://cdn.test/push.js?ver=a%20b" id="dt-push-js"></script>'


def test_render_omits_version_query_when_empty() -> None:
    host = InMemoryScriptHost()
    host.register_script("dt-push", "https://cdn.test/push.js?x=1", [], None, False)
    host.enqueue_script("dt-push")

    assert 'src="https://cdn.test/push.js?x=1"' in host.render().html


def test_render_loads_json_translations(tmp_path: Path) -> None:
    lang = tmp_path / "lang"
    lang.mkdir()
    (lang / "distributor-fr_FR-dt-push.json").write_text(
        json.dumps({"locale_data": {"messages": {"": {"domain": "messages"}, "Pull": ["Tirer"]}}}),
        encoding="utf-8",
    )
    host = InMemoryScriptHost(locale="fr_FR")
    host.register_script("dt-push", "https://cdn.test/push.js", [], "1", False)
    host.set_script_translations("dt-push", "distributor", lang)
    host.enqueue_script("dt-push")

    html = host.render().html

    assert 'wp.i18n.setLocaleData({"": {"domain": "messages"}, "Pull": ["Tirer"]}, "distributor");' in html
    assert html.index("js-translations") < html.index('id="dt-push-js"')


def test_render_without_translation_file_prints_only_tag(tmp_path: Path) -> None:
    host = InMemoryScriptHost()
    host.register_script("dt-push", "https://cdn.test/push.js", [], "1", False)
    host.set_script_translations("dt-push", "distributor", tmp_path)
    host.enqueue_script("dt-push")

    assert host.render().html == '<script src="https://cdn.test/push.js?ver=1" id="dt-push-js"></script>'


def test_render_escapes_markup_in_localized_data() -> None:
    host = InMemoryScriptHost()
    host.register_script("dt-push", "https://cdn.test/push.js", [], "1", False)
    host.localize_script("dt-push", "dtPush", {"title": "</script><script>alert(1)</script>", "q": "a&b"})
    host.enqueue_script("dt-push")

    html = host.render().html

    assert html.count("</script>") == 2
    assert "\\u003C/script\\u003E\\u003Cscript\\u003Ealert(1)\\u003C/script\\u003E" in html
    assert '"q": "a\\u0026b"' in html


def test_render_escapes_markup_in_translations(tmp_path: Path) -> None:
    (tmp_path / "distributor-en_US-dt-push.json").write_text(
        json.dumps({"Pull": ["<!-- </script>"]}),
        encoding="utf-8",
    )
    host = InMemoryScriptHost()
    host.register_script("dt-push", "https://cdn.test/push.js", [], "1", False)
    host.set_script_translations("dt-push", "distributor", tmp_path)
    host.enqueue_script("dt-push")

    html = host.render().html

    assert html.count("</script>") == 2
    assert "<!--" not in html
    assert '["\\u003C!-- \\u003C/script\\u003E"]' in html


def test_render_rejects_malformed_translation_file(tmp_path: Path) -> None:
    (tmp_path / "distributor-en_US-dt-push.json").write_text("{broken", encoding="utf-8")
    host = InMemoryScriptHost()
    host.register_script("dt-push", "https://cdn.test/push.js", [], "1", False)
    host.set_script_translations("dt-push", "distributor", tmp_path)
    host.enqueue_script("dt-push")

    with pytest.raises(TranslationFileError, match="distributor-en_US-dt-push.json"):
        host.render()
