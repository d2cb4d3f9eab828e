#!/usr/bin/env python3
"""Entry point for the pluginassets CLI."""

from __future__ import annotations

import argparse
import json
import sys
from collections import deque
from dataclasses import replace
from pathlib import Path
from textwrap import dedent

from pluginassets import __version__
from pluginassets.adapters.memory_host import InMemoryScriptHost
from pluginassets.app.catalog import ScriptCatalog
from pluginassets.app.enqueue import EnqueueScript
from pluginassets.app.manifest import find_manifest, iter_script_files, manifest_errors
from pluginassets.domain import AssetManifestError, ScriptFileNotFoundError, ScriptPaths
from pluginassets.settings import SETTINGS, PluginSettings, load_settings
from pluginassets.utils.telemetry import clear as telemetry_clear
from pluginassets.utils.telemetry import iter_events as telemetry_iter
from pluginassets.utils.telemetry import record_event, summarize as telemetry_summarize

HELP_OVERVIEW = dedent(
    """
    Inspect and render the JavaScript assets of a plugin.

      pluginassets inspect admin-settings   - resolved URL, dependencies and version
      pluginassets lint                     - validate every dist/js/*.asset.* manifest
      pluginassets render --footer          - print script tags for scripts.yaml
    """
)


def _settings_for(args: argparse.Namespace) -> PluginSettings:
    settings = SETTINGS
    root = getattr(args, "root", None)
    if root:
        settings = replace(load_settings(Path(root)), log_dir=SETTINGS.log_dir)
    url = getattr(args, "url", None)
    if url:
        settings = replace(settings, plugin_dir_url=url)
    return settings


def _inspect_cmd(args: argparse.Namespace) -> int:
    settings = _settings_for(args)
    host = InMemoryScriptHost()
    try:
        script = EnqueueScript(args.handle or args.name, args.name, host=host, settings=settings)
        asset = script.get_asset_file_data()
    except (ScriptFileNotFoundError, AssetManifestError) as exc:
        print(str(exc), file=sys.stderr)
        return 1
    manifest = find_manifest(ScriptPaths.for_script(settings.plugin_dir_path, args.name))
    payload = {
        "handle": script.script_handle,
        "path": script.relative_script_path,
        "url": script.script_url,
        "manifest": str(manifest) if manifest else None,
        **asset.to_dict(),
    }
    if args.json:
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        print(f"{payload['handle']} -> {payload['url']}")
        print(f"  version: {payload['version']}")
        deps = ", ".join(payload["dependencies"]) or "(none)"
        print(f"  dependencies: {deps}")
        print(f"  manifest: {payload['manifest'] or '(none)'}")
    return 0


def _lint_cmd(args: argparse.Namespace) -> int:
    settings = _settings_for(args)
    errors: list[str] = []
    checked: list[str] = []
    for script_file in iter_script_files(settings.scripts_dir):
        name = script_file.name[: -len(".js")]
        manifest = find_manifest(ScriptPaths.for_script(settings.plugin_dir_path, name))
        if manifest is None:
            continue
        checked.append(manifest.relative_to(settings.plugin_dir_path).as_posix())
        errors.extend(manifest_errors(manifest))
    result = {"checked": checked, "errors": errors}
    if args.json:
        print(json.dumps(result, ensure_ascii=False, indent=2))
    elif errors:
        print("Lint issues:")
        for error in errors:
            print(f"  - {error}")
    else:
        print(f"No issues detected ({len(checked)} manifests)")
    record_event(
        settings,
        "manifest.lint",
        {"root": str(settings.plugin_dir_path), "errors": len(errors)},
        status="error" if errors else "ok",
    )
    return 0 if not errors else 1


def _render_cmd(args: argparse.Namespace) -> int:
    settings = _settings_for(args)
    catalog_path = Path(args.catalog).expanduser().resolve() if args.catalog else settings.catalog_file
    host = InMemoryScriptHost(locale=args.locale)
    try:
        catalog = ScriptCatalog.load_from_file(catalog_path)
        catalog.register_all(host, settings)
        results = [host.render()]
        if args.footer:
            results.append(host.render(footer=True))
    except (FileNotFoundError, ValueError) as exc:
        print(str(exc), file=sys.stderr)
        return 1
    chunks = [result.html for result in results if result.html]
    missing: dict[str, list[str]] = {}
    for result in results:
        missing.update(result.missing)
    if chunks:
        print("\n".join(chunks))
    for handle, deps in sorted(missing.items()):
        print(f"Skipped {handle}: unresolved dependencies {', '.join(deps)}", file=sys.stderr)
    return 0


def _telemetry_cmd(args: argparse.Namespace) -> int:
    settings = _settings_for(args)
    if args.telemetry_command == "report":
        recent = getattr(args, "recent", 0)
        if recent and recent > 0:
            events = list(deque(telemetry_iter(settings), maxlen=recent))
        else:
            events = list(telemetry_iter(settings))
        print(json.dumps(telemetry_summarize(events), indent=2, ensure_ascii=False))
        return 0
    if args.telemetry_command == "clear":
        telemetry_clear(settings)
        print("Telemetry log cleared")
        return 0
    if args.telemetry_command == "tail":
        for evt in deque(telemetry_iter(settings), maxlen=args.limit):
            print(json.dumps(evt, ensure_ascii=False))
        return 0
    print("Unsupported telemetry command", file=sys.stderr)
    return 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pluginassets",
        description=HELP_OVERVIEW,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"pluginassets {__version__}")
    parser.add_argument("--root", help="Plugin root directory (default: $PLUGINASSETS_ROOT or cwd)")
    parser.add_argument("--url", help="Public URL of the plugin root")

    sub = parser.add_subparsers(dest="command", required=True)

    inspect_cmd = sub.add_parser("inspect", help="Show how a script would be registered")
    inspect_cmd.add_argument("name", help="Script name under dist/js (without .js)")
    inspect_cmd.add_argument("--handle", help="Handle to register under (default: script name)")
    inspect_cmd.add_argument("--json", action="store_true", help="Emit JSON output")
    inspect_cmd.set_defaults(func=_inspect_cmd)

    lint_cmd = sub.add_parser("lint", help="Validate asset manifests under dist/js")
    lint_cmd.add_argument("--json", action="store_true", help="Emit JSON output")
    lint_cmd.set_defaults(func=_lint_cmd)

    render_cmd = sub.add_parser("render", help="Register the script catalog and print script tags")
    render_cmd.add_argument("--catalog", help="Catalog file (default: <root>/scripts.yaml)")
    render_cmd.add_argument("--footer", action="store_true", help="Also print footer scripts")
    render_cmd.add_argument("--locale", default="en_US", help="Locale used to load JSON translations")
    render_cmd.set_defaults(func=_render_cmd)

    telemetry_cmd = sub.add_parser("telemetry", help="Inspect local telemetry logs")
    telemetry_sub = telemetry_cmd.add_subparsers(dest="telemetry_command", required=True)

    telemetry_report = telemetry_sub.add_parser("report", help="Print aggregated telemetry stats")
    telemetry_report.add_argument(
        "--recent",
        type=int,
        default=0,
        help="Limit aggregation to the last N telemetry events",
    )
    telemetry_report.set_defaults(func=_telemetry_cmd)

    telemetry_clear_cmd = telemetry_sub.add_parser("clear", help="Remove telemetry log file")
    telemetry_clear_cmd.set_defaults(func=_telemetry_cmd)

    telemetry_tail = telemetry_sub.add_parser("tail", help="Print last N telemetry events")
    telemetry_tail.add_argument("--limit", type=int, default=20)
    telemetry_tail.set_defaults(func=_telemetry_cmd)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
