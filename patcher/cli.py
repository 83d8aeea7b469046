from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from patcher.config import (
    APP_NAME,
    APP_VERSION,
    DEFAULT_MANIFEST_NAME,
    DEFAULT_PREFS_FILE,
    DEFAULT_REPORT_NAME,
)
from patcher.core.errors import ConfigurationError, WorkspaceError
from patcher.core.fsnodes import nodes_for_paths
from patcher.core.manifest import build_manifest_dict, write_manifest_json
from patcher.core.mapper import build_path_result
from patcher.core.modules import find_unit, is_not_same_module, resolve_module
from patcher.core.preferences import default_export_path, load_export_paths, remember_export_path
from patcher.core.reporting import build_export_message, build_report_html, write_report_html
from patcher.core.request import export_prefix, has_errors, validate_export_request
from patcher.core.rules import default_rules, load_rules, save_rules
from patcher.core.workspace import load_workspace
from patcher.logging_setup import setup_logging
from patcher.models import ExportRequest

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="patcher", description=f"{APP_NAME} (v{APP_VERSION})")
    parser.add_argument("--log-level", default="WARNING", help="DEBUG, INFO, WARNING or ERROR")
    parser.add_argument("--log-file", type=Path, default=None)
    sub = parser.add_subparsers(dest="command", required=True)

    plan = sub.add_parser("plan", help="Compute the export pairs for a selection")
    plan.add_argument("paths", nargs="*", help="Selected files and folders")
    plan.add_argument("--workspace", required=True, help="Workspace JSON listing the build units")
    plan.add_argument("--unit", default=None, help="Unit name (skips automatic resolution)")
    plan.add_argument("--dest", default=None, help="Destination folder (default: last used for the unit)")
    plan.add_argument("--compile", action="store_true", help="Export compiled artifacts as well")
    plan.add_argument("--rules", default=None, help="Export rules JSON")
    plan.add_argument("--prefs", default=DEFAULT_PREFS_FILE, help="Destination preference store")
    plan.add_argument("--no-remember", action="store_true", help="Do not store the destination")
    plan.add_argument("--manifest", default=None, help="Write the plan as JSON here")
    plan.add_argument("--report", default=None, help="Write an HTML report here")
    plan.add_argument(
        "--out-dir",
        default=None,
        help=f"Write {DEFAULT_MANIFEST_NAME} and {DEFAULT_REPORT_NAME} here (unless --manifest/--report are given)",
    )

    rules = sub.add_parser("rules", help="Write the default export rules to a file")
    rules.add_argument("path")

    return parser


def cmd_rules(args: argparse.Namespace) -> int:
    path = save_rules(default_rules(), args.path)
    print(f"Rules written: {path}")
    return EXIT_OK


def cmd_plan(args: argparse.Namespace) -> int:
    try:
        ws = load_workspace(args.workspace)
        rules = load_rules(args.rules) if args.rules else default_rules()
    except (WorkspaceError, OSError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_CONFIG

    selection = nodes_for_paths(args.paths)
    selected_paths = [n.path for n in selection]

    if args.unit:
        unit = find_unit(ws.units, args.unit)
    else:
        active = find_unit(ws.units, ws.active_unit) if ws.active_unit else None
        unit = resolve_module(ws.units, selected_paths, active_unit=active, pattern=rules.module_pattern)
        if unit is None and is_not_same_module(selected_paths, rules.module_pattern):
            print("Selection spans several units; pass --unit.", file=sys.stderr)

    prefs = load_export_paths(args.prefs)
    destination = args.dest
    if destination is None and unit is not None:
        destination = default_export_path(unit.name, prefs)

    issues = validate_export_request(destination or "", selection, unit)
    for i in issues:
        where = f" ({i.relpath})" if i.relpath else ""
        print(f"[{i.level}] {i.code}: {i.message}{where}", file=sys.stderr)
    if has_errors(issues):
        return EXIT_INVALID

    if not args.no_remember:
        remember_export_path(args.prefs, unit.name, destination)

    prefix = export_prefix(destination, unit.name)
    request = ExportRequest(
        destination=prefix,
        compile_mode=args.compile,
        unit=unit,
        selection=tuple(selection),
    )
    log.info("Planning export of %d selected path(s) for %s", len(selection), unit.name)

    try:
        result = build_path_result(request, rules=rules)
    except ConfigurationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_CONFIG

    print(build_export_message(result, prefix))
    for pair in result:
        print(f"{pair.src}  ->  {pair.dst}")

    manifest_path = args.manifest
    report_path = args.report
    if args.out_dir:
        manifest_path = manifest_path or str(Path(args.out_dir) / DEFAULT_MANIFEST_NAME)
        report_path = report_path or str(Path(args.out_dir) / DEFAULT_REPORT_NAME)

    if manifest_path:
        manifest = build_manifest_dict(
            tool_name=APP_NAME,
            tool_version=APP_VERSION,
            unit=unit,
            destination=prefix,
            compile_mode=args.compile,
            result=result,
            validation_results=issues,
        )
        print(f"Manifest written: {write_manifest_json(manifest, manifest_path)}")

    if report_path:
        html_text = build_report_html(
            tool_name=APP_NAME,
            tool_version=APP_VERSION,
            unit_name=unit.name,
            destination=prefix,
            compile_mode=args.compile,
            result=result,
            validation_results=issues,
        )
        print(f"Report written: {write_report_html(html_text, report_path)}")

    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    if args.command == "rules":
        return cmd_rules(args)
    return cmd_plan(args)


if __name__ == "__main__":
    sys.exit(main())
