"""CLI entry point for bebop."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import cast

from bebop import __version__
from bebop.errors import BebopError
from bebop.packs.manager import build_registry, import_pack
from bebop.pipeline import Pipeline
from bebop.settings import BebopSettings


def _parse_pack_list(value: str | None) -> list[str]:
    """Accept a JSON list, ``{"packs": [...]}``, or comma/space separated ids."""
    if not value:
        return []
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        parsed = None
    if isinstance(parsed, list):
        return [str(p) for p in parsed]
    if isinstance(parsed, dict) and isinstance(parsed.get("packs"), list):
        return [str(p) for p in parsed["packs"]]
    return [p for p in value.replace(",", " ").split() if p]


def _read_input(args: argparse.Namespace) -> str:
    words = cast(list[str], args.input)
    if words:
        return " ".join(words)
    if not sys.stdin.isatty():
        return sys.stdin.read().strip()
    return ""


def _pipeline(args: argparse.Namespace) -> Pipeline:
    cwd = cast(Path | None, args.cwd)
    pipeline = Pipeline(cwd, BebopSettings.from_env())
    debug = pipeline.config.debug if pipeline.config else None
    if debug and debug.enabled:
        bebop_logger = logging.getLogger("bebop")
        bebop_logger.setLevel(logging.DEBUG)
        if debug.log_file:
            bebop_logger.addHandler(logging.FileHandler(Path(debug.log_file).expanduser()))
    return pipeline


def _cmd_compile(args: argparse.Namespace) -> None:
    text = _read_input(args)
    if not text:
        print("Error: no task input given", file=sys.stderr)
        sys.exit(1)

    pipeline = _pipeline(args)
    result = pipeline.run(
        text,
        pack_ids=_parse_pack_list(cast(str | None, args.packs)),
        enforce=cast(bool, args.enforce) and pipeline.settings.enforce,
        auto=cast(bool, args.auto),
    )
    if cast(bool, args.json):
        print(result.prompt.model_dump_json(indent=2))
        return

    debug = pipeline.config.debug if pipeline.config else None
    if debug and debug.show_selected_packs:
        # stdout stays reserved for the prompt itself
        print(f"Selected packs: {', '.join(result.selection.packs)}", file=sys.stderr)
    for warning in result.prompt.enforcement_warnings:
        print(f"Warning: rule {warning.rule_id} ({warning.pack_id}) matched", file=sys.stderr)
    stats = result.prompt.stats
    if stats.missing_packs:
        print(f"Missing packs: {', '.join(stats.missing_packs)}", file=sys.stderr)
    print(result.prompt.formatted)


def _cmd_detect(args: argparse.Namespace) -> None:
    context = _pipeline(args).detect(_read_input(args) or None)
    print(context.model_dump_json(indent=2))


def _cmd_select(args: argparse.Namespace) -> None:
    pipeline = _pipeline(args)
    text = _read_input(args) or None
    selection = pipeline.select(pipeline.detect(text), text)
    print(selection.model_dump_json(indent=2))


def _cmd_packs(args: argparse.Namespace) -> None:
    settings = BebopSettings.from_env()
    action = cast(str | None, args.packs_action)
    if action == "list":
        cwd = cast(Path | None, args.cwd) or Path.cwd()
        registry = build_registry(settings, settings.workspace_root or cwd)
        for pack in registry.list_available():
            print(f"{pack.id}@{pack.version}  ({len(pack.rules)} rules)  {pack.source_path}")
    elif action == "import":
        result = import_pack(cast(Path, args.source), settings, force=cast(bool, args.force))
        verb = "Replaced" if result.overwritten else "Imported"
        print(f"{verb} {result.dest_path}")
    else:
        print("Error: expected `packs list` or `packs import`", file=sys.stderr)
        sys.exit(1)


def _add_input_args(p: argparse.ArgumentParser) -> None:
    _ = p.add_argument("input", nargs="*", help="Task description (or read from stdin)")
    _ = p.add_argument("--cwd", type=Path, default=None, help="Directory to detect from")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="bebop",
        description="Compile task text plus project constraints into an assistant prompt",
    )
    _ = parser.add_argument("-V", "--version", action="version", version=f"bebop {__version__}")
    _ = parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command")

    compile_p = subparsers.add_parser("compile", help="Compile a prompt for the current project")
    _add_input_args(compile_p)
    _ = compile_p.add_argument("--packs", default=None, help="Explicit pack ids (JSON or comma list)")
    _ = compile_p.add_argument(
        "--no-enforce", action="store_false", dest="enforce", help="Skip enforcement scans"
    )
    _ = compile_p.add_argument(
        "--auto", action="store_true", help="Ignore inline directives and auto-select packs"
    )
    _ = compile_p.add_argument("--json", action="store_true", help="Print the full result as JSON")

    detect_p = subparsers.add_parser("detect", help="Print the detected context")
    _add_input_args(detect_p)

    select_p = subparsers.add_parser("select", help="Print the selected packs and reasons")
    _add_input_args(select_p)

    packs_p = subparsers.add_parser("packs", help="Pack registry operations")
    packs_sub = packs_p.add_subparsers(dest="packs_action")
    list_p = packs_sub.add_parser("list", help="List available packs")
    _ = list_p.add_argument("--cwd", type=Path, default=None)
    import_p = packs_sub.add_parser("import", help="Copy a pack file into the registry")
    _ = import_p.add_argument("source", type=Path)
    _ = import_p.add_argument("--force", action="store_true", help="Overwrite an existing pack")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    dispatch = {
        "compile": _cmd_compile,
        "detect": _cmd_detect,
        "select": _cmd_select,
        "packs": _cmd_packs,
    }
    command = cast(str | None, args.command)
    handler = dispatch.get(command) if command is not None else None
    if handler is None:
        parser.print_help()
        sys.exit(1)
    try:
        handler(args)
    except BebopError as e:
        print(e.format(), file=sys.stderr)
        sys.exit(1)
