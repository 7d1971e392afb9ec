#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
rpc-codegen command line

Usage:
    rpc-codegen generate help.txt -o generated --version v28 --version v29
    rpc-codegen generate schema.json --workers 4 -v
    rpc-codegen extract help.txt -o schema/v29.json --version v29
    rpc-codegen versions

Defaults come from RPC_CODEGEN_* environment variables (and a .env file in
the working directory); flags override them.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import CodegenConfig, load_env
from .errors import CodegenError
from .generators import generator_names
from .logging_setup import setup_logging
from .pipeline import build_schema, run_for_versions
from .schema import export_schema
from .type_table import default_type_table, load_type_table
from .versions import resolve_version, supported_tags
from .writer import save_json, write_generated

log = logging.getLogger("rpc-codegen.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rpc-codegen",
        description="Generate typed Python RPC clients from RPC help text",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rpc-codegen generate help.txt -o generated
  rpc-codegen generate help.json --version v28 --version v29 --workers 4
  rpc-codegen extract help.txt -o schema/v29.json
        """
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output")
    parser.add_argument("--quiet", "-q", action="store_true", help="Suppress non-error output")
    parser.add_argument("--log-file", type=Path, help="Also write a rotating log file")
    parser.add_argument("--env-file", type=Path, help="Read settings from this .env file")

    sub = parser.add_subparsers(dest="command")

    gen = sub.add_parser("generate", help="Generate client packages")
    gen.add_argument("input", nargs="?", type=Path, help="Help dump or JSON schema")
    gen.add_argument("--output", "-o", type=Path, help="Output directory")
    gen.add_argument("--version", action="append", dest="versions",
                     help="API version tag, repeatable (default: v29)")
    gen.add_argument("--generator", action="append", dest="generators",
                     choices=list(generator_names()), help="Only run these generators")
    gen.add_argument("--workers", type=int, help="Generator threads")
    gen.add_argument("--type-policy", type=Path, help="YAML type policy file")

    ext = sub.add_parser("extract", help="Write the normalized schema as JSON")
    ext.add_argument("input", nargs="?", type=Path, help="Help dump or JSON schema")
    ext.add_argument("--output", "-o", type=Path, help="Output JSON file (default: stdout)")
    ext.add_argument("--version", dest="version", help="Version tag recorded in the document")
    ext.add_argument("--type-policy", type=Path, help="YAML type policy file")

    sub.add_parser("versions", help="List supported API versions")
    return parser


def _read_input(path: Optional[Path]) -> str:
    if path is None:
        raise CodegenError("no input given (pass a file or set RPC_CODEGEN_INPUT)")
    log.info(f"Reading {path}")
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def _table(args, config: CodegenConfig):
    policy = getattr(args, "type_policy", None) or config.type_policy
    return load_type_table(policy) if policy else default_type_table()


def cmd_generate(args, config: CodegenConfig) -> int:
    source = _read_input(args.input or config.input_path)
    out_dir = args.output or config.output_dir
    files = run_for_versions(
        source,
        args.versions or list(config.versions),
        generators=args.generators,
        max_workers=args.workers or config.max_workers,
        table=_table(args, config),
        writer=lambda generated: write_generated(out_dir, generated),
    )
    log.info(f"[OK] {len(files)} files in {out_dir}")
    return 0


def cmd_extract(args, config: CodegenConfig) -> int:
    input_path = args.input or config.input_path
    methods = build_schema(_read_input(input_path), _table(args, config))
    tag = args.version or config.versions[0]
    doc = export_schema(methods, version=resolve_version(tag).as_str(), source=str(input_path))
    if args.output:
        save_json(doc, args.output)
    else:
        json.dump(doc, sys.stdout, indent=2, ensure_ascii=False)
        sys.stdout.write("\n")
    return 0


def cmd_versions(args, config: CodegenConfig) -> int:
    for tag in supported_tags():
        print(tag)
    return 0


COMMANDS = {
    "generate": cmd_generate,
    "extract": cmd_extract,
    "versions": cmd_versions,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    load_env(args.env_file)
    config = CodegenConfig.from_env()

    level = config.log_level
    if args.quiet:
        level = "WARNING"
    elif args.verbose:
        level = "DEBUG"
    setup_logging(level, args.log_file or config.log_file)

    if args.command is None:
        parser.print_help()
        return 1

    try:
        return COMMANDS[args.command](args, config)
    except CodegenError as e:
        log.error(str(e))
        return 1
    except OSError as e:
        log.error(f"File error: {e}")
        return 1
