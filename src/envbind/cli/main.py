"""envbind command line tool: inspect how a record binds to the environment.

Usage:
    envbind show myapp.config:Settings [--prefix APP_]
    envbind vars myapp.config:Settings [--prefix APP_]
"""

from __future__ import annotations

import argparse
import dataclasses
import importlib
import json
import logging
import sys
from typing import Any, Iterator

from pydantic import BaseModel

from envbind.binding.composite import NESTED_SEPARATORS, bind, bind_with_prefix
from envbind.binding.descriptors import traversal_order
from envbind.config.settings import load_cli_settings
from envbind.models.errors import EnvBindError
from envbind.models.fields import FieldKind

logger = logging.getLogger(__name__)


def _import_record_type(target: str) -> type:
    """Resolve ``package.module:ClassName``."""
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Expected 'module:ClassName', got {target!r}")
    module = importlib.import_module(module_name)
    obj: Any = module
    for part in attr.split("."):
        obj = getattr(obj, part)
    if not isinstance(obj, type):
        raise ValueError(f"{target!r} is not a class")
    return obj


def variable_patterns(record_type: type, prefix: str) -> Iterator[str]:
    """Yield every variable name (or ``{i}`` pattern) ``record_type`` consults, in lookup order."""
    for field in traversal_order(record_type):
        base = prefix + field.fragment
        if field.kind is FieldKind.SCALAR or (field.kind is FieldKind.OPTIONAL and not field.nested):
            yield base
        elif field.kind in (FieldKind.NESTED, FieldKind.OPTIONAL):
            for separator in NESTED_SEPARATORS:
                yield from variable_patterns(field.factory, base + separator)
        elif field.kind is FieldKind.SEQUENCE:
            yield base + ":{i}"
            yield base + "__{i}"
        elif field.kind is FieldKind.NESTED_SEQUENCE:
            yield from variable_patterns(field.factory, base + ":{i}:")
            yield from variable_patterns(field.factory, base + "__{i}__")


def _dump(record: Any, indent: int) -> str:
    if isinstance(record, BaseModel):
        return record.model_dump_json(indent=indent)
    if dataclasses.is_dataclass(record):
        return json.dumps(dataclasses.asdict(record), indent=indent, default=str)
    return repr(record)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="envbind", description="Bind configuration records to environment variables")
    sub = parser.add_subparsers(dest="command", required=True)
    for name, help_text in (
        ("show", "Print the record after applying the environment"),
        ("vars", "List the environment variables the record consults"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("target", help="Record class as 'module:ClassName'")
        cmd.add_argument("--prefix", default=None, help="Override the record's default prefix")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        cfg = load_cli_settings()
    except EnvBindError as e:
        print(f"envbind: {e}", file=sys.stderr)
        return 1
    logging.basicConfig(
        level=getattr(logging, cfg.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        record_type = _import_record_type(args.target)
    except (ImportError, AttributeError, ValueError) as e:
        parser.error(str(e))

    if args.command == "vars":
        prefix = args.prefix if args.prefix is not None else getattr(record_type, "__env_prefix__", "")
        for pattern in variable_patterns(record_type, prefix):
            print(pattern)
        return 0

    record = record_type()
    try:
        if args.prefix is not None:
            found = bind_with_prefix(record, args.prefix)
        else:
            found = bind(record)
    except EnvBindError as e:
        print(f"envbind: {e}", file=sys.stderr)
        return 1
    logger.info("Bound %s (found=%s)", args.target, found)
    print(_dump(record, cfg.indent))
    return 0


if __name__ == "__main__":
    sys.exit(main())
