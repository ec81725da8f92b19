"""Command-line entry point: describe or lower the classes in a source file."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from .api import describe_source, dump_source_ir
from .lowering import LoweringConfig
from . import constants

_DEMO_SOURCE = """\
class User {
  constructor(name) { this.name = name; }
  sayHi() { return this.name; }
  get upper() { return this.name.toUpperCase(); }
  ['say' + 'Bye']() { return 'bye'; }
  id = 0;
}
"""


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="classdesugar", description="Class desugaring engine"
    )
    parser.add_argument("file", nargs="?", help="Source file to desugar")
    parser.add_argument(
        "--language",
        "-l",
        default=constants.DEFAULT_LANGUAGE,
        choices=constants.SUPPORTED_SOURCE_LANGUAGES,
        help="Source language (default: javascript)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the class descriptors as JSON instead of IR",
    )
    parser.add_argument(
        "--no-locations",
        action="store_true",
        help="Omit source locations from the IR listing",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.file:
        source = _DEMO_SOURCE
        print("No file provided. Using built-in demo:\n")
        print(source)
    else:
        with open(args.file) as f:
            source = f.read()

    if args.json:
        descriptors = describe_source(source, args.language)
        print(
            json.dumps(
                [d.model_dump(mode="json", exclude={"scope"}) for d in descriptors],
                indent=2,
                default=str,
            )
        )
        return 0

    config = LoweringConfig(include_locations=not args.no_locations)
    print("═══ IR ═══")
    print(dump_source_ir(source, args.language, config))
    return 0


if __name__ == "__main__":
    sys.exit(main())
