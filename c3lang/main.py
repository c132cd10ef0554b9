#!/usr/bin/env python3
"""c3lang: inspect C3 linearizations of declaration files."""

import argparse
import json
import logging
import sys

from c3lang import declarations
from c3lang.errors import C3Error
from c3lang.hierarchy import Hierarchy


def _load(path: str) -> Hierarchy:
    with open(path) as f:
        decls = declarations.parse(f.read())
    h = declarations.load(decls)
    h.linearize_all()
    return h


def cmd_mro(args):
    h = _load(args.file)
    if args.json:
        json.dump({cls: h.path(cls) for cls in h.classes()}, sys.stdout, indent=2)
        print()
    else:
        for cls in h.classes():
            print(f"{cls}: {', '.join(h.path(cls))}")


def cmd_members(args):
    h = _load(args.file)
    functions = h.resolved_functions(args.cls)
    layout = h.variable_layout(args.cls)
    if args.json:
        info = {
            "path": h.path(args.cls),
            "functions": functions,
            "variables": {slot.name: slot.owner for slot in layout},
            "declares": {
                "functions": h.direct_functions(args.cls),
                "variables": h.direct_variables(args.cls),
            },
        }
        json.dump(info, sys.stdout, indent=2)
        print()
    else:
        print(f"path: {', '.join(h.path(args.cls))}")
        print(f"functions: {' '.join(functions)}")
        print(f"variables: {' '.join(f'{s.owner}.{s.name}' for s in layout)}")


def cmd_dispatch(args):
    h = _load(args.file)
    chain = h.dispatch_chain(args.cls, args.function)
    if not chain:
        print(f"{args.cls}.{args.function}: no implementation", file=sys.stderr)
        sys.exit(1)
    for i, (cls, implementation) in enumerate(chain):
        print(f"{i}: {cls} ({implementation})")


def cmd_fmt(args):
    with open(args.file) as f:
        decls = declarations.parse(f.read())
    sys.stdout.write(declarations.serialize(decls))


def main(argv=None):
    parser = argparse.ArgumentParser(prog="c3lang", description="C3 linearization of class declarations")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Log progress (-vv for debug)")
    sub = parser.add_subparsers(dest="command")

    # mro
    p = sub.add_parser("mro", help="Print the linearized path of every class")
    p.add_argument("file")
    p.add_argument("--json", action="store_true")
    p.set_defaults(func=cmd_mro)

    # members
    p = sub.add_parser("members", help="Print functions and variables visible to a class")
    p.add_argument("file")
    p.add_argument("cls", metavar="class")
    p.add_argument("--json", action="store_true")
    p.set_defaults(func=cmd_members)

    # dispatch
    p = sub.add_parser("dispatch", help="Print the dispatch chain of a function")
    p.add_argument("file")
    p.add_argument("cls", metavar="class")
    p.add_argument("function")
    p.set_defaults(func=cmd_dispatch)

    # fmt
    p = sub.add_parser("fmt", help="Print a declaration file in canonical form")
    p.add_argument("file")
    p.set_defaults(func=cmd_fmt)

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        sys.exit(1)

    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(
        format="LOG %(asctime)s,%(msecs)03d-%(name)s-%(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
        level=level,
    )

    try:
        args.func(args)
    except (C3Error, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
