# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
PortableNet Command Line Interface

Runs a bundle directory and prints the program and workspace contents.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys


def main(argv=None):
    """Main entry point for the PortableNet CLI."""
    parser = argparse.ArgumentParser(
        prog="portablenet",
        description="PortableNet - run serialized tensor programs",
    )

    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser(
        "run",
        help="Load and execute a bundle directory",
    )
    run_parser.add_argument(
        "bundle",
        help="Directory holding the manifest and its resource files",
    )
    run_parser.add_argument(
        "--manifest",
        default=None,
        help="Manifest file name inside the bundle (default: net.json)",
    )
    run_parser.add_argument(
        "--force-reload",
        action="store_true",
        help="Reload tensors that already exist in the workspace",
    )
    run_parser.add_argument(
        "--lenient",
        action="store_true",
        help="Warn instead of failing on missing resource files",
    )
    run_parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Do not print the program and workspace summary",
    )
    run_parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)",
    )

    args = parser.parse_args(argv)

    if args.version:
        from portablenet import __version__

        print(f"PortableNet v{__version__}")
        return 0

    if args.command == "run":
        return _run(args)

    parser.print_help()
    return 0


def _run(args) -> int:
    from portablenet.config import ExecutionConfig
    from portablenet.errors import PortableNetError
    from portablenet.execution import Program, Workspace

    config = ExecutionConfig.from_env()
    if "PORTABLENET_STRICT_MANIFEST" not in os.environ:
        config.strict_manifest = True
    if args.manifest:
        config.manifest_name = args.manifest
    if args.force_reload:
        config.force_reload = True
    if args.lenient:
        config.strict_resources = False
    if args.verbose:
        config.verbose = min(4, 2 + args.verbose)

    logging.basicConfig(
        level=config.log_level(),
        format="[%(levelname)s] [%(name)s] %(message)s",
    )

    program = Program(config)
    try:
        loaded = program.load(args.bundle)
    except PortableNetError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if not loaded:
        print(f"Error: {loaded}", file=sys.stderr)
        return 1

    with Workspace(args.bundle, config=config) as ws:
        status = program.execute(ws)
        if not args.quiet:
            print(program.summary(ws))

    if not status:
        print(f"Error: {status}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
