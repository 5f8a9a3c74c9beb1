"""Command-line interface for the architect runtime."""
from __future__ import annotations

import argparse
import sys

from .analysis import describe_environments, export_graphviz, visualize_graph
from .crypto import verify_signature
from .engine import Architect, BuildConfig, load_build_config
from .loader import ArchitectError
from .logbook import record_build, show_logbook


def _runtime_callable(name, fallback):
    runtime_mod = sys.modules.get('architect.runtime')
    if runtime_mod and hasattr(runtime_mod, name):
        return getattr(runtime_mod, name)
    return fallback


def parse_args(args):
    argp = argparse.ArgumentParser(description="Architect module loader")

    argp.add_argument("--config", help="JSON build configuration to build from")
    argp.add_argument(
        "--repository",
        help="Repository root used to resolve paths (overrides the config)",
    )
    argp.add_argument(
        "--get",
        action="append",
        metavar="PATH",
        help="Load a unit from the repository (repeatable)",
    )
    argp.add_argument(
        "--integrate",
        action="store_true",
        help="Execute units loaded with --get immediately",
    )
    argp.add_argument(
        "--exclude",
        action="store_true",
        help="Leave units loaded with --get unchained from the ecosystem",
    )
    argp.add_argument(
        "--describe",
        action="store_true",
        help="Show each loaded unit and the environments it reads through",
    )
    argp.add_argument("--logs", action="store_true", help="Print the operation log")
    argp.add_argument(
        "--record", action="store_true", help="Append the loaded units to the logbook"
    )
    argp.add_argument(
        "--sign", action="store_true", help="Sign the recorded logbook entry"
    )
    argp.add_argument(
        "--revert",
        action="store_true",
        help="Restore the process scopes and reset the architect when done",
    )
    argp.add_argument(
        "--logbook", action="store_true", help="Show the architect logbook"
    )
    argp.add_argument("--verify", help="Verify signature for a logbook entry hash")
    argp.add_argument(
        "--viz",
        metavar="OUTPUT",
        help="Export a Graphviz environment visualization to an SVG file",
    )
    argp.add_argument(
        "--visualize",
        action="store_true",
        help="Render the environment graph with matplotlib",
    )

    return argp.parse_args(args)


def _print_logs(architect):
    print("\nOperation log:")
    if not len(architect.logs):
        print("    (no log entries)")
    for entry in architect.logs:
        for line in entry.splitlines():
            print("   ", line)


def main(args):
    params = parse_args(args)

    if params.logbook:
        _runtime_callable('show_logbook', show_logbook)()
        return 0
    if params.verify:
        ok = _runtime_callable('verify_signature', verify_signature)(
            params.verify,
            input("Signature hex: ").strip(),
        )
        print("✓ Signature valid" if ok else "✗ Invalid signature")
        return 0 if ok else 1

    architect = Architect()

    try:
        if params.config:
            config = load_build_config(params.config)
            if params.repository is not None:
                config.repository = params.repository
            architect.build(config)
            print(f"✓ Built {len(architect.files)} file(s) from {params.config}")
        elif params.repository is not None:
            architect.build(BuildConfig(repository=params.repository))

        for path in params.get or []:
            architect.get(path, params.integrate, params.exclude)
            print(f"✓ Got {path}")
    except ArchitectError as exc:
        print(f"✗ {exc}")
        return 1

    if params.describe:
        describe_environments(architect)
    if params.record:
        _runtime_callable('record_build', record_build)(architect, sign=params.sign)
    if params.viz:
        _runtime_callable('export_graphviz', export_graphviz)(architect, params.viz)
    if params.visualize:
        _runtime_callable('visualize_graph', visualize_graph)(architect)
    if params.revert:
        restored = architect.revert()
        print(f"✓ Restored scopes: {', '.join(restored)}")
    if params.logs:
        _print_logs(architect)

    return 0


__all__ = [
    "main",
    "parse_args",
]


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main(sys.argv[1:]))
