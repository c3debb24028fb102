"""Specsite CLI — specsite [clean | build | watch | start | default].

Entry point for the ``specsite`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys

from specsite._errors import SpecsiteError

TASK_NAMES = ("clean", "build", "watch", "start", "default")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the specsite CLI."""
    parser = argparse.ArgumentParser(
        prog="specsite",
        description="Build a specification document into a static site.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    parser.add_argument(
        "task",
        nargs="?",
        default="default",
        choices=TASK_NAMES,
        help="Task to run (default: build)",
    )
    parser.add_argument("root", nargs="?", default=".", help="Project root directory")
    parser.add_argument("--entry", default=None, help="Entry document, relative to root")
    parser.add_argument("--output", default=None, help="Output directory")
    parser.add_argument("--host", default=None, help="Dev server bind address")
    parser.add_argument("--port", type=int, default=None, help="Dev server port")
    parser.add_argument(
        "--no-live-reload",
        dest="live_reload",
        action="store_false",
        default=None,
        help="Do not inject the live-reload script",
    )
    return parser


def _get_version() -> str:
    """Get the package version."""
    from specsite import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.  Exits non-zero when the task fails."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    from specsite.app import run

    try:
        result = run(
            args.task,
            args.root,
            entry=args.entry,
            output=args.output,
            host=args.host,
            port=args.port,
            live_reload=args.live_reload,
        )
    except SpecsiteError as exc:
        print(f"  Error: {exc}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\n  Stopped.", file=sys.stderr)
        sys.exit(130)

    sys.exit(0 if result.ok else 1)


if __name__ == "__main__":
    main()
