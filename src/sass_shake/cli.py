from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Iterable

from sass_shake import __version__
from sass_shake.errors import ShakeError
from sass_shake.models import ShakeResult
from sass_shake.syntax import SYNTAXES

_HANDLER_TAG_ATTR = "_sass_shake_handler"
_CONSOLE_FMT = "%(levelname)s | %(message)s"


def main(argv: Iterable[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="sass-shake",
        description=(
            "List Sass files that are never imported from the entry points of a "
            "directory. Delete mode requires --yes confirmation."
        ),
    )
    parser.add_argument(
        "-p",
        "--path",
        default=".",
        help="Directory to shake (current working directory by default)",
    )
    parser.add_argument(
        "-f",
        "--entry-points",
        "--entryPoints",
        dest="entry_points",
        type=_comma_list,
        action="extend",
        default=None,
        help="Comma separated entry point files (repeatable)",
    )
    parser.add_argument(
        "-e",
        "--exclude",
        type=_comma_list,
        action="extend",
        default=[],
        help="Comma separated /regexp/ patterns of files to leave out of the unused list",
    )
    parser.add_argument(
        "--syntax",
        choices=[syntax.name for syntax in SYNTAXES],
        default=None,
        help="Stylesheet syntax (detected from the directory by default)",
    )
    parser.add_argument(
        "--all-extensions",
        action="store_true",
        help="Report unused files of both syntaxes, not only the active one",
    )
    parser.add_argument(
        "--log-missing-imports",
        action="store_true",
        help="Warn about imports that resolve to no file",
    )
    parser.add_argument("-s", "--silent", action="store_true", help="Suppress logs")
    parser.add_argument("--verbose", action="store_true", help="Log every visited file")
    parser.add_argument(
        "-t",
        "--hide-table",
        "--hideTable",
        dest="hide_table",
        action="store_true",
        help="Hide the unused files table",
    )
    parser.add_argument("-d", "--delete", action="store_true", help="Delete the unused files")
    parser.add_argument(
        "--yes",
        action="store_true",
        help="Confirm delete mode (required with --delete)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args(list(argv) if argv is not None else None)
    if args.silent:
        configure_logging(logging.ERROR)
    elif args.verbose:
        configure_logging(logging.DEBUG)
    else:
        configure_logging(logging.WARNING)

    if args.delete and not args.yes:
        raise SystemExit("Refusing to delete without --yes confirmation.")

    from sass_shake.analyzer import delete_files, shake

    try:
        result = shake(
            root=args.path,
            entry_points=args.entry_points,
            exclude=args.exclude,
            syntax=args.syntax,
            log_missing_imports=args.log_missing_imports,
            all_extensions=args.all_extensions,
        )
    except ShakeError as exc:
        raise SystemExit(str(exc)) from exc

    if not result.found_entry_points:
        if not args.silent:
            print("No entry points found (to explicitly specify them, use the --entry-points flag)")
        return 1

    if not args.silent:
        _print_summary(result, show_table=not args.hide_table)

    if args.delete:
        deleted = delete_files(result.unused)
        print(f"Deleted {deleted} unused files in directory")
    return 0


def configure_logging(level: int) -> logging.Logger:
    """Attach a single console handler to the package logger."""
    package_logger = logging.getLogger("sass_shake")
    for handler in list(package_logger.handlers):
        if getattr(handler, _HANDLER_TAG_ATTR, False):
            package_logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_CONSOLE_FMT))
    setattr(handler, _HANDLER_TAG_ATTR, True)
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    return package_logger


def _print_summary(result: ShakeResult, show_table: bool) -> None:
    from sass_shake.report import render_table

    print("\nTraversing entry points:\n")
    for entry in result.entry_points:
        print(f"    {entry}")
    print("\n")
    print(f"Found {len(result.reachable)} files in Sass tree\n")
    if show_table:
        render_table(result.unused)
    print(f"Found {len(result.unused)} unused files in directory tree {result.root}")


def _comma_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


if __name__ == "__main__":
    raise SystemExit(main())
