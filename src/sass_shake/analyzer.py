from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path

from sass_shake.errors import ConfigurationError, ExclusionPatternError
from sass_shake.models import ShakeResult
from sass_shake.resolver import build_import_graph, normalize_path
from sass_shake.syntax import (
    STYLESHEET_EXTENSIONS,
    SYNTAXES,
    Syntax,
    detect_syntax,
    get_syntax,
    syntax_for_path,
)

logger = logging.getLogger(__name__)


def shake(
    root: str | os.PathLike[str] = ".",
    entry_points: Sequence[str | os.PathLike[str]] | None = None,
    exclude: Iterable[str] = (),
    syntax: str | Syntax | None = None,
    log_missing_imports: bool = False,
    all_extensions: bool = False,
) -> ShakeResult:
    """Find the stylesheet files under ``root`` that no entry point imports.

    ``entry_points`` defaults to every top-level file of the active syntax,
    partials included. ``syntax`` defaults to the extension of the first
    explicit entry point, then to the dominant extension in ``root``. Only files
    of the active syntax are followed and reported unless ``all_extensions`` is
    set.
    """
    root_path = _validate_root(root)
    exclusions = compile_exclusions(exclude)
    active = _select_syntax(root_path, entry_points, syntax)
    logger.debug("Using %s syntax for %s", active.name, root_path)

    if entry_points is None:
        entries = find_entry_points(root_path, active)
    else:
        entries = [normalize_path(entry) for entry in entry_points]
    if not entries:
        logger.info("No entry points found in %s", root_path)
        return ShakeResult(
            root=root_path,
            syntax=active.name,
            entry_points=(),
            reachable=frozenset(),
            unused=[],
        )

    enabled = SYNTAXES if all_extensions else (active,)
    graph = build_import_graph(
        entries, active, log_missing_imports=log_missing_imports, syntaxes=enabled
    )
    logger.info("Found %d files in Sass tree", len(graph.reachable))

    extensions = tuple(syntax.extension for syntax in enabled)
    unused = find_unused_files(root_path, graph.reachable, exclusions, extensions)
    return ShakeResult(
        root=root_path,
        syntax=active.name,
        entry_points=tuple(entries),
        reachable=graph.reachable,
        unused=unused,
        dangling_imports=graph.dangling_imports,
        read_failures=graph.read_failures,
    )


def find_entry_points(root: str | os.PathLike[str], syntax: Syntax) -> list[str]:
    entries: list[str] = []
    with os.scandir(root) as items:
        for item in items:
            if not item.is_file():
                continue
            if not syntax.matches(item.name):
                continue
            entries.append(normalize_path(item.path))
    entries.sort()
    return entries


def compile_exclusions(patterns: Iterable[str]) -> list[re.Pattern[str]]:
    compiled: list[re.Pattern[str]] = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(_strip_delimiters(pattern)))
        except re.error as exc:
            raise ExclusionPatternError(pattern, str(exc)) from exc
    return compiled


def find_unused_files(
    root: str | os.PathLike[str],
    reachable: Iterable[str],
    exclusions: Sequence[re.Pattern[str]] = (),
    extensions: Sequence[str] = STYLESHEET_EXTENSIONS,
) -> list[str]:
    reachable = reachable if isinstance(reachable, (set, frozenset)) else set(reachable)
    suffixes = tuple(extensions)
    unused: list[str] = []
    for file_path in walk_files(root):
        path = normalize_path(file_path)
        if not path.endswith(suffixes):
            continue
        if _is_excluded(path, exclusions):
            logger.debug("Excluded %s", path)
            continue
        if path in reachable:
            continue
        unused.append(path)
    unused.sort()
    return unused


def walk_files(root: str | os.PathLike[str]) -> Iterator[str]:
    for dirpath, dirnames, filenames in os.walk(root, onerror=_log_walk_error):
        dirnames.sort()
        for name in sorted(filenames):
            yield os.path.join(dirpath, name)


def delete_files(files: Iterable[str]) -> int:
    deleted = 0
    for file_path in files:
        path = Path(file_path)
        if not path.exists():
            continue
        path.unlink()
        logger.debug("Deleted %s", path)
        deleted += 1
    return deleted


def _validate_root(root: str | os.PathLike[str]) -> str:
    path = Path(root)
    if not path.is_dir():
        raise ConfigurationError(
            f"Path does not exist or is not a directory: {normalize_path(path)}"
        )
    return normalize_path(path)


def _select_syntax(
    root: str,
    entry_points: Sequence[str | os.PathLike[str]] | None,
    syntax: str | Syntax | None,
) -> Syntax:
    if isinstance(syntax, Syntax):
        return syntax
    if syntax:
        return get_syntax(syntax)
    for entry in entry_points or ():
        found = syntax_for_path(entry)
        if found is not None:
            return found
    return detect_syntax(root)


def _strip_delimiters(pattern: str) -> str:
    if len(pattern) >= 2 and pattern.startswith("/") and pattern.endswith("/"):
        return pattern[1:-1]
    return pattern


def _is_excluded(path: str, exclusions: Iterable[re.Pattern[str]]) -> bool:
    return any(exclusion.search(path) for exclusion in exclusions)


def _log_walk_error(error: OSError) -> None:
    logger.warning("Could not list %s: %s", error.filename, error)
