from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable, Sequence
from pathlib import Path

from sass_shake.models import DanglingImport, ImportGraph, ReadFailure
from sass_shake.syntax import PARTIAL_PREFIX, Syntax, syntax_for_path

logger = logging.getLogger(__name__)

# Plain CSS imports are passed through by the compiler and never name a source file.
_PLAIN_CSS_RE = re.compile(r"^(?:https?:)?//|^url\(|\.css$", re.IGNORECASE)


def normalize_path(path: str | os.PathLike[str]) -> str:
    """Absolute, case-normalised path with ``/`` separators.

    Every path stored in or looked up against a reachability set must pass
    through here.
    """
    absolute = os.path.normcase(os.path.abspath(os.fspath(path)))
    if os.sep != "/":
        absolute = absolute.replace(os.sep, "/")
    return absolute


def candidate_paths(
    specifier: str,
    importer_dir: str,
    syntax: Syntax,
    enabled: Sequence[Syntax] = (),
) -> list[str]:
    """Files ``specifier`` may refer to, in the order the compiler tries them.

    A specifier that already carries the extension of ``syntax`` or of one of
    the ``enabled`` syntaxes is tried as written before its partial form.
    """
    specifier = specifier.strip()
    if not specifier or _PLAIN_CSS_RE.search(specifier):
        return []
    directory = importer_dir
    filename = specifier.replace("\\", "/")
    if "/" in filename:
        rel_dir, filename = filename.rsplit("/", 1)
        directory = os.path.join(importer_dir, rel_dir)
    if not filename:
        return []
    explicit = syntax_for_path(filename)
    if explicit is not None and (explicit is syntax or explicit in enabled):
        names = [filename, PARTIAL_PREFIX + filename]
    else:
        names = [filename + syntax.extension, PARTIAL_PREFIX + filename + syntax.extension]
    return [normalize_path(os.path.join(directory, name)) for name in names]


class ImportGraphBuilder:
    """Depth-first walk over the import graph rooted at a set of entry points.

    A file is recorded in the reachable set as soon as it has been read, before
    its own imports are parsed, so self imports and import cycles are never
    walked twice.
    """

    def __init__(
        self,
        syntax: Syntax,
        log_missing_imports: bool = False,
        syntaxes: Sequence[Syntax] = (),
    ) -> None:
        self.syntax = syntax
        self.syntaxes = (syntax,) + tuple(other for other in syntaxes if other is not syntax)
        self.log_missing_imports = log_missing_imports
        self._reachable: set[str] = set()
        self._failures: dict[str, ReadFailure] = {}
        self._dangling: list[DanglingImport] = []

    def build(self, entry_points: Iterable[str | os.PathLike[str]]) -> ImportGraph:
        self._reachable = set()
        self._failures = {}
        self._dangling = []
        pending: list[tuple[str, str]] = []

        for entry in entry_points:
            path = normalize_path(entry)
            logger.debug("Traversing entry point %s", path)
            if not self._enter(path, pending):
                logger.warning("Entry point not found: %s", path)
                self._dangling.append(
                    DanglingImport(importer=None, specifier=os.fspath(entry), candidates=(path,))
                )

        while pending:
            path, source = pending.pop()
            directory = os.path.dirname(path)
            file_syntax = self._syntax_of(path)
            for specifier in file_syntax.parse_imports(source):
                candidates = candidate_paths(specifier, directory, file_syntax, self.syntaxes)
                if not candidates:
                    logger.debug("Skipping non-source import %r in %s", specifier, path)
                    continue
                if not any(self._enter(candidate, pending) for candidate in candidates):
                    self._report_dangling(path, specifier, candidates)

        return ImportGraph(
            reachable=frozenset(self._reachable),
            dangling_imports=tuple(self._dangling),
            read_failures=tuple(self._failures.values()),
        )

    def _syntax_of(self, path: str) -> Syntax:
        found = syntax_for_path(path)
        return found if found in self.syntaxes else self.syntax

    def _enter(self, path: str, pending: list[tuple[str, str]]) -> bool:
        """Visit ``path`` if it exists. Returns False only when it does not."""
        if path in self._reachable or path in self._failures:
            return True
        try:
            source = Path(path).read_text(encoding="utf-8", errors="replace")
        except (FileNotFoundError, NotADirectoryError):
            return False
        except OSError as exc:
            logger.warning("Could not read %s: %s", path, exc)
            self._failures[path] = ReadFailure(path=path, error=str(exc))
            return True
        logger.debug("Visiting %s", path)
        self._reachable.add(path)
        pending.append((path, source))
        return True

    def _report_dangling(self, importer: str, specifier: str, candidates: list[str]) -> None:
        level = logging.WARNING if self.log_missing_imports else logging.DEBUG
        logger.log(level, "Unresolved import %r in %s (tried %s)", specifier, importer, ", ".join(candidates))
        self._dangling.append(
            DanglingImport(importer=importer, specifier=specifier, candidates=tuple(candidates))
        )


def build_import_graph(
    entry_points: Iterable[str | os.PathLike[str]],
    syntax: Syntax,
    log_missing_imports: bool = False,
    syntaxes: Sequence[Syntax] = (),
) -> ImportGraph:
    builder = ImportGraphBuilder(syntax, log_missing_imports=log_missing_imports, syntaxes=syntaxes)
    return builder.build(entry_points)
