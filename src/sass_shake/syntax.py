"""Import grammars for the two stylesheet syntaxes.

``BraceSyntax`` covers ``.scss`` files, where one ``@import`` directive may list
several quoted specifiers. ``IndentSyntax`` covers ``.sass`` files, where each
directive sits on its own line and names one bare specifier. A run picks one
``Syntax`` up front and passes it to every parsing and resolution call.
"""

from __future__ import annotations

import os
import re
from abc import ABC, abstractmethod
from pathlib import Path

from sass_shake.errors import ConfigurationError

PARTIAL_PREFIX = "_"

_BLOCK_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
_LINE_COMMENT_RE = re.compile(r"^[ \t]*//.*$", re.MULTILINE)

_QUOTED = r"\"[^\"\n]*\"|'[^'\n]*'"
_BRACE_IMPORT_RE = re.compile(
    rf"@import\s+((?:{_QUOTED})(?:\s*,\s*(?:{_QUOTED}))*)"
)
_QUOTED_RE = re.compile(_QUOTED)
_INDENT_IMPORT_RE = re.compile(r"^[ \t]*@import[ \t]+(.+?)[ \t]*$", re.MULTILINE)

_TRIM_CHARS = " \t\r\n'\""


class Syntax(ABC):
    name: str
    extension: str

    def parse_imports(self, source: str) -> list[str]:
        """Return the raw import specifiers of ``source`` in document order."""
        return [spec for spec in self._specifiers(_strip_comments(source)) if spec]

    @abstractmethod
    def _specifiers(self, source: str) -> list[str]:
        raise NotImplementedError

    def matches(self, filename: str) -> bool:
        return filename.endswith(self.extension)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class BraceSyntax(Syntax):
    name = "scss"
    extension = ".scss"

    def _specifiers(self, source: str) -> list[str]:
        specifiers: list[str] = []
        for directive in _BRACE_IMPORT_RE.finditer(source):
            for quoted in _QUOTED_RE.finditer(directive.group(1)):
                specifiers.append(quoted.group(0).strip(_TRIM_CHARS))
        return specifiers


class IndentSyntax(Syntax):
    name = "sass"
    extension = ".sass"

    def _specifiers(self, source: str) -> list[str]:
        return [m.group(1).strip(_TRIM_CHARS) for m in _INDENT_IMPORT_RE.finditer(source)]


SCSS = BraceSyntax()
SASS = IndentSyntax()
# Declaration order breaks detection ties.
SYNTAXES: tuple[Syntax, ...] = (SCSS, SASS)
STYLESHEET_EXTENSIONS = tuple(syntax.extension for syntax in SYNTAXES)


def get_syntax(name: str) -> Syntax:
    key = name.strip().lower().lstrip(".")
    for syntax in SYNTAXES:
        if syntax.name == key:
            return syntax
    choices = ", ".join(syntax.name for syntax in SYNTAXES)
    raise ConfigurationError(f"Unknown syntax {name!r} (expected one of: {choices})")


def syntax_for_path(path: str | Path) -> Syntax | None:
    name = os.fspath(path)
    for syntax in SYNTAXES:
        if syntax.matches(name):
            return syntax
    return None


def detect_syntax(directory: str | Path) -> Syntax:
    """Pick the syntax whose extension appears in the most top-level file names."""
    counts = {syntax.name: 0 for syntax in SYNTAXES}
    with os.scandir(directory) as entries:
        for entry in entries:
            if not entry.is_file():
                continue
            for syntax in SYNTAXES:
                if syntax.extension in entry.name:
                    counts[syntax.name] += 1
    best = SYNTAXES[0]
    for syntax in SYNTAXES[1:]:
        if counts[syntax.name] > counts[best.name]:
            best = syntax
    return best


def _strip_comments(source: str) -> str:
    source = _BLOCK_COMMENT_RE.sub(lambda m: "\n" * m.group(0).count("\n"), source)
    return _LINE_COMMENT_RE.sub("", source)
