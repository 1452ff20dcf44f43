from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DanglingImport:
    importer: str | None
    specifier: str
    candidates: tuple[str, ...]


@dataclass(frozen=True)
class ReadFailure:
    path: str
    error: str


@dataclass(frozen=True)
class ImportGraph:
    reachable: frozenset[str]
    dangling_imports: tuple[DanglingImport, ...] = ()
    read_failures: tuple[ReadFailure, ...] = ()


@dataclass(frozen=True)
class ShakeResult:
    root: str
    syntax: str
    entry_points: tuple[str, ...]
    reachable: frozenset[str]
    unused: list[str]
    dangling_imports: tuple[DanglingImport, ...] = ()
    read_failures: tuple[ReadFailure, ...] = ()

    @property
    def found_entry_points(self) -> bool:
        return bool(self.entry_points)
