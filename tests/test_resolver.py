from __future__ import annotations

import os
from pathlib import Path

import pytest

from sass_shake.resolver import (
    ImportGraphBuilder,
    build_import_graph,
    candidate_paths,
    normalize_path,
)
from sass_shake.syntax import SASS, SCSS


def _write(path: Path, content: str = "") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


def test_candidates_try_plain_name_before_partial(tmp_path: Path) -> None:
    directory = normalize_path(tmp_path)
    assert candidate_paths("foo", directory, SCSS) == [
        normalize_path(tmp_path / "foo.scss"),
        normalize_path(tmp_path / "_foo.scss"),
    ]


def test_candidates_follow_directory_prefix(tmp_path: Path) -> None:
    directory = normalize_path(tmp_path)
    assert candidate_paths("sub/foo", directory, SASS) == [
        normalize_path(tmp_path / "sub" / "foo.sass"),
        normalize_path(tmp_path / "sub" / "_foo.sass"),
    ]


def test_candidates_keep_explicit_extension(tmp_path: Path) -> None:
    directory = normalize_path(tmp_path)
    assert candidate_paths("foo.scss", directory, SCSS) == [
        normalize_path(tmp_path / "foo.scss"),
        normalize_path(tmp_path / "_foo.scss"),
    ]


def test_candidates_keep_extension_of_enabled_syntax(tmp_path: Path) -> None:
    directory = normalize_path(tmp_path)
    assert candidate_paths("legacy.sass", directory, SCSS, (SCSS, SASS)) == [
        normalize_path(tmp_path / "legacy.sass"),
        normalize_path(tmp_path / "_legacy.sass"),
    ]
    assert candidate_paths("legacy.sass", directory, SCSS) == [
        normalize_path(tmp_path / "legacy.sass.scss"),
        normalize_path(tmp_path / "_legacy.sass.scss"),
    ]


@pytest.mark.parametrize(
    "specifier",
    ["theme.css", "http://example.com/a", "https://example.com/a", "//cdn/a", "url(a.scss)", ""],
)
def test_plain_css_imports_have_no_candidates(tmp_path: Path, specifier: str) -> None:
    assert candidate_paths(specifier, normalize_path(tmp_path), SCSS) == []


def test_normalize_path_is_absolute_and_collapses_dots(tmp_path: Path) -> None:
    path = normalize_path(tmp_path / "a" / ".." / "b.scss")
    assert os.path.isabs(path)
    assert path == normalize_path(tmp_path / "b.scss")
    assert "\\" not in path


def test_plain_name_wins_over_partial(tmp_path: Path) -> None:
    _write(tmp_path / "main.scss", '@import "foo";\n')
    _write(tmp_path / "foo.scss")
    _write(tmp_path / "_foo.scss")

    graph = build_import_graph([tmp_path / "main.scss"], SCSS)

    assert normalize_path(tmp_path / "foo.scss") in graph.reachable
    assert normalize_path(tmp_path / "_foo.scss") not in graph.reachable


def test_self_import_terminates(tmp_path: Path) -> None:
    _write(tmp_path / "main.scss", '@import "main";\n')

    graph = build_import_graph([tmp_path / "main.scss"], SCSS)

    assert graph.reachable == frozenset({normalize_path(tmp_path / "main.scss")})


def test_mutual_imports_terminate(tmp_path: Path) -> None:
    _write(tmp_path / "a.sass", "@import b\n")
    _write(tmp_path / "b.sass", "@import a\n")

    graph = build_import_graph([tmp_path / "a.sass"], SASS)

    assert graph.reachable == frozenset(
        {normalize_path(tmp_path / "a.sass"), normalize_path(tmp_path / "b.sass")}
    )


def test_imports_resolve_relative_to_importing_file(tmp_path: Path) -> None:
    _write(tmp_path / "main.scss", '@import "components/button";\n')
    _write(tmp_path / "components" / "_button.scss", '@import "mixins";\n')
    _write(tmp_path / "components" / "_mixins.scss")
    _write(tmp_path / "_mixins.scss")

    graph = build_import_graph([tmp_path / "main.scss"], SCSS)

    assert normalize_path(tmp_path / "components" / "_mixins.scss") in graph.reachable
    assert normalize_path(tmp_path / "_mixins.scss") not in graph.reachable


def test_dangling_import_is_recorded(tmp_path: Path) -> None:
    _write(tmp_path / "main.scss", '@import "missing";\n')

    graph = build_import_graph([tmp_path / "main.scss"], SCSS)

    assert len(graph.dangling_imports) == 1
    dangling = graph.dangling_imports[0]
    assert dangling.importer == normalize_path(tmp_path / "main.scss")
    assert dangling.specifier == "missing"
    assert dangling.candidates[1] == normalize_path(tmp_path / "_missing.scss")


def test_dangling_import_logs_only_when_enabled(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    _write(tmp_path / "main.scss", '@import "missing";\n')

    with caplog.at_level("WARNING", logger="sass_shake"):
        build_import_graph([tmp_path / "main.scss"], SCSS)
    assert "Unresolved import" not in caplog.text

    with caplog.at_level("WARNING", logger="sass_shake"):
        build_import_graph([tmp_path / "main.scss"], SCSS, log_missing_imports=True)
    assert "Unresolved import 'missing'" in caplog.text


def test_missing_entry_point_is_not_fatal(tmp_path: Path) -> None:
    _write(tmp_path / "main.scss")

    graph = build_import_graph([tmp_path / "nope.scss", tmp_path / "main.scss"], SCSS)

    assert graph.reachable == frozenset({normalize_path(tmp_path / "main.scss")})
    assert graph.dangling_imports[0].importer is None


def test_unreadable_candidate_is_reported(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    _write(tmp_path / "main.scss", '@import "folder";\n')
    (tmp_path / "folder.scss").mkdir()
    _write(tmp_path / "_folder.scss")

    with caplog.at_level("WARNING", logger="sass_shake"):
        graph = build_import_graph([tmp_path / "main.scss"], SCSS)

    failed = normalize_path(tmp_path / "folder.scss")
    warnings = [r for r in caplog.records if r.levelname == "WARNING"]
    assert any(r.getMessage().startswith(f"Could not read {failed}") for r in warnings)
    assert [failure.path for failure in graph.read_failures] == [failed]
    assert failed not in graph.reachable
    assert normalize_path(tmp_path / "_folder.scss") not in graph.reachable
    assert graph.dangling_imports == ()


def test_builder_can_be_reused(tmp_path: Path) -> None:
    _write(tmp_path / "a.scss")
    _write(tmp_path / "b.scss")
    builder = ImportGraphBuilder(SCSS)

    first = builder.build([tmp_path / "a.scss"])
    second = builder.build([tmp_path / "b.scss"])

    assert first.reachable == frozenset({normalize_path(tmp_path / "a.scss")})
    assert second.reachable == frozenset({normalize_path(tmp_path / "b.scss")})
