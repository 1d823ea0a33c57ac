"""Tests for building source trees."""

import io
from pathlib import Path

import pytest

from ksd.builder import Builder, build_file
from ksd.config import BuildConfig
from ksd.errors import BuildError, ParseError
from ksd.models import DeclarationKind


def test_build_file_parses_and_emits():
    writer = io.StringIO()
    decl = build_file(io.StringIO("// doc\nlet x=(any){ok}"), writer, "a\\b")
    assert decl.kind is DeclarationKind.FUNCTION
    assert writer.getvalue() == '.create-or-alter function with (folder="a/b",docstring="doc") x (any){ok}'


def test_build_file_propagates_parse_errors():
    with pytest.raises(ParseError):
        build_file(io.StringIO("let x=datatable(a)["), io.StringIO(), "x")


def test_build_tree_matches_golden_outputs(testdata_dir, tmp_path):
    inputs = testdata_dir / "build" / "inputs"
    expected_root = testdata_dir / "build" / "outputs"

    result = Builder().build_tree(inputs, tmp_path)

    assert result.ok, result.errors
    assert result.skipped == ["README.txt"]

    expected = sorted(
        p.relative_to(expected_root).as_posix() for p in expected_root.rglob("*") if p.is_file()
    )
    assert sorted(result.built) == expected

    for rel in expected:
        actual = (tmp_path / rel).read_bytes()
        assert actual == (expected_root / rel).read_bytes(), rel


def test_build_tree_isolates_broken_files(source_tree):
    result = Builder().build_tree(source_tree)
    out_root = source_tree / "kout"

    assert result.built == ["functions/good.kql", "tables/seed.csl"]
    assert result.skipped == ["notes.md"]
    assert len(result.errors) == 1

    error = result.errors[0]
    assert isinstance(error, BuildError)
    assert error.path == "functions/broken.kql"
    assert isinstance(error.cause, ParseError)
    assert "functions/broken.kql" in str(error)
    assert "[2,11]" in str(error)

    assert (out_root / "functions" / "good.kql").read_text() == (
        '.create-or-alter function with (folder="functions",docstring="Good.") Good () { print 1 }\n'
    )
    assert not (out_root / "functions" / "broken.kql").exists()


def test_build_tree_collects_table_warnings(source_tree):
    result = Builder().build_tree(source_tree)
    assert len(result.warnings) == 1
    assert result.warnings[0].startswith("tables/seed.csl: ")
    assert "1, 2, 3" in result.warnings[0]
    assert (source_tree / "kout" / "tables" / "seed.csl").read_text() == (
        '.create-merge table Seed(Id:long) (folder="tables",docstring="")\n'
    )


def test_build_tree_does_not_read_its_own_output(source_tree):
    builder = Builder()
    builder.build_tree(source_tree)
    second = builder.build_tree(source_tree)
    assert not any(name.startswith("kout/") for name in second.built + second.skipped)
    assert not (source_tree / "kout" / "kout").exists()


def test_build_tree_honors_config(source_tree):
    (source_tree / "drafts").mkdir()
    (source_tree / "drafts" / "wip.kql").write_text("let wip = (")
    (source_tree / "extra.kusto").write_text("let Extra = () {}")

    config = BuildConfig(out_dir="build", extensions=[".kusto"], skip_dirs=["drafts"])
    result = Builder(config).build_tree(source_tree)

    assert result.built == ["extra.kusto"]
    assert result.ok
    assert (source_tree / "build" / "extra.kusto").exists()


def test_is_source_file():
    builder = Builder()
    assert builder.is_source_file(Path("a.kql"))
    assert builder.is_source_file(Path("a.CSL"))
    assert builder.is_source_file(Path("a.kusto"))
    assert not builder.is_source_file(Path("a.txt"))


def test_skip_dirs_only_match_directories(source_tree):
    (source_tree / "drafts").write_text("not a directory")

    config = BuildConfig(skip_dirs=["drafts"])
    result = Builder(config).build_tree(source_tree)

    assert "drafts" in result.skipped
