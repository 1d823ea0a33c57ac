"""Tests for rendering management commands."""

import io

import pytest

from ksd.emitter import emit, normalize_folder, render
from ksd.errors import InternalError
from ksd.models import Declaration, DeclarationKind


@pytest.mark.parametrize("source, folder, expected", [
    (
        "let x=(any){ok}",
        "fns",
        '.create-or-alter function with (folder="fns",docstring="") x (any){ok}',
    ),
    (
        "let x = datatable(any) [ ok ]",
        "tables",
        '.create-merge table x(any) (folder="tables",docstring="")\n',
    ),
    (
        "//c1\n//c2\nlet x=(any){ok}",
        "fns",
        '.create-or-alter function with (folder="fns",docstring="c1 c2") x (any){ok}',
    ),
    (
        '// The "raw" feed\nlet Feed = datatable (Id:long, Name:string) []\n',
        "ingest/raw",
        '.create-merge table Feed(Id:long, Name:string) '
        '(folder="ingest/raw",docstring="The \\"raw\\" feed")\n',
    ),
    (
        "let\n  f =\n  (a:string)\n{\n  print a\n}\n",
        ".",
        '.create-or-alter function with (folder=".",docstring="") f (a:string)\n{\n  print a\n}\n',
    ),
])
def test_golden_commands(parse_text, source, folder, expected):
    decl = parse_text(source, warnings=[])
    assert render(decl, folder) == expected


def test_emit_writes_to_sink(parse_text):
    sink = io.StringIO()
    emit(parse_text("let x=(any){ok}"), "fns", sink)
    assert sink.getvalue() == '.create-or-alter function with (folder="fns",docstring="") x (any){ok}'


def test_folder_separators_are_normalized():
    assert normalize_folder("a\\b\\c") == "a/b/c"
    decl = Declaration(name="t", kind=DeclarationKind.TABLE, signature="(a:long)")
    assert 'folder="a/b"' in render(decl, "a\\b")


def test_function_braces_are_not_format_fields():
    decl = Declaration(
        name="f",
        kind=DeclarationKind.FUNCTION,
        signature="()",
        body="() { print '{name}' }",
        doc="uses {braces}",
    )
    assert render(decl, "x") == (
        '.create-or-alter function with (folder="x",docstring="uses {braces}") '
        "f () { print '{name}' }"
    )


def test_unknown_kind_is_internal_error():
    decl = Declaration(name="v", kind="view")
    with pytest.raises(InternalError):
        render(decl, "x")
