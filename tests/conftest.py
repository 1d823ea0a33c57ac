"""Shared test fixtures."""

import io
from pathlib import Path

import pytest

from ksd.parser import parse

TESTDATA = Path(__file__).parent / "testdata"


@pytest.fixture
def testdata_dir():
    return TESTDATA


@pytest.fixture
def parse_text():
    """Parse a source string, collecting warnings instead of logging them."""
    def _parse(source: str, warnings: list[str] | None = None):
        sink = warnings.append if warnings is not None else None
        return parse(io.StringIO(source), on_warning=sink)

    return _parse


@pytest.fixture
def source_tree(tmp_path):
    """A small source tree with one broken file among good ones."""
    root = tmp_path / "src"
    (root / "functions").mkdir(parents=True)
    (root / "tables").mkdir()

    (root / "functions" / "good.kql").write_text("// Good.\nlet Good = () { print 1 }\n")
    (root / "functions" / "broken.kql").write_text("// Broken.\nlet Broken$ = () { print 2 }\n")
    (root / "tables" / "seed.csl").write_text(
        "let Seed = datatable(Id:long) [ 1, 2, 3 ]\n"
    )
    (root / "notes.md").write_text("# notes\n")
    return root
