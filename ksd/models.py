"""Shared data models for parsed declarations."""

from dataclasses import dataclass, field
from enum import Enum

from .errors import BuildError


class DeclarationKind(Enum):
    """The two declaration shapes the parser recognizes."""
    FUNCTION = "function"
    TABLE = "table"


@dataclass(frozen=True)
class Declaration:
    """A parsed function or table declaration."""
    name: str
    kind: DeclarationKind
    signature: str = ""  # "(a:string, b:long)", verbatim
    body: str = ""  # function: "(...){...}" through end of input; table: ""
    doc: str = ""  # leading // comments, quote-escaped


@dataclass
class BuildResult:
    """Outcome of building a source tree."""
    source_root: str
    out_root: str
    built: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    errors: list[BuildError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors
