"""Build Kusto function and table declarations into management commands."""

from .builder import Builder, build_file
from .emitter import emit, render
from .errors import BuildError, ConfigError, InternalError, KsdError, ParseError, StreamError
from .models import BuildResult, Declaration, DeclarationKind
from .parser import parse

__all__ = [
    "Builder",
    "BuildError",
    "BuildResult",
    "ConfigError",
    "Declaration",
    "DeclarationKind",
    "InternalError",
    "KsdError",
    "ParseError",
    "StreamError",
    "build_file",
    "emit",
    "parse",
    "render",
]
