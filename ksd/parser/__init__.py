"""Lexer and parser for Kusto declaration files."""

from .declaration import DeclarationParser, parse
from .lexer import Cursor, NonDelimiterFound, Read

__all__ = ["Cursor", "DeclarationParser", "NonDelimiterFound", "Read", "parse"]
