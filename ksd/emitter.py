"""Render declarations as Kusto management commands."""

from typing import TextIO

from .errors import InternalError
from .models import Declaration, DeclarationKind

FUNCTION_COMMAND = (
    '.create-or-alter function with (folder="{folder}",docstring="{doc}") {name} {body}'
)
TABLE_COMMAND = (
    '.create-merge table {name}{signature} (folder="{folder}",docstring="{doc}")\n'
)


def normalize_folder(folder: str) -> str:
    return folder.replace("\\", "/")


def render(declaration: Declaration, folder: str) -> str:
    """Return the management command that creates ``declaration`` in ``folder``.

    Function commands carry the raw body through to the end of the source, so
    nothing is appended after it. Table commands end with a newline.
    """
    folder = normalize_folder(folder)
    kind = declaration.kind

    if kind is DeclarationKind.FUNCTION:
        return FUNCTION_COMMAND.format(
            folder=folder,
            doc=declaration.doc,
            name=declaration.name,
            body=declaration.body,
        )
    if kind is DeclarationKind.TABLE:
        return TABLE_COMMAND.format(
            name=declaration.name,
            signature=declaration.signature,
            folder=folder,
            doc=declaration.doc,
        )

    raise InternalError(f"unsupported declaration kind: {kind!r}")


def emit(declaration: Declaration, folder: str, sink: TextIO) -> None:
    """Write the command for ``declaration`` to ``sink``."""
    sink.write(render(declaration, folder))
