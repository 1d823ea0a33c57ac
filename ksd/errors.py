"""Error types raised while building Kusto declarations."""


class KsdError(Exception):
    """Base class for recoverable, per-file faults."""


class ParseError(KsdError):
    """A grammar violation at a known position in the source."""

    def __init__(self, row: int, col: int, msg: str):
        super().__init__(f"[{row},{col}] {msg}")
        self.row = row
        self.col = col
        self.msg = msg


class StreamError(KsdError):
    """Reading the source stream failed for a reason other than end of input."""


class BuildError(KsdError):
    """A fault tied to the source file it was raised for."""

    def __init__(self, path: str, cause: Exception):
        super().__init__(f"building file {path}: {cause}")
        self.path = path
        self.cause = cause


class InternalError(Exception):
    """An invariant of the declaration model was broken. Not an input error."""


class ConfigError(KsdError):
    """The build configuration file is missing or malformed."""
