"""
Annotate errors.

Everything the tool reports to the user derives from AnnotateError, so the
CLI can turn it into a one-line message instead of a traceback.
"""


class AnnotateError(Exception):
    """Base exception for annotate failures."""

    pass


class HomeNotSetError(AnnotateError):
    """HOME is missing, so the annotations file cannot be located."""

    pass


class ConfigError(AnnotateError):
    """The user config override file could not be read."""

    pass


class ParseError(AnnotateError, ValueError):
    """A stored line is not a valid annotation record."""

    def __init__(self, line: str, reason: str):
        super().__init__(f"{reason}: {line!r}")
        self.line = line
        self.reason = reason


class MissingDelimiterError(ParseError):
    """No space separates the timestamp from the content."""

    def __init__(self, line: str):
        super().__init__(line, "missing 'created_at' delimiter")


class InvalidTimestampError(ParseError):
    """The timestamp prefix is not an unsigned 64-bit integer."""

    def __init__(self, line: str, prefix: str):
        super().__init__(line, f"invalid 'created_at' value {prefix!r}")
        self.prefix = prefix


class CorruptStoreError(AnnotateError):
    """The annotations file holds a line that does not decode or parse."""

    def __init__(self, path, lineno: int, error: Exception):
        super().__init__(f"Annotations file {path} is corrupt at line {lineno}: {error}")
        self.path = path
        self.lineno = lineno


class FutureTimestampError(AnnotateError, ValueError):
    """An annotation claims to be created after 'now'."""

    pass


class InvalidContentError(AnnotateError, ValueError):
    """Annotation content cannot be stored on a single line."""

    pass


class SessionStateError(AnnotateError):
    """An interactive event arrived in a mode that does not accept it."""

    pass
