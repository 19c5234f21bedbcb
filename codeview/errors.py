"""
Error taxonomy for CodeView.

FetchError and ParseError are fatal to initialization: the viewer shows a
single error message instead of a graph. PreconditionError marks one bad
record and is handled by skipping that record.
"""


class CodeViewError(Exception):
    """Base class for all viewer errors."""


class FetchError(CodeViewError):
    """The graph document could not be retrieved (transport, HTTP, or file error)."""

    def __init__(self, location: str, reason: str) -> None:
        self.location = location
        self.reason = reason
        super().__init__(f"Failed to fetch {location}: {reason}")


class ParseError(CodeViewError):
    """The document does not decode to the expected structure."""


class PreconditionError(CodeViewError):
    """A required field is absent or malformed on an otherwise-parsed record."""

    def __init__(self, record_id: str, field_name: str, reason: str = "missing") -> None:
        self.record_id = record_id
        self.field_name = field_name
        super().__init__(f"Record {record_id!r}: field {field_name!r} {reason}")
