"""Exception classes for mesita.

Not-applicable conditions (no table at the cursor, deleting the last row, an
already-sorted region) are never raised; they come back as negative results.
These exceptions cover programming errors and host I/O failures.
"""

from __future__ import annotations


class MesitaError(Exception):
    """Base exception for all mesita errors.

    Subclass this for specific error categories.
    """

    pass


class CookieError(MesitaError):
    """A column cookie failed strict validation.

    Formatting never raises this; malformed cookies fall back to the default
    column spec. Only ``require_cookie`` raises it.
    """

    def __init__(self, text: str, column: int | None = None) -> None:
        """Initialize cookie error.

        Args:
            text: The offending cell text
            column: Zero-based column index (optional)
        """
        self.text = text
        self.column = column

        location = f" in column {column + 1}" if column is not None else ""
        super().__init__(f"Invalid column cookie {text!r}{location}")


class ExportFormatError(MesitaError):
    """Raised when an unknown export format is requested."""

    def __init__(self, fmt: str) -> None:
        self.fmt = fmt
        super().__init__(f"Unknown export format '{fmt}'")


class HostError(MesitaError):
    """Failure reported by a host collaborator.

    Raised by clipboard, prompt and file-save implementations. The session
    turns it into a negative result before any edit is issued.
    """

    def __init__(self, operation: str, message: str) -> None:
        """Initialize host error.

        Args:
            operation: Collaborator operation that failed (e.g., "clipboard.read")
            message: Description of the failure
        """
        self.operation = operation
        self.message = message
        super().__init__(f"{operation}: {message}")
