"""Exceptions raised while embedding images."""


class EmbedError(Exception):
    """Base class for per-reference failures.

    These never escape ``convert``: each one is recorded as a skipped
    reference and the original text is left in place.
    """

    reason = "failed"


class ReferenceUnresolved(EmbedError):
    """No file in the vault matches the referenced path."""

    reason = "not found"


class DisallowedExtension(EmbedError):
    """The resolved file's extension is not in the allow-list."""

    reason = "unsupported type"


class FileTooLarge(EmbedError):
    """The resolved file exceeds the configured size limit."""

    reason = "too large"


class ReadFailure(EmbedError):
    """Reading or stat-ing the file raised an I/O error."""

    reason = "read error"


class ConversionError(Exception):
    """The conversion of a whole document failed unexpectedly."""
