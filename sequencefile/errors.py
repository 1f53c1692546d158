# ==================================================
# sequencefile/errors.py
# ==================================================
"""Exception hierarchy.

Every failure the package reports is a :class:`SequenceFileError`, which is an
``OSError`` so callers that already handle I/O failures catch it unchanged.
"""


class SequenceFileError(OSError):
    """Base class for container read/write failures."""


class CorruptFileError(SequenceFileError):
    """The bytes on disk do not form a valid container."""


class CodecUnavailableError(SequenceFileError):
    """The requested compression codec is unknown or its library is missing."""


class WriterStateError(SequenceFileError):
    """An operation was attempted on a writer that is not open."""


class UnsupportedWritableError(SequenceFileError):
    """No serializer is registered for a key/value class name."""
