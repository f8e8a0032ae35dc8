"""Error types raised by the registry, schema and migration steps."""


class TagClusterError(Exception):
    """Base class for all tagclusters errors."""


class RegistryFormatError(TagClusterError):
    """The cluster registry file is missing, unreadable or malformed."""


class SchemaError(TagClusterError):
    """A column or index change failed for a reason other than "already exists"."""


class RowProcessingError(TagClusterError):
    """A single row could not be processed; the run continues with the next row."""

    def __init__(self, message: str, row_id=None):
        super().__init__(message)
        self.row_id = row_id


class FileReadError(RowProcessingError):
    """A document's source file could not be read."""
