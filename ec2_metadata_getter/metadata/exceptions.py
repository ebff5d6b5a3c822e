class MetadataError(Exception):
    """Base class for everything raised by the metadata getter"""


class CacheDirectoryError(MetadataError):
    """Cache directory is missing or not writable"""


class NotOnEc2Error(MetadataError, RuntimeError):
    """Metadata endpoint unreachable and dummy mode is off"""


class UnsupportedFieldError(MetadataError, AttributeError):
    """Field name is not in the lookup table"""

    def __init__(self, field):
        super().__init__(f"Unsupported metadata field: {field}. Only get operations allowed.")
        self.field = field
