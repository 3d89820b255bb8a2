"""
Custom exception hierarchy for the rdstext application.

The text pipeline itself never raises; these exceptions belong to the
outer surface (configuration, file IO and the command line).
"""


class RdsTextError(Exception):
    """Base class for all application-specific errors."""
    pass


class ConfigurationError(RdsTextError):
    """Raised when there are configuration-related issues."""
    pass


class FilesystemError(RdsTextError):
    """Raised when filesystem operations fail."""

    def __init__(self, path: str, operation: str, reason: str = None):
        self.path = path
        self.operation = operation
        self.reason = reason

        message = f"Filesystem error during {operation} on {path}"
        if reason:
            message += f": {reason}"

        super().__init__(message)


class InputFileError(FilesystemError):
    """Raised when the playout file is missing or holds no usable record."""

    def __init__(self, path: str, reason: str = None):
        super().__init__(path, "read", reason or "no record found")
