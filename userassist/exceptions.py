"""Standardized exceptions for the UserAssist decoder.

Only failures at the collaborator boundary are raised: a store that cannot be
opened, an export target that cannot be written, or a second scan started
while one is running. Malformed artifact data is never an exception; it is
encoded in the record's layout status instead.
"""


class UserAssistException(Exception):
    """Base exception for UserAssist decoder errors."""

    def __init__(self, message: str, code: str = "INTERNAL_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class StoreUnavailableError(UserAssistException):
    """The key-value store for an owner identity cannot be opened."""

    def __init__(self, owner_identity: str, reason: str | None = None):
        message = f"Registry store for '{owner_identity}' is unavailable"
        if reason:
            message = f"{message}: {reason}"
        self.owner_identity = owner_identity
        super().__init__(message=message, code="STORE_UNAVAILABLE")


class KeyNotFoundError(UserAssistException):
    """A registry key does not exist or cannot be opened."""

    def __init__(self, key_path: str):
        self.key_path = key_path
        super().__init__(message=f"Registry key '{key_path}' not found", code="KEY_NOT_FOUND")


class KeyUnreadableError(KeyNotFoundError):
    """A registry key exists but its cells cannot be parsed."""

    def __init__(self, key_path: str, reason: str | None = None):
        message = f"Registry key '{key_path}' cannot be read"
        if reason:
            message = f"{message}: {reason}"
        self.key_path = key_path
        UserAssistException.__init__(self, message=message, code="KEY_UNREADABLE")


class ValueReadError(UserAssistException):
    """A single registry value could not be read."""

    def __init__(self, key_path: str, name: str, reason: str | None = None):
        message = f"Failed to read value '{name}' under '{key_path}'"
        if reason:
            message = f"{message}: {reason}"
        self.key_path = key_path
        self.name = name
        super().__init__(message=message, code="VALUE_READ_FAILED")


class ScanInProgressError(UserAssistException):
    """A scan was requested while another one is still running."""

    def __init__(self):
        super().__init__(message="A scan is already in progress", code="SCAN_IN_PROGRESS")


class ExportError(UserAssistException):
    """The export destination cannot be created or written."""

    def __init__(self, target: str, reason: str | None = None):
        message = f"Cannot write export to '{target}'"
        if reason:
            message = f"{message}: {reason}"
        self.target = target
        super().__init__(message=message, code="EXPORT_FAILED")
