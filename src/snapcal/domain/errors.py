"""Storage error taxonomy.

Every failure raised by the storage layer is a ``StorageError`` carrying a
``kind`` so callers can branch on it and a message that is safe to show to
the user.
"""

from enum import StrEnum


class StorageErrorKind(StrEnum):
    """Classification of storage failures."""

    NOT_AUTHENTICATED = "not_authenticated"
    DEVICE_STORAGE_FULL = "device_storage_full"
    REMOTE_QUOTA_EXCEEDED = "remote_quota_exceeded"
    REMOTE_SCHEMA_MISSING = "remote_schema_missing"
    REMOTE_PERMISSION_DENIED = "remote_permission_denied"
    REMOTE_BACKEND_ERROR = "remote_backend_error"
    SYNC_FAILED = "sync_failed"
    WRONG_MODE = "wrong_mode"


class StorageError(Exception):
    """Base class for storage layer failures."""

    kind: StorageErrorKind = StorageErrorKind.REMOTE_BACKEND_ERROR
    default_message = "Storage operation failed."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NotAuthenticatedError(StorageError):
    """Raised when an operation needs a signed-in user."""

    kind = StorageErrorKind.NOT_AUTHENTICATED
    default_message = "You must be signed in to do this."


class DeviceStorageFullError(StorageError):
    """Raised when the on-device store has no room left."""

    kind = StorageErrorKind.DEVICE_STORAGE_FULL
    default_message = (
        "Device storage full: your local history (with photos) has reached the "
        "storage limit. Delete some old entries or switch to cloud storage."
    )


class RemoteStorageError(StorageError):
    """Base class for errors reported by the remote backend."""

    def __init__(self, message: str | None = None, *, raw_message: str = "") -> None:
        self.raw_message = raw_message
        super().__init__(message)


class RemoteQuotaExceededError(RemoteStorageError):
    """Raised when the remote storage quota is exhausted."""

    kind = StorageErrorKind.REMOTE_QUOTA_EXCEEDED
    default_message = (
        "Cloud quota reached: your storage limit has been exceeded. "
        "Try deleting old entries."
    )


class RemoteSchemaMissingError(RemoteStorageError):
    """Raised when the remote tables or columns do not exist."""

    kind = StorageErrorKind.REMOTE_SCHEMA_MISSING
    default_message = (
        "Database setup required: the 'food_entries' table is missing. "
        "Run the setup script before saving."
    )


class RemotePermissionDeniedError(RemoteStorageError):
    """Raised when row-level security rejects the request."""

    kind = StorageErrorKind.REMOTE_PERMISSION_DENIED
    default_message = (
        "Permission denied: row-level security policies are blocking this "
        "request. Authenticated users need INSERT and UPDATE access."
    )


class RemoteBackendError(RemoteStorageError):
    """Raised for any other remote failure."""

    kind = StorageErrorKind.REMOTE_BACKEND_ERROR
    default_message = "Cloud request failed."


class SyncFailedError(StorageError):
    """Raised when a migration chunk could not be uploaded."""

    kind = StorageErrorKind.SYNC_FAILED

    def __init__(self, offset: int, reason: str) -> None:
        self.offset = offset
        self.reason = reason
        super().__init__(f"Sync failed at item {offset + 1}: {reason}")


class WrongModeError(StorageError):
    """Raised when an operation is not available in the current mode."""

    kind = StorageErrorKind.WRONG_MODE
    default_message = "This operation is not available in the current mode."
