"""Classification of Supabase/PostgREST failures."""

import logging
from typing import Any

from snapcal.domain.errors import (
    RemoteBackendError,
    RemotePermissionDeniedError,
    RemoteQuotaExceededError,
    RemoteSchemaMissingError,
    RemoteStorageError,
)

_SCHEMA_CODES = {"42P01", "42703", "PGRST204", "PGRST205"}
_PERMISSION_CODES = {"42501"}
_QUOTA_WORDS = ("quota", "limit", "tier")
_SCHEMA_WORDS = ("relation", "column", "does not exist", "could not find the table")
_PERMISSION_WORDS = ("policy", "permission", "row-level security")

_logger = logging.getLogger(__name__)


def classify_remote_error(exc: Exception, operation: str) -> RemoteStorageError:
    """Map a backend exception to a typed, user-presentable error."""
    message = str(getattr(exc, "message", None) or exc)
    code = str(getattr(exc, "code", None) or "")
    lowered = message.lower()
    _logger.error("Supabase %s error (code=%s): %s", operation, code or "n/a", message)

    if code in _SCHEMA_CODES:
        return RemoteSchemaMissingError(raw_message=message)
    if code in _PERMISSION_CODES:
        return RemotePermissionDeniedError(raw_message=message)
    if any(word in lowered for word in _QUOTA_WORDS):
        return RemoteQuotaExceededError(raw_message=message)
    if any(word in lowered for word in _SCHEMA_WORDS):
        return RemoteSchemaMissingError(raw_message=message)
    if any(word in lowered for word in _PERMISSION_WORDS):
        return RemotePermissionDeniedError(raw_message=message)
    return RemoteBackendError(
        f"Cloud {operation} failed: {message}", raw_message=message
    )


def execute(query: Any, operation: str) -> Any:
    """Run a query builder, raising classified errors on failure."""
    try:
        return query.execute()
    except Exception as exc:
        raise classify_remote_error(exc, operation) from exc
