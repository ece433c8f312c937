"""Remote schema health check."""

from dataclasses import dataclass
from typing import Protocol

from snapcal.domain.errors import RemoteSchemaMissingError, RemoteStorageError
from snapcal.domain.models import AppMode


class SchemaProbe(Protocol):
    """Minimal read against the primary entries table."""

    def probe_entries_table(self) -> None:
        """Select at most one row; raise a classified error on failure."""


@dataclass(frozen=True)
class SchemaCheckResult:
    """Outcome of a schema check."""

    ok: bool
    missing_tables: bool = False
    error: str | None = None


@dataclass
class HealthService:
    """Checks that the remote backend exposes the expected tables."""

    mode: AppMode
    probe: SchemaProbe | None = None

    def check_remote_schema(self) -> SchemaCheckResult:
        """Return whether writes to the remote store can be attempted."""
        if self.mode is AppMode.LOCAL or self.probe is None:
            return SchemaCheckResult(ok=True)
        try:
            self.probe.probe_entries_table()
        except RemoteSchemaMissingError:
            return SchemaCheckResult(
                ok=False, missing_tables=True, error="Tables missing"
            )
        except RemoteStorageError as exc:
            return SchemaCheckResult(ok=False, error=exc.raw_message or exc.message)
        return SchemaCheckResult(ok=True)
