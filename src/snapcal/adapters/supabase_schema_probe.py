"""Supabase probe for the schema health check."""

from dataclasses import dataclass

from supabase import Client

from snapcal.adapters.supabase_entry_repository import ENTRIES_TABLE
from snapcal.adapters.supabase_errors import execute
from snapcal.services.health import SchemaProbe


@dataclass
class SupabaseSchemaProbe(SchemaProbe):
    """Selects one id from the entries table."""

    client: Client

    def probe_entries_table(self) -> None:
        execute(
            self.client.table(ENTRIES_TABLE).select("id").limit(1),
            "schema check",
        )
