"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import Client, create_client

from snapcal.adapters.local_entry_repository import LocalEntryRepository
from snapcal.adapters.local_identity import LocalIdentityProvider
from snapcal.adapters.local_profile_repository import LocalProfileRepository
from snapcal.adapters.local_storage import FileKeyValueStore, KeyValueStore
from snapcal.adapters.local_summary_repository import LocalSummaryRepository
from snapcal.adapters.local_user_settings_repository import (
    LocalUserSettingsRepository,
)
from snapcal.adapters.supabase_entry_repository import SupabaseEntryRepository
from snapcal.adapters.supabase_identity import SupabaseIdentityProvider
from snapcal.adapters.supabase_profile_repository import SupabaseProfileRepository
from snapcal.adapters.supabase_schema_probe import SupabaseSchemaProbe
from snapcal.adapters.supabase_summary_repository import SupabaseSummaryRepository
from snapcal.adapters.supabase_user_settings_repository import (
    SupabaseUserSettingsRepository,
)
from snapcal.config import Settings
from snapcal.domain.models import AppMode
from snapcal.services.cache import InMemoryCache
from snapcal.services.entries import EntryRepository, EntryService
from snapcal.services.health import HealthService, SchemaProbe
from snapcal.services.migration import MigrationService, RemoteRepositories
from snapcal.services.mode import resolve_mode
from snapcal.services.profiles import ProfileRepository, ProfileService
from snapcal.services.summaries import SummaryRepository, SummaryService
from snapcal.services.user_settings import (
    UserSettingsRepository,
    UserSettingsService,
)
from snapcal.services.users import IdentityProvider, UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies for one process lifetime."""

    settings: Settings
    mode: AppMode
    store: KeyValueStore
    cache: InMemoryCache
    user_service: UserService
    entry_service: EntryService
    summary_service: SummaryService
    user_settings_service: UserSettingsService
    profile_service: ProfileService
    migration_service: MigrationService
    health_service: HealthService


def build_container(
    settings: Settings | None = None,
    store: KeyValueStore | None = None,
    supabase_client: Client | None = None,
) -> AppContainer:
    """Create the default dependency container.

    The storage mode is resolved once here; switching modes needs a restart.
    """
    resolved_settings = settings or Settings()
    local_store = store or FileKeyValueStore(
        resolved_settings.local_storage_dir,
        quota_bytes=resolved_settings.local_storage_quota_bytes,
    )
    mode = resolve_mode(resolved_settings, local_store)
    cache = InMemoryCache()

    local_entries = LocalEntryRepository(local_store)
    local_settings = LocalUserSettingsRepository(local_store)
    local_profiles = LocalProfileRepository(local_store)

    identity: IdentityProvider
    entry_repository: EntryRepository
    summary_repository: SummaryRepository
    settings_repository: UserSettingsRepository
    profile_repository: ProfileRepository
    probe: SchemaProbe | None = None
    remote: RemoteRepositories | None = None
    if mode is AppMode.CLOUD:
        client = supabase_client or create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_anon_key
        )
        identity = SupabaseIdentityProvider(client)
        entry_repository = SupabaseEntryRepository(
            client, list_limit=resolved_settings.remote_list_limit
        )
        summary_repository = SupabaseSummaryRepository(client)
        settings_repository = SupabaseUserSettingsRepository(client)
        profile_repository = SupabaseProfileRepository(client)
        probe = SupabaseSchemaProbe(client)
        remote = RemoteRepositories(
            entries=entry_repository,
            settings=settings_repository,
            profiles=profile_repository,
        )
    else:
        identity = LocalIdentityProvider(local_store)
        entry_repository = local_entries
        summary_repository = LocalSummaryRepository(local_store)
        settings_repository = local_settings
        profile_repository = local_profiles

    user_service = UserService(identity)
    entries_ttl = resolved_settings.entries_cache_ttl_seconds
    settings_ttl = resolved_settings.settings_cache_ttl_seconds
    return AppContainer(
        settings=resolved_settings,
        mode=mode,
        store=local_store,
        cache=cache,
        user_service=user_service,
        entry_service=EntryService(
            repository=entry_repository,
            user_service=user_service,
            cache=cache,
            ttl_seconds=entries_ttl,
        ),
        summary_service=SummaryService(
            repository=summary_repository,
            user_service=user_service,
            cache=cache,
            ttl_seconds=entries_ttl,
            retention_days=resolved_settings.retention_days,
        ),
        user_settings_service=UserSettingsService(
            repository=settings_repository,
            user_service=user_service,
            cache=cache,
            ttl_seconds=settings_ttl,
            local_repository=local_settings if mode is AppMode.CLOUD else None,
        ),
        profile_service=ProfileService(
            repository=profile_repository,
            user_service=user_service,
            cache=cache,
            ttl_seconds=settings_ttl,
        ),
        migration_service=MigrationService(
            mode=mode,
            user_service=user_service,
            store=local_store,
            cache=cache,
            local_entries=local_entries,
            local_settings=local_settings,
            local_profiles=local_profiles,
            remote=remote,
            chunk_size=resolved_settings.migration_chunk_size,
        ),
        health_service=HealthService(mode=mode, probe=probe),
    )
