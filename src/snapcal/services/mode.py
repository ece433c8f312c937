"""Local versus cloud mode resolution."""

import logging

from snapcal.adapters.local_storage import (
    MODE_PREFERENCE_KEY,
    KeyValueStore,
    StorageQuotaError,
)
from snapcal.config import Settings
from snapcal.domain.models import AppMode

_logger = logging.getLogger(__name__)


def is_remote_configured(settings: Settings) -> bool:
    """Return True when a usable Supabase endpoint and key are configured."""
    url = (settings.supabase_url or "").strip()
    key = (settings.supabase_anon_key or "").strip()
    return bool(url) and bool(key) and url.startswith("http")


def resolve_mode(settings: Settings, store: KeyValueStore) -> AppMode:
    """Pick the storage mode for this process.

    Cloud is used when the backend is configured and the stored preference
    is not ``local``. The result is persisted only when the backend is
    configured, so an unconfigured start never overwrites a cloud preference.
    """
    if not is_remote_configured(settings):
        _logger.info("Supabase is not configured; using local storage")
        return AppMode.LOCAL
    preference = store.get_item(MODE_PREFERENCE_KEY)
    mode = AppMode.LOCAL if preference == AppMode.LOCAL else AppMode.CLOUD
    if mode is AppMode.LOCAL:
        _logger.info("Supabase configured but user prefers local storage")
    try:
        store.set_item(MODE_PREFERENCE_KEY, mode.value)
    except StorageQuotaError:
        _logger.warning("Could not persist mode preference %s", mode.value)
    return mode


def set_mode_preference(
    settings: Settings, store: KeyValueStore, mode: AppMode
) -> None:
    """Persist an explicit mode switch; it takes effect on the next start."""
    if mode is AppMode.CLOUD and not is_remote_configured(settings):
        raise ValueError("Cloud mode requires SNAPCAL_SUPABASE_URL and key")
    store.set_item(MODE_PREFERENCE_KEY, mode.value)
    _logger.info("Mode preference set to %s; restart to apply", mode.value)
