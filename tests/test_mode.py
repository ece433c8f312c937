"""Tests for storage mode resolution."""

import pytest

from snapcal.adapters.local_storage import MODE_PREFERENCE_KEY
from snapcal.config import Settings
from snapcal.domain.models import AppMode
from snapcal.services.mode import (
    is_remote_configured,
    resolve_mode,
    set_mode_preference,
)
from tests.conftest import InMemoryKeyValueStore


@pytest.mark.parametrize(
    ("url", "key", "expected"),
    [
        ("https://example.supabase.co", "anon-key", True),
        ("http://localhost:54321", "anon-key", True),
        ("https://example.supabase.co", "", False),
        ("  ", "anon-key", False),
        ("example.supabase.co", "anon-key", False),
        (None, None, False),
    ],
)
def test_is_remote_configured(
    url: str | None, key: str | None, expected: bool
) -> None:
    settings = Settings(supabase_url=url, supabase_anon_key=key)
    assert is_remote_configured(settings) is expected


def test_unconfigured_backend_is_local_and_keeps_preference(settings, store) -> None:
    store.set_item(MODE_PREFERENCE_KEY, "cloud")

    assert resolve_mode(settings, store) is AppMode.LOCAL
    assert store.get_item(MODE_PREFERENCE_KEY) == "cloud"


def test_configured_backend_defaults_to_cloud(cloud_settings, store) -> None:
    assert resolve_mode(cloud_settings, store) is AppMode.CLOUD
    assert store.get_item(MODE_PREFERENCE_KEY) == "cloud"


def test_local_preference_wins_when_configured(cloud_settings, store) -> None:
    store.set_item(MODE_PREFERENCE_KEY, "local")

    assert resolve_mode(cloud_settings, store) is AppMode.LOCAL
    assert store.get_item(MODE_PREFERENCE_KEY) == "local"


def test_unknown_preference_falls_back_to_cloud(cloud_settings, store) -> None:
    store.set_item(MODE_PREFERENCE_KEY, "hybrid")

    assert resolve_mode(cloud_settings, store) is AppMode.CLOUD


def test_resolve_survives_full_store(cloud_settings) -> None:
    store = InMemoryKeyValueStore(quota_bytes=0)

    assert resolve_mode(cloud_settings, store) is AppMode.CLOUD
    assert store.get_item(MODE_PREFERENCE_KEY) is None


def test_set_mode_preference(cloud_settings, settings, store) -> None:
    set_mode_preference(cloud_settings, store, AppMode.LOCAL)
    assert store.get_item(MODE_PREFERENCE_KEY) == "local"

    with pytest.raises(ValueError):
        set_mode_preference(settings, store, AppMode.CLOUD)
    assert store.get_item(MODE_PREFERENCE_KEY) == "local"
