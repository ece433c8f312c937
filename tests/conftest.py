"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from snapcal.adapters.local_storage import KeyValueStore, StorageQuotaError
from snapcal.config import Settings
from snapcal.containers import AppContainer, build_container
from snapcal.domain.entries import Entry, new_entry
from snapcal.domain.models import UserIdentity
from snapcal.services.users import IdentityProvider


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """In-memory key/value store with an optional byte quota."""

    items: dict[str, str] = field(default_factory=dict)
    quota_bytes: int | None = None
    writes: int = 0

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.quota_bytes is not None:
            used = sum(len(v) for k, v in self.items.items() if k != key)
            if used + len(value) > self.quota_bytes:
                raise StorageQuotaError(f"{key} does not fit")
        self.items[key] = value
        self.writes += 1

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self.items)


@dataclass
class StaticIdentityProvider(IdentityProvider):
    """Identity provider holding a fixed user."""

    user: UserIdentity | None = None

    def current_user(self) -> UserIdentity | None:
        return self.user

    def sign_in(self, email: str, password: str | None = None) -> UserIdentity:
        self.user = UserIdentity(id=f"user-{email}", email=email)
        return self.user

    def sign_out(self) -> None:
        self.user = None


class FakeAPIError(Exception):
    """Mimics postgrest's APIError shape."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    """In-memory table with failure injection."""

    name: str
    rows: list[dict[str, object]] = field(default_factory=list)
    error: Exception | None = None
    fail_after_upserts: int | None = None
    upsert_calls: int = 0
    queries: list[dict[str, object]] = field(default_factory=list)


class FakeQuery:
    """Subset of the postgrest query builder backed by a FakeTable."""

    def __init__(self, table: FakeTable) -> None:
        self.table = table
        self.action = "select"
        self.columns: list[str] | None = None
        self.payload: list[dict[str, object]] = []
        self.on_conflict = "id"
        self.filters: list[tuple[str, str, object]] = []
        self.order_by: tuple[str, bool] | None = None
        self.row_limit: int | None = None

    def select(self, columns: str = "*") -> "FakeQuery":
        self.action = "select"
        if columns != "*":
            self.columns = [column.strip() for column in columns.split(",")]
        return self

    def upsert(self, payload, on_conflict: str = "id") -> "FakeQuery":  # type: ignore[no-untyped-def]
        self.action = "upsert"
        self.payload = payload if isinstance(payload, list) else [payload]
        self.on_conflict = on_conflict
        return self

    def delete(self) -> "FakeQuery":
        self.action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeQuery":  # type: ignore[no-untyped-def]
        self.filters.append(("eq", column, value))
        return self

    def lt(self, column: str, value) -> "FakeQuery":  # type: ignore[no-untyped-def]
        self.filters.append(("lt", column, value))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self.order_by = (column, desc)
        return self

    def limit(self, count: int) -> "FakeQuery":
        self.row_limit = count
        return self

    def execute(self) -> FakeResponse:
        table = self.table
        table.queries.append(
            {
                "action": self.action,
                "columns": self.columns,
                "filters": list(self.filters),
                "order": self.order_by,
                "limit": self.row_limit,
            }
        )
        if table.error is not None:
            raise table.error
        if self.action == "upsert":
            return self._upsert()
        matched = [row for row in table.rows if self._matches(row)]
        if self.action == "delete":
            table.rows = [row for row in table.rows if not self._matches(row)]
            return FakeResponse(data=matched)
        if self.order_by is not None:
            column, desc = self.order_by
            matched.sort(key=lambda row: str(row.get(column)), reverse=desc)
        if self.row_limit is not None:
            matched = matched[: self.row_limit]
        if self.columns is not None:
            matched = [
                {column: row.get(column) for column in self.columns}
                for row in matched
            ]
        return FakeResponse(data=matched)

    def _upsert(self) -> FakeResponse:
        table = self.table
        if (
            table.fail_after_upserts is not None
            and table.upsert_calls >= table.fail_after_upserts
        ):
            raise FakeAPIError("upstream connection reset", code="500")
        table.upsert_calls += 1
        for payload in self.payload:
            key = payload.get(self.on_conflict)
            for position, row in enumerate(table.rows):
                if row.get(self.on_conflict) == key:
                    table.rows[position] = {**row, **payload}
                    break
            else:
                table.rows.append(dict(payload))
        return FakeResponse(data=list(self.payload))

    def _matches(self, row: dict[str, object]) -> bool:
        for operator, column, value in self.filters:
            if operator == "eq" and row.get(column) != value:
                return False
            if operator == "lt" and not str(row.get(column)) < str(value):
                return False
        return True


@dataclass
class FakeAuth:
    """Supabase auth stub keeping one user."""

    user: object | None = None

    def get_user(self) -> SimpleNamespace | None:
        if self.user is None:
            raise FakeAPIError("Auth session missing!")
        return SimpleNamespace(user=self.user)

    def sign_in_with_password(self, credentials: dict[str, str]) -> SimpleNamespace:
        if credentials["password"] != "secret":
            raise FakeAPIError("Invalid login credentials")
        self.user = SimpleNamespace(id="cloud-user", email=credentials["email"])
        return SimpleNamespace(user=self.user)

    def sign_out(self) -> None:
        self.user = None


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)
    auth: FakeAuth = field(default_factory=FakeAuth)

    def table(self, name: str) -> FakeQuery:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return FakeQuery(self.tables[name])

    def rows(self, name: str) -> list[dict[str, object]]:
        return self.tables[name].rows if name in self.tables else []


def make_entry(  # noqa: PLR0913
    food_item: str = "Oatmeal",
    calories: int = 300,
    *,
    day: str = "2026-10-10",
    hour: int = 12,
    minute: int = 0,
    user_id: str | None = None,
    **kwargs: object,
) -> Entry:
    year, month, day_of_month = (int(part) for part in day.split("-"))
    entry = new_entry(
        food_item,
        calories,
        logged_at=datetime(year, month, day_of_month, hour, minute, tzinfo=UTC),
        **kwargs,
    )
    if user_id is None:
        return entry
    return replace(entry, user_id=user_id)


@pytest.fixture
def user() -> UserIdentity:
    return UserIdentity(id="user-1", email="ada@example.com")


@pytest.fixture
def identity(user: UserIdentity) -> StaticIdentityProvider:
    return StaticIdentityProvider(user)


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(local_storage_dir=tmp_path / "store")


@pytest.fixture
def cloud_settings(tmp_path: Path) -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_anon_key="anon-key",
        local_storage_dir=tmp_path / "store",
    )


@pytest.fixture
def supabase_client() -> FakeSupabaseClient:
    return FakeSupabaseClient()


@pytest.fixture
def container(settings: Settings, store: InMemoryKeyValueStore) -> AppContainer:
    return build_container(settings, store=store)


@pytest.fixture
def cloud_container(
    cloud_settings: Settings,
    store: InMemoryKeyValueStore,
    supabase_client: FakeSupabaseClient,
) -> AppContainer:
    supabase_client.auth.user = SimpleNamespace(
        id="cloud-user", email="ada@example.com"
    )
    return build_container(
        cloud_settings, store=store, supabase_client=supabase_client
    )
