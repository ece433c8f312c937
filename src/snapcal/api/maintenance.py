"""Maintenance endpoints: schema check, archival, migration and mode."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Query, Request, status

from snapcal.adapters.local_storage import MODE_PREFERENCE_KEY
from snapcal.api.models import ModePayload  # noqa: TC001
from snapcal.services.mode import set_mode_preference

if TYPE_CHECKING:
    from snapcal.containers import AppContainer

router = APIRouter(tags=["maintenance"])


@router.get("/schema")
async def check_schema(request: Request) -> dict[str, object]:
    """Report whether the remote tables exist."""
    container: AppContainer = request.app.state.container
    return asdict(container.health_service.check_remote_schema())


@router.post("/maintenance/archive")
async def archive(
    request: Request, retention_days: int | None = Query(default=None, ge=0)
) -> dict[str, object]:
    """Run the archival sweep for the current user."""
    container: AppContainer = request.app.state.container
    report = await container.summary_service.archive_older_than(retention_days)
    return asdict(report)


@router.get("/migration")
async def migration_status(request: Request) -> dict[str, object]:
    """Report whether local data is waiting to be migrated."""
    container: AppContainer = request.app.state.container
    return {
        "mode": container.mode.value,
        "has_local_data": container.migration_service.has_local_data(),
    }


@router.post("/migration")
async def migrate(request: Request) -> dict[str, object]:
    """Upload local data to the cloud backend."""
    container: AppContainer = request.app.state.container
    report = await container.migration_service.migrate_local_to_remote()
    return asdict(report)


@router.get("/mode")
async def get_mode(request: Request) -> dict[str, object]:
    """Return the active mode and the stored preference."""
    container: AppContainer = request.app.state.container
    return {
        "mode": container.mode.value,
        "preference": container.store.get_item(MODE_PREFERENCE_KEY),
    }


@router.put("/mode")
async def put_mode(payload: ModePayload, request: Request) -> dict[str, object]:
    """Store a mode preference; it applies after a restart."""
    container: AppContainer = request.app.state.container
    try:
        set_mode_preference(container.settings, container.store, payload.mode)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=str(exc)
        ) from exc
    return {
        "mode": container.mode.value,
        "preference": payload.mode.value,
        "restart_required": payload.mode is not container.mode,
    }
