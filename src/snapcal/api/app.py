"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict, replace
from datetime import date

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from snapcal.api.maintenance import router as maintenance_router
from snapcal.api.models import (
    DailyGoalPayload,
    EntryPayload,
    ProfilePayload,
    SessionPayload,
)
from snapcal.app_logging import configure_logging
from snapcal.containers import AppContainer, build_container
from snapcal.domain.entries import Entry, Ingredient, new_entry
from snapcal.domain.errors import StorageError, StorageErrorKind, SyncFailedError
from snapcal.domain.profile import UserProfile, profile_to_row
from snapcal.domain.summaries import DailySummary

_STATUS_BY_KIND = {
    StorageErrorKind.NOT_AUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    StorageErrorKind.DEVICE_STORAGE_FULL: status.HTTP_507_INSUFFICIENT_STORAGE,
    StorageErrorKind.REMOTE_QUOTA_EXCEEDED: status.HTTP_507_INSUFFICIENT_STORAGE,
    StorageErrorKind.REMOTE_SCHEMA_MISSING: status.HTTP_503_SERVICE_UNAVAILABLE,
    StorageErrorKind.REMOTE_PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    StorageErrorKind.REMOTE_BACKEND_ERROR: status.HTTP_502_BAD_GATEWAY,
    StorageErrorKind.SYNC_FAILED: status.HTTP_502_BAD_GATEWAY,
    StorageErrorKind.WRONG_MODE: status.HTTP_409_CONFLICT,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting in %s mode", app.state.container.mode.value)
        try:
            await app.state.container.summary_service.archive_older_than()
        except Exception:
            logger.exception("Startup archival sweep failed")
        yield

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.include_router(maintenance_router)

    @app.exception_handler(StorageError)
    async def storage_error_handler(
        request: Request, exc: StorageError
    ) -> JSONResponse:
        body: dict[str, object] = {"error": exc.kind.value, "message": exc.message}
        if isinstance(exc, SyncFailedError):
            body["offset"] = exc.offset
        return JSONResponse(status_code=_STATUS_BY_KIND[exc.kind], content=body)

    @app.get("/health")
    async def health(request: Request) -> dict[str, str]:
        """Simple health check endpoint."""
        state_container: AppContainer = request.app.state.container
        return {"status": "ok", "mode": state_container.mode.value}

    @app.post("/session")
    async def sign_in(payload: SessionPayload, request: Request) -> dict[str, object]:
        """Start a session for the configured identity provider."""
        state_container: AppContainer = request.app.state.container
        try:
            user = state_container.user_service.identity.sign_in(
                payload.email, payload.password
            )
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
            ) from exc
        return {"id": user.id, "email": user.email}

    @app.delete("/session")
    async def sign_out(request: Request) -> dict[str, str]:
        """End the current session."""
        state_container: AppContainer = request.app.state.container
        state_container.user_service.identity.sign_out()
        return {"status": "ok"}

    @app.get("/entries")
    async def list_entries(request: Request, lite: bool = False) -> dict[str, object]:
        """Return the user's entries, newest first."""
        service = request.app.state.container.entry_service
        if lite:
            entries = await service.list_entries_lite()
        else:
            entries = await service.list_entries()
        return {"entries": [_serialize_entry(entry) for entry in entries]}

    @app.post("/entries")
    async def save_entry(payload: EntryPayload, request: Request) -> dict[str, object]:
        """Create or replace an entry."""
        service = request.app.state.container.entry_service
        try:
            entry = _entry_from_payload(payload)
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
            ) from exc
        saved = await service.save(entry)
        return _serialize_entry(saved)

    @app.get("/entries/by-date/{day}")
    async def entries_for_date(day: date, request: Request) -> dict[str, object]:
        """Return lite entries for one date."""
        service = request.app.state.container.entry_service
        entries = await service.list_for_date(day.isoformat())
        return {"entries": [_serialize_entry(entry) for entry in entries]}

    @app.get("/entries/{entry_id}/image")
    async def entry_image(entry_id: str, request: Request) -> dict[str, str]:
        """Return the image of one entry."""
        service = request.app.state.container.entry_service
        image = await service.get_image(entry_id)
        if image is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return {"image_url": image}

    @app.delete("/entries/{entry_id}")
    async def delete_entry(entry_id: str, request: Request) -> dict[str, str]:
        """Delete an entry; unknown ids succeed without effect."""
        await request.app.state.container.entry_service.delete(entry_id)
        return {"status": "ok"}

    @app.get("/summaries")
    async def summaries(request: Request) -> dict[str, object]:
        """Return daily totals, newest first."""
        service = request.app.state.container.summary_service
        items = await service.summaries_lite()
        return {"summaries": [_serialize_summary(item) for item in items]}

    @app.get("/settings/goal")
    async def get_goal(request: Request) -> dict[str, int]:
        """Return the daily calorie goal."""
        service = request.app.state.container.user_settings_service
        return {"daily_goal": await service.get_daily_goal()}

    @app.put("/settings/goal")
    async def put_goal(payload: DailyGoalPayload, request: Request) -> dict[str, int]:
        """Update the daily calorie goal."""
        service = request.app.state.container.user_settings_service
        await service.set_daily_goal(payload.daily_goal)
        return {"daily_goal": payload.daily_goal}

    @app.get("/settings/onboarding")
    async def get_onboarding(request: Request) -> dict[str, bool]:
        """Return whether onboarding is complete."""
        service = request.app.state.container.user_settings_service
        return {"completed": await service.has_completed_onboarding()}

    @app.post("/settings/onboarding")
    async def complete_onboarding(request: Request) -> dict[str, bool]:
        """Mark onboarding as complete."""
        service = request.app.state.container.user_settings_service
        await service.mark_onboarding_complete()
        return {"completed": True}

    @app.get("/profile")
    async def get_profile(request: Request) -> dict[str, object]:
        """Return the user's profile."""
        profile = await request.app.state.container.profile_service.get_profile()
        return {"profile": profile_to_row(profile) if profile else None}

    @app.put("/profile")
    async def put_profile(
        payload: ProfilePayload, request: Request
    ) -> dict[str, object]:
        """Replace the user's profile."""
        profile = UserProfile(**payload.model_dump())
        await request.app.state.container.profile_service.save_profile(profile)
        return {"profile": profile_to_row(profile)}

    return app


def _entry_from_payload(payload: EntryPayload) -> Entry:
    entry = new_entry(
        payload.food_item,
        payload.calories,
        protein=payload.protein,
        carbs=payload.carbs,
        fat=payload.fat,
        confidence=payload.confidence,
        logged_at=payload.logged_at,
        image_url=payload.image_url,
        is_manual=payload.is_manual,
        ingredients=[
            Ingredient(name=item.name, grams=item.grams, calories=item.calories)
            for item in payload.ingredients
        ],
        original_ai_response=payload.original_ai_response,
    )
    if payload.id:
        entry = replace(entry, id=payload.id)
    return entry


def _serialize_entry(entry: Entry) -> dict[str, object]:
    return asdict(entry)


def _serialize_summary(summary: DailySummary) -> dict[str, object]:
    return asdict(summary)


def build_app() -> FastAPI:
    """Build the app from environment settings (``uvicorn --factory``)."""
    return create_app(build_container())
