"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from keto_tracker.api.models import (
    BiometricsRequest,
    EnsureProfileRequest,
    OnboardedRequest,
    StartFastingRequest,
)
from keto_tracker.app_logging import configure_logging
from keto_tracker.containers import AppContainer
from keto_tracker.domain.fasting import FastingSessionUpdate
from keto_tracker.domain.food import FoodEntryUpdate, NewFoodEntry
from keto_tracker.domain.profiles import ProfileUpdate
from keto_tracker.services.fasting import FastingSessionActiveError
from keto_tracker.services.food_log import FoodEntryNotFoundError
from keto_tracker.services.metabolism import (
    compute_user_metabolism,
    compute_water_intake_liters,
    validate_biometrics,
)
from keto_tracker.services.profiles import ProfileNotFoundError


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(debug=container.settings.debug_mode)
    logger = logging.getLogger(__name__)
    default_timezone = container.settings.default_timezone

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Starting keto tracker: environment=%s backend=%s",
            container.settings.environment,
            container.settings.storage_backend,
        )
        yield

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(ProfileNotFoundError)
    @app.exception_handler(FoodEntryNotFoundError)
    async def not_found(_request: Request, exc: LookupError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
        )

    @app.exception_handler(FastingSessionActiveError)
    async def fasting_conflict(
        _request: Request, exc: FastingSessionActiveError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)}
        )

    def _container(request: Request) -> AppContainer:
        return request.app.state.container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/metabolism")
    async def metabolism(body: BiometricsRequest) -> dict[str, object]:
        """Compute metabolism targets for ad-hoc biometrics."""
        biometrics = body.to_biometrics()
        return {
            "result": compute_user_metabolism(biometrics),
            "failures": validate_biometrics(biometrics),
            "water_intake_liters": compute_water_intake_liters(
                biometrics.weight_kg, biometrics.activity_level
            ),
        }

    @app.get("/users/{user_id}/profile")
    async def get_profile(user_id: UUID, request: Request) -> dict[str, object]:
        """Return a user's profile."""
        profile = _container(request).profile_service.get_profile(user_id)
        return {"profile": profile}

    @app.put("/users/{user_id}/profile")
    async def ensure_profile(
        user_id: UUID, body: EnsureProfileRequest, request: Request
    ) -> dict[str, object]:
        """Create a default profile unless one already exists."""
        profile = _container(request).profile_service.ensure_profile(
            user_id, body.email
        )
        return {"profile": profile}

    @app.patch("/users/{user_id}/profile")
    async def update_profile(
        user_id: UUID, body: ProfileUpdate, request: Request
    ) -> dict[str, object]:
        """Apply a partial profile update."""
        service = _container(request).profile_service
        profile = service.update_profile(user_id, body)
        return {
            "profile": profile,
            "macro_targets": service.get_macro_targets(user_id),
        }

    @app.post("/users/{user_id}/profile/onboarded")
    async def set_onboarded(
        user_id: UUID, body: OnboardedRequest, request: Request
    ) -> dict[str, str]:
        """Update the onboarding flag."""
        _container(request).profile_service.set_onboarded(user_id, body.onboarded)
        return {"status": "ok"}

    @app.get("/users/{user_id}/metabolism")
    async def profile_metabolism(user_id: UUID, request: Request) -> dict[str, object]:
        """Return metabolism numbers derived from the stored profile."""
        report = _container(request).profile_service.get_metabolism_report(user_id)
        return {
            "result": report.result,
            "failures": report.failures,
            "water_intake_liters": report.water_intake_liters,
        }

    @app.get("/users/{user_id}/macro-targets")
    async def macro_targets(user_id: UUID, request: Request) -> dict[str, object]:
        """Return the stored macro targets."""
        targets = _container(request).profile_service.get_macro_targets(user_id)
        return {"macro_targets": targets}

    @app.get("/users/{user_id}/foods")
    async def food_history(
        user_id: UUID,
        request: Request,
        day: date,
        timezone: str = default_timezone,
    ) -> dict[str, object]:
        """Return entries logged on a day."""
        timezone = _checked_timezone(timezone)
        service = _container(request).food_log_service
        return {"entries": service.get_history(user_id, day, timezone)}

    @app.post("/users/{user_id}/foods", status_code=status.HTTP_201_CREATED)
    async def add_food(
        user_id: UUID, body: NewFoodEntry, request: Request
    ) -> dict[str, object]:
        """Log a food."""
        entry = _container(request).food_log_service.add_food_entry(user_id, body)
        return {"entry": entry}

    @app.get("/users/{user_id}/foods/today")
    async def todays_foods(
        user_id: UUID, request: Request, timezone: str = default_timezone
    ) -> dict[str, object]:
        """Return today's entries and macro totals."""
        service = _container(request).food_log_service
        timezone = _checked_timezone(timezone)
        return {
            "entries": service.get_todays_entries(user_id, timezone),
            "totals": service.get_todays_macros(user_id, timezone),
        }

    @app.delete("/users/{user_id}/foods/today")
    async def clear_todays_foods(
        user_id: UUID, request: Request, timezone: str = default_timezone
    ) -> dict[str, int]:
        """Remove today's entries."""
        service = _container(request).food_log_service
        timezone = _checked_timezone(timezone)
        return {"removed": service.clear_todays_foods(user_id, timezone)}

    @app.patch("/users/{user_id}/foods/{entry_id}")
    async def update_food(
        user_id: UUID, entry_id: UUID, body: FoodEntryUpdate, request: Request
    ) -> dict[str, object]:
        """Apply a partial update to a logged food."""
        service = _container(request).food_log_service
        return {"entry": service.update_food_entry(user_id, entry_id, body)}

    @app.delete("/users/{user_id}/foods/{entry_id}")
    async def remove_food(
        user_id: UUID, entry_id: UUID, request: Request
    ) -> dict[str, str]:
        """Delete a logged food."""
        _container(request).food_log_service.remove_food_entry(user_id, entry_id)
        return {"status": "ok"}

    @app.post("/users/{user_id}/fasting/start", status_code=status.HTTP_201_CREATED)
    async def start_fasting(
        user_id: UUID, body: StartFastingRequest, request: Request
    ) -> dict[str, object]:
        """Start a fast."""
        session = _container(request).fasting_service.start_fasting(
            user_id, body.protocol, body.duration_hours
        )
        return {"session": session}

    @app.post("/users/{user_id}/fasting/end")
    async def end_fasting(user_id: UUID, request: Request) -> dict[str, object]:
        """End the running fast."""
        return {"session": _container(request).fasting_service.end_fasting(user_id)}

    @app.get("/users/{user_id}/fasting/current")
    async def current_fast(user_id: UUID, request: Request) -> dict[str, object]:
        """Return the running fast and its elapsed hours."""
        service = _container(request).fasting_service
        return {
            "session": service.get_current_session(user_id),
            "elapsed_hours": service.get_current_fasting_duration(user_id),
        }

    @app.patch("/users/{user_id}/fasting/current")
    async def update_current_fast(
        user_id: UUID, body: FastingSessionUpdate, request: Request
    ) -> dict[str, object]:
        """Apply a partial update to the running fast."""
        service = _container(request).fasting_service
        return {"session": service.update_current_session(user_id, body)}

    @app.get("/users/{user_id}/fasting/streak")
    async def fasting_streak(user_id: UUID, request: Request) -> dict[str, int]:
        """Return the current fasting streak in days."""
        service = _container(request).fasting_service
        return {"streak": service.get_fasting_streak(user_id)}

    return app


def _is_valid_timezone(value: str) -> bool:
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def _checked_timezone(value: str) -> str:
    if not _is_valid_timezone(value):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown timezone: {value}",
        )
    return value
