"""Per-user API endpoints: logs, weights, profile, stats and shortcuts."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfoNotFoundError

import httpx
from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from macro_planner.api.models import (
    FoodLogRequest,
    FoodRefRequest,
    ProfileRequest,
    WeightRequest,
)
from macro_planner.domain.profile import InvalidProfileError
from macro_planner.services.logs import EmptyFoodLogError
from macro_planner.services.stats import progress

if TYPE_CHECKING:
    from macro_planner.containers import AppContainer
    from macro_planner.domain.logs import FoodLog
    from macro_planner.domain.nutrition import FoodRecord

_logger = logging.getLogger(__name__)


def _get_api_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.api_token


async def require_api_token(
    x_api_token: str | None = Header(default=None),
    api_token: str = Depends(_get_api_token),
) -> None:
    """Ensure requests include a valid API token."""
    if not x_api_token or x_api_token != api_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


router = APIRouter(
    prefix="/users/{user_id}",
    tags=["users"],
    dependencies=[Depends(require_api_token)],
)


@router.get("/logs")
async def list_logs(user_id: str, request: Request) -> dict[str, object]:
    """Return the user's food logs, newest first."""
    container: AppContainer = request.app.state.container
    return {"logs": container.food_log_service.list_logs(user_id)}


@router.get("/logs/{log_id}")
async def get_log(user_id: str, log_id: str, request: Request) -> dict[str, object]:
    """Return one food log."""
    container: AppContainer = request.app.state.container
    log = container.food_log_service.get_log(user_id, log_id)
    if log is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"log": log}


@router.post("/logs", status_code=status.HTTP_201_CREATED)
async def create_log(
    user_id: str, body: FoodLogRequest, request: Request
) -> dict[str, object]:
    """Store a confirmed meal."""
    container: AppContainer = request.app.state.container
    return {"log": _save_log(container, user_id, body, log_id=None)}


@router.put("/logs/{log_id}")
async def replace_log(
    user_id: str, log_id: str, body: FoodLogRequest, request: Request
) -> dict[str, object]:
    """Replace a food log with a new list of foods."""
    container: AppContainer = request.app.state.container
    if container.food_log_service.get_log(user_id, log_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"log": _save_log(container, user_id, body, log_id=log_id)}


@router.delete("/logs/{log_id}")
async def delete_log(user_id: str, log_id: str, request: Request) -> dict[str, str]:
    """Delete a food log."""
    container: AppContainer = request.app.state.container
    if not container.food_log_service.delete_log(user_id, log_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"status": "deleted"}


@router.get("/weights")
async def list_weights(user_id: str, request: Request) -> dict[str, object]:
    """Return weight history, newest first."""
    container: AppContainer = request.app.state.container
    return {"weights": container.weight_service.list_entries(user_id)}


@router.post("/weights", status_code=status.HTTP_201_CREATED)
async def record_weight(
    user_id: str, body: WeightRequest, request: Request
) -> dict[str, object]:
    """Record a weight measurement."""
    container: AppContainer = request.app.state.container
    entry = container.weight_service.record(
        user_id, body.weight_kg, source=body.source, logged_at=body.logged_at
    )
    return {"weight": entry}


@router.delete("/weights/{entry_id}")
async def delete_weight(user_id: str, entry_id: str, request: Request) -> dict[str, str]:
    """Delete a weight measurement."""
    container: AppContainer = request.app.state.container
    if not container.weight_service.delete(user_id, entry_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"status": "deleted"}


@router.get("/profile")
async def get_profile(user_id: str, request: Request) -> dict[str, object]:
    """Return the user's profile and targets."""
    container: AppContainer = request.app.state.container
    profile = container.profile_service.get_profile(user_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"profile": profile}


@router.post("/onboarding", status_code=status.HTTP_201_CREATED)
async def complete_onboarding(
    user_id: str, body: ProfileRequest, request: Request
) -> dict[str, object]:
    """Complete onboarding and compute the first targets."""
    container: AppContainer = request.app.state.container
    try:
        body_profile = body.to_body()
    except InvalidProfileError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    profile = container.profile_service.complete_onboarding(
        user_id, body_profile, body.to_goals()
    )
    return {"profile": profile}


@router.put("/profile")
async def update_profile(
    user_id: str, body: ProfileRequest, request: Request
) -> dict[str, object]:
    """Replace body stats and goals; targets are recomputed."""
    container: AppContainer = request.app.state.container
    try:
        body_profile = body.to_body()
    except InvalidProfileError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    profile = container.profile_service.update_profile(
        user_id, body_profile, body.to_goals()
    )
    return {"profile": profile}


@router.get("/stats/today")
async def stats_today(
    user_id: str, request: Request, timezone: str | None = None
) -> dict[str, object]:
    """Return today's totals and progress against stored targets."""
    container: AppContainer = request.app.state.container
    timezone_name = timezone or container.settings.default_timezone
    try:
        totals = container.stats_service.get_today(user_id, timezone_name)
    except ZoneInfoNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown timezone: {timezone_name}",
        ) from exc
    profile = container.profile_service.get_profile(user_id)
    return {
        "totals": totals,
        "progress": progress(totals, profile.targets) if profile else None,
    }


@router.get("/stats/week")
async def stats_week(
    user_id: str, request: Request, timezone: str | None = None
) -> dict[str, object]:
    """Return this week's daily totals and averages."""
    container: AppContainer = request.app.state.container
    timezone_name = timezone or container.settings.default_timezone
    try:
        summary = container.stats_service.get_week(user_id, timezone_name)
    except ZoneInfoNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown timezone: {timezone_name}",
        ) from exc
    return {"week": summary}


@router.get("/shortcuts/recent")
async def recent_foods(user_id: str, request: Request) -> dict[str, object]:
    """Return recently used foods."""
    container: AppContainer = request.app.state.container
    return {"foods": container.shortcut_service.recent_foods(user_id)}


@router.post("/shortcuts/recent")
async def record_recent(
    user_id: str, body: FoodRefRequest, request: Request
) -> dict[str, object]:
    """Mark a database food as recently used."""
    container: AppContainer = request.app.state.container
    food = await load_food(container, body.fdc_id)
    container.shortcut_service.record_recent(user_id, food)
    return {"foods": container.shortcut_service.recent_foods(user_id)}


@router.get("/shortcuts/favorites")
async def favorites(user_id: str, request: Request) -> dict[str, object]:
    """Return favorite foods."""
    container: AppContainer = request.app.state.container
    return {"foods": container.shortcut_service.favorites(user_id)}


@router.post("/shortcuts/favorites")
async def toggle_favorite(
    user_id: str, body: FoodRefRequest, request: Request
) -> dict[str, object]:
    """Toggle a database food's favorite state."""
    container: AppContainer = request.app.state.container
    food = await load_food(container, body.fdc_id)
    return {"favorite": container.shortcut_service.toggle_favorite(user_id, food)}


def _save_log(
    container: AppContainer,
    user_id: str,
    body: FoodLogRequest,
    log_id: str | None,
) -> FoodLog:
    try:
        return container.food_log_service.save_log(
            user_id,
            [food.to_food() for food in body.foods],
            body.meal_type,
            body.log_type,
            log_id=log_id,
            logged_at=body.logged_at,
            photo_url=body.photo_url,
        )
    except EmptyFoodLogError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc


async def load_food(container: AppContainer, fdc_id: int) -> FoodRecord:
    """Fetch a database food, mapping upstream failures to 502."""
    try:
        return await container.nutrition_service.get_food(fdc_id)
    except httpx.HTTPError as exc:
        _logger.exception("Food lookup failed: fdc_id=%s", fdc_id)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Food database unavailable",
        ) from exc
