"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import Depends, FastAPI, HTTPException, Request, status

from macro_planner.api.models import ProfileRequest, ScaleRequest
from macro_planner.api.users import load_food, require_api_token
from macro_planner.api.users import router as users_router
from macro_planner.app_logging import configure_logging
from macro_planner.containers import AppContainer
from macro_planner.domain.nutrition import FoodItem, ScalingBase
from macro_planner.domain.profile import InvalidProfileError
from macro_planner.services.analysis import foods_from_analysis
from macro_planner.services.scaling import rescale_food
from macro_planner.services.targets import (
    calculate_bmr,
    compute_targets,
    macro_split,
    resolve_goal,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(users_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/targets", dependencies=[Depends(require_api_token)])
    async def targets(body: ProfileRequest) -> dict[str, object]:
        """Compute daily calorie and macro targets without storing them."""
        try:
            body_profile = body.to_body()
        except InvalidProfileError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
            ) from exc
        goals = body.to_goals()
        goal = resolve_goal(goals.primary_goals)
        return {
            "targets": compute_targets(body_profile, goals),
            "effective_goal": goal,
            "split": macro_split(
                goal, goals.health_conditions, goals.dietary_preferences
            ),
            "bmr_exact": calculate_bmr(body_profile),
        }

    @app.post("/scale", dependencies=[Depends(require_api_token)])
    async def scale(body: ScaleRequest) -> dict[str, object]:
        """Rescale a food from its base to a new quantity."""
        base_nutrition = body.base_nutrition.to_profile()
        food = FoodItem(name=body.name, serving_size="", nutrition=base_nutrition)
        base = ScalingBase(base_amount=body.base_amount, base_nutrition=base_nutrition)
        return {"food": rescale_food(food, base, body.quantity)}

    @app.post("/analysis/normalize", dependencies=[Depends(require_api_token)])
    async def normalize_analysis(payload: dict[str, object]) -> dict[str, object]:
        """Convert a photo analysis payload into editable foods."""
        return {"analysis": foods_from_analysis(payload)}

    @app.get("/foods/search", dependencies=[Depends(require_api_token)])
    async def search_foods(
        request: Request, query: str, page: int = 1, page_size: int = 20
    ) -> dict[str, object]:
        """Search the food database; results are per 100 g."""
        state_container: AppContainer = request.app.state.container
        try:
            result = await state_container.nutrition_service.search(
                query, page=page, page_size=page_size
            )
        except httpx.HTTPError as exc:
            logger.exception("Food search failed", extra={"query": query})
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Food database unavailable",
            ) from exc
        return {"foods": result.foods, "total_pages": result.total_pages}

    @app.get("/foods/{fdc_id}", dependencies=[Depends(require_api_token)])
    async def get_food(fdc_id: int, request: Request) -> dict[str, object]:
        """Return one food database record per 100 g."""
        state_container: AppContainer = request.app.state.container
        return {"food": await load_food(state_container, fdc_id)}

    return app
