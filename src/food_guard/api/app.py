"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status

from food_guard.api.models import EvaluateRequest
from food_guard.app_logging import configure_logging
from food_guard.containers import AppContainer
from food_guard.errors import InvalidEvaluationInputError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/risk/evaluate")
    async def evaluate(body: EvaluateRequest, request: Request) -> dict[str, object]:
        """Evaluate a food against a user's health profile."""
        state_container: AppContainer = request.app.state.container
        context = body.context.to_domain() if body.context else None
        try:
            result = await state_container.risk_aggregator.evaluate(
                body.food.to_domain(), body.profile.to_domain(), context
            )
        except InvalidEvaluationInputError as exc:
            logger.warning("Rejected evaluation input: %s", exc)
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
            ) from exc
        return result.to_dict()

    return app
