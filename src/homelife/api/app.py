"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from homelife.api.admin import router as admin_router
from homelife.api.ai import router as ai_router
from homelife.api.auth import router as auth_router
from homelife.api.catalog import ingredients_router, units_router
from homelife.api.expenses import router as expenses_router
from homelife.api.insights import router as insights_router
from homelife.api.meal_plans import router as meal_plans_router
from homelife.api.notifications import router as notifications_router
from homelife.api.nutrition import router as nutrition_router
from homelife.api.pantry import router as pantry_router
from homelife.api.recipes import router as recipes_router
from homelife.api.responses import failure
from homelife.api.shopping_lists import router as shopping_lists_router
from homelife.app_logging import configure_logging
from homelife.containers import AppContainer
from homelife.domain.errors import ConflictError, NotFoundError, ValidationError

UNPROCESSABLE = 422


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.container.dispatcher.start()
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="HomeLife API", lifespan=lifespan)
    app.state.container = container

    for router in (
        admin_router,
        auth_router,
        units_router,
        ingredients_router,
        pantry_router,
        recipes_router,
        meal_plans_router,
        shopping_lists_router,
        expenses_router,
        insights_router,
        nutrition_router,
        ai_router,
        notifications_router,
    ):
        app.include_router(router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.exception_handler(ValidationError)
    async def handle_validation(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=UNPROCESSABLE,
            content=failure(str(exc), payload={"field": exc.field}),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content=failure(str(exc))
        )

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT, content=failure(str(exc))
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = [
            {"loc": list(error["loc"]), "message": error["msg"]}
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=UNPROCESSABLE,
            content=failure("Invalid request", payload=errors),
        )

    @app.exception_handler(HTTPException)
    async def handle_http(request: Request, exc: HTTPException) -> JSONResponse:
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return JSONResponse(
            status_code=exc.status_code,
            content=failure(message),
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled error on %s %s", request.method, request.url.path
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=failure("Internal server error"),
        )

    return app
