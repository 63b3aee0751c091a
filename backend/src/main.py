"""FitLogr Server - Entry point.

Runs the MCP server and the JSON API with HTTP transport for Cloud Run deployment.
Uses Starlette with the MCP HTTP app for maximum compatibility.
"""

import logging
import os
from datetime import date

import uvicorn
from pydantic import ValidationError as PydanticValidationError
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route, Mount

from .core.errors import NotFoundError, StoreError, ValidationError
from .core.models import BodyMetrics, Goal, NutritionEntry, NutritionTargets, TrainingEntry
from .shell.mcp_server import (
    mcp,
    current_user_id,
    get_auth_client,
    get_daily_log_service,
    get_statistics_service,
)
from .shell.auth import validate_api_key_format, hash_api_key


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def error_response(error: Exception) -> JSONResponse:
    """Map an error to its HTTP response."""
    if isinstance(error, (ValidationError, PydanticValidationError, ValueError)):
        return JSONResponse({"error": str(error)}, status_code=400)
    if isinstance(error, NotFoundError):
        return JSONResponse({"error": str(error)}, status_code=404)
    if isinstance(error, StoreError):
        logger.error("Store failure: %s", str(error))
    else:
        logger.error("Request failed: %s", str(error))
    return JSONResponse({"error": "Server error."}, status_code=500)


def date_from_param(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None


def _require_user(request: Request) -> str | None:
    return getattr(request.state, "user_id", None)


def _unauthorized() -> JSONResponse:
    return JSONResponse({"error": "Valid API key required"}, status_code=401)


# ==================== Route Handlers ====================


async def health_check(request: Request) -> JSONResponse:
    """Health check endpoint for Cloud Run."""
    return JSONResponse({"status": "healthy", "service": "fitlogr-api"})


async def register_user(request: Request) -> JSONResponse:
    """Register a new user and return their API key."""
    try:
        body = await request.json()
        email = body.get("email")

        if not email or "@" not in email:
            return JSONResponse({"error": "Valid email is required"}, status_code=400)

        auth_client = get_auth_client()
        api_key, user_id = auth_client.register_user(email)

        base_url = os.environ.get("BASE_URL", "http://localhost:8080")

        return JSONResponse({
            "api_key": api_key,
            "message": "Registration successful! Save your API key - it won't be shown again.",
            "claude_command": f'claude mcp add --transport http fitlogr {base_url}/mcp --header "Authorization: Bearer {api_key}"',
        })

    except Exception as e:
        logger.error("Registration failed: %s", str(e))
        return JSONResponse({"error": "Registration failed."}, status_code=500)


async def validate_key(request: Request) -> JSONResponse:
    """Validate an API key."""
    try:
        body = await request.json()
        api_key = body.get("api_key")

        if not api_key:
            return JSONResponse({"valid": False, "error": "API key required"})

        auth_client = get_auth_client()
        user_id = auth_client.validate_api_key(api_key)
        return JSONResponse({"valid": user_id is not None})

    except Exception as e:
        logger.error("Validation failed: %s", str(e))
        return JSONResponse({"valid": False, "error": "Validation failed"})


async def update_profile(request: Request) -> JSONResponse:
    """Set the caller's goal and body weight."""
    user_id = _require_user(request)
    if user_id is None:
        return _unauthorized()
    try:
        body = await request.json()
        profile = get_daily_log_service().setup_profile(
            user_id, body.get("email"), Goal(body.get("goal", "maintenance")), body.get("weight_kg")
        )
        return JSONResponse(profile.model_dump(mode="json", exclude={"user_id"}))
    except Exception as e:
        return error_response(e)


async def create_program(request: Request) -> JSONResponse:
    """Add a program; the newest program is the active one."""
    user_id = _require_user(request)
    if user_id is None:
        return _unauthorized()
    try:
        body = await request.json()
        program = get_daily_log_service().set_program(
            user_id,
            Goal(body.get("goal")),
            body.get("training_days_per_week"),
            NutritionTargets.model_validate(body.get("nutrition_targets") or {}),
            body.get("baseline_weight_kg"),
        )
        return JSONResponse(program.model_dump(mode="json", exclude={"user_id"}), status_code=201)
    except Exception as e:
        return error_response(e)


async def record_daily_log(request: Request) -> JSONResponse:
    """Log today's training, nutrition and body metrics."""
    user_id = _require_user(request)
    if user_id is None:
        return _unauthorized()
    try:
        body = await request.json()
        training = body.get("training")
        nutrition = body.get("nutrition")
        body_metrics = body.get("body_metrics")
        result = get_daily_log_service().record_daily_log(
            user_id,
            TrainingEntry.model_validate(training) if training else None,
            NutritionEntry.model_validate(nutrition) if nutrition else None,
            BodyMetrics.model_validate(body_metrics) if body_metrics else None,
        )
        return JSONResponse(result.model_dump(mode="json"))
    except Exception as e:
        return error_response(e)


async def list_daily_logs(request: Request) -> JSONResponse:
    """List the caller's logs, newest first."""
    user_id = _require_user(request)
    if user_id is None:
        return _unauthorized()
    try:
        params = request.query_params
        start = params.get("start_date")
        end = params.get("end_date")
        logs = get_daily_log_service().list_daily_logs(
            user_id,
            date_from_param(start),
            date_from_param(end),
            int(params.get("limit", 30)),
        )
        return JSONResponse({
            "logs": [log.model_dump(mode="json") for log in logs],
            "count": len(logs),
        })
    except Exception as e:
        return error_response(e)


async def get_statistics(request: Request) -> JSONResponse:
    user_id = _require_user(request)
    if user_id is None:
        return _unauthorized()
    try:
        period = request.query_params.get("period", "week")
        stats = get_statistics_service().get_statistics(user_id, period)
        return JSONResponse(stats.model_dump(mode="json"))
    except Exception as e:
        return error_response(e)


async def get_advanced_statistics(request: Request) -> JSONResponse:
    user_id = _require_user(request)
    if user_id is None:
        return _unauthorized()
    try:
        period = request.query_params.get("period", "weekly")
        stats = get_statistics_service().get_advanced_statistics(user_id, period)
        return JSONResponse(stats.model_dump(mode="json"))
    except Exception as e:
        return error_response(e)


async def get_chart(request: Request) -> JSONResponse:
    user_id = _require_user(request)
    if user_id is None:
        return _unauthorized()
    try:
        chart_type = request.path_params["chart_type"]
        period = request.query_params.get("period", "week")
        points = get_statistics_service().get_chart_series(user_id, chart_type, period)
        return JSONResponse({
            "chart_type": chart_type,
            "period": period,
            "points": [p.model_dump(mode="json") for p in points],
        })
    except Exception as e:
        return error_response(e)


# ==================== Auth Middleware ====================


class AuthMiddleware(BaseHTTPMiddleware):
    """Authenticate MCP and API requests using API key in Authorization header."""

    async def dispatch(self, request: Request, call_next):
        # Skip auth for public routes
        if not request.url.path.startswith(("/mcp", "/api")):
            return await call_next(request)

        auth_header = request.headers.get("Authorization", "")

        if auth_header.startswith("Bearer "):
            api_key = auth_header.replace("Bearer ", "")

            if validate_api_key_format(api_key):
                user_id = hash_api_key(api_key)
                auth_client = get_auth_client()

                if auth_client.user_exists(user_id):
                    # Set user context for this request
                    current_user_id.set(user_id)
                    request.state.user_id = user_id
                    logger.debug("Authenticated user: %s", user_id[:8])

        return await call_next(request)


# ==================== Create ASGI App ====================


def create_app() -> Starlette:
    """Create the Starlette application with MCP at root.

    The MCP streamable_http_app() handles /mcp/ internally when mounted at root.
    We use its lifespan context to ensure proper initialization.
    """
    # Get the MCP ASGI app
    mcp_app = mcp.streamable_http_app()

    # Define routes - custom routes first, then MCP app at root
    routes = [
        Route("/health", health_check, methods=["GET"]),
        Route("/auth/register", register_user, methods=["POST"]),
        Route("/auth/validate", validate_key, methods=["POST"]),
        Route("/api/profile", update_profile, methods=["PUT"]),
        Route("/api/programs", create_program, methods=["POST"]),
        Route("/api/daily-logs", record_daily_log, methods=["POST"]),
        Route("/api/daily-logs", list_daily_logs, methods=["GET"]),
        Route("/api/statistics", get_statistics, methods=["GET"]),
        Route("/api/statistics/advanced", get_advanced_statistics, methods=["GET"]),
        Route("/api/charts/{chart_type}", get_chart, methods=["GET"]),
        # Mount MCP app at root - it handles /mcp/ path internally
        Mount("/", app=mcp_app),
    ]

    # Create Starlette app with CORS and auth middleware
    app = Starlette(
        routes=routes,
        middleware=[
            Middleware(
                CORSMiddleware,
                allow_origins=["http://localhost:5173"],
                allow_methods=["GET", "POST", "PUT", "OPTIONS"],
                allow_headers=["*"],
            ),
            Middleware(AuthMiddleware),
        ],
        lifespan=mcp_app.router.lifespan_context,
    )

    return app


# Create app at module level for Cloud Run
app = create_app()


def main() -> None:
    """Run the server."""
    port = int(os.environ.get("PORT", 8080))
    host = os.environ.get("HOST", "0.0.0.0")

    logger.info("Starting FitLogr server on %s:%d", host, port)

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
