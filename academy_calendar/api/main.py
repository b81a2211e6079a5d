"""
FastAPI application for Academy Calendar.

Exposes the recurring-event expansion engine over HTTP:
- Calendar expansion endpoint for calendar views
- RRULE validation endpoint
- Health endpoint
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from academy_calendar.api.middleware import RequestLoggingMiddleware
from academy_calendar.api.models import (
    ErrorResponse,
    ExpandRequest,
    ExpandResponse,
    HealthResponse,
    RruleValidationRequest,
    RruleValidationResponse,
)
from academy_calendar.config import Settings, get_settings
from academy_calendar.exceptions import InvalidRecurrenceRuleError
from academy_calendar.services.expansion import expand_all_events
from academy_calendar.services.recurrence import parse_rrule

logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"


# =============================================================================
# Application Lifecycle
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()
    logging.getLogger("academy_calendar").setLevel(settings.log_level)
    logger.info(f"Starting Academy Calendar API ({settings.python_env})")

    yield

    logger.info("Shutting down Academy Calendar API")


# =============================================================================
# FastAPI Application
# =============================================================================


app = FastAPI(
    title="Academy Calendar API",
    description="""
# Academy Calendar API

Expands recurring academy events (classes, consultations, exams) into the
concrete instances shown on a calendar.

## Instance IDs
Generated instances carry `{parent_id}_{YYYY-MM-DD}` ids. Use the date part
as the exception key when an occurrence is edited or cancelled individually.

## Error Handling
- **200** - Success
- **422** - Validation error (malformed rule, range or exception keys)
- **500** - Server error
    """,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)


# =============================================================================
# Exception Handlers
# =============================================================================


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    """Handle HTTP exceptions with consistent format."""
    error = ErrorResponse(
        error_type="validation_error" if exc.status_code == 422 else "http_error",
        message=str(exc.detail),
        retryable=exc.status_code >= 500,
    )
    return JSONResponse(status_code=exc.status_code, content=error.model_dump(exclude_none=True))


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    error = ErrorResponse(
        error_type="internal_error",
        message="An unexpected error occurred",
        retryable=True,
    )
    return JSONResponse(status_code=500, content=error.model_dump(exclude_none=True))


# =============================================================================
# Health & Status Endpoints
# =============================================================================


@app.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    tags=["System"],
)
async def health_check(settings: Settings = Depends(get_settings)):
    """Check API health status."""
    return HealthResponse(
        status="healthy",
        version=API_VERSION,
        max_occurrences=settings.max_occurrences,
    )


# =============================================================================
# Calendar Endpoints
# =============================================================================


@app.post(
    "/calendar/expand",
    response_model=ExpandResponse,
    summary="Expand recurring events over a window",
    description="""
Expand recurring events into the instances that start within `range`.

- One-time events are returned unchanged.
- Occurrences listed in `exceptions` for an event are left out.
- Entries follow the order of `events`; they are not re-sorted by date.
    """,
    responses={
        200: {"description": "Expanded entries"},
        422: {"model": ErrorResponse, "description": "Validation error"},
    },
    tags=["Calendar"],
)
async def expand_calendar(
    request: ExpandRequest,
    settings: Settings = Depends(get_settings),
) -> ExpandResponse:
    """Expand events for a calendar view."""
    max_occurrences = request.max_occurrences or settings.max_occurrences

    logger.info(
        f"Expanding {len(request.events)} events for "
        f"{request.view_range.start.isoformat()} - {request.view_range.end.isoformat()}"
    )

    instances = expand_all_events(
        request.events,
        request.view_range,
        request.exceptions,
        max_occurrences=max_occurrences,
    )

    return ExpandResponse(instances=instances, total=len(instances))


@app.post(
    "/calendar/rrule/validate",
    response_model=RruleValidationResponse,
    summary="Validate an RRULE string",
    tags=["Calendar"],
)
async def validate_recurrence(request: RruleValidationRequest) -> RruleValidationResponse:
    """Parse an RRULE string and report whether it is usable."""
    try:
        rule = parse_rrule(request.rrule)
    except InvalidRecurrenceRuleError as e:
        return RruleValidationResponse(valid=False, error=e.message)

    return RruleValidationResponse(valid=True, rule=rule)


# =============================================================================
# Run with Uvicorn
# =============================================================================


def run_server(host: str | None = None, port: int | None = None, reload: bool | None = None):
    """Run the API server with Uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "academy_calendar.api.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=settings.api_reload if reload is None else reload,
    )


if __name__ == "__main__":
    run_server()
