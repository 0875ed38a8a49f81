from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backoffice.access.errors import (
    AccessError,
    UnauthenticatedError,
    ValidationError,
)
from backoffice.core.config import settings
from backoffice.routers import notifications

OPENAPI_TAGS = [
    {
        "name": "Notifications",
        "description": "In-app notifications and per-type notification preferences.",
    },
]

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description=(
        "Back-office API. Every record is scoped to the authenticated user; "
        "rows belonging to other users are never returned."
    ),
    openapi_tags=OPENAPI_TAGS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(UnauthenticatedError)
async def unauthenticated_handler(request: Request, exc: UnauthenticatedError) -> JSONResponse:
    """Return 401 with a bearer challenge."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers={"WWW-Authenticate": "Bearer"},
    )


@app.exception_handler(ValidationError)
async def validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Return 422 with the field errors, if any."""
    content: dict[str, object] = {"detail": exc.message}
    if exc.errors:
        content["errors"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(AccessError)
async def access_error_handler(request: Request, exc: AccessError) -> JSONResponse:
    """Return the status code carried by the error (403, 404, 409)."""
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app.include_router(notifications.router, prefix="/v1/notifications", tags=["Notifications"])


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.version,
        "domain": settings.APP_DOMAIN,
        "status": "running",
    }
