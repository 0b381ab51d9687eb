"""Health check endpoints.

Provides liveness and readiness probes for load balancers.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import ORJSONResponse
from pydantic import BaseModel, Field

from recibook.api.dependencies import get_document_store
from recibook.core.config import Settings, get_settings
from recibook.database.connection import check_store_health
from recibook.database.store.protocol import DocumentStore  # noqa: TC001


router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str = Field(..., description="Health status", examples=["healthy"])
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Current server timestamp",
    )
    version: str = Field(..., description="Application version")
    environment: str = Field(..., description="Deployment environment")


class ReadinessResponse(HealthResponse):
    """Readiness check response with dependency status."""

    dependencies: dict[str, str] = Field(
        default_factory=dict,
        description="Status of external dependencies",
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
)
async def health_check(
    settings: Annotated[Settings, Depends(get_settings)],
) -> HealthResponse:
    """Check if the service is alive. External dependencies are not checked."""
    return HealthResponse(
        status="healthy",
        version=settings.app.version,
        environment=settings.APP_ENV,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    responses={503: {"description": "Document store unavailable"}},
)
async def readiness_check(
    settings: Annotated[Settings, Depends(get_settings)],
    store: Annotated[DocumentStore | None, Depends(get_document_store)],
) -> ReadinessResponse | ORJSONResponse:
    """Check if the service can reach its document store."""
    dependencies = await check_store_health(store)
    ready = all(state == "healthy" for state in dependencies.values())

    body = ReadinessResponse(
        status="ready" if ready else "degraded",
        version=settings.app.version,
        environment=settings.APP_ENV,
        dependencies=dependencies,
    )
    if ready:
        return body
    return ORJSONResponse(status_code=503, content=body.model_dump(mode="json"))
