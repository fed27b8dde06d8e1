"""
Response models shared across the API.

Domain envelopes live next to their services; this module holds the
cross-cutting ones.
"""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Response model for errors."""

    error: str = Field(..., description="Short error summary")
    message: str = Field(..., description="Client-safe detail")


class ComponentHealth(BaseModel):
    status: str = Field(..., description="healthy or unhealthy")
    latency_ms: float | None = None
    details: dict = Field(default_factory=dict)


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(
        ...,
        description="Overall service status: healthy or degraded",
    )
    version: str
    cache_backend: str
    live_providers: dict[str, bool] = Field(
        default_factory=dict,
        description="Which live providers are configured",
    )
    websocket_connections: int = 0
    components: dict[str, ComponentHealth] = Field(default_factory=dict)
