"""Health check result types shared by infrastructure components."""

from enum import Enum

from pydantic import BaseModel, Field


class HealthStatus(str, Enum):
    OK = "ok"
    ERROR = "error"
    SKIPPED = "skipped"
    DEGRADED = "degraded"


class DatabaseHealthResult(BaseModel):
    """Database health check result."""

    status: HealthStatus = Field(..., description="Health status")
    connected: bool = Field(..., description="Whether a connection succeeded")
    version: str | None = Field(None, description="PostgreSQL version")
    error: str | None = Field(None, description="Error detail")

    def to_dict(self) -> dict[str, str | bool | None]:
        return self.model_dump(mode="json", exclude_none=False)


class EmailHealthResult(BaseModel):
    """Email service health check result."""

    status: HealthStatus = Field(..., description="Health status")
    available: bool = Field(..., description="Email enabled and configured")
    circuit_open: bool = Field(..., description="Circuit breaker open")
    consecutive_failures: int = Field(..., description="Consecutive failed sends")
    smtp_configured: bool = Field(..., description="SMTP host and sender set")
    email_enabled: bool = Field(..., description="EMAIL_ENABLED flag")

    def to_dict(self) -> dict[str, str | bool | int]:
        return self.model_dump(mode="json")
