from pydantic import BaseModel
from datetime import datetime


class InitializationStatus(BaseModel):
    """Outcome of the startup database initialization."""
    state: str
    attempts: int


class HealthResponse(BaseModel):
    """Schema for the health report."""
    status: str
    timestamp: datetime
    platform: str
    database: str
    initialization: InitializationStatus
    port: int
    python_version: str
    environment: str


class FallbackResponse(BaseModel):
    """Schema for the fallback report."""
    message: str
    status: str
    timestamp: datetime
    platform: str
