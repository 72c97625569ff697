"""Metrics models for creativestudio."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_serializer


class BatchMetrics(BaseModel):
    """Tracking data for one batch run."""

    studio: str = Field(..., description="Studio that ran the batch (hair, baby, video, ...)")
    duration_ms: int = Field(..., ge=0, description="Wall time of the batch in milliseconds")
    total: int = Field(..., ge=0, description="Tasks in the batch")
    failed: int = Field(0, ge=0, description="Tasks that ended in error or warning")
    model_used: Optional[str] = Field(None, description="Model identifier")
    concurrency: Optional[int] = Field(None, ge=1, description="Worker count used")
    timestamp: Optional[datetime] = Field(None, description="When the batch finished (UTC)")

    @field_serializer("timestamp")
    def serialize_timestamp(self, value: Optional[datetime]) -> Optional[str]:
        return value.isoformat() if value else None
