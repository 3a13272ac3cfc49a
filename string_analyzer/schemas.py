from datetime import datetime

from pydantic import BaseModel, Field, StrictStr


class StringCreate(BaseModel):
    value: StrictStr = Field(..., description="String to analyze")


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    total_strings: int
