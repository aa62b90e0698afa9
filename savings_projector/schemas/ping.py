"""Pydantic schema for the ping endpoint."""

from pydantic import BaseModel, Field


class PingResponse(BaseModel):
    message: str
    scenarios: int = Field(..., ge=0, description="Number of saved scenarios.")
