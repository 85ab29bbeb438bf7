"""
Pydantic schemas for feedback responses
"""
from pydantic import BaseModel, Field


class FeedbackCreatedResponse(BaseModel):
    """Schema for a stored submission"""
    ok: bool = True
    id: str = Field(..., min_length=1, description="Generated record id")


class ErrorResponse(BaseModel):
    """Schema for any failed submission"""
    error: str = Field(..., description="Static, caller-safe error message")
