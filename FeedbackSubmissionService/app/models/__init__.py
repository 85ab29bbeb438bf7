"""
Record models for the feedback service
"""
from app.models.feedback_record import FeedbackRecord

__all__ = [
    "FeedbackRecord",
]
