"""
Record model for a stored feedback submission
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict

from app.core.identifiers import generate_feedback_id, isoformat_utc


@dataclass(frozen=True)
class FeedbackRecord:
    """FeedbackRecord - one persisted submission, keyed by ``id``"""
    id: str
    name: Any
    email: Any
    message: Any
    created_at: str

    @classmethod
    def create(
        cls,
        name: Any,
        email: Any,
        message: Any,
        now: datetime,
        id_factory: Callable[[datetime], str] = generate_feedback_id,
    ) -> "FeedbackRecord":
        """Build a new record; ``id`` and ``createdAt`` come from the same clock reading."""
        return cls(
            id=id_factory(now),
            name=name,
            email=email,
            message=message,
            created_at=isoformat_utc(now),
        )

    def to_item(self) -> Dict[str, Any]:
        """Convert to the store item layout (attribute names as written to the table)."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "message": self.message,
            "createdAt": self.created_at,
        }

    def __repr__(self):
        return f"<FeedbackRecord(id='{self.id}', created_at='{self.created_at}')>"
