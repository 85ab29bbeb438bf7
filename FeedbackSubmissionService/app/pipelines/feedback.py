import asyncio
import json
import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from app.api.responses import build_response
from app.core.exceptions import ClientInputError, InvalidJSONBodyError, MissingFieldsError
from app.core.identifiers import generate_feedback_id, utc_now
from app.integrations.store_client import StoreClient, StoreException
from app.models.feedback_record import FeedbackRecord
from app.schemas.feedback import ErrorResponse, FeedbackCreatedResponse

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "email", "message")
SAVE_FAILED_MESSAGE = "Failed to save feedback"


def _reject_constant(name: str):
    # NaN, Infinity and -Infinity are not JSON
    raise ValueError(f"Invalid JSON constant: {name}")


def parse_body(body: Optional[str]) -> Any:
    """
    Parse the raw event body. A missing or empty body is an empty payload.

    :raises InvalidJSONBodyError: If the body is not valid JSON
    """
    if not body:
        return {}

    try:
        return json.loads(body, parse_constant=_reject_constant)
    except (ValueError, TypeError) as e:
        raise InvalidJSONBodyError() from e


def extract_submission(payload: Any) -> Dict[str, Any]:
    """
    Pull name, email and message out of the payload.

    Validation is shallow: any truthy value is accepted, with no type,
    length or email format checks. Non-object payloads carry no fields.

    :raises MissingFieldsError: If any required field is missing or falsy
    """
    if not isinstance(payload, dict):
        payload = {}

    fields = {name: payload.get(name) for name in REQUIRED_FIELDS}
    if not all(fields.values()):
        raise MissingFieldsError()

    return fields


class FeedbackSubmissionHandler:
    """
    Feedback Handler: validates one submission and writes it to the store.

    Each call to ``handle`` is independent. The store client is built once per
    process and passed in; the handler keeps no other state.
    """

    def __init__(
        self,
        store: StoreClient,
        table_name: str,
        id_factory: Callable[[datetime], str] = generate_feedback_id,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.table_name = table_name
        self.id_factory = id_factory
        self.clock = clock

    async def handle(self, event: Dict[str, Any]) -> Dict[str, Any]:
        """
        Handle one gateway event and return the proxy response mapping.

        :param event: Mapping with an optional raw ``body`` string
        :return: ``{"statusCode", "headers", "body"}``
        """
        logger.info(f"Event: {json.dumps(event, default=str)}")

        try:
            submission = extract_submission(parse_body(event.get("body")))
        except ClientInputError as e:
            logger.warning(f"Rejected submission: {e.message}")
            return build_response(400, ErrorResponse(error=e.message))

        record = FeedbackRecord.create(
            name=submission["name"],
            email=submission["email"],
            message=submission["message"],
            now=self.clock(),
            id_factory=self.id_factory,
        )

        try:
            await self._save(record)
        except StoreException as e:
            logger.error(f"Store error while saving {record.id}: {e}", exc_info=True)
            return build_response(500, ErrorResponse(error=SAVE_FAILED_MESSAGE))
        except Exception as e:
            # Untranslated client errors map to the same generic 500
            logger.error(f"Unexpected error while saving {record.id}: {e}", exc_info=True)
            return build_response(500, ErrorResponse(error=SAVE_FAILED_MESSAGE))

        logger.info(f"Feedback saved: {self.table_name}/{record.id}")
        return build_response(201, FeedbackCreatedResponse(id=record.id))

    async def _save(self, record: FeedbackRecord) -> None:
        """Run the blocking store write in the default executor."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self.store.put_item, self.table_name, record.to_item())
