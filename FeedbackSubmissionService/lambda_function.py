"""
AWS Lambda entry point (API Gateway proxy integration)
"""
import asyncio
import logging

from app.core.config import settings
from app.integrations.store_client import create_store_client
from app.pipelines.feedback import FeedbackSubmissionHandler

# The Lambda runtime installs its own log handler; only the level is set here
logging.getLogger().setLevel(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Built once per execution environment and reused across invocations
store_client = create_store_client(settings)
feedback_handler = FeedbackSubmissionHandler(store_client, settings.TABLE_NAME)


def lambda_handler(event, context):
    """Handle one API Gateway event and return the proxy response."""
    return asyncio.run(feedback_handler.handle(event or {}))
