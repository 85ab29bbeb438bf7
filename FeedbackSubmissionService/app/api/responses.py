"""
Gateway response shaping shared by every status path
"""
import json
from typing import Any, Dict

from pydantic import BaseModel

RESPONSE_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
}


def build_response(status_code: int, body: BaseModel) -> Dict[str, Any]:
    """
    Build an API Gateway proxy response.

    :param status_code: HTTP status code
    :param body: Response schema, serialized as compact JSON
    :return: ``{"statusCode", "headers", "body"}`` mapping
    """
    return {
        "statusCode": status_code,
        "headers": dict(RESPONSE_HEADERS),
        "body": json.dumps(body.model_dump(), separators=(",", ":")),
    }
