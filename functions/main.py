# Serverless entry for the QSL card API.
#
# Tencent SCF invokes main_handler with an API gateway event. The event is
# unpacked here and handed to the same dispatcher the FastAPI app uses.

# Standard library imports
import json
import logging
from typing import Any
from uuid import uuid4

# Local application imports
from qsl_backend import dispatch
from qsl_backend.config import get_settings
from qsl_backend.dependencies import get_card_service

logging.basicConfig(level=get_settings().log_level.upper())
logger = logging.getLogger(__name__)


def _request_id(event: dict, context: Any) -> str:
    if isinstance(context, dict):
        request_id = context.get("request_id") or context.get("requestId")
    else:
        request_id = getattr(context, "request_id", None)
    return (
        request_id
        or event.get("requestId")
        or (event.get("requestContext") or {}).get("requestId")
        or str(uuid4())
    )


def main_handler(event: dict, context: Any = None) -> dict:
    """
    Handle one API gateway invocation.

    Args:
        event (dict): Gateway event with httpMethod, queryString, body and
            isBase64Encoded.
        context: SCF invocation context carrying the request id.

    Returns:
        dict: statusCode, headers and a JSON body holding the envelope.
    """
    if event.get("httpMethod") == "OPTIONS":
        return {"statusCode": 204, "headers": dict(dispatch.CORS_HEADERS), "body": ""}

    request_id = _request_id(event, context)
    status_code, envelope = dispatch.handle(
        get_card_service(),
        event.get("queryString") or {},
        event.get("body"),
        request_id,
        is_base64=bool(event.get("isBase64Encoded")),
    )
    return {
        "statusCode": status_code,
        "headers": dict(dispatch.CORS_HEADERS),
        "body": json.dumps(envelope, ensure_ascii=False),
    }
