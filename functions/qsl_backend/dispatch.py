"""
Maps named actions onto CardService calls and wraps results in envelopes.

Shared by the FastAPI route and the serverless entry point.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any, Mapping, Optional

from qsl_backend.errors import QslError, RequestError
from qsl_backend.models import CardRole
from qsl_backend.schemas import ErrorEnvelope, SuccessEnvelope
from qsl_backend.service import CardService

logger = logging.getLogger(__name__)

SUPPORTED_ACTIONS = (
    "ping",
    "getStats",
    "getChartData",
    "getSentCards",
    "getReceivedCards",
    "saveCard",
    "deleteCard",
)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, GET, OPTIONS, DELETE",
    "Access-Control-Allow-Headers": "Content-Type",
    "Content-Type": "application/json",
}


def parse_body(raw: Any, *, is_base64: bool = False) -> dict:
    """Decode a request body into a dict; an absent body is ``{}``."""
    if raw is None or raw == "" or raw == b"":
        return {}
    if isinstance(raw, dict):
        return raw
    if not isinstance(raw, (str, bytes)):
        raise RequestError("Malformed request body: expected a JSON object", 3001)
    try:
        if is_base64:
            raw = base64.b64decode(raw)
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        if not raw.strip():
            return {}
        body = json.loads(raw)
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise RequestError(f"Malformed request body: {exc}", 3001) from exc
    if not isinstance(body, dict):
        raise RequestError("Malformed request body: expected a JSON object", 3001)
    return body


def _delete_role(value: Optional[str]) -> CardRole:
    if value not in (CardRole.SENT.value, CardRole.RECEIVED.value):
        raise RequestError("Card type is required (type=sent/received)", 3003)
    return CardRole(value)


def run_action(
    service: CardService, query: Mapping[str, Any], body: Mapping[str, Any]
) -> Any:
    """Execute one action; the query string wins over the body for every flag."""
    action = query.get("action") or body.get("action")
    if not action or action not in SUPPORTED_ACTIONS:
        raise RequestError(
            "A valid action is required, supported actions: "
            + ", ".join(SUPPORTED_ACTIONS),
            3002,
        )

    if action == "ping":
        return service.ping()
    if action == "getStats":
        return service.get_stats()
    if action == "getChartData":
        return service.get_chart_data()
    if action == "getSentCards":
        return service.get_sent_cards()
    if action == "getReceivedCards":
        return service.get_received_cards()
    if action == "saveCard":
        role = (
            CardRole.RECEIVED
            if body.get("type") == CardRole.RECEIVED.value
            else CardRole.SENT
        )
        return service.save_card(body.get("cardData"), role)
    if action == "deleteCard":
        role = _delete_role(query.get("type") or body.get("type"))
        return service.delete_card(query.get("cardId") or body.get("cardId"), role)
    raise RequestError(f"Unknown action: {action}", 3004)


def success(data: Any, request_id: str) -> dict:
    return SuccessEnvelope(data=data, requestId=request_id).model_dump()


def failure(exc: Exception, request_id: str) -> tuple[int, dict]:
    """Return (HTTP status, envelope) for any exception raised by an action."""
    if isinstance(exc, QslError):
        logger.warning(
            "Request %s failed: code=%s %s", request_id, exc.code, exc.message
        )
        envelope = ErrorEnvelope(
            code=exc.code, message=exc.message, requestId=request_id
        )
        return exc.status_code, envelope.model_dump()

    logger.exception("Request %s failed unexpectedly", request_id, exc_info=exc)
    envelope = ErrorEnvelope(
        code=-1, message="Internal server error", requestId=request_id
    )
    return 500, envelope.model_dump()


def handle(
    service: CardService,
    query: Mapping[str, Any],
    raw_body: Any,
    request_id: str,
    *,
    is_base64: bool = False,
) -> tuple[int, dict]:
    """Parse, run and envelope one request. Never raises."""
    try:
        body = parse_body(raw_body, is_base64=is_base64)
        result = run_action(service, query or {}, body)
    except Exception as exc:
        return failure(exc, request_id)
    return 200, success(result, request_id)
