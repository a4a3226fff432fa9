"""
HTTP routes for the QSL card API.
"""

from __future__ import annotations

import logging
from uuid import uuid4

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from qsl_backend import dispatch
from qsl_backend.dependencies import get_card_service
from qsl_backend.service import CardService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.api_route("/qsl", methods=["GET", "POST", "DELETE"])
async def qsl_action(
    request: Request, service: CardService = Depends(get_card_service)
):
    """
    Run the action named in the query string or JSON body.

    Store calls block, so the action runs on the threadpool.
    """
    request_id = request.headers.get("x-request-id") or str(uuid4())
    raw_body = await request.body()
    status_code, envelope = await run_in_threadpool(
        dispatch.handle, service, dict(request.query_params), raw_body, request_id
    )
    return JSONResponse(status_code=status_code, content=envelope)
