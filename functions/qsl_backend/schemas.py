"""
Pydantic schemas for the QSL card API envelopes.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

SUCCESS_MESSAGE = "Operation succeeded"


class SuccessEnvelope(BaseModel):
    code: int = 0
    message: str = SUCCESS_MESSAGE
    data: Any = None
    requestId: str


class ErrorEnvelope(BaseModel):
    code: int
    message: str
    requestId: str
