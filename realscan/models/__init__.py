"""
Pydantic models for REALSCAN.

All HTTP data shapes defined here. No imports from routes.
"""

from realscan.models.code import (
    CodeListItem,
    CodeListResponse,
    CreateCodeRequest,
    CreateCodeResponse,
    ErrorResponse,
    OkResponse,
    ValidateResponse,
)

__all__ = [
    # Admin
    "CreateCodeRequest",
    "CreateCodeResponse",
    "CodeListItem",
    "CodeListResponse",
    "OkResponse",
    "ErrorResponse",
    # Scanner
    "ValidateResponse",
]
