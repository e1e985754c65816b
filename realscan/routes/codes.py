"""Access code routes — admin list/create/revoke and scanner validation."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from realscan.deps import get_manager
from realscan.kernel.lifecycle import CodeLifecycleManager
from realscan.models.code import (
    CodeListItem,
    CodeListResponse,
    CreateCodeRequest,
    CreateCodeResponse,
    OkResponse,
    ValidateResponse,
)

router = APIRouter(prefix="/api", tags=["codes"])


@router.get("/codes", status_code=200)
async def list_codes(manager: CodeLifecycleManager = Depends(get_manager)) -> CodeListResponse:
    """List every code, newest first, with live status and remaining seconds."""
    views = await manager.list_codes()
    return CodeListResponse(codes=[CodeListItem.from_view(v) for v in views])


@router.post("/codes", status_code=200)
async def create_code(
    req: CreateCodeRequest,
    manager: CodeLifecycleManager = Depends(get_manager),
) -> CreateCodeResponse:
    """
    Issue a new code.

    Body: {duration: number, unit: "minutes" | "hours", note: string}
    Bad duration/unit → 400 {ok: false, error} (see exception handlers in main).
    """
    generated = await manager.generate(req.duration, req.unit, req.note)
    return CreateCodeResponse.from_generated(generated)


@router.delete("/codes/{code}", status_code=200)
async def revoke_code(
    code: str,
    manager: CodeLifecycleManager = Depends(get_manager),
) -> OkResponse:
    """Revoke a code. Unknown code → 404."""
    await manager.revoke(code)
    return OkResponse()


@router.get("/validate", status_code=200, response_model_exclude_none=True)
async def validate_code(
    code: str | None = None,
    manager: CodeLifecycleManager = Depends(get_manager),
) -> ValidateResponse:
    """
    Scanner check: ?code=xxxxxx

    Expired, revoked and unknown codes are normal 200 answers with ok=false.
    A missing or blank code → 400 {ok: false, reason}.
    """
    result = await manager.validate(code)
    return ValidateResponse.from_result(result)
