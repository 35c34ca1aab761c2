from __future__ import annotations

from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from crewup.project.errors import AccessError, ServiceResult, StoreError


def error_payload(error: AccessError) -> dict[str, Any]:
    return {"code": error.error_code, "message": error.message}


def unwrap(result: ServiceResult) -> Any:
    """Value of a successful result; failures become an HTTPException."""
    if result.ok:
        return result.value
    raise HTTPException(status_code=result.error.status_code, detail=error_payload(result.error))


def require_confirmation(confirm: bool, action: str) -> None:
    # destructive actions need an explicit ?confirm=true
    if not confirm:
        raise HTTPException(
            status_code=400,
            detail={"code": "confirmation_required", "message": f"Confirm to {action} (pass confirm=true)."},
        )


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": error_payload(exc)})
