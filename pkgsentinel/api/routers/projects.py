"""Per-project remediation router."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends

from pkgsentinel.api.deps import get_remediation_executor
from pkgsentinel.api.schemas.project import ActionResponse, ProjectStatusSchema
from pkgsentinel.engines.remediation.executor import ActionResult, RemediationExecutor

log = structlog.get_logger("pkgsentinel.api")

router = APIRouter()


def _response(action: str, body: ProjectStatusSchema, result: ActionResult) -> ActionResponse:
    log.info("api.action", action=action, path=body.path, success=result.success)
    return ActionResponse(success=result.success, message=result.message, error=result.error)


@router.post("/upgrade", response_model=ActionResponse)
async def upgrade(
    body: ProjectStatusSchema,
    executor: RemediationExecutor = Depends(get_remediation_executor),
) -> ActionResponse:
    return _response("upgrade", body, await executor.upgrade(body.to_status()))


@router.post("/commit", response_model=ActionResponse)
async def commit_and_push(
    body: ProjectStatusSchema,
    executor: RemediationExecutor = Depends(get_remediation_executor),
) -> ActionResponse:
    return _response("commit", body, await executor.commit_and_push(body.to_status()))


@router.post("/checkout-default", response_model=ActionResponse)
async def checkout_default(
    body: ProjectStatusSchema,
    executor: RemediationExecutor = Depends(get_remediation_executor),
) -> ActionResponse:
    return _response("checkout-default", body, await executor.checkout_default(body.to_status()))


@router.post("/checkout-production", response_model=ActionResponse)
async def checkout_production(
    body: ProjectStatusSchema,
    executor: RemediationExecutor = Depends(get_remediation_executor),
) -> ActionResponse:
    return _response(
        "checkout-production", body, await executor.checkout_production(body.to_status())
    )
