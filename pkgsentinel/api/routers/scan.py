"""Scan router."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from pkgsentinel.api.deps import get_project_scanner
from pkgsentinel.api.schemas.project import ProjectStatusSchema, ScanRequest, ScanResponse
from pkgsentinel.engines.project_scanner.scanner import ProjectScanner, resolve_root

router = APIRouter()


@router.post("", response_model=ScanResponse)
async def scan(
    body: ScanRequest,
    scanner: ProjectScanner = Depends(get_project_scanner),
) -> ScanResponse:
    base = resolve_root(body.path)
    statuses = await scanner.scan(base)
    return ScanResponse(
        base_path=str(base),
        packages=[ProjectStatusSchema.from_status(s) for s in statuses],
    )
