"""
Report routes.

Who sees what:
- the submitting researcher sees their own reports;
- the company owning the parent program sees every report on it;
- only that company may change status or severity.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from bugbounty.api.deps import get_storage
from bugbounty.auth.context import AuthContext
from bugbounty.auth.policies import ensure_owner, require_roles
from bugbounty.core.errors import Forbidden, NotFound, ValidationError
from bugbounty.core.models import (
    Report,
    ReportCreate,
    ReportStatusUpdate,
    ReportWithProgram,
    Role,
)
from bugbounty.services import programs as program_service
from bugbounty.services import reports as report_service
from bugbounty.storage import MetadataStorage

router = APIRouter(prefix="/reports", tags=["reports"])


async def _load_report(storage: MetadataStorage, report_id: str) -> ReportWithProgram:
    report = await report_service.get_report(storage, report_id)
    if not report:
        raise NotFound("Report not found")
    return report


@router.post("", response_model=Report, status_code=status.HTTP_201_CREATED)
async def create_report(
    data: ReportCreate | None = None,
    ctx: AuthContext = Depends(require_roles(Role.RESEARCHER)),
    storage: MetadataStorage = Depends(get_storage),
):
    """Submit a report against an existing program."""
    data = data or ReportCreate()
    if not data.program_id or not data.title or not data.description:
        raise ValidationError("Program ID, title, and description are required")

    program = await program_service.get_program(storage, data.program_id)
    if not program:
        raise NotFound("Program not found")

    return await report_service.create_report(
        storage,
        program,
        researcher_id=ctx.user_id,
        title=data.title,
        description=data.description,
    )


@router.get("/program/{program_id}", response_model=list[Report])
async def list_reports_for_program(
    program_id: str,
    ctx: AuthContext = Depends(require_roles(Role.COMPANY, Role.RESEARCHER)),
    storage: MetadataStorage = Depends(get_storage),
):
    """
    Reports on a program.

    A company must own the program and sees everything. Anyone else is
    never refused; they just see their own submissions.
    """
    program = await program_service.get_program(storage, program_id)
    if not program:
        raise NotFound("Program not found")

    if ctx.has_role(Role.COMPANY):
        ensure_owner(ctx, program, "You are not authorized to view reports for this program")
        return await report_service.list_reports(storage, program_id)

    return await report_service.list_reports(storage, program_id, researcher_id=ctx.user_id)


@router.get("/{report_id}", response_model=ReportWithProgram)
async def get_report(
    report_id: str,
    ctx: AuthContext = Depends(require_roles(Role.COMPANY, Role.RESEARCHER)),
    storage: MetadataStorage = Depends(get_storage),
):
    """Get a report, for its researcher or the owning company."""
    report = await _load_report(storage, report_id)

    owning_company = ctx.has_role(Role.COMPANY) and ctx.owns(report)
    if not owning_company and not ctx.submitted(report):
        raise Forbidden("You are not authorized to view this report")

    return report


@router.patch("/{report_id}/status", response_model=Report)
async def update_report_status(
    report_id: str,
    data: ReportStatusUpdate | None = None,
    ctx: AuthContext = Depends(require_roles(Role.COMPANY)),
    storage: MetadataStorage = Depends(get_storage),
):
    """Change status and/or severity of a report on the caller's program."""
    data = data or ReportStatusUpdate()
    report_service.validate_status_update(data)

    report = await _load_report(storage, report_id)
    ensure_owner(ctx, report, "You are not authorized to update this report")
    return await report_service.update_report_status(storage, report, data)
