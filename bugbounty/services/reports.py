"""
Report persistence and triage workflow.

A report is submitted by a researcher against a program. Afterwards only
its status and severity change, and only the company owning the parent
program may change them. There is no transition graph: any status may
follow any other, and status and severity move independently.
"""

from __future__ import annotations

import logging

from bugbounty.core.errors import NotFound, ValidationError
from bugbounty.core.models import (
    Program,
    Report,
    ReportStatusUpdate,
    ReportWithProgram,
)
from bugbounty.core.utils import utc_now
from bugbounty.services.programs import get_program
from bugbounty.storage import Collections, MetadataStorage

logger = logging.getLogger(__name__)


async def create_report(
    storage: MetadataStorage,
    program: Program,
    researcher_id: str,
    title: str,
    description: str,
) -> Report:
    report = Report(
        title=title,
        description=description,
        program_id=program.id,
        researcher_id=researcher_id,
    )
    await storage.save(Collections.REPORTS, report.id, report.model_dump())
    logger.info("Report %s submitted to %s by %s", report.id, program.id, researcher_id)
    return report


async def get_report(storage: MetadataStorage, report_id: str) -> ReportWithProgram | None:
    """Load a report with its parent program attached."""
    doc = await storage.get(Collections.REPORTS, report_id)
    if not doc:
        return None
    program = await get_program(storage, doc["program_id"])
    if program is None:
        # Orphaned report: the program went away underneath it.
        return None
    return ReportWithProgram.model_validate({**doc, "program": program})


async def list_reports(
    storage: MetadataStorage,
    program_id: str,
    researcher_id: str | None = None,
) -> list[Report]:
    """Reports on a program, optionally narrowed to one researcher."""
    filters = {"program_id": program_id}
    if researcher_id is not None:
        filters["researcher_id"] = researcher_id
    docs = await storage.query(Collections.REPORTS, filters)
    return [Report.model_validate(doc) for doc in docs]


def validate_status_update(data: ReportStatusUpdate) -> None:
    if data.status is None and data.severity is None:
        raise ValidationError("Status or severity must be provided")


async def update_report_status(
    storage: MetadataStorage,
    report: Report,
    data: ReportStatusUpdate,
) -> Report:
    """Set status and/or severity; omitted fields keep their value."""
    updates = data.model_dump(exclude_none=True)
    updates["updated_at"] = utc_now()
    doc = await storage.update(Collections.REPORTS, report.id, updates)
    if doc is None:
        raise NotFound("Report not found")
    logger.info(
        "Report %s updated: %s",
        report.id,
        ", ".join(f"{k}={v.value}" for k, v in updates.items() if k != "updated_at"),
    )
    return Report.model_validate(doc)
