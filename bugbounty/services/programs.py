"""
Program persistence.

Programs belong to exactly one COMPANY actor. The owner is taken from
the authenticated actor at creation and never changes afterwards.
"""

from __future__ import annotations

import logging

from bugbounty.core.errors import NotFound
from bugbounty.core.models import Program, ProgramCreate, ProgramUpdate
from bugbounty.core.utils import utc_now
from bugbounty.storage import Collections, MetadataStorage

logger = logging.getLogger(__name__)


async def create_program(storage: MetadataStorage, data: ProgramCreate, company_id: str) -> Program:
    program = Program(
        name=data.name,
        description=data.description,
        scope=data.scope,
        reward_min=data.reward_min,
        reward_max=data.reward_max,
        company_id=company_id,
    )
    await storage.save(Collections.PROGRAMS, program.id, program.model_dump())
    logger.info("Program %s created by %s", program.id, company_id)
    return program


async def get_program(storage: MetadataStorage, program_id: str) -> Program | None:
    doc = await storage.get(Collections.PROGRAMS, program_id)
    return Program.model_validate(doc) if doc else None


async def list_programs(storage: MetadataStorage) -> list[Program]:
    docs = await storage.query(Collections.PROGRAMS)
    return [Program.model_validate(doc) for doc in docs]


async def update_program(storage: MetadataStorage, program: Program, data: ProgramUpdate) -> Program:
    """Apply the supplied fields; omitted fields keep their value."""
    updates = data.model_dump(exclude_none=True)
    updates["updated_at"] = utc_now()
    doc = await storage.update(Collections.PROGRAMS, program.id, updates)
    if doc is None:
        raise NotFound("Program not found")
    return Program.model_validate(doc)


async def delete_program(storage: MetadataStorage, program: Program) -> None:
    """Delete a program together with its reports."""
    await storage.delete(Collections.PROGRAMS, program.id)
    removed = await storage.delete_many(Collections.REPORTS, {"program_id": program.id})
    logger.info("Program %s deleted (%d reports removed)", program.id, removed)
