"""
Sample data for local development.

Creates an admin, a company and a researcher (password "testtest"),
one program owned by the company and one report on it. Previous seed
rows are removed first, so seeding twice leaves a single copy.

Enabled at startup with SEED_SAMPLE_DATA=true.
"""

from __future__ import annotations

import logging

from bugbounty.auth.users import create_user, get_user_by_email
from bugbounty.core.models import Program, Report, ReportStatus, Role, Severity
from bugbounty.storage import Collections, MetadataStorage

logger = logging.getLogger(__name__)

SEED_PASSWORD = "testtest"
SEED_PROGRAM_NAME = "Sample Bug Bounty Program"

SEED_USERS = [
    ("Admin User", "admin@example.com", Role.ADMIN),
    ("Company User", "company@example.com", Role.COMPANY),
    ("Researcher User", "researcher@example.com", Role.RESEARCHER),
]


async def _clear(storage: MetadataStorage) -> None:
    for program in await storage.query(Collections.PROGRAMS, {"name": SEED_PROGRAM_NAME}):
        await storage.delete_many(Collections.REPORTS, {"program_id": program["id"]})
        await storage.delete(Collections.PROGRAMS, program["id"])

    for _, email, _ in SEED_USERS:
        user = await get_user_by_email(storage, email)
        if user:
            await storage.delete_many(Collections.REPORTS, {"researcher_id": user.id})
            await storage.delete(Collections.USERS, user.id)


async def seed(storage: MetadataStorage) -> dict[str, str]:
    """Seed sample rows, return the ids created."""
    logger.info("Seeding sample data...")
    await _clear(storage)

    users = {}
    for name, email, role in SEED_USERS:
        users[role] = await create_user(
            storage, name=name, email=email, password=SEED_PASSWORD, role=role
        )

    program = Program(
        name=SEED_PROGRAM_NAME,
        description="Find and report bugs in our system.",
        scope="api.example.com",
        reward_min=100,
        reward_max=1000,
        company_id=users[Role.COMPANY].id,
    )
    await storage.save(Collections.PROGRAMS, program.id, program.model_dump())

    report = Report(
        title="Sample Bug Report",
        description="This is a sample bug report.",
        severity=Severity.HIGH,
        status=ReportStatus.OPEN,
        program_id=program.id,
        researcher_id=users[Role.RESEARCHER].id,
    )
    await storage.save(Collections.REPORTS, report.id, report.model_dump())

    logger.info("Sample data seeded")
    return {
        "admin": users[Role.ADMIN].id,
        "company": users[Role.COMPANY].id,
        "researcher": users[Role.RESEARCHER].id,
        "program": program.id,
        "report": report.id,
    }
