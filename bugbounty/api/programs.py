"""
Program routes.

Reads are public. Writes need a COMPANY actor, and update/delete need
the company that owns the program.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from bugbounty.api.deps import get_storage
from bugbounty.auth.context import AuthContext
from bugbounty.auth.policies import ensure_owner, require_roles
from bugbounty.core.errors import NotFound, ValidationError
from bugbounty.core.models import Program, ProgramCreate, ProgramUpdate, Role
from bugbounty.services import programs as program_service
from bugbounty.storage import MetadataStorage

router = APIRouter(prefix="/programs", tags=["programs"])


async def _load_program(storage: MetadataStorage, program_id: str) -> Program:
    program = await program_service.get_program(storage, program_id)
    if not program:
        raise NotFound("Program not found")
    return program


# =============================================================================
# Public
# =============================================================================


@router.get("", response_model=list[Program])
async def list_programs(storage: MetadataStorage = Depends(get_storage)):
    """List all programs."""
    return await program_service.list_programs(storage)


@router.get("/{program_id}", response_model=Program)
async def get_program(program_id: str, storage: MetadataStorage = Depends(get_storage)):
    """Get a program by ID."""
    return await _load_program(storage, program_id)


# =============================================================================
# Company only
# =============================================================================


@router.post("", response_model=Program, status_code=status.HTTP_201_CREATED)
async def create_program(
    data: ProgramCreate | None = None,
    ctx: AuthContext = Depends(require_roles(Role.COMPANY)),
    storage: MetadataStorage = Depends(get_storage),
):
    """Create a program owned by the calling company."""
    data = data or ProgramCreate()
    if not all([data.name, data.description, data.scope, data.reward_min, data.reward_max]):
        raise ValidationError("All fields are required")

    return await program_service.create_program(storage, data, company_id=ctx.user_id)


@router.put("/{program_id}", response_model=Program)
async def update_program(
    program_id: str,
    data: ProgramUpdate,
    ctx: AuthContext = Depends(require_roles(Role.COMPANY)),
    storage: MetadataStorage = Depends(get_storage),
):
    """Update the supplied fields of a program the caller owns."""
    program = await _load_program(storage, program_id)
    ensure_owner(ctx, program, "You are not authorized to update this program")
    return await program_service.update_program(storage, program, data)


@router.delete("/{program_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_program(
    program_id: str,
    ctx: AuthContext = Depends(require_roles(Role.COMPANY)),
    storage: MetadataStorage = Depends(get_storage),
):
    """Delete a program the caller owns, with its reports."""
    program = await _load_program(storage, program_id)
    ensure_owner(ctx, program, "You are not authorized to delete this program")
    await program_service.delete_program(storage, program)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
