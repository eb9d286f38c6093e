"""
Auth context - the "who is asking" for each request.

This is the lightweight object passed to route handlers once the
bearer token has been resolved to a stored actor. It answers role and
ownership questions; it never loads anything itself.
"""

from __future__ import annotations

from dataclasses import dataclass

from bugbounty.core.models import Program, ReportWithProgram, Role, User


@dataclass(frozen=True)
class AuthContext:
    """
    Authorization context for an authenticated request.

    Usage in routes:
        async def my_route(ctx: AuthContext = Depends(require_roles(Role.COMPANY))):
            if ctx.owns(program):
                ...
    """

    user: User

    @property
    def user_id(self) -> str:
        return self.user.id

    @property
    def role(self) -> Role:
        return self.user.role

    def has_role(self, *roles: Role) -> bool:
        return self.user.role in roles

    def owns(self, resource: Program | ReportWithProgram) -> bool:
        """Is this actor the company that owns the resource?"""
        return owns(self.user, resource)

    def submitted(self, report: ReportWithProgram) -> bool:
        """Is this actor the researcher that submitted the report?"""
        return self.has_role(Role.RESEARCHER) and report.researcher_id == self.user.id


def owns(actor: User, resource: Program | ReportWithProgram) -> bool:
    """
    Ownership predicate shared by every ownership-gated route.

    Programs are owned by their company; reports are owned through their
    parent program, never directly.
    """
    if isinstance(resource, ReportWithProgram):
        return resource.program.company_id == actor.id
    if isinstance(resource, Program):
        return resource.company_id == actor.id
    raise TypeError(f"Ownership is not defined for {type(resource).__name__}")
