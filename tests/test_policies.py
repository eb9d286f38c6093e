"""
Tests for the ownership predicate and auth context.
"""

import pytest

from bugbounty.auth import AuthContext, owns
from bugbounty.core.models import Program, Report, ReportWithProgram, Role, User


def make_user(user_id: str, role: Role) -> User:
    return User(id=user_id, email=f"{user_id}@example.com", name=user_id, password_hash="x", role=role)


@pytest.fixture
def acme():
    return make_user("user_acme", Role.COMPANY)


@pytest.fixture
def rita():
    return make_user("user_rita", Role.RESEARCHER)


@pytest.fixture
def program(acme):
    return Program(
        id="prog_1",
        name="Acme",
        description="d",
        scope="s",
        reward_min=1,
        reward_max=2,
        company_id=acme.id,
    )


@pytest.fixture
def report(program, rita):
    return ReportWithProgram(
        id="rep_1",
        title="t",
        description="d",
        program_id=program.id,
        researcher_id=rita.id,
        program=program,
    )


class TestOwns:
    def test_company_owns_its_program(self, acme, program):
        assert owns(acme, program)

    def test_other_actor_does_not(self, rita, program):
        assert not owns(rita, program)

    def test_report_owned_through_parent_program(self, acme, report):
        assert owns(acme, report)

    def test_submitter_does_not_own_report(self, rita, report):
        assert not owns(rita, report)

    def test_bare_report_has_no_owner(self, acme, report):
        bare = Report.model_validate(report.model_dump(exclude={"program"}))

        with pytest.raises(TypeError):
            owns(acme, bare)


class TestAuthContext:
    def test_role_checks(self, acme):
        ctx = AuthContext(user=acme)

        assert ctx.has_role(Role.COMPANY)
        assert ctx.has_role(Role.RESEARCHER, Role.COMPANY)
        assert not ctx.has_role(Role.RESEARCHER)

    def test_submitted_requires_researcher_role(self, rita, report):
        assert AuthContext(user=rita).submitted(report)

        promoted = rita.model_copy(update={"role": Role.COMPANY})
        assert not AuthContext(user=promoted).submitted(report)

    def test_owner_via_context(self, acme, report):
        assert AuthContext(user=acme).owns(report)
