"""
Tests for program routes: public reads, company-only writes, ownership.
"""

import pytest

from helpers import bearer, create_program, submit_report


class TestPublicReads:
    def test_list_is_public(self, client, program):
        response = client.get("/api/programs")

        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [program["id"]]

    def test_get_by_id(self, client, program, company):
        _, company_user = company

        response = client.get(f"/api/programs/{program['id']}")

        assert response.status_code == 200
        body = response.json()
        assert body["companyId"] == company_user["id"]
        assert body["rewardMin"] == 100
        assert body["rewardMax"] == 1000

    def test_get_is_idempotent(self, client, program):
        first = client.get(f"/api/programs/{program['id']}").json()

        for _ in range(3):
            assert client.get(f"/api/programs/{program['id']}").json() == first

    def test_unknown_id_is_404(self, client):
        response = client.get("/api/programs/prog_missing")

        assert response.status_code == 404
        assert response.json() == {"status": 404, "error": "Program not found", "details": None}


class TestCreate:
    def test_owner_is_the_caller(self, client, company):
        token, user = company

        program = create_program(client, token, companyId="user_someone_else")

        assert program["companyId"] == user["id"]

    def test_requires_token(self, client):
        response = client.post("/api/programs", json={"name": "x"})

        assert response.status_code == 401

    @pytest.mark.parametrize("actor", ["researcher", "admin"])
    def test_non_company_is_403(self, client, request, actor):
        token, _ = request.getfixturevalue(actor)

        response = client.post(
            "/api/programs",
            json={"name": "n", "description": "d", "scope": "s", "rewardMin": 1, "rewardMax": 2},
            headers=bearer(token),
        )

        assert response.status_code == 403
        assert response.json()["error"] == "You do not have permission to perform this action"

    @pytest.mark.parametrize("missing", ["name", "description", "scope", "rewardMin", "rewardMax"])
    def test_missing_field_is_400(self, client, company, missing):
        token, _ = company
        data = {"name": "n", "description": "d", "scope": "s", "rewardMin": 1, "rewardMax": 2}
        del data[missing]

        response = client.post("/api/programs", json=data, headers=bearer(token))

        assert response.status_code == 400
        assert response.json()["error"] == "All fields are required"

    def test_reward_range_order_not_enforced(self, client, company):
        token, _ = company

        program = create_program(client, token, rewardMin=5000, rewardMax=10)

        assert (program["rewardMin"], program["rewardMax"]) == (5000, 10)


class TestUpdate:
    def test_owner_updates_supplied_fields(self, client, company, program):
        token, _ = company

        response = client.put(
            f"/api/programs/{program['id']}",
            json={"name": "Acme Web v2", "rewardMax": 5000},
            headers=bearer(token),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Acme Web v2"
        assert body["rewardMax"] == 5000
        assert body["scope"] == program["scope"]
        assert body["rewardMin"] == program["rewardMin"]

    def test_owner_cannot_be_changed(self, client, company, other_company, program):
        token, user = company
        _, other = other_company

        response = client.put(
            f"/api/programs/{program['id']}",
            json={"companyId": other["id"]},
            headers=bearer(token),
        )

        assert response.status_code == 200
        assert response.json()["companyId"] == user["id"]

    def test_other_company_is_403(self, client, other_company, program):
        token, _ = other_company

        response = client.put(f"/api/programs/{program['id']}", json={"name": "pwned"}, headers=bearer(token))

        assert response.status_code == 403
        assert response.json()["error"] == "You are not authorized to update this program"
        assert client.get(f"/api/programs/{program['id']}").json()["name"] == program["name"]

    def test_researcher_is_403(self, client, researcher, program):
        token, _ = researcher

        response = client.put(f"/api/programs/{program['id']}", json={"name": "x"}, headers=bearer(token))

        assert response.status_code == 403

    def test_missing_program_is_404_even_for_non_owner(self, client, other_company):
        token, _ = other_company

        response = client.put("/api/programs/prog_missing", json={"name": "x"}, headers=bearer(token))

        assert response.status_code == 404


class TestDelete:
    def test_owner_deletes(self, client, company, program):
        token, _ = company

        response = client.delete(f"/api/programs/{program['id']}", headers=bearer(token))

        assert response.status_code == 204
        assert response.content == b""
        assert client.get(f"/api/programs/{program['id']}").status_code == 404

    def test_delete_cascades_to_reports(self, client, company, researcher, program):
        company_token, _ = company
        researcher_token, _ = researcher
        report = submit_report(client, researcher_token, program["id"])

        client.delete(f"/api/programs/{program['id']}", headers=bearer(company_token))

        response = client.get(f"/api/reports/{report['id']}", headers=bearer(researcher_token))
        assert response.status_code == 404

    def test_other_company_is_403(self, client, other_company, program):
        token, _ = other_company

        response = client.delete(f"/api/programs/{program['id']}", headers=bearer(token))

        assert response.status_code == 403
        assert response.json()["error"] == "You are not authorized to delete this program"
        assert client.get(f"/api/programs/{program['id']}").status_code == 200

    def test_missing_program_is_404(self, client, company):
        token, _ = company

        response = client.delete("/api/programs/prog_missing", headers=bearer(token))

        assert response.status_code == 404
