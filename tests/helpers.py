"""
Request helpers shared by the API tests.
"""

import itertools

_emails = itertools.count()

PASSWORD = "correct-horse-battery"


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def unique_email() -> str:
    return f"user{next(_emails)}@example.com"


def register(client, role: str = "RESEARCHER", email: str | None = None, name: str = "Test User"):
    """Register an actor, return (token, user json)."""
    response = client.post(
        "/api/auth/register",
        json={"name": name, "email": email or unique_email(), "password": PASSWORD, "role": role},
    )
    assert response.status_code == 201, response.text
    body = response.json()
    return body["token"], body["user"]


def create_program(client, token: str, **overrides):
    data = {
        "name": "Acme Web",
        "description": "Our public web properties",
        "scope": "*.acme.test",
        "rewardMin": 100,
        "rewardMax": 1000,
        **overrides,
    }
    response = client.post("/api/programs", json=data, headers=bearer(token))
    assert response.status_code == 201, response.text
    return response.json()


def submit_report(client, token: str, program_id: str, title: str = "Stored XSS"):
    response = client.post(
        "/api/reports",
        json={"programId": program_id, "title": title, "description": "Payload in profile name"},
        headers=bearer(token),
    )
    assert response.status_code == 201, response.text
    return response.json()
