"""API test fixtures: FastAPI test client over a fresh tracer session.

Invariants:
    - Every test gets its own TracerSession (no state leaks between tests)
    - get_tracer_session dependency overridden; the process singleton is never touched

Design Decisions:
    - httpx AsyncClient over ASGITransport: exercises routing, validation and
      the global error handlers without a running server
"""

import pytest
from httpx import ASGITransport, AsyncClient

from contact_tracer.main import app
from contact_tracer.services.tracer_session import (
    TracerSession, get_tracer_session, new_tracer_session,
)


@pytest.fixture
def tracer_session() -> TracerSession:
    return new_tracer_session(high_risk_threshold=0.6)


@pytest.fixture
async def client(tracer_session):
    """FastAPI test client with the session dependency overridden."""
    app.dependency_overrides[get_tracer_session] = lambda: tracer_session

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
async def seeded(client):
    """Two people (Alice infected), two locations, three visits.

    Alice visits Jurong Point then East Coast Park; Benson visits Jurong Point.
    """
    people = [
        {"name": "Alice Pauline", "phone": "94351253", "email": "alice@example.com",
         "address": "123, Jurong West Ave 6", "infection_status": True, "tags": ["friends"]},
        {"name": "Benson Meier", "phone": "98765432", "email": "johnd@example.com",
         "address": "311, Clementi Ave 2"},
    ]
    for body in people:
        res = await client.post("/api/v1/people", json=body)
        assert res.status_code == 201
    for body in [
        {"name": "Jurong Point", "address": "1 Jurong West Central 2"},
        {"name": "East Coast Park", "address": "East Coast Park Service Rd"},
    ]:
        res = await client.post("/api/v1/locations", json=body)
        assert res.status_code == 201
    for person_id, location_id, on in [(1, 1, "2020-09-01"), (1, 2, "2020-09-02"), (2, 1, "2020-09-03")]:
        res = await client.post(
            "/api/v1/visits",
            json={"person_id": person_id, "location_id": location_id, "date": on},
        )
        assert res.status_code == 201
    return client
