"""
Test Suite: HTTP API

Drives the FastAPI app through httpx.ASGITransport with the database and
analyzer dependencies overridden.
"""

import uuid

import httpx
import pytest
from sqlalchemy import func, select

from analyzers.base import AnalysisError, ReadinessDetails, ReadinessResult
from api.deps import get_analyzer
from db.models import Lead, User
from db.repositories import UserRepository
from db.session import get_db_session
from main import app


class StubAnalyzer:
    """Returns a canned result instead of probing the network."""

    def __init__(self, result: ReadinessResult | None = None, error: str | None = None):
        self.result = result
        self.error = error
        self.calls = []

    async def analyze(self, url: str) -> ReadinessResult:
        self.calls.append(url)
        if self.error:
            raise AnalysisError(self.error)
        return self.result


@pytest.fixture
def stub_analyzer():
    return StubAnalyzer(
        result=ReadinessResult(
            score=27,
            has_llms_txt=True,
            has_json_ld=True,
            details=ReadinessDetails(
                llms_txt_content="# Example",
                json_ld_data=[{"@type": "WebSite"}],
                recommendations=["Add RSS, Atom, or JSON feeds"],
            ),
        )
    )


@pytest.fixture
async def client(session_factory, stub_analyzer):
    async def override_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_session
    app.dependency_overrides[get_analyzer] = lambda: stub_analyzer

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def user(session_factory):
    async with session_factory() as session:
        user = await UserRepository(session).upsert(
            "google-1", name="Ada", email="ada@example.com"
        )
        await session.commit()
        return user


@pytest.fixture
async def other_user(session_factory):
    async with session_factory() as session:
        user = await UserRepository(session).upsert("google-2", name="Grace")
        await session.commit()
        return user


def _auth(user) -> dict:
    return {"X-User-Id": user.google_id}


class TestHealth:
    async def test_health(self, client):
        response = await client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestMe:
    """Test identity resolution."""

    async def test_anonymous(self, client):
        response = await client.get("/api/v1/me")

        assert response.status_code == 200
        assert response.json() is None

    async def test_signed_in(self, client, user):
        response = await client.get("/api/v1/me", headers=_auth(user))

        assert response.status_code == 200
        assert response.json()["name"] == "Ada"
        assert response.json()["role"] == "user"

    async def test_blank_id_is_anonymous(self, client):
        response = await client.get("/api/v1/me", headers={"X-User-Id": "   "})

        assert response.json() is None

    async def test_first_sign_in_registers_user(self, client, session_factory):
        """A subject id never seen before gets a user row, once."""
        headers = {
            "X-User-Id": "google-new",
            "X-User-Name": "Linus",
            "X-User-Email": "linus@acme.io",
        }

        first = await client.get("/api/v1/me", headers=headers)
        second = await client.get("/api/v1/me", headers={"X-User-Id": "google-new"})

        assert first.status_code == 200
        assert first.json()["name"] == "Linus"
        assert first.json()["email"] == "linus@acme.io"
        assert second.json()["id"] == first.json()["id"]
        async with session_factory() as session:
            count = await session.scalar(
                select(func.count()).select_from(User).where(User.google_id == "google-new")
            )
        assert count == 1

    async def test_new_user_history_and_claim(self, client):
        """A first-time caller can analyze, claim and list without prior setup."""
        headers = {"X-User-Id": "google-fresh"}
        anonymous = (await client.post("/api/v1/analyses", json={"url": "a.example"})).json()
        await client.post("/api/v1/analyses", json={"url": "b.example"}, headers=headers)

        claim = await client.post(f"/api/v1/analyses/{anonymous['id']}/claim", headers=headers)
        history = await client.get("/api/v1/analyses", headers=headers)

        assert claim.status_code == 200
        assert history.status_code == 200
        assert history.json()["count"] == 2


class TestCreateAnalysis:
    """Test POST /analyses."""

    async def test_anonymous_analysis(self, client, stub_analyzer):
        response = await client.post("/api/v1/analyses", json={"url": "example.com"})

        assert response.status_code == 201
        body = response.json()
        assert body["url"] == "example.com"
        assert body["score"] == 27
        assert body["user_id"] is None
        assert body["has_llms_txt"] is True
        assert body["has_rss_feed"] is False
        assert body["details"]["json_ld_data"] == [{"@type": "WebSite"}]
        assert stub_analyzer.calls == ["example.com"]

    async def test_attributed_to_signed_in_user(self, client, user):
        response = await client.post(
            "/api/v1/analyses", json={"url": "example.com"}, headers=_auth(user)
        )

        assert response.status_code == 201
        assert response.json()["user_id"] == str(user.id)

    async def test_stored_and_shareable(self, client):
        created = (await client.post("/api/v1/analyses", json={"url": "example.com"})).json()

        response = await client.get(f"/api/v1/analyses/{created['id']}")

        assert response.status_code == 200
        fetched = response.json()
        for key in ("id", "url", "score", "user_id", "has_llms_txt", "details"):
            assert fetched[key] == created[key]

    async def test_analysis_error_returns_400(self, client, stub_analyzer):
        stub_analyzer.error = "Failed to analyze website: timeout fetching https://example.com"

        response = await client.post("/api/v1/analyses", json={"url": "example.com"})

        assert response.status_code == 400
        assert "timeout" in response.json()["detail"]

    async def test_empty_url_rejected(self, client):
        response = await client.post("/api/v1/analyses", json={"url": ""})

        assert response.status_code == 422


class TestGetAnalysis:
    async def test_not_found(self, client):
        response = await client.get(f"/api/v1/analyses/{uuid.uuid4()}")

        assert response.status_code == 404


class TestHistory:
    """Test GET /analyses."""

    async def test_requires_sign_in(self, client):
        response = await client.get("/api/v1/analyses")

        assert response.status_code == 401

    async def test_lists_only_own_analyses(self, client, user, other_user):
        await client.post("/api/v1/analyses", json={"url": "a.example"}, headers=_auth(user))
        await client.post("/api/v1/analyses", json={"url": "b.example"}, headers=_auth(user))
        await client.post("/api/v1/analyses", json={"url": "c.example"}, headers=_auth(other_user))
        await client.post("/api/v1/analyses", json={"url": "d.example"})

        response = await client.get("/api/v1/analyses", headers=_auth(user))

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 2
        assert [a["url"] for a in body["analyses"]] == ["b.example", "a.example"]


class TestClaim:
    """Test POST /analyses/{id}/claim."""

    async def test_claim_anonymous_analysis(self, client, user):
        created = (await client.post("/api/v1/analyses", json={"url": "example.com"})).json()

        response = await client.post(
            f"/api/v1/analyses/{created['id']}/claim", headers=_auth(user)
        )

        assert response.status_code == 200
        assert response.json()["user_id"] == str(user.id)
        history = (await client.get("/api/v1/analyses", headers=_auth(user))).json()
        assert history["count"] == 1

    async def test_claim_own_analysis_is_noop(self, client, user):
        created = (
            await client.post("/api/v1/analyses", json={"url": "example.com"}, headers=_auth(user))
        ).json()

        response = await client.post(
            f"/api/v1/analyses/{created['id']}/claim", headers=_auth(user)
        )

        assert response.status_code == 200
        assert response.json()["user_id"] == str(user.id)

    async def test_cannot_claim_someone_elses(self, client, user, other_user):
        created = (
            await client.post(
                "/api/v1/analyses", json={"url": "example.com"}, headers=_auth(other_user)
            )
        ).json()

        response = await client.post(
            f"/api/v1/analyses/{created['id']}/claim", headers=_auth(user)
        )

        assert response.status_code == 403

    async def test_claim_requires_sign_in(self, client):
        response = await client.post(f"/api/v1/analyses/{uuid.uuid4()}/claim")

        assert response.status_code == 401

    async def test_claim_missing(self, client, user):
        response = await client.post(
            f"/api/v1/analyses/{uuid.uuid4()}/claim", headers=_auth(user)
        )

        assert response.status_code == 404


class TestLeads:
    """Test POST /leads."""

    async def test_lead_copies_url_and_score(self, client, session_factory):
        created = (await client.post("/api/v1/analyses", json={"url": "example.com"})).json()

        response = await client.post(
            "/api/v1/leads",
            json={"email": "lead@acme.io", "analysis_id": created["id"]},
        )

        assert response.status_code == 201
        assert response.json() == {"success": True}

        async with session_factory() as session:
            leads = (
                await session.execute(
                    select(Lead).where(Lead.analysis_id == uuid.UUID(created["id"]))
                )
            ).scalars().all()
        assert len(leads) == 1
        assert leads[0].email == "lead@acme.io"
        assert leads[0].url == "example.com"
        assert leads[0].score == 27

    async def test_unknown_analysis(self, client):
        response = await client.post(
            "/api/v1/leads",
            json={"email": "lead@acme.io", "analysis_id": str(uuid.uuid4())},
        )

        assert response.status_code == 404

    async def test_invalid_email(self, client):
        response = await client.post(
            "/api/v1/leads",
            json={"email": "not-an-email", "analysis_id": str(uuid.uuid4())},
        )

        assert response.status_code == 422
