"""Tests for enquiry submission and the owner inbox."""

import uuid

import pytest
from httpx import AsyncClient

from pg_discovery.services.rate_limit import EnquiryRateLimiter

pytestmark = pytest.mark.asyncio


def _enquiry(pg_id=None, **overrides) -> dict:
    data = {"name": "Priya Sharma", "phone": "98765 43210", "email": "priya@example.com", **overrides}
    if pg_id is not None:
        data["pg_id"] = str(pg_id)
    return data


# ---------------------------------------------------------------------------
# POST /api/enquiries
# ---------------------------------------------------------------------------


class TestSubmitEnquiry:
    async def test_submit_success(self, client: AsyncClient, test_pg) -> None:
        response = await client.post("/api/enquiries", json=_enquiry(test_pg.id, roomSharing="DOUBLE"))
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert uuid.UUID(body["enquiry_id"])
        assert body["message"] == "Enquiry submitted successfully"

    async def test_general_enquiry_via_placeholder(self, client: AsyncClient, admin_headers) -> None:
        response = await client.post("/api/enquiries", json={**_enquiry(), "pgId": "floating-drawer"})
        assert response.status_code == 201

        listed = await client.get("/api/enquiries", headers=admin_headers)
        assert listed.json()["data"][0]["pg_id"] is None

    async def test_duplicate_returns_409(self, client: AsyncClient, test_pg) -> None:
        await client.post("/api/enquiries", json=_enquiry(test_pg.id))
        response = await client.post("/api/enquiries", json=_enquiry(test_pg.id, phone="9876543210"))
        assert response.status_code == 409
        body = response.json()
        assert body["success"] is False
        assert body["code"] == "DUPLICATE_ENQUIRY"
        assert "24 hours" in body["message"]

    async def test_unpublished_pg_returns_404(self, client: AsyncClient, make_pg) -> None:
        draft = await make_pg(name="Draft", published=False)
        response = await client.post("/api/enquiries", json=_enquiry(draft.id))
        assert response.status_code == 404

    async def test_invalid_phone(self, client: AsyncClient, test_pg) -> None:
        response = await client.post("/api/enquiries", json=_enquiry(test_pg.id, phone="12345"))
        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Please check your input and try again"
        assert "phone" in body["errors"]

    async def test_signed_in_visitor_is_attached(self, client: AsyncClient, test_pg, visitor_headers) -> None:
        await client.post("/api/enquiries", json=_enquiry(test_pg.id), headers=visitor_headers)
        mine = await client.get("/api/enquiries/mine", headers=visitor_headers)
        assert mine.json()["total"] == 1
        assert mine.json()["data"][0]["pg_name"] == "Sunrise PG"

    async def test_clears_cached_pg_enquiries(self, client: AsyncClient, test_pg, owner_headers, admin_cache) -> None:
        await client.get(f"/api/pgs/{test_pg.id}/enquiries", headers=owner_headers)
        assert admin_cache.is_valid("enquiries", test_pg.id)
        await client.post("/api/enquiries", json=_enquiry(test_pg.id))
        assert not admin_cache.is_valid("enquiries", test_pg.id)

        listed = await client.get(f"/api/pgs/{test_pg.id}/enquiries", headers=owner_headers)
        assert listed.json()["total"] == 1


class TestRateLimit:
    @pytest.fixture
    def rate_limiter(self) -> EnquiryRateLimiter:
        return EnquiryRateLimiter(limit=2, window_seconds=60)

    async def test_third_request_limited(self, client: AsyncClient, test_pg) -> None:
        headers = {"X-Forwarded-For": "203.0.113.7, 10.0.0.1"}
        for phone in ("9000000001", "9000000002"):
            response = await client.post("/api/enquiries", json=_enquiry(test_pg.id, phone=phone), headers=headers)
            assert response.status_code == 201

        response = await client.post(
            "/api/enquiries", json=_enquiry(test_pg.id, phone="9000000003"), headers=headers
        )
        assert response.status_code == 429
        assert response.json()["code"] == "RATE_LIMITED"
        assert int(response.headers["retry-after"]) >= 1

    async def test_limit_is_per_client(self, client: AsyncClient, test_pg) -> None:
        for index in range(2):
            await client.post(
                "/api/enquiries",
                json=_enquiry(test_pg.id, phone=f"900000000{index}"),
                headers={"X-Real-IP": "198.51.100.1"},
            )
        response = await client.post(
            "/api/enquiries",
            json=_enquiry(test_pg.id, phone="9000000009"),
            headers={"X-Real-IP": "198.51.100.2"},
        )
        assert response.status_code == 201


# ---------------------------------------------------------------------------
# Owner inbox
# ---------------------------------------------------------------------------


class TestInbox:
    async def test_owner_sees_only_own_pg_enquiries(
        self, client: AsyncClient, test_pg, make_pg, other_owner, owner_headers
    ) -> None:
        theirs = await make_pg(name="Their PG", owner_user=other_owner)
        await client.post("/api/enquiries", json=_enquiry(test_pg.id))
        await client.post("/api/enquiries", json=_enquiry(theirs.id))
        await client.post("/api/enquiries", json=_enquiry(phone="9111111111"))

        response = await client.get("/api/enquiries", headers=owner_headers)
        body = response.json()
        assert body["total"] == 1
        assert body["data"][0]["pg_name"] == "Sunrise PG"

    async def test_admin_sees_everything(self, client: AsyncClient, test_pg, admin_headers) -> None:
        await client.post("/api/enquiries", json=_enquiry(test_pg.id))
        await client.post("/api/enquiries", json=_enquiry(phone="9111111111"))
        response = await client.get("/api/enquiries", headers=admin_headers)
        assert response.json()["total"] == 2

    async def test_status_filter_and_update(self, client: AsyncClient, test_pg, owner_headers) -> None:
        created = await client.post("/api/enquiries", json=_enquiry(test_pg.id))
        enquiry_id = created.json()["enquiry_id"]

        response = await client.patch(
            f"/api/enquiries/{enquiry_id}", json={"status": "contacted"}, headers=owner_headers
        )
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "CONTACTED"

        new = await client.get("/api/enquiries", params={"status": "NEW"}, headers=owner_headers)
        contacted = await client.get("/api/enquiries", params={"status": "CONTACTED"}, headers=owner_headers)
        assert new.json()["total"] == 0
        assert contacted.json()["total"] == 1

    async def test_invalid_status(self, client: AsyncClient, test_pg, owner_headers) -> None:
        created = await client.post("/api/enquiries", json=_enquiry(test_pg.id))
        response = await client.patch(
            f"/api/enquiries/{created.json()['enquiry_id']}", json={"status": "SPAM"}, headers=owner_headers
        )
        assert response.status_code == 400

    async def test_other_owner_cannot_read(self, client: AsyncClient, test_pg, other_owner_headers) -> None:
        created = await client.post("/api/enquiries", json=_enquiry(test_pg.id))
        response = await client.get(f"/api/enquiries/{created.json()['enquiry_id']}", headers=other_owner_headers)
        assert response.status_code == 403

    async def test_unknown_enquiry(self, client: AsyncClient, owner_headers) -> None:
        response = await client.get(f"/api/enquiries/{uuid.uuid4()}", headers=owner_headers)
        assert response.status_code == 404

    async def test_stats(self, client: AsyncClient, test_pg, owner_headers) -> None:
        first = await client.post("/api/enquiries", json=_enquiry(test_pg.id))
        await client.post("/api/enquiries", json=_enquiry(test_pg.id, phone="9222222222"))
        await client.patch(
            f"/api/enquiries/{first.json()['enquiry_id']}", json={"status": "CLOSED"}, headers=owner_headers
        )
        response = await client.get("/api/enquiries/stats", headers=owner_headers)
        assert response.json()["data"] == {"total": 2, "new": 1, "contacted": 0, "closed": 1, "last_week": 2}

    async def test_visitor_cannot_open_inbox(self, client: AsyncClient, visitor_headers) -> None:
        response = await client.get("/api/enquiries", headers=visitor_headers)
        assert response.status_code == 403
