"""Tests for the Mailgun mailer."""

import httpx
import pytest

from pg_discovery.config import settings
from pg_discovery.exceptions import UpstreamServiceError
from pg_discovery.integrations import mailer

pytestmark = pytest.mark.asyncio


@pytest.fixture
def mailgun(monkeypatch):
    monkeypatch.setattr(settings, "mailgun_api_key", "key-abc")
    monkeypatch.setattr(settings, "mailgun_domain", "MG.PGDISCOVERY.IN")
    return settings


class TestRender:
    async def test_missing_values_render_as_dash(self):
        subject, body = mailer.render(
            "enquiry_notification",
            pg_name="Sunrise PG",
            visitor_name="Priya",
            visitor_phone="9876543210",
            visitor_email=None,
            occupation="",
            room_type="DOUBLE",
            move_in_date="2026-11-01",
            message=None,
        )
        assert subject == "New enquiry for Sunrise PG from Priya"
        assert "Email: -" in body
        assert "Occupation: -" in body
        assert "Room type: DOUBLE" in body


class TestSendEmail:
    async def test_simulated_without_credentials(self, monkeypatch):
        monkeypatch.setattr(settings, "mailgun_api_key", "")
        assert await mailer.send_email("a@b.com", "Hi", "Body") == {"status": "simulated"}

    async def test_posts_to_mailgun(self, mailgun):
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["authorization"]
            seen["body"] = request.content.decode()
            return httpx.Response(200, json={"id": "<msg-1@mg>", "message": "Queued"})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            result = await mailer.send_template(
                "enquiry_confirmation",
                "priya@example.com",
                client=client,
                pg_name="Sunrise PG",
                visitor_name="Priya",
                contact_phone="9876543210",
                contact_email=None,
            )

        assert result == {"status": "sent", "id": "<msg-1@mg>"}
        assert seen["url"] == "https://api.mailgun.net/v3/mg.pgdiscovery.in/messages"
        assert seen["auth"].startswith("Basic ")
        assert "priya%40example.com" in seen["body"]

    async def test_rejected(self, mailgun):
        transport = httpx.MockTransport(lambda request: httpx.Response(400, text="bad domain"))
        async with httpx.AsyncClient(transport=transport) as client:
            with pytest.raises(UpstreamServiceError):
                await mailer.send_email("a@b.com", "Hi", "Body", client=client)

    async def test_transport_error(self, mailgun):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timeout", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(UpstreamServiceError):
                await mailer.send_email("a@b.com", "Hi", "Body", client=client)
