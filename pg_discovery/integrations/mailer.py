"""Transactional e-mail via the Mailgun HTTP API.

Without Mailgun credentials messages are composed and logged as simulated
deliveries instead of being sent.
"""

import logging

import httpx

from pg_discovery.config import settings
from pg_discovery.exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)

TEMPLATES = {
    "enquiry_notification": {
        "subject": "New enquiry for {pg_name} from {visitor_name}",
        "body": (
            "Hello,\n\n"
            "You have received a new enquiry for {pg_name}.\n\n"
            "Name: {visitor_name}\n"
            "Phone: {visitor_phone}\n"
            "Email: {visitor_email}\n"
            "Occupation: {occupation}\n"
            "Room type: {room_type}\n"
            "Move-in date: {move_in_date}\n\n"
            "Message:\n{message}\n\n"
            "Reply quickly, visitors usually shortlist within a day.\n\n"
            "PG Discovery"
        ),
    },
    "enquiry_confirmation": {
        "subject": "We received your enquiry for {pg_name}",
        "body": (
            "Hi {visitor_name},\n\n"
            "Thanks for your interest in {pg_name}. The property team will "
            "get back to you shortly.\n\n"
            "Contact phone: {contact_phone}\n"
            "Contact email: {contact_email}\n\n"
            "PG Discovery"
        ),
    },
}


def render(template: str, **context: object) -> tuple[str, str]:
    """Return ``(subject, body)`` for a template. Missing values render as "-"."""
    spec = TEMPLATES[template]
    values = {key: ("-" if value in (None, "") else value) for key, value in context.items()}
    return spec["subject"].format(**values), spec["body"].format(**values)


async def send_email(
    to_email: str,
    subject: str,
    text: str,
    client: httpx.AsyncClient | None = None,
) -> dict[str, str]:
    """Send a plain-text e-mail.

    Returns:
        ``{"status": "sent", "id": ...}`` or ``{"status": "simulated"}``.

    Raises:
        UpstreamServiceError: If Mailgun is configured but the call fails.
    """
    if not settings.mailgun_configured:
        logger.info("Email simulated (Mailgun not configured): to=%s subject=%r", to_email, subject)
        return {"status": "simulated"}

    domain = settings.mailgun_domain.lower()
    url = f"{settings.mailgun_base_url.rstrip('/')}/v3/{domain}/messages"
    data = {
        "from": f"{settings.mailgun_from_name} <{settings.mailgun_from_email}>",
        "to": to_email,
        "subject": subject,
        "text": text,
    }
    auth = ("api", settings.mailgun_api_key)

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=10.0) as owned_client:
                response = await owned_client.post(url, auth=auth, data=data)
        else:
            response = await client.post(url, auth=auth, data=data)
    except httpx.HTTPError as exc:
        raise UpstreamServiceError(f"Mailgun request failed: {exc}") from exc

    if not response.is_success:
        raise UpstreamServiceError(f"Mailgun rejected message: status={response.status_code} body={response.text[:300]}")

    message_id = response.json().get("id", "")
    logger.info("Email sent: to=%s id=%s", to_email, message_id)
    return {"status": "sent", "id": message_id}


async def send_template(
    template: str,
    to_email: str,
    client: httpx.AsyncClient | None = None,
    **context: object,
) -> dict[str, str]:
    subject, body = render(template, **context)
    return await send_email(to_email, subject, body, client=client)
