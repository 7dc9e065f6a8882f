"""Google sign-in via authlib's Starlette OAuth client (OpenID Connect)."""

from authlib.integrations.starlette_client import OAuth

from pg_discovery.config import settings

oauth = OAuth()

# Endpoints are discovered from Google's OpenID configuration document.
oauth.register(
    name="google",
    client_id=settings.google_client_id,
    client_secret=settings.google_client_secret,
    server_metadata_url="https://accounts.google.com/.well-known/openid-configuration",
    client_kwargs={"scope": "openid email profile"},
)


def google_profile(token: dict) -> dict:
    """Normalise the ``userinfo`` claim of a Google token response.

    Returns:
        dict with keys: email, name, avatar_url, provider_id
    """
    userinfo = token.get("userinfo") or {}
    email = (userinfo.get("email") or "").lower()
    return {
        "email": email,
        "name": userinfo.get("name") or email.split("@")[0],
        "avatar_url": userinfo.get("picture"),
        "provider_id": userinfo.get("sub", ""),
    }
