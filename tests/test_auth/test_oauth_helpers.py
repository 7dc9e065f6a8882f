"""Tests for the Google profile extraction."""

from pg_discovery.auth.oauth import google_profile


class TestGoogleProfile:
    def test_full_userinfo(self):
        profile = google_profile(
            {
                "userinfo": {
                    "email": "Priya@Gmail.com",
                    "name": "Priya Sharma",
                    "picture": "https://example.com/avatar.jpg",
                    "sub": "google-uid-123",
                }
            }
        )
        assert profile == {
            "email": "priya@gmail.com",
            "name": "Priya Sharma",
            "avatar_url": "https://example.com/avatar.jpg",
            "provider_id": "google-uid-123",
        }

    def test_name_falls_back_to_mailbox(self):
        assert google_profile({"userinfo": {"email": "arjun@gmail.com"}})["name"] == "arjun"

    def test_no_userinfo(self):
        profile = google_profile({})
        assert profile["email"] == ""
        assert profile["avatar_url"] is None
        assert profile["provider_id"] == ""
