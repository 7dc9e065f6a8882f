"""Unit tests for password hashing."""

from pg_discovery.auth.passwords import hash_password, verify_password


class TestPasswords:
    def test_hash_is_not_plaintext(self):
        hashed = hash_password("secret-pass")
        assert hashed != "secret-pass"
        assert hashed.startswith("$2")

    def test_verify(self):
        hashed = hash_password("secret-pass")
        assert verify_password("secret-pass", hashed)
        assert not verify_password("wrong-pass", hashed)

    def test_salted(self):
        assert hash_password("same") != hash_password("same")

    def test_long_passwords_truncated_consistently(self):
        long_password = "x" * 100
        hashed = hash_password(long_password)
        assert verify_password(long_password, hashed)
        assert verify_password("x" * 72, hashed)

    def test_malformed_hash(self):
        assert not verify_password("anything", "not-a-bcrypt-hash")
