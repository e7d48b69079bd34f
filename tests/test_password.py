"""Tests for password hashing."""

from app.services.password import PasswordHasher


class TestPasswordHasher:
    """Tests for the bcrypt hasher."""

    def test_hash_verifies(self):
        hasher = PasswordHasher(rounds=4)
        digest = hasher.hash("Passw0rd!")
        assert digest != "Passw0rd!"
        assert hasher.verify("Passw0rd!", digest) is True

    def test_wrong_password_does_not_verify(self):
        hasher = PasswordHasher(rounds=4)
        digest = hasher.hash("Passw0rd!")
        assert hasher.verify("passw0rd!", digest) is False
        assert hasher.verify("", digest) is False

    def test_salt_differs_per_call(self):
        hasher = PasswordHasher(rounds=4)
        assert hasher.hash("same-password") != hasher.hash("same-password")

    def test_cost_factor_embedded(self):
        assert PasswordHasher(rounds=5).hash("Passw0rd!").split("$")[2] == "05"

    def test_default_rounds_from_settings(self):
        from app.config import get_settings

        assert PasswordHasher().rounds == get_settings().BCRYPT_ROUNDS

    def test_malformed_hash_returns_false(self):
        assert PasswordHasher(rounds=4).verify("Passw0rd!", "not-a-bcrypt-hash") is False

    def test_long_passwords_are_handled(self):
        """Passwords past bcrypt's 72-byte limit hash and verify without raising."""
        hasher = PasswordHasher(rounds=4)
        long_password = "x" * 100
        digest = hasher.hash(long_password)
        assert hasher.verify(long_password, digest) is True

    def test_unicode_password(self):
        hasher = PasswordHasher(rounds=4)
        digest = hasher.hash("pässwörd-日本")
        assert hasher.verify("pässwörd-日本", digest) is True
        assert hasher.verify("passwörd-日本", digest) is False
