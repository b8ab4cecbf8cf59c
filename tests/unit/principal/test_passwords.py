"""Tests for password hashing and verification."""

import bcrypt

from classroll.core.modules.principal import passwords
from classroll.core.modules.principal.passwords import (
    DEFAULT_HASH_ROUNDS,
    burn_password_check,
    dummy_hash,
    hash_password,
    hash_rounds,
    verify_password,
)


class TestVerifyPassword:
    def setup_method(self):
        self.password_hash = bcrypt.hashpw(b"pw123", bcrypt.gensalt(rounds=4)).decode("utf-8")

    def test_correct_password(self):
        assert verify_password("pw123", self.password_hash) is True

    def test_wrong_password(self):
        assert verify_password("pw124", self.password_hash) is False

    def test_empty_password(self):
        assert verify_password("", self.password_hash) is False

    def test_malformed_hash_rejected(self):
        """Test that a broken stored hash fails closed instead of raising."""
        assert verify_password("pw123", "not-a-bcrypt-hash") is False

    def test_plaintext_stored_value_rejected(self):
        assert verify_password("pw123", "pw123") is False


class TestHashPassword:
    def test_round_trip(self):
        password_hash = hash_password("s3cret!", rounds=4)
        assert password_hash.startswith("$2")
        assert verify_password("s3cret!", password_hash)

    def test_salted(self):
        assert hash_password("same", rounds=4) != hash_password("same", rounds=4)

    def test_default_cost_matches_stored_hashes(self):
        assert DEFAULT_HASH_ROUNDS == 10
        assert hash_rounds(hash_password("s3cret!")) == 10

    def test_explicit_cost(self):
        assert hash_rounds(hash_password("s3cret!", rounds=5)) == 5


class TestBurnPasswordCheck:
    """Tests for the missing-account comparison."""

    def test_returns_nothing(self):
        assert burn_password_check("anything", rounds=4) is None

    def test_dummy_hash_uses_requested_cost(self):
        assert hash_rounds(dummy_hash(4)) == 4
        assert hash_rounds(dummy_hash(DEFAULT_HASH_ROUNDS)) == DEFAULT_HASH_ROUNDS

    def test_dummy_hash_reused(self):
        assert dummy_hash(4) is dummy_hash(4)

    def test_checks_against_hash_of_same_cost(self, monkeypatch):
        """Test that an unknown account costs the same bcrypt work as a wrong password."""
        checked = []
        monkeypatch.setattr(passwords, "verify_password", lambda password, password_hash: checked.append(password_hash))

        burn_password_check("wrong", rounds=6)

        assert [hash_rounds(h) for h in checked] == [6]
