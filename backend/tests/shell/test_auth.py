"""Unit tests for API keys and the auth client."""

from unittest.mock import MagicMock

from src.core.errors import StoreError
from src.shell.auth import (
    API_KEY_PREFIX,
    AuthClient,
    generate_api_key,
    hash_api_key,
    validate_api_key_format,
)
from src.shell.store import InMemoryStore


class TestApiKeys:
    """Tests for key generation, hashing and format checks."""

    def test_generated_keys_pass_format_check(self):
        """Fresh keys carry the ftl_ prefix and are long enough."""
        key = generate_api_key()
        assert key.startswith(API_KEY_PREFIX)
        assert validate_api_key_format(key) is True

    def test_generated_keys_are_unique(self):
        """No two generated keys collide."""
        assert len({generate_api_key() for _ in range(50)}) == 50

    def test_hash_is_stable_hex_id(self):
        """Hashing gives the same 32-char hex id every time."""
        key = "ftl_" + "k" * 40
        user_id = hash_api_key(key)

        assert user_id == hash_api_key(key)
        assert len(user_id) == 32
        assert set(user_id) <= set("0123456789abcdef")
        assert hash_api_key("ftl_" + "j" * 40) != user_id

    def test_format_rejects_bad_keys(self):
        """Empty, foreign or short keys fail the format check."""
        assert validate_api_key_format("") is False
        assert validate_api_key_format(None) is False
        assert validate_api_key_format("flr_" + "a" * 40) is False
        assert validate_api_key_format("ftl_short") is False

    def test_format_length_boundary(self):
        """40 characters is the shortest accepted key."""
        assert validate_api_key_format("ftl_" + "a" * 36) is True
        assert validate_api_key_format("ftl_" + "a" * 35) is False


class TestAuthClient:
    """Tests for AuthClient over a user store."""

    def test_register_then_validate(self):
        """A registered key validates to its user id."""
        store = InMemoryStore()
        auth = AuthClient(store)

        api_key, user_id = auth.register_user("test@example.com")

        assert user_id == hash_api_key(api_key)
        assert auth.validate_api_key(api_key) == user_id
        assert store.find_user(user_id).email == "test@example.com"

    def test_unknown_key(self):
        """A well-formed but unregistered key is rejected."""
        auth = AuthClient(InMemoryStore())
        assert auth.validate_api_key(generate_api_key()) is None

    def test_malformed_key(self):
        """A malformed key is rejected without a lookup."""
        users = MagicMock()
        auth = AuthClient(users)

        assert auth.validate_api_key("not-a-key") is None
        users.find_user.assert_not_called()

    def test_store_failure_means_unknown(self):
        """A failing store reports the user as missing."""
        users = MagicMock()
        users.find_user.side_effect = StoreError("Failed to fetch profile")
        auth = AuthClient(users)

        assert auth.user_exists("abc") is False
