"""Authentication - API keys as bearer credentials.

A key is shown to the user once; only its hash is kept, and that hash is the
user id everywhere else in the system.
"""

import hashlib
import logging
import secrets

from ..core.errors import StoreError
from ..core.models import UserProfile
from .store import UserStore


logger = logging.getLogger(__name__)

API_KEY_PREFIX = "ftl_"
MIN_API_KEY_LENGTH = 40


def generate_api_key() -> str:
    """New random key: the prefix followed by 32 url-safe random bytes."""
    random_part = secrets.token_urlsafe(32)
    return f"{API_KEY_PREFIX}{random_part}"


def hash_api_key(api_key: str) -> str:
    """Derive the user id from a key.

    SHA-256 hex digest cut to 32 characters, short enough for a document id.
    """
    return hashlib.sha256(api_key.encode()).hexdigest()[:32]


def validate_api_key_format(api_key: str | None) -> bool:
    """Cheap shape check run before any store lookup."""
    return bool(api_key) and api_key.startswith(API_KEY_PREFIX) and len(api_key) >= MIN_API_KEY_LENGTH


class AuthClient:
    """Client for API key authentication operations.

    The user id is the hash of the API key, so the profile store doubles as
    the key registry.
    """

    def __init__(self, users: UserStore) -> None:
        """Initialize auth client.

        Args:
            users: Store holding user profiles
        """
        self._users = users

    def register_user(self, email: str) -> tuple[str, str]:
        """Register a new user and generate their API key.

        Args:
            email: User's email address

        Returns:
            Tuple of (api_key, user_id) - api_key is only returned once!
        """
        logger.info("Registering new user: %s", email)

        api_key = generate_api_key()
        user_id = hash_api_key(api_key)
        self._users.save_user(UserProfile(user_id=user_id, email=email))

        logger.info("User registered successfully: %s", user_id[:8])
        return api_key, user_id

    def validate_api_key(self, api_key: str) -> str | None:
        """Validate an API key and return the user_id if valid.

        Args:
            api_key: The API key to validate

        Returns:
            user_id if valid, None if invalid
        """
        if not validate_api_key_format(api_key):
            logger.warning("Invalid API key format")
            return None

        user_id = hash_api_key(api_key)
        if self.user_exists(user_id):
            logger.debug("API key validated for user: %s", user_id[:8])
            return user_id

        logger.warning("API key not found in database")
        return None

    def user_exists(self, user_id: str) -> bool:
        """Check if a user exists.

        Args:
            user_id: The user's ID

        Returns:
            True if user exists
        """
        try:
            return self._users.find_user(user_id) is not None
        except StoreError as e:
            logger.error("Error checking user: %s", str(e))
            return False
