"""Identity providers.

The analytics layer only needs to know who the current user is. Providers
are handed to whatever needs them rather than looked up globally.
"""

from abc import ABC, abstractmethod

from tradejournal.errors import NotAuthenticatedError


class AuthProvider(ABC):
    """Abstract source of the current user's identity."""

    @abstractmethod
    def current_user(self) -> str:
        """Return the current user ID.

        Raises:
            NotAuthenticatedError: If nobody is logged in.
        """
        pass


class StaticAuthProvider(AuthProvider):
    """Provider bound to a fixed user ID."""

    def __init__(self, user_id: str):
        self.user_id = user_id

    def current_user(self) -> str:
        if not self.user_id:
            raise NotAuthenticatedError()
        return self.user_id


class ConfigAuthProvider(AuthProvider):
    """Provider reading ``[user] id`` from the loaded configuration."""

    def __init__(self, config: dict | None):
        self.config = config or {}

    def current_user(self) -> str:
        user_id = str(self.config.get("user", {}).get("id", "")).strip()
        if not user_id:
            raise NotAuthenticatedError(
                "No user is logged in. Run 'tradejournal login USER_ID' first."
            )
        return user_id
