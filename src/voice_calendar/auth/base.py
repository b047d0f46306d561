"""Abstract base class for authentication providers."""

from abc import ABC, abstractmethod


class AuthProvider(ABC):
    """Abstract base class for authentication providers."""

    @abstractmethod
    def get_valid_token(self) -> str:
        """
        Get a currently valid access token, refreshing it first if needed.

        Returns:
            Access token string

        Raises:
            AuthRequired: If there are no usable credentials
            AuthenticationError: If a needed refresh fails
        """

    @abstractmethod
    def is_authenticated(self) -> bool:
        """Whether credentials are present and usable."""

    @abstractmethod
    def clear_credentials(self) -> None:
        """Forget all cached credentials."""
