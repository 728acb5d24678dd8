"""Abstract base class for token storage."""

from abc import ABC, abstractmethod

from twiauth.auth.models import AccessToken


class TokenStorage(ABC):
    """Abstract interface for access token storage operations."""

    @abstractmethod
    async def load(self) -> AccessToken | None:
        """Load the access token from storage.

        Returns:
            Parsed token if found and valid, None otherwise

        """

    @abstractmethod
    async def save(self, token: AccessToken) -> bool:
        """Save the access token to storage.

        Args:
            token: Access token to save

        Returns:
            True if saved successfully, False otherwise

        """

    @abstractmethod
    async def exists(self) -> bool:
        """Check if a token exists in storage.

        Returns:
            True if a token exists, False otherwise

        """

    @abstractmethod
    async def delete(self) -> bool:
        """Delete the token from storage.

        Returns:
            True if deleted successfully, False otherwise

        """

    @abstractmethod
    def get_location(self) -> str:
        """Get the storage location description.

        Returns:
            Human-readable description of where the token is stored

        """
