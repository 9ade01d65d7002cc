"""Channel repository interface."""

from abc import ABC, abstractmethod

from kin.domain.model import Channel
from kin.domain.value import FamilyId


class ChannelRepository(ABC):
    """Repository for Channel entities."""

    @abstractmethod
    async def save(self, channel: Channel) -> Channel:
        """Save a channel."""
        pass

    @abstractmethod
    async def list_by_family(self, family_id: FamilyId) -> list[Channel]:
        """List a family's channels, oldest first."""
        pass
