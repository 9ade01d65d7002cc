"""In-memory channel repository for testing."""

from kin.domain.model import Channel
from kin.domain.repository import ChannelRepository
from kin.domain.value import FamilyId

from .database import InMemoryDatabase


class InMemoryChannelRepository(ChannelRepository):
    """In-memory implementation of ChannelRepository for testing."""

    def __init__(self, db: InMemoryDatabase) -> None:
        self.db = db

    async def save(self, channel: Channel) -> Channel:
        self.db.channels[channel.id] = channel
        return channel

    async def list_by_family(self, family_id: FamilyId) -> list[Channel]:
        matches = [c for c in self.db.channels.values() if c.family_id == family_id]
        return sorted(matches, key=lambda c: c.created_at)
