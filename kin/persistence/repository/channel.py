"""PostgreSQL implementation of Channel repository."""

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from kin.domain.model import Channel
from kin.domain.repository import ChannelRepository
from kin.domain.value import FamilyId
from kin.persistence.mappers import channel_to_dict, row_to_channel
from kin.persistence.tables import channels_table


class PostgresChannelRepository(ChannelRepository):
    """PostgreSQL implementation of ChannelRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def save(self, channel: Channel) -> Channel:
        stmt = insert(channels_table).values(**channel_to_dict(channel))
        await self.session.execute(stmt)
        await self.session.flush()
        return channel

    async def list_by_family(self, family_id: FamilyId) -> list[Channel]:
        stmt = (
            select(channels_table)
            .where(channels_table.c.family_id == family_id)
            .order_by(channels_table.c.created_at.asc())
        )
        result = await self.session.execute(stmt)
        return [row_to_channel(dict(row)) for row in result.mappings().all()]
