"""Channel entity.

Only the default channel that every new family starts with is managed here.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from kin.domain.model.common import DomainModel, utc_now
from kin.domain.value import ChannelId, FamilyId, UserId

DEFAULT_CHANNEL_NAME = "General"
DEFAULT_CHANNEL_DESCRIPTION = "Default family channel"


class Channel(DomainModel):
    """Conversation channel within a family."""

    id: ChannelId
    family_id: FamilyId
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    is_default: bool = False
    created_by: UserId
    created_at: datetime = Field(default_factory=utc_now)
