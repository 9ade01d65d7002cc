"""Resolve authors use case."""

from pydantic import BaseModel, Field

from kin.application.usecase.base import BaseUseCase, parse_uuid
from kin.domain.service import UserService
from kin.domain.value import UserId


class ResolveAuthorsRequest(BaseModel):
    """Resolve authors request."""

    user_ids: list[str] = Field(max_length=500)


class ResolveAuthorsResponse(BaseModel):
    """Display name per requested author ID."""

    authors: dict[str, str]


class ResolveAuthorsUseCase(BaseUseCase):
    """Use case for naming message authors.

    Deleted and unknown authors are shown as "Removed user". Nothing is
    written.
    """

    def __init__(self, user_service: UserService) -> None:
        """Initialize resolve authors use case.

        Args:
            user_service: User domain service
        """
        self.user_service = user_service

    async def execute(self, request: ResolveAuthorsRequest) -> ResolveAuthorsResponse:
        user_ids = [UserId(parse_uuid(uid, "user ID")) for uid in request.user_ids]
        names = await self.user_service.get_display_names(user_ids)
        return ResolveAuthorsResponse(
            authors={str(uid): name for uid, name in names.items()}
        )
