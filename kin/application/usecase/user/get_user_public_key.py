"""Get user public key use case."""

from pydantic import BaseModel

from kin.application.usecase.base import BaseUseCase
from kin.domain.service import UserService


class GetUserPublicKeyRequest(BaseModel):
    """Get user public key request."""

    email: str


class GetUserPublicKeyResponse(BaseModel):
    """Public key, or None for unknown and deleted accounts."""

    public_key: str | None


class GetUserPublicKeyUseCase(BaseUseCase):
    """Use case for looking up an invitee's public key before sealing the family key."""

    def __init__(self, user_service: UserService) -> None:
        """Initialize get user public key use case.

        Args:
            user_service: User domain service
        """
        self.user_service = user_service

    async def execute(self, request: GetUserPublicKeyRequest) -> GetUserPublicKeyResponse:
        public_key = await self.user_service.get_public_key(request.email.strip())
        return GetUserPublicKeyResponse(public_key=public_key)
