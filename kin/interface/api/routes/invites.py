"""Invite routes."""

from datetime import datetime

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, Header, status
from pydantic import BaseModel, Field

from kin.application.usecase.invite import (
    AcceptInviteUseCase,
    CreateEncryptedInviteUseCase,
    CreateInviteUseCase,
    CreatePendingInviteUseCase,
    GetPendingInvitesUseCase,
    ReportInviteDecryptFailureUseCase,
)
from kin.application.usecase.invite.accept_invite import (
    AcceptInviteRequest,
    AcceptInviteResponse,
)
from kin.application.usecase.invite.create_encrypted_invite import (
    CreateEncryptedInviteRequest,
)
from kin.application.usecase.invite.create_invite import (
    CreateInviteRequest,
    CreateInviteResponse,
)
from kin.application.usecase.invite.create_pending_invite import (
    CreatePendingInviteRequest,
)
from kin.application.usecase.invite.get_pending_invites import (
    GetPendingInvitesRequest,
    GetPendingInvitesResponse,
)
from kin.application.usecase.invite.report_invite_decrypt_failure import (
    ReportInviteDecryptFailureRequest,
)
from kin.application.usecase.views import GenericResponse, InviteView
from kin.domain.service import JWTService
from kin.interface.api.auth import authenticate

router = APIRouter(prefix="/invites", tags=["invites"], route_class=DishkaRoute)


class CreateEncryptedInviteAPIRequest(BaseModel):
    """API request for an invite carrying the wrapped family key."""

    family_id: str
    invitee_email: str
    encrypted_family_key: str = Field(min_length=1)
    nonce: str = Field(min_length=1)
    invite_code: str = Field(min_length=1, max_length=64)
    expires_at: datetime


class CreatePendingInviteAPIRequest(BaseModel):
    """API request for inviting someone who has no account yet."""

    family_id: str
    invitee_email: str
    invitee_language: str | None = None


class CreateInviteAPIRequest(BaseModel):
    """API request for an email-bound invite code."""

    invitee_email: str


class InviteCodeAPIRequest(BaseModel):
    """API request naming an invite code."""

    invite_code: str


class DecryptFailureAPIRequest(BaseModel):
    """API request reporting an invite whose family key would not unwrap."""

    invite_code: str
    reason: str = Field(min_length=1, max_length=500)


@router.post(
    "/encrypted", response_model=InviteView, status_code=status.HTTP_201_CREATED
)
async def create_encrypted_invite(
    request: CreateEncryptedInviteAPIRequest,
    create_use_case: FromDishka[CreateEncryptedInviteUseCase],
    jwt_service: FromDishka[JWTService],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> InviteView:
    """Invite a registered user, handing over the wrapped family key.

    Example:
        POST /invites/encrypted
        {
            "family_id": "8a6e0804-2bd0-4672-b79d-d97027f9071a",
            "invitee_email": "bob@example.com",
            "encrypted_family_key": "<base64>",
            "nonce": "<base64>",
            "invite_code": "<client generated>",
            "expires_at": "2026-01-01T00:00:00Z"
        }
    """
    user_id = authenticate(jwt_service, authorization, auth_token)
    return await create_use_case.execute(
        CreateEncryptedInviteRequest(user_id=user_id, **request.model_dump())
    )


@router.post("/pending", response_model=InviteView, status_code=status.HTTP_201_CREATED)
async def create_pending_invite(
    request: CreatePendingInviteAPIRequest,
    create_use_case: FromDishka[CreatePendingInviteUseCase],
    jwt_service: FromDishka[JWTService],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> InviteView:
    """Invite someone who has not registered yet."""
    user_id = authenticate(jwt_service, authorization, auth_token)
    return await create_use_case.execute(
        CreatePendingInviteRequest(user_id=user_id, **request.model_dump())
    )


@router.post(
    "", response_model=CreateInviteResponse, status_code=status.HTTP_201_CREATED
)
async def create_invite(
    request: CreateInviteAPIRequest,
    create_use_case: FromDishka[CreateInviteUseCase],
    jwt_service: FromDishka[JWTService],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> CreateInviteResponse:
    """Create an email-bound invite for the caller's active family.

    The plaintext code is only ever returned here.
    """
    user_id = authenticate(jwt_service, authorization, auth_token)
    return await create_use_case.execute(
        CreateInviteRequest(user_id=user_id, invitee_email=request.invitee_email)
    )


@router.post("/accept", response_model=AcceptInviteResponse)
async def accept_invite(
    request: InviteCodeAPIRequest,
    accept_use_case: FromDishka[AcceptInviteUseCase],
    jwt_service: FromDishka[JWTService],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> AcceptInviteResponse:
    """Accept an encrypted invite addressed to the caller."""
    user_id = authenticate(jwt_service, authorization, auth_token)
    return await accept_use_case.execute(
        AcceptInviteRequest(user_id=user_id, invite_code=request.invite_code)
    )


@router.get("/pending", response_model=GetPendingInvitesResponse)
async def get_pending_invites(
    get_pending_use_case: FromDishka[GetPendingInvitesUseCase],
    jwt_service: FromDishka[JWTService],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> GetPendingInvitesResponse:
    """List open invites addressed to the caller's email."""
    user_id = authenticate(jwt_service, authorization, auth_token)
    return await get_pending_use_case.execute(GetPendingInvitesRequest(user_id=user_id))


@router.post("/decrypt-failure", response_model=GenericResponse)
async def report_invite_decrypt_failure(
    request: DecryptFailureAPIRequest,
    report_use_case: FromDishka[ReportInviteDecryptFailureUseCase],
    jwt_service: FromDishka[JWTService],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> GenericResponse:
    """Report that an invite's family key could not be decrypted."""
    user_id = authenticate(jwt_service, authorization, auth_token)
    return await report_use_case.execute(
        ReportInviteDecryptFailureRequest(
            user_id=user_id, invite_code=request.invite_code, reason=request.reason
        )
    )
