"""Invite use cases."""

from .accept_invite import AcceptInviteUseCase
from .create_encrypted_invite import CreateEncryptedInviteUseCase
from .create_invite import CreateInviteUseCase
from .create_pending_invite import CreatePendingInviteUseCase
from .get_family_invites import GetFamilyInvitesUseCase
from .get_pending_invites import GetPendingInvitesUseCase
from .report_invite_decrypt_failure import ReportInviteDecryptFailureUseCase

__all__ = [
    "AcceptInviteUseCase",
    "CreateEncryptedInviteUseCase",
    "CreateInviteUseCase",
    "CreatePendingInviteUseCase",
    "GetFamilyInvitesUseCase",
    "GetPendingInvitesUseCase",
    "ReportInviteDecryptFailureUseCase",
]
